from fastapi.testclient import TestClient
from app.main import app

client = TestClient(app)


def test_security_headers():
    response = client.get("/")
    assert response.status_code == 200
    assert response.headers.get("X-Content-Type-Options") == "nosniff"
    assert response.headers.get("X-Frame-Options") == "DENY"
    assert response.headers.get("Referrer-Policy") == "no-referrer"


def test_security_headers_on_errors():
    response = client.get("/api/requests")
    assert response.status_code == 401
    assert response.headers.get("X-Content-Type-Options") == "nosniff"
