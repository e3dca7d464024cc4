from datetime import datetime
from decimal import Decimal
from unittest.mock import patch

from app.models import ServiceOrder


def _accepted_order(client, headers, admin_headers, price=120):
    request_id = client.post(
        "/api/requests",
        json={
            "service_address": "12 Elm Road",
            "cleaning_type": "standard",
            "num_rooms": 3,
            "preferred_datetime": "2026-11-02T09:00:00",
        },
        headers=headers,
    ).json()["request_id"]
    quote_id = client.post(
        f"/api/requests/{request_id}/quote",
        json={"adjusted_price": price, "scheduled_time_window": "Mon 9-11"},
        headers=admin_headers,
    ).json()["quote_id"]
    resp = client.post(f"/api/requests/quote/{quote_id}/accept", headers=headers)
    return request_id, resp.json()["order_id"]


def test_client_sees_only_own_orders(client, make_user, anna):
    _, admin_headers = anna
    _, casey = make_user(email="casey@test.com")
    _, dana = make_user(email="dana@test.com")
    request_id, order_id = _accepted_order(client, casey, admin_headers)

    rows = client.get("/api/requests/orders", headers=casey).json()
    assert [r["order_id"] for r in rows] == [order_id]
    assert rows[0]["request_id"] == request_id
    assert rows[0]["service_address"] == "12 Elm Road"
    assert Decimal(str(rows[0]["price"])) == Decimal("120")
    assert rows[0]["completed_at"] is None
    assert client.get("/api/requests/orders", headers=dana).json() == []


def test_admin_orders_include_client_names(client, make_user, anna):
    _, admin_headers = anna
    user, headers = make_user()
    _, order_id = _accepted_order(client, headers, admin_headers)

    rows = client.get("/api/requests/admin/orders", headers=admin_headers).json()
    assert rows[0]["order_id"] == order_id
    assert rows[0]["client_id"] == user.id
    assert rows[0]["first_name"] == "Casey"
    assert client.get("/api/requests/admin/orders", headers=headers).status_code == 403


def test_complete_stamps_and_restamps_order(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    _, order_id = _accepted_order(client, headers, admin_headers)

    first = datetime(2026, 11, 2, 12, 0, 0)
    second = datetime(2026, 11, 3, 8, 30, 0)
    with patch("app.utils.clock.utcnow", return_value=first):
        resp = client.post(f"/api/requests/orders/{order_id}/complete", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Order marked as completed."}
    db = Session()
    assert db.get(ServiceOrder, order_id).completed_at == first
    db.close()

    with patch("app.utils.clock.utcnow", return_value=second):
        client.post(f"/api/requests/orders/{order_id}/complete", headers=admin_headers)
    db = Session()
    assert db.get(ServiceOrder, order_id).completed_at == second
    db.close()


def test_complete_unknown_order_and_non_admin(client, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    _, order_id = _accepted_order(client, headers, admin_headers)
    assert client.post(f"/api/requests/orders/{order_id}/complete", headers=headers).status_code == 403
    missing = client.post("/api/requests/orders/404/complete", headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Order not found"
