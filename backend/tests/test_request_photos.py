import os

from app.api import api_request
from app.core.config import settings
from app.models import RequestPhoto
from app.utils import error_response

PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


def _new_request(client, headers):
    resp = client.post(
        "/api/requests",
        json={
            "service_address": "12 Elm Road",
            "cleaning_type": "standard",
            "num_rooms": 2,
            "preferred_datetime": "2026-11-02T09:00:00",
        },
        headers=headers,
    )
    return resp.json()["request_id"]


def _files(count, content_type="image/png"):
    return [("photos", (f"room{i}.png", PNG, content_type)) for i in range(count)]


def test_upload_and_list_photos(client, Session, make_user):
    _, headers = make_user()
    request_id = _new_request(client, headers)

    resp = client.post(f"/api/requests/{request_id}/photos", files=_files(2), headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Photos uploaded successfully"}

    photos = client.get(f"/api/requests/{request_id}/photos", headers=headers).json()
    assert len(photos) == 2
    for photo in photos:
        assert photo["file_path"].startswith(f"req{request_id}_")
        assert photo["file_path"].endswith(".png")
        assert os.path.exists(os.path.join(settings.UPLOADS_DIR, photo["file_path"]))

    served = client.get(f"/uploads/{photos[0]['file_path']}")
    assert served.status_code == 200
    assert served.content == PNG


def test_upload_limits_count_and_type(client, make_user):
    _, headers = make_user()
    request_id = _new_request(client, headers)

    too_many = client.post(f"/api/requests/{request_id}/photos", files=_files(6), headers=headers)
    assert too_many.status_code == 400
    assert too_many.json()["field_errors"] == {"photos": "too_many"}

    not_image = client.post(
        f"/api/requests/{request_id}/photos",
        files=[("photos", ("notes.txt", b"hello", "text/plain"))],
        headers=headers,
    )
    assert not_image.status_code == 400
    assert not_image.json()["error"] == "Only image files are allowed"


def test_only_owner_may_upload(client, Session, make_user, anna):
    _, casey = make_user(email="casey@test.com")
    _, dana = make_user(email="dana@test.com")
    _, admin_headers = anna
    request_id = _new_request(client, casey)

    assert client.post(f"/api/requests/{request_id}/photos", files=_files(1), headers=dana).status_code == 403
    assert client.post(f"/api/requests/{request_id}/photos", files=_files(1), headers=admin_headers).status_code == 403
    assert client.post("/api/requests/999/photos", files=_files(1), headers=casey).status_code == 404

    db = Session()
    assert db.query(RequestPhoto).count() == 0
    db.close()


def test_failed_insert_removes_written_files(client, make_user, monkeypatch, tmp_path):
    _, headers = make_user()
    request_id = _new_request(client, headers)
    monkeypatch.setattr(settings, "UPLOADS_DIR", str(tmp_path))

    def broken_insert(db, db_request, names):
        assert len(os.listdir(tmp_path)) == len(names) == 2
        raise error_response("Database error", {}, 500)

    monkeypatch.setattr(api_request.crud_request, "add_photos", broken_insert)
    resp = client.post(f"/api/requests/{request_id}/photos", files=_files(2), headers=headers)
    assert resp.status_code == 500
    assert resp.json() == {"error": "Database error"}
    assert os.listdir(tmp_path) == []
