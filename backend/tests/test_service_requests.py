from decimal import Decimal

from app.models import RequestStatus, ServiceRequest


def _new_request(client, headers, **overrides):
    payload = {
        "service_address": "12 Elm Road",
        "cleaning_type": "deep clean",
        "num_rooms": 3,
        "preferred_datetime": "2026-11-02T09:00:00",
        "proposed_budget": 150,
        "notes": "Two cats",
    }
    payload.update(overrides)
    resp = client.post("/api/requests", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()["request_id"]


def test_create_request_defaults_to_submitted(client, Session, make_user):
    user, headers = make_user()
    request_id = _new_request(client, headers)

    db = Session()
    stored = db.get(ServiceRequest, request_id)
    assert stored.client_id == user.id
    assert stored.status == RequestStatus.SUBMITTED
    assert stored.proposed_budget == Decimal("150")
    db.close()


def test_create_request_requires_fields(client, make_user):
    _, headers = make_user()
    resp = client.post(
        "/api/requests",
        json={"service_address": "12 Elm Road", "num_rooms": 0},
        headers=headers,
    )
    assert resp.status_code == 400
    errors = resp.json()["field_errors"]
    assert {"cleaning_type", "num_rooms", "preferred_datetime"} <= set(errors)


def test_requests_are_only_listed_for_their_owner(client, make_user):
    _, casey = make_user(email="casey@test.com")
    _, dana = make_user(email="dana@test.com")
    first = _new_request(client, casey)
    second = _new_request(client, casey, preferred_datetime="2026-12-01T09:00:00")

    mine = client.get("/api/requests", headers=casey).json()
    assert [r["request_id"] for r in mine] == [second, first]
    assert client.get("/api/requests", headers=dana).json() == []


def test_my_requests_are_ordered_by_preferred_date(client, make_user):
    _, headers = make_user()
    later = _new_request(client, headers, preferred_datetime="2026-12-24T09:00:00")
    sooner = _new_request(client, headers, preferred_datetime="2026-11-01T09:00:00")
    rows = client.get("/api/requests/my", headers=headers).json()
    assert [r["request_id"] for r in rows] == [later, sooner]


def test_admin_pending_lists_open_requests_with_client_details(client, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user(email="casey@test.com")
    open_id = _new_request(client, headers, preferred_datetime="2026-11-05T09:00:00")
    early_id = _new_request(client, headers, preferred_datetime="2026-11-01T09:00:00")
    rejected_id = _new_request(client, headers)
    client.post(f"/api/requests/{rejected_id}/reject", json={"note": "No"}, headers=admin_headers)

    rows = client.get("/api/requests/admin/pending", headers=admin_headers).json()
    assert [r["request_id"] for r in rows] == [early_id, open_id]
    assert rows[0]["email"] == "casey@test.com"
    assert rows[0]["first_name"] == "Casey"


def test_reject_appends_admin_note(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers, notes="Two cats")

    resp = client.post(
        f"/api/requests/{request_id}/reject",
        json={"note": "Outside service area"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json() == {"message": "Request rejected."}

    db = Session()
    stored = db.get(ServiceRequest, request_id)
    assert stored.status == RequestStatus.REJECTED
    assert stored.notes == "Two cats\n[ADMIN REJECTED]: Outside service area"
    db.close()


def test_reject_requires_admin_and_existing_request(client, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    assert client.post(
        f"/api/requests/{request_id}/reject", json={"note": "x"}, headers=headers
    ).status_code == 403
    missing = client.post("/api/requests/999/reject", json={"note": "x"}, headers=admin_headers)
    assert missing.status_code == 404
    assert missing.json()["error"] == "Request not found"


def test_quotes_and_messages_hidden_from_other_clients(client, make_user, anna):
    _, admin_headers = anna
    _, casey = make_user(email="casey@test.com")
    _, dana = make_user(email="dana@test.com")
    request_id = _new_request(client, casey)
    client.post(
        f"/api/requests/{request_id}/quote",
        json={"adjusted_price": 120, "scheduled_time_window": "Mon 9-11"},
        headers=admin_headers,
    )

    for path in ("quotes", "messages", "photos"):
        assert client.get(f"/api/requests/{request_id}/{path}", headers=dana).status_code == 403
        assert client.get(f"/api/requests/{request_id}/{path}", headers=casey).status_code == 200
        assert client.get(f"/api/requests/{request_id}/{path}", headers=admin_headers).status_code == 200
