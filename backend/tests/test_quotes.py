from decimal import Decimal

import pytest
from fastapi import HTTPException

from app.crud import crud_quote
from app.models import (
    NegotiationMessage,
    Quote,
    QuoteStatus,
    RequestStatus,
    SenderType,
    ServiceOrder,
    ServiceRequest,
)


def _new_request(client, headers):
    resp = client.post(
        "/api/requests",
        json={
            "service_address": "12 Elm Road",
            "cleaning_type": "standard",
            "num_rooms": 3,
            "preferred_datetime": "2026-11-02T09:00:00",
        },
        headers=headers,
    )
    return resp.json()["request_id"]


def _quote(client, admin_headers, request_id, price=120, window="Mon 9-11"):
    resp = client.post(
        f"/api/requests/{request_id}/quote",
        json={"adjusted_price": price, "scheduled_time_window": window},
        headers=admin_headers,
    )
    assert resp.status_code == 200, resp.text
    return resp.json()["quote_id"]


def test_quote_moves_request_into_negotiation(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    quote_id = _quote(client, admin_headers, request_id)

    quotes = client.get(f"/api/requests/{request_id}/quotes", headers=headers).json()
    assert [q["quote_id"] for q in quotes] == [quote_id]
    assert quotes[0]["status"] == "pending"
    assert Decimal(str(quotes[0]["adjusted_price"])) == Decimal("120")

    db = Session()
    assert db.get(ServiceRequest, request_id).status == RequestStatus.IN_NEGOTIATION
    db.close()


def test_quote_requires_positive_price(client, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    resp = client.post(
        f"/api/requests/{request_id}/quote",
        json={"adjusted_price": 0, "scheduled_time_window": "Mon"},
        headers=admin_headers,
    )
    assert resp.status_code == 400
    assert "adjusted_price" in resp.json()["field_errors"]


def test_accept_rejects_siblings_and_creates_one_order(client, Session, make_user, anna):
    _, admin_headers = anna
    user, headers = make_user()
    request_id = _new_request(client, headers)
    first = _quote(client, admin_headers, request_id, price=140, window="Tue 1-3")
    second = _quote(client, admin_headers, request_id, price=120, window="Mon 9-11")

    resp = client.post(f"/api/requests/quote/{second}/accept", headers=headers)
    assert resp.status_code == 200
    order_id = resp.json()["order_id"]
    assert resp.json()["message"] == "Quote accepted and order created!"

    db = Session()
    assert db.get(Quote, second).status == QuoteStatus.ACCEPTED
    assert db.get(Quote, first).status == QuoteStatus.REJECTED
    assert db.get(ServiceRequest, request_id).status == RequestStatus.ACCEPTED
    orders = db.query(ServiceOrder).all()
    assert len(orders) == 1
    assert orders[0].id == order_id
    assert orders[0].client_id == user.id
    assert orders[0].quote_id == second
    assert orders[0].price == Decimal("120")
    assert orders[0].scheduled_time_window == "Mon 9-11"
    db.close()


def test_second_acceptance_on_same_request_conflicts(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    first = _quote(client, admin_headers, request_id)
    second = _quote(client, admin_headers, request_id)

    assert client.post(f"/api/requests/quote/{first}/accept", headers=headers).status_code == 200
    resp = client.post(f"/api/requests/quote/{second}/accept", headers=headers)
    assert resp.status_code == 409

    db = Session()
    assert db.query(ServiceOrder).count() == 1
    assert db.get(Quote, first).status == QuoteStatus.ACCEPTED
    db.close()


def test_accept_loses_race_when_request_already_accepted(client, Session, make_user, anna):
    _, admin_headers = anna
    user, headers = make_user()
    request_id = _new_request(client, headers)
    slow = _quote(client, admin_headers, request_id)
    fast = _quote(client, admin_headers, request_id)

    # The slow session read its quote as pending before the fast accept landed
    db = Session()
    assert db.get(Quote, slow).status == QuoteStatus.PENDING
    assert client.post(f"/api/requests/quote/{fast}/accept", headers=headers).status_code == 200

    with pytest.raises(HTTPException) as exc:
        crud_quote.accept_quote(db, slow, user)
    assert exc.value.status_code == 409
    db.close()

    db = Session()
    assert db.query(ServiceOrder).count() == 1
    assert db.get(Quote, slow).status == QuoteStatus.REJECTED
    db.close()


def test_accept_by_other_client_is_forbidden(client, Session, make_user, anna):
    _, admin_headers = anna
    _, casey = make_user(email="casey@test.com")
    _, dana = make_user(email="dana@test.com")
    request_id = _new_request(client, casey)
    quote_id = _quote(client, admin_headers, request_id)

    assert client.post(f"/api/requests/quote/{quote_id}/accept", headers=dana).status_code == 403
    db = Session()
    assert db.get(Quote, quote_id).status == QuoteStatus.PENDING
    assert db.query(ServiceOrder).count() == 0
    db.close()


def test_counter_records_client_message(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    quote_id = _quote(client, admin_headers, request_id)

    resp = client.post(
        f"/api/requests/quote/{quote_id}/counter",
        json={"message": "Could you do 100?"},
        headers=headers,
    )
    assert resp.status_code == 200

    db = Session()
    assert db.get(Quote, quote_id).status == QuoteStatus.COUNTERED
    msgs = db.query(NegotiationMessage).all()
    assert [(m.sender, m.text) for m in msgs] == [(SenderType.CLIENT, "Could you do 100?")]
    db.close()

    # A countered quote can still be accepted
    assert client.post(f"/api/requests/quote/{quote_id}/accept", headers=headers).status_code == 200


def test_cancel_rejects_quote_but_not_an_accepted_one(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    _, other = make_user(email="other@test.com")
    request_id = _new_request(client, headers)
    declined = _quote(client, admin_headers, request_id)
    kept = _quote(client, admin_headers, request_id)

    assert client.post(f"/api/requests/quote/{declined}/cancel", headers=other).status_code == 403
    resp = client.post(f"/api/requests/quote/{declined}/cancel", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Negotiation canceled."}

    client.post(f"/api/requests/quote/{kept}/accept", headers=headers)
    assert client.post(f"/api/requests/quote/{kept}/cancel", headers=headers).status_code == 409

    db = Session()
    assert db.get(Quote, declined).status == QuoteStatus.REJECTED
    assert db.get(Quote, kept).status == QuoteStatus.ACCEPTED
    db.close()


def test_closed_requests_cannot_be_quoted(client, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    quote_id = _quote(client, admin_headers, request_id)
    client.post(f"/api/requests/quote/{quote_id}/accept", headers=headers)

    resp = client.post(
        f"/api/requests/{request_id}/quote",
        json={"adjusted_price": 90, "scheduled_time_window": "Fri"},
        headers=admin_headers,
    )
    assert resp.status_code == 409
    reject = client.post(
        f"/api/requests/{request_id}/reject", json={"note": "late"}, headers=admin_headers
    )
    assert reject.status_code == 409


def test_updated_quote_and_admin_messages(client, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)

    resp = client.post(
        f"/api/requests/admin/request/{request_id}/quote/update",
        json={"adjusted_price": 110, "scheduled_time_window": "Wed 8-10", "note": "Revised"},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Updated quote sent!"

    sent = client.post(
        f"/api/requests/admin/request/{request_id}/message",
        json={"text": "Happy to adjust the window"},
        headers=admin_headers,
    )
    assert sent.status_code == 200
    assert client.post(
        f"/api/requests/admin/request/{request_id}/message",
        json={"text": "hi"},
        headers=headers,
    ).status_code == 403

    thread = client.get(f"/api/requests/{request_id}/messages", headers=headers).json()
    assert [(m["sender"], m["text"]) for m in thread] == [("anna", "Happy to adjust the window")]


def test_counter_after_request_rejected_is_refused(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    request_id = _new_request(client, headers)
    quote_id = _quote(client, admin_headers, request_id)
    client.post(f"/api/requests/{request_id}/reject", json={"note": "Fully booked"}, headers=admin_headers)

    resp = client.post(
        f"/api/requests/quote/{quote_id}/counter",
        json={"message": "What about 90?"},
        headers=headers,
    )
    assert resp.status_code == 409
    assert resp.json()["error"] == "Request is closed and cannot be negotiated"

    db = Session()
    assert db.get(Quote, quote_id).status == QuoteStatus.PENDING
    assert db.query(NegotiationMessage).count() == 0
    db.close()


def test_blank_counter_message_is_400(client, Session, make_user, anna):
    _, admin_headers = anna
    _, headers = make_user()
    quote_id = _quote(client, admin_headers, _new_request(client, headers))

    resp = client.post(
        f"/api/requests/quote/{quote_id}/counter", json={"message": "   "}, headers=headers
    )
    assert resp.status_code == 400
    assert "message" in resp.json()["field_errors"]

    db = Session()
    assert db.get(Quote, quote_id).status == QuoteStatus.PENDING
    db.close()
