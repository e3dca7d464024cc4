from sqlalchemy.orm import Session
from typing import List, Tuple
import logging

from fastapi import status

from .. import models, schemas
from ..models import QuoteStatus, RequestStatus, SenderType
from ..models.ledger_status import can_transition, sources_for
from ..utils import error_response
from .crud_ledger import atomic, guarded_status_update
from .crud_message import build_message
from .crud_request import get_request

logger = logging.getLogger(__name__)


def create_quote(
    db: Session, request_id: int, data: schemas.QuoteCreate
) -> models.Quote:
    """Attach a new pending quote and move the request into negotiation."""
    db_request = get_request(db, request_id)
    db_quote = models.Quote(
        request_id=request_id,
        adjusted_price=data.adjusted_price,
        scheduled_time_window=data.scheduled_time_window.strip(),
        note=data.note,
        status=QuoteStatus.PENDING,
    )
    with atomic(db, f"quote request {request_id}"):
        if not guarded_status_update(
            db, models.ServiceRequest, request_id, RequestStatus.IN_NEGOTIATION
        ):
            raise error_response(
                "Request is closed and cannot be quoted",
                {"status": db_request.status.value},
                status.HTTP_409_CONFLICT,
            )
        db.add(db_quote)
    db.refresh(db_quote)
    return db_quote


def list_quotes(db: Session, request_id: int) -> List[models.Quote]:
    """All quotes for a request, newest first."""
    return (
        db.query(models.Quote)
        .filter(models.Quote.request_id == request_id)
        .order_by(models.Quote.created_at.desc(), models.Quote.id.desc())
        .all()
    )


def get_quote_for_client(
    db: Session, quote_id: int, client: models.Client
) -> Tuple[models.Quote, models.ServiceRequest]:
    """Return the quote and its request when ``client`` owns the request."""
    db_quote = db.query(models.Quote).filter(models.Quote.id == quote_id).first()
    if db_quote is None:
        raise error_response(
            "Quote not found",
            {"quote_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    db_request = db_quote.request
    if db_request.client_id != client.id:
        raise error_response(
            "Not authorized to act on this quote",
            {},
            status.HTTP_403_FORBIDDEN,
        )
    return db_quote, db_request


def accept_quote(db: Session, quote_id: int, client: models.Client) -> models.ServiceOrder:
    """Accept a quote, reject its siblings, close the request, open an order.

    All four writes share one commit. The request moves
    ``in_negotiation -> accepted`` with a guarded update, so of two
    concurrent accepts only one creates an order; the other gets ``409``.
    """
    db_quote, db_request = get_quote_for_client(db, quote_id, client)
    if db_quote.status not in sources_for(QuoteStatus.ACCEPTED):
        raise error_response(
            "Quote can no longer be accepted",
            {"status": db_quote.status.value},
            status.HTTP_409_CONFLICT,
        )

    # Snapshot before the bulk updates below leave the instance stale
    price = db_quote.adjusted_price
    window = db_quote.scheduled_time_window

    with atomic(db, f"accept quote {quote_id}", conflict_message="Quote already accepted"):
        if not guarded_status_update(
            db, models.ServiceRequest, db_request.id, RequestStatus.ACCEPTED
        ):
            raise error_response(
                "Request already has an accepted quote",
                {"request_id": "not_negotiating"},
                status.HTTP_409_CONFLICT,
            )
        if not guarded_status_update(db, models.Quote, db_quote.id, QuoteStatus.ACCEPTED):
            raise error_response(
                "Quote can no longer be accepted",
                {"quote_id": "closed"},
                status.HTTP_409_CONFLICT,
            )

        siblings = (
            db.query(models.Quote)
            .filter(
                models.Quote.request_id == db_request.id,
                models.Quote.id != db_quote.id,
                models.Quote.status != QuoteStatus.REJECTED,
            )
            .all()
        )
        for sibling in siblings:
            sibling.status = QuoteStatus.REJECTED

        order = models.ServiceOrder(
            request_id=db_request.id,
            quote_id=db_quote.id,
            client_id=db_request.client_id,
            price=price,
            scheduled_time_window=window,
        )
        db.add(order)

    db.refresh(order)
    db.expire(db_quote)
    db.expire(db_request)
    logger.info(
        "Quote %s accepted; order %s created, %d sibling quote(s) rejected",
        quote_id,
        order.id,
        len(siblings),
    )
    return order


def counter_quote(
    db: Session, quote_id: int, client: models.Client, message: str
) -> models.Quote:
    db_quote, db_request = get_quote_for_client(db, quote_id, client)
    if not can_transition(db_request.status, RequestStatus.IN_NEGOTIATION):
        raise error_response(
            "Request is closed and cannot be negotiated",
            {"status": db_request.status.value},
            status.HTTP_409_CONFLICT,
        )
    with atomic(db, f"counter quote {quote_id}"):
        if not guarded_status_update(db, models.Quote, db_quote.id, QuoteStatus.COUNTERED):
            raise error_response(
                "Quote can no longer be countered",
                {"status": db_quote.status.value},
                status.HTTP_409_CONFLICT,
            )
        db.add(build_message(db_request.id, SenderType.CLIENT, message))
    db.refresh(db_quote)
    return db_quote


def cancel_quote(db: Session, quote_id: int, client: models.Client) -> models.Quote:
    """Client declines a quote. Accepted quotes stay accepted."""
    db_quote, _ = get_quote_for_client(db, quote_id, client)
    if db_quote.status == QuoteStatus.REJECTED:
        return db_quote
    with atomic(db, f"cancel quote {quote_id}"):
        if not guarded_status_update(db, models.Quote, db_quote.id, QuoteStatus.REJECTED):
            raise error_response(
                "Accepted quotes cannot be canceled",
                {"status": db_quote.status.value},
                status.HTTP_409_CONFLICT,
            )
    db.refresh(db_quote)
    return db_quote
