"""Read-only admin reports, recomputed from the ledger on every call."""

from sqlalchemy import exists, func, select
from sqlalchemy.orm import Session, aliased
from datetime import datetime, timedelta
from typing import Dict, List, Optional
import logging

from .. import models
from ..core.config import settings
from ..models import BillStatus, QuoteStatus
from ..utils import clock
from .crud_bill import overdue_cutoff

logger = logging.getLogger(__name__)

Client = models.Client


def _client_cols():
    return (
        Client.id.label("client_id"),
        Client.first_name,
        Client.last_name,
    )


def _rows(query) -> List[dict]:
    return [dict(row._mapping) for row in query.all()]


def frequent_clients(db: Session) -> List[dict]:
    completed = func.count(models.ServiceOrder.id)
    query = (
        db.query(*_client_cols(), completed.label("completed_orders"))
        .join(models.ServiceOrder, models.ServiceOrder.client_id == Client.id)
        .filter(models.ServiceOrder.completed_at.isnot(None))
        .group_by(Client.id, Client.first_name, Client.last_name)
        .order_by(completed.desc(), Client.id.asc())
    )
    return _rows(query)


def uncommitted_clients(db: Session, min_requests: int = 3) -> List[dict]:
    """Clients with at least ``min_requests`` requests and no order ever."""
    total = func.count(models.ServiceRequest.id)
    has_order = exists().where(models.ServiceOrder.client_id == Client.id)
    query = (
        db.query(*_client_cols(), total.label("total_requests"))
        .join(models.ServiceRequest, models.ServiceRequest.client_id == Client.id)
        .filter(~has_order)
        .group_by(Client.id, Client.first_name, Client.last_name)
        .having(total >= min_requests)
        .order_by(total.desc(), Client.id.asc())
    )
    return _rows(query)


def month_bounds(month: int, year: int):
    start = datetime(year, month, 1)
    if month == 12:
        end = datetime(year + 1, 1, 1)
    else:
        end = datetime(year, month + 1, 1)
    return start, end


def accepted_quotes(
    db: Session, month: Optional[int] = None, year: Optional[int] = None
) -> Dict[str, object]:
    now = clock.utcnow()
    month = month or now.month
    year = year or now.year
    start, end = month_bounds(month, year)
    query = (
        db.query(
            *_client_cols(),
            models.Quote.id.label("quote_id"),
            models.Quote.request_id,
            models.Quote.adjusted_price,
            models.Quote.scheduled_time_window,
            models.Quote.created_at,
        )
        .join(models.ServiceRequest, models.ServiceRequest.id == models.Quote.request_id)
        .join(Client, Client.id == models.ServiceRequest.client_id)
        .filter(
            models.Quote.status == QuoteStatus.ACCEPTED,
            models.Quote.created_at >= start,
            models.Quote.created_at < end,
        )
        .order_by(models.Quote.created_at.asc(), models.Quote.id.asc())
    )
    return {"month": month, "year": year, "rows": _rows(query)}


def prospective_clients(db: Session) -> List[dict]:
    has_request = exists().where(models.ServiceRequest.client_id == Client.id)
    query = (
        db.query(*_client_cols(), Client.email)
        .filter(Client.is_admin.is_(False), ~has_request)
        .order_by(Client.id.asc())
    )
    return _rows(query)


def largest_job(db: Session) -> List[dict]:
    query = (
        db.query(
            *_client_cols(),
            models.ServiceRequest.id.label("request_id"),
            models.ServiceRequest.num_rooms,
        )
        .join(models.ServiceOrder, models.ServiceOrder.request_id == models.ServiceRequest.id)
        .join(Client, Client.id == models.ServiceRequest.client_id)
        .filter(models.ServiceOrder.completed_at.isnot(None))
        .order_by(models.ServiceRequest.num_rooms.desc(), models.ServiceRequest.id.asc())
        .limit(1)
    )
    return _rows(query)


def overdue_bills(db: Session) -> List[dict]:
    """Unpaid bills generated more than OVERDUE_AFTER_DAYS ago."""
    cutoff = overdue_cutoff()
    query = (
        db.query(
            *_client_cols(),
            models.Bill.id.label("bill_id"),
            models.Bill.order_id,
            models.Bill.amount,
            models.Bill.generated_at,
        )
        .join(models.ServiceOrder, models.ServiceOrder.id == models.Bill.order_id)
        .join(Client, Client.id == models.ServiceOrder.client_id)
        .filter(
            models.Bill.status == BillStatus.UNPAID,
            models.Bill.generated_at < cutoff,
        )
        .order_by(models.Bill.generated_at.asc(), models.Bill.id.asc())
    )
    return _rows(query)


def bad_clients(db: Session) -> List[dict]:
    """Clients with an overdue bill who have never paid one."""
    cutoff = overdue_cutoff()
    paid_bill = aliased(models.Bill)
    paid_order = aliased(models.ServiceOrder)
    has_paid = (
        select(paid_bill.id)
        .join(paid_order, paid_order.id == paid_bill.order_id)
        .where(paid_order.client_id == Client.id, paid_bill.status == BillStatus.PAID)
        .correlate(Client)
        .exists()
    )
    query = (
        db.query(*_client_cols())
        .join(models.ServiceOrder, models.ServiceOrder.client_id == Client.id)
        .join(models.Bill, models.Bill.order_id == models.ServiceOrder.id)
        .filter(
            models.Bill.status == BillStatus.UNPAID,
            models.Bill.generated_at < cutoff,
            ~has_paid,
        )
        .group_by(Client.id, Client.first_name, Client.last_name)
        .order_by(Client.id.asc())
    )
    return _rows(query)


def good_clients(db: Session) -> List[dict]:
    """Clients whose every bill was paid within GOOD_CLIENT_PAY_HOURS."""
    window = timedelta(hours=settings.GOOD_CLIENT_PAY_HOURS)
    rows = (
        db.query(
            *_client_cols(),
            models.Bill.status,
            models.Bill.generated_at,
            models.Bill.paid_at,
        )
        .join(models.ServiceOrder, models.ServiceOrder.client_id == Client.id)
        .join(models.Bill, models.Bill.order_id == models.ServiceOrder.id)
        .order_by(Client.id.asc())
        .all()
    )
    clients: Dict[int, dict] = {}
    prompt: Dict[int, bool] = {}
    for row in rows:
        clients.setdefault(
            row.client_id,
            {
                "client_id": row.client_id,
                "first_name": row.first_name,
                "last_name": row.last_name,
            },
        )
        on_time = (
            row.status == BillStatus.PAID
            and row.paid_at is not None
            and row.paid_at - row.generated_at <= window
        )
        prompt[row.client_id] = prompt.get(row.client_id, True) and on_time
    return [info for client_id, info in clients.items() if prompt[client_id]]
