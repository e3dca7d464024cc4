from sqlalchemy.orm import Session
from datetime import timedelta
from decimal import Decimal
from typing import List, Optional
import logging

from fastapi import status

from .. import models
from ..core.config import settings
from ..models import BillStatus, SenderType
from ..utils import clock, error_response
from .crud_ledger import atomic, guarded_status_update
from .crud_order import get_order

logger = logging.getLogger(__name__)

CLIENT_CANCELED_NOTE = "Client canceled the dispute."


def _bill_row(bill: models.Bill) -> dict:
    return {
        "bill_id": bill.id,
        "order_id": bill.order_id,
        "amount": bill.amount,
        "status": bill.status,
        "generated_at": bill.generated_at,
        "due_date": bill.due_date,
        "paid_at": bill.paid_at,
    }


def create_bill(db: Session, order_id: int, amount: Decimal) -> models.Bill:
    get_order(db, order_id)
    existing = db.query(models.Bill).filter(models.Bill.order_id == order_id).first()
    if existing is not None:
        raise error_response(
            "Order already has a bill",
            {"bill_id": str(existing.id)},
            status.HTTP_409_CONFLICT,
        )
    now = clock.utcnow()
    db_bill = models.Bill(
        order_id=order_id,
        amount=amount,
        status=BillStatus.UNPAID,
        generated_at=now,
        due_date=now + timedelta(days=settings.BILL_DUE_DAYS),
    )
    with atomic(db, f"bill order {order_id}", conflict_message="Order already has a bill"):
        db.add(db_bill)
    db.refresh(db_bill)
    logger.info("Bill %s issued for order %s amount=%s", db_bill.id, order_id, amount)
    return db_bill


def list_bills_for_client(db: Session, client_id: int) -> List[models.Bill]:
    return (
        db.query(models.Bill)
        .join(models.ServiceOrder, models.ServiceOrder.id == models.Bill.order_id)
        .filter(models.ServiceOrder.client_id == client_id)
        .order_by(models.Bill.generated_at.desc(), models.Bill.id.desc())
        .all()
    )


def list_all_bills(db: Session) -> List[dict]:
    rows = (
        db.query(models.Bill, models.Client)
        .join(models.ServiceOrder, models.ServiceOrder.id == models.Bill.order_id)
        .join(models.Client, models.Client.id == models.ServiceOrder.client_id)
        .order_by(models.Bill.generated_at.desc(), models.Bill.id.desc())
        .all()
    )
    result = []
    for bill, client in rows:
        row = _bill_row(bill)
        row.update(
            client_id=client.id,
            first_name=client.first_name,
            last_name=client.last_name,
        )
        result.append(row)
    return result


def _visible_bill_for_order(
    db: Session, order_id: int, user: models.Client
) -> models.Bill:
    db_order = get_order(db, order_id)
    if db_order.client_id != user.id and not user.is_admin:
        raise error_response(
            "Not authorized to view this bill",
            {},
            status.HTTP_403_FORBIDDEN,
        )
    db_bill = db_order.bill
    if db_bill is None:
        raise error_response(
            "Bill not found",
            {"order_id": "no_bill"},
            status.HTTP_404_NOT_FOUND,
        )
    return db_bill


def get_bill_for_order(db: Session, order_id: int, user: models.Client) -> dict:
    db_bill = _visible_bill_for_order(db, order_id, user)
    row = _bill_row(db_bill)
    row["client_id"] = db_bill.order.client_id
    return row


def list_responses_for_order(
    db: Session, order_id: int, user: models.Client
) -> List[models.BillResponse]:
    db_bill = _visible_bill_for_order(db, order_id, user)
    return (
        db.query(models.BillResponse)
        .filter(models.BillResponse.bill_id == db_bill.id)
        .order_by(models.BillResponse.timestamp.asc(), models.BillResponse.id.asc())
        .all()
    )


def get_bill(db: Session, bill_id: int) -> models.Bill:
    db_bill = db.query(models.Bill).filter(models.Bill.id == bill_id).first()
    if db_bill is None:
        raise error_response(
            "Bill not found",
            {"bill_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return db_bill


def _owned_bill(db: Session, bill_id: int, client: models.Client) -> models.Bill:
    db_bill = get_bill(db, bill_id)
    if db_bill.order.client_id != client.id:
        raise error_response(
            "Not authorized to act on this bill",
            {},
            status.HTTP_403_FORBIDDEN,
        )
    return db_bill


def pay_bill(db: Session, bill_id: int, client: models.Client) -> models.Bill:
    db_bill = _owned_bill(db, bill_id, client)
    with atomic(db, f"pay bill {bill_id}"):
        if not guarded_status_update(
            db,
            models.Bill,
            bill_id,
            BillStatus.PAID,
            {"paid_at": clock.utcnow()},
        ):
            raise error_response(
                "Bill is not awaiting payment",
                {"status": db_bill.status.value},
                status.HTTP_409_CONFLICT,
            )
    db.refresh(db_bill)
    return db_bill


def dispute_bill(
    db: Session, bill_id: int, client: models.Client, note: str
) -> models.Bill:
    db_bill = _owned_bill(db, bill_id, client)
    with atomic(db, f"dispute bill {bill_id}"):
        if not guarded_status_update(db, models.Bill, bill_id, BillStatus.DISPUTED):
            raise error_response(
                "Only unpaid bills can be disputed",
                {"status": db_bill.status.value},
                status.HTTP_409_CONFLICT,
            )
        db.add(
            models.BillResponse(
                bill_id=bill_id, sender=SenderType.CLIENT, note=note.strip()
            )
        )
    db.refresh(db_bill)
    return db_bill


def cancel_dispute(db: Session, bill_id: int, client: models.Client) -> models.Bill:
    db_bill = _owned_bill(db, bill_id, client)
    with atomic(db, f"cancel dispute on bill {bill_id}"):
        # Only a disputed bill can be reopened by its client
        if not guarded_status_update(
            db,
            models.Bill,
            bill_id,
            BillStatus.UNPAID,
            expected={BillStatus.DISPUTED},
        ):
            raise error_response(
                "Bill is not disputed",
                {"status": db_bill.status.value},
                status.HTTP_409_CONFLICT,
            )
        db.add(
            models.BillResponse(
                bill_id=bill_id, sender=SenderType.CLIENT, note=CLIENT_CANCELED_NOTE
            )
        )
    db.refresh(db_bill)
    return db_bill


def respond_to_bill(
    db: Session,
    bill_id: int,
    note: Optional[str] = None,
    new_amount: Optional[Decimal] = None,
) -> models.Bill:
    """Anna's side of a dispute.

    A note alone is appended to the conversation. A new amount also rewrites
    the bill and puts it back to ``unpaid``; paid bills refuse that with 409.
    """
    db_bill = get_bill(db, bill_id)
    text = (note or "").strip() or f"Amount revised to {new_amount}."
    with atomic(db, f"respond to bill {bill_id}"):
        if new_amount is not None and not guarded_status_update(
            db,
            models.Bill,
            bill_id,
            BillStatus.UNPAID,
            {"amount": new_amount},
        ):
            raise error_response(
                "Paid bills cannot be revised",
                {"status": db_bill.status.value},
                status.HTTP_409_CONFLICT,
            )
        db.add(models.BillResponse(bill_id=bill_id, sender=SenderType.ANNA, note=text))
    db.refresh(db_bill)
    return db_bill


def revise_bill(
    db: Session, bill_id: int, new_amount: Decimal, note: Optional[str] = None
) -> models.Bill:
    return respond_to_bill(db, bill_id, note=note, new_amount=new_amount)


def overdue_cutoff():
    return clock.utcnow() - timedelta(days=settings.OVERDUE_AFTER_DAYS)
