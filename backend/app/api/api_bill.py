from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import logging

from .. import models, schemas
from ..crud import crud_bill
from .dependencies import get_db, get_current_user, require_admin

router = APIRouter(tags=["Bills"])
logger = logging.getLogger(__name__)


@router.post(
    "/create/{order_id}",
    response_model=schemas.BillCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_bill(
    order_id: int,
    data: schemas.BillCreate,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    db_bill = crud_bill.create_bill(db, order_id, data.amount)
    return {"message": "Bill created!", "bill_id": db_bill.id}


# Literal paths are declared before "/{order_id}" so they are matched first
@router.get("/mine", response_model=List[schemas.BillRead])
def list_my_bills(
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    return crud_bill.list_bills_for_client(db, current_user.id)


@router.get("/all", response_model=List[schemas.AdminBillRead])
def list_all_bills(
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    return crud_bill.list_all_bills(db)


@router.get("/{order_id}", response_model=schemas.BillDetail)
def get_bill(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    """Bill of an order, visible to the order's client and to admins."""
    return crud_bill.get_bill_for_order(db, order_id, current_user)


@router.get("/{order_id}/responses", response_model=List[schemas.BillResponseRead])
def list_bill_responses(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    return crud_bill.list_responses_for_order(db, order_id, current_user)


@router.post("/{bill_id}/pay", response_model=schemas.ActionResult)
def pay_bill(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_bill.pay_bill(db, bill_id, current_user)
    return {"message": "Bill paid!"}


@router.post("/{bill_id}/dispute", response_model=schemas.ActionResult)
def dispute_bill(
    bill_id: int,
    data: schemas.BillDispute,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_bill.dispute_bill(db, bill_id, current_user, data.note)
    return {"message": "Dispute submitted."}


@router.post("/{bill_id}/cancel", response_model=schemas.ActionResult)
def cancel_dispute(
    bill_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_bill.cancel_dispute(db, bill_id, current_user)
    return {"message": "Dispute canceled; bill is now unpaid."}


@router.post("/{bill_id}/respond", response_model=schemas.ActionResult)
def respond_to_bill(
    bill_id: int,
    data: schemas.BillRespond,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    crud_bill.respond_to_bill(db, bill_id, note=data.note, new_amount=data.new_amount)
    return {"message": "Reply sent."}


@router.post("/{bill_id}/revise", response_model=schemas.ActionResult)
def revise_bill(
    bill_id: int,
    data: schemas.BillRevise,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    crud_bill.revise_bill(db, bill_id, data.new_amount, note=data.note)
    return {"message": "Bill revised."}
