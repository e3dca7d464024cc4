from fastapi import APIRouter, Depends, File, UploadFile, status
from sqlalchemy.orm import Session
from typing import List
import logging

from .. import models, schemas
from ..crud import crud_message, crud_order, crud_quote, crud_request
from ..models import SenderType
from ..services import photo_storage
from .dependencies import get_db, get_current_user, require_admin

router = APIRouter(tags=["Requests"])
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------- requests


@router.post(
    "",
    response_model=schemas.RequestCreated,
    status_code=status.HTTP_201_CREATED,
)
def create_request(
    data: schemas.ServiceRequestCreate,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    db_request = crud_request.create_request(db, current_user, data)
    return {"request_id": db_request.id}


@router.get("", response_model=List[schemas.ServiceRequestRead])
def list_requests(
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    return crud_request.list_requests_for_client(db, current_user.id)


@router.get("/my", response_model=List[schemas.ServiceRequestRead])
def list_my_requests(
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    """The caller's requests, latest preferred date first."""
    return crud_request.list_my_requests(db, current_user.id)


@router.get("/admin/pending", response_model=List[schemas.PendingRequestRead])
def list_pending_requests(
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    return crud_request.list_pending_for_admin(db)


# ------------------------------------------------------------------ orders


@router.get("/orders", response_model=List[schemas.OrderRead])
def list_my_orders(
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    return crud_order.list_orders_for_client(db, current_user.id)


@router.get("/admin/orders", response_model=List[schemas.AdminOrderRead])
def list_all_orders(
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    return crud_order.list_all_orders(db)


@router.post("/orders/{order_id}/complete", response_model=schemas.ActionResult)
def complete_order(
    order_id: int,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    crud_order.complete_order(db, order_id)
    return {"message": "Order marked as completed."}


# ------------------------------------------------------------------ quotes


@router.post("/quote/{quote_id}/accept", response_model=schemas.QuoteAccepted)
def accept_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    order = crud_quote.accept_quote(db, quote_id, current_user)
    return {"message": "Quote accepted and order created!", "order_id": order.id}


@router.post("/quote/{quote_id}/counter", response_model=schemas.ActionResult)
def counter_quote(
    quote_id: int,
    data: schemas.CounterOffer,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_quote.counter_quote(db, quote_id, current_user, data.message)
    return {"message": "Counter sent"}


@router.post("/quote/{quote_id}/cancel", response_model=schemas.ActionResult)
def cancel_quote(
    quote_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_quote.cancel_quote(db, quote_id, current_user)
    return {"message": "Negotiation canceled."}


# ------------------------------------------------------------ admin actions


@router.post(
    "/admin/request/{request_id}/message",
    response_model=schemas.ActionResult,
)
def post_admin_message(
    request_id: int,
    data: schemas.NegotiationMessageCreate,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    crud_request.get_request(db, request_id)
    crud_message.add_message(db, request_id, SenderType.ANNA, data.text)
    return {"message": "Message sent."}


@router.post(
    "/admin/request/{request_id}/quote/update",
    response_model=schemas.QuoteCreated,
)
def send_updated_quote(
    request_id: int,
    data: schemas.QuoteCreate,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    db_quote = crud_quote.create_quote(db, request_id, data)
    return {"quote_id": db_quote.id, "message": "Updated quote sent!"}


@router.post("/{request_id}/reject", response_model=schemas.ActionResult)
def reject_request(
    request_id: int,
    data: schemas.RequestReject,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    crud_request.reject_request(db, request_id, data.note)
    return {"message": "Request rejected."}


@router.post("/{request_id}/quote", response_model=schemas.QuoteCreated)
def send_quote(
    request_id: int,
    data: schemas.QuoteCreate,
    db: Session = Depends(get_db),
    admin: models.Client = Depends(require_admin),
):
    db_quote = crud_quote.create_quote(db, request_id, data)
    return {"quote_id": db_quote.id}


# ----------------------------------------------- owner-or-admin read models


@router.get("/{request_id}/quotes", response_model=List[schemas.QuoteRead])
def list_quotes(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_request.get_visible_request(db, request_id, current_user)
    return crud_quote.list_quotes(db, request_id)


@router.get(
    "/{request_id}/messages",
    response_model=List[schemas.NegotiationMessageRead],
)
def list_messages(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_request.get_visible_request(db, request_id, current_user)
    return crud_message.list_messages(db, request_id)


@router.get("/{request_id}/photos", response_model=List[schemas.PhotoRead])
def list_photos(
    request_id: int,
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    crud_request.get_visible_request(db, request_id, current_user)
    return crud_request.list_photos(db, request_id)


@router.post("/{request_id}/photos", response_model=schemas.ActionResult)
def upload_photos(
    request_id: int,
    photos: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    current_user: models.Client = Depends(get_current_user),
):
    """Attach up to five images to the caller's own request."""
    db_request = crud_request.get_visible_request(
        db, request_id, current_user, allow_admin=False
    )
    photo_storage.validate_uploads(photos)
    names = photo_storage.save_photos(request_id, photos)
    try:
        crud_request.add_photos(db, db_request, names)
    except Exception:
        # Nothing references the files once the insert is rolled back
        photo_storage.remove_photos(names)
        raise
    return {"message": "Photos uploaded successfully"}
