from sqlalchemy.orm import Session
from typing import List
import logging

from fastapi import status

from .. import models, schemas
from ..models import RequestStatus
from ..utils import error_response
from .crud_ledger import atomic, guarded_status_update

logger = logging.getLogger(__name__)

ADMIN_REJECT_MARKER = "[ADMIN REJECTED]"


def create_request(
    db: Session, client: models.Client, data: schemas.ServiceRequestCreate
) -> models.ServiceRequest:
    db_request = models.ServiceRequest(
        client_id=client.id,
        service_address=data.service_address.strip(),
        cleaning_type=data.cleaning_type.strip(),
        num_rooms=data.num_rooms,
        preferred_datetime=data.preferred_datetime,
        proposed_budget=data.proposed_budget,
        notes=data.notes,
        status=RequestStatus.SUBMITTED,
    )
    with atomic(db, "create service request"):
        db.add(db_request)
    db.refresh(db_request)
    logger.info("Client %s submitted request %s", client.id, db_request.id)
    return db_request


def get_request(db: Session, request_id: int) -> models.ServiceRequest:
    db_request = (
        db.query(models.ServiceRequest)
        .filter(models.ServiceRequest.id == request_id)
        .first()
    )
    if db_request is None:
        raise error_response(
            "Request not found",
            {"request_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return db_request


def get_visible_request(
    db: Session, request_id: int, user: models.Client, allow_admin: bool = True
) -> models.ServiceRequest:
    """Fetch a request the caller may see: its owner, or an admin when allowed."""
    db_request = get_request(db, request_id)
    if db_request.client_id == user.id:
        return db_request
    if allow_admin and user.is_admin:
        return db_request
    raise error_response(
        "Not authorized to access this request",
        {},
        status.HTTP_403_FORBIDDEN,
    )


def list_requests_for_client(db: Session, client_id: int) -> List[models.ServiceRequest]:
    """Newest first, by creation."""
    return (
        db.query(models.ServiceRequest)
        .filter(models.ServiceRequest.client_id == client_id)
        .order_by(models.ServiceRequest.id.desc())
        .all()
    )


def list_my_requests(db: Session, client_id: int) -> List[models.ServiceRequest]:
    """Same set as ``list_requests_for_client``, ordered by preferred date."""
    return (
        db.query(models.ServiceRequest)
        .filter(models.ServiceRequest.client_id == client_id)
        .order_by(
            models.ServiceRequest.preferred_datetime.desc(),
            models.ServiceRequest.id.desc(),
        )
        .all()
    )


def list_pending_for_admin(db: Session) -> List[dict]:
    """Requests still awaiting a decision, soonest preferred date first."""
    rows = (
        db.query(
            models.ServiceRequest,
            models.Client.first_name,
            models.Client.last_name,
            models.Client.email,
        )
        .join(models.Client, models.Client.id == models.ServiceRequest.client_id)
        .filter(
            models.ServiceRequest.status.in_(
                [RequestStatus.SUBMITTED, RequestStatus.IN_NEGOTIATION]
            )
        )
        .order_by(
            models.ServiceRequest.preferred_datetime.asc(),
            models.ServiceRequest.id.asc(),
        )
        .all()
    )
    pending = []
    for req, first_name, last_name, email in rows:
        item = schemas.ServiceRequestRead.model_validate(req).model_dump()
        item.update(first_name=first_name, last_name=last_name, email=email)
        pending.append(item)
    return pending


def reject_request(db: Session, request_id: int, note: str) -> models.ServiceRequest:
    """Reject a request and append the admin's note to its notes."""
    db_request = get_request(db, request_id)
    marker = f"{ADMIN_REJECT_MARKER}: {note.strip()}"
    notes = f"{db_request.notes}\n{marker}" if db_request.notes else marker
    with atomic(db, f"reject request {request_id}"):
        if not guarded_status_update(
            db,
            models.ServiceRequest,
            request_id,
            RequestStatus.REJECTED,
            {"notes": notes},
        ):
            raise error_response(
                "Request can no longer be rejected",
                {"status": db_request.status.value},
                status.HTTP_409_CONFLICT,
            )
    db.refresh(db_request)
    return db_request


def add_photos(
    db: Session, db_request: models.ServiceRequest, file_names: List[str]
) -> List[models.RequestPhoto]:
    photos = [
        models.RequestPhoto(request_id=db_request.id, file_path=name)
        for name in file_names
    ]
    with atomic(db, f"attach photos to request {db_request.id}"):
        db.add_all(photos)
    for photo in photos:
        db.refresh(photo)
    logger.info("Attached %d photo(s) to request %s", len(photos), db_request.id)
    return photos


def list_photos(db: Session, request_id: int) -> List[models.RequestPhoto]:
    return (
        db.query(models.RequestPhoto)
        .filter(models.RequestPhoto.request_id == request_id)
        .order_by(models.RequestPhoto.uploaded_at.asc(), models.RequestPhoto.id.asc())
        .all()
    )
