from sqlalchemy.orm import Session
from typing import List
import logging

from .. import models
from ..models import SenderType
from .crud_ledger import atomic

logger = logging.getLogger(__name__)


def build_message(request_id: int, sender: SenderType, text: str) -> models.NegotiationMessage:
    """Return an unsaved message; callers add it inside their own transaction."""
    return models.NegotiationMessage(
        request_id=request_id,
        sender=sender,
        text=text.strip(),
    )


def add_message(
    db: Session, request_id: int, sender: SenderType, text: str
) -> models.NegotiationMessage:
    msg = build_message(request_id, sender, text)
    with atomic(db, f"post message on request {request_id}"):
        db.add(msg)
    db.refresh(msg)
    logger.info("%s posted message %s on request %s", sender.value, msg.id, request_id)
    return msg


def list_messages(db: Session, request_id: int) -> List[models.NegotiationMessage]:
    """Negotiation thread for a request, oldest first."""
    return (
        db.query(models.NegotiationMessage)
        .filter(models.NegotiationMessage.request_id == request_id)
        .order_by(
            models.NegotiationMessage.timestamp.asc(),
            models.NegotiationMessage.id.asc(),
        )
        .all()
    )
