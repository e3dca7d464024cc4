from sqlalchemy.orm import Session
from typing import Optional
import logging

from fastapi import status

from .. import models, schemas
from ..utils import error_response
from ..utils.auth import get_password_hash, verify_password, normalize_email, tokenize_card
from .crud_ledger import atomic

logger = logging.getLogger(__name__)

# Compared against when the email is unknown so both failure paths cost a hash check
_DUMMY_HASH = get_password_hash("not-a-real-password")


def get_client(db: Session, client_id: int) -> Optional[models.Client]:
    return db.query(models.Client).filter(models.Client.id == client_id).first()


def get_client_by_email(db: Session, email: str) -> Optional[models.Client]:
    return (
        db.query(models.Client)
        .filter(models.Client.email == normalize_email(email))
        .first()
    )


def create_client(
    db: Session, data: schemas.ClientCreate, is_admin: bool = False
) -> models.Client:
    email = normalize_email(data.email)
    if get_client_by_email(db, email):
        raise error_response(
            "Email already registered",
            {"email": "taken"},
            status.HTTP_409_CONFLICT,
        )

    db_client = models.Client(
        first_name=data.first_name.strip(),
        last_name=data.last_name.strip(),
        email=email,
        phone=data.phone or None,
        address=data.address or None,
        credit_card_token=tokenize_card(data.credit_card),
        password_hash=get_password_hash(data.password),
        is_admin=is_admin,
    )
    # Two concurrent sign-ups with one email collide on the unique index
    with atomic(db, "register client", conflict_message="Email already registered"):
        db.add(db_client)
    db.refresh(db_client)
    logger.info("Registered client %s admin=%s", db_client.id, db_client.is_admin)
    return db_client


def authenticate(db: Session, email: str, password: str) -> Optional[models.Client]:
    """Return the client for valid credentials, else None.

    Unknown emails and wrong passwords take the same path.
    """
    client = get_client_by_email(db, email)
    if client is None:
        verify_password(password, _DUMMY_HASH)
        return None
    if not verify_password(password, client.password_hash):
        return None
    return client
