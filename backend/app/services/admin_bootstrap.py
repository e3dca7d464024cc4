from __future__ import annotations

import logging
from sqlalchemy.orm import Session
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from typing import Optional

from ..core.config import settings
from ..database import SessionLocal
from ..models import Client
from ..utils.auth import get_password_hash, normalize_email

logger = logging.getLogger(__name__)


def _table_exists(session: Session, table_name: str) -> bool:
    insp = inspect(session.get_bind())
    return table_name in insp.get_table_names()


def ensure_default_admin(session: Optional[Session] = None) -> Optional[Client]:
    """Create Anna's admin account if no admin exists and bootstrap is enabled.

    Controlled by ``DEFAULT_ADMIN_BOOTSTRAP`` (on by default). Turn it off in
    production once a real admin account exists. An existing non-admin
    account with the configured email is promoted instead of duplicated.
    """
    if not settings.DEFAULT_ADMIN_BOOTSTRAP:
        return None

    owns_session = session is None
    session = session or SessionLocal()
    try:
        if not _table_exists(session, "clients"):
            return None
        if session.query(Client).filter(Client.is_admin.is_(True)).count() > 0:
            return None

        email = normalize_email(settings.DEFAULT_ADMIN_EMAIL)
        admin = session.query(Client).filter(Client.email == email).first()
        if admin is None:
            admin = Client(
                email=email,
                password_hash=get_password_hash(settings.DEFAULT_ADMIN_PASSWORD),
                first_name=settings.DEFAULT_ADMIN_FIRST_NAME,
                last_name=settings.DEFAULT_ADMIN_LAST_NAME,
                is_admin=True,
            )
            session.add(admin)
        else:
            admin.is_admin = True
        session.commit()
        session.refresh(admin)
        logger.info("Bootstrapped default admin %s", admin.email)
        return admin
    except SQLAlchemyError:
        session.rollback()
        logger.exception("Default admin bootstrap failed")
        return None
    finally:
        if owns_session:
            session.close()
