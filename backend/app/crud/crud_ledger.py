"""Transaction and compare-and-swap helpers shared by the ledger crud modules."""

from contextlib import contextmanager
import logging
from typing import Any, Iterable, Iterator, Optional

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..models.ledger_status import sources_for
from ..utils import error_response

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, action: str, conflict_message: Optional[str] = None) -> Iterator[Session]:
    """Run a ledger transition as one transaction.

    Everything written inside the block is committed together; any error
    rolls the whole transition back. Integrity errors become ``409`` when a
    ``conflict_message`` is given, other storage errors a generic ``500``.
    """
    try:
        yield db
        db.commit()
    except HTTPException:
        db.rollback()
        raise
    except IntegrityError:
        db.rollback()
        if conflict_message:
            logger.info("Conflict during %s", action)
            raise error_response(conflict_message, {}, status.HTTP_409_CONFLICT)
        logger.exception("Integrity error during %s", action)
        raise error_response("Database error", {}, status.HTTP_500_INTERNAL_SERVER_ERROR)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Ledger write failed during %s", action)
        raise error_response("Database error", {}, status.HTTP_500_INTERNAL_SERVER_ERROR)


def guarded_status_update(
    db: Session,
    model: Any,
    entity_id: int,
    target,
    values: Optional[dict] = None,
    expected: Optional[Iterable] = None,
) -> bool:
    """Move ``model`` row ``entity_id`` to ``target`` only from an allowed status.

    Issues ``UPDATE ... WHERE id = :id AND status IN (<allowed sources>)`` so a
    concurrent writer that already moved the row makes this call a no-op.
    ``expected`` narrows the allowed sources when one transition into
    ``target`` is only valid from some of them. Returns True when exactly one
    row changed.
    """
    expected = frozenset(expected) if expected is not None else sources_for(target)
    payload = {"status": target}
    payload.update(values or {})
    updated = (
        db.query(model)
        .filter(model.id == entity_id, model.status.in_(list(expected)))
        .update(payload, synchronize_session=False)
    )
    if updated == 1:
        logger.info(
            "%s id=%s status set to %s",
            model.__name__,
            entity_id,
            target.value,
        )
        return True
    logger.info(
        "%s id=%s refused move to %s; expected one of %s",
        model.__name__,
        entity_id,
        target.value,
        sorted(s.value for s in expected),
    )
    return False
