"""Audit logging for ledger rows changed through the ORM.

Guarded transitions go through bulk ``UPDATE`` statements and log in
``crud_ledger``; everything assigned on instances is reported here.
"""

import logging
from sqlalchemy import event
from sqlalchemy.orm.attributes import NO_VALUE

from .. import models

logger = logging.getLogger(__name__)

_registered = False

# (model, attribute) pairs worth an audit line
_AUDITED = (
    (models.ServiceRequest, "status"),
    (models.Quote, "status"),
    (models.Bill, "status"),
    (models.Bill, "amount"),
    (models.ServiceOrder, "completed_at"),
)


def _plain(value):
    return getattr(value, "value", value)


def _audit_listener(model_name: str, field: str):
    def _on_set(target, value, oldvalue, initiator):  # noqa: ANN001
        # First assignment on a pending row is creation, not a change
        if oldvalue is NO_VALUE or oldvalue is None or oldvalue == value:
            return
        logger.info(
            "ledger %s id=%s %s: %s -> %s",
            model_name,
            getattr(target, "id", "new"),
            field,
            _plain(oldvalue),
            _plain(value),
        )

    return _on_set


def register_status_listeners() -> None:
    global _registered
    if _registered:
        return
    for model, field in _AUDITED:
        event.listen(
            getattr(model, field),
            "set",
            _audit_listener(model.__name__, field),
            propagate=True,
        )
    _registered = True
