"""Single time source for the ledger.

Everything that stamps or compares ledger times calls ``clock.utcnow()`` via
the module attribute, so tests can move time by patching
``app.utils.clock.utcnow``.
"""
from datetime import datetime, timezone


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime (the stored form)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def column_default() -> datetime:
    # Column defaults bind this once; the lookup of ``utcnow`` stays late.
    return utcnow()
