"""Closed status/sender enumerations and the transitions allowed between them."""

import enum
from typing import Mapping, TypeVar


class RequestStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    IN_NEGOTIATION = "in_negotiation"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class QuoteStatus(str, enum.Enum):
    PENDING = "pending"
    COUNTERED = "countered"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class BillStatus(str, enum.Enum):
    UNPAID = "unpaid"
    PAID = "paid"
    DISPUTED = "disputed"


class SenderType(str, enum.Enum):
    """Author of a negotiation message or bill response."""

    CLIENT = "client"
    ANNA = "anna"


REQUEST_TRANSITIONS: Mapping[RequestStatus, frozenset] = {
    RequestStatus.SUBMITTED: frozenset({RequestStatus.IN_NEGOTIATION, RequestStatus.REJECTED}),
    # More quotes may arrive while negotiating
    RequestStatus.IN_NEGOTIATION: frozenset(
        {RequestStatus.IN_NEGOTIATION, RequestStatus.ACCEPTED, RequestStatus.REJECTED}
    ),
    RequestStatus.ACCEPTED: frozenset(),
    # Rejecting twice only appends another note
    RequestStatus.REJECTED: frozenset({RequestStatus.REJECTED}),
}

QUOTE_TRANSITIONS: Mapping[QuoteStatus, frozenset] = {
    QuoteStatus.PENDING: frozenset(
        {QuoteStatus.COUNTERED, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}
    ),
    QuoteStatus.COUNTERED: frozenset(
        {QuoteStatus.COUNTERED, QuoteStatus.ACCEPTED, QuoteStatus.REJECTED}
    ),
    QuoteStatus.ACCEPTED: frozenset(),
    QuoteStatus.REJECTED: frozenset(),
}

BILL_TRANSITIONS: Mapping[BillStatus, frozenset] = {
    # unpaid -> unpaid is an admin revision of the amount
    BillStatus.UNPAID: frozenset({BillStatus.PAID, BillStatus.DISPUTED, BillStatus.UNPAID}),
    BillStatus.DISPUTED: frozenset({BillStatus.UNPAID}),
    BillStatus.PAID: frozenset(),
}

_TABLES = {
    RequestStatus: REQUEST_TRANSITIONS,
    QuoteStatus: QUOTE_TRANSITIONS,
    BillStatus: BILL_TRANSITIONS,
}

for _enum_cls, _table in _TABLES.items():
    _missing = set(_enum_cls) - set(_table)
    if _missing:
        raise RuntimeError(f"{_enum_cls.__name__} transitions missing for {sorted(m.value for m in _missing)}")

S = TypeVar("S", RequestStatus, QuoteStatus, BillStatus)


def can_transition(current: S, target: S) -> bool:
    """Return True when ``current -> target`` is an allowed move."""
    table = _TABLES[type(target)]
    return target in table[type(target)(current)]


def sources_for(target: S) -> frozenset:
    """Every status from which ``target`` may be reached."""
    table = _TABLES[type(target)]
    return frozenset(status for status, allowed in table.items() if target in allowed)
