import pytest

from app.models.ledger_status import (
    BillStatus,
    QuoteStatus,
    RequestStatus,
    can_transition,
    sources_for,
)


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (RequestStatus.SUBMITTED, RequestStatus.IN_NEGOTIATION, True),
        (RequestStatus.SUBMITTED, RequestStatus.ACCEPTED, False),
        (RequestStatus.IN_NEGOTIATION, RequestStatus.ACCEPTED, True),
        (RequestStatus.ACCEPTED, RequestStatus.REJECTED, False),
        (RequestStatus.ACCEPTED, RequestStatus.IN_NEGOTIATION, False),
        (QuoteStatus.COUNTERED, QuoteStatus.ACCEPTED, True),
        (QuoteStatus.ACCEPTED, QuoteStatus.REJECTED, False),
        (QuoteStatus.REJECTED, QuoteStatus.ACCEPTED, False),
        (BillStatus.UNPAID, BillStatus.PAID, True),
        (BillStatus.DISPUTED, BillStatus.PAID, False),
        (BillStatus.DISPUTED, BillStatus.UNPAID, True),
        (BillStatus.PAID, BillStatus.UNPAID, False),
    ],
)
def test_can_transition(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_sources_for_guards():
    assert sources_for(RequestStatus.ACCEPTED) == {RequestStatus.IN_NEGOTIATION}
    assert sources_for(BillStatus.PAID) == {BillStatus.UNPAID}
    assert sources_for(BillStatus.UNPAID) == {BillStatus.UNPAID, BillStatus.DISPUTED}
    assert sources_for(QuoteStatus.ACCEPTED) == {QuoteStatus.PENDING, QuoteStatus.COUNTERED}


def test_unknown_status_value_is_rejected():
    with pytest.raises(ValueError):
        BillStatus("overdue")
