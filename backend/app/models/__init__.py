from .client import Client
from .ledger_status import RequestStatus, QuoteStatus, BillStatus, SenderType
from .service_request import ServiceRequest, RequestPhoto
from .quote import Quote, NegotiationMessage
from .service_order import ServiceOrder
from .bill import Bill, BillResponse

__all__ = [
    "Client",
    "ServiceRequest",
    "RequestPhoto",
    "Quote",
    "NegotiationMessage",
    "ServiceOrder",
    "Bill",
    "BillResponse",
    "RequestStatus",
    "QuoteStatus",
    "BillStatus",
    "SenderType",
]
