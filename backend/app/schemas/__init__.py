from .client import ClientCreate, ClientLogin, ClientResponse, AuthResponse, TokenData
from .service_request import (
    ServiceRequestCreate,
    ServiceRequestRead,
    PendingRequestRead,
    RequestCreated,
    RequestReject,
    PhotoRead,
    ActionResult,
)
from .quote import (
    QuoteCreate,
    QuoteRead,
    QuoteCreated,
    QuoteAccepted,
    CounterOffer,
    NegotiationMessageCreate,
    NegotiationMessageRead,
)
from .order import OrderRead, AdminOrderRead
from .bill import (
    BillCreate,
    BillCreated,
    BillRead,
    AdminBillRead,
    BillDetail,
    BillDispute,
    BillRespond,
    BillRevise,
    BillResponseRead,
)
from . import dashboard

__all__ = [
    "ClientCreate",
    "ClientLogin",
    "ClientResponse",
    "AuthResponse",
    "TokenData",
    "ServiceRequestCreate",
    "ServiceRequestRead",
    "PendingRequestRead",
    "RequestCreated",
    "RequestReject",
    "PhotoRead",
    "ActionResult",
    "QuoteCreate",
    "QuoteRead",
    "QuoteCreated",
    "QuoteAccepted",
    "CounterOffer",
    "NegotiationMessageCreate",
    "NegotiationMessageRead",
    "OrderRead",
    "AdminOrderRead",
    "BillCreate",
    "BillCreated",
    "BillRead",
    "AdminBillRead",
    "BillDetail",
    "BillDispute",
    "BillRespond",
    "BillRevise",
    "BillResponseRead",
    "dashboard",
]
