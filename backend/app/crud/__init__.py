from . import crud_ledger
from . import crud_client
from . import crud_request
from . import crud_quote
from . import crud_message
from . import crud_order
from . import crud_bill
from . import crud_dashboard

# Callers use module-qualified names, e.g. ``crud.crud_quote.accept_quote``
