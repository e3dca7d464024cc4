from datetime import datetime
from decimal import Decimal
from typing import List

from pydantic import BaseModel


class ClientSummary(BaseModel):
    client_id: int
    first_name: str
    last_name: str


class FrequentClient(ClientSummary):
    completed_orders: int


class UncommittedClient(ClientSummary):
    total_requests: int


class ProspectiveClient(ClientSummary):
    email: str


class AcceptedQuoteRow(ClientSummary):
    quote_id: int
    request_id: int
    adjusted_price: Decimal
    scheduled_time_window: str
    created_at: datetime


class AcceptedQuotesReport(BaseModel):
    month: int
    year: int
    rows: List[AcceptedQuoteRow]


class LargestJob(ClientSummary):
    request_id: int
    num_rooms: int


class OverdueBill(ClientSummary):
    bill_id: int
    order_id: int
    amount: Decimal
    generated_at: datetime
