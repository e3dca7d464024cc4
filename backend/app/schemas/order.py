from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import AliasChoices, BaseModel, Field


class OrderRead(BaseModel):
    order_id: int = Field(validation_alias=AliasChoices("order_id", "id"))
    request_id: int
    quote_id: int
    price: Decimal
    scheduled_time_window: str
    created_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    service_address: Optional[str] = None
    cleaning_type: Optional[str] = None

    model_config = {"from_attributes": True}


class AdminOrderRead(OrderRead):
    client_id: int
    first_name: str
    last_name: str
