from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..models.ledger_status import QuoteStatus, SenderType


class QuoteCreate(BaseModel):
    adjusted_price: Decimal = Field(gt=0)
    scheduled_time_window: str = Field(min_length=1)
    note: Optional[str] = None


class QuoteRead(BaseModel):
    quote_id: int = Field(validation_alias=AliasChoices("quote_id", "id"))
    request_id: int
    adjusted_price: Decimal
    scheduled_time_window: str
    note: Optional[str] = None
    status: QuoteStatus
    created_at: datetime

    model_config = {"from_attributes": True}


class QuoteCreated(BaseModel):
    quote_id: int
    message: str = "Quote sent!"


class CounterOffer(BaseModel):
    message: str = Field(min_length=1)

    @field_validator("message", mode="before")
    @classmethod
    def strip_message(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class NegotiationMessageCreate(BaseModel):
    text: str = Field(min_length=1)

    @field_validator("text", mode="before")
    @classmethod
    def strip_text(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class NegotiationMessageRead(BaseModel):
    sender: SenderType
    text: str
    timestamp: datetime

    model_config = {"from_attributes": True}


class QuoteAccepted(BaseModel):
    message: str
    order_id: int
