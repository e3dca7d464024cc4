from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from ..models.ledger_status import BillStatus, SenderType


class BillCreate(BaseModel):
    amount: Decimal = Field(gt=0)


class BillCreated(BaseModel):
    message: str
    bill_id: int


class BillRead(BaseModel):
    bill_id: int = Field(validation_alias=AliasChoices("bill_id", "id"))
    order_id: int
    amount: Decimal
    status: BillStatus
    generated_at: datetime
    due_date: Optional[datetime] = None
    paid_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AdminBillRead(BillRead):
    client_id: int
    first_name: str
    last_name: str


class BillDetail(BillRead):
    client_id: int


class BillDispute(BaseModel):
    note: str = Field(min_length=1)

    # Whitespace-only notes must fail min_length
    @field_validator("note", mode="before")
    @classmethod
    def strip_note(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class BillRespond(BaseModel):
    """Anna's reply to a dispute; a new amount also reopens the bill."""

    note: Optional[str] = None
    new_amount: Optional[Decimal] = Field(default=None, gt=0)

    @model_validator(mode="after")
    def require_something(self) -> "BillRespond":
        if not (self.note and self.note.strip()) and self.new_amount is None:
            raise ValueError("note or new_amount is required")
        return self


class BillRevise(BaseModel):
    new_amount: Decimal = Field(gt=0)
    note: Optional[str] = None


class BillResponseRead(BaseModel):
    response_id: int = Field(validation_alias=AliasChoices("response_id", "id"))
    sender: SenderType
    note: str
    timestamp: datetime

    model_config = {"from_attributes": True}
