from datetime import datetime
from decimal import Decimal
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from ..models.ledger_status import RequestStatus


class ServiceRequestCreate(BaseModel):
    service_address: str = Field(min_length=1)
    cleaning_type: str = Field(min_length=1)
    num_rooms: int = Field(ge=1)
    preferred_datetime: datetime
    proposed_budget: Optional[Decimal] = Field(default=None, ge=0)
    notes: Optional[str] = None


class ServiceRequestRead(BaseModel):
    request_id: int = Field(validation_alias=AliasChoices("request_id", "id"))
    client_id: int
    service_address: str
    cleaning_type: str
    num_rooms: int
    preferred_datetime: datetime
    proposed_budget: Optional[Decimal] = None
    notes: Optional[str] = None
    status: RequestStatus
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class PendingRequestRead(ServiceRequestRead):
    """Admin queue row: the request plus who asked for it."""

    first_name: str
    last_name: str
    email: str


class RequestCreated(BaseModel):
    request_id: int


class RequestReject(BaseModel):
    note: str = Field(min_length=1)

    @field_validator("note", mode="before")
    @classmethod
    def strip_note(cls, v: Any) -> Any:
        return v.strip() if isinstance(v, str) else v


class PhotoRead(BaseModel):
    file_path: str
    uploaded_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ActionResult(BaseModel):
    """Plain acknowledgement returned by state-changing endpoints."""

    message: str
