from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Numeric,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .ledger_status import RequestStatus
from ..utils import clock


class ServiceRequest(BaseModel):
    __tablename__ = "service_requests"

    id = Column(Integer, primary_key=True, index=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)

    service_address = Column(String(255), nullable=False)
    cleaning_type = Column(String(50), nullable=False)
    num_rooms = Column(Integer, nullable=False)
    preferred_datetime = Column(DateTime, nullable=False, index=True)
    proposed_budget = Column(Numeric(10, 2), nullable=True)
    notes = Column(Text, nullable=True)

    # Persist lowercase values; unknown labels are rejected by the Enum type
    status = Column(
        SQLAlchemyEnum(
            RequestStatus,
            name="requeststatus",
            values_callable=lambda enum: [e.value for e in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=RequestStatus.SUBMITTED,
        index=True,
    )

    client = relationship("Client", back_populates="service_requests")
    photos = relationship("RequestPhoto", back_populates="request", cascade="all, delete-orphan")
    quotes = relationship(
        "Quote",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="Quote.created_at.desc()",
    )
    messages = relationship(
        "NegotiationMessage",
        back_populates="request",
        cascade="all, delete-orphan",
        order_by="NegotiationMessage.timestamp",
    )
    order = relationship("ServiceOrder", back_populates="request", uselist=False)


class RequestPhoto(BaseModel):
    __tablename__ = "request_photos"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("service_requests.id"), nullable=False, index=True)
    # Stored file name under UPLOADS_DIR; served at /uploads/<file_path>
    file_path = Column(String(255), nullable=False)
    uploaded_at = Column(DateTime, nullable=False, default=clock.column_default)

    request = relationship("ServiceRequest", back_populates="photos")
