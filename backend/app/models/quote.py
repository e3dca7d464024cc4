from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    DateTime,
    ForeignKey,
    Numeric,
    Index,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .ledger_status import QuoteStatus, SenderType
from ..utils import clock


class Quote(BaseModel):
    """A price/time offer from Anna. A request keeps every quote it received."""

    __tablename__ = "quotes"
    __table_args__ = (
        Index("ix_quotes_request_status", "request_id", "status"),
    )

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("service_requests.id"), nullable=False)
    adjusted_price = Column(Numeric(10, 2), nullable=False)
    scheduled_time_window = Column(String(100), nullable=False)
    note = Column(Text, nullable=True)
    status = Column(
        SQLAlchemyEnum(
            QuoteStatus,
            name="quotestatus",
            values_callable=lambda enum: [e.value for e in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=QuoteStatus.PENDING,
    )

    request = relationship("ServiceRequest", back_populates="quotes")


class NegotiationMessage(BaseModel):
    __tablename__ = "negotiation_messages"
    __table_args__ = (
        Index("ix_negotiation_messages_request_time", "request_id", "timestamp"),
    )

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("service_requests.id"), nullable=False)
    sender = Column(
        SQLAlchemyEnum(
            SenderType,
            name="sendertype",
            values_callable=lambda enum: [e.value for e in enum],
            validate_strings=True,
        ),
        nullable=False,
    )
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=clock.column_default)

    request = relationship("ServiceRequest", back_populates="messages")
