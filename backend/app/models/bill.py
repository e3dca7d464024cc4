from sqlalchemy import (
    Column,
    Integer,
    Text,
    DateTime,
    ForeignKey,
    Numeric,
    Enum as SQLAlchemyEnum,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from .ledger_status import BillStatus, SenderType
from ..utils import clock


class Bill(BaseModel):
    __tablename__ = "bills"

    id = Column(Integer, primary_key=True, index=True)
    # One bill per order
    order_id = Column(Integer, ForeignKey("service_orders.id"), nullable=False, unique=True)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(
        SQLAlchemyEnum(
            BillStatus,
            name="billstatus",
            values_callable=lambda enum: [e.value for e in enum],
            validate_strings=True,
        ),
        nullable=False,
        default=BillStatus.UNPAID,
        index=True,
    )
    generated_at = Column(DateTime, nullable=False, default=clock.column_default, index=True)
    due_date = Column(DateTime, nullable=True)
    paid_at = Column(DateTime, nullable=True)

    order = relationship("ServiceOrder", back_populates="bill")
    responses = relationship(
        "BillResponse",
        back_populates="bill",
        cascade="all, delete-orphan",
        order_by="BillResponse.timestamp",
    )


class BillResponse(BaseModel):
    """One entry of the dispute conversation on a bill."""

    __tablename__ = "bill_responses"

    id = Column(Integer, primary_key=True, index=True)
    bill_id = Column(Integer, ForeignKey("bills.id"), nullable=False, index=True)
    sender = Column(
        SQLAlchemyEnum(
            SenderType,
            name="sendertype",
            values_callable=lambda enum: [e.value for e in enum],
            validate_strings=True,
        ),
        nullable=False,
    )
    note = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, default=clock.column_default)

    bill = relationship("Bill", back_populates="responses")
