from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Numeric
from sqlalchemy.orm import relationship

from .base import BaseModel


class ServiceOrder(BaseModel):
    """Job created when a client accepts a quote.

    ``price`` and ``scheduled_time_window`` are copied from the quote at
    acceptance time so later quote edits never change the order.
    """

    __tablename__ = "service_orders"

    id = Column(Integer, primary_key=True, index=True)
    request_id = Column(Integer, ForeignKey("service_requests.id"), nullable=False, index=True)
    quote_id = Column(Integer, ForeignKey("quotes.id"), nullable=False, unique=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    scheduled_time_window = Column(String(100), nullable=False)
    completed_at = Column(DateTime, nullable=True)

    request = relationship("ServiceRequest", back_populates="order")
    quote = relationship("Quote")
    client = relationship("Client", back_populates="orders")
    bill = relationship("Bill", back_populates="order", uselist=False)
