# backend/app/models/client.py

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from .base import BaseModel


class Client(BaseModel):
    """A registered account. ``is_admin`` marks Anna, the marketplace operator."""

    __tablename__ = "clients"

    id                = Column(Integer, primary_key=True, index=True)
    first_name        = Column(String(100), nullable=False)
    last_name         = Column(String(100), nullable=False)
    email             = Column(String(255), unique=True, index=True, nullable=False)
    phone             = Column(String(50), nullable=True)
    address           = Column(String(255), nullable=True)
    # Only a token such as "tok_4242" is kept, never the card number
    credit_card_token = Column(String(64), nullable=True)
    password_hash     = Column(String(255), nullable=False)
    is_admin          = Column(Boolean, nullable=False, default=False)

    service_requests = relationship(
        "ServiceRequest",
        back_populates="client",
        cascade="all, delete-orphan",
    )
    orders = relationship("ServiceOrder", back_populates="client")
