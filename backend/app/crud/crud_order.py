from sqlalchemy.orm import Session
from typing import List
import logging

from fastapi import status

from .. import models
from ..utils import clock, error_response
from .crud_ledger import atomic

logger = logging.getLogger(__name__)


def get_order(db: Session, order_id: int) -> models.ServiceOrder:
    db_order = (
        db.query(models.ServiceOrder)
        .filter(models.ServiceOrder.id == order_id)
        .first()
    )
    if db_order is None:
        raise error_response(
            "Order not found",
            {"order_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return db_order


def _order_row(order: models.ServiceOrder, request: models.ServiceRequest) -> dict:
    return {
        "order_id": order.id,
        "request_id": order.request_id,
        "quote_id": order.quote_id,
        "price": order.price,
        "scheduled_time_window": order.scheduled_time_window,
        "created_at": order.created_at,
        "completed_at": order.completed_at,
        "service_address": request.service_address,
        "cleaning_type": request.cleaning_type,
    }


def list_orders_for_client(db: Session, client_id: int) -> List[dict]:
    rows = (
        db.query(models.ServiceOrder, models.ServiceRequest)
        .join(models.ServiceRequest, models.ServiceRequest.id == models.ServiceOrder.request_id)
        .filter(models.ServiceOrder.client_id == client_id)
        .order_by(models.ServiceOrder.id.desc())
        .all()
    )
    return [_order_row(order, req) for order, req in rows]


def list_all_orders(db: Session) -> List[dict]:
    rows = (
        db.query(models.ServiceOrder, models.ServiceRequest, models.Client)
        .join(models.ServiceRequest, models.ServiceRequest.id == models.ServiceOrder.request_id)
        .join(models.Client, models.Client.id == models.ServiceOrder.client_id)
        .order_by(models.ServiceOrder.id.desc())
        .all()
    )
    result = []
    for order, req, client in rows:
        row = _order_row(order, req)
        row.update(
            client_id=client.id,
            first_name=client.first_name,
            last_name=client.last_name,
        )
        result.append(row)
    return result


def complete_order(db: Session, order_id: int) -> models.ServiceOrder:
    """Stamp the order as done. Calling it again moves the stamp."""
    db_order = get_order(db, order_id)
    with atomic(db, f"complete order {order_id}"):
        db_order.completed_at = clock.utcnow()
    db.refresh(db_order)
    logger.info("Order %s marked complete at %s", order_id, db_order.completed_at)
    return db_order
