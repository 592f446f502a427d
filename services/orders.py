"""Order placement.

An order and all of its line items are written in one transaction. Items
that reference a catalogue product decrement that product's stock, floored
at zero. Overselling is not rejected, only clamped.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import case, select, update
from sqlalchemy.orm import Session

from core.db import is_storable_id
from core.errors import OrderPersistenceError
from models.order import Order
from models.order_item import OrderItem
from models.product import Product
from schemas.order import OrderCreate, OrderItemIn

logger = logging.getLogger(__name__)

RECENT_ORDERS_LIMIT = 200


def _clamped_decrement(product_id: int, qty: int):
    # Single statement: the row is read and written by the database, not here
    return (
        update(Product)
        .where(Product.id == product_id)
        .values(stock=case((Product.stock > qty, Product.stock - qty), else_=0))
        .execution_options(synchronize_session=False)
    )


def _build_order(data: OrderCreate) -> Order:
    return Order(
        customer_name=data.customer_name or None,
        phone=data.phone or None,
        address=data.address or None,
        delivery_location=data.delivery_location or None,
        delivery_fee=data.delivery_fee or 0,
        subtotal=data.subtotal,
        total=data.total,
        payment_method=data.payment_method or None,
        payment_info=data.payment_info or None,
        source_url=data.source_url or None,
    )


def _build_item(order_id: int, item: OrderItemIn) -> OrderItem:
    return OrderItem(
        order_id=order_id,
        product_id=item.product_id,
        title=item.title,
        price=item.price,
        qty=item.qty,
        image_url=str(item.image_url) if item.image_url else None,
    )


def place_order(db: Session, data: OrderCreate) -> Order:
    """Persist ``data`` atomically and return the new order.

    Raises OrderPersistenceError after rolling back if any insert, stock
    update or the commit fails. The underlying cause is logged, never
    attached to the public message.
    """
    try:
        order = _build_order(data)
        db.add(order)
        db.flush()

        for item in data.items:
            db.add(_build_item(order.id, item))
            db.flush()
            if item.product_id is not None:
                db.execute(_clamped_decrement(item.product_id, item.qty))

        db.commit()
    except Exception as exc:
        db.rollback()
        logger.exception("Order save failed (%d items)", len(data.items))
        raise OrderPersistenceError(OrderPersistenceError.public_message) from exc

    logger.info("Order %s created with %d items", order.id, len(data.items))
    return order


def list_recent_orders(db: Session, limit: int = RECENT_ORDERS_LIMIT) -> List[Order]:
    limit = max(1, min(limit, RECENT_ORDERS_LIMIT))
    stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc()).limit(limit)
    return list(db.scalars(stmt))


def get_order_with_items(db: Session, order_id: int) -> Optional[Tuple[Order, List[OrderItem]]]:
    if not is_storable_id(order_id):
        return None
    order = db.get(Order, order_id)
    if order is None:
        return None
    items = list(db.scalars(select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)))
    return order, items
