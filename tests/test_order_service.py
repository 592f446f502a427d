"""
Order placement against an injected session, without the HTTP layer.
"""
import logging

import pytest
from sqlalchemy.exc import OperationalError

from core.errors import OrderPersistenceError
from models.order import Order
from models.order_item import OrderItem
from schemas.order import OrderCreate
from services.orders import get_order_with_items, list_recent_orders, place_order


def _order(items, **fields):
    data = {"subtotal": 10, "total": 10, "items": items}
    data.update(fields)
    return OrderCreate(**data)


def test_place_order_returns_id_and_timestamp(db):
    order = place_order(db, _order([{"title": "Tea", "price": 10, "qty": 1}]))
    assert order.id is not None
    assert order.created_at is not None


def test_place_order_writes_one_row_per_item(db, make_product):
    product = make_product(stock=10)
    items = [{"title": f"Item {n}", "price": 1, "qty": 1, "product_id": product.id} for n in range(4)]
    order = place_order(db, _order(items))

    assert db.query(Order).count() == 1
    assert db.query(OrderItem).filter(OrderItem.order_id == order.id).count() == 4
    db.refresh(product)
    assert product.stock == 6


@pytest.mark.parametrize("stock,qty,expected", [(3, 1, 2), (3, 3, 0), (0, 1, 0), (2, 5, 0)])
def test_stock_decrement_is_clamped(db, make_product, stock, qty, expected):
    product = make_product(stock=stock)
    place_order(db, _order([{"title": "W", "price": 1, "qty": qty, "product_id": product.id}]))
    db.refresh(product)
    assert product.stock == expected


def test_commit_failure_rolls_back(db, make_product, monkeypatch, caplog):
    product = make_product(stock=3)

    def _boom():
        raise OperationalError("COMMIT", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db, "commit", _boom)
    with caplog.at_level(logging.ERROR, logger="services.orders"):
        with pytest.raises(OrderPersistenceError) as excinfo:
            place_order(db, _order([{"title": "W", "price": 1, "qty": 2, "product_id": product.id}]))
    monkeypatch.undo()

    assert str(excinfo.value) == "Order save failed"
    assert "disk I/O error" not in str(excinfo.value)
    # the cause is kept for the server log
    assert isinstance(excinfo.value.__cause__, OperationalError)
    assert "Order save failed" in caplog.text

    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0
    db.refresh(product)
    assert product.stock == 3


def test_unknown_product_reference_fails_whole_order(db):
    with pytest.raises(OrderPersistenceError):
        place_order(
            db,
            _order([
                {"title": "Real", "price": 1, "qty": 1},
                {"title": "Ghost", "price": 1, "qty": 1, "product_id": 777},
            ]),
        )
    assert db.query(Order).count() == 0
    assert db.query(OrderItem).count() == 0


def test_get_order_with_items_missing(db):
    assert get_order_with_items(db, 1) is None


def test_get_order_with_items(db):
    order = place_order(db, _order([{"title": "A", "price": 1, "qty": 1}, {"title": "B", "price": 1, "qty": 1}]))
    found, items = get_order_with_items(db, order.id)
    assert found.id == order.id
    assert [i.title for i in items] == ["A", "B"]


def test_list_recent_orders_caps_limit(db):
    for _ in range(3):
        place_order(db, _order([{"title": "A", "price": 1, "qty": 1}]))
    assert len(list_recent_orders(db, limit=2)) == 2
    assert len(list_recent_orders(db, limit=10_000)) == 3
