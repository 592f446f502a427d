from typing import List
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from core.db import get_db
from core.errors import OrderPersistenceError
from schemas.auth import TokenClaims
from schemas.order import OrderCreate, OrderCreated, OrderDetail, OrderItemOut, OrderOut
from security.deps import require_auth
from services.orders import get_order_with_items, list_recent_orders, place_order

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("", response_model=OrderCreated, status_code=201)
def create_order(data: OrderCreate, db: Session = Depends(get_db)):
    try:
        order = place_order(db, data)
    except OrderPersistenceError as e:
        raise HTTPException(status_code=500, detail=OrderPersistenceError.public_message) from e
    return OrderCreated(id=order.id, created_at=order.created_at)


@router.get("", response_model=List[OrderOut])
def list_orders(_user: TokenClaims = Depends(require_auth), db: Session = Depends(get_db)):
    return list_recent_orders(db)


@router.get("/{order_id}", response_model=OrderDetail)
def get_order(order_id: int, _user: TokenClaims = Depends(require_auth), db: Session = Depends(get_db)):
    found = get_order_with_items(db, order_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Not found")
    order, items = found
    return OrderDetail(
        order=OrderOut.model_validate(order),
        items=[OrderItemOut.model_validate(i) for i in items],
    )
