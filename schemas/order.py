from datetime import datetime
from typing import List, Optional

from pydantic import AnyUrl, BaseModel, Field, field_validator


class OrderItemIn(BaseModel):
    # Absent for client-only cart items
    product_id: Optional[int] = None
    title: str = Field(min_length=1)
    price: float = Field(ge=0)
    qty: int = Field(gt=0)
    image_url: Optional[AnyUrl] = None

    @field_validator("image_url", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return None if value == "" else value


class OrderCreate(BaseModel):
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    delivery_location: Optional[str] = None
    delivery_fee: float = Field(default=0, ge=0)
    subtotal: float = Field(ge=0)
    total: float = Field(ge=0)
    payment_method: Optional[str] = None
    payment_info: Optional[str] = None
    source_url: Optional[str] = None
    items: List[OrderItemIn] = Field(min_length=1)

    @field_validator("delivery_fee", mode="before")
    @classmethod
    def default_delivery_fee(cls, value):
        return 0 if value is None else value


class OrderCreated(BaseModel):
    id: int
    created_at: datetime


class OrderItemOut(BaseModel):
    id: int
    order_id: int
    product_id: Optional[int] = None
    title: str
    price: float
    qty: int
    image_url: Optional[str] = None

    class Config:
        from_attributes = True


class OrderOut(BaseModel):
    id: int
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    delivery_location: Optional[str] = None
    delivery_fee: float
    subtotal: float
    total: float
    payment_method: Optional[str] = None
    payment_info: Optional[str] = None
    source_url: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


class OrderDetail(BaseModel):
    order: OrderOut
    items: List[OrderItemOut]
