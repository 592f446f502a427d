from datetime import datetime
from pydantic import AnyUrl, BaseModel, Field, field_validator
from typing import Optional


class ProductCreate(BaseModel):
    title: str = Field(min_length=1)
    category: str = "General"
    price: float = Field(ge=0)
    stock: int = Field(default=0, ge=0)
    image_url: Optional[AnyUrl] = None
    description: Optional[str] = None

    @field_validator("image_url", "description", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return None if value == "" else value


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    stock: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[AnyUrl] = None
    description: Optional[str] = None

    @field_validator("image_url", "description", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        return None if value == "" else value


class ProductOut(BaseModel):
    id: int
    title: str
    category: str
    price: float
    stock: int
    image_url: Optional[str] = None
    description: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True
