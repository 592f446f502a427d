from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from typing import List

from core.db import get_db, is_storable_id
from models.product import Product
from schemas.auth import TokenClaims
from schemas.product import ProductCreate, ProductUpdate, ProductOut
from security.deps import require_admin

router = APIRouter(prefix="/products", tags=["products"])

# Columns that may be cleared to NULL by sending an empty string
_NULLABLE_FIELDS = {"image_url", "description"}


def _get_or_404(db: Session, product_id: int) -> Product:
    product = db.get(Product, product_id) if is_storable_id(product_id) else None
    if not product:
        raise HTTPException(status_code=404, detail="Not found")
    return product


@router.get("", response_model=List[ProductOut])
def list_products(db: Session = Depends(get_db)):
    return db.query(Product).order_by(Product.created_at.desc(), Product.id.desc()).all()


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return _get_or_404(db, product_id)


@router.post("", response_model=ProductOut, status_code=201)
def create_product(
    data: ProductCreate,
    _admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = Product(
        title=data.title,
        category=data.category,
        price=data.price,
        stock=data.stock,
        image_url=str(data.image_url) if data.image_url else None,
        description=data.description,
    )
    db.add(product)
    db.commit()
    db.refresh(product)
    return product


@router.put("/{product_id}", response_model=ProductOut)
def update_product(
    product_id: int,
    data: ProductUpdate,
    _admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = _get_or_404(db, product_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        if value is None and field not in _NULLABLE_FIELDS:
            continue
        if field == "image_url" and value is not None:
            value = str(value)
        setattr(product, field, value)

    db.commit()
    db.refresh(product)
    return product


@router.delete("/{product_id}")
def delete_product(
    product_id: int,
    _admin: TokenClaims = Depends(require_admin),
    db: Session = Depends(get_db),
):
    product = _get_or_404(db, product_id)
    db.delete(product)
    db.commit()
    return {"ok": True}
