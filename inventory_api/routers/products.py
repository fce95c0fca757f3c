# inventory_api/routers/products.py
#
# Catalog management. Stock is only set at creation time here;
# every later change goes through the inventory engine.

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from inventory_api.database import get_db
from inventory_api.core.exceptions import ConcurrentUpdateError
from inventory_api.core.security import get_admin_user
from inventory_api.models.products import Product, ProductStatus
from inventory_api.schemas.product import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
)
from inventory_api.services import queries

router = APIRouter(
    prefix="/products",
    tags=["Products"],
)

logger = logging.getLogger("inventory_api")

# NOT NULL columns: a null in a PATCH body leaves them unchanged
NON_NULLABLE_FIELDS = ("name", "description", "price", "category", "minimum_stock")


def _ensure_unique_name(db: Session, name: str, exclude_id: int | None = None):
    query = db.query(Product).filter(Product.name == name)

    if exclude_id is not None:
        query = query.filter(Product.id != exclude_id)

    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Product with this name already exists",
        )


def _commit_catalog_change(db: Session, product_id: int):
    # A stock write bumped the version since this request read the row
    try:
        db.commit()
    except StaleDataError:
        db.rollback()
        logger.warning(f"Catalog change on product {product_id} lost a race with a stock update")
        raise ConcurrentUpdateError(
            f"Product {product_id} was modified concurrently, reload and try again"
        )


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_product(
    product_data: ProductCreate,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    _ensure_unique_name(db, product_data.name)

    product = Product(
        **product_data.model_dump(),
        status=(
            ProductStatus.OUT_OF_STOCK
            if product_data.stock == 0
            else ProductStatus.ACTIVE
        ),
    )

    db.add(product)
    db.commit()
    db.refresh(product)

    logger.info(f"Product {product.id} created by user {admin.id}")

    return product


@router.get("", response_model=list[ProductResponse])
def list_products(db: Session = Depends(get_db)):
    return queries.list_active_products(db)


@router.get("/{product_id}", response_model=ProductResponse)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return queries.get_product(db, product_id)


@router.patch("/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    product = queries.get_product(db, product_id)

    changes = product_data.model_dump(exclude_unset=True)

    if changes.get("name") is not None:
        _ensure_unique_name(db, changes["name"], exclude_id=product.id)

    for field, value in changes.items():
        if value is None and field in NON_NULLABLE_FIELDS:
            continue
        setattr(product, field, value)

    _commit_catalog_change(db, product_id)
    db.refresh(product)

    return product


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(
    product_id: int,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    # Soft delete: ledger entries and alerts keep pointing at the row
    product = queries.get_product(db, product_id)

    product.status = ProductStatus.INACTIVE
    _commit_catalog_change(db, product_id)

    logger.info(f"Product {product_id} deactivated by user {admin.id}")

    return None
