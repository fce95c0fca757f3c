# =========================================================
# INVENTORY READ QUERIES
# Thin projections, no locking. Every list is newest first
# except list_critical, which makes no ordering promise.
# =========================================================

from datetime import datetime, timezone

from sqlalchemy.orm import Session

from inventory_api.core.exceptions import InvalidArgument, NotFound
from inventory_api.models.products import Product, ProductStatus
from inventory_api.models.stock_alerts import StockAlert
from inventory_api.models.stock_movements import StockMovement


def get_product(db: Session, product_id: int) -> Product:
    product = db.query(Product).filter(Product.id == product_id).first()

    if not product:
        raise NotFound.product(product_id)

    return product


def list_active_products(db: Session) -> list[Product]:
    return (
        db.query(Product)
        .filter(Product.status != ProductStatus.INACTIVE)
        .order_by(Product.id.desc())
        .all()
    )


def list_critical(db: Session) -> list[Product]:
    # Column-to-column comparison, evaluated by the database
    return (
        db.query(Product)
        .filter(
            Product.status != ProductStatus.INACTIVE,
            Product.stock <= Product.minimum_stock,
        )
        .all()
    )


def list_movements(db: Session, product_id: int) -> list[StockMovement]:
    get_product(db, product_id)

    return (
        db.query(StockMovement)
        .filter(StockMovement.product_id == product_id)
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        .all()
    )


def _as_utc(value, name: str) -> datetime:
    if not isinstance(value, datetime):
        raise InvalidArgument(f"{name} must be a datetime")

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)

    return value.astimezone(timezone.utc)


def list_movements_by_date_range(
    db: Session,
    start: datetime,
    end: datetime,
    product_id: int | None = None,
) -> list[StockMovement]:
    """
    Ledger entries with ``start <= created_at <= end``, optionally for one product.

    Naive bounds are read as UTC. An inverted range (start after end) is
    not an error, it simply matches nothing.
    """
    start = _as_utc(start, "start")
    end = _as_utc(end, "end")

    if start > end:
        return []

    query = db.query(StockMovement).filter(
        StockMovement.created_at >= start,
        StockMovement.created_at <= end,
    )

    if product_id is not None:
        query = query.filter(StockMovement.product_id == product_id)

    return (
        query
        .order_by(StockMovement.created_at.desc(), StockMovement.id.desc())
        .all()
    )


def list_alerts(db: Session, product_id: int | None = None) -> list[StockAlert]:
    query = db.query(StockAlert)

    if product_id is not None:
        get_product(db, product_id)
        query = query.filter(StockAlert.product_id == product_id)

    return query.order_by(StockAlert.created_at.desc(), StockAlert.id.desc()).all()
