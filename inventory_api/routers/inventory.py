# =========================================================
# INVENTORY ROUTER (ADMIN ONLY)
#
# - POST stock change -> InventoryEngine (single write path)
# - GET critical products, ledger, alerts -> read queries
#
# Domain errors (NotFound, InvalidArgument, InsufficientStock)
# are mapped to HTTP statuses by the handler in main.py.
# =========================================================

import logging
from datetime import datetime

from pydantic import TypeAdapter, ValidationError
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from inventory_api.database import get_db
from inventory_api.core.security import get_admin_user
from inventory_api.core.config import settings
from inventory_api.core.exceptions import InvalidArgument
from inventory_api.core.email import NotificationSink, build_notification_sink
from inventory_api.core.rate_limiter import limiter
from inventory_api.schemas.inventory import (
    StockAlertResponse,
    StockMovementResponse,
    StockUpdate,
    StockUpdateResponse,
)
from inventory_api.schemas.product import ProductResponse
from inventory_api.services import queries
from inventory_api.services.inventory import InventoryConfig, InventoryEngine
from inventory_api.services.notifications import NotificationDispatcher

router = APIRouter(
    prefix="/inventory",
    tags=["Inventory"],
)

logger = logging.getLogger("inventory_api")

_datetime_adapter = TypeAdapter(datetime)


def _parse_bound(name: str, raw: str) -> datetime:
    try:
        return _datetime_adapter.validate_python(raw)
    except ValidationError:
        raise InvalidArgument(f"{name} must be an ISO 8601 datetime, got {raw!r}")


def get_notification_sink() -> NotificationSink:
    return build_notification_sink()


def get_inventory_engine(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    sink: NotificationSink = Depends(get_notification_sink),
) -> InventoryEngine:
    config = InventoryConfig(
        admin_notification_address=settings.ADMIN_NOTIFICATION_EMAIL,
        max_conflict_retries=settings.STOCK_UPDATE_MAX_RETRIES,
    )

    # E-mail goes out after the response, outside the stock transaction
    dispatcher = NotificationDispatcher(
        sink=sink,
        recipient=config.admin_notification_address,
        schedule=background_tasks.add_task,
    )

    return InventoryEngine(db, config, dispatcher)


# =========================================================
# CHANGE STOCK
# =========================================================
@router.post("/{product_id}/stock", response_model=StockUpdateResponse)
@limiter.limit("30/minute")
def update_stock(
    request: Request,
    product_id: int,
    stock_data: StockUpdate,
    engine: InventoryEngine = Depends(get_inventory_engine),
    admin=Depends(get_admin_user),
):
    try:
        change = engine.apply_stock_delta(product_id, stock_data.quantity, admin.id)

    except SQLAlchemyError:
        logger.exception(f"Database error while updating stock of product {product_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Unable to update stock",
        )

    return StockUpdateResponse(product_id=change.product_id, new_stock=change.new_stock)


# =========================================================
# CRITICAL STOCK
# =========================================================
@router.get("/critical", response_model=list[ProductResponse])
def list_critical(
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    return queries.list_critical(db)


# =========================================================
# LEDGER
# =========================================================
@router.get("/movements", response_model=list[StockMovementResponse])
def list_movements_by_date_range(
    start: str = Query(..., description="Inclusive lower bound, ISO 8601"),
    end: str = Query(..., description="Inclusive upper bound, ISO 8601"),
    product_id: int | None = Query(None),
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    return queries.list_movements_by_date_range(
        db,
        _parse_bound("start", start),
        _parse_bound("end", end),
        product_id,
    )


@router.get("/{product_id}/movements", response_model=list[StockMovementResponse])
def list_movements(
    product_id: int,
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    return queries.list_movements(db, product_id)


# =========================================================
# ALERTS
# =========================================================
@router.get("/alerts", response_model=list[StockAlertResponse])
def list_alerts(
    product_id: int | None = Query(None),
    db: Session = Depends(get_db),
    admin=Depends(get_admin_user),
):
    return queries.list_alerts(db, product_id)
