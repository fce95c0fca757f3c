# =========================================================
# INVENTORY ENGINE
#
# The only code path that changes Product.stock.
#
# One call = one transaction:
# - product row locked (FOR UPDATE, plus the version counter
#   for databases that ignore row locks)
# - stock + status updated
# - one ledger entry appended
# - one alert appended when stock ends at or below minimum
#
# The low stock e-mail goes out only after commit and can
# never undo the mutation.
# =========================================================

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from inventory_api.core.exceptions import (
    ConcurrentUpdateError,
    InsufficientStock,
    InvalidArgument,
    NotFound,
)
from inventory_api.models.products import Product, ProductStatus
from inventory_api.models.stock_alerts import StockAlert
from inventory_api.models.stock_movements import MovementType, StockMovement
from inventory_api.services.notifications import LowStockNotice, NotificationDispatcher

logger = logging.getLogger("inventory_api")


@dataclass(frozen=True)
class InventoryConfig:
    admin_notification_address: str
    max_conflict_retries: int = 5


@dataclass(frozen=True)
class StockChange:
    product_id: int
    new_stock: int


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def render_alert_message(product_name: str, stock: int) -> str:
    return f'Product "{product_name}" is at a critical stock level ({stock} units)'


def next_status(current: ProductStatus, new_stock: int) -> ProductStatus:
    # Soft deleted products stay soft deleted
    if current == ProductStatus.INACTIVE:
        return current

    if new_stock == 0:
        return ProductStatus.OUT_OF_STOCK

    return ProductStatus.ACTIVE


class InventoryEngine:
    def __init__(
        self,
        db: Session,
        config: InventoryConfig,
        notifier: NotificationDispatcher,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.db = db
        self.config = config
        self.notifier = notifier
        self.clock = clock

    def apply_stock_delta(self, product_id: int, delta: int, actor_id: int) -> StockChange:
        """
        Add ``delta`` (signed) to the product's stock on behalf of ``actor_id``.

        Raises InvalidArgument for a zero or non-integer delta, NotFound for an
        unknown product and InsufficientStock when stock would go negative.
        Nothing is written in any of those cases. Not idempotent: the same
        call twice applies the delta twice.
        """
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise InvalidArgument("Stock change must be an integer")

        if delta == 0:
            raise InvalidArgument("Stock change cannot be zero")

        attempt = 0

        while True:
            attempt += 1

            try:
                change, notice = self._apply_once(product_id, delta, actor_id)
                break

            except StaleDataError:
                self.db.rollback()

                if attempt > self.config.max_conflict_retries:
                    logger.error(
                        f"Gave up updating stock of product {product_id} "
                        f"after {attempt} conflicting attempts"
                    )
                    raise ConcurrentUpdateError(
                        f"Stock of product {product_id} is being updated concurrently, try again"
                    )

                logger.warning(
                    f"Concurrent stock update on product {product_id}, "
                    f"retrying (attempt {attempt})"
                )

            except Exception:
                self.db.rollback()
                raise

        if notice is not None:
            self.notifier.dispatch(notice)

        return change

    def _apply_once(self, product_id: int, delta: int, actor_id: int):
        product = (
            self.db.query(Product)
            .filter(Product.id == product_id)
            .with_for_update()
            .populate_existing()
            .first()
        )

        if not product:
            raise NotFound.product(product_id)

        new_stock = product.stock + delta

        if new_stock < 0:
            logger.warning(
                f"Rejected stock change {delta:+d} on product {product.id}: "
                f"only {product.stock} in stock"
            )
            raise InsufficientStock(product.id, product.stock, delta)

        product.stock = new_stock
        product.status = next_status(product.status, new_stock)

        now = self.clock()

        self.db.add(
            StockMovement(
                product_id=product.id,
                user_id=actor_id,
                quantity=delta,
                movement_type=MovementType.for_delta(delta),
                created_at=now,
            )
        )

        notice = None

        if new_stock <= product.minimum_stock:
            self.db.add(
                StockAlert(
                    product_id=product.id,
                    message=render_alert_message(product.name, new_stock),
                    created_at=now,
                )
            )
            notice = LowStockNotice(
                product_id=product.id,
                product_name=product.name,
                stock=new_stock,
            )

        # Read before commit expires the instance
        minimum_stock = product.minimum_stock

        self.db.commit()

        logger.info(
            f"Stock of product {product_id} changed by {delta:+d} to {new_stock} "
            f"(user {actor_id})"
        )

        if notice is not None:
            logger.warning(
                f"Product {product_id} is at a critical stock level "
                f"({new_stock} <= {minimum_stock})"
            )

        return StockChange(product_id=product_id, new_stock=new_stock), notice
