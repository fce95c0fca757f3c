# =========================================================
# LOW STOCK NOTIFICATIONS
#
# The engine hands a notice to the dispatcher only after the
# stock transaction has committed. Delivery either runs on an
# outbound task runner (FastAPI BackgroundTasks) or inline,
# and a failed delivery is logged, never raised.
# =========================================================

import logging
from dataclasses import dataclass
from typing import Callable

from inventory_api.core.email import DeliveryReceipt, NotificationSink, render_low_stock_email
from inventory_api.core.exceptions import DeliveryError

logger = logging.getLogger("inventory_api")


@dataclass(frozen=True)
class LowStockNotice:
    product_id: int
    product_name: str
    stock: int


class NotificationDispatcher:
    def __init__(
        self,
        sink: NotificationSink,
        recipient: str,
        schedule: Callable | None = None,
    ):
        self.sink = sink
        self.recipient = recipient
        # e.g. BackgroundTasks.add_task; None delivers inline
        self.schedule = schedule

    def dispatch(self, notice: LowStockNotice) -> None:
        if self.schedule is not None:
            self.schedule(self.deliver, notice)
            return

        self.deliver(notice)

    def deliver(self, notice: LowStockNotice) -> DeliveryReceipt | None:
        subject, body = render_low_stock_email(notice.product_name, notice.stock)

        try:
            receipt = self.sink.send(self.recipient, subject, body)
        except DeliveryError as e:
            logger.error(
                f"Low stock notification failed for product {notice.product_id}: {e.message}"
            )
            return None

        logger.info(
            f"Low stock notification sent for product {notice.product_id} "
            f"to {self.recipient} (id={receipt.message_id})"
        )
        return receipt
