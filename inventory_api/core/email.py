import logging
from dataclasses import dataclass
from typing import Protocol

import requests

from inventory_api.core.config import settings
from inventory_api.core.exceptions import DeliveryError

logger = logging.getLogger("inventory_api")

RESEND_EMAILS_URL = "https://api.resend.com/emails"


@dataclass(frozen=True)
class DeliveryReceipt:
    message_id: str | None
    recipient: str


class NotificationSink(Protocol):
    def send(self, recipient: str, subject: str, body: str) -> DeliveryReceipt:
        """Deliver one message or raise DeliveryError."""
        ...


def render_low_stock_email(product_name: str, stock: int) -> tuple[str, str]:
    subject = f"Low stock: {product_name}"
    body = f"""
Hi,

The product "{product_name}" has reached a critical stock level.

Units remaining: {stock}

Please restock it before it runs out.

— Inventory Service
"""
    return subject, body


class ResendNotificationSink:
    """Sends plain text e-mail through the Resend HTTP API."""

    def __init__(
        self,
        api_key: str,
        from_email: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.api_key = api_key
        self.from_email = from_email
        self.timeout = timeout
        self.http = session or requests.Session()

    def send(self, recipient: str, subject: str, body: str) -> DeliveryReceipt:
        payload = {
            "from": self.from_email,
            "to": [recipient],
            "subject": subject,
            "text": body,
        }

        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

        try:
            response = self.http.post(
                RESEND_EMAILS_URL,
                json=payload,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise DeliveryError(f"Email sending failed: {e}") from e

        if response.status_code >= 400:
            raise DeliveryError(f"Email sending failed: {response.text}")

        try:
            message_id = response.json().get("id")
        except ValueError:
            message_id = None

        return DeliveryReceipt(message_id=message_id, recipient=recipient)


class LoggingNotificationSink:
    """Stands in for e-mail when no Resend key is configured."""

    def send(self, recipient: str, subject: str, body: str) -> DeliveryReceipt:
        logger.info(f"Email to {recipient} not sent (no provider configured): {subject}")
        return DeliveryReceipt(message_id=None, recipient=recipient)


def build_notification_sink() -> NotificationSink:
    if not settings.RESEND_API_KEY:
        return LoggingNotificationSink()

    return ResendNotificationSink(
        api_key=settings.RESEND_API_KEY,
        from_email=settings.RESEND_FROM_EMAIL,
        timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
    )
