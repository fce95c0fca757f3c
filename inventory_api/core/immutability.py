"""
Append-only enforcement for the stock ledger and the alert registry.

SQLAlchemy fires ``before_update`` / ``before_delete`` mapper events while
flushing, before any SQL reaches the database. Listeners registered here
raise ``ImmutabilityViolation`` for StockMovement and StockAlert rows, which
aborts the flush; the caller's rollback discards the rest of the unit.

Bulk ``query.update()`` / ``query.delete()`` statements bypass mapper events
and are not covered.
"""

import logging

from sqlalchemy import event

from inventory_api.core.exceptions import ImmutabilityViolation
from inventory_api.models.stock_alerts import StockAlert
from inventory_api.models.stock_movements import StockMovement

logger = logging.getLogger("inventory_api")

_PROTECTED = (StockMovement, StockAlert)


def _reject(operation: str):
    def listener(mapper, connection, target):
        entity_type = type(target).__name__
        logger.error(
            f"Blocked {operation} of append-only {entity_type} {target.id}"
        )
        raise ImmutabilityViolation(entity_type, target.id, operation)

    return listener


_reject_update = _reject("updated")
_reject_delete = _reject("deleted")


def register_immutability_listeners():
    """Install the listeners. Safe to call more than once."""
    for model in _PROTECTED:
        if not event.contains(model, "before_update", _reject_update):
            event.listen(model, "before_update", _reject_update)
        if not event.contains(model, "before_delete", _reject_delete):
            event.listen(model, "before_delete", _reject_delete)
