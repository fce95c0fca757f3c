# models/stock_movements.py

import enum

from sqlalchemy import CheckConstraint, Column, Enum, Index, Integer, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from inventory_api.database import Base


class MovementType(str, enum.Enum):
    INBOUND = "INBOUND"
    OUTBOUND = "OUTBOUND"

    @classmethod
    def for_delta(cls, delta: int) -> "MovementType":
        return cls.INBOUND if delta > 0 else cls.OUTBOUND


class StockMovement(Base):
    """One row per applied stock delta. Append-only."""

    __tablename__ = "stock_movements"

    id = Column(Integer, primary_key=True, index=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    quantity = Column(Integer, nullable=False)
    movement_type = Column(Enum(MovementType, name="movement_type"), nullable=False)

    # Written by the engine's clock, not the database
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    product = relationship("Product", back_populates="movements")
    user = relationship("User")

    __table_args__ = (
        Index("ix_stock_movements_product_created", "product_id", "created_at"),
        CheckConstraint("quantity <> 0", name="ck_stock_movement_quantity_non_zero"),
    )
