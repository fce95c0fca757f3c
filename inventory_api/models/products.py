# inventory_api/models/products.py

import enum

from sqlalchemy import CheckConstraint, Column, Enum, Index, Integer, String, Numeric, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from inventory_api.database import Base


class ProductStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    # Soft deleted by catalog management. Stock writes never clear it.
    INACTIVE = "INACTIVE"
    # Derived from stock == 0, reversible by any inbound movement.
    OUT_OF_STOCK = "OUT_OF_STOCK"


class Product(Base):
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False, unique=True)
    description = Column(Text, nullable=False, default="")
    price = Column(Numeric(10, 2), nullable=False)
    category = Column(String, nullable=False)
    brand = Column(String, nullable=True)
    image_url = Column(String, nullable=True)

    stock = Column(Integer, nullable=False, default=0)
    minimum_stock = Column(Integer, nullable=False, default=5)
    status = Column(
        Enum(ProductStatus, name="product_status"),
        nullable=False,
        default=ProductStatus.ACTIVE,
    )

    version = Column(Integer, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    movements = relationship("StockMovement", back_populates="product", order_by="StockMovement.id")
    alerts = relationship("StockAlert", back_populates="product", order_by="StockAlert.id")

    # Concurrent writers that slip past the row lock fail with StaleDataError
    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        Index("ix_products_status", "status"),
        CheckConstraint("name <> ''", name="ck_product_name_not_empty"),
        CheckConstraint("price > 0", name="ck_product_price_positive"),
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("minimum_stock >= 0", name="ck_product_minimum_stock_non_negative"),
    )

    @property
    def is_critical(self) -> bool:
        return self.status != ProductStatus.INACTIVE and self.stock <= self.minimum_stock
