# models/stock_alerts.py

from sqlalchemy import Column, Integer, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship

from inventory_api.database import Base


class StockAlert(Base):
    __tablename__ = "stock_alerts"

    id = Column(Integer, primary_key=True, index=True)

    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    message = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    product = relationship("Product", back_populates="alerts")

    def __repr__(self):
        return f"<StockAlert {self.id} for product {self.product_id}>"
