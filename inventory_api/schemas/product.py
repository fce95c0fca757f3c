from decimal import Decimal
from pydantic import BaseModel, Field
from datetime import datetime

from inventory_api.models.products import ProductStatus


class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: str = ""

    price: Decimal = Field(
        ...,
        gt=0,
        lt=100_000_000,
        description="Price must be below 100 million"
    )

    category: str = Field(..., min_length=1)
    brand: str | None = None
    image_url: str | None = None

    stock: int = Field(0, ge=0, description="Opening stock")
    minimum_stock: int = Field(5, ge=0, description="Low stock alert threshold")


class ProductUpdate(BaseModel):
    # Stock is not editable here, use POST /inventory/{id}/stock
    name: str | None = Field(None, min_length=1)
    description: str | None = None
    price: Decimal | None = Field(None, gt=0, lt=100_000_000)
    category: str | None = Field(None, min_length=1)
    brand: str | None = None
    image_url: str | None = None
    minimum_stock: int | None = Field(None, ge=0)


class ProductResponse(BaseModel):
    id: int
    name: str
    description: str
    price: float
    category: str
    brand: str | None
    image_url: str | None
    stock: int
    minimum_stock: int
    status: ProductStatus
    created_at: datetime

    class Config:
        from_attributes = True
