from pydantic import BaseModel, Field
from datetime import datetime

from inventory_api.models.stock_movements import MovementType


class StockUpdate(BaseModel):
    quantity: int = Field(
        ...,
        description="Signed change: positive for inbound, negative for outbound",
    )


class StockUpdateResponse(BaseModel):
    product_id: int
    new_stock: int


class StockMovementResponse(BaseModel):
    id: int
    product_id: int
    user_id: int
    quantity: int
    movement_type: MovementType
    created_at: datetime

    class Config:
        from_attributes = True


class StockAlertResponse(BaseModel):
    id: int
    product_id: int
    message: str
    created_at: datetime

    class Config:
        from_attributes = True
