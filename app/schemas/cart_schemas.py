from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, PositiveInt
from sqlmodel import SQLModel

class CartAddRequest(SQLModel):
    product_id: int
    quantity: PositiveInt = 1
    color: Optional[str] = None

class CartUpdateRequest(SQLModel):
    quantity: PositiveInt


class CartItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_id: int
    product_name: str
    image: Optional[str] = None
    quantity: int
    price: float
    color: Optional[str] = None


class CartRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    items: List[CartItemRead]
    total_items: int
    total_price: float
    updated_at: datetime
