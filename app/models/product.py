from sqlmodel import SQLModel, Field
from typing import Optional, List
from datetime import datetime
from sqlalchemy import CheckConstraint, Column, JSON


class Product(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
        CheckConstraint("price >= 0", name="ck_product_price_non_negative"),
    )

    #main info
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True)
    description: str = ""
    brand: Optional[str] = None
    category: Optional[str] = None

    #Shop Details
    price: float
    images: List[str] = Field(default_factory=list, sa_column=Column(JSON))
    stock: int = 0
    status: str = Field(default="active")  # active | inactive

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def primary_image(self) -> Optional[str]:
        return self.images[0] if self.images else None
