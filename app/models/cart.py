from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime


class Cart(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", unique=True, index=True)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    items: List["CartItem"] = Relationship(
        back_populates="cart",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "CartItem.id",
        },
    )

    @property
    def total_price(self) -> float:
        return round(sum(item.quantity * item.price for item in self.items), 2)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)


class CartItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    cart_id: int = Field(foreign_key="cart.id", index=True)

    # no FK: a deleted product leaves the line in place until checkout
    product_id: int = Field(index=True)
    product_name: str
    image: Optional[str] = None

    quantity: int = 1
    price: float  # unit price when added
    color: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    cart: Optional[Cart] = Relationship(back_populates="items")
