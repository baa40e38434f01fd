from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime
from sqlalchemy import Column, JSON

from app.constants.order_status import OrderStatus, PaymentStatus
from app.models.order_item import OrderItem
from app.models.user import User

class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_number: str = Field(index=True, unique=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    shipping_address: dict = Field(sa_column=Column(JSON, nullable=False))
    payment_method: str
    payment_status: str = Field(default=PaymentStatus.pending.value)
    payment_result: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    order_status: str = Field(default=OrderStatus.processing.value, index=True)

    subtotal: float = 0
    shipping_cost: float = 0
    tax: float = 0
    discount: float = 0
    total_amount: float

    delivered_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # relationships (important!)
    user: Optional["User"] = Relationship()
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={
            "cascade": "all, delete-orphan",
            "order_by": "OrderItem.id",
        },
    )
