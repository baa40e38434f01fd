from sqlmodel import SQLModel, Field , Relationship
from typing import Optional , TYPE_CHECKING
from sqlalchemy import CheckConstraint

if TYPE_CHECKING:
    from app.models.order import Order

class OrderItem(SQLModel, table=True):
    __table_args__ = (
        CheckConstraint("quantity >= 1", name="ck_orderitem_quantity_positive"),
        CheckConstraint("price >= 0", name="ck_orderitem_price_non_negative"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)
    product_id: int = Field(index=True)

    name: str
    image: Optional[str] = None
    price: float
    quantity: int
    color: Optional[str] = None

    order: Optional["Order"] = Relationship(back_populates="items")

    @property
    def line_total(self) -> float:
        return round(self.price * self.quantity, 2)
