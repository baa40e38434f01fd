from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.constants.order_status import OrderStatus, PaymentMethod, PaymentStatus


class ShippingAddress(BaseModel):
    name: str = Field(min_length=1)
    phone: str = Field(min_length=1)
    street: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    country: str = Field(min_length=1)


class PaymentResult(BaseModel):
    id: Optional[str] = None
    status: Optional[str] = None
    update_time: Optional[str] = None


class PlaceOrderRequest(BaseModel):
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    payment_result: Optional[PaymentResult] = None


class OrderStatusUpdate(BaseModel):
    order_status: Optional[OrderStatus] = None
    payment_status: Optional[PaymentStatus] = None


class OrderItemRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    product_id: int
    name: str
    image: Optional[str] = None
    quantity: int
    price: float
    color: Optional[str] = None
    line_total: float


class CustomerSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str


class OrderRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    user_id: int
    user: Optional[CustomerSummary] = None
    items: List[OrderItemRead]
    shipping_address: ShippingAddress
    payment_method: PaymentMethod
    payment_status: PaymentStatus
    payment_result: Optional[PaymentResult] = None
    order_status: OrderStatus
    subtotal: float
    shipping_cost: float
    tax: float
    discount: float
    total_amount: float
    delivered_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
