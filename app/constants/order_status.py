from enum import Enum


class PaymentMethod(str, Enum):
    card = "card"
    paypal = "paypal"
    cod = "cod"


class PaymentStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"


# processing -> shipped -> delivered, cancelled from anywhere.
# Admins may set any status at any time, nothing here is enforced.
class OrderStatus(str, Enum):
    processing = "processing"
    shipped = "shipped"
    delivered = "delivered"
    cancelled = "cancelled"
