# app/services/order_service.py
"""Order placement, lookup and admin status updates.

``place_order`` runs as one unit of work on the given session: the order
insert, every stock decrement and the cart clear are committed together or
rolled back together.
"""
from datetime import datetime
from typing import List, Optional, Tuple
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from app.constants.order_status import OrderStatus, PaymentMethod, PaymentStatus
from app.exceptions import (
    AuthorizationError,
    EmptyCartError,
    InternalError,
    NotFoundError,
    StockUpdateFailedError,
    ValidationError,
)
from app.models.cart import Cart
from app.models.order import Order
from app.models.order_item import OrderItem
from app.services.cart_service import get_cart, set_items
from app.services.inventory_service import decrement_stock, get_product
from app.services.order_number import generate_order_number
from app.services.pricing import calculate_order_totals

logger = logging.getLogger(__name__)

ORDER_NUMBER_ATTEMPTS = 5


def _coerce(enum_cls, value, label: str) -> str:
    try:
        return enum_cls(value).value
    except ValueError:
        raise ValidationError(f"Invalid {label}: {value}")


def build_order_items(session: Session, cart: Cart) -> List[OrderItem]:
    """Snapshot the cart lines; name and image come from the live product when it still exists."""
    items = []
    for line in cart.items:
        product = get_product(session, line.product_id)

        items.append(
            OrderItem(
                product_id=line.product_id,
                name=product.name if product else line.product_name,
                image=product.primary_image if product else line.image,
                quantity=line.quantity,
                price=line.price,
                color=line.color,
            )
        )
    return items


def initial_payment_status(payment_method) -> str:
    if _coerce(PaymentMethod, payment_method, "payment method") == PaymentMethod.cod.value:
        return PaymentStatus.pending.value
    return PaymentStatus.paid.value


def assign_order_number(session: Session) -> str:
    for _ in range(ORDER_NUMBER_ATTEMPTS):
        candidate = generate_order_number()
        taken = session.exec(
            select(Order.id).where(Order.order_number == candidate)
        ).first()
        if taken is None:
            return candidate
        logger.warning(f"Order number collision on {candidate}, regenerating")

    raise InternalError("Could not allocate a unique order number")


def place_order(
    session: Session,
    user_id: int,
    shipping_address: dict,
    payment_method,
    payment_result: Optional[dict] = None,
) -> Order:
    payment_method = _coerce(PaymentMethod, payment_method, "payment method")
    cart = get_cart(session, user_id)

    if not cart or not cart.items:
        raise EmptyCartError()

    order_items = build_order_items(session, cart)
    totals = calculate_order_totals(cart.total_price)

    try:
        order = Order(
            order_number=assign_order_number(session),
            user_id=user_id,
            items=order_items,
            shipping_address=shipping_address,
            payment_method=payment_method,
            payment_result=payment_result,
            payment_status=initial_payment_status(payment_method),
            order_status=OrderStatus.processing.value,
            **totals,
        )
        session.add(order)
        session.flush()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Order creation failed for user {user_id}")
        raise InternalError("Order could not be created") from e

    order_number = order.order_number

    try:
        for item in order_items:
            if not decrement_stock(session, item.product_id, item.quantity):
                raise StockUpdateFailedError()
    except (StockUpdateFailedError, SQLAlchemyError) as e:
        # order row and every decrement so far go away together
        session.rollback()
        logger.warning(
            f"Rolled back order {order_number} for user {user_id}: stock update failed ({e!r})"
        )
        raise StockUpdateFailedError() from e

    set_items(session, cart, [])

    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Commit failed for order {order_number}")
        raise InternalError("Order could not be saved") from e

    session.refresh(order)
    logger.info(
        f"Order {order.order_number} placed by user {user_id}: "
        f"{len(order_items)} item(s), total {order.total_amount}"
    )
    return order


def get_orders_for_user(session: Session, user_id: int) -> List[Order]:
    return session.exec(
        select(Order)
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    ).all()


def get_order_by_id(
    session: Session,
    order_id: int,
    requester_id: int,
    requester_role: str,
) -> Order:
    order = session.get(Order, order_id)

    if not order:
        raise NotFoundError("Order not found")

    # Make sure user owns this order or is admin
    if order.user_id != requester_id and requester_role != "admin":
        raise AuthorizationError("Not authorized to view this order")

    return order


def update_order_status(
    session: Session,
    order_id: int,
    order_status=None,
    payment_status=None,
) -> Order:
    if order_status:
        order_status = _coerce(OrderStatus, order_status, "order status")
    if payment_status:
        payment_status = _coerce(PaymentStatus, payment_status, "payment status")

    order = session.get(Order, order_id)

    if not order:
        raise NotFoundError("Order not found")

    now = datetime.utcnow()

    if order_status:
        order.order_status = order_status
        if order.order_status == OrderStatus.delivered.value and order.delivered_at is None:
            order.delivered_at = now

    if payment_status:
        order.payment_status = payment_status

    order.updated_at = now
    session.add(order)
    session.commit()
    session.refresh(order)

    logger.info(
        f"Order {order.order_number} status -> {order.order_status}, "
        f"payment -> {order.payment_status}"
    )
    return order


def get_all_orders(session: Session) -> Tuple[List[Order], float]:
    orders = session.exec(
        select(Order).order_by(Order.created_at.desc(), Order.id.desc())
    ).all()

    total_revenue = round(sum(order.total_amount for order in orders), 2)
    return orders, total_revenue
