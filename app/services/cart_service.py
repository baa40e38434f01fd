# app/services/cart_service.py
from datetime import datetime
from typing import Iterable, Optional

from sqlmodel import Session, select

from app.exceptions import NotFoundError, ValidationError
from app.models.cart import Cart, CartItem
from app.services.inventory_service import get_product


def get_cart(session: Session, user_id: int) -> Optional[Cart]:
    return session.exec(select(Cart).where(Cart.user_id == user_id)).first()


def get_or_create_cart(session: Session, user_id: int) -> Cart:
    cart = get_cart(session, user_id)
    if cart:
        return cart

    cart = Cart(user_id=user_id)
    session.add(cart)
    session.commit()
    session.refresh(cart)
    return cart


def _require_cart(session: Session, user_id: int) -> Cart:
    cart = get_cart(session, user_id)
    if not cart:
        raise NotFoundError("Cart not found")
    return cart


def _save(session: Session, cart: Cart) -> Cart:
    cart.updated_at = datetime.utcnow()
    session.add(cart)
    session.commit()
    session.refresh(cart)
    return cart


# Add to Cart

def add_item(
    session: Session,
    user_id: int,
    product_id: int,
    quantity: int = 1,
    color: Optional[str] = None,
) -> Cart:
    if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
        raise ValidationError("Quantity must be a positive integer")

    product = get_product(session, product_id)
    if not product:
        raise NotFoundError("Product not found")

    if product.stock < quantity:
        raise ValidationError("Insufficient stock")

    cart = get_or_create_cart(session, user_id)

    # same product + same color variant is one line
    existing_item = next(
        (
            item for item in cart.items
            if item.product_id == product_id and item.color == color
        ),
        None,
    )

    if existing_item:
        new_quantity = existing_item.quantity + quantity
        if new_quantity > product.stock:
            available = product.stock - existing_item.quantity
            raise ValidationError(
                f"Cannot add {quantity}. Only {available} items available"
            )
        existing_item.quantity = new_quantity
        session.add(existing_item)
    else:
        cart.items.append(
            CartItem(
                product_id=product.id,
                product_name=product.name,
                image=product.primary_image,
                quantity=quantity,
                price=product.price,
                color=color,
            )
        )

    return _save(session, cart)


# Update Cart

def update_item(session: Session, user_id: int, item_id: int, quantity: int) -> Cart:
    if quantity < 1:
        raise ValidationError("Quantity must be a positive integer")

    cart = _require_cart(session, user_id)

    item = next((i for i in cart.items if i.id == item_id), None)
    if not item:
        raise NotFoundError("Item not found in cart")

    item.quantity = quantity
    session.add(item)
    return _save(session, cart)


# Remove Cart

def remove_item(session: Session, user_id: int, item_id: int) -> Cart:
    cart = _require_cart(session, user_id)
    set_items(session, cart, [item for item in cart.items if item.id != item_id])
    return _save(session, cart)


# Clear Cart

def set_items(session: Session, cart: Cart, items: Iterable[CartItem]) -> Cart:
    """Replace the cart's lines in place. Dropped lines are deleted on flush."""
    cart.items = list(items)
    cart.updated_at = datetime.utcnow()
    session.add(cart)
    return cart


def clear_cart(session: Session, user_id: int) -> Cart:
    cart = _require_cart(session, user_id)
    set_items(session, cart, [])
    return _save(session, cart)
