from fastapi import APIRouter, Depends
from sqlmodel import Session
from app.database import get_session
from app.models.user import User
from app.schemas.cart_schemas import CartAddRequest, CartRead, CartUpdateRequest
from app.services import cart_service
from app.utils.token import get_current_user  # JWT dependency


router = APIRouter()


def _cart_payload(cart) -> dict:
    return CartRead.model_validate(cart).model_dump(mode="json")


# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.get_or_create_cart(session, current_user.id)
    return {"success": True, "data": _cart_payload(cart)}


# Add to Cart

@router.post("/add")
def add_to_cart(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.add_item(
        session,
        current_user.id,
        product_id=data.product_id,
        quantity=data.quantity,
        color=data.color,
    )
    return {"success": True, "data": _cart_payload(cart)}


# Update Cart

@router.put("/update/{item_id}")
def update_cart_item(
    item_id: int,
    data: CartUpdateRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.update_item(session, current_user.id, item_id, data.quantity)
    return {"success": True, "data": _cart_payload(cart)}


# Remove Cart

@router.delete("/remove/{item_id}")
def remove_item(
    item_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.remove_item(session, current_user.id, item_id)
    return {"success": True, "data": _cart_payload(cart)}


# Clear Cart

@router.delete("/clear")
def clear_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    cart = cart_service.clear_cart(session, current_user.id)
    return {"success": True, "data": _cart_payload(cart)}
