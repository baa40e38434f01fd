from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from app.database import get_session
from app.dependencies.admin import require_admin
from app.models.user import User
from app.schemas.orders_schemas import OrderRead, OrderStatusUpdate, PlaceOrderRequest
from app.services import order_service
from app.utils.token import get_current_user

router = APIRouter()


def _order_payload(order) -> dict:
    return OrderRead.model_validate(order).model_dump(mode="json")


# Create Order

@router.post("", status_code=status.HTTP_201_CREATED)
def create_order(
    data: PlaceOrderRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.place_order(
        session,
        user_id=current_user.id,
        shipping_address=data.shipping_address.model_dump(),
        payment_method=data.payment_method,
        payment_result=data.payment_result.model_dump() if data.payment_result else None,
    )

    return {"success": True, "data": _order_payload(order)}


# My Orders

@router.get("")
def list_my_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    orders = order_service.get_orders_for_user(session, current_user.id)

    return {
        "success": True,
        "count": len(orders),
        "data": [_order_payload(o) for o in orders],
    }


# All Orders (admin). Declared before /{order_id} so "admin" is not read as an id.

@router.get("/admin/all")
def list_all_orders(
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    orders, total_revenue = order_service.get_all_orders(session)

    return {
        "success": True,
        "count": len(orders),
        "total_revenue": total_revenue,
        "data": [_order_payload(o) for o in orders],
    }


@router.get("/{order_id}")
def order_details(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = order_service.get_order_by_id(
        session,
        order_id,
        requester_id=current_user.id,
        requester_role=current_user.role,
    )

    return {"success": True, "data": _order_payload(order)}


@router.put("/{order_id}/status")
def update_status(
    order_id: int,
    data: OrderStatusUpdate,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin)
):
    order = order_service.update_order_status(
        session,
        order_id,
        order_status=data.order_status,
        payment_status=data.payment_status,
    )

    return {"success": True, "data": _order_payload(order)}
