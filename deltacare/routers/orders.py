# deltacare/routers/orders.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from supabase import Client

from deltacare.core.auth import get_client, require_auth
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.order_repo import OrderRepository
from deltacare.routers.cart import get_cart
from deltacare.schemas.auth import Session
from deltacare.schemas.order import CheckoutResult, OrderCreate, OrderRead
from deltacare.services.cart_service import CartSynchronizer
from deltacare.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository()
service = OrderService(order_repo, SubmissionRepository())


@router.post(
    "/checkout",
    response_model=CheckoutResult,
    status_code=status.HTTP_201_CREATED,
)
def checkout(
    payload: OrderCreate,
    cart: CartSynchronizer = Depends(get_cart),
):
    """
    Create an order from the current user's cart.

    Delivery is free from 500 upwards, 40 otherwise.
    """
    return service.checkout(cart, payload)


@router.get(
    "/me",
    response_model=list[OrderRead],
)
def list_my_orders(
    session: Session = Depends(require_auth),
    client: Client = Depends(get_client),
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    """
    List the authenticated user's orders, newest first.
    """
    return service.list_user_orders(client, session, skip, limit)


@router.get(
    "/me/{order_id}",
    response_model=OrderRead,
)
def get_my_order(
    order_id: uuid.UUID,
    session: Session = Depends(require_auth),
    client: Client = Depends(get_client),
):
    """
    Get a single order belonging to the current user.
    """
    return service.get_user_order(client, session, order_id)
