# deltacare/routers/cart.py
import uuid
from typing import Iterator

from fastapi import APIRouter, Depends

from deltacare.core.auth import ClientFactory, get_client_factory, get_current_session
from deltacare.repositories.cart_repo import CartRepository
from deltacare.repositories.catalog_repo import CatalogRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.cart import CartSummary, CartItemCreate, CartItemUpdate
from deltacare.services.cart_service import CartSynchronizer
from deltacare.services.catalog_service import CatalogService

router = APIRouter(prefix="/cart", tags=["Cart"])

cart_repo = CartRepository()
catalog = CatalogService(CatalogRepository())


def get_cart(
    session: Session | None = Depends(get_current_session),
    client_factory: ClientFactory = Depends(get_client_factory),
) -> Iterator[CartSynchronizer]:
    """
    Request-scoped cart bound to the caller's session.

    Guests get an empty cart; mutations then answer 401.
    """
    cart = CartSynchronizer(cart_repo, client_factory)
    cart.initialize(session)
    try:
        yield cart
    finally:
        cart.dispose()


@router.get("", response_model=CartSummary)
def get_my_cart(cart: CartSynchronizer = Depends(get_cart)):
    """
    Get current user's cart (lines, item_count, subtotal).
    """
    return cart.summary()


@router.post("", response_model=CartSummary)
def add_to_cart(
    payload: CartItemCreate,
    cart: CartSynchronizer = Depends(get_cart),
):
    """
    Add one unit of a medicine to the current user's cart.

    Returns the updated cart.
    """
    cart.require_session("Please login to add items to cart")
    medicine = catalog.get_medicine(cart.client, payload.medicine_id)
    cart.add_item(medicine)
    return cart.summary("Added to cart")


@router.patch("/{medicine_id}", response_model=CartSummary)
def update_cart_item(
    medicine_id: uuid.UUID,
    payload: CartItemUpdate,
    cart: CartSynchronizer = Depends(get_cart),
):
    """
    Set the quantity of a medicine in the cart (< 1 removes it).
    """
    cart.set_quantity(medicine_id, payload.quantity)
    return cart.summary()


@router.delete("/{medicine_id}", response_model=CartSummary)
def remove_cart_item(
    medicine_id: uuid.UUID,
    cart: CartSynchronizer = Depends(get_cart),
):
    """
    Remove a medicine from the cart.
    """
    cart.remove_item(medicine_id)
    return cart.summary("Removed from cart")


@router.delete("", response_model=CartSummary)
def clear_cart(cart: CartSynchronizer = Depends(get_cart)):
    """
    Clear the entire cart.
    """
    cart.clear()
    return cart.summary()
