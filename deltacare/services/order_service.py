# deltacare/services/order_service.py
import logging
import uuid

from fastapi import HTTPException, status
from supabase import Client

from deltacare.core.errors import REMOTE_ERRORS, bad_request, remote_failure
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.order_repo import OrderRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.order import CheckoutResult, OrderCreate, OrderItem, OrderRead
from deltacare.services.booking_service import DASHBOARD_ROUTE, submit_once
from deltacare.services.cart_service import CartSynchronizer

logger = logging.getLogger(__name__)

# Orders at or above this subtotal ship for free
FREE_DELIVERY_THRESHOLD = 500

# Flat delivery fee below the threshold
DELIVERY_FEE = 40


def delivery_fee_for(subtotal: float) -> float:
    return 0 if subtotal >= FREE_DELIVERY_THRESHOLD else DELIVERY_FEE


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create order from the cart projection
      - Require a prescription for prescription-only lines
      - Compute subtotal, delivery fee and total
      - Clear cart after success
    """

    def __init__(
        self,
        order_repo: OrderRepository,
        submissions: SubmissionRepository,
    ):
        self.order_repo = order_repo
        self.submissions = submissions

    # -------- User-facing operations --------

    def checkout(self, cart: CartSynchronizer, payload: OrderCreate) -> CheckoutResult:
        """
        Convert the current user's cart into an order.

        Steps:
          1. Require a session.
          2. A request id that already produced an order returns that order.
          3. Reject an empty cart.
          4. Require `prescription_id` if any line needs a prescription.
          5. Snapshot the lines and compute totals.
          6. Insert the order (status='pending'), once per request id.
          7. Clear the cart.
        """
        session = cart.require_session("Please login to checkout")

        if payload.request_id is not None:
            try:
                placed = self.submissions.get_by_request_id(
                    cart.client, "orders", session.user_id, payload.request_id
                )
            except REMOTE_ERRORS as exc:
                logger.error("Error looking up order request %s: %s", payload.request_id, exc)
                raise remote_failure("Failed to place order")
            if placed:
                # the cart was already cleared by the first attempt
                return CheckoutResult(
                    order=OrderRead.model_validate(placed),
                    message="Order placed successfully!",
                    redirect_to=DASHBOARD_ROUTE,
                )

        lines = cart.lines
        if not lines:
            raise bad_request("Cart is empty")

        if payload.prescription_id is None and any(line.prescription for line in lines):
            raise bad_request("Please upload a prescription for prescription medicines")

        items = [
            OrderItem(
                medicine_id=line.medicine_id,
                name=line.name,
                price=line.price,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in lines
        ]
        subtotal = cart.subtotal
        delivery_fee = delivery_fee_for(subtotal)

        request_id = payload.request_id or uuid.uuid4()
        row = {
            "user_id": str(session.user_id),
            "full_name": payload.full_name,
            "phone": payload.phone,
            "address": payload.address,
            "city": payload.city,
            "pincode": payload.pincode,
            "payment_method": payload.payment_method,
            "prescription_id": str(payload.prescription_id) if payload.prescription_id else None,
            "notes": payload.notes,
            "items": [item.model_dump(mode="json") for item in items],
            "subtotal": subtotal,
            "delivery_fee": delivery_fee,
            "total_amount": subtotal + delivery_fee,
            "status": "pending",
            "client_request_id": str(request_id),
        }
        stored = submit_once(self.submissions, cart.client, "orders", row, "Failed to place order")

        try:
            cart.clear()
        except HTTPException:
            # the order exists; a stale cart is reloaded on the next request
            logger.warning("Order %s placed but cart was not cleared", stored.get("id"))

        return CheckoutResult(
            order=OrderRead.model_validate(stored),
            message="Order placed successfully!",
            redirect_to=DASHBOARD_ROUTE,
        )

    def list_user_orders(
        self,
        client: Client,
        session: Session,
        skip: int = 0,
        limit: int = 50,
    ) -> list[OrderRead]:
        """
        List orders for the given user, newest first.
        """
        try:
            rows = self.order_repo.list_for_user(client, session.user_id, skip, limit)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching orders for user %s: %s", session.user_id, exc)
            raise remote_failure("Failed to load orders")
        return [OrderRead.model_validate(row) for row in rows]

    def get_user_order(
        self,
        client: Client,
        session: Session,
        order_id: uuid.UUID,
    ) -> OrderRead:
        """
        Get a single order of the user.

        - 404 if order not found or does not belong to this user.
        """
        try:
            row = self.order_repo.get_for_user(client, session.user_id, order_id)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching order %s: %s", order_id, exc)
            raise remote_failure("Failed to load order")
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return OrderRead.model_validate(row)
