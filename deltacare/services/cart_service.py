# deltacare/services/cart_service.py
import logging
import uuid
from typing import Callable

from fastapi import HTTPException
from supabase import Client

from deltacare.core.errors import REMOTE_ERRORS, auth_required, remote_failure
from deltacare.repositories.cart_repo import CartRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.cart import CartLine, CartSummary
from deltacare.schemas.catalog import Medicine
from deltacare.services.catalog_service import list_price

logger = logging.getLogger(__name__)


def line_from_row(row: dict) -> CartLine:
    """
    Build a CartLine from a `cart_items` row joined with `medicines`.

    Missing medicine data falls back to placeholders instead of failing
    the whole cart.
    """
    medicine = row.get("medicines") or {}
    price = medicine.get("price") or 0
    return CartLine(
        line_id=row.get("id"),
        medicine_id=row["medicine_id"],
        name=medicine.get("name") or "Unknown",
        brand=medicine.get("brand") or "",
        price=price,
        mrp=list_price(price, medicine.get("discount_percent")),
        quantity=row.get("quantity") or 1,
        image=medicine.get("image_url") or "💊",
        prescription=medicine.get("requires_prescription") or False,
    )


def line_from_medicine(medicine: Medicine, quantity: int = 1) -> CartLine:
    price = medicine.price or 0
    return CartLine(
        medicine_id=medicine.id,
        name=medicine.name or "Unknown",
        brand=medicine.brand or "",
        price=price,
        mrp=list_price(price, medicine.discount_percent),
        quantity=quantity,
        image=medicine.image_url or "💊",
        prescription=medicine.requires_prescription,
    )


class CartSynchronizer:
    """
    Per-session projection of the user's cart, kept consistent with the
    remote `cart_items` collection.

    Lifecycle:
      - initialize(session): bind a session (None => empty cart) and load
      - on_session_change(session): empty first, then bind the new user
      - dispose(): drop lines, session and client

    Mutations are optimistic: the projection changes immediately, then a
    single remote call is issued. If that call fails, the projection is
    reloaded from the store and a 502 is raised.

    Derived values (item_count, subtotal) are computed from the lines on
    every read.
    """

    def __init__(
        self,
        repo: CartRepository,
        client_factory: Callable[[Session | None], Client],
    ):
        self.repo = repo
        self.client_factory = client_factory
        self.session: Session | None = None
        self.client: Client | None = None
        self._lines: list[CartLine] = []

    # ---- lifecycle ----

    def initialize(self, session: Session | None) -> None:
        # never show the previous user's lines, even for one read
        self._lines = []
        self.session = session
        self.client = self.client_factory(session) if session else None
        if session is not None:
            self.load_for_user(session.user_id)

    def on_session_change(self, session: Session | None) -> None:
        current = self.session.user_id if self.session else None
        incoming = session.user_id if session else None
        if current == incoming and session is not None:
            # same user, refreshed token
            self.session = session
            self.client = self.client_factory(session)
            return
        self.initialize(session)

    def dispose(self) -> None:
        self._lines = []
        self.session = None
        self.client = None

    # ---- derived values ----

    @property
    def lines(self) -> list[CartLine]:
        return list(self._lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    @property
    def subtotal(self) -> float:
        return sum(line.line_total for line in self._lines)

    def summary(self, message: str | None = None) -> CartSummary:
        return CartSummary(
            items=self.lines,
            item_count=self.item_count,
            subtotal=self.subtotal,
            message=message,
        )

    def find(self, medicine_id: uuid.UUID) -> CartLine | None:
        for line in self._lines:
            if line.medicine_id == medicine_id:
                return line
        return None

    # ---- internal helpers ----

    def require_session(self, detail: str = "Authentication required") -> Session:
        if self.session is None or self.client is None:
            raise auth_required(detail)
        return self.session

    def _reconcile(self, exc: Exception, action: str, detail: str) -> HTTPException:
        """Log a failed mutation, resync with the store, build the error."""
        session = self.require_session()
        logger.error("Cart %s failed for user %s: %s", action, session.user_id, exc)
        self.load_for_user(session.user_id)
        return remote_failure(detail)

    # ---- public operations ----

    def load_for_user(self, user_id: uuid.UUID) -> None:
        """
        Replace the projection with a fresh read of the user's lines.

        A read error leaves an empty cart; it is logged, not raised.
        """
        if self.client is None:
            self._lines = []
            return
        try:
            rows = self.repo.list_for_user(self.client, user_id)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching cart for user %s: %s", user_id, exc)
            self._lines = []
            return
        self._lines = [line_from_row(row) for row in rows]

    def add_item(self, medicine: Medicine) -> None:
        """
        Add one unit of `medicine`.

        An existing line is incremented instead of duplicated.
        """
        session = self.require_session("Please login to add items to cart")

        existing = self.find(medicine.id)
        if existing is not None:
            self.set_quantity(medicine.id, existing.quantity + 1)
            return

        self._lines = self._lines + [line_from_medicine(medicine)]
        try:
            row = self.repo.create(self.client, session.user_id, medicine.id, 1)
        except REMOTE_ERRORS as exc:
            raise self._reconcile(exc, "add", "Failed to add to cart")

        line_id = uuid.UUID(str(row["id"])) if row.get("id") else None
        self._lines = [
            line.model_copy(update={"line_id": line_id})
            if line.medicine_id == medicine.id
            else line
            for line in self._lines
        ]

    def remove_item(self, medicine_id: uuid.UUID) -> None:
        session = self.require_session()

        self._lines = [line for line in self._lines if line.medicine_id != medicine_id]
        try:
            self.repo.delete(self.client, session.user_id, medicine_id)
        except REMOTE_ERRORS as exc:
            raise self._reconcile(exc, "remove", "Failed to remove item")

    def set_quantity(self, medicine_id: uuid.UUID, quantity: int) -> None:
        """
        Set the quantity of a line; anything below 1 removes it.
        """
        session = self.require_session()

        if quantity < 1:
            self.remove_item(medicine_id)
            return

        self._lines = [
            line.model_copy(update={"quantity": quantity})
            if line.medicine_id == medicine_id
            else line
            for line in self._lines
        ]
        try:
            self.repo.update_quantity(self.client, session.user_id, medicine_id, quantity)
        except REMOTE_ERRORS as exc:
            raise self._reconcile(exc, "update", "Failed to update quantity")

    def clear(self) -> None:
        """
        Delete every line of the user's cart.
        """
        session = self.require_session()

        self._lines = []
        try:
            self.repo.clear_user_cart(self.client, session.user_id)
        except REMOTE_ERRORS as exc:
            raise self._reconcile(exc, "clear", "Failed to clear cart")
