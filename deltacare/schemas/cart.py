# deltacare/schemas/cart.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class CartLine(SQLModel):
    """
    One product line of a user's cart.

    Display fields are a snapshot of the medicine taken at read time.
    `line_id` is None until the store has assigned one.
    """

    line_id: uuid.UUID | None = None
    medicine_id: uuid.UUID
    name: str
    brand: str = ""
    price: float = 0.0
    mrp: float = 0.0
    quantity: int = Field(default=1, ge=1)
    image: str = "💊"
    prescription: bool = False

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CartItemCreate(SQLModel):
    """
    Payload for adding a medicine to the cart.
    """

    model_config = ConfigDict(extra="forbid")

    medicine_id: uuid.UUID


class CartItemUpdate(SQLModel):
    """
    Payload for setting the quantity of a cart line.

    Quantities below 1 remove the line.
    """

    model_config = ConfigDict(extra="forbid")

    quantity: int


class CartSummary(SQLModel):
    """
    Cart projection returned to clients, with derived totals.
    """

    items: list[CartLine]
    item_count: int
    subtotal: float
    message: str | None = None
