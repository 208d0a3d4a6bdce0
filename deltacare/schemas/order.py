# deltacare/schemas/order.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, field_validator
from sqlmodel import SQLModel, Field

PaymentMethod = Literal["cod", "upi", "card"]
OrderStatus = Literal["pending", "confirmed", "shipped", "delivered", "cancelled"]


class OrderCreate(SQLModel):
    """
    Payload for creating an order from the current cart.

    User provides:
      - shipping details (full_name, phone, address, city, pincode)
      - payment_method (placeholder only, no payment is taken)
      - prescription_id when the cart holds prescription-only medicines

    Backend derives:
      - user_id from token
      - status = 'pending'
      - items, subtotal, delivery fee and total from the cart
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str
    phone: str
    address: str
    city: str
    pincode: str
    payment_method: PaymentMethod = "cod"
    prescription_id: uuid.UUID | None = None
    notes: str | None = Field(default=None, max_length=1000)
    request_id: uuid.UUID | None = None

    @field_validator("full_name", "phone", "address", "city", "pincode")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v

    @field_validator("notes")
    @classmethod
    def normalize_notes(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None


class OrderItem(SQLModel):
    """
    Snapshot of one cart line at checkout time.
    """

    medicine_id: uuid.UUID
    name: str
    price: float
    quantity: int
    line_total: float


class OrderRead(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    user_id: uuid.UUID
    full_name: str
    phone: str
    address: str
    city: str
    pincode: str
    payment_method: PaymentMethod
    items: list[OrderItem]
    subtotal: float
    delivery_fee: float
    total_amount: float
    status: str
    prescription_id: uuid.UUID | None = None
    created_at: datetime | None = None


class CheckoutResult(SQLModel):
    order: OrderRead
    message: str
    redirect_to: str
