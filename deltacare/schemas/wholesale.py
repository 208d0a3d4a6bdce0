# deltacare/schemas/wholesale.py
import uuid
from datetime import datetime
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

WholesaleTab = Literal["dashboard", "products", "quotes", "profile"]
WholesaleStatus = Literal["needs_registration", "pending_verification", "verified"]

VERIFICATION_PENDING = (
    "Verification Pending. Your account is under review. "
    "You will be notified once it is approved."
)


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("field cannot be empty")
    return v


class WholesaleProfileCreate(SQLModel):
    """
    Business registration of a wholesale buyer.

    Profiles start unverified; an admin flips `is_verified` in the store.
    """

    model_config = ConfigDict(extra="forbid")

    business_name: str = Field(max_length=200)
    business_type: str | None = None
    contact_person: str = Field(max_length=100)
    phone: str = Field(max_length=20)
    email: EmailStr
    business_address: str
    business_city: str
    business_state: str
    business_pincode: str = Field(max_length=10)
    gst_number: str | None = None
    drug_license_number: str | None = None
    pan_number: str | None = None

    @field_validator(
        "business_name",
        "contact_person",
        "phone",
        "business_address",
        "business_city",
        "business_state",
        "business_pincode",
    )
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)


class WholesaleProfile(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    user_id: uuid.UUID
    business_name: str
    business_type: str | None = None
    contact_person: str | None = None
    phone: str | None = None
    email: str | None = None
    business_address: str | None = None
    business_city: str | None = None
    business_state: str | None = None
    business_pincode: str | None = None
    gst_number: str | None = None
    drug_license_number: str | None = None
    pan_number: str | None = None
    is_verified: bool = False
    created_at: datetime | None = None


class WholesaleProduct(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    name: str
    category: str | None = None
    price: float | None = None
    stock_quantity: int | None = None


class QuoteItem(SQLModel):
    model_config = ConfigDict(extra="forbid")

    product_name: str = Field(max_length=200)
    quantity: int = Field(ge=1)
    notes: str | None = None

    @field_validator("product_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        return _strip_required(v)


class QuoteItemRead(SQLModel):
    """Stored quote line; older rows were written without validation."""

    model_config = ConfigDict(extra="allow")

    product_name: str | None = None
    quantity: int | None = None
    notes: str | None = None


class QuoteCreate(SQLModel):
    """
    A quote request: at least one item, each with a product name and a
    quantity of 1 or more.
    """

    model_config = ConfigDict(extra="forbid")

    items: list[QuoteItem] = Field(min_length=1)
    notes: str | None = Field(default=None, max_length=2000)
    request_id: uuid.UUID | None = None


class QuoteRead(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    user_id: uuid.UUID
    items: list[QuoteItemRead] = []
    notes: str | None = None
    status: str
    created_at: datetime | None = None


class QuoteResult(SQLModel):
    quote: QuoteRead
    message: str


class WholesaleStats(SQLModel):
    total_quotes: int
    pending_quotes: int


class WholesaleDashboard(SQLModel):
    """
    Wholesale hub, gated by registration and verification.

      - needs_registration: only `status` is set
      - pending_verification: `profile` and `notice`, no tab data
      - verified: `profile` plus the data of the requested `tab`
    """

    status: WholesaleStatus
    tab: WholesaleTab
    profile: WholesaleProfile | None = None
    notice: str | None = None
    stats: WholesaleStats | None = None
    products: list[WholesaleProduct] | None = None
    quotes: list[QuoteRead] | None = None
