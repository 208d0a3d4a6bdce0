# deltacare/schemas/catalog.py
import uuid

from pydantic import ConfigDict
from sqlmodel import SQLModel


class CategoryRef(SQLModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    slug: str | None = None


class Medicine(SQLModel):
    """
    Row of the `medicines` collection.

    Only the fields the storefront reads are declared; anything else the
    store returns is passed through untouched.
    """

    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    name: str
    brand: str | None = None
    generic_name: str | None = None
    price: float | None = None
    discount_percent: float | None = None
    image_url: str | None = None
    requires_prescription: bool = False
    is_active: bool = True
    categories: CategoryRef | None = None


class Doctor(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    name: str
    specialty: str | None = None
    qualification: str | None = None
    experience: int | None = None
    consultation_fee: float | None = None
    rating: float | None = None
    is_available: bool = True
    profile_image: str | None = None


class LabTest(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    name: str
    category: str | None = None
    price: float | None = None
    is_active: bool = True


class ScanTest(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    name: str
    type: str | None = None
    price: float | None = None
    is_active: bool = True


class HealthPackage(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    name: str
    price: float | None = None
    is_popular: bool = False
    is_active: bool = True
