# deltacare/schemas/admin.py
import uuid
from typing import Literal

from pydantic import ConfigDict, EmailStr, field_validator
from sqlmodel import SQLModel, Field

# Single row holding store-wide settings
SETTINGS_ID = uuid.UUID("00000000-0000-0000-0000-000000000001")

# Roles an admin may create accounts for
StaffRole = Literal["doctor", "wholesale"]


class DoctorCreate(SQLModel):
    """
    Admin payload for adding a doctor to the catalog.
    """

    model_config = ConfigDict(extra="forbid")

    name: str = Field(max_length=100)
    specialty: str = Field(max_length=100)
    qualification: str | None = Field(default=None, max_length=200)
    experience: int = Field(default=0, ge=0)
    consultation_fee: float = Field(default=0, ge=0)
    is_available: bool = True

    @field_validator("name", "specialty")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AdminSettings(SQLModel):
    """
    Store-wide settings.

    A missing settings row reads as these defaults.
    """

    model_config = ConfigDict(extra="allow")

    store_name: str = "DeltaCare"
    support_email: str | None = None
    stripe_pk: str | None = None
    stripe_sk: str | None = None


class AdminSettingsUpdate(SQLModel):
    model_config = ConfigDict(extra="forbid")

    store_name: str | None = Field(default=None, max_length=100)
    support_email: EmailStr | None = None
    stripe_pk: str | None = None
    stripe_sk: str | None = None


class StaffUserCreate(SQLModel):
    """
    Admin payload for creating a doctor or wholesale account.
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=6)
    full_name: str = Field(max_length=100)
    phone: str = Field(max_length=20)
    role: StaffRole

    @field_validator("full_name", "phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class StaffUserResult(SQLModel):
    user_id: uuid.UUID | None = None
    role: StaffRole
    message: str
