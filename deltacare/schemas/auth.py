# deltacare/schemas/auth.py
import uuid

from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel, Field

from deltacare.core.roles import Role


class Session(SQLModel):
    """
    Identity of the current caller, taken from a verified Supabase JWT.

    `access_token` is forwarded to Supabase so RLS sees the same user.
    """

    user_id: uuid.UUID
    email: str | None = None
    full_name: str | None = None
    access_token: str


class SignInRequest(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    password: str = Field(min_length=1)


class SignUpRequest(SQLModel):
    """
    Self-service sign-up.

    New users can only sign up as customers; doctor and wholesale
    accounts are created by an admin.
    """

    model_config = ConfigDict(extra="forbid")

    full_name: str = Field(max_length=100)
    email: EmailStr
    phone: str = Field(max_length=20)
    password: str = Field(min_length=6)

    @field_validator("full_name", "phone")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field cannot be empty")
        return v


class AuthResult(SQLModel):
    """
    Outcome of sign-in / sign-up.

    `redirect_to` is the route the frontend must navigate to;
    `message` is the toast to show, if any.
    """

    user_id: uuid.UUID | None = None
    access_token: str | None = None
    refresh_token: str | None = None
    role: Role = Role.CUSTOMER
    redirect_to: str
    message: str | None = None


class SessionRead(SQLModel):
    user_id: uuid.UUID
    email: str | None = None


class SignOutResult(SQLModel):
    redirect_to: str
