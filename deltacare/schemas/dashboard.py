# deltacare/schemas/dashboard.py
from typing import Any

from sqlmodel import SQLModel


class ActionLink(SQLModel):
    to: str
    title: str
    description: str


# Fixed shortcuts shown on the customer dashboard
CUSTOMER_ACTIONS: tuple[ActionLink, ...] = (
    ActionLink(
        to="/profile",
        title="My Profile",
        description="Update your name, contact, and personal details.",
    ),
    ActionLink(
        to="/orders",
        title="My Orders",
        description="Track recent orders and view your purchase history.",
    ),
    ActionLink(
        to="/prescriptions",
        title="My Prescriptions",
        description="View and manage your uploaded prescriptions.",
    ),
    ActionLink(
        to="/consultations",
        title="My Consultations",
        description="Access records from your doctor appointments.",
    ),
)


class CustomerDashboard(SQLModel):
    """
    Everything the customer hub shows, in one response.

    Rows are passed through from the store (appointments embed their
    doctor, lab bookings embed the booked test or package).
    """

    full_name: str | None = None
    orders: list[dict[str, Any]]
    appointments: list[dict[str, Any]]
    lab_bookings: list[dict[str, Any]]
    prescriptions: list[dict[str, Any]]
    actions: list[ActionLink]


class DoctorDashboard(SQLModel):
    doctor: dict[str, Any] | None
    appointments: list[dict[str, Any]]
    message: str | None = None
