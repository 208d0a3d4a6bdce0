# deltacare/core/roles.py
from enum import Enum


class Role(str, Enum):
    """Application roles stored in the `user_roles` collection."""

    CUSTOMER = "customer"
    DOCTOR = "doctor"
    WHOLESALE = "wholesale"
    ADMIN = "admin"

    @classmethod
    def parse(cls, raw: str | None) -> "Role":
        """
        Map a stored role string to a Role.

        Missing or unknown values fall back to the least-privileged role.
        """
        try:
            return cls(raw)
        except ValueError:
            return cls.CUSTOMER


# Dashboard route for each role. Must cover every Role member.
ROLE_ROUTES: dict[Role, str] = {
    Role.CUSTOMER: "/dashboard",
    Role.DOCTOR: "/doctor/dashboard",
    Role.WHOLESALE: "/wholesale/dashboard",
    Role.ADMIN: "/admin",
}

HOME_ROUTE = "/"
SIGN_IN_ROUTE = "/auth"


def route_for(role: Role) -> str:
    return ROLE_ROUTES[role]
