# deltacare/services/auth_service.py
import logging
import uuid

from fastapi import HTTPException, status
from supabase import AuthApiError, Client

from deltacare.core.errors import NO_ROWS, REMOTE_ERRORS, error_code, remote_failure
from deltacare.core.roles import HOME_ROUTE, Role, route_for
from deltacare.repositories.role_repo import RoleRepository
from deltacare.schemas.auth import (
    AuthResult,
    Session,
    SignInRequest,
    SignOutResult,
    SignUpRequest,
)

logger = logging.getLogger(__name__)

role_repo = RoleRepository()

ROLE_LOOKUP_FAILED = "Could not verify user role."


def resolve_role(client: Client, user_id: uuid.UUID) -> tuple[Role, str | None]:
    """
    Read the user's role record.

    Returns (role, notice):
      - record found      => (stored role, None)
      - no record         => (customer, None)
      - any other failure => (customer, ROLE_LOOKUP_FAILED)

    Never raises for remote failures: login must not be blocked by a
    broken role lookup; authorization is enforced by RLS.
    """
    try:
        raw = role_repo.get_role(client, user_id)
    except REMOTE_ERRORS as exc:
        if error_code(exc) == NO_ROWS:
            return Role.CUSTOMER, None
        logger.error("Role lookup failed for user %s: %s", user_id, exc)
        return Role.CUSTOMER, ROLE_LOOKUP_FAILED
    return Role.parse(raw), None


class AuthService:
    """
    Sign-in / sign-up / sign-out against Supabase Auth, plus role-based
    routing after authentication.
    """

    def __init__(self, repo: RoleRepository):
        self.repo = repo

    def sign_in(self, client: Client, payload: SignInRequest) -> AuthResult:
        """
        Authenticate with email + password and route by role.

        `client` must be a fresh anon client: signing in stores the
        session on it, and the role lookup then runs as the new user.
        """
        try:
            res = client.auth.sign_in_with_password(
                {"email": payload.email, "password": payload.password}
            )
        except AuthApiError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=exc.message or "Login failed. Please check your credentials.",
            )
        except REMOTE_ERRORS as exc:
            logger.error("Sign-in failed: %s", exc)
            raise remote_failure("Login failed. Please try again.")

        if res.user is None or res.session is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Login failed. Please check your credentials.",
            )

        user_id = uuid.UUID(str(res.user.id))
        role, notice = resolve_role(client, user_id)

        return AuthResult(
            user_id=user_id,
            access_token=res.session.access_token,
            refresh_token=res.session.refresh_token,
            role=role,
            redirect_to=route_for(role),
            message=notice,
        )

    def sign_up(self, client: Client, payload: SignUpRequest) -> AuthResult:
        """
        Create a customer account.

        Steps:
          1. Supabase sign-up with profile data (full_name, phone).
          2. Insert the customer role record.
          3. Route: customer dashboard when a session was issued right
             away, home page when email confirmation is pending.
        """
        try:
            res = client.auth.sign_up(
                {
                    "email": payload.email,
                    "password": payload.password,
                    "options": {
                        "data": {
                            "full_name": payload.full_name,
                            "phone": payload.phone,
                        }
                    },
                }
            )
        except AuthApiError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=exc.message or "Sign up failed",
            )
        except REMOTE_ERRORS as exc:
            logger.error("Sign-up failed: %s", exc)
            raise remote_failure("Sign up failed. Please try again.")

        if res.user is None:
            raise remote_failure("Sign up failed. Please try again.")

        user_id = uuid.UUID(str(res.user.id))
        try:
            self.repo.create(client, user_id, Role.CUSTOMER)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to set role for new user %s: %s", user_id, exc)
            raise remote_failure("Failed to set user role.")

        session = res.session
        return AuthResult(
            user_id=user_id,
            access_token=session.access_token if session else None,
            refresh_token=session.refresh_token if session else None,
            role=Role.CUSTOMER,
            redirect_to=route_for(Role.CUSTOMER) if session else HOME_ROUTE,
            message="Account created! Please check your email to verify.",
        )

    def sign_out(self, admin_client: Client | None, session: Session) -> SignOutResult:
        """
        Revoke the caller's refresh tokens when a service-role client is
        available. Access tokens stay valid until they expire; the frontend
        drops them either way.
        """
        if admin_client is None:
            logger.info("Sign-out for %s without revocation (no service role key)", session.user_id)
            return SignOutResult(redirect_to=HOME_ROUTE)

        try:
            admin_client.auth.admin.sign_out(session.access_token)
        except REMOTE_ERRORS as exc:
            logger.warning("Session revocation failed for %s: %s", session.user_id, exc)

        return SignOutResult(redirect_to=HOME_ROUTE)
