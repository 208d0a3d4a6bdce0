# deltacare/routers/auth.py
from fastapi import APIRouter, Depends
from supabase import Client

from deltacare.core.auth import get_current_session, require_auth
from deltacare.core.config import get_settings
from deltacare.core.supabase_client import supabase_admin, supabase_anon
from deltacare.repositories.role_repo import RoleRepository
from deltacare.schemas.auth import (
    AuthResult,
    Session,
    SessionRead,
    SignInRequest,
    SignOutResult,
    SignUpRequest,
)
from deltacare.services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])

repo = RoleRepository()
service = AuthService(repo)


def get_auth_client() -> Client:
    """Fresh anon client per sign-in / sign-up."""
    return supabase_anon()


def get_admin_client() -> Client | None:
    """Service-role client, or None when no service role key is configured."""
    if not get_settings().SUPABASE_SERVICE_ROLE_KEY:
        return None
    return supabase_admin()


@router.post("/sign-in", response_model=AuthResult)
def sign_in(
    payload: SignInRequest,
    client: Client = Depends(get_auth_client),
):
    """
    Sign in with email + password.

    `redirect_to` is the dashboard for the user's role:
      customer -> /dashboard, doctor -> /doctor/dashboard,
      wholesale -> /wholesale/dashboard, admin -> /admin
    """
    return service.sign_in(client, payload)


@router.post("/sign-up", response_model=AuthResult, status_code=201)
def sign_up(
    payload: SignUpRequest,
    client: Client = Depends(get_auth_client),
):
    """
    Create a customer account.
    """
    return service.sign_up(client, payload)


@router.post("/sign-out", response_model=SignOutResult)
def sign_out(
    session: Session = Depends(require_auth),
    admin_client: Client | None = Depends(get_admin_client),
):
    return service.sign_out(admin_client, session)


@router.get("/session", response_model=SessionRead | None)
def read_session(session: Session | None = Depends(get_current_session)):
    """
    Current session, or null for guests.
    """
    if session is None:
        return None
    return SessionRead(user_id=session.user_id, email=session.email)
