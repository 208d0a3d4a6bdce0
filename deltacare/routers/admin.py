# deltacare/routers/admin.py
import uuid

from fastapi import APIRouter, Depends, Query, status
from supabase import Client

from deltacare.core.auth import get_client, require_admin
from deltacare.repositories.admin_repo import AdminRepository
from deltacare.schemas.admin import (
    AdminSettings,
    AdminSettingsUpdate,
    DoctorCreate,
    StaffUserCreate,
    StaffUserResult,
)
from deltacare.schemas.catalog import Doctor
from deltacare.services.admin_service import AdminService

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
)

repo = AdminRepository()
service = AdminService(repo)


# -------- Doctors --------


@router.get("/doctors", response_model=list[Doctor])
def list_doctors(
    search: str | None = Query(None, max_length=100),
    client: Client = Depends(get_client),
):
    """
    All doctors (available or not), filtered by name or specialty.
    """
    return service.list_doctors(client, search)


@router.post(
    "/doctors",
    response_model=Doctor,
    status_code=status.HTTP_201_CREATED,
)
def add_doctor(
    payload: DoctorCreate,
    client: Client = Depends(get_client),
):
    return service.add_doctor(client, payload)


@router.delete(
    "/doctors/{doctor_id}",
    status_code=status.HTTP_204_NO_CONTENT,
)
def delete_doctor(
    doctor_id: uuid.UUID,
    client: Client = Depends(get_client),
):
    service.delete_doctor(client, doctor_id)


# -------- Settings --------


@router.get("/settings", response_model=AdminSettings)
def get_settings(client: Client = Depends(get_client)):
    return service.get_settings(client)


@router.put("/settings", response_model=AdminSettings)
def update_settings(
    payload: AdminSettingsUpdate,
    client: Client = Depends(get_client),
):
    """
    Save store settings (single row, created on first save).
    """
    return service.update_settings(client, payload)


# -------- Users --------


@router.post(
    "/users",
    response_model=StaffUserResult,
    status_code=status.HTTP_201_CREATED,
)
def create_staff_user(
    payload: StaffUserCreate,
    client: Client = Depends(get_client),
):
    """
    Create a doctor or wholesale account.

    The admin's token is forwarded to the `create-user` function, which
    checks it before creating the account.
    """
    return service.create_staff_user(client, payload)
