# deltacare/services/admin_service.py
import logging
import uuid

from fastapi import HTTPException, status
from supabase import Client, FunctionsHttpError

from deltacare.core.errors import NO_ROWS, REMOTE_ERRORS, bad_request, error_code, remote_failure
from deltacare.repositories.admin_repo import AdminRepository
from deltacare.schemas.admin import (
    AdminSettings,
    AdminSettingsUpdate,
    DoctorCreate,
    StaffUserCreate,
    StaffUserResult,
)
from deltacare.schemas.catalog import Doctor

logger = logging.getLogger(__name__)


class AdminService:
    """
    Business logic behind the admin console.

    Every call runs with the admin's own token, so the store's policies
    decide what an admin may change.
    """

    def __init__(self, repo: AdminRepository):
        self.repo = repo

    # -------- Doctors --------

    def list_doctors(self, client: Client, search: str | None = None) -> list[Doctor]:
        """
        All doctors, optionally filtered by a case-insensitive match on
        name or specialty.
        """
        try:
            rows = self.repo.list_doctors(client)
        except REMOTE_ERRORS as exc:
            logger.error("Error fetching doctors: %s", exc)
            raise remote_failure("Failed to load doctors")

        doctors = [Doctor.model_validate(row) for row in rows]
        needle = (search or "").strip().lower()
        if not needle:
            return doctors
        return [
            d
            for d in doctors
            if needle in d.name.lower() or needle in (d.specialty or "").lower()
        ]

    def add_doctor(self, client: Client, payload: DoctorCreate) -> Doctor:
        try:
            row = self.repo.create_doctor(client, payload.model_dump())
        except REMOTE_ERRORS as exc:
            logger.error("Error adding doctor %s: %s", payload.name, exc)
            raise remote_failure("Failed to add doctor")
        return Doctor.model_validate(row)

    def delete_doctor(self, client: Client, doctor_id: uuid.UUID) -> None:
        try:
            deleted = self.repo.delete_doctor(client, doctor_id)
        except REMOTE_ERRORS as exc:
            logger.error("Error deleting doctor %s: %s", doctor_id, exc)
            raise remote_failure("Failed to delete doctor")
        if not deleted:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found",
            )

    # -------- Settings --------

    def get_settings(self, client: Client) -> AdminSettings:
        try:
            row = self.repo.get_settings(client)
        except REMOTE_ERRORS as exc:
            if error_code(exc) == NO_ROWS:
                return AdminSettings()
            logger.error("Error fetching admin settings: %s", exc)
            raise remote_failure("Failed to load settings")
        return AdminSettings.model_validate(row or {})

    def update_settings(self, client: Client, payload: AdminSettingsUpdate) -> AdminSettings:
        """
        Upsert the single settings row; fields left out keep their value.
        """
        values = payload.model_dump(exclude_unset=True)
        try:
            row = self.repo.upsert_settings(client, values)
        except REMOTE_ERRORS as exc:
            logger.error("Error saving admin settings: %s", exc)
            raise remote_failure("Error saving settings")
        return AdminSettings.model_validate(row)

    # -------- Users --------

    def create_staff_user(self, client: Client, payload: StaffUserCreate) -> StaffUserResult:
        """
        Create a doctor or wholesale account through the `create-user`
        backend function (it owns the service role key).
        """
        body = {
            "email": payload.email,
            "password": payload.password,
            "fullName": payload.full_name,
            "phone": payload.phone,
            "role": payload.role,
        }
        try:
            data = self.repo.invoke_create_user(client, body)
        except FunctionsHttpError as exc:
            # non-2xx from the function; its message is meant for the admin
            logger.warning("create-user rejected %s: %s", payload.email, exc.message)
            raise bad_request(exc.message or "Failed to create user.")
        except REMOTE_ERRORS as exc:
            logger.error("create-user failed for %s: %s", payload.email, exc)
            raise remote_failure("Failed to create user.")

        if data.get("error"):
            raise bad_request(str(data["error"]))

        user = data.get("user") or {}
        user_id = user.get("id") or data.get("user_id")
        return StaffUserResult(
            user_id=user_id,
            role=payload.role,
            message=f"{payload.role.capitalize()} user created successfully!",
        )
