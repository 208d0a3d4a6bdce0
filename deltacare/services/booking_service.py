# deltacare/services/booking_service.py
import logging
import uuid
from datetime import date

from fastapi import HTTPException, status
from supabase import Client

from deltacare.core.errors import (
    REMOTE_ERRORS,
    UNIQUE_VIOLATION,
    bad_request,
    error_code,
    remote_failure,
)
from deltacare.core.storage_utils import object_path, upload_to_storage
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.catalog_repo import CatalogRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.booking import (
    DEFAULT_CONSULTATION_FEE,
    TIME_SLOTS,
    AppointmentCreate,
    AppointmentRead,
    AppointmentResult,
    LabBookingCreate,
    LabBookingRead,
    LabBookingResult,
    PrescriptionRead,
    PrescriptionResult,
)

logger = logging.getLogger(__name__)

DASHBOARD_ROUTE = "/dashboard"

# --- Prescription upload config ---

MAX_PRESCRIPTION_BYTES = 5 * 1024 * 1024  # 5MB

ALLOWED_PRESCRIPTION_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "application/pdf": "pdf",
}


def submit_once(
    repo: SubmissionRepository,
    client: Client,
    table: str,
    row: dict,
    failure_detail: str,
) -> dict:
    """
    Insert a submission row exactly once per `client_request_id`.

    A unique violation means the same request was already stored (e.g.
    a retried submit after a lost response): the stored row is returned
    as the result. Any other failure is logged and raised as 502.
    """
    try:
        return repo.insert(client, table, row)
    except REMOTE_ERRORS as exc:
        if error_code(exc) == UNIQUE_VIOLATION:
            existing = _lookup_existing(repo, client, table, row)
            if existing is not None:
                logger.info(
                    "Duplicate %s submission %s, returning stored row",
                    table,
                    row["client_request_id"],
                )
                return existing
        logger.error("Insert into %s failed: %s", table, exc)
        raise remote_failure(failure_detail)


def _lookup_existing(
    repo: SubmissionRepository,
    client: Client,
    table: str,
    row: dict,
) -> dict | None:
    try:
        return repo.get_by_request_id(
            client,
            table,
            uuid.UUID(row["user_id"]),
            uuid.UUID(row["client_request_id"]),
        )
    except REMOTE_ERRORS as exc:
        logger.error("Duplicate lookup in %s failed: %s", table, exc)
        return None


class BookingService:
    """
    Appointment, lab/scan booking and prescription submissions.

    Each submission:
      - requires a session (enforced by the router dependency)
      - validates required fields before any remote call
      - performs one insert (plus one Storage upload for prescriptions)
      - answers with a confirmation and the dashboard route
    """

    def __init__(self, repo: SubmissionRepository, catalog_repo: CatalogRepository):
        self.repo = repo
        self.catalog_repo = catalog_repo

    # ----- Appointments -----

    def book_appointment(
        self,
        client: Client,
        session: Session,
        payload: AppointmentCreate,
    ) -> AppointmentResult:
        if payload.appointment_date is None or payload.appointment_time is None:
            raise bad_request("Please select date and time")
        if payload.appointment_date < date.today():
            raise bad_request("Appointment date cannot be in the past")
        if payload.appointment_time not in TIME_SLOTS:
            raise bad_request("Invalid time slot")

        try:
            doctor = self.catalog_repo.get_doctor(client, payload.doctor_id)
        except REMOTE_ERRORS as exc:
            logger.error("Doctor lookup failed: %s", exc)
            raise remote_failure("Failed to book appointment")
        if not doctor:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found",
            )

        request_id = payload.request_id or uuid.uuid4()
        row = {
            "user_id": str(session.user_id),
            "doctor_id": str(payload.doctor_id),
            "appointment_date": payload.appointment_date.isoformat(),
            "appointment_time": payload.appointment_time,
            "consultation_mode": payload.consultation_mode,
            "consultation_fee": doctor.get("consultation_fee") or DEFAULT_CONSULTATION_FEE,
            "symptoms": payload.symptoms,
            "status": "pending",
            "payment_status": "pending",
            "client_request_id": str(request_id),
        }
        stored = submit_once(self.repo, client, "appointments", row, "Failed to book appointment")

        return AppointmentResult(
            appointment=AppointmentRead.model_validate(stored),
            message="Appointment booked successfully!",
            redirect_to=DASHBOARD_ROUTE,
        )

    # ----- Lab / scan bookings -----

    def book_lab_test(
        self,
        client: Client,
        session: Session,
        payload: LabBookingCreate,
    ) -> LabBookingResult:
        if payload.booking_date is None or payload.time_slot is None:
            raise bad_request("Please select date and time")
        if payload.booking_date < date.today():
            raise bad_request("Booking date cannot be in the past")

        if payload.lab_test_id:
            table, item_id = "lab_tests", payload.lab_test_id
        elif payload.scan_test_id:
            table, item_id = "scan_tests", payload.scan_test_id
        else:
            table, item_id = "health_packages", payload.health_package_id

        try:
            item = self.catalog_repo.get_item(client, table, item_id)
        except REMOTE_ERRORS as exc:
            logger.error("Lookup in %s failed: %s", table, exc)
            raise remote_failure("Failed to book test")
        if not item:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Test not found",
            )

        request_id = payload.request_id or uuid.uuid4()
        row = {
            "user_id": str(session.user_id),
            "lab_test_id": str(payload.lab_test_id) if payload.lab_test_id else None,
            "scan_test_id": str(payload.scan_test_id) if payload.scan_test_id else None,
            "health_package_id": (
                str(payload.health_package_id) if payload.health_package_id else None
            ),
            "booking_date": payload.booking_date.isoformat(),
            "time_slot": payload.time_slot,
            "home_collection": payload.home_collection,
            "notes": payload.notes,
            "total_amount": item.get("price") or 0,
            "status": "pending",
            "client_request_id": str(request_id),
        }
        stored = submit_once(self.repo, client, "lab_bookings", row, "Failed to book test")

        return LabBookingResult(
            booking=LabBookingRead.model_validate(stored),
            message="Test booked successfully!",
            redirect_to=DASHBOARD_ROUTE,
        )

    # ----- Prescriptions -----

    @staticmethod
    def _validate_and_get_ext(content_type: str | None, file_bytes: bytes) -> str:
        """Check type and size; the stored extension follows the content type."""
        if content_type not in ALLOWED_PRESCRIPTION_TYPES:
            raise bad_request("Unsupported file type. Allowed: JPEG, PNG, WEBP, PDF.")

        if len(file_bytes) > MAX_PRESCRIPTION_BYTES:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail="File size should be less than 5MB",
            )

        return ALLOWED_PRESCRIPTION_TYPES[content_type]

    def upload_prescription(
        self,
        client: Client,
        session: Session,
        bucket: str,
        content_type: str | None,
        file_bytes: bytes | None,
        notes: str | None = None,
        request_id: uuid.UUID | None = None,
    ) -> PrescriptionResult:
        """
        Upload a prescription image/PDF and record it for review.

        Path pattern:
            <bucket>/<user_id>/<request_id>.<ext>
        """
        if not file_bytes:
            raise bad_request("Please select a prescription file")

        ext = self._validate_and_get_ext(content_type, file_bytes)
        request_id = request_id or uuid.uuid4()
        path = object_path(session.user_id, request_id, ext)

        try:
            public_url = upload_to_storage(client, bucket, path, file_bytes, content_type)
        except REMOTE_ERRORS as exc:
            logger.error("Prescription upload failed for %s: %s", session.user_id, exc)
            raise remote_failure("Failed to upload prescription")

        notes = (notes or "").strip() or None
        row = {
            "user_id": str(session.user_id),
            "image_url": public_url,
            "notes": notes,
            "status": "pending",
            "client_request_id": str(request_id),
        }
        stored = submit_once(self.repo, client, "prescriptions", row, "Failed to upload prescription")

        return PrescriptionResult(
            prescription=PrescriptionRead.model_validate(stored),
            message="Prescription uploaded successfully! Our team will review it shortly.",
            redirect_to=DASHBOARD_ROUTE,
        )
