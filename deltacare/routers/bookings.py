# deltacare/routers/bookings.py
import uuid

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from supabase import Client

from deltacare.core.auth import get_client, require_auth
from deltacare.core.config import get_settings
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.catalog_repo import CatalogRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.booking import (
    TIME_SLOTS,
    AppointmentCreate,
    AppointmentResult,
    LabBookingCreate,
    LabBookingResult,
    PrescriptionResult,
)
from deltacare.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])

settings = get_settings()

service = BookingService(SubmissionRepository(), CatalogRepository())


@router.get("/time-slots", response_model=list[str])
def list_time_slots():
    """Bookable consultation slots, in display order."""
    return list(TIME_SLOTS)


@router.post(
    "/appointments",
    response_model=AppointmentResult,
    status_code=status.HTTP_201_CREATED,
)
def book_appointment(
    payload: AppointmentCreate,
    session: Session = Depends(require_auth),
    client: Client = Depends(get_client),
):
    """
    Book a consultation with a doctor.

    Resending the same `request_id` returns the already stored appointment.
    """
    return service.book_appointment(client, session, payload)


@router.post(
    "/lab",
    response_model=LabBookingResult,
    status_code=status.HTTP_201_CREATED,
)
def book_lab_test(
    payload: LabBookingCreate,
    session: Session = Depends(require_auth),
    client: Client = Depends(get_client),
):
    """
    Book a lab test, a scan or a health package.
    """
    return service.book_lab_test(client, session, payload)


@router.post(
    "/prescriptions",
    response_model=PrescriptionResult,
    status_code=status.HTTP_201_CREATED,
)
async def upload_prescription(
    file: UploadFile | None = File(None),
    notes: str | None = Form(None),
    request_id: uuid.UUID | None = Form(None),
    session: Session = Depends(require_auth),
    client: Client = Depends(get_client),
):
    """
    Upload a prescription (JPEG, PNG, WEBP or PDF, up to 5MB) for review.

    Form fields:
      - file
      - notes (optional)
      - request_id (optional, makes retries idempotent)
    """
    file_bytes = await file.read() if file is not None else None
    return service.upload_prescription(
        client,
        session,
        settings.PRESCRIPTION_BUCKET,
        content_type=file.content_type if file is not None else None,
        file_bytes=file_bytes,
        notes=notes,
        request_id=request_id,
    )
