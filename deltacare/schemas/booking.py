# deltacare/schemas/booking.py
import uuid
from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict, field_validator, model_validator
from sqlmodel import SQLModel, Field

ConsultationMode = Literal["video", "audio", "chat", "offline"]
BookingStatus = Literal["pending", "confirmed", "completed", "cancelled"]

# Bookable consultation slots, in display order
TIME_SLOTS: tuple[str, ...] = (
    "9:00 AM", "9:30 AM", "10:00 AM", "10:30 AM", "11:00 AM", "11:30 AM",
    "12:00 PM", "2:00 PM", "2:30 PM", "3:00 PM", "3:30 PM", "4:00 PM",
    "4:30 PM", "5:00 PM", "5:30 PM", "6:00 PM",
)

DEFAULT_CONSULTATION_FEE = 500


def _blank_to_none(v: str | None) -> str | None:
    if v is None:
        return v
    v = v.strip()
    return v or None


class AppointmentCreate(SQLModel):
    """
    Payload for booking a doctor consultation.

    Date and time are optional here so that a missing value is reported
    as a booking error ("Please select date and time") rather than a
    schema error.
    """

    model_config = ConfigDict(extra="forbid")

    doctor_id: uuid.UUID
    appointment_date: date | None = None
    appointment_time: str | None = None
    consultation_mode: ConsultationMode = "video"
    symptoms: str | None = Field(default=None, max_length=1000)
    request_id: uuid.UUID | None = None

    @field_validator("appointment_time", "symptoms")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        return _blank_to_none(v)


class AppointmentRead(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    user_id: uuid.UUID
    doctor_id: uuid.UUID
    appointment_date: date
    appointment_time: str
    consultation_mode: ConsultationMode
    consultation_fee: float
    symptoms: str | None = None
    status: str
    payment_status: str
    created_at: datetime | None = None


class LabBookingCreate(SQLModel):
    """
    Payload for booking a lab test, a scan or a health package.

    Exactly one of the three references must be given.
    """

    model_config = ConfigDict(extra="forbid")

    lab_test_id: uuid.UUID | None = None
    scan_test_id: uuid.UUID | None = None
    health_package_id: uuid.UUID | None = None
    booking_date: date | None = None
    time_slot: str | None = None
    home_collection: bool = False
    notes: str | None = Field(default=None, max_length=1000)
    request_id: uuid.UUID | None = None

    @field_validator("time_slot", "notes")
    @classmethod
    def normalize_text(cls, v: str | None) -> str | None:
        return _blank_to_none(v)

    @model_validator(mode="after")
    def exactly_one_item(self) -> "LabBookingCreate":
        refs = [self.lab_test_id, self.scan_test_id, self.health_package_id]
        if sum(ref is not None for ref in refs) != 1:
            raise ValueError(
                "exactly one of lab_test_id, scan_test_id, health_package_id is required"
            )
        return self


class LabBookingRead(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    user_id: uuid.UUID
    lab_test_id: uuid.UUID | None = None
    scan_test_id: uuid.UUID | None = None
    health_package_id: uuid.UUID | None = None
    booking_date: date
    time_slot: str
    home_collection: bool = False
    total_amount: float | None = None
    status: str
    created_at: datetime | None = None


class PrescriptionRead(SQLModel):
    model_config = ConfigDict(extra="allow")

    id: uuid.UUID
    user_id: uuid.UUID
    image_url: str
    notes: str | None = None
    status: str
    created_at: datetime | None = None


class AppointmentResult(SQLModel):
    appointment: AppointmentRead
    message: str
    redirect_to: str


class LabBookingResult(SQLModel):
    booking: LabBookingRead
    message: str
    redirect_to: str


class PrescriptionResult(SQLModel):
    prescription: PrescriptionRead
    message: str
    redirect_to: str
