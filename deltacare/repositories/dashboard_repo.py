# deltacare/repositories/dashboard_repo.py
import uuid

from supabase import Client

# appointment rows with the booked doctor
APPOINTMENT_SELECT = "*, doctors(name, specialty, profile_image)"

# lab booking rows with whichever item was booked
LAB_BOOKING_SELECT = "*, lab_tests(name), scan_tests(name), health_packages(name)"


class DashboardRepository:
    """
    Read queries behind the customer and doctor dashboards.
    """

    def list_appointments(self, client: Client, user_id: uuid.UUID) -> list[dict]:
        res = (
            client.table("appointments")
            .select(APPOINTMENT_SELECT)
            .eq("user_id", str(user_id))
            .order("appointment_date", desc=True)
            .execute()
        )
        return res.data or []

    def list_lab_bookings(self, client: Client, user_id: uuid.UUID) -> list[dict]:
        res = (
            client.table("lab_bookings")
            .select(LAB_BOOKING_SELECT)
            .eq("user_id", str(user_id))
            .order("booking_date", desc=True)
            .execute()
        )
        return res.data or []

    # ----- Doctor side -----

    def get_doctor_for_user(self, client: Client, user_id: uuid.UUID) -> dict | None:
        res = (
            client.table("doctors")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None

    def list_doctor_appointments(self, client: Client, doctor_id: str) -> list[dict]:
        res = (
            client.table("appointments")
            .select("*")
            .eq("doctor_id", doctor_id)
            .order("appointment_date")
            .execute()
        )
        return res.data or []
