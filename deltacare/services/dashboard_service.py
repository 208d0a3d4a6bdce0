# deltacare/services/dashboard_service.py
import logging

from supabase import Client

from deltacare.core.errors import REMOTE_ERRORS, remote_failure
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.dashboard_repo import DashboardRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.dashboard import CUSTOMER_ACTIONS, CustomerDashboard, DoctorDashboard

logger = logging.getLogger(__name__)


class DashboardService:
    """
    Read-only aggregates for the customer and doctor dashboards.

    All reads run as the caller, so RLS limits them to the caller's rows.
    """

    def __init__(self, repo: DashboardRepository, submissions: SubmissionRepository):
        self.repo = repo
        self.submissions = submissions

    def customer_dashboard(self, client: Client, session: Session) -> CustomerDashboard:
        user_id = session.user_id
        try:
            orders = self.submissions.list_for_user(client, "orders", user_id)
            appointments = self.repo.list_appointments(client, user_id)
            lab_bookings = self.repo.list_lab_bookings(client, user_id)
            prescriptions = self.submissions.list_for_user(client, "prescriptions", user_id)
        except REMOTE_ERRORS as exc:
            logger.error("Error loading dashboard for user %s: %s", user_id, exc)
            raise remote_failure("Failed to load dashboard")

        return CustomerDashboard(
            full_name=session.full_name,
            orders=orders,
            appointments=appointments,
            lab_bookings=lab_bookings,
            prescriptions=prescriptions,
            actions=list(CUSTOMER_ACTIONS),
        )

    def doctor_dashboard(self, client: Client, session: Session) -> DoctorDashboard:
        """
        The doctor record linked to the caller and its appointments,
        earliest first.
        """
        try:
            doctor = self.repo.get_doctor_for_user(client, session.user_id)
            if doctor is None:
                return DoctorDashboard(
                    doctor=None,
                    appointments=[],
                    message="No doctor profile is linked to this account yet.",
                )
            appointments = self.repo.list_doctor_appointments(client, str(doctor["id"]))
        except REMOTE_ERRORS as exc:
            logger.error("Error loading doctor dashboard for %s: %s", session.user_id, exc)
            raise remote_failure("Failed to load dashboard")

        return DoctorDashboard(doctor=doctor, appointments=appointments)
