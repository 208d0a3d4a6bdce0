# deltacare/routers/dashboard.py
from fastapi import APIRouter, Depends
from supabase import Client

from deltacare.core.auth import get_client, require_auth, require_doctor
from deltacare.repositories.booking_repo import SubmissionRepository
from deltacare.repositories.dashboard_repo import DashboardRepository
from deltacare.schemas.auth import Session
from deltacare.schemas.dashboard import CustomerDashboard, DoctorDashboard
from deltacare.services.dashboard_service import DashboardService

router = APIRouter(tags=["Dashboards"])

service = DashboardService(DashboardRepository(), SubmissionRepository())


@router.get("/dashboard", response_model=CustomerDashboard)
def customer_dashboard(
    session: Session = Depends(require_auth),
    client: Client = Depends(get_client),
):
    """
    Orders, appointments, lab bookings and prescriptions of the caller.
    """
    return service.customer_dashboard(client, session)


@router.get("/doctor/dashboard", response_model=DoctorDashboard)
def doctor_dashboard(
    session: Session = Depends(require_doctor),
    client: Client = Depends(get_client),
):
    """
    Doctor-only: linked doctor profile and its appointments.
    """
    return service.doctor_dashboard(client, session)
