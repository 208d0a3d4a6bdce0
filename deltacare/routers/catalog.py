# deltacare/routers/catalog.py
import uuid

from fastapi import APIRouter, Depends, Query
from supabase import Client

from deltacare.core.auth import get_client
from deltacare.repositories.catalog_repo import CatalogRepository
from deltacare.schemas.catalog import (
    Doctor,
    HealthPackage,
    LabTest,
    Medicine,
    ScanTest,
)
from deltacare.services.catalog_service import CatalogService

router = APIRouter(tags=["Catalog"])

repo = CatalogRepository()
service = CatalogService(repo)


# -------- Shop --------


@router.get("/medicines", response_model=list[Medicine])
def list_medicines(
    client: Client = Depends(get_client),
    search: str | None = None,
    category: str | None = None,
    limit: int = Query(default=50, ge=1, le=100),
):
    """
    List active medicines.

    - `search` matches name, brand or generic name (case-insensitive).
    - `category` is a category slug.
    """
    return service.list_medicines(client, search=search, category=category, limit=limit)


@router.get("/medicines/{medicine_id}", response_model=Medicine)
def get_medicine(
    medicine_id: uuid.UUID,
    client: Client = Depends(get_client),
):
    return service.get_medicine(client, medicine_id)


# -------- Doctors --------


@router.get("/doctors", response_model=list[Doctor])
def list_doctors(
    client: Client = Depends(get_client),
    specialty: str | None = None,
):
    """
    Available doctors, best rated first.
    """
    return service.list_doctors(client, specialty)


@router.get("/doctors/{doctor_id}", response_model=Doctor)
def get_doctor(
    doctor_id: uuid.UUID,
    client: Client = Depends(get_client),
):
    return service.get_doctor(client, doctor_id)


# -------- Diagnostics --------


@router.get("/lab-tests", response_model=list[LabTest])
def list_lab_tests(
    client: Client = Depends(get_client),
    category: str | None = None,
):
    return service.list_lab_tests(client, category)


@router.get("/scan-tests", response_model=list[ScanTest])
def list_scan_tests(
    client: Client = Depends(get_client),
    type: str | None = None,
):
    return service.list_scan_tests(client, type)


@router.get("/health-packages", response_model=list[HealthPackage])
def list_health_packages(client: Client = Depends(get_client)):
    """
    Active health packages, popular ones first.
    """
    return service.list_health_packages(client)
