# deltacare/services/catalog_service.py
import logging
import math
import re
import uuid

from fastapi import HTTPException, status
from supabase import Client

from deltacare.core.errors import REMOTE_ERRORS, remote_failure
from deltacare.repositories.catalog_repo import CatalogRepository
from deltacare.schemas.catalog import (
    Doctor,
    HealthPackage,
    LabTest,
    Medicine,
    ScanTest,
)

logger = logging.getLogger(__name__)

MAX_PAGE = 100

# characters with a meaning inside a PostgREST `or=(...)` filter
_FILTER_SYNTAX = re.compile(r"[,()]")


def list_price(price: float | None, discount_percent: float | None) -> float:
    """
    Pre-discount price (MRP) shown next to the selling price.

    price / (1 - discount/100), rounded half up to a whole unit.
    """
    if not price:
        return 0
    discount = discount_percent or 0
    if discount >= 100:
        return price
    return math.floor(price / (1 - discount / 100) + 0.5)


def clean_search(search: str | None) -> str | None:
    if search is None:
        return None
    cleaned = _FILTER_SYNTAX.sub(" ", search).strip()
    return cleaned or None


class CatalogService:
    """
    Catalog reads for the storefront (shop, doctors, diagnostics).

    Read failures surface as a generic 502; pages never partially render
    stale data from a previous user.
    """

    def __init__(self, repo: CatalogRepository):
        self.repo = repo

    def list_medicines(
        self,
        client: Client,
        search: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[Medicine]:
        limit = max(1, min(limit, MAX_PAGE))
        try:
            rows = self.repo.list_medicines(
                client,
                search=clean_search(search),
                category=category or None,
                limit=limit,
            )
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load medicines: %s", exc)
            raise remote_failure("Failed to load medicines")
        return [Medicine.model_validate(r) for r in rows]

    def get_medicine(self, client: Client, medicine_id: uuid.UUID) -> Medicine:
        try:
            row = self.repo.get_medicine(client, medicine_id)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load medicine %s: %s", medicine_id, exc)
            raise remote_failure("Failed to load medicine")
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Medicine not found",
            )
        return Medicine.model_validate(row)

    def list_doctors(self, client: Client, specialty: str | None = None) -> list[Doctor]:
        try:
            rows = self.repo.list_doctors(client, specialty)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load doctors: %s", exc)
            raise remote_failure("Failed to load doctors")
        return [Doctor.model_validate(r) for r in rows]

    def get_doctor(self, client: Client, doctor_id: uuid.UUID) -> Doctor:
        try:
            row = self.repo.get_doctor(client, doctor_id)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load doctor %s: %s", doctor_id, exc)
            raise remote_failure("Failed to load doctor")
        if not row:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Doctor not found",
            )
        return Doctor.model_validate(row)

    def list_lab_tests(self, client: Client, category: str | None = None) -> list[LabTest]:
        try:
            rows = self.repo.list_lab_tests(client, category)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load lab tests: %s", exc)
            raise remote_failure("Failed to load lab tests")
        return [LabTest.model_validate(r) for r in rows]

    def list_scan_tests(self, client: Client, scan_type: str | None = None) -> list[ScanTest]:
        try:
            rows = self.repo.list_scan_tests(client, scan_type)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load scan tests: %s", exc)
            raise remote_failure("Failed to load scan tests")
        return [ScanTest.model_validate(r) for r in rows]

    def list_health_packages(self, client: Client) -> list[HealthPackage]:
        try:
            rows = self.repo.list_health_packages(client)
        except REMOTE_ERRORS as exc:
            logger.error("Failed to load health packages: %s", exc)
            raise remote_failure("Failed to load health packages")
        return [HealthPackage.model_validate(r) for r in rows]
