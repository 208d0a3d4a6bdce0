# deltacare/repositories/catalog_repo.py
import uuid

from supabase import Client


class CatalogRepository:
    """
    Read-only queries against the public catalog collections:
    medicines, doctors, lab_tests, scan_tests, health_packages.

    - Pure Supabase calls (filters, ordering, limit).
    - No FastAPI, no business logic.
    """

    # ----- Medicines -----

    def list_medicines(
        self,
        client: Client,
        search: str | None = None,
        category: str | None = None,
        limit: int = 50,
    ) -> list[dict]:
        columns = "*, categories(name, slug)"
        if category:
            # inner join so the category filter drops non-matching rows
            columns = "*, categories!inner(name, slug)"

        query = client.table("medicines").select(columns).eq("is_active", True)

        if search:
            query = query.or_(
                f"name.ilike.%{search}%,brand.ilike.%{search}%,generic_name.ilike.%{search}%"
            )
        if category:
            query = query.eq("categories.slug", category)

        return query.limit(limit).execute().data or []

    def get_medicine(self, client: Client, medicine_id: uuid.UUID) -> dict | None:
        res = (
            client.table("medicines")
            .select("*")
            .eq("id", str(medicine_id))
            .eq("is_active", True)
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None

    # ----- Doctors -----

    def list_doctors(self, client: Client, specialty: str | None = None) -> list[dict]:
        query = client.table("doctors").select("*").eq("is_available", True)
        if specialty:
            query = query.eq("specialty", specialty)
        return query.order("rating", desc=True).execute().data or []

    def get_doctor(self, client: Client, doctor_id: uuid.UUID) -> dict | None:
        res = (
            client.table("doctors")
            .select("*")
            .eq("id", str(doctor_id))
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None

    # ----- Diagnostics -----

    def list_lab_tests(self, client: Client, category: str | None = None) -> list[dict]:
        query = client.table("lab_tests").select("*").eq("is_active", True)
        if category:
            query = query.eq("category", category)
        return query.order("name").execute().data or []

    def list_scan_tests(self, client: Client, scan_type: str | None = None) -> list[dict]:
        query = client.table("scan_tests").select("*").eq("is_active", True)
        if scan_type:
            query = query.eq("type", scan_type)
        return query.order("name").execute().data or []

    def list_health_packages(self, client: Client) -> list[dict]:
        return (
            client.table("health_packages")
            .select("*")
            .eq("is_active", True)
            .order("is_popular", desc=True)
            .execute()
            .data
            or []
        )

    def get_item(self, client: Client, table: str, item_id: uuid.UUID) -> dict | None:
        """Single row of a bookable collection (lab_tests, scan_tests, health_packages)."""
        res = (
            client.table(table)
            .select("*")
            .eq("id", str(item_id))
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None
