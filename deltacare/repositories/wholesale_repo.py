# deltacare/repositories/wholesale_repo.py
import uuid

from supabase import Client


class WholesaleRepository:
    """
    wholesale_profiles and the wholesale product list.

    Quote requests go through SubmissionRepository like every other
    user submission.
    """

    def get_profile(self, client: Client, user_id: uuid.UUID) -> dict | None:
        res = (
            client.table("wholesale_profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None

    def create_profile(self, client: Client, row: dict) -> dict:
        res = client.table("wholesale_profiles").insert(row).execute()
        return res.data[0] if res.data else row

    def list_products(self, client: Client, search: str | None = None) -> list[dict]:
        query = client.table("products").select("*")
        if search:
            query = query.ilike("name", f"%{search}%")
        return query.order("name").execute().data or []
