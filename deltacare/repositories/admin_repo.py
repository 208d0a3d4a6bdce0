# deltacare/repositories/admin_repo.py
import json
import uuid

from supabase import Client

from deltacare.schemas.admin import SETTINGS_ID


class AdminRepository:
    """
    Admin-side writes: doctors catalog, settings row, and the
    `create-user` backend function.
    """

    # ---- Doctors ----

    def list_doctors(self, client: Client) -> list[dict]:
        res = client.table("doctors").select("*").order("name").execute()
        return res.data or []

    def create_doctor(self, client: Client, row: dict) -> dict:
        res = client.table("doctors").insert(row).execute()
        return res.data[0] if res.data else row

    def delete_doctor(self, client: Client, doctor_id: uuid.UUID) -> list[dict]:
        res = client.table("doctors").delete().eq("id", str(doctor_id)).execute()
        return res.data or []

    # ---- Settings ----

    def get_settings(self, client: Client) -> dict:
        """Raises PostgrestAPIError (PGRST116) when the row does not exist."""
        res = (
            client.table("admin_settings")
            .select("*")
            .eq("id", str(SETTINGS_ID))
            .single()
            .execute()
        )
        return res.data

    def upsert_settings(self, client: Client, values: dict) -> dict:
        row = {**values, "id": str(SETTINGS_ID)}
        res = client.table("admin_settings").upsert(row).execute()
        return res.data[0] if res.data else row

    # ---- Users ----

    def invoke_create_user(self, client: Client, body: dict) -> dict:
        res = client.functions.invoke(
            "create-user",
            {"body": body, "responseType": "json"},
        )
        if isinstance(res, (bytes, str)):
            return json.loads(res) if res else {}
        return res or {}
