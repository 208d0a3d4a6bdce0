# deltacare/repositories/booking_repo.py
import uuid

from supabase import Client


class SubmissionRepository:
    """
    Inserts for user submissions (appointments, lab_bookings,
    prescriptions, orders, quote_requests) and the lookups that make them
    idempotent.

    Every submission row carries `client_request_id`; the store has a
    unique constraint on it, so a replayed request fails with 23505.
    """

    def insert(self, client: Client, table: str, row: dict) -> dict:
        res = client.table(table).insert(row).execute()
        return res.data[0] if res.data else row

    def get_by_request_id(
        self,
        client: Client,
        table: str,
        user_id: uuid.UUID,
        request_id: uuid.UUID,
    ) -> dict | None:
        res = (
            client.table(table)
            .select("*")
            .eq("user_id", str(user_id))
            .eq("client_request_id", str(request_id))
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None

    def list_for_user(
        self,
        client: Client,
        table: str,
        user_id: uuid.UUID,
        columns: str = "*",
        order_by: str = "created_at",
    ) -> list[dict]:
        res = (
            client.table(table)
            .select(columns)
            .eq("user_id", str(user_id))
            .order(order_by, desc=True)
            .execute()
        )
        return res.data or []
