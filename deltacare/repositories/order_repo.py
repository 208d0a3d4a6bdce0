# deltacare/repositories/order_repo.py
import uuid

from supabase import Client


class OrderRepository:
    """
    Data access layer for `orders`.

    NOTE:
      - Items are stored as a JSON snapshot on the order row, so an order
        is a single insert. Clearing the cart is done by the cart
        synchronizer afterwards.
    """

    table = "orders"

    def list_for_user(
        self,
        client: Client,
        user_id: uuid.UUID,
        skip: int = 0,
        limit: int = 50,
    ) -> list[dict]:
        res = (
            client.table(self.table)
            .select("*")
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .range(skip, skip + limit - 1)
            .execute()
        )
        return res.data or []

    def get_for_user(
        self,
        client: Client,
        user_id: uuid.UUID,
        order_id: uuid.UUID,
    ) -> dict | None:
        res = (
            client.table(self.table)
            .select("*")
            .eq("id", str(order_id))
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        return res.data[0] if res.data else None
