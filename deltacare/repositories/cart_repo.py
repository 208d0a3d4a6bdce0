# deltacare/repositories/cart_repo.py
import uuid

from supabase import Client

# cart_items joined with the display fields of the referenced medicine
CART_SELECT = (
    "id, quantity, medicine_id, "
    "medicines(id, name, brand, price, discount_percent, image_url, requires_prescription)"
)


class CartRepository:

    table = "cart_items"

    # Get items for a user
    def list_for_user(self, client: Client, user_id: uuid.UUID) -> list[dict]:
        res = (
            client.table(self.table)
            .select(CART_SELECT)
            .eq("user_id", str(user_id))
            .execute()
        )
        return res.data or []

    # CRUD
    def create(
        self,
        client: Client,
        user_id: uuid.UUID,
        medicine_id: uuid.UUID,
        quantity: int,
    ) -> dict:
        res = (
            client.table(self.table)
            .insert(
                {
                    "user_id": str(user_id),
                    "medicine_id": str(medicine_id),
                    "quantity": quantity,
                }
            )
            .execute()
        )
        return res.data[0] if res.data else {}

    def update_quantity(
        self,
        client: Client,
        user_id: uuid.UUID,
        medicine_id: uuid.UUID,
        quantity: int,
    ) -> None:
        (
            client.table(self.table)
            .update({"quantity": quantity})
            .eq("user_id", str(user_id))
            .eq("medicine_id", str(medicine_id))
            .execute()
        )

    def delete(self, client: Client, user_id: uuid.UUID, medicine_id: uuid.UUID) -> None:
        (
            client.table(self.table)
            .delete()
            .eq("user_id", str(user_id))
            .eq("medicine_id", str(medicine_id))
            .execute()
        )

    def clear_user_cart(self, client: Client, user_id: uuid.UUID) -> None:
        client.table(self.table).delete().eq("user_id", str(user_id)).execute()
