# deltacare/repositories/role_repo.py
import uuid

from supabase import Client

from deltacare.core.roles import Role


class RoleRepository:
    """
    Data access for the `user_roles` collection.

    - Pure Supabase calls, errors propagate to the service.
    """

    table = "user_roles"

    def get_role(self, client: Client, user_id: uuid.UUID) -> str | None:
        """
        Stored role string for a user.

        Raises PostgrestAPIError with code PGRST116 when the user has no
        role record.
        """
        res = (
            client.table(self.table)
            .select("role")
            .eq("user_id", str(user_id))
            .single()
            .execute()
        )
        return res.data.get("role")

    def create(self, client: Client, user_id: uuid.UUID, role: Role) -> None:
        client.table(self.table).insert(
            {"user_id": str(user_id), "role": role.value}
        ).execute()
