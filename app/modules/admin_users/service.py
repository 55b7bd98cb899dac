from supabase import Client
from app.modules.admin_users.schemas import AdminUserResponse
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class AdminUserService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def link_user(self, user_id: str, tenant_pk: str, role: str) -> AdminUserResponse:
        """Create or update the admin_users row for (user, tenant)"""
        try:
            result = self.supabase.table("admin_users")\
                .upsert({
                    "user_id": user_id,
                    "tenant_id": tenant_pk,
                    "role": role.strip()
                }, on_conflict="user_id,tenant_id")\
                .execute()
        except Exception as e:
            logger.error(f"Failed to link user {user_id} to tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail="Failed to link admin user")

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to link admin user")

        return AdminUserResponse(**result.data[0])
