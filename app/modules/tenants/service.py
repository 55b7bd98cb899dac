from datetime import datetime, timezone
from supabase import Client
from app.core.dependencies import get_tenant_by_slug
from app.modules.auth.service import dump_model
from app.modules.tenants.schemas import (
    RegisterRequest, RegisterResponse, TenantSummary, TenantUpdate,
    TenantResponse, TenantUpdateResponse, AvailabilityResponse, tenant_id_problem
)
from typing import Any, Dict, Optional, Tuple
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

PUBLIC_TENANT_COLUMNS = "id, tenant_id, name, logo_url, theme_config, is_active"
UNIQUE_VIOLATION = "23505"


def _is_unique_violation(error: Exception) -> bool:
    return getattr(error, "code", None) == UNIQUE_VIOLATION or "duplicate key" in str(error).lower()


def _error_message(error: Exception) -> str:
    return getattr(error, "message", None) or str(error)


class TenantService:
    def __init__(self, supabase: Client, session_client: Optional[Client] = None):
        self.supabase = supabase
        self.session_client = session_client or supabase

    def check_availability(self, tenant_id: str) -> AvailabilityResponse:
        """Whether a slug can still be registered. Deliberately reveals existing slugs."""
        slug = (tenant_id or "").strip().lower()
        problem = tenant_id_problem(slug)
        if problem:
            return AvailabilityResponse(available=False, reason=problem)
        if get_tenant_by_slug(slug, self.supabase, "id"):
            return AvailabilityResponse(available=False, reason="This ID is already taken.")
        return AvailabilityResponse(available=True)

    def get_public_tenant(self, tenant_id: str) -> TenantResponse:
        """Tenant settings for rendering a public portfolio"""
        tenant = get_tenant_by_slug(tenant_id, self.supabase, PUBLIC_TENANT_COLUMNS)
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found")
        if not tenant.get("is_active"):
            raise HTTPException(status_code=403, detail="Tenant is inactive")
        return TenantResponse(**tenant)

    def register(self, register_data: RegisterRequest) -> RegisterResponse:
        """Create auth user, tenant and owner link; undo earlier steps if a later one fails.

        Compensating deletes are attempted once and not verified, so a failure
        during rollback can leave partial state behind (it is logged).
        """
        tenant_id = register_data.tenant_id

        if get_tenant_by_slug(tenant_id, self.supabase, "id"):
            raise HTTPException(status_code=409, detail="Tenant ID already taken")

        try:
            auth_response = self.supabase.auth.admin.create_user({
                "email": register_data.admin_email,
                "password": register_data.password,
                "email_confirm": True,
            })
        except Exception as e:
            logger.warning(f"Auth user creation failed for tenant {tenant_id}: {e}")
            raise HTTPException(status_code=400, detail=_error_message(e))

        if not auth_response or not auth_response.user:
            raise HTTPException(status_code=400, detail="Failed to create admin user")
        user_id = auth_response.user.id

        try:
            tenant_result = self.supabase.table("tenants").insert({
                "tenant_id": tenant_id,
                "name": register_data.tenant_name.strip(),
                "logo_url": register_data.logo or None,
                "is_active": True,
                "created_by": user_id,
            }).execute()
            if not tenant_result.data:
                raise RuntimeError("tenant insert returned no rows")
            tenant = tenant_result.data[0]
        except Exception as e:
            logger.error(f"Tenant creation failed for {tenant_id}: {e}")
            self._rollback(user_id=user_id)
            if _is_unique_violation(e):
                # Lost the race against a concurrent registration of the same slug
                raise HTTPException(status_code=409, detail="Tenant ID already taken")
            raise HTTPException(status_code=500, detail="Failed to create tenant record")

        try:
            link_result = self.supabase.table("admin_users").insert({
                "user_id": user_id,
                "tenant_id": tenant["id"],
                "role": "owner",
            }).execute()
            if not link_result.data:
                raise RuntimeError("admin_users insert returned no rows")
        except Exception as e:
            logger.error(f"Admin user link failed for tenant {tenant_id}: {e}")
            self._rollback(user_id=user_id, tenant_pk=tenant["id"])
            raise HTTPException(status_code=500, detail="Failed to link admin user")

        logger.info(f"Registered tenant {tenant_id} with owner {user_id}")

        summary = TenantSummary(
            id=tenant["id"],
            tenant_id=tenant["tenant_id"],
            name=tenant["name"],
            logo_url=tenant.get("logo_url"),
        )
        session, user = self._sign_in(register_data.admin_email, register_data.password)
        if session is None:
            return RegisterResponse(
                message="Tenant created successfully. Please log in.",
                tenant=summary,
            )
        return RegisterResponse(
            message="Registration successful",
            tenant=summary,
            session=session,
            user=user,
        )

    def update_tenant(self, tenant_pk: str, update: TenantUpdate) -> TenantUpdateResponse:
        """Apply a partial settings update to a tenant the caller administers"""
        update_data: Dict[str, Any] = {}
        if update.name:
            update_data["name"] = update.name.strip()
        if update.logo_url:
            update_data["logo_url"] = update.logo_url
        if update.logo:
            update_data["logo_url"] = update.logo
        if update.theme_config:
            update_data["theme_config"] = update.theme_config

        if not update_data:
            raise HTTPException(status_code=400, detail="No valid fields to update")
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()

        try:
            result = self.supabase.table("tenants")\
                .update(update_data)\
                .eq("id", tenant_pk)\
                .execute()
        except Exception as e:
            logger.error(f"Tenant update failed for {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update tenant")

        if not result.data:
            raise HTTPException(status_code=404, detail="Tenant not found")

        return TenantUpdateResponse(
            message="Tenant updated successfully",
            tenant=TenantResponse(**result.data[0])
        )

    def _sign_in(self, email: str, password: str) -> Tuple[Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        """Best-effort sign-in after registration; failure only means the user logs in manually"""
        try:
            auth_response = self.session_client.auth.sign_in_with_password({
                "email": email,
                "password": password,
            })
        except Exception as e:
            logger.warning(f"Post-registration sign-in failed for {email}: {e}")
            return None, None
        if not auth_response or not auth_response.session:
            return None, None
        return dump_model(auth_response.session), dump_model(auth_response.user)

    def _rollback(self, user_id: str, tenant_pk: Optional[str] = None) -> None:
        """Compensate a failed registration: tenant row first, then the auth identity"""
        if tenant_pk:
            try:
                self.supabase.table("tenants").delete().eq("id", tenant_pk).execute()
            except Exception as e:
                logger.error(f"Rollback failed: could not delete tenant {tenant_pk}: {e}")
        try:
            self.supabase.auth.admin.delete_user(user_id)
        except Exception as e:
            logger.error(f"Rollback failed: could not delete auth user {user_id}: {e}")
