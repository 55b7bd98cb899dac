"""
Core dependencies for route protection, tenant access checks and rate limiting
"""

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.config import settings
from app.core.security import RateLimitResult, check_rate_limit, get_client_ip, rate_limit_key
from app.database.supabase_client import get_service_supabase, get_session_client
from app.modules.auth.service import AuthService
from supabase import Client
from typing import Optional, Dict, Any
import logging

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is answered with 401 rather than FastAPI's default
security = HTTPBearer(auto_error=False)


def get_auth_service(supabase: Client = Depends(get_service_supabase)) -> AuthService:
    return AuthService(supabase)


def get_login_service(
    supabase: Client = Depends(get_service_supabase),
    session_client: Client = Depends(get_session_client)
) -> AuthService:
    """AuthService with a throwaway client for password sign-in"""
    return AuthService(supabase, session_client)


def get_optional_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(security)
) -> Optional[str]:
    """Bearer token if one was sent"""
    if credentials is None or not credentials.credentials:
        return None
    return credentials.credentials


def get_current_token(token: Optional[str] = Depends(get_optional_token)) -> str:
    """Bearer token; 401 when absent"""
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return token


def get_current_user(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> dict:
    """Resolve the bearer token to a Supabase Auth user"""
    return auth_service.get_current_user(token)


def get_tenant_by_slug(tenant_slug: str, supabase: Client, columns: str = "*") -> Optional[Dict[str, Any]]:
    """Look up a tenant row by its public slug. Returns None when no tenant uses the slug."""
    slug = (tenant_slug or "").strip().lower()
    if not slug:
        return None
    try:
        result = supabase.table("tenants")\
            .select(columns)\
            .eq("tenant_id", slug)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Error looking up tenant {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to look up tenant")
    if not result or not result.data:
        return None
    return result.data


def get_admin_link(user_id: str, tenant_pk: str, supabase: Client) -> Optional[Dict[str, Any]]:
    """Return the admin_users row linking user to tenant (by tenant uuid), if any"""
    try:
        result = supabase.table("admin_users")\
            .select("role")\
            .eq("user_id", user_id)\
            .eq("tenant_id", tenant_pk)\
            .maybe_single()\
            .execute()
    except Exception as e:
        logger.error(f"Error checking admin link for user {user_id}: {e}")
        raise HTTPException(status_code=500, detail="Failed to verify tenant access")
    if not result or not result.data:
        return None
    return result.data


def check_tenant_admin(tenant_pk: str, user_data: dict, supabase: Client) -> Dict[str, Any]:
    """403 unless the user administers the tenant; existence of the tenant is not revealed"""
    link = get_admin_link(user_data["id"], tenant_pk, supabase)
    if not link:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Access denied"
        )
    return link


def get_active_tenant(
    tenant_slug: str,
    supabase: Client = Depends(get_service_supabase)
) -> Dict[str, Any]:
    """Public tenant resolution: 404 for unknown slugs, 403 for deactivated tenants"""
    tenant = get_tenant_by_slug(tenant_slug, supabase)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    if not tenant.get("is_active", True):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Tenant is inactive")
    return tenant


def require_tenant_admin(
    tenant_slug: str,
    user_data: dict = Depends(get_current_user),
    supabase: Client = Depends(get_service_supabase)
) -> Dict[str, Any]:
    """Authenticated user must hold an admin_users row for the tenant in the path.

    Returns {"user", "tenant", "role"} for the handler.
    """
    tenant = get_tenant_by_slug(tenant_slug, supabase)
    if not tenant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Tenant not found")
    link = check_tenant_admin(tenant["id"], user_data, supabase)
    return {"user": user_data, "tenant": tenant, "role": link.get("role")}


def rate_limit(scope: str, message: str = "Too many requests"):
    """Factory for a dependency enforcing the database-backed limit for `scope`.

    Limit and window are read from settings on every request (`<scope>_rate_limit`,
    `<scope>_rate_window_ms`); the counter key is `<scope>_<client ip>`.
    """
    def check_limit(
        request: Request,
        supabase: Client = Depends(get_service_supabase)
    ) -> RateLimitResult:
        limit, window_ms = settings.get_rate_limit(scope)
        key = rate_limit_key(scope, get_client_ip(request))
        result = check_rate_limit(supabase, key, limit, window_ms)
        if not result.allowed:
            logger.warning(f"Rate limit exceeded for {key}")
            raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=message)
        return result
    return check_limit
