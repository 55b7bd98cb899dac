import hashlib
import logging
import time
from supabase import Client
from app.modules.auth.schemas import LoginRequest, LoginResponse, TenantMembership
from fastapi import HTTPException
from typing import Dict, Any, List, Optional

logger = logging.getLogger(__name__)

# In-memory cache for get_current_user to reduce Supabase auth calls (e.g. many parallel requests with same token)
_AUTH_USER_CACHE: Dict[str, tuple] = {}
_AUTH_CACHE_TTL_SEC = 60
_AUTH_CACHE_MAX_SIZE = 500

MEMBERSHIP_SELECT = "tenant_id, role, tenants:tenant_id (id, tenant_id, name, logo_url, theme_config)"


def _token_cache_key(token: str) -> str:
    return hashlib.sha256(token.encode()).hexdigest()


def clear_auth_cache() -> None:
    _AUTH_USER_CACHE.clear()


def dump_model(obj: Any) -> Optional[Dict[str, Any]]:
    """Serialize a supabase auth model (User, Session) into plain JSON-ready data."""
    if obj is None:
        return None
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    return dict(obj)


class AuthService:
    def __init__(self, supabase: Client, session_client: Optional[Client] = None):
        self.supabase = supabase
        # Password sign-in mutates client state; keep it off the shared service client
        self.session_client = session_client or supabase

    def login(self, login_data: LoginRequest) -> LoginResponse:
        """Authenticate with Supabase Auth, then require at least one tenant membership"""
        try:
            auth_response = self.session_client.auth.sign_in_with_password({
                "email": login_data.email,
                "password": login_data.password
            })
        except Exception as e:
            logger.info(f"Login rejected for {login_data.email}: {e}")
            raise HTTPException(status_code=401, detail=getattr(e, "message", None) or "Invalid credentials")

        if not auth_response.user or not auth_response.session:
            raise HTTPException(status_code=401, detail="Invalid credentials")

        try:
            memberships = self.get_user_tenants(auth_response.user.id)
        except HTTPException:
            self._discard_session(auth_response.session.access_token)
            raise

        if not memberships:
            self._discard_session(auth_response.session.access_token)
            raise HTTPException(status_code=403, detail="User is not associated with any tenant")

        if login_data.tenant_id:
            if not any(m.tenant_id == login_data.tenant_id for m in memberships):
                self._discard_session(auth_response.session.access_token)
                raise HTTPException(status_code=403, detail="Access denied to this tenant")

        return LoginResponse(
            message="Login successful",
            session=dump_model(auth_response.session),
            user=dump_model(auth_response.user),
            tenants=memberships
        )

    def get_user_tenants(self, user_id: str) -> List[TenantMembership]:
        """List tenants the user administers, with role and public tenant settings"""
        try:
            result = self.supabase.table("admin_users")\
                .select(MEMBERSHIP_SELECT)\
                .eq("user_id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Error loading tenants for user {user_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load tenant memberships")

        memberships = []
        for item in result.data or []:
            tenant = item.get("tenants") or {}
            memberships.append(TenantMembership(
                tenant_id=tenant.get("tenant_id"),
                name=tenant.get("name"),
                role=item.get("role", "owner"),
                logo_url=tenant.get("logo_url"),
                theme_config=tenant.get("theme_config")
            ))
        return memberships

    def get_current_user(self, token: str) -> Dict[str, Any]:
        """Get current user details from Supabase Auth token. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = _token_cache_key(token)
            now = time.monotonic()
            if cache_key in _AUTH_USER_CACHE:
                user_data, expiry = _AUTH_USER_CACHE[cache_key]
                if now < expiry:
                    return user_data
                del _AUTH_USER_CACHE[cache_key]
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid token")
            user = user_response.user
            user_data = {
                "id": user.id,
                "email": user.email,
                "user_metadata": user.user_metadata or {},
                "app_metadata": user.app_metadata or {},
            }
            if len(_AUTH_USER_CACHE) < _AUTH_CACHE_MAX_SIZE:
                _AUTH_USER_CACHE[cache_key] = (user_data, now + _AUTH_CACHE_TTL_SEC)
            return user_data
        except HTTPException:
            raise
        except Exception as e:
            logger.debug(f"Token verification failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid token")

    def logout(self, token: Optional[str]) -> bool:
        """Revoke the session behind `token`. Never fails the request."""
        if not token:
            return False
        _AUTH_USER_CACHE.pop(_token_cache_key(token), None)
        try:
            self.supabase.auth.admin.sign_out(token)
            return True
        except Exception as e:
            logger.error(f"Logout error: {e}")
            return False

    def _discard_session(self, access_token: str) -> None:
        try:
            self.supabase.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.warning(f"Could not revoke session after rejected login: {e}")
