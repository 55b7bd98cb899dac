from fastapi import APIRouter, Depends, HTTPException, status
from app.database.supabase_client import get_service_supabase
from app.modules.admin_users.schemas import AdminUserAdd, AdminUserLinkResponse
from app.modules.admin_users.service import AdminUserService
from app.core.dependencies import (
    get_current_user, get_tenant_by_slug, check_tenant_admin, rate_limit
)
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/admin-users", tags=["admin-users"])


def get_admin_user_service(supabase: Client = Depends(get_service_supabase)) -> AdminUserService:
    return AdminUserService(supabase)


@router.post("", response_model=AdminUserLinkResponse)
async def add_admin_user(
    link_data: AdminUserAdd,
    _limit=Depends(rate_limit("add_admin")),
    current_user: Dict = Depends(get_current_user),
    service: AdminUserService = Depends(get_admin_user_service),
    supabase: Client = Depends(get_service_supabase)
):
    """Link a user (the caller by default) to a tenant; the caller must already administer it"""
    tenant = get_tenant_by_slug(link_data.tenant_slug, supabase, "id")
    if not tenant:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant '{link_data.tenant_slug}' not found"
        )
    check_tenant_admin(tenant["id"], current_user, supabase)
    user_id = link_data.user_id or current_user["id"]
    return AdminUserLinkResponse(data=service.link_user(user_id, tenant["id"], link_data.role))
