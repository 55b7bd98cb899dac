from fastapi import APIRouter, Depends
from app.database.supabase_client import get_service_supabase, get_session_client
from app.modules.tenants.schemas import (
    RegisterRequest, RegisterResponse, TenantUpdate, TenantEnvelope,
    TenantUpdateResponse, AvailabilityResponse
)
from app.modules.tenants.service import TenantService
from app.core.dependencies import rate_limit, require_tenant_admin
from supabase import Client
from typing import Dict

router = APIRouter(prefix="/tenants", tags=["tenants"])


def get_tenant_service(supabase: Client = Depends(get_service_supabase)) -> TenantService:
    return TenantService(supabase)


def get_registration_service(
    supabase: Client = Depends(get_service_supabase),
    session_client: Client = Depends(get_session_client)
) -> TenantService:
    return TenantService(supabase, session_client)


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register_tenant(
    register_data: RegisterRequest,
    _limit=Depends(rate_limit("register", "Too many registration attempts. Please try again after an hour.")),
    service: TenantService = Depends(get_registration_service)
):
    """Register a new tenant with its owner account and sign the owner in"""
    return service.register(register_data)


@router.get("/check-availability/{tenant_slug}", response_model=AvailabilityResponse)
async def check_availability(
    tenant_slug: str,
    _limit=Depends(rate_limit("tenant_get")),
    service: TenantService = Depends(get_tenant_service)
):
    """Check whether a tenant ID can be registered"""
    return service.check_availability(tenant_slug)


@router.get("/{tenant_slug}", response_model=TenantEnvelope)
async def get_tenant(
    tenant_slug: str,
    _limit=Depends(rate_limit("tenant_get")),
    service: TenantService = Depends(get_tenant_service)
):
    """Public tenant settings by slug"""
    return TenantEnvelope(tenant=service.get_public_tenant(tenant_slug))


@router.put("/{tenant_slug}", response_model=TenantUpdateResponse)
async def update_tenant(
    tenant_slug: str,
    update: TenantUpdate,
    access: Dict = Depends(require_tenant_admin),
    service: TenantService = Depends(get_tenant_service)
):
    """Update name, logo or theme (tenant admins only)"""
    return service.update_tenant(access["tenant"]["id"], update)
