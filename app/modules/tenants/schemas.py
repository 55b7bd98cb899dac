import re
from urllib.parse import urlparse
from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime
from app.config import settings

TENANT_ID_PATTERN = re.compile(r"[a-z0-9-]+")
TENANT_ID_MIN_LENGTH = 3
TENANT_ID_MAX_LENGTH = 50


def tenant_id_problem(tenant_id: str) -> Optional[str]:
    """Why `tenant_id` cannot be registered (format, length or reserved), or None if acceptable"""
    if not TENANT_ID_PATTERN.fullmatch(tenant_id or ""):
        return "Invalid format. Use only lowercase letters, numbers, and hyphens."
    if not TENANT_ID_MIN_LENGTH <= len(tenant_id) <= TENANT_ID_MAX_LENGTH:
        return f"Must be between {TENANT_ID_MIN_LENGTH} and {TENANT_ID_MAX_LENGTH} characters."
    if tenant_id in settings.get_reserved_tenant_ids():
        return "This ID is reserved."
    return None


def _check_url(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("must be a valid URL")
    return value


class RegisterRequest(BaseModel):
    tenant_name: str = Field(alias="tenantName", min_length=2, max_length=100)
    tenant_id: str = Field(alias="tenantId")
    admin_email: EmailStr = Field(alias="adminEmail")
    password: str = Field(min_length=8, max_length=100)
    logo: Optional[str] = Field(default=None, max_length=500)

    class Config:
        populate_by_name = True

    @field_validator("tenant_id")
    @classmethod
    def validate_tenant_id(cls, value: str) -> str:
        problem = tenant_id_problem(value)
        if problem:
            raise ValueError(problem)
        return value

    @field_validator("admin_email")
    @classmethod
    def validate_admin_email(cls, value: str) -> str:
        if len(value) > 100:
            raise ValueError("must be at most 100 characters")
        return value

    @field_validator("logo")
    @classmethod
    def validate_logo(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value)


class TenantSummary(BaseModel):
    id: str
    tenant_id: str = Field(alias="tenantId")
    name: str
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")

    class Config:
        populate_by_name = True


class RegisterResponse(BaseModel):
    success: bool = True
    message: str
    tenant: TenantSummary
    session: Optional[Dict[str, Any]] = None
    user: Optional[Dict[str, Any]] = None


class TenantUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=100)
    logo_url: Optional[str] = Field(default=None, alias="logoUrl", max_length=500)
    logo: Optional[str] = Field(default=None, max_length=500)  # alias of logoUrl, wins when both are sent
    theme_config: Optional[Dict[str, Any]] = Field(default=None, alias="themeConfig")

    class Config:
        populate_by_name = True

    @field_validator("logo_url", "logo")
    @classmethod
    def validate_urls(cls, value: Optional[str]) -> Optional[str]:
        return _check_url(value)


class TenantResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    logo_url: Optional[str] = None
    theme_config: Optional[Dict[str, Any]] = None
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class TenantEnvelope(BaseModel):
    tenant: TenantResponse


class TenantUpdateResponse(BaseModel):
    message: str
    tenant: TenantResponse


class AvailabilityResponse(BaseModel):
    available: bool
    reason: Optional[str] = None
