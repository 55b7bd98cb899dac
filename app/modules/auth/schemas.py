from pydantic import BaseModel, EmailStr, Field
from typing import Optional, List, Dict, Any


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)
    tenant_id: Optional[str] = Field(default=None, alias="tenantId")

    class Config:
        populate_by_name = True


class TenantMembership(BaseModel):
    tenant_id: Optional[str] = Field(default=None, alias="tenantId")
    name: Optional[str] = None
    role: str
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")
    theme_config: Optional[Dict[str, Any]] = Field(default=None, alias="themeConfig")

    class Config:
        populate_by_name = True


class LoginResponse(BaseModel):
    message: str
    session: Optional[Dict[str, Any]] = None
    user: Optional[Dict[str, Any]] = None
    tenants: List[TenantMembership]


class CurrentUser(BaseModel):
    id: str
    email: Optional[str] = None


class MeResponse(BaseModel):
    user: CurrentUser
    tenants: List[TenantMembership]


class MessageResponse(BaseModel):
    message: str
