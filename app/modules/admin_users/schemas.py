from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class AdminUserAdd(BaseModel):
    tenant_slug: str = Field(min_length=1)
    role: str = Field(default="owner", min_length=1, max_length=50)
    user_id: Optional[str] = None  # defaults to the caller


class AdminUserResponse(BaseModel):
    id: Optional[str] = None
    user_id: str
    tenant_id: str
    role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class AdminUserLinkResponse(BaseModel):
    ok: bool = True
    data: AdminUserResponse
