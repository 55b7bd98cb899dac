from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import datetime


class MessageCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    subject: str = Field(min_length=2, max_length=200)
    message: str = Field(min_length=10, max_length=5000)
    tenant_id: str = Field(min_length=1)  # tenant uuid or slug

    @field_validator("email")
    @classmethod
    def validate_email_length(cls, value: str) -> str:
        if len(value) > 100:
            raise ValueError("must be at most 100 characters")
        return value


class MessageUpdate(BaseModel):
    is_read: bool


class MessageResponse(BaseModel):
    id: str
    tenant_id: str
    name: str
    email: str
    subject: str
    message: str
    is_read: bool = False
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MessageEnvelope(BaseModel):
    success: bool = True
    data: MessageResponse


class MessageListEnvelope(BaseModel):
    success: bool = True
    data: List[MessageResponse]


class MessageDeleteResponse(BaseModel):
    success: bool = True
    message: str = "Deleted successfully"
