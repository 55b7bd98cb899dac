from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, status
from app.database.supabase_client import get_service_supabase
from app.modules.messages.schemas import (
    MessageCreate, MessageUpdate, MessageEnvelope, MessageListEnvelope, MessageDeleteResponse
)
from app.modules.messages.service import MessageService
from app.modules.messages.notifier import notify_new_message
from app.core.dependencies import get_current_user, check_tenant_admin, rate_limit
from supabase import Client
from typing import Dict, Optional

router = APIRouter(prefix="/contact", tags=["contact"])


def get_message_service(supabase: Client = Depends(get_service_supabase)) -> MessageService:
    return MessageService(supabase)


def _authorize_message(message_id: str, user_data: Dict, service: MessageService, supabase: Client) -> Dict:
    """403 both when the message is missing and when it belongs to another tenant"""
    message = service.get_message(message_id)
    if not message:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
    check_tenant_admin(message["tenant_id"], user_data, supabase)
    return message


@router.post("", response_model=MessageEnvelope, status_code=201)
async def submit_message(
    message_data: MessageCreate,
    background_tasks: BackgroundTasks,
    _limit=Depends(rate_limit("contact_post", "Too many requests. Please try again later.")),
    service: MessageService = Depends(get_message_service)
):
    """Public contact form submission"""
    message = service.create_message(message_data)
    background_tasks.add_task(notify_new_message, service, message)
    return MessageEnvelope(data=message)


@router.get("", response_model=MessageListEnvelope)
async def list_messages(
    tenant_id: Optional[str] = Query(default=None, alias="tenantId"),
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_service_supabase)
):
    """Messages for a tenant the caller administers (tenantId is a uuid or slug)"""
    if not tenant_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Tenant ID is required")
    tenant_pk = service.resolve_tenant_pk(tenant_id)
    check_tenant_admin(tenant_pk, user_data, supabase)
    return MessageListEnvelope(data=service.list_messages(tenant_pk))


@router.patch("/{message_id}", response_model=MessageEnvelope)
async def update_message(
    message_id: str,
    update: MessageUpdate,
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_service_supabase)
):
    """Mark a message read or unread"""
    _authorize_message(message_id, user_data, service, supabase)
    return MessageEnvelope(data=service.set_read(message_id, update.is_read))


@router.delete("/{message_id}", response_model=MessageDeleteResponse)
async def delete_message(
    message_id: str,
    user_data: Dict = Depends(get_current_user),
    service: MessageService = Depends(get_message_service),
    supabase: Client = Depends(get_service_supabase)
):
    """Delete a message"""
    _authorize_message(message_id, user_data, service, supabase)
    service.delete_message(message_id)
    return MessageDeleteResponse()
