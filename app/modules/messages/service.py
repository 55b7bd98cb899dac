import re
from supabase import Client
from app.core.dependencies import get_tenant_by_slug
from app.modules.messages.schemas import MessageCreate, MessageResponse
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

UUID_PATTERN = re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE)


class MessageService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def resolve_tenant_pk(self, identifier: str) -> str:
        """Accept a tenant uuid as-is; resolve anything else as a slug (404 if unknown)"""
        if UUID_PATTERN.fullmatch(identifier):
            return identifier
        tenant = get_tenant_by_slug(identifier, self.supabase, "id")
        if not tenant:
            raise HTTPException(status_code=404, detail="Tenant not found")
        return tenant["id"]

    def create_message(self, message_data: MessageCreate) -> MessageResponse:
        """Store a contact form submission for a tenant"""
        tenant_pk = self.resolve_tenant_pk(message_data.tenant_id)
        try:
            result = self.supabase.table("messages").insert({
                "name": message_data.name.strip(),
                "email": message_data.email.lower().strip(),
                "subject": message_data.subject.strip(),
                "message": message_data.message.strip(),
                "tenant_id": tenant_pk
            }).execute()
        except Exception as e:
            logger.error(f"Failed to store contact message for tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail="Failed to save message")

        if not result.data:
            raise HTTPException(status_code=500, detail="Failed to save message")

        return MessageResponse(**result.data[0])

    def list_messages(self, tenant_pk: str) -> List[MessageResponse]:
        """All messages for a tenant, newest first"""
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("tenant_id", tenant_pk)\
                .order("created_at", desc=True)\
                .execute()
            return [MessageResponse(**m) for m in result.data or []]
        except Exception as e:
            logger.error(f"Failed to list messages for tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load messages")

    def get_message(self, message_id: str) -> Optional[Dict[str, Any]]:
        """The message row, or None when the id is unknown or not a uuid"""
        if not UUID_PATTERN.fullmatch(message_id):
            return None
        try:
            result = self.supabase.table("messages")\
                .select("*")\
                .eq("id", message_id)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Failed to load message {message_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to load message")
        if not result or not result.data:
            return None
        return result.data

    def set_read(self, message_id: str, is_read: bool) -> MessageResponse:
        try:
            result = self.supabase.table("messages")\
                .update({"is_read": is_read})\
                .eq("id", message_id)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to update message {message_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update message")
        if not result.data:
            raise HTTPException(status_code=404, detail="Message not found")
        return MessageResponse(**result.data[0])

    def delete_message(self, message_id: str) -> bool:
        try:
            result = self.supabase.table("messages")\
                .delete()\
                .eq("id", message_id)\
                .execute()
            return len(result.data or []) > 0
        except Exception as e:
            logger.error(f"Failed to delete message {message_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete message")

    def get_notification_recipient(self, tenant_pk: str) -> Optional[str]:
        """Tenant's public contact email, if one is configured"""
        try:
            result = self.supabase.table("contact_info")\
                .select("email")\
                .eq("tenant_id", tenant_pk)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.warning(f"Could not load contact email for tenant {tenant_pk}: {e}")
            return None
        if not result or not result.data:
            return None
        return result.data.get("email") or None
