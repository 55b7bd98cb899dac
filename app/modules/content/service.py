from datetime import datetime, timezone
from supabase import Client
from typing import Any, Dict, List, Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)

# One row per tenant, upserted on tenant_id
SECTION_TABLES = ("hero", "about", "contact_info")

# Many rows per tenant: table -> (order column, descending)
COLLECTION_ORDER = {
    "skills": ("category", False),
    "projects": ("created_at", True),
    "experience": ("created_at", True),
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ContentService:
    """CRUD for the tenant-scoped portfolio sections edited in the dashboard"""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_section(self, table: str, tenant_pk: str) -> Optional[Dict[str, Any]]:
        try:
            result = self.supabase.table(table)\
                .select("*")\
                .eq("tenant_id", tenant_pk)\
                .maybe_single()\
                .execute()
        except Exception as e:
            logger.error(f"Failed to load {table} for tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to load {table}")
        if not result or not result.data:
            return None
        return result.data

    def upsert_section(self, table: str, tenant_pk: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Create or update the tenant's single row; only the given columns change"""
        payload = {**data, "tenant_id": tenant_pk, "updated_at": _now()}
        try:
            result = self.supabase.table(table)\
                .upsert(payload, on_conflict="tenant_id")\
                .execute()
        except Exception as e:
            logger.error(f"Failed to save {table} for tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to save {table}")
        if not result.data:
            raise HTTPException(status_code=500, detail=f"Failed to save {table}")
        return result.data[0]

    def list_items(self, table: str, tenant_pk: str) -> List[Dict[str, Any]]:
        column, desc = COLLECTION_ORDER[table]
        try:
            result = self.supabase.table(table)\
                .select("*")\
                .eq("tenant_id", tenant_pk)\
                .order(column, desc=desc)\
                .execute()
            return result.data or []
        except Exception as e:
            logger.error(f"Failed to list {table} for tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to load {table}")

    def create_item(self, table: str, tenant_pk: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {**data, "tenant_id": tenant_pk}
        try:
            result = self.supabase.table(table).insert(payload).execute()
        except Exception as e:
            logger.error(f"Failed to create {table} item for tenant {tenant_pk}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to create {table} item")
        if not result.data:
            raise HTTPException(status_code=500, detail=f"Failed to create {table} item")
        return result.data[0]

    def update_item(self, table: str, tenant_pk: str, item_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """Partial update, scoped to the tenant so ids from other tenants read as missing"""
        if not data:
            raise HTTPException(status_code=400, detail="No valid fields to update")
        payload = {**data, "updated_at": _now()}
        try:
            result = self.supabase.table(table)\
                .update(payload)\
                .eq("id", item_id)\
                .eq("tenant_id", tenant_pk)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to update {table} item {item_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to update {table} item")
        if not result.data:
            raise HTTPException(status_code=404, detail="Item not found")
        return result.data[0]

    def delete_item(self, table: str, tenant_pk: str, item_id: str) -> None:
        try:
            result = self.supabase.table(table)\
                .delete()\
                .eq("id", item_id)\
                .eq("tenant_id", tenant_pk)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to delete {table} item {item_id}: {e}")
            raise HTTPException(status_code=500, detail=f"Failed to delete {table} item")
        if not result.data:
            raise HTTPException(status_code=404, detail="Item not found")

    def get_portfolio(self, tenant: Dict[str, Any]) -> Dict[str, Any]:
        """Every section of a tenant's portfolio in one payload"""
        tenant_pk = tenant["id"]
        portfolio: Dict[str, Any] = {"tenant": tenant}
        for table in SECTION_TABLES:
            portfolio[table] = self.get_section(table, tenant_pk)
        for table in COLLECTION_ORDER:
            portfolio[table] = self.list_items(table, tenant_pk)
        return portfolio
