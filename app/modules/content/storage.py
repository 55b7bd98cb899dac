import logging
import mimetypes
import os
import re
import time
import uuid
from typing import Optional, Tuple

from supabase import Client

from app.config import settings

logger = logging.getLogger(__name__)

UPLOAD_FOLDERS = ("profile", "projects")
EXTENSION_PATTERN = re.compile(r"\.[a-z0-9]{1,10}")


class PortfolioStorage:
    """Images for portfolio sections, kept in the public Supabase Storage bucket"""

    def __init__(self, supabase: Client, bucket: Optional[str] = None):
        self.supabase = supabase
        self.bucket = bucket or settings.storage_bucket

    def build_path(self, folder: str, tenant_slug: str, filename: Optional[str], content_type: str) -> str:
        ext = os.path.splitext(filename or "")[1].lower()
        if not EXTENSION_PATTERN.fullmatch(ext):
            ext = mimetypes.guess_extension(content_type) or ""
        stamp = int(time.time() * 1000)
        return f"{folder}/{tenant_slug}-{stamp}-{uuid.uuid4().hex[:7]}{ext}"

    def upload_image(
        self,
        tenant_slug: str,
        folder: str,
        filename: Optional[str],
        content: bytes,
        content_type: str
    ) -> Tuple[str, str]:
        """Store the file and return (object path, public URL)"""
        path = self.build_path(folder, tenant_slug, filename, content_type)
        self.supabase.storage.from_(self.bucket).upload(
            path,
            content,
            file_options={"content-type": content_type}
        )
        url = self.supabase.storage.from_(self.bucket).get_public_url(path)
        logger.info(f"Uploaded {path} to bucket {self.bucket}")
        return path, url

    def object_path(self, path_or_url: str) -> str:
        """Accept either an object path or a public URL pointing into the bucket"""
        marker = f"/{self.bucket}/"
        if marker in path_or_url:
            path_or_url = path_or_url.split(marker, 1)[1]
        return path_or_url.split("?", 1)[0].lstrip("/")

    def owns(self, tenant_slug: str, path: str) -> bool:
        """True when `path` has exactly the shape build_path gives this tenant's uploads"""
        pattern = rf"({'|'.join(UPLOAD_FOLDERS)})/{re.escape(tenant_slug)}-\d+-[0-9a-f]+(\.[a-z0-9]{{1,10}})?"
        return re.fullmatch(pattern, path) is not None

    def remove(self, path: str) -> None:
        self.supabase.storage.from_(self.bucket).remove([path])
        logger.info(f"Removed {path} from bucket {self.bucket}")
