"""
Object storage (Supabase Storage) access
"""
import logging
from typing import List, Optional
from urllib.parse import urlparse

from django.conf import settings
from supabase import create_client, Client

from api.exceptions import UploadError

logger = logging.getLogger('media')

SIZE_ERROR_MARKERS = ('size', 'exceeded', 'maximum')


def format_upload_error(message: str, name: str = None, size: int = None) -> str:
    """Storage rejection text with a remediation hint when the file was too big"""
    limit_mb = settings.MAX_STORAGE_UPLOAD_SIZE // (1024 * 1024)
    lowered = (message or '').lower()
    if any(marker in lowered for marker in SIZE_ERROR_MARKERS):
        detail = ''
        if name and size:
            detail = f" {name} is {size / (1024 * 1024):.2f}MB."
        return (
            f"File size exceeds storage limit.{detail} Storage limit: {limit_mb}MB. "
            f"Compress the file to under {limit_mb}MB or upgrade the storage plan."
        )
    return f"Upload failed: {message}"


class StorageService:
    """Service for Supabase Storage buckets"""

    def __init__(self, client: Client = None):
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
                raise UploadError("Supabase URL and Service Role Key must be set")
            self._client = create_client(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY)
        return self._client

    def bucket(self, name: str):
        return self.client.storage.from_(name)

    def upload(self, bucket: str, path: str, content: bytes, content_type: str,
               name: str = None) -> str:
        """Upload bytes and return the object's public URL"""
        logger.info(f"[STORAGE_UPLOAD] {bucket}/{path} ({len(content)} bytes, {content_type})")
        try:
            self.bucket(bucket).upload(
                path,
                content,
                file_options={
                    "content-type": content_type,
                    "cache-control": "3600",
                    "upsert": "false",
                },
            )
        except Exception as e:
            logger.error(f"[STORAGE_UPLOAD_FAILED] {bucket}/{path}: {str(e)}")
            raise UploadError(format_upload_error(str(e), name=name, size=len(content))) from e

        return self.public_url(bucket, path)

    def public_url(self, bucket: str, path: str) -> str:
        return self.bucket(bucket).get_public_url(path)

    def signed_url(self, bucket: str, path: str, expires_in: int = None) -> str:
        """Signed URL, falling back to the public URL when signing fails"""
        expires_in = expires_in or settings.SIGNED_URL_EXPIRES_IN
        try:
            data = self.bucket(bucket).create_signed_url(path, expires_in)
        except Exception as e:
            logger.warning(f"[STORAGE_SIGN_FAILED] {bucket}/{path}: {str(e)}")
            return self.public_url(bucket, path)

        signed = None
        if isinstance(data, dict):
            signed = data.get('signedURL') or data.get('signedUrl')
        return signed or self.public_url(bucket, path)

    def list(self, bucket: str, prefix: str, limit: int, offset: int = 0) -> List[dict]:
        try:
            return self.bucket(bucket).list(prefix, {
                "limit": limit,
                "offset": offset,
                "sortBy": {"column": "created_at", "order": "desc"},
            }) or []
        except Exception as e:
            logger.error(f"[STORAGE_LIST_FAILED] {bucket}/{prefix}: {str(e)}")
            raise UploadError(f"Failed to list {bucket} files: {str(e)}") from e

    @staticmethod
    def is_storage_url(url: Optional[str]) -> bool:
        """True when the URL points at our own storage host"""
        if not url or not settings.SUPABASE_URL:
            return False
        return urlparse(url).netloc == urlparse(settings.SUPABASE_URL).netloc
