"""Image uploads to the hosted object store.

Uploads go to a Supabase Storage compatible REST API. When storage is not
configured, or the upload fails for any reason, the image is embedded
inline as a `data:` URL instead; callers store whatever string comes back.
"""

import base64
import logging
import os
import uuid
from typing import Optional

import httpx

from studyfeed.core.config import settings

logger = logging.getLogger(__name__)


def object_path(owner_id: str, filename: Optional[str]) -> str:
    """'{owner}-{uuid}.{ext}', ext taken from the upload name (default jpg)."""
    ext = os.path.splitext(filename or "")[1].lstrip(".").lower()
    return f"{owner_id}-{uuid.uuid4()}.{ext or 'jpg'}"


def public_url(bucket: str, path: str, base_url: Optional[str] = None) -> str:
    base = (base_url or settings.storage_url or "").rstrip("/")
    return f"{base}/storage/v1/object/public/{bucket}/{path}"


def to_data_url(content: bytes, content_type: Optional[str]) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type or 'application/octet-stream'};base64,{encoded}"


class StorageClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        key: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base = (base_url if base_url is not None else settings.storage_url or "").rstrip("/")
        self.key = key if key is not None else settings.storage_key
        self.timeout = timeout or settings.storage_timeout
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base)

    def upload(self, bucket: str, path: str, content: bytes, content_type: Optional[str]) -> str:
        """Upload and return the public URL. Raises on any failure."""
        headers = {
            "x-upsert": "true",
            "cache-control": "3600",
            "content-type": content_type or "application/octet-stream",
        }
        if self.key:
            headers["Authorization"] = f"Bearer {self.key}"
            headers["apikey"] = self.key
        url = f"{self.base}/storage/v1/object/{bucket}/{path}"
        with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
            r = client.post(url, content=content, headers=headers)
            r.raise_for_status()
        return public_url(bucket, path, self.base)

    def upload_image(
        self,
        bucket: str,
        owner_id: str,
        filename: Optional[str],
        content: bytes,
        content_type: Optional[str],
    ) -> str:
        """Public URL on success, inline data URL otherwise."""
        if self.configured:
            path = object_path(owner_id, filename)
            try:
                return self.upload(bucket, path, content, content_type)
            except httpx.HTTPError as e:
                logger.warning("Storage upload to %s failed, falling back to inline image: %s", bucket, e)
        return to_data_url(content, content_type)


def get_storage() -> StorageClient:
    return StorageClient()
