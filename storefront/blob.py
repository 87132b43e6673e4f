# storefront/blob.py
import logging
from pathlib import Path
from urllib.parse import quote

import httpx
from starlette.concurrency import run_in_threadpool

from .errors import UpstreamFailure

# Blob sinks take uploaded product images and hand back a public URI.

logger = logging.getLogger(__name__)


class LocalBlobSink:
    """Writes images into a directory the API serves under ``/images``."""

    def __init__(self, directory: Path, public_url: str):
        self.directory = Path(directory)
        self.public_url = public_url.rstrip("/")

    def _write(self, target: Path, data: bytes) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    async def upload(self, name: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        target = self.directory / Path(name).name
        try:
            await run_in_threadpool(self._write, target, data)
        except OSError as e:
            raise UpstreamFailure(f"Failed to store image {name}: {e}")
        logger.info("Stored image %s (%d bytes)", target.name, len(data))
        return f"{self.public_url}/{quote(target.name)}"


class SupabaseBlobSink:
    """Uploads into a Supabase storage bucket with the service role key."""

    def __init__(self, base_url: str, service_key: str, bucket: str = "product-images", transport=None):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.bucket = bucket
        self._transport = transport

    def public_url(self, name: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{self.bucket}/{quote(name)}"

    async def upload(self, name: str, data: bytes, content_type: str = "application/octet-stream") -> str:
        headers = {
            "Authorization": f"Bearer {self.service_key}",
            "apikey": self.service_key,
            "Content-Type": content_type,
            "x-upsert": "true",
        }
        url = f"{self.base_url}/storage/v1/object/{self.bucket}/{quote(name)}"
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                r = await client.post(url, content=data, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Image upload failed: {e}")
        if r.status_code >= 400:
            try:
                message = r.json().get("message") or r.text
            except ValueError:
                message = r.text
            raise UpstreamFailure(message or f"Image upload failed with HTTP {r.status_code}")
        logger.info("Uploaded image %s to bucket %s", name, self.bucket)
        return self.public_url(name)
