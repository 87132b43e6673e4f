# shopsdk/client.py
import mimetypes
import os
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import requests

DEFAULT_BASE_URL = os.environ.get("STORE_API_URL", "http://127.0.0.1:8085/make-server-6c34fe24")


class StoreAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


def _unwrap(r) -> Any:
    """Decode a JSON response, raising StoreAPIError on any non-2xx status.

    Works for both requests and httpx responses.
    """
    try:
        body = r.json()
    except ValueError:
        body = None
    if r.status_code >= 400:
        message = body.get("error") if isinstance(body, dict) else None
        raise StoreAPIError(r.status_code, message or f"HTTP {r.status_code}: {r.text}")
    return body


class StoreClient:
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        api_key: Optional[str] = None,
        timeout: int = 10,
        session=None,
        async_transport=None,
    ):
        self.base_url = base_url.rstrip("/")
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout
        self.api_key = api_key
        self.async_transport = async_transport
        if api_key:
            self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def _product_url(self, product_id: str) -> str:
        return f"{self.base_url}/products/{quote(product_id, safe='')}"

    def health(self) -> Dict[str, Any]:
        r = self.session.get(f"{self.base_url}/health", timeout=self.timeout)
        return _unwrap(r)

    # Auth
    def signup(self, email: str, password: str, name: str, role: str = "user") -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/signup", json={
            "email": email, "password": password, "name": name, "role": role
        }, timeout=self.timeout)
        return _unwrap(r)["user"]

    # Catalog
    def list_products(self) -> List[Dict[str, Any]]:
        r = self.session.get(f"{self.base_url}/products", timeout=self.timeout)
        return _unwrap(r).get("products") or []

    def create_product(self, product: Dict[str, Any]) -> Dict[str, Any]:
        """Structured encoding: every field typed, ``image`` a ready URI."""
        r = self.session.post(f"{self.base_url}/products", json=product, timeout=self.timeout)
        return _unwrap(r)["product"]

    def upload_product(self, fields: Dict[str, Any], image_path: Optional[str] = None) -> Dict[str, Any]:
        """Field-set encoding: fields sent as form strings plus an optional image file."""
        data = {k: str(v) for k, v in fields.items() if v is not None and k != "image"}
        if not image_path:
            r = self.session.post(f"{self.base_url}/products", data=data, timeout=self.timeout)
            return _unwrap(r)["product"]

        path = Path(image_path)
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        with path.open("rb") as fh:
            files = {"image": (path.name, fh, content_type)}
            r = self.session.post(f"{self.base_url}/products", data=data, files=files, timeout=self.timeout)
        return _unwrap(r)["product"]

    def update_product(self, product_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
        r = self.session.put(self._product_url(product_id), json=patch, timeout=self.timeout)
        return _unwrap(r)["product"]

    def delete_product(self, product_id: str) -> str:
        r = self.session.delete(self._product_url(product_id), timeout=self.timeout)
        return _unwrap(r)["message"]

    def init_products(self) -> Dict[str, Any]:
        r = self.session.post(f"{self.base_url}/init-products", timeout=self.timeout)
        return _unwrap(r)

    # Async catalog fetch
    async def list_products_async(self) -> List[Dict[str, Any]]:
        headers = {"Authorization": f"Bearer {self.api_key}"} if self.api_key else None
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.async_transport) as client:
            r = await client.get(f"{self.base_url}/products", headers=headers)
            return _unwrap(r).get("products") or []
