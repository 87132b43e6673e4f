# storefront/identity.py
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

import httpx

from .errors import DuplicateIdentity, SignupRejected, UpstreamFailure

# Identity providers create users for POST /signup. The rest of the service
# treats the returned user object as opaque.

logger = logging.getLogger(__name__)


def _is_duplicate(code: str, message: str) -> bool:
    return code == "email_exists" or "already been registered" in (message or "")


class InMemoryIdentityProvider:
    def __init__(self):
        self._users: Dict[str, Dict[str, Any]] = {}

    async def create_user(self, email: str, password: str, name: str, role: str) -> Dict[str, Any]:
        if not email or not password:
            raise SignupRejected("Email and password are required")
        key = email.strip().lower()
        if key in self._users:
            raise DuplicateIdentity()
        now = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
        user = {
            "id": str(uuid.uuid4()),
            "email": email,
            "user_metadata": {"name": name, "role": role},
            "email_confirmed_at": now,
            "created_at": now,
        }
        self._users[key] = {**user, "password": password}
        return user


class SupabaseIdentityProvider:
    """Creates auto-confirmed users through the Supabase admin API."""

    def __init__(self, base_url: str, service_key: str, transport=None):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self._transport = transport

    async def create_user(self, email: str, password: str, name: str, role: str) -> Dict[str, Any]:
        payload = {
            "email": email,
            "password": password,
            "user_metadata": {"name": name, "role": role},
            # No mail server is configured, so confirm immediately
            "email_confirm": True,
        }
        headers = {"Authorization": f"Bearer {self.service_key}", "apikey": self.service_key}
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                r = await client.post(f"{self.base_url}/auth/v1/admin/users", json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Identity provider unreachable: {e}")

        try:
            body = r.json()
        except ValueError:
            body = {}
        if r.status_code >= 400:
            code = body.get("error_code") or body.get("code") or ""
            message = body.get("msg") or body.get("message") or r.text
            if _is_duplicate(str(code), message):
                raise DuplicateIdentity()
            if r.status_code >= 500:
                raise UpstreamFailure(message or "Failed to sign up")
            raise SignupRejected(message or "Failed to sign up")
        return body.get("user", body)
