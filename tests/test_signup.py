# tests/test_signup.py
import asyncio

import httpx
import pytest

from storefront.errors import DuplicateIdentity, SignupRejected, UpstreamFailure
from storefront.identity import SupabaseIdentityProvider


def test_signup_returns_user(client):
    r = client.post("/api/signup", json={"email": "asha@farm.test", "password": "pw", "name": "Asha", "role": "user"})
    assert r.status_code == 200
    user = r.json()["user"]
    assert user["email"] == "asha@farm.test"
    assert user["user_metadata"] == {"name": "Asha", "role": "user"}
    assert "password" not in user


def test_signup_defaults_role_to_user(client):
    r = client.post("/api/signup", json={"email": "ravi@farm.test", "password": "pw", "name": "Ravi"})
    assert r.json()["user"]["user_metadata"]["role"] == "user"


def test_duplicate_signup_is_422(client):
    payload = {"email": "asha@farm.test", "password": "pw", "name": "Asha", "role": "user"}
    client.post("/api/signup", json=payload)
    r = client.post("/api/signup", json={**payload, "email": "ASHA@farm.test"})
    assert r.status_code == 422
    assert "already been registered" in r.json()["error"]


def test_signup_missing_fields_is_400(client):
    r = client.post("/api/signup", json={"email": "x@farm.test"})
    assert r.status_code == 400
    assert "password" in r.json()["error"]


def _provider(handler):
    return SupabaseIdentityProvider("https://proj.supabase.test", "service-key", transport=httpx.MockTransport(handler))


def test_supabase_provider_creates_confirmed_user():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = request.read()
        return httpx.Response(200, json={"id": "u-1", "email": "a@b.test", "user_metadata": {"name": "A", "role": "admin"}})

    user = asyncio.run(_provider(handler).create_user("a@b.test", "pw", "A", "admin"))
    assert user["id"] == "u-1"
    assert seen["url"] == "https://proj.supabase.test/auth/v1/admin/users"
    assert seen["auth"] == "Bearer service-key"
    assert b'"email_confirm":true' in seen["body"].replace(b" ", b"")


@pytest.mark.parametrize("status,body,error", [
    (422, {"error_code": "email_exists", "msg": "A user with this email address has already been registered"}, DuplicateIdentity),
    (400, {"msg": "Password should be at least 6 characters"}, SignupRejected),
    (503, {"msg": "upstream down"}, UpstreamFailure),
])
def test_supabase_provider_error_mapping(status, body, error):
    provider = _provider(lambda request: httpx.Response(status, json=body))
    with pytest.raises(error):
        asyncio.run(provider.create_user("a@b.test", "pw", "A", "user"))
