# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from storefront.catalog import CatalogStore
from storefront.config import Settings
from storefront.database import MemoryKVStore
from storefront.errors import UpstreamFailure
from storefront.main import create_app


class FakeBlobSink:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls = []

    async def upload(self, name, data, content_type="application/octet-stream"):
        self.calls.append((name, data, content_type))
        if self.fail:
            raise UpstreamFailure("bucket unavailable")
        return f"https://cdn.test/{name}"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        api_prefix="/api",
        store_backend="memory",
        blob_backend="local",
        blob_dir=tmp_path / "images",
        blob_public_url="http://testserver/images",
        identity_backend="memory",
        cors_origins=["*"],
    )


@pytest.fixture
def store():
    return CatalogStore(MemoryKVStore())


@pytest.fixture
def blob_sink():
    return FakeBlobSink()


@pytest.fixture
def app(settings, store, blob_sink):
    return create_app(settings, store=store, blob_sink=blob_sink)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def chicken():
    return {
        "name": "Country Chicken",
        "category": "Country Chicken",
        "subcategory": "Chicken",
        "price": 450.0,
        "unit": "kg",
        "description": "Free range",
        "image": "https://img.test/chicken.jpg",
        "stock": 12,
    }


@pytest.fixture
def failing_blob_sink():
    return FakeBlobSink(fail=True)
