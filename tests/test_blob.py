# tests/test_blob.py
import asyncio

import httpx
import pytest

from storefront.blob import LocalBlobSink, SupabaseBlobSink
from storefront.errors import UpstreamFailure


def test_supabase_sink_returns_public_url():
    seen = {}

    def handler(request):
        seen["url"] = str(request.url)
        seen["upsert"] = request.headers["x-upsert"]
        seen["type"] = request.headers["Content-Type"]
        seen["body"] = request.read()
        return httpx.Response(200, json={"Key": "product-images/1-hen.png"})

    sink = SupabaseBlobSink("https://proj.supabase.test", "key", transport=httpx.MockTransport(handler))
    url = asyncio.run(sink.upload("1-hen.png", b"png", "image/png"))

    assert url == "https://proj.supabase.test/storage/v1/object/public/product-images/1-hen.png"
    assert seen["url"] == "https://proj.supabase.test/storage/v1/object/product-images/1-hen.png"
    assert seen["upsert"] == "true"
    assert seen["type"] == "image/png"
    assert seen["body"] == b"png"


def test_supabase_sink_failure_raises():
    handler = lambda request: httpx.Response(400, json={"message": "Bucket not found"})
    sink = SupabaseBlobSink("https://proj.supabase.test", "key", transport=httpx.MockTransport(handler))
    with pytest.raises(UpstreamFailure, match="Bucket not found"):
        asyncio.run(sink.upload("1-hen.png", b"png"))


def test_local_sink_writes_file(tmp_path):
    sink = LocalBlobSink(tmp_path / "images", "http://cdn.test/images/")
    url = asyncio.run(sink.upload("42-hen egg.png", b"data"))
    assert url == "http://cdn.test/images/42-hen%20egg.png"
    assert (tmp_path / "images" / "42-hen egg.png").read_bytes() == b"data"


def test_local_sink_writes_off_the_event_loop(tmp_path):
    class RecordingSink(LocalBlobSink):
        on_loop = None

        def _write(self, target, data):
            try:
                asyncio.get_running_loop()
                self.on_loop = True
            except RuntimeError:
                self.on_loop = False
            super()._write(target, data)

    sink = RecordingSink(tmp_path / "images", "http://cdn.test/images")
    asyncio.run(sink.upload("1-hen.png", b"png"))
    assert sink.on_loop is False
    assert (tmp_path / "images" / "1-hen.png").read_bytes() == b"png"
