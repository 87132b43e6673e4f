# tests/test_concurrency.py
import asyncio

import httpx


async def _update(app, product_id, patch):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        return await ac.put(f"/api/products/{product_id}", json=patch)


async def _both(app, product_id):
    return await asyncio.gather(
        _update(app, product_id, {"stock": 1}),
        _update(app, product_id, {"stock": 2}),
    )


def test_concurrent_updates_last_write_wins(app, client, store, chicken):
    pid = client.post("/api/products", json=chicken).json()["product"]["id"]

    results = asyncio.run(_both(app, pid))
    # no lock, no version check: both succeed and one overwrites the other
    assert [r.status_code for r in results] == [200, 200]
    final = store.get(pid)
    assert final["stock"] in (1, 2)
    assert final["name"] == chicken["name"]
    assert len(store.list_products()) == 1


class LoopRecordingStore:
    """Wraps a catalog store and records whether each call ran on the event loop."""

    def __init__(self, store):
        self.store = store
        self.on_loop = []

    def __getattr__(self, name):
        target = getattr(self.store, name)

        def call(*args, **kwargs):
            try:
                asyncio.get_running_loop()
                self.on_loop.append(name)
            except RuntimeError:
                pass
            return target(*args, **kwargs)

        return call


def test_store_calls_run_off_the_event_loop(app, client, store, chicken):
    recorder = LoopRecordingStore(store)
    app.state.store = recorder

    pid = client.post("/api/products", json=chicken).json()["product"]["id"]
    client.get("/api/products")
    client.put(f"/api/products/{pid}", json={"stock": 3})
    client.delete(f"/api/products/{pid}")
    client.post("/api/init-products")

    assert recorder.on_loop == []
    assert len(store.list_products()) > 0
