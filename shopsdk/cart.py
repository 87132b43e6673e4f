# shopsdk/cart.py
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

# The shopper's cart lives on the client. Each line is a product snapshot
# taken at add time plus a quantity; the whole line list is written to one
# storage slot after every mutation and read back once on startup.

logger = logging.getLogger(__name__)

CART_STORAGE_KEY = "poultryParadiseCart"


class MemoryCartStorage:
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.slots: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.slots[key] = value


class FileCartStorage:
    """One file per key under ``directory``, e.g. ``poultryParadiseCart.json``."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set_item(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.directory, prefix=f".{key}-")
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(value)
        os.replace(tmp, self._path(key))


class Cart:
    """Ordered cart lines, unique by product id.

    Quantities are never checked against ``stock`` here; callers that want
    to cap a quantity read the product's stock before calling.
    """

    def __init__(self, storage, key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.key = key
        self._lines: List[Dict[str, Any]] = []
        saved = storage.get_item(key)
        if saved:
            self._lines = json.loads(saved)
            logger.debug("Restored %d cart lines from slot %s", len(self._lines), key)

    def _flush(self) -> None:
        self.storage.set_item(self.key, json.dumps(self._lines))

    # ---------------------------
    # Mutations
    # ---------------------------
    def add(self, product: Dict[str, Any], quantity: int = 1) -> None:
        existing = self.get(product["id"])
        if existing is not None:
            # a non-positive total still collapses to removal
            self.update_quantity(product["id"], existing["quantity"] + quantity)
            return
        if quantity > 0:
            self._lines.append({**product, "quantity": quantity})
        self._flush()

    def remove(self, product_id: str) -> None:
        self._lines = [line for line in self._lines if line["id"] != product_id]
        self._flush()

    def update_quantity(self, product_id: str, quantity: int) -> None:
        if quantity <= 0:
            self.remove(product_id)
            return
        for line in self._lines:
            if line["id"] == product_id:
                line["quantity"] = quantity
        self._flush()

    def clear(self) -> None:
        self._lines = []
        self._flush()

    # ---------------------------
    # Reads
    # ---------------------------
    @property
    def lines(self) -> List[Dict[str, Any]]:
        return [dict(line) for line in self._lines]

    def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        for line in self._lines:
            if line["id"] == product_id:
                return dict(line)
        return None

    @property
    def item_count(self) -> int:
        return sum(line["quantity"] for line in self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[Dict[str, Any]]:
        return iter(self.lines)
