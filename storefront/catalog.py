# storefront/catalog.py
import logging
import random
import string
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .errors import NotFound
from .models import ProductIn, ProductPatch
from .seed import DEFAULT_PRODUCTS

# This file contains the product-level operations of the catalog store.

logger = logging.getLogger(__name__)

PRODUCT_PREFIX = "product:"

_ALNUM = string.ascii_lowercase + string.digits


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _millis() -> int:
    return int(time.time() * 1000)


def new_product_id() -> str:
    suffix = "".join(random.choices(_ALNUM, k=9))
    return f"{PRODUCT_PREFIX}{_millis()}-{suffix}"


class CatalogStore:
    """Products keyed by id on top of a key-value backend.

    Every write is a plain read-modify-write; concurrent updates to the same
    id are last-write-wins.
    """

    def __init__(self, kv):
        self.kv = kv

    # Raw key access
    def get(self, product_id: str) -> Optional[Dict[str, Any]]:
        return self.kv.get(product_id)

    def set(self, product_id: str, product: Dict[str, Any]) -> None:
        self.kv.set(product_id, product)

    def delete(self, product_id: str) -> bool:
        return self.kv.delete(product_id)

    def list_by_prefix(self, prefix: str) -> List[Dict[str, Any]]:
        return self.kv.get_by_prefix(prefix)

    # Product operations
    def list_products(self) -> List[Dict[str, Any]]:
        return self.list_by_prefix(PRODUCT_PREFIX)

    def create(self, data: ProductIn) -> Dict[str, Any]:
        product_id = new_product_id()
        product = {"id": product_id, **data.model_dump(), "createdAt": _now_iso()}
        self.set(product_id, product)
        logger.info("Created product %s (%s)", product_id, data.name)
        return product

    def update(self, product_id: str, patch: ProductPatch) -> Dict[str, Any]:
        existing = self.get(product_id)
        if not existing:
            raise NotFound()
        updated = {
            **existing,
            **patch.model_dump(exclude_unset=True, exclude_none=True),
            "id": product_id,
            "updatedAt": _now_iso(),
        }
        self.set(product_id, updated)
        logger.info("Updated product %s", product_id)
        return updated

    def remove(self, product_id: str) -> None:
        if not self.get(product_id):
            raise NotFound()
        self.delete(product_id)
        logger.info("Deleted product %s", product_id)

    def initialize(self) -> Tuple[bool, List[Dict[str, Any]]]:
        """Seed the default catalog unless any product already exists.

        Returns ``(created, products)`` where ``products`` is the seeded list
        on the first call and the existing catalog afterwards.
        """
        existing = self.list_products()
        if existing:
            return False, existing
        products = [self.create(p) for p in DEFAULT_PRODUCTS]
        logger.info("Seeded %d default products", len(products))
        return True, products
