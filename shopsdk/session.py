# shopsdk/session.py
import logging
from collections import OrderedDict
from typing import Any, Dict, List, Optional

import httpx

from .cart import Cart
from .checkout import CheckoutSummary, summarize
from .client import StoreAPIError, StoreClient

logger = logging.getLogger(__name__)


class ShopSession:
    """Everything one shopper's session owns: the signed-in user, the last
    catalog snapshot and the cart.

    Handlers receive the session explicitly; there is one writer per session.
    """

    def __init__(self, client: StoreClient, cart: Cart, user: Optional[Dict[str, Any]] = None):
        self.client = client
        self.cart = cart
        self.user = user
        self.products: List[Dict[str, Any]] = []
        self.error = ""

    @property
    def is_admin(self) -> bool:
        if not self.user:
            return False
        return (self.user.get("user_metadata") or {}).get("role") == "admin"

    def sync_catalog(self) -> List[Dict[str, Any]]:
        """Replace the catalog snapshot with the store's current product list.

        On failure the previous snapshot is kept and the message is left in
        ``error`` for display.
        """
        try:
            products = self.client.list_products()
        except (StoreAPIError, OSError) as e:
            logger.error("Error fetching products: %s", e)
            self.error = str(e)
            return self.products
        self.products = products
        self.error = ""
        return self.products

    async def sync_catalog_async(self) -> List[Dict[str, Any]]:
        """Same as :meth:`sync_catalog`, fetched over httpx without blocking."""
        try:
            products = await self.client.list_products_async()
        except (StoreAPIError, httpx.HTTPError) as e:
            logger.error("Error fetching products: %s", e)
            self.error = str(e)
            return self.products
        self.products = products
        self.error = ""
        return self.products

    def find_product(self, product_id: str) -> Optional[Dict[str, Any]]:
        for p in self.products:
            if p.get("id") == product_id:
                return p
        return None

    def products_by_category(self) -> "OrderedDict[str, List[Dict[str, Any]]]":
        grouped: "OrderedDict[str, List[Dict[str, Any]]]" = OrderedDict()
        for p in self.products:
            grouped.setdefault(p.get("category") or "Other", []).append(p)
        return grouped

    def summary(self) -> CheckoutSummary:
        return summarize(self.cart.lines)

    def place_order(self) -> CheckoutSummary:
        """Confirm the order shown at checkout and empty the cart."""
        summary = self.summary()
        self.cart.clear()
        logger.info("Order placed: total %.2f", summary.total)
        return summary
