#!/usr/bin/env python
import asyncio
import tempfile

from shopsdk.cart import Cart, FileCartStorage
from shopsdk.client import StoreClient
from shopsdk.session import ShopSession


def main():
    c = StoreClient(base_url="http://127.0.0.1:8085/make-server-6c34fe24")
    cart_dir = tempfile.mkdtemp(prefix="cart-")
    session = ShopSession(c, Cart(FileCartStorage(cart_dir)))

    # -----------------------------
    # Health
    # -----------------------------
    print("Checking service health...")
    print(c.health())

    # -----------------------------
    # Seed the catalog
    # -----------------------------
    print("\nInitializing products...")
    resp = c.init_products()
    print(resp["message"], resp["count"])

    # -----------------------------
    # Admin adds a product
    # -----------------------------
    print("\nAdding a product...")
    product = c.create_product({
        "name": "Kadaknath Chicken",
        "category": "Country Chicken",
        "subcategory": "Chicken",
        "price": 900,
        "unit": "kg",
        "description": "Black-meat country breed.",
        "image": "",
        "stock": 5,
    })
    print(product)

    # -----------------------------
    # Admin restocks it
    # -----------------------------
    print("\nUpdating stock...")
    print(c.update_product(product["id"], {"stock": 8}))

    # -----------------------------
    # Shopper syncs and fills the cart
    # -----------------------------
    print("\nSyncing catalog...")
    products = asyncio.run(session.sync_catalog_async())
    print(f"{len(products)} products")

    print("\nAdding products to cart...")
    session.cart.add(products[0], 2)
    session.cart.add(products[1], 3)
    session.cart.add(products[0], 1)
    for line in session.cart:
        print(line["name"], line["quantity"])

    # -----------------------------
    # Checkout
    # -----------------------------
    print("\nCheckout summary...")
    print(session.summary())

    print("\nPlacing order...")
    print(session.place_order())
    print(f"Cart now has {len(session.cart)} lines")

    # -----------------------------
    # Clean up
    # -----------------------------
    print("\nDeleting the demo product...")
    print(c.delete_product(product["id"]))


if __name__ == "__main__":
    main()
