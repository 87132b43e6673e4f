# tests/test_checkout.py
from shopsdk.cart import Cart, MemoryCartStorage
from shopsdk.checkout import DELIVERY_FEE, CheckoutSummary, summarize


def test_summary_example():
    lines = [{"price": 100, "quantity": 2}, {"price": 50, "quantity": 3}]
    assert summarize(lines) == CheckoutSummary(subtotal=350, delivery=50, total=400)


def test_empty_cart_has_no_delivery():
    assert summarize([]) == CheckoutSummary(subtotal=0, delivery=0, total=0)


def test_summary_tracks_cart_changes():
    cart = Cart(MemoryCartStorage())
    cart.add({"id": "a", "price": 120.0}, 2)
    assert summarize(cart.lines).total == 240.0 + DELIVERY_FEE

    cart.update_quantity("a", 1)
    assert summarize(cart.lines).subtotal == 120.0

    cart.clear()
    assert summarize(cart.lines).total == 0
