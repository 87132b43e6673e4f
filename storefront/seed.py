# storefront/seed.py
from typing import List

from .models import ProductIn

# Starter catalog written by POST /init-products on an empty store.

DEFAULT_PRODUCTS: List[ProductIn] = [
    ProductIn(
        name="Country Chicken (Whole)",
        category="Country Chicken",
        subcategory="Chicken",
        price=450,
        unit="kg",
        description="Free-range country chicken, cleaned and cut to order.",
        image="https://images.unsplash.com/photo-1587593810167-a84920ea0781",
        stock=25,
    ),
    ProductIn(
        name="Country Chicken Eggs",
        category="Country Chicken",
        subcategory="Eggs",
        price=120,
        unit="dozen",
        description="Brown eggs from free-range country hens.",
        image="https://images.unsplash.com/photo-1582722872445-44dc5f7e3c8f",
        stock=60,
    ),
    ProductIn(
        name="Broiler Chicken",
        category="Broiler & Layer",
        subcategory="Chicken",
        price=220,
        unit="kg",
        description="Tender broiler chicken, skinless curry cut.",
        image="https://images.unsplash.com/photo-1604503468506-a8da13d82791",
        stock=40,
    ),
    ProductIn(
        name="Layer Eggs",
        category="Broiler & Layer",
        subcategory="Eggs",
        price=72,
        unit="dozen",
        description="Farm fresh white eggs.",
        image="https://images.unsplash.com/photo-1506976785307-8732e854ad03",
        stock=100,
    ),
    ProductIn(
        name="Quail Meat",
        category="Quail Bird",
        subcategory="Meat",
        price=80,
        unit="piece",
        description="Dressed quail, ready to cook.",
        image="https://images.unsplash.com/photo-1615361200141-f45040f367be",
        stock=30,
    ),
    ProductIn(
        name="Quail Eggs",
        category="Quail Bird",
        subcategory="Eggs",
        price=60,
        unit="dozen",
        description="Speckled quail eggs, rich in protein.",
        image="https://images.unsplash.com/photo-1598965675045-45c5e72c7d05",
        stock=50,
    ),
]
