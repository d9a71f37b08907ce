from decimal import Decimal
from itertools import count

import pytest
from django.core.cache import cache

from apps.catalog.models import Category, Product, ProductImage
from apps.store_settings.domain import SettingsStore

_seq = count(1)


@pytest.fixture(autouse=True)
def use_stubs_for_tests(settings):
    settings.USE_HTTP_ADAPTERS = False
    # Throttle counters live in the cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def store_settings(db):
    SettingsStore().seed_defaults()
    return SettingsStore()


@pytest.fixture
def make_category(db):
    def _make(name=None, parent=None, **kw):
        n = next(_seq)
        name = name or f"Category {n}"
        return Category.objects.create(name=name, slug=kw.pop("slug", f"category-{n}"), parent=parent, **kw)

    return _make


@pytest.fixture
def category(make_category):
    return make_category("Sarees")


@pytest.fixture
def make_product(db, category):
    def _make(name=None, price="100.00", stock=10, images=(), **kw):
        n = next(_seq)
        name = name or f"Product {n}"
        product = Product.objects.create(
            name=name,
            slug=kw.pop("slug", f"product-{n}"),
            sku=kw.pop("sku", f"SKU-{n}"),
            category=kw.pop("category", category),
            price=Decimal(price),
            stock_quantity=stock,
            **kw,
        )
        for i, url in enumerate(images):
            ProductImage.objects.create(product=product, image_url=url, display_order=i, is_primary=(i == 0))
        return product

    return _make


@pytest.fixture
def make_order(db):
    from apps.orders.models import Order

    def _make(total="29.50", **kw):
        n = next(_seq)
        return Order.objects.create(
            order_number=kw.pop("order_number", f"ORD-20240501-{n:08X}"),
            customer_name=kw.pop("customer_name", "Asha"),
            subtotal=Decimal(kw.pop("subtotal", total)),
            total=Decimal(total),
            **kw,
        )

    return _make
