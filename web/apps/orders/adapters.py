"""Django ORM adapters for the order domain ports.

``InventoryAdapter.reserve`` is the only place stock goes down. It issues a
single conditional ``UPDATE ... WHERE stock_quantity >= qty`` and reads the
affected-row count, so two checkouts racing for the last unit can never
both succeed and stock never goes negative.
"""

from typing import Iterable, List

from django.db.models import F
from django.utils import timezone

from apps.catalog.models import Product, ProductImage
from apps.store_settings.domain import SettingsStore

from .domain import CatalogEntry, CatalogPort, InventoryPort, LowStock, SettingsPort
from .pricing import PricingSettings


class CatalogAdapter(CatalogPort):
    def lookup(self, product_ids: Iterable[int]) -> dict[int, CatalogEntry]:
        ids = list(product_ids)
        images: dict[int, str] = {}
        # Primary image first, then display order: first one seen wins
        for img in ProductImage.objects.filter(product_id__in=ids).order_by("-is_primary", "display_order", "id"):
            images.setdefault(img.product_id, img.image_url)

        return {
            p.id: CatalogEntry(
                product_id=p.id,
                name=p.name,
                sku=p.sku,
                price=p.price,
                image=images.get(p.id, ""),
                is_active=p.is_active,
            )
            for p in Product.objects.filter(pk__in=ids)
        }


class InventoryAdapter(InventoryPort):
    def reserve(self, product_id: int, quantity: int) -> bool:
        updated = Product.objects.filter(pk=product_id, stock_quantity__gte=quantity).update(
            stock_quantity=F("stock_quantity") - quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    def release(self, product_id: int, quantity: int) -> None:
        Product.objects.filter(pk=product_id).update(
            stock_quantity=F("stock_quantity") + quantity,
            updated_at=timezone.now(),
        )

    def low_stock(self, product_ids: Iterable[int]) -> List[LowStock]:
        qs = Product.objects.filter(pk__in=list(product_ids), stock_quantity__lte=F("low_stock_threshold"))
        return [
            LowStock(product_id=p.id, name=p.name, stock_quantity=p.stock_quantity, threshold=p.low_stock_threshold)
            for p in qs
        ]


class StoreSettingsAdapter(SettingsPort):
    def __init__(self, store: SettingsStore | None = None):
        self.store = store or SettingsStore()

    def pricing(self) -> PricingSettings:
        return PricingSettings.from_store(self.store)
