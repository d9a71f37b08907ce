"""Persistence for catalog writes: new products and categories."""

import logging
import secrets

from django.db import IntegrityError, transaction
from django.utils.text import slugify

from apps.common.errors import Conflict, ValidationError
from apps.store_settings.domain import SettingsStore

from .models import Category, Product, ProductImage
from .schemas import CategoryCreateDTO, ProductCreateDTO

logger = logging.getLogger("storefront.catalog")

DEFAULT_LOW_STOCK_THRESHOLD = 5


def generate_sku(name: str) -> str:
    """``PRD-<NAME PREFIX>-<random hex>``, e.g. ``PRD-SILKS-3FA2C1``."""
    prefix = slugify(name).replace("-", "")[:5].upper() or "ITEM"
    return f"PRD-{prefix}-{secrets.token_hex(3).upper()}"


def _store_low_stock_threshold() -> int:
    value = SettingsStore().value("low_stock_threshold", DEFAULT_LOW_STOCK_THRESHOLD)
    try:
        return max(int(value), 0)
    except (TypeError, ValueError):
        return DEFAULT_LOW_STOCK_THRESHOLD


class CatalogRepository:
    def create_product(self, dto: ProductCreateDTO) -> Product:
        """Insert a product and its images.

        A missing slug is derived from the name and a missing sku is
        generated. The first image becomes the primary one.

        Raises:
            ValidationError: Unknown category, or a name that yields no slug.
            Conflict: Slug or sku already taken (reported as 400).
        """
        if not Category.objects.filter(pk=dto.category_id).exists():
            raise ValidationError("Category not found")

        slug = slugify(dto.slug or dto.name)
        if not slug:
            raise ValidationError("Product slug could not be derived from the name")
        sku = (dto.sku or "").strip() or generate_sku(dto.name)

        if Product.objects.filter(slug=slug).exists():
            raise Conflict("Product with this slug already exists", status_code=400)
        if Product.objects.filter(sku=sku).exists():
            raise Conflict("Product with this SKU already exists", status_code=400)

        threshold = dto.low_stock_threshold
        if threshold is None:
            threshold = _store_low_stock_threshold()

        try:
            with transaction.atomic():
                product = Product.objects.create(
                    name=dto.name,
                    slug=slug,
                    sku=sku,
                    description=dto.description or "",
                    long_description=dto.long_description or "",
                    category_id=dto.category_id,
                    price=dto.price,
                    compare_at_price=dto.compare_at_price,
                    cost_price=dto.cost_price,
                    stock_quantity=dto.stock_quantity,
                    low_stock_threshold=threshold,
                    is_featured=dto.is_featured,
                    is_active=dto.is_active,
                )
                ProductImage.objects.bulk_create(
                    [
                        ProductImage(
                            product=product,
                            image_url=img.image_url,
                            alt_text=img.alt_text or dto.name,
                            display_order=img.display_order if img.display_order is not None else i,
                            is_primary=(i == 0),
                        )
                        for i, img in enumerate(dto.images)
                    ]
                )
        except IntegrityError:
            raise Conflict("Product with this slug or SKU already exists", status_code=400)

        logger.info("product created", extra={"product_id": product.pk, "sku": sku})
        return product

    def create_category(self, dto: CategoryCreateDTO) -> Category:
        """Insert a category.

        Only root categories may be parents, which keeps the tree two levels
        deep and rules out cycles.

        Raises:
            ValidationError: Unknown parent, or a parent that is itself a child.
            Conflict: Slug already taken (reported as 400).
        """
        slug = slugify(dto.slug or dto.name)
        if not slug:
            raise ValidationError("Category slug could not be derived from the name")

        if dto.parent_id is not None:
            parent = Category.objects.filter(pk=dto.parent_id).first()
            if parent is None:
                raise ValidationError("Parent category not found")
            if parent.parent_id is not None:
                raise ValidationError("Parent category must be a top-level category")

        if Category.objects.filter(slug=slug).exists():
            raise Conflict("Category with this slug already exists", status_code=400)

        try:
            with transaction.atomic():
                category = Category.objects.create(
                    name=dto.name,
                    slug=slug,
                    parent_id=dto.parent_id,
                    description=dto.description or "",
                    image_url=dto.image_url or "",
                    display_order=dto.display_order,
                    is_active=dto.is_active,
                )
        except IntegrityError:
            raise Conflict("Category with this slug already exists", status_code=400)

        logger.info("category created", extra={"category_id": category.pk, "slug": slug})
        return category
