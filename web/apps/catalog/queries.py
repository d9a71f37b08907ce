"""Catalog Query Service: read-only product and category lookups.

Listings are filtered, counted and paged in the database; each product on
the page is then enriched with its ordered images, a derived
``primary_image`` and the name of its category. Nothing here writes.
"""

import logging
import math
from typing import Any, Callable, Optional

from django.db import DatabaseError
from django.db.models import Count, Prefetch, Q

from apps.common.errors import NotFound, ValidationError

from .models import Category, Product, ProductImage
from .schemas import CategoryRead, ProductFilter, ProductImageRead, ProductRead

logger = logging.getLogger("storefront.catalog")

SORT_COLUMNS = {
    "created_at": "created_at",
    "name": "name",
    "price": "price",
    "stock": "stock_quantity",
}

RELATED_LIMIT = 4


def _ordered_images():
    return Prefetch("images", queryset=ProductImage.objects.order_by("display_order", "id"))


def _primary_image_url(images: list[ProductImage], fallback_to_first: bool = False) -> Optional[str]:
    for img in images:
        if img.is_primary:
            return img.image_url
    if fallback_to_first and images:
        return images[0].image_url
    return None


def present_product(product: Product, images: Optional[list[ProductImage]] = None) -> dict:
    """Product row plus the derived fields listings expose.

    Args:
        product: Product with ``category`` loaded.
        images: Images in display order; read from the prefetch cache when
            omitted.
    """
    if images is None:
        images = list(product.images.all())
    data = ProductRead.model_validate(product).model_dump()
    data.update(
        category_name=product.category.name if product.category_id else None,
        images=[ProductImageRead.model_validate(img).model_dump() for img in images],
        image_count=len(images),
        primary_image=_primary_image_url(images),
        is_low_stock=product.is_low_stock,
    )
    return data


def list_products(f: ProductFilter) -> dict:
    """Filtered, sorted, paginated product listing.

    Args:
        f: Validated filter.

    Returns:
        dict: ``{"products": [...], "pagination": {page, limit, total,
        totalPages}}`` where ``total`` counts the whole filtered set.
    """
    qs = Product.objects.select_related("category").filter(is_active=f.is_active)

    if f.category_id is not None:
        qs = qs.filter(category_id=f.category_id)
    if f.min_price is not None:
        qs = qs.filter(price__gte=f.min_price)
    if f.max_price is not None:
        qs = qs.filter(price__lte=f.max_price)
    if f.is_featured is not None:
        qs = qs.filter(is_featured=f.is_featured)
    if f.search and f.search.strip():
        term = f.search.strip()
        qs = qs.filter(Q(name__icontains=term) | Q(description__icontains=term) | Q(sku__icontains=term))

    total = qs.count()

    column = SORT_COLUMNS[f.sort_by]
    prefix = "" if f.sort_order == "asc" else "-"
    qs = qs.order_by(f"{prefix}{column}", f"{prefix}id").prefetch_related(_ordered_images())

    offset = (f.page - 1) * f.limit
    products = [present_product(p) for p in qs[offset:offset + f.limit]]

    return {
        "products": products,
        "pagination": {
            "page": f.page,
            "limit": f.limit,
            "total": total,
            "totalPages": math.ceil(total / f.limit),
        },
    }


def _optional(what: str, default: Any, fn: Callable[[], Any]) -> Any:
    # Enrichment lookups degrade instead of failing the whole response
    try:
        return fn()
    except DatabaseError:
        logger.warning("enrichment lookup failed", extra={"lookup": what}, exc_info=True)
        return default


def _related_products(product: Product) -> list[dict]:
    qs = (
        Product.objects.select_related("category")
        .filter(category_id=product.category_id, is_active=True)
        .exclude(pk=product.pk)
        .order_by("-is_featured", "-created_at", "-id")
        .prefetch_related(_ordered_images())[:RELATED_LIMIT]
    )
    related = []
    for p in qs:
        images = list(p.images.all())
        data = ProductRead.model_validate(p).model_dump()
        data.update(
            category_name=p.category.name,
            primary_image=_primary_image_url(images, fallback_to_first=True),
        )
        related.append(data)
    return related


def get_product_by_slug(slug: str) -> dict:
    """Active product by slug with images, category chain and related items.

    Raises:
        NotFound: If no active product has this slug.
    """
    try:
        product = Product.objects.select_related("category__parent").get(slug=slug, is_active=True)
    except Product.DoesNotExist:
        raise NotFound("Product not found")

    category = product.category
    parent = category.parent if category else None

    data = ProductRead.model_validate(product).model_dump()
    data.update(
        category_name=category.name if category else None,
        category_slug=category.slug if category else None,
        parent_category_id=category.parent_id if category else None,
        parent_category_name=parent.name if parent else None,
        parent_category_slug=parent.slug if parent else None,
        is_low_stock=product.is_low_stock,
    )
    data["images"] = _optional(
        "images",
        [],
        lambda: [
            ProductImageRead.model_validate(img).model_dump()
            for img in product.images.order_by("display_order", "-is_primary", "id")
        ],
    )
    data["relatedProducts"] = _optional("related_products", [], lambda: _related_products(product))
    return data


def present_category(category: Category, product_count: int = 0) -> dict:
    data = CategoryRead.model_validate(category).model_dump()
    data.update(
        parent_name=category.parent.name if category.parent_id else None,
        product_count=product_count,
    )
    return data


def build_category_tree(categories: list[dict]) -> list[dict]:
    """Nest a flat category list under its parents.

    Nodes whose parent is missing from the list are treated as roots, so a
    filtered list still renders. Input order is preserved at every level.
    """
    nodes = {c["id"]: {**c, "children": []} for c in categories}
    roots = []
    for c in categories:
        node = nodes[c["id"]]
        parent = nodes.get(c["parent_id"]) if c["parent_id"] is not None else None
        if parent is None:
            roots.append(node)
        else:
            parent["children"].append(node)
    return roots


def list_categories(tree: bool = False, parent_id: Optional[str] = None, is_active: Optional[str] = None) -> list[dict]:
    """Categories with parent name and product count, flat or nested.

    Args:
        tree: Nest children under their parents.
        parent_id: ``"null"`` for root categories, or a parent id.
        is_active: ``"true"``/``"false"`` to filter on the flag.

    Raises:
        ValidationError: If ``parent_id`` is neither ``"null"`` nor an integer.
    """
    qs = (
        Category.objects.select_related("parent")
        .annotate(product_count=Count("products"))
        .order_by("display_order", "name")
    )
    if parent_id is not None:
        if parent_id == "null":
            qs = qs.filter(parent__isnull=True)
        else:
            try:
                qs = qs.filter(parent_id=int(parent_id))
            except ValueError:
                raise ValidationError("parent_id must be an integer or 'null'")
    if is_active is not None:
        qs = qs.filter(is_active=(is_active == "true"))

    rows = [present_category(c, c.product_count) for c in qs]
    return build_category_tree(rows) if tree else rows
