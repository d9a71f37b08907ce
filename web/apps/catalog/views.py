"""HTTP views for the catalog: product listing, product detail, categories."""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.responses import ok, validate

from .queries import get_product_by_slug, list_categories, list_products, present_category, present_product
from .repository import CatalogRepository
from .schemas import CategoryCreateDTO, ProductCreateDTO, ProductFilter


def _query_dict(request) -> dict:
    # Blank query parameters mean "not given"
    return {k: v for k, v in request.query_params.items() if v != ""}


class ProductsView(APIView):
    def get(self, request):
        f = validate(ProductFilter, _query_dict(request))
        return Response(ok(list_products(f)))

    def post(self, request):
        dto = validate(ProductCreateDTO, request.data)
        product = CatalogRepository().create_product(dto)
        return Response(
            ok(present_product(product), message="Product created successfully"),
            status=status.HTTP_201_CREATED,
        )


class ProductBySlugView(APIView):
    def get(self, request, slug: str):
        return Response(ok(get_product_by_slug(slug)))


class CategoriesView(APIView):
    def get(self, request):
        params = request.query_params
        data = list_categories(
            tree=params.get("tree") == "true",
            parent_id=params.get("parent_id") or None,
            is_active=params.get("is_active") or None,
        )
        return Response(ok(data))

    def post(self, request):
        dto = validate(CategoryCreateDTO, request.data)
        category = CatalogRepository().create_category(dto)
        return Response(
            ok(present_category(category), message="Category created successfully"),
            status=status.HTTP_201_CREATED,
        )
