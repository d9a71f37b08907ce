from django.urls import path

from .views import CategoriesView, ProductBySlugView, ProductsView

app_name = "catalog"

urlpatterns = [
    path("products/", ProductsView.as_view(), name="products"),
    path("products/slug/<slug:slug>/", ProductBySlugView.as_view(), name="product-by-slug"),
    path("categories/", CategoriesView.as_view(), name="categories"),
]
