from django.urls import include, path

urlpatterns = [
    path("api/", include("apps.monitoring.urls")),
    path("api/settings/", include("apps.store_settings.urls")),
    path("api/", include("apps.catalog.urls")),
    path("api/orders/", include("apps.orders.urls")),
    path("api/stripe/", include("apps.payments.urls")),
    path("api/", include("apps.navigation.urls")),
    path("api/admin/revenue/", include("apps.revenue.urls")),
]
