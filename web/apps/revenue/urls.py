from django.urls import path

from .views import RevenueAnalyticsView, RevenueOverviewView

app_name = "revenue"

urlpatterns = [
    path("overview/", RevenueOverviewView.as_view(), name="overview"),
    path("analytics/", RevenueAnalyticsView.as_view(), name="analytics"),
]
