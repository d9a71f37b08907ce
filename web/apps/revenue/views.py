from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.responses import ok, validate

from .domain import analytics, overview
from .schemas import AnalyticsQuery


class RevenueOverviewView(APIView):
    def get(self, request):
        return Response(ok(overview()))


class RevenueAnalyticsView(APIView):
    def get(self, request):
        q = validate(AnalyticsQuery, {k: v for k, v in request.query_params.items() if v != ""})
        data = analytics(period=q.period, start_date=q.start_date, end_date=q.end_date, transaction_type=q.type)
        return Response(ok(data))
