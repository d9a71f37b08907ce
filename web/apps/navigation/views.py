"""HTTP views for navigation items and social links."""

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.common.responses import ok, validate

from . import domain
from .schemas import NavItemDTO, SocialLinkDTO


class NavItemsView(APIView):
    def get(self, request):
        params = request.query_params
        items = domain.list_nav_items(
            location=params.get("location") or "header",
            active_only=domain.parse_flag(params.get("active_only")),
        )
        return Response(ok(items))

    def post(self, request):
        item = domain.create_nav_item(validate(NavItemDTO, request.data))
        return Response(
            ok(item, message="Navigation item created successfully"),
            status=status.HTTP_201_CREATED,
        )


class NavItemDetailView(APIView):
    def get(self, request, item_id: int):
        return Response(ok(domain.get_nav_item(item_id)))

    def put(self, request, item_id: int):
        item = domain.update_nav_item(item_id, validate(NavItemDTO, request.data))
        return Response(ok(item, message="Navigation item updated successfully"))

    def delete(self, request, item_id: int):
        domain.delete_nav_item(item_id)
        return Response(ok(message="Navigation item deleted successfully"))


class SocialLinksView(APIView):
    def get(self, request):
        active_only = domain.parse_flag(request.query_params.get("active_only"))
        return Response(ok(domain.list_social_links(active_only=active_only)))

    def post(self, request):
        link = domain.create_social_link(validate(SocialLinkDTO, request.data))
        return Response(
            ok(link, message="Social media link created successfully"),
            status=status.HTTP_201_CREATED,
        )
