"""Header/footer navigation and the social links shown in the footer.

Items are read in ``display_order`` then ``id`` order. Icons are checked
against :mod:`apps.navigation.icons` on every write, and each rendered row
carries ``icon_key``, the key the front end draws.
"""

import logging
from typing import Optional

from apps.common.errors import NotFound, ValidationError

from .icons import find_icon, require_icon, social_icon
from .models import NavItem, SocialMediaLink
from .schemas import NavItemDTO, NavItemRead, SocialLinkDTO, SocialLinkRead

logger = logging.getLogger("storefront.navigation")


def present_nav_item(item: NavItem) -> dict:
    data = NavItemRead.model_validate(item).model_dump()
    icon = find_icon(item.icon)
    data["icon_key"] = icon.value if icon else None
    return data


def present_social_link(link: SocialMediaLink) -> dict:
    data = SocialLinkRead.model_validate(link).model_dump()
    data["icon_key"] = social_icon(link.icon).value
    return data


def _get_item(item_id: int) -> NavItem:
    try:
        return NavItem.objects.get(pk=item_id)
    except NavItem.DoesNotExist:
        raise NotFound("Navigation item not found")


def _apply(item: NavItem, dto: NavItemDTO) -> None:
    if dto.parent_id is not None:
        if item.pk is not None and dto.parent_id == item.pk:
            raise ValidationError("A navigation item cannot be its own parent")
        if not NavItem.objects.filter(pk=dto.parent_id).exists():
            raise ValidationError("Parent navigation item not found")
    item.label = dto.label
    item.href = dto.href
    item.parent_id = dto.parent_id
    item.type = dto.type
    item.target = dto.target
    item.icon = require_icon(dto.icon).slug if dto.icon else ""
    item.display_order = dto.display_order
    item.is_active = dto.is_active
    item.location = dto.location
    item.meta = dto.meta


def list_nav_items(location: str = "header", active_only: bool = False) -> list[dict]:
    qs = NavItem.objects.filter(location=location)
    if active_only:
        qs = qs.filter(is_active=True)
    return [present_nav_item(i) for i in qs.order_by("display_order", "id")]


def get_nav_item(item_id: int) -> dict:
    return present_nav_item(_get_item(item_id))


def create_nav_item(dto: NavItemDTO) -> dict:
    item = NavItem()
    _apply(item, dto)
    item.save()
    logger.info("nav item created", extra={"nav_item_id": item.pk, "location": item.location})
    return present_nav_item(item)


def update_nav_item(item_id: int, dto: NavItemDTO) -> dict:
    item = _get_item(item_id)
    _apply(item, dto)
    item.save()
    logger.info("nav item updated", extra={"nav_item_id": item.pk})
    return present_nav_item(item)


def delete_nav_item(item_id: int) -> None:
    item = _get_item(item_id)
    item.delete()
    logger.info("nav item deleted", extra={"nav_item_id": item_id})


def list_social_links(active_only: bool = False) -> dict:
    qs = SocialMediaLink.objects.all()
    if active_only:
        qs = qs.filter(is_active=True)
    links = [present_social_link(link) for link in qs.order_by("display_order", "id")]
    return {"links": links, "total": len(links)}


def create_social_link(dto: SocialLinkDTO) -> dict:
    link = SocialMediaLink.objects.create(
        platform=dto.platform,
        url=dto.url,
        icon=require_icon(dto.icon).slug,
        display_order=dto.display_order,
        is_active=dto.is_active,
    )
    logger.info("social link created", extra={"social_link_id": link.pk, "platform": link.platform})
    return present_social_link(link)


def parse_flag(raw: Optional[str]) -> bool:
    return raw == "true"
