"""Icons the storefront knows how to draw.

Each member's name is what clients store (``shopping-bag``) and its value
is the renderer key the front end looks up (``ShoppingBag``). Lookups are
case-insensitive and accept either form.
"""

from enum import Enum
from typing import Optional

from apps.common.errors import ValidationError


class Icon(str, Enum):
    FACEBOOK = "Facebook"
    INSTAGRAM = "Instagram"
    TWITTER = "Twitter"
    LINKEDIN = "Linkedin"
    YOUTUBE = "Youtube"
    MAIL = "Mail"
    PHONE = "Phone"
    MAP_PIN = "MapPin"
    SHOPPING_BAG = "ShoppingBag"
    HEART = "Heart"
    HOME = "Home"
    SEARCH = "Search"
    USER = "User"
    TAG = "Tag"
    GIFT = "Gift"
    STAR = "Star"
    SPARKLES = "Sparkles"

    @property
    def slug(self) -> str:
        return self.name.lower().replace("_", "-")


_LOOKUP = {}
for _icon in Icon:
    _LOOKUP[_icon.slug] = _icon
    _LOOKUP[_icon.value.lower()] = _icon


def find_icon(name: Optional[str]) -> Optional[Icon]:
    if not name:
        return None
    return _LOOKUP.get(name.strip().lower())


def require_icon(name: str) -> Icon:
    """Resolve ``name`` or reject it.

    Raises:
        ValidationError: When the icon is not one we can render.
    """
    icon = find_icon(name)
    if icon is None:
        raise ValidationError(f"Unknown icon: {name}")
    return icon


def social_icon(name: Optional[str]) -> Icon:
    # Rows stored before validation existed may hold anything
    return find_icon(name) or Icon.SHOPPING_BAG
