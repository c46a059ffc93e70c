"""
Domain Entities

Entities are business objects with identity and lifecycle.
They are mutable, carry audit fields and are never physically removed:
deletion flips the soft-delete flags.

- Menu, MenuOptionGroup, MenuOption: a menu item and its options
- MenuCategory: restaurant-scoped menu grouping
- RestaurantCategory: platform-wide restaurant taxonomy
- MenuCategoryRelation, RestaurantCategoryRelation: owner/category links
- OperatingDay: one operating window (immutable)
"""

from .base import AuditedEntity, entity_key
from .category_relation import (
    CategoryRelation,
    MenuCategoryRelation,
    RestaurantCategoryRelation,
    relation_key,
)
from .menu import Menu, MenuOption, MenuOptionGroup
from .menu_category import MenuCategory
from .operating_day import OperatingDay, operating_day_key
from .restaurant_category import RestaurantCategory

__all__ = [
    "AuditedEntity",
    "CategoryRelation",
    "Menu",
    "MenuCategory",
    "MenuCategoryRelation",
    "MenuOption",
    "MenuOptionGroup",
    "OperatingDay",
    "RestaurantCategory",
    "RestaurantCategoryRelation",
    "entity_key",
    "operating_day_key",
    "relation_key",
]
