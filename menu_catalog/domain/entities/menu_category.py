"""
MenuCategory Entity

Restaurant-scoped menu grouping ("메인", "사이드", ...), nested up to three
levels deep.
"""

from dataclasses import dataclass, field
from typing import Optional, Set

from .base import AuditedEntity


@dataclass(eq=False, kw_only=True)
class MenuCategory(AuditedEntity):
    """A node in a restaurant's menu category tree."""

    id: str
    restaurant_id: str
    category_name: str
    description: Optional[str] = None
    parent_category_id: Optional[str] = None
    depth: int = 1
    display_order: int = 0
    is_active: bool = True
    menu_ids: Set[str] = field(default_factory=set)

    def add_menu(self, menu_id: str) -> None:
        self.menu_ids.add(menu_id)

    def remove_menu(self, menu_id: str) -> None:
        self.menu_ids.discard(menu_id)

    def update(self, category_name: str, description: Optional[str], display_order: int, actor: str) -> None:
        self.category_name = category_name
        self.description = description
        self.display_order = display_order
        self._touch(actor)

    def set_active(self, is_active: bool, actor: str) -> None:
        self.is_active = is_active
        self._touch(actor)

    def delete(self, actor: str) -> None:
        self._mark_deleted(actor)

    def restore(self, actor: str) -> None:
        self._clear_deleted(actor)

    def is_root_category(self) -> bool:
        return self.parent_category_id is None

    def is_available(self) -> bool:
        return self.is_active and not self.is_deleted
