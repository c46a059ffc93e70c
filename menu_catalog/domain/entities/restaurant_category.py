"""
RestaurantCategory Entity

Platform-wide restaurant taxonomy ("한식", "일식", ...). Not owned by any
restaurant; restaurants link to it through RestaurantCategoryRelation.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from menu_catalog.constants import ErrorCode, IdPrefix
from menu_catalog.exceptions import RequiredFieldError
from menu_catalog.utils.uuid_helper import generate_prefixed_id

from ..category_tree import Lookup, child_depth
from .base import AuditedEntity


@dataclass(eq=False, kw_only=True)
class RestaurantCategory(AuditedEntity):
    """
    A restaurant classification with policy defaults and usage counters.
    """

    id: str
    category_code: str
    category_name: str
    description: Optional[str] = None
    icon_url: Optional[str] = None
    color_code: Optional[str] = None
    parent_category_id: Optional[str] = None
    depth: int = 1
    display_order: int = 0
    is_active: bool = True
    is_popular: bool = False
    is_new: bool = False

    # Platform policy
    default_minimum_order_amount: Optional[int] = None
    average_delivery_time: Optional[int] = None
    platform_commission_rate: Optional[Decimal] = None

    # Statistics
    active_restaurant_count: int = 0
    total_order_count: int = 0

    @classmethod
    def create(
        cls,
        category_code: str,
        category_name: str,
        actor: str,
        lookup: Lookup,
        parent_category_id: Optional[str] = None,
        description: Optional[str] = None,
        icon_url: Optional[str] = None,
        color_code: Optional[str] = None,
        display_order: int = 0,
    ) -> "RestaurantCategory":
        """
        Create a taxonomy node, deriving depth from its parent.

        Raises:
            RequiredFieldError: If the name is blank
            NotFoundError: If the parent does not exist
            InvalidCategoryDepthError: If the node would be deeper than 3
        """
        if not category_name or not category_name.strip():
            raise RequiredFieldError(ErrorCode.CATEGORY_NAME_REQUIRED)
        depth = child_depth(parent_category_id, lookup, ErrorCode.RESTAURANT_CATEGORY_NOT_FOUND)
        return cls(
            id=generate_prefixed_id(IdPrefix.RESTAURANT_CATEGORY),
            category_code=category_code,
            category_name=category_name,
            description=description,
            icon_url=icon_url,
            color_code=color_code,
            parent_category_id=parent_category_id,
            depth=depth,
            display_order=display_order,
            created_by=actor,
        )

    def update(
        self,
        category_name: str,
        description: Optional[str],
        icon_url: Optional[str],
        color_code: Optional[str],
        display_order: int,
        actor: str,
    ) -> None:
        if not category_name or not category_name.strip():
            raise RequiredFieldError(ErrorCode.CATEGORY_NAME_REQUIRED)
        self.category_name = category_name
        self.description = description
        self.icon_url = icon_url
        self.color_code = color_code
        self.display_order = display_order
        self._touch(actor)

    def set_policy_info(
        self,
        default_minimum_order_amount: Optional[int],
        average_delivery_time: Optional[int],
        platform_commission_rate: Optional[Decimal],
        actor: str,
    ) -> None:
        self.default_minimum_order_amount = default_minimum_order_amount
        self.average_delivery_time = average_delivery_time
        self.platform_commission_rate = platform_commission_rate
        self._touch(actor)

    def set_active(self, is_active: bool, actor: str) -> None:
        self.is_active = is_active
        self._touch(actor)

    def set_popular(self, is_popular: bool, actor: str) -> None:
        self.is_popular = is_popular
        self._touch(actor)

    def set_new(self, is_new: bool, actor: str) -> None:
        self.is_new = is_new
        self._touch(actor)

    def delete(self, actor: str) -> None:
        self._mark_deleted(actor)
        self.is_active = False

    def restore(self, actor: str) -> None:
        self._clear_deleted(actor)
        self.is_active = True

    def is_root_category(self) -> bool:
        return self.parent_category_id is None

    def is_available(self) -> bool:
        return self.is_active and not self.is_deleted

    def update_statistics(self, active_restaurant_count: int, total_order_count: int) -> None:
        self.active_restaurant_count = max(0, active_restaurant_count)
        self.total_order_count = max(0, total_order_count)

    def increment_active_restaurant_count(self) -> None:
        self.active_restaurant_count += 1

    def decrement_active_restaurant_count(self) -> None:
        if self.active_restaurant_count > 0:
            self.active_restaurant_count -= 1

    def increment_order_count(self, count: int = 1) -> None:
        self.total_order_count += count
