"""
Restaurant Aggregate Root

Every change to a restaurant's menus, menu categories, operating hours and
category links goes through this class so that the invariants hold across
the whole object graph.
"""

from dataclasses import dataclass, field
from datetime import datetime, time
from decimal import Decimal
from typing import Iterable, List, Optional, Set, Tuple

from menu_catalog.constants import ErrorCode, IdPrefix
from menu_catalog.exceptions import (
    AlreadyDeletedError,
    CannotModifyWhileOpenError,
    InvalidAddressError,
    NotFoundError,
    RequiredFieldError,
)
from menu_catalog.utils.uuid_helper import generate_prefixed_id

from ..category_tree import CategoryNode, build_tree, category_path, child_depth, lookup_from
from ..entities.base import AuditedEntity, entity_key
from ..entities.category_relation import (
    RestaurantCategoryRelation,
    active_category_ids,
    add_category_relation,
    primary_category_id,
    reconcile_category_relations,
    remove_category_relation,
)
from ..entities.menu import Menu, MenuOption, MenuOptionGroup, Price
from ..entities.menu_category import MenuCategory
from ..entities.operating_day import OperatingDay
from ..value_objects.address import Address
from ..value_objects.coordinate import Coordinate
from ..value_objects.day_type import DayType, OperatingTimeType
from ..value_objects.restaurant_status import RestaurantStatus
from .operating_schedule import OperatingSchedule


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(eq=False, kw_only=True)
class Restaurant(AuditedEntity):
    """
    Aggregate root for a restaurant and everything it owns.

    Owned collections:
        menus: Menu items (with option groups and category relations)
        menu_categories: Flat menu category tree, max depth 3
        schedule: Operating windows
        category_relations: Links to the restaurant category taxonomy
    """

    id: str
    owner_id: Optional[str]
    restaurant_name: str
    owner_name: Optional[str] = None
    description: Optional[str] = None
    status: RestaurantStatus = RestaurantStatus.OPEN
    address: Optional[Address] = None
    coordinate: Optional[Coordinate] = None
    contact_number: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    is_active: bool = True

    view_count: int = 0
    wishlist_count: int = 0
    review_count: int = 0
    review_rating: Optional[Decimal] = None
    purchase_count: int = 0

    menus: List[Menu] = field(default_factory=list)
    menu_categories: List[MenuCategory] = field(default_factory=list)
    schedule: OperatingSchedule = field(default_factory=OperatingSchedule)
    category_relations: List[RestaurantCategoryRelation] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        owner_id: Optional[str],
        restaurant_name: str,
        actor: str,
        owner_name: Optional[str] = None,
        address: Optional[Address] = None,
        coordinate: Optional[Coordinate] = None,
        contact_number: Optional[str] = None,
        description: Optional[str] = None,
        status: RestaurantStatus = RestaurantStatus.OPEN,
    ) -> "Restaurant":
        """
        Create and validate a new restaurant.

        Raises:
            RequiredFieldError: If the name or owner is missing
            InvalidAddressError: If an address is given but incomplete
        """
        restaurant = cls(
            id=generate_prefixed_id(IdPrefix.RESTAURANT),
            owner_id=owner_id,
            owner_name=owner_name,
            restaurant_name=restaurant_name,
            description=description,
            status=status,
            address=address,
            coordinate=coordinate,
            contact_number=contact_number,
            created_by=actor,
        )
        restaurant.validate()
        return restaurant

    # ---- Basic information ---- #

    def update_basic_info(
        self,
        restaurant_name: str,
        contact_number: Optional[str],
        actor: str,
        description: Optional[str] = None,
    ) -> None:
        if _blank(restaurant_name):
            raise RequiredFieldError(ErrorCode.RESTAURANT_NAME_REQUIRED)
        self.restaurant_name = restaurant_name
        self.contact_number = contact_number
        self.description = description
        self._touch(actor)

    def update_address(self, address: Optional[Address], actor: str) -> None:
        if address is None or not address.is_valid():
            raise InvalidAddressError()
        self.address = address
        self._touch(actor)

    def update_coordinate(self, coordinate: Optional[Coordinate], actor: str) -> None:
        self.coordinate = coordinate
        self._touch(actor)

    def change_status(self, status: RestaurantStatus, actor: str) -> None:
        self.status = status
        self._touch(actor)

    def set_active(self, is_active: bool, actor: str) -> None:
        self.is_active = is_active
        self._touch(actor)

    # ---- Tags ---- #

    def add_tag(self, tag: Optional[str]) -> bool:
        """Append a tag unless it is blank or already present."""
        if _blank(tag):
            return False
        tag = tag.strip()
        if tag in self.tags:
            return False
        self.tags.append(tag)
        return True

    def remove_tag(self, tag: str) -> bool:
        if tag in self.tags:
            self.tags.remove(tag)
            return True
        return False

    def replace_tags(self, tags: Iterable[str], actor: str) -> None:
        self.tags = []
        for tag in tags:
            self.add_tag(tag)
        self._touch(actor)

    # ---- Menu categories ---- #

    def _menu_category_or_none(self, category_id: str) -> Optional[MenuCategory]:
        for category in self.menu_categories:
            if entity_key(category) == category_id and not category.is_deleted:
                return category
        return None

    def add_menu_category(
        self,
        category_name: str,
        actor: str,
        description: Optional[str] = None,
        parent_category_id: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> MenuCategory:
        """
        Add a menu category, optionally under a parent.

        Raises:
            RequiredFieldError: If the name is blank
            NotFoundError: If the parent does not exist
            InvalidCategoryDepthError: If the category would be deeper than 3
        """
        if _blank(category_name):
            raise RequiredFieldError(ErrorCode.CATEGORY_NAME_REQUIRED)
        depth = child_depth(parent_category_id, self._menu_category_or_none)
        category = MenuCategory(
            id=generate_prefixed_id(IdPrefix.MENU_CATEGORY),
            restaurant_id=self.id,
            category_name=category_name,
            description=description,
            parent_category_id=parent_category_id,
            depth=depth,
            display_order=len(self.menu_categories) if display_order is None else display_order,
            created_by=actor,
        )
        self.menu_categories.append(category)
        return category

    def find_menu_category_by_id(self, category_id: str) -> MenuCategory:
        category = self._menu_category_or_none(category_id)
        if category is None:
            raise NotFoundError(ErrorCode.CATEGORY_NOT_FOUND, category_id)
        return category

    def remove_menu_category(self, category_id: str, actor: str) -> MenuCategory:
        """
        Soft-delete a menu category and unlink the menus filed under it.

        Menus themselves stay; only their relation to the category goes.

        Raises:
            NotFoundError: If the category does not exist or is already deleted
        """
        category = self.find_menu_category_by_id(category_id)
        for menu_id in sorted(category.menu_ids):
            menu = self.find_menu_by_id(menu_id)
            if not menu.is_deleted:
                menu.remove_category(category_id, actor)
        category.menu_ids.clear()
        category.delete(actor)
        self._touch(actor)
        return category

    def active_menu_categories(self) -> List[MenuCategory]:
        return sorted(
            (c for c in self.menu_categories if c.is_available()),
            key=lambda c: c.display_order,
        )

    def menu_category_tree(self) -> List[CategoryNode]:
        return build_tree(c for c in self.menu_categories if not c.is_deleted)

    def menu_category_path(self, category_id: str) -> List[MenuCategory]:
        """Live categories from the root down to category_id."""
        return category_path(category_id, lookup_from(c for c in self.menu_categories if not c.is_deleted))

    # ---- Menus ---- #

    def add_menu(
        self,
        menu_name: str,
        price: Optional[Price],
        actor: str,
        description: Optional[str] = None,
        ingredients: Optional[str] = None,
        calorie: Optional[int] = None,
    ) -> Menu:
        """
        Add a menu item.

        Raises:
            CannotModifyWhileOpenError: If the restaurant is OPEN
            RequiredFieldError: If name or price is missing
            InvalidPriceError: If the price is negative
        """
        if not self.status.can_modify_menu():
            raise CannotModifyWhileOpenError(self.id)
        menu = Menu.create(
            self.id, menu_name, price, actor,
            description=description, ingredients=ingredients, calorie=calorie,
        )
        menu.validate()
        self.menus.append(menu)
        self._touch(actor)
        return menu

    def find_menu_by_id(self, menu_id: str) -> Menu:
        """Find a menu, deleted or not."""
        for menu in self.menus:
            if entity_key(menu) == menu_id:
                return menu
        raise NotFoundError(ErrorCode.MENU_NOT_FOUND, menu_id)

    def find_active_menu_by_id(self, menu_id: str) -> Menu:
        menu = self.find_menu_by_id(menu_id)
        if menu.is_deleted:
            raise NotFoundError(ErrorCode.MENU_NOT_FOUND, menu_id)
        return menu

    def add_menu_to_category(self, menu_id: str, category_id: str, is_primary: bool, actor: str) -> None:
        category = self.find_menu_category_by_id(category_id)
        menu = self.find_active_menu_by_id(menu_id)
        menu.add_category(category_id, is_primary, actor)
        category.add_menu(menu_id)

    def remove_menu_from_category(self, menu_id: str, category_id: str, actor: str) -> None:
        menu = self.find_active_menu_by_id(menu_id)
        menu.remove_category(category_id, actor)
        category = self._menu_category_or_none(category_id)
        if category is not None:
            category.remove_menu(menu_id)

    def update_menu_categories(
        self, menu_id: str, category_ids: Iterable[str], actor: str, primary_id: Optional[str] = None
    ) -> Tuple[List[str], List[str]]:
        """
        Reconcile a menu's categories and keep category membership in sync.

        Raises:
            NotFoundError: If any target category does not exist
        """
        target = set(category_ids)
        if primary_id is not None:
            target.add(primary_id)
        for category_id in target:
            self.find_menu_category_by_id(category_id)

        menu = self.find_active_menu_by_id(menu_id)
        added, removed = menu.reconcile_categories(target, actor, primary_id)
        for category_id in added:
            self.find_menu_category_by_id(category_id).add_menu(menu_id)
        for category_id in removed:
            category = self._menu_category_or_none(category_id)
            if category is not None:
                category.remove_menu(menu_id)
        return added, removed

    def remove_menu(self, menu_id: str, actor: str) -> None:
        """Soft-delete a menu and drop it from every category."""
        menu = self.find_menu_by_id(menu_id)
        menu.delete(actor)
        for category in self.menu_categories:
            category.remove_menu(menu_id)
        self._touch(actor)

    def active_menus(self) -> List[Menu]:
        return [m for m in self.menus if not m.is_deleted]

    def active_menu_count(self) -> int:
        return len(self.active_menus())

    def main_menus(self) -> List[Menu]:
        return [m for m in self.menus if m.is_main and m.is_orderable()]

    def popular_menus(self) -> List[Menu]:
        return [m for m in self.menus if m.is_popular and m.is_orderable()]

    def new_menus(self) -> List[Menu]:
        return [m for m in self.menus if m.is_new and m.is_orderable()]

    def menus_by_category(self, category_id: str) -> List[Menu]:
        return [m for m in self.menus if not m.is_deleted and m.belongs_to_category(category_id)]

    # ---- Menu options ---- #

    def add_option_group_to_menu(
        self,
        menu_id: str,
        group_name: str,
        actor: str,
        min_selection: int = 0,
        max_selection: int = 1,
        is_required: bool = False,
        description: Optional[str] = None,
    ) -> MenuOptionGroup:
        menu = self.find_active_menu_by_id(menu_id)
        return menu.add_option_group(
            group_name,
            actor,
            min_selection=min_selection,
            max_selection=max_selection,
            is_required=is_required,
            description=description,
        )

    def add_option_to_group(
        self,
        menu_id: str,
        group_id: str,
        option_name: str,
        additional_price: Price,
        actor: str,
        description: Optional[str] = None,
    ) -> MenuOption:
        menu = self.find_active_menu_by_id(menu_id)
        group = menu.find_option_group(group_id)
        return group.add_option(option_name, additional_price, actor, description=description)

    # ---- Operating hours ---- #

    def set_operating_day(
        self,
        day_type: DayType,
        actor: str,
        time_type: OperatingTimeType = OperatingTimeType.REGULAR,
        start_time: Optional[time] = None,
        end_time: Optional[time] = None,
        is_holiday: bool = False,
        break_start_time: Optional[time] = None,
        break_end_time: Optional[time] = None,
        note: Optional[str] = None,
    ) -> OperatingDay:
        day = OperatingDay(
            restaurant_id=self.id,
            day_type=day_type,
            time_type=time_type,
            start_time=start_time,
            end_time=end_time,
            is_holiday=is_holiday,
            break_start_time=break_start_time,
            break_end_time=break_end_time,
            note=note,
        )
        self.schedule.set_day(day)
        self._touch(actor)
        return day

    def set_break_time(self, day_type: DayType, break_start: Optional[time], break_end: Optional[time], actor: str) -> OperatingDay:
        day = self.schedule.set_break_time(day_type, break_start, break_end)
        self._touch(actor)
        return day

    def get_operating_day(
        self, day_type: DayType, time_type: OperatingTimeType = OperatingTimeType.REGULAR
    ) -> Optional[OperatingDay]:
        return self.schedule.get(day_type, time_type)

    @property
    def operating_days(self) -> List[OperatingDay]:
        return self.schedule.ordered()

    # ---- Restaurant categories ---- #

    def _new_relation(self, category_id: str, is_primary: bool, actor: str) -> RestaurantCategoryRelation:
        return RestaurantCategoryRelation(
            owner_id=self.id,
            category_id=category_id,
            is_primary=is_primary,
            created_by=actor,
        )

    def add_restaurant_category(self, category_id: str, is_primary: bool, actor: str) -> RestaurantCategoryRelation:
        return add_category_relation(self.category_relations, category_id, is_primary, actor, self._new_relation)

    def remove_restaurant_category(self, category_id: str, actor: str) -> bool:
        return remove_category_relation(self.category_relations, category_id, actor)

    def update_restaurant_categories(
        self, category_ids: Iterable[str], actor: str, primary_id: Optional[str] = None
    ) -> Tuple[List[str], List[str]]:
        return reconcile_category_relations(
            self.category_relations, category_ids, actor, self._new_relation, primary_id
        )

    def primary_restaurant_category_id(self) -> Optional[str]:
        return primary_category_id(self.category_relations)

    def active_restaurant_category_ids(self) -> Set[str]:
        return active_category_ids(self.category_relations)

    # ---- Statistics ---- #

    def increment_view_count(self) -> None:
        self.view_count += 1

    def increment_wishlist_count(self) -> None:
        self.wishlist_count += 1

    def decrement_wishlist_count(self) -> None:
        if self.wishlist_count > 0:
            self.wishlist_count -= 1

    def increment_purchase_count(self, count: int = 1) -> None:
        self.purchase_count += count

    def update_review_stats(self, review_rating: Decimal, review_count: int) -> None:
        self.review_rating = review_rating
        self.review_count = review_count

    # ---- Lifecycle ---- #

    def delete(self, actor: str) -> None:
        """
        Soft-delete the restaurant and cascade to everything it owns.

        Raises:
            AlreadyDeletedError: If the restaurant is already deleted
        """
        if self.is_deleted:
            raise AlreadyDeletedError(ErrorCode.RESTAURANT_ALREADY_DELETED, self.id)
        self._mark_deleted(actor)
        self.is_active = False
        self.status = RestaurantStatus.CLOSED
        for menu in self.menus:
            if not menu.is_deleted:
                menu.delete(actor)
        for category in self.menu_categories:
            if not category.is_deleted:
                category.delete(actor)
        for relation in self.category_relations:
            if not relation.is_deleted:
                relation.delete(actor)

    def restore(self, actor: str) -> None:
        """
        Clear the deleted flags and reactivate.

        Children deleted by the cascade stay deleted.
        """
        self._clear_deleted(actor)
        self.is_active = True

    def is_open_now(self, now: Optional[datetime] = None) -> bool:
        if self.status is not RestaurantStatus.OPEN:
            return False
        return self.schedule.is_open_at(now or datetime.now())

    def can_accept_order(self, now: Optional[datetime] = None) -> bool:
        return (
            self.is_active
            and not self.is_deleted
            and self.status.can_accept_order()
            and self.is_open_now(now)
        )

    def validate(self) -> None:
        if _blank(self.restaurant_name):
            raise RequiredFieldError(ErrorCode.RESTAURANT_NAME_REQUIRED)
        if _blank(self.owner_id):
            raise RequiredFieldError(ErrorCode.OWNER_REQUIRED)
        if self.address is not None and not self.address.is_valid():
            raise InvalidAddressError()
