"""
Menu Entities

Menu, its option groups and their options. A Menu is owned by exactly one
Restaurant; option groups and options never outlive their menu.
"""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Union

from menu_catalog.constants import ErrorCode, IdPrefix
from menu_catalog.exceptions import (
    AlreadyDeletedError,
    InvalidPriceError,
    InvalidSelectionRuleError,
    NotFoundError,
    RequiredFieldError,
)
from menu_catalog.utils.uuid_helper import generate_prefixed_id

from .base import AuditedEntity
from .category_relation import (
    MenuCategoryRelation,
    active_category_ids,
    add_category_relation,
    primary_category_id,
    reconcile_category_relations,
    remove_category_relation,
)

Price = Union[int, str, Decimal]


def to_price(value: Optional[Price], error_code: ErrorCode) -> Decimal:
    """
    Convert a price to Decimal, rejecting negatives.

    Raises:
        InvalidPriceError: If the value is not a finite number or is negative
    """
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidPriceError(error_code, value)
    if not price.is_finite() or price < 0:
        raise InvalidPriceError(error_code, value)
    return price


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(eq=False, kw_only=True)
class MenuOption(AuditedEntity):
    """A selectable option inside an option group (e.g. "곱빼기")."""

    id: str
    option_group_id: str
    menu_id: str
    restaurant_id: str
    option_name: str
    description: Optional[str] = None
    additional_price: Decimal = Decimal("0")
    is_available: bool = True
    is_default: bool = False
    display_order: int = 0
    purchase_count: int = 0

    def set_additional_price(self, price: Price) -> None:
        self.additional_price = to_price(price, ErrorCode.INVALID_OPTION_PRICE)

    def update(self, option_name: str, description: Optional[str], additional_price: Price, actor: str) -> None:
        if _blank(option_name):
            raise RequiredFieldError(ErrorCode.OPTION_NAME_REQUIRED)
        price = to_price(additional_price, ErrorCode.INVALID_OPTION_PRICE)
        self.option_name = option_name
        self.description = description
        self.additional_price = price
        self._touch(actor)

    def set_default(self, is_default: bool, actor: str) -> None:
        self.is_default = is_default
        self._touch(actor)

    def set_available(self, is_available: bool, actor: str) -> None:
        self.is_available = is_available
        self._touch(actor)

    def increment_purchase_count(self, quantity: int = 1) -> None:
        self.purchase_count += quantity

    def delete(self, actor: str) -> None:
        self._mark_deleted(actor)
        self.is_available = False

    def is_selectable(self) -> bool:
        return self.is_available and not self.is_deleted


@dataclass(eq=False, kw_only=True)
class MenuOptionGroup(AuditedEntity):
    """
    A group of options with a selection rule (e.g. "사이즈 선택", pick 1).

    Invariant: 0 <= min_selection <= max_selection, and a required group
    always needs at least one selection.
    """

    id: str
    menu_id: str
    restaurant_id: str
    group_name: str
    description: Optional[str] = None
    min_selection: int = 0
    max_selection: int = 1
    is_required: bool = False
    display_order: int = 0
    is_active: bool = True
    options: List[MenuOption] = field(default_factory=list)

    def add_option(
        self,
        option_name: str,
        additional_price: Price,
        actor: str,
        display_order: Optional[int] = None,
        description: Optional[str] = None,
    ) -> MenuOption:
        if _blank(option_name):
            raise RequiredFieldError(ErrorCode.OPTION_NAME_REQUIRED)
        price = to_price(additional_price, ErrorCode.INVALID_OPTION_PRICE)
        option = MenuOption(
            id=generate_prefixed_id(IdPrefix.OPTION),
            option_group_id=self.id,
            menu_id=self.menu_id,
            restaurant_id=self.restaurant_id,
            option_name=option_name,
            description=description,
            additional_price=price,
            display_order=len(self.options) if display_order is None else display_order,
            created_by=actor,
        )
        self.options.append(option)
        return option

    def find_option(self, option_id: str) -> MenuOption:
        for option in self.options:
            if option.id == option_id:
                return option
        raise NotFoundError(ErrorCode.OPTION_NOT_FOUND, option_id)

    def remove_option(self, option_id: str, actor: str) -> None:
        option = self.find_option(option_id)
        if not option.is_deleted:
            option.delete(actor)

    def validate_selection_rule(self) -> None:
        """
        Check min/max selection, then normalize required groups.

        Raises:
            InvalidSelectionRuleError: If min < 0 or max < min
        """
        if self.min_selection < 0 or self.max_selection < self.min_selection:
            raise InvalidSelectionRuleError(self.min_selection, self.max_selection)
        self._normalize_required()

    def _normalize_required(self) -> None:
        if self.is_required and self.min_selection == 0:
            self.min_selection = 1

    def update(
        self,
        group_name: str,
        description: Optional[str],
        min_selection: int,
        max_selection: int,
        is_required: bool,
        actor: str,
    ) -> None:
        if _blank(group_name):
            raise RequiredFieldError(ErrorCode.OPTION_GROUP_NAME_REQUIRED)
        if min_selection < 0 or max_selection < min_selection:
            raise InvalidSelectionRuleError(min_selection, max_selection)
        self.group_name = group_name
        self.description = description
        self.min_selection = min_selection
        self.max_selection = max_selection
        self.is_required = is_required
        self.validate_selection_rule()
        self._touch(actor)

    def set_active(self, is_active: bool, actor: str) -> None:
        self.is_active = is_active
        self._touch(actor)

    def delete(self, actor: str) -> None:
        self._mark_deleted(actor)
        for option in self.options:
            if not option.is_deleted:
                option.delete(actor)

    def is_available(self) -> bool:
        return self.is_active and not self.is_deleted

    def active_option_count(self) -> int:
        return sum(1 for o in self.options if not o.is_deleted)


@dataclass(eq=False, kw_only=True)
class Menu(AuditedEntity):
    """
    A menu item sold by a restaurant.

    Deleting a menu cascades to its option groups, their options and its
    category relations.
    """

    id: str
    restaurant_id: str
    menu_name: str
    description: Optional[str] = None
    ingredients: Optional[str] = None
    price: Optional[Decimal] = None
    calorie: Optional[int] = None
    is_available: bool = True
    is_main: bool = False
    is_popular: bool = False
    is_new: bool = False

    purchase_count: int = 0
    wishlist_count: int = 0
    review_count: int = 0
    review_rating: Optional[Decimal] = None

    category_relations: List[MenuCategoryRelation] = field(default_factory=list)
    option_groups: List[MenuOptionGroup] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        restaurant_id: str,
        menu_name: str,
        price: Optional[Price],
        actor: str,
        description: Optional[str] = None,
        ingredients: Optional[str] = None,
        calorie: Optional[int] = None,
    ) -> "Menu":
        menu = cls(
            id=generate_prefixed_id(IdPrefix.MENU),
            restaurant_id=restaurant_id,
            menu_name=menu_name,
            description=description,
            ingredients=ingredients,
            calorie=calorie,
            created_by=actor,
        )
        if price is not None:
            menu.set_price(price)
        return menu

    # ---- Pricing and fields ---- #

    def set_price(self, price: Optional[Price]) -> None:
        if price is None:
            raise InvalidPriceError(ErrorCode.INVALID_MENU_PRICE)
        self.price = to_price(price, ErrorCode.INVALID_MENU_PRICE)

    def update(
        self,
        menu_name: str,
        description: Optional[str],
        ingredients: Optional[str],
        price: Price,
        calorie: Optional[int],
        actor: str,
    ) -> None:
        if _blank(menu_name):
            raise RequiredFieldError(ErrorCode.MENU_NAME_REQUIRED)
        if price is None:
            raise RequiredFieldError(ErrorCode.MENU_PRICE_REQUIRED)
        new_price = to_price(price, ErrorCode.INVALID_MENU_PRICE)
        self.menu_name = menu_name
        self.description = description
        self.ingredients = ingredients
        self.price = new_price
        self.calorie = calorie
        self._touch(actor)

    def set_available(self, is_available: bool, actor: str) -> None:
        self.is_available = is_available
        self._touch(actor)

    def set_main(self, is_main: bool, actor: str) -> None:
        self.is_main = is_main
        self._touch(actor)

    def set_popular(self, is_popular: bool, actor: str) -> None:
        self.is_popular = is_popular
        self._touch(actor)

    def set_new(self, is_new: bool, actor: str) -> None:
        self.is_new = is_new
        self._touch(actor)

    # ---- Category relations ---- #

    def _new_relation(self, category_id: str, is_primary: bool, actor: str) -> MenuCategoryRelation:
        return MenuCategoryRelation(
            owner_id=self.id,
            category_id=category_id,
            restaurant_id=self.restaurant_id,
            is_primary=is_primary,
            created_by=actor,
        )

    def add_category(self, category_id: str, is_primary: bool, actor: str) -> MenuCategoryRelation:
        return add_category_relation(self.category_relations, category_id, is_primary, actor, self._new_relation)

    def remove_category(self, category_id: str, actor: str) -> bool:
        return remove_category_relation(self.category_relations, category_id, actor)

    def reconcile_categories(self, category_ids, actor: str, primary_id: Optional[str] = None):
        return reconcile_category_relations(
            self.category_relations, category_ids, actor, self._new_relation, primary_id
        )

    def primary_category_id(self) -> Optional[str]:
        return primary_category_id(self.category_relations)

    def active_category_ids(self):
        return active_category_ids(self.category_relations)

    def belongs_to_category(self, category_id: str) -> bool:
        return category_id in self.active_category_ids()

    # ---- Option groups ---- #

    def add_option_group(
        self,
        group_name: str,
        actor: str,
        min_selection: int = 0,
        max_selection: int = 1,
        is_required: bool = False,
        description: Optional[str] = None,
    ) -> MenuOptionGroup:
        """
        Create an option group at the end of the list.

        Raises:
            RequiredFieldError: If the group name is blank
            InvalidSelectionRuleError: If the selection rule is inconsistent
        """
        if _blank(group_name):
            raise RequiredFieldError(ErrorCode.OPTION_GROUP_NAME_REQUIRED)
        group = MenuOptionGroup(
            id=generate_prefixed_id(IdPrefix.OPTION_GROUP),
            menu_id=self.id,
            restaurant_id=self.restaurant_id,
            group_name=group_name,
            description=description,
            min_selection=min_selection,
            max_selection=max_selection,
            is_required=is_required,
            display_order=len(self.option_groups),
            created_by=actor,
        )
        group.validate_selection_rule()
        self.option_groups.append(group)
        return group

    def find_option_group(self, group_id: str) -> MenuOptionGroup:
        for group in self.option_groups:
            if group.id == group_id:
                return group
        raise NotFoundError(ErrorCode.OPTION_GROUP_NOT_FOUND, group_id)

    def remove_option_group(self, group_id: str, actor: str) -> None:
        group = self.find_option_group(group_id)
        if not group.is_deleted:
            group.delete(actor)

    # ---- Statistics ---- #

    def increment_purchase_count(self, quantity: int = 1) -> None:
        self.purchase_count += quantity

    def increment_wishlist_count(self) -> None:
        self.wishlist_count += 1

    def decrement_wishlist_count(self) -> None:
        if self.wishlist_count > 0:
            self.wishlist_count -= 1

    def update_review_stats(self, review_rating: Decimal, review_count: int) -> None:
        self.review_rating = review_rating
        self.review_count = review_count

    # ---- Lifecycle ---- #

    def delete(self, actor: str) -> None:
        """
        Soft-delete the menu and everything it owns.

        Raises:
            AlreadyDeletedError: If the menu is already deleted
        """
        if self.is_deleted:
            raise AlreadyDeletedError(ErrorCode.MENU_ALREADY_DELETED, self.id)
        self._mark_deleted(actor)
        self.is_available = False
        for group in self.option_groups:
            if not group.is_deleted:
                group.delete(actor)
        for relation in self.category_relations:
            if not relation.is_deleted:
                relation.delete(actor)

    def restore(self, actor: str) -> None:
        self._clear_deleted(actor)

    def is_orderable(self) -> bool:
        return self.is_available and not self.is_deleted

    def has_required_options(self) -> bool:
        return any(g.is_required for g in self.option_groups if g.is_available())

    def active_option_group_count(self) -> int:
        return sum(1 for g in self.option_groups if not g.is_deleted)

    def active_category_count(self) -> int:
        return len(self.active_category_ids())

    def validate(self) -> None:
        if _blank(self.menu_name):
            raise RequiredFieldError(ErrorCode.MENU_NAME_REQUIRED)
        if self.price is None:
            raise RequiredFieldError(ErrorCode.MENU_PRICE_REQUIRED)
        if self.price < 0:
            raise InvalidPriceError(ErrorCode.INVALID_MENU_PRICE, self.price)
