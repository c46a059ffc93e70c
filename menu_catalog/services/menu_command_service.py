"""
Menu Command Service

Menu items, their option groups and options are owned by the restaurant
aggregate, so every command loads the restaurant, mutates it and saves it
back as a whole.
"""

from typing import Dict, Optional
from sqlalchemy.orm import Session
import logging

from menu_catalog.database import transaction
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.entities.menu import Menu
from menu_catalog.repositories.interfaces import IRestaurantRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.schemas import (
    MenuAdminUpdate,
    MenuCreate,
    MenuPatch,
    MenuUpdate,
    OptionCreate,
    OptionGroupCreate,
    OptionGroupView,
    OptionView,
    MenuView,
)
from menu_catalog.services.access import load_owned_restaurant, owner_actor
from menu_catalog.utils.logging_utils import log_operation

logger = logging.getLogger(__name__)


def menu_category_names(restaurant: Restaurant) -> Dict[str, str]:
    """Map of menu category id to name for a restaurant's live categories."""
    return {c.id: c.category_name for c in restaurant.menu_categories if not c.is_deleted}


def menu_view(restaurant: Restaurant, menu: Menu, include_deleted: bool = False) -> MenuView:
    return MenuView.from_domain(menu, menu_category_names(restaurant), include_deleted)


class MenuCommandService:
    """Service for menu write operations."""

    def __init__(self, db: Session, restaurant_repo: Optional[IRestaurantRepository] = None):
        self.db = db
        self.restaurant_repo = restaurant_repo or RestaurantRepository(db)

    @staticmethod
    def _apply_flags(menu: Menu, is_main, is_popular, is_new, actor: str) -> None:
        if is_main is not None:
            menu.set_main(is_main, actor)
        if is_popular is not None:
            menu.set_popular(is_popular, actor)
        if is_new is not None:
            menu.set_new(is_new, actor)

    @log_operation("create_menu")
    def create_menu(self, restaurant_id: str, owner_id: str, request: MenuCreate) -> MenuView:
        """
        Add a menu item to a restaurant.

        Args:
            restaurant_id: Restaurant id
            owner_id: Owner user id
            request: Menu data including category links

        Returns:
            MenuView of the created menu

        Raises:
            CannotModifyWhileOpenError: If the restaurant is OPEN
            RequiredFieldError: If the name or price is missing
            InvalidPriceError: If the price is negative
            NotFoundError: If a menu category does not exist
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            menu = restaurant.add_menu(
                request.menu_name,
                request.price,
                actor,
                description=request.description,
                ingredients=request.ingredients,
                calorie=request.calorie,
            )
            self._apply_flags(menu, request.is_main, request.is_popular, request.is_new, actor)
            if request.category_ids or request.primary_category_id:
                restaurant.update_menu_categories(
                    menu.id, request.category_ids, actor, request.primary_category_id
                )
            self.restaurant_repo.save(restaurant)
            logger.info(f"Created menu {menu.id} ({menu.menu_name}) in restaurant {restaurant_id}")
            return menu_view(restaurant, menu)

    @log_operation("update_menu")
    def update_menu(self, restaurant_id: str, menu_id: str, owner_id: str, request: MenuUpdate) -> MenuView:
        """Replace every editable field of a menu, including its categories."""
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            menu = restaurant.find_active_menu_by_id(menu_id)
            menu.update(
                request.menu_name,
                request.description,
                request.ingredients,
                request.price,
                request.calorie,
                actor,
            )
            self._apply_flags(menu, request.is_main, request.is_popular, request.is_new, actor)
            restaurant.update_menu_categories(menu_id, request.category_ids, actor, request.primary_category_id)
            self.restaurant_repo.save(restaurant)
            return menu_view(restaurant, menu)

    def _apply_patch(self, restaurant: Restaurant, menu: Menu, request: MenuPatch, actor: str) -> None:
        if any(
            value is not None
            for value in (request.menu_name, request.description, request.ingredients, request.price, request.calorie)
        ):
            menu.update(
                request.menu_name if request.menu_name is not None else menu.menu_name,
                request.description if request.description is not None else menu.description,
                request.ingredients if request.ingredients is not None else menu.ingredients,
                request.price if request.price is not None else menu.price,
                request.calorie if request.calorie is not None else menu.calorie,
                actor,
            )
        self._apply_flags(menu, request.is_main, request.is_popular, request.is_new, actor)

        if request.category_ids is not None:
            restaurant.update_menu_categories(menu.id, request.category_ids, actor, request.primary_category_id)
        elif request.primary_category_id is not None:
            restaurant.update_menu_categories(
                menu.id, menu.active_category_ids(), actor, request.primary_category_id
            )

    @log_operation("patch_menu")
    def patch_menu(self, restaurant_id: str, menu_id: str, owner_id: str, request: MenuPatch) -> MenuView:
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            menu = restaurant.find_active_menu_by_id(menu_id)
            self._apply_patch(restaurant, menu, request, actor)
            self.restaurant_repo.save(restaurant)
            return menu_view(restaurant, menu)

    @log_operation("toggle_menu_visibility")
    def toggle_menu_visibility(self, restaurant_id: str, menu_id: str, owner_id: str, hidden: bool) -> MenuView:
        """Hide a menu from customers without deleting it, or show it again."""
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            menu = restaurant.find_active_menu_by_id(menu_id)
            menu.set_available(not hidden, actor)
            self.restaurant_repo.save(restaurant)
            logger.info(f"Menu {menu_id} {'hidden' if hidden else 'visible'}")
            return menu_view(restaurant, menu)

    @log_operation("delete_menu")
    def delete_menu(self, restaurant_id: str, menu_id: str, owner_id: str) -> None:
        """
        Soft-delete a menu with its option groups, options and category links.

        Raises:
            AlreadyDeletedError: If the menu is already deleted
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            restaurant.remove_menu(menu_id, actor)
            self.restaurant_repo.save(restaurant)

    @log_operation("restore_menu")
    def restore_menu(self, restaurant_id: str, menu_id: str, admin_id: str) -> MenuView:
        """Clear a menu's deleted flag; option groups and links stay deleted."""
        with transaction(self.db):
            restaurant = self.restaurant_repo.get_by_id_including_deleted(restaurant_id)
            menu = restaurant.find_menu_by_id(menu_id)
            menu.restore(admin_id)
            self.restaurant_repo.save(restaurant)
            return menu_view(restaurant, menu, include_deleted=True)

    @log_operation("update_menu_by_admin")
    def update_menu_by_admin(self, restaurant_id: str, menu_id: str, admin_id: str, request: MenuAdminUpdate) -> MenuView:
        with transaction(self.db):
            restaurant = self.restaurant_repo.get_by_id_including_deleted(restaurant_id)
            menu = restaurant.find_menu_by_id(menu_id)
            self._apply_patch(restaurant, menu, request, admin_id)
            if request.is_available is not None:
                menu.set_available(request.is_available, admin_id)
            self.restaurant_repo.save(restaurant)
            return menu_view(restaurant, menu, include_deleted=True)

    # ---- Option groups ---- #

    @log_operation("add_option_group")
    def add_option_group(
        self, restaurant_id: str, menu_id: str, owner_id: str, request: OptionGroupCreate
    ) -> OptionGroupView:
        """
        Add an option group to a menu.

        A required group with min_selection 0 is stored with min_selection 1.

        Raises:
            InvalidSelectionRuleError: If min < 0 or max < min
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            group = restaurant.add_option_group_to_menu(
                menu_id,
                request.group_name,
                actor,
                min_selection=request.min_selection,
                max_selection=request.max_selection,
                is_required=request.is_required,
                description=request.description,
            )
            self.restaurant_repo.save(restaurant)
            return OptionGroupView.from_domain(group)

    @log_operation("add_option")
    def add_option(
        self, restaurant_id: str, menu_id: str, group_id: str, owner_id: str, request: OptionCreate
    ) -> OptionView:
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            option = restaurant.add_option_to_group(
                menu_id,
                group_id,
                request.option_name,
                request.additional_price,
                actor,
                description=request.description,
            )
            if request.is_default:
                option.set_default(True, actor)
            self.restaurant_repo.save(restaurant)
            return OptionView.model_validate(option)

    @log_operation("remove_option_group")
    def remove_option_group(self, restaurant_id: str, menu_id: str, group_id: str, owner_id: str) -> None:
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            menu = restaurant.find_active_menu_by_id(menu_id)
            menu.remove_option_group(group_id, actor)
            self.restaurant_repo.save(restaurant)

    @log_operation("remove_option")
    def remove_option(self, restaurant_id: str, menu_id: str, group_id: str, option_id: str, owner_id: str) -> None:
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            menu = restaurant.find_active_menu_by_id(menu_id)
            menu.find_option_group(group_id).remove_option(option_id, actor)
            self.restaurant_repo.save(restaurant)
