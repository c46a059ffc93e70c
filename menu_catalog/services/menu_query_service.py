"""
Menu Query Service

Customers see orderable menus of visible restaurants only. Owner and admin
views include hidden and deleted menus.
"""

from typing import List, Optional
from sqlalchemy.orm import Session

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.entities.menu import Menu
from menu_catalog.exceptions import NotFoundError
from menu_catalog.repositories.interfaces import IRestaurantRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.schemas import MenuView
from menu_catalog.services.access import load_owned_restaurant
from menu_catalog.services.menu_command_service import menu_category_names


def _sorted(menus: List[Menu]) -> List[Menu]:
    return sorted(menus, key=lambda m: (not m.is_main, m.created_at))


class MenuQueryService:
    """Service for menu read operations."""

    def __init__(self, db: Session, restaurant_repo: Optional[IRestaurantRepository] = None):
        self.db = db
        self.restaurant_repo = restaurant_repo or RestaurantRepository(db)

    def _visible_restaurant(self, restaurant_id: str) -> Restaurant:
        restaurant = self.restaurant_repo.get_by_id(restaurant_id)
        if not restaurant.is_active:
            raise NotFoundError(ErrorCode.RESTAURANT_NOT_FOUND, restaurant_id)
        return restaurant

    @staticmethod
    def _views(restaurant: Restaurant, menus: List[Menu], include_deleted: bool = False) -> List[MenuView]:
        names = menu_category_names(restaurant)
        return [MenuView.from_domain(m, names, include_deleted) for m in _sorted(menus)]

    # ---- Customer ---- #

    def get_menus(self, restaurant_id: str) -> List[MenuView]:
        """Orderable menus of a visible restaurant, main menus first."""
        restaurant = self._visible_restaurant(restaurant_id)
        return self._views(restaurant, [m for m in restaurant.menus if m.is_orderable()])

    def get_menus_by_category(self, restaurant_id: str, category_id: str) -> List[MenuView]:
        """
        Orderable menus linked to a menu category.

        Raises:
            NotFoundError: If the restaurant or category does not exist
        """
        restaurant = self._visible_restaurant(restaurant_id)
        restaurant.find_menu_category_by_id(category_id)
        menus = [m for m in restaurant.menus_by_category(category_id) if m.is_orderable()]
        return self._views(restaurant, menus)

    def search_menus(self, restaurant_id: str, keyword: str) -> List[MenuView]:
        """Orderable menus whose name contains the keyword (case-insensitive)."""
        restaurant = self._visible_restaurant(restaurant_id)
        needle = (keyword or "").strip().lower()
        menus = [m for m in restaurant.menus if m.is_orderable() and needle in m.menu_name.lower()]
        return self._views(restaurant, menus)

    def get_menu_detail(self, restaurant_id: str, menu_id: str) -> MenuView:
        """
        Raises:
            NotFoundError: If the menu is missing, deleted or hidden
        """
        restaurant = self._visible_restaurant(restaurant_id)
        menu = restaurant.find_active_menu_by_id(menu_id)
        if not menu.is_orderable():
            raise NotFoundError(ErrorCode.MENU_NOT_FOUND, menu_id)
        return MenuView.from_domain(menu, menu_category_names(restaurant))

    # ---- Owner / admin ---- #

    def get_menus_for_owner(self, restaurant_id: str, owner_id: str) -> List[MenuView]:
        """All non-deleted menus including hidden ones."""
        restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
        return self._views(restaurant, restaurant.active_menus())

    def get_menu_for_owner(self, restaurant_id: str, menu_id: str, owner_id: str) -> MenuView:
        """
        One non-deleted menu of the owner's restaurant, hidden or sold out included.

        Raises:
            AccessDeniedError: If owner_id does not own the restaurant
            NotFoundError: If the restaurant or menu is missing or deleted
        """
        restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
        menu = restaurant.find_active_menu_by_id(menu_id)
        return MenuView.from_domain(menu, menu_category_names(restaurant))

    def get_menus_for_admin(self, restaurant_id: str) -> List[MenuView]:
        restaurant = self.restaurant_repo.get_by_id_including_deleted(restaurant_id)
        return self._views(restaurant, list(restaurant.menus), include_deleted=True)

    def get_menu_for_admin(self, restaurant_id: str, menu_id: str) -> MenuView:
        restaurant = self.restaurant_repo.get_by_id_including_deleted(restaurant_id)
        menu = restaurant.find_menu_by_id(menu_id)
        return MenuView.from_domain(menu, menu_category_names(restaurant), include_deleted=True)

    def exists_menu(self, restaurant_id: str, menu_id: str) -> bool:
        restaurant = self.restaurant_repo.find_by_id(restaurant_id)
        if restaurant is None:
            return False
        return any(m.id == menu_id and not m.is_deleted for m in restaurant.menus)
