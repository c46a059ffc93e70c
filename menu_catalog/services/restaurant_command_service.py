"""
Restaurant Command Service

Handles restaurant registration, updates, lifecycle changes, operating
hours and menu category management. Each public method is one unit of
work: load the aggregate, mutate it through domain methods, save it.
"""

from datetime import time
from decimal import Decimal
from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
import logging

from menu_catalog.constants import ErrorCode
from menu_catalog.database import transaction
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.value_objects.address import Address
from menu_catalog.domain.value_objects.coordinate import Coordinate
from menu_catalog.domain.value_objects.day_type import DayType
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus
from menu_catalog.exceptions import DuplicateError, InvalidAddressError, NotFoundError
from menu_catalog.repositories.interfaces import IRestaurantCategoryRepository, IRestaurantRepository
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.schemas import (
    MenuCategoryView,
    OperatingDayInput,
    OperatingDayView,
    RestaurantAdminUpdate,
    RestaurantCreate,
    RestaurantPatch,
    RestaurantUpdate,
    RestaurantView,
)
from menu_catalog.services.access import load_owned_restaurant, owner_actor
from menu_catalog.utils.logging_utils import log_operation

logger = logging.getLogger(__name__)


def build_address(province, city, district, detail_address=None) -> Address:
    """
    Build an address, rejecting incomplete ones.

    Raises:
        InvalidAddressError: If province, city or district is blank
    """
    address = Address(province=province, city=city, district=district, detail_address=detail_address)
    if not address.is_valid():
        raise InvalidAddressError()
    return address


def build_coordinate(latitude: Optional[Decimal], longitude: Optional[Decimal]) -> Optional[Coordinate]:
    """No coordinate when both parts are absent; otherwise a validated one."""
    if latitude is None and longitude is None:
        return None
    return Coordinate.of(latitude, longitude)


class RestaurantCommandService:
    """Service for restaurant write operations."""

    def __init__(
        self,
        db: Session,
        restaurant_repo: Optional[IRestaurantRepository] = None,
        category_repo: Optional[IRestaurantCategoryRepository] = None,
    ):
        """
        Initialize RestaurantCommandService.

        Args:
            db: Database session
            restaurant_repo: Restaurant repository (defaults to SQLAlchemy)
            category_repo: Restaurant category repository (defaults to SQLAlchemy)
        """
        self.db = db
        self.restaurant_repo = restaurant_repo or RestaurantRepository(db)
        self.category_repo = category_repo or RestaurantCategoryRepository(db)

    # ---- Helpers ---- #

    def _category_names(self, restaurant: Restaurant) -> Dict[str, str]:
        categories = self.category_repo.find_all_by_ids(restaurant.active_restaurant_category_ids())
        return {c.id: c.category_name for c in categories}

    def _to_view(self, restaurant: Restaurant) -> RestaurantView:
        return RestaurantView.from_domain(restaurant, self._category_names(restaurant))

    def _require_categories(self, category_ids: Iterable[str]) -> None:
        wanted = set(category_ids)
        found = {c.id for c in self.category_repo.find_all_by_ids(wanted)}
        missing = sorted(wanted - found)
        if missing:
            raise NotFoundError(ErrorCode.RESTAURANT_CATEGORY_NOT_FOUND, ", ".join(missing))

    def _sync_category_counts(self, added: List[str], removed: List[str]) -> None:
        """Keep each category's active restaurant count in step with relation changes."""
        for category_id in added:
            category = self.category_repo.find_by_id(category_id)
            if category is not None:
                category.increment_active_restaurant_count()
                self.category_repo.save(category)
        for category_id in removed:
            category = self.category_repo.find_by_id(category_id)
            if category is not None:
                category.decrement_active_restaurant_count()
                self.category_repo.save(category)

    def _reconcile_categories(
        self,
        restaurant: Restaurant,
        category_ids: Iterable[str],
        primary_category_id: Optional[str],
        actor: str,
    ) -> None:
        target = set(category_ids)
        if primary_category_id:
            target.add(primary_category_id)
        self._require_categories(target)
        added, removed = restaurant.update_restaurant_categories(target, actor, primary_category_id or None)
        self._sync_category_counts(added, removed)
        if added or removed:
            logger.info(
                f"Restaurant {restaurant.id} categories reconciled: "
                f"+{added} -{removed}"
            )

    # ---- Commands ---- #

    @log_operation("create_restaurant")
    def create_restaurant(self, owner_id: str, owner_name: Optional[str], request: RestaurantCreate) -> RestaurantView:
        """
        Register a new restaurant for an owner.

        Args:
            owner_id: Owner user id
            owner_name: Owner display name
            request: Registration data

        Returns:
            RestaurantView of the created restaurant

        Raises:
            DuplicateError: If the owner already has a restaurant with this name
            InvalidAddressError: If the address is incomplete
            InvalidCoordinateError / InvalidRangeError: If the coordinate is invalid
            NotFoundError: If a category id is unknown
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            if self.restaurant_repo.exists_by_owner_id_and_name(owner_id, request.restaurant_name):
                raise DuplicateError(
                    ErrorCode.DUPLICATE_RESTAURANT_NAME,
                    details={"owner_id": owner_id, "restaurant_name": request.restaurant_name},
                )

            restaurant = Restaurant.create(
                owner_id=owner_id,
                owner_name=owner_name,
                restaurant_name=request.restaurant_name,
                actor=actor,
                address=build_address(request.province, request.city, request.district, request.detail_address),
                coordinate=build_coordinate(request.latitude, request.longitude),
                contact_number=request.contact_number,
                description=request.description,
                status=RestaurantStatus.OPEN,
            )
            for tag in request.tags:
                restaurant.add_tag(tag)
            self._reconcile_categories(restaurant, request.category_ids, request.primary_category_id, actor)

            self.restaurant_repo.save(restaurant)
            logger.info(f"Created restaurant {restaurant.id} ({restaurant.restaurant_name}) for owner {owner_id}")
            return self._to_view(restaurant)

    @log_operation("update_restaurant")
    def update_restaurant(self, restaurant_id: str, owner_id: str, request: RestaurantUpdate) -> RestaurantView:
        """Replace every owner-editable field of a restaurant."""
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            restaurant.update_basic_info(request.restaurant_name, request.contact_number, actor, request.description)
            restaurant.update_address(
                build_address(request.province, request.city, request.district, request.detail_address), actor
            )
            restaurant.update_coordinate(build_coordinate(request.latitude, request.longitude), actor)
            restaurant.replace_tags(request.tags, actor)
            self._reconcile_categories(restaurant, request.category_ids, request.primary_category_id, actor)
            self.restaurant_repo.save(restaurant)
            return self._to_view(restaurant)

    def _apply_patch(self, restaurant: Restaurant, request: RestaurantPatch, actor: str) -> None:
        if request.restaurant_name is not None or request.contact_number is not None or request.description is not None:
            restaurant.update_basic_info(
                request.restaurant_name if request.restaurant_name is not None else restaurant.restaurant_name,
                request.contact_number if request.contact_number is not None else restaurant.contact_number,
                actor,
                request.description if request.description is not None else restaurant.description,
            )

        address_fields = (request.province, request.city, request.district, request.detail_address)
        if any(value is not None for value in address_fields):
            current = restaurant.address
            restaurant.update_address(
                build_address(
                    request.province if request.province is not None else (current.province if current else None),
                    request.city if request.city is not None else (current.city if current else None),
                    request.district if request.district is not None else (current.district if current else None),
                    request.detail_address if request.detail_address is not None
                    else (current.detail_address if current else None),
                ),
                actor,
            )

        if request.latitude is not None or request.longitude is not None:
            restaurant.update_coordinate(build_coordinate(request.latitude, request.longitude), actor)

        if request.tags is not None:
            restaurant.replace_tags(request.tags, actor)

        if request.category_ids is not None:
            self._reconcile_categories(restaurant, request.category_ids, request.primary_category_id, actor)
        elif request.primary_category_id is not None:
            self._reconcile_categories(
                restaurant, restaurant.active_restaurant_category_ids(), request.primary_category_id, actor
            )

    @log_operation("patch_restaurant")
    def patch_restaurant(self, restaurant_id: str, owner_id: str, request: RestaurantPatch) -> RestaurantView:
        """Update only the fields present in the request."""
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            self._apply_patch(restaurant, request, actor)
            self.restaurant_repo.save(restaurant)
            return self._to_view(restaurant)

    @log_operation("update_restaurant_status")
    def update_restaurant_status(self, restaurant_id: str, owner_id: str, status: RestaurantStatus) -> RestaurantView:
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            previous = restaurant.status
            restaurant.change_status(status, actor)
            self.restaurant_repo.save(restaurant)
            logger.info(f"Restaurant {restaurant_id} status {previous.value} -> {status.value}")
            return self._to_view(restaurant)

    @log_operation("delete_restaurant")
    def delete_restaurant(self, restaurant_id: str, owner_id: str) -> None:
        """
        Soft-delete a restaurant with everything it owns.

        Raises:
            AlreadyDeletedError: If the restaurant is already deleted
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id, include_deleted=True)
            linked = sorted(restaurant.active_restaurant_category_ids())
            restaurant.delete(actor)
            self._sync_category_counts([], linked)
            self.restaurant_repo.save(restaurant)
            logger.info(f"Deleted restaurant {restaurant_id} ({len(restaurant.menus)} menus cascaded)")

    @log_operation("restore_restaurant")
    def restore_restaurant(self, restaurant_id: str, admin_id: str) -> RestaurantView:
        """
        Restore a soft-deleted restaurant.

        Menus, menu categories and category links removed by the delete
        cascade stay deleted and must be restored individually.
        """
        with transaction(self.db):
            restaurant = self.restaurant_repo.get_by_id_including_deleted(restaurant_id)
            restaurant.restore(admin_id)
            self.restaurant_repo.save(restaurant)
            logger.info(f"Restored restaurant {restaurant_id}; children remain deleted")
            return self._to_view(restaurant)

    @log_operation("update_restaurant_by_admin")
    def update_restaurant_by_admin(self, restaurant_id: str, admin_id: str, request: RestaurantAdminUpdate) -> RestaurantView:
        """Admin patch that can also reach deleted restaurants and toggle activation."""
        with transaction(self.db):
            restaurant = self.restaurant_repo.get_by_id_including_deleted(restaurant_id)
            self._apply_patch(restaurant, request, admin_id)
            if request.is_active is not None:
                restaurant.set_active(request.is_active, admin_id)
            if request.status is not None:
                restaurant.change_status(request.status, admin_id)
            self.restaurant_repo.save(restaurant)
            return self._to_view(restaurant)

    # ---- Operating hours ---- #

    @log_operation("set_operating_days")
    def set_operating_days(self, restaurant_id: str, owner_id: str, days: List[OperatingDayInput]) -> List[OperatingDayView]:
        """
        Set one or more operating windows. A window replaces any existing
        window for the same day and time type.
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            for day in days:
                restaurant.set_operating_day(
                    day.day_type,
                    actor,
                    time_type=day.time_type,
                    start_time=day.start_time,
                    end_time=day.end_time,
                    is_holiday=day.is_holiday,
                    break_start_time=day.break_start_time,
                    break_end_time=day.break_end_time,
                    note=day.note,
                )
            self.restaurant_repo.save(restaurant)
            return [OperatingDayView.from_domain(d) for d in restaurant.operating_days]

    @log_operation("set_break_time")
    def set_break_time(
        self,
        restaurant_id: str,
        owner_id: str,
        day_type: DayType,
        break_start: Optional[time],
        break_end: Optional[time],
    ) -> OperatingDayView:
        """
        Set the break on a day's regular window.

        Raises:
            NotFoundError: If the day has no regular window
        """
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            day = restaurant.set_break_time(day_type, break_start, break_end, actor)
            self.restaurant_repo.save(restaurant)
            return OperatingDayView.from_domain(day)

    # ---- Menu categories ---- #

    @log_operation("add_menu_category")
    def add_menu_category(
        self,
        restaurant_id: str,
        owner_id: str,
        category_name: str,
        description: Optional[str] = None,
        parent_category_id: Optional[str] = None,
        display_order: Optional[int] = None,
    ) -> MenuCategoryView:
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            category = restaurant.add_menu_category(
                category_name,
                actor,
                description=description,
                parent_category_id=parent_category_id,
                display_order=display_order,
            )
            self.restaurant_repo.save(restaurant)
            return MenuCategoryView.from_domain(category, restaurant.menu_category_path(category.id))

    @log_operation("delete_menu_category")
    def delete_menu_category(self, restaurant_id: str, owner_id: str, category_id: str) -> None:
        """Soft-delete a menu category; menus keep existing but lose the link."""
        actor = owner_actor(owner_id)
        with transaction(self.db):
            restaurant = load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id)
            restaurant.remove_menu_category(category_id, actor)
            self.restaurant_repo.save(restaurant)
