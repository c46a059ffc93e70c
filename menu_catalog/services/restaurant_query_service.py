"""
Restaurant Query Service

Read-side operations for customers, owners and admins. Customers only see
active, non-deleted restaurants; owners see their own including hidden
ones; admins see everything.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session
import logging

from menu_catalog.config.catalog_config import CatalogSettings, settings as default_settings
from menu_catalog.constants import ErrorCode
from menu_catalog.database import transaction
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.value_objects.coordinate import Coordinate
from menu_catalog.exceptions import NotFoundError
from menu_catalog.repositories.interfaces import IRestaurantCategoryRepository, IRestaurantRepository
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.repositories.restaurant_specifications import (
    ActiveRestaurantSpec,
    RestaurantInCategoriesSpec,
    RestaurantInRegionSpec,
    RestaurantKeywordSpec,
)
from menu_catalog.schemas import NearbyRestaurantView, RestaurantSearchRequest, RestaurantView
from menu_catalog.services.access import load_owned_restaurant

logger = logging.getLogger(__name__)


class RestaurantQueryService:
    """Service for restaurant read operations."""

    def __init__(
        self,
        db: Session,
        restaurant_repo: Optional[IRestaurantRepository] = None,
        category_repo: Optional[IRestaurantCategoryRepository] = None,
        settings: Optional[CatalogSettings] = None,
    ):
        self.db = db
        self.restaurant_repo = restaurant_repo or RestaurantRepository(db)
        self.category_repo = category_repo or RestaurantCategoryRepository(db)
        self.settings = settings or default_settings

    def _category_names(self, restaurants: Iterable[Restaurant]) -> Dict[str, str]:
        """Resolve the category names of many restaurants with one query."""
        ids = set()
        for restaurant in restaurants:
            ids |= restaurant.active_restaurant_category_ids()
        return {c.id: c.category_name for c in self.category_repo.find_all_by_ids(ids)}

    def _to_views(self, restaurants: List[Restaurant]) -> List[RestaurantView]:
        names = self._category_names(restaurants)
        return [RestaurantView.from_domain(r, names) for r in restaurants]

    def _to_view(self, restaurant: Restaurant) -> RestaurantView:
        return self._to_views([restaurant])[0]

    # ---- Customer ---- #

    def search_restaurants(self, request: RestaurantSearchRequest) -> List[RestaurantView]:
        """
        Search customer-visible restaurants.

        Region levels, category ids and keyword are optional and combined
        with AND. A keyword matches the name, tags or menu names.

        Args:
            request: Search criteria with pagination

        Returns:
            Matching restaurants, newest first
        """
        spec = ActiveRestaurantSpec()
        if request.province or request.city or request.district:
            spec = spec & RestaurantInRegionSpec(request.province, request.city, request.district)
        if request.category_ids:
            spec = spec & RestaurantInCategoriesSpec(request.category_ids)
        if request.keyword and request.keyword.strip():
            spec = spec & RestaurantKeywordSpec(request.keyword.strip())

        limit = self.settings.clamp_limit(request.limit)
        restaurants = self.restaurant_repo.search(spec, limit=limit, offset=request.offset)
        logger.debug(f"Restaurant search returned {len(restaurants)} results")
        return self._to_views(restaurants)

    def _get_visible(self, restaurant_id: str) -> Restaurant:
        restaurant = self.restaurant_repo.get_by_id(restaurant_id)
        if not restaurant.is_active:
            raise NotFoundError(ErrorCode.RESTAURANT_NOT_FOUND, restaurant_id)
        return restaurant

    def get_restaurant_detail(self, restaurant_id: str, count_view: bool = False) -> RestaurantView:
        """
        Get a customer-visible restaurant.

        Args:
            restaurant_id: Restaurant id
            count_view: Increment the view counter

        Raises:
            NotFoundError: If the restaurant is missing, deleted or inactive
        """
        if not count_view:
            return self._to_view(self._get_visible(restaurant_id))
        with transaction(self.db):
            restaurant = self._get_visible(restaurant_id)
            restaurant.increment_view_count()
            self.restaurant_repo.save(restaurant)
            return self._to_view(restaurant)

    def find_nearby(
        self,
        latitude: float,
        longitude: float,
        radius_km: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> List[NearbyRestaurantView]:
        """
        Find customer-visible restaurants within a radius, closest first.

        Restaurants without a coordinate are skipped.

        Raises:
            InvalidCoordinateError / InvalidRangeError: If the origin is invalid
        """
        origin = Coordinate.of(latitude, longitude)
        radius = self.settings.nearby_radius_km if radius_km is None else radius_km

        matches = []
        for restaurant in self.restaurant_repo.search(ActiveRestaurantSpec()):
            if origin.is_nearby(restaurant.coordinate, radius):
                matches.append((origin.distance_to(restaurant.coordinate), restaurant))
        matches.sort(key=lambda pair: pair[0])
        matches = matches[:self.settings.clamp_limit(limit)]

        names = self._category_names(r for _, r in matches)
        return [
            NearbyRestaurantView(restaurant=RestaurantView.from_domain(r, names), distance_km=round(d, 3))
            for d, r in matches
        ]

    def can_accept_order(self, restaurant_id: str, now: Optional[datetime] = None) -> bool:
        """Whether the restaurant takes orders at the given moment (default: now)."""
        restaurant = self.restaurant_repo.find_by_id(restaurant_id)
        if restaurant is None:
            return False
        return restaurant.can_accept_order(now)

    # ---- Owner ---- #

    def get_restaurants_by_owner(self, owner_id: str) -> List[RestaurantView]:
        return self._to_views(self.restaurant_repo.find_by_owner_id(owner_id))

    def get_restaurant_for_owner(self, restaurant_id: str, owner_id: str) -> RestaurantView:
        """
        Get an owner's restaurant, including inactive ones.

        Raises:
            NotFoundError: If missing or deleted
            AccessDeniedError: If it belongs to another owner
        """
        return self._to_view(load_owned_restaurant(self.restaurant_repo, restaurant_id, owner_id))

    # ---- Admin ---- #

    def get_all_restaurants_for_admin(
        self, include_deleted: bool = True, limit: Optional[int] = None, offset: int = 0
    ) -> List[RestaurantView]:
        restaurants = self.restaurant_repo.find_all(
            include_deleted=include_deleted,
            limit=self.settings.clamp_limit(limit),
            offset=offset,
        )
        return self._to_views(restaurants)

    def get_restaurant_for_admin(self, restaurant_id: str) -> RestaurantView:
        return self._to_view(self.restaurant_repo.get_by_id_including_deleted(restaurant_id))

    def exists_restaurant(self, restaurant_id: str) -> bool:
        return self.restaurant_repo.exists_by_id(restaurant_id)
