"""
Repository Interfaces

Abstract base classes the application services depend on. The SQLAlchemy
repositories implement them; tests may substitute in-memory fakes.
"""

from abc import ABC, abstractmethod
from typing import Iterable, List, Optional

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.exceptions import NotFoundError
from .specifications import Specification


class IRestaurantRepository(ABC):
    """Persistence for whole Restaurant aggregates."""

    @abstractmethod
    def find_by_id(self, restaurant_id: str) -> Optional[Restaurant]:
        """
        Load a restaurant that is not soft-deleted.

        Args:
            restaurant_id: Restaurant id

        Returns:
            Restaurant aggregate or None
        """

    @abstractmethod
    def find_by_id_including_deleted(self, restaurant_id: str) -> Optional[Restaurant]:
        """Load a restaurant regardless of its deleted flag."""

    def get_by_id(self, restaurant_id: str) -> Restaurant:
        """
        Load a restaurant that is not soft-deleted.

        Raises:
            NotFoundError: If missing or deleted
        """
        restaurant = self.find_by_id(restaurant_id)
        if restaurant is None:
            raise NotFoundError(ErrorCode.RESTAURANT_NOT_FOUND, restaurant_id)
        return restaurant

    def get_by_id_including_deleted(self, restaurant_id: str) -> Restaurant:
        """
        Load a restaurant regardless of its deleted flag.

        Raises:
            NotFoundError: If missing
        """
        restaurant = self.find_by_id_including_deleted(restaurant_id)
        if restaurant is None:
            raise NotFoundError(ErrorCode.RESTAURANT_NOT_FOUND, restaurant_id)
        return restaurant

    @abstractmethod
    def save(self, restaurant: Restaurant) -> Restaurant:
        """Insert or replace the whole aggregate."""

    @abstractmethod
    def find_by_owner_id(self, owner_id: str, include_deleted: bool = False) -> List[Restaurant]:
        pass

    @abstractmethod
    def find_all(self, include_deleted: bool = False, limit: Optional[int] = None, offset: int = 0) -> List[Restaurant]:
        pass

    @abstractmethod
    def search(self, spec: Specification[Restaurant], limit: Optional[int] = None, offset: int = 0) -> List[Restaurant]:
        """Load restaurants matching a specification."""

    @abstractmethod
    def exists_by_id(self, restaurant_id: str) -> bool:
        pass

    @abstractmethod
    def exists_by_owner_id_and_name(self, owner_id: str, restaurant_name: str) -> bool:
        """Check for a non-deleted restaurant with this owner and name."""


class IRestaurantCategoryRepository(ABC):
    """Persistence for the restaurant category taxonomy."""

    @abstractmethod
    def save(self, category: RestaurantCategory) -> RestaurantCategory:
        pass

    @abstractmethod
    def find_by_id(self, category_id: str) -> Optional[RestaurantCategory]:
        pass

    @abstractmethod
    def find_by_id_including_deleted(self, category_id: str) -> Optional[RestaurantCategory]:
        """Load a category regardless of its deleted flag."""

    @abstractmethod
    def find_all_by_ids(self, category_ids: Iterable[str]) -> List[RestaurantCategory]:
        """Resolve many ids in one query. An empty input returns []."""

    @abstractmethod
    def find_by_category_code(self, category_code: str) -> Optional[RestaurantCategory]:
        pass

    @abstractmethod
    def find_all_active(self) -> List[RestaurantCategory]:
        pass

    @abstractmethod
    def find_root_categories(self) -> List[RestaurantCategory]:
        pass

    @abstractmethod
    def find_by_parent_category_id(self, parent_category_id: str) -> List[RestaurantCategory]:
        pass

    @abstractmethod
    def find_popular_categories(self) -> List[RestaurantCategory]:
        pass

    @abstractmethod
    def exists_by_id(self, category_id: str) -> bool:
        pass
