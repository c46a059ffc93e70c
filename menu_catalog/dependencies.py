"""
Dependency providers for outer layers.

Factory functions that build repositories and services for a session, so
callers depend on the interfaces and tests can swap implementations.
"""

from sqlalchemy.orm import Session

from menu_catalog.repositories.interfaces import IRestaurantCategoryRepository, IRestaurantRepository
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.services.menu_command_service import MenuCommandService
from menu_catalog.services.menu_query_service import MenuQueryService
from menu_catalog.services.restaurant_category_service import RestaurantCategoryService
from menu_catalog.services.restaurant_command_service import RestaurantCommandService
from menu_catalog.services.restaurant_query_service import RestaurantQueryService
from menu_catalog.services.statistics_event_handler import StatisticsEventHandler


def get_restaurant_repository(db: Session) -> IRestaurantRepository:
    """
    Factory function for creating restaurant repositories.

    Args:
        db: Database session

    Returns:
        IRestaurantRepository implementation
    """
    return RestaurantRepository(db)


def get_restaurant_category_repository(db: Session) -> IRestaurantCategoryRepository:
    """
    Factory function for creating restaurant category repositories.

    Args:
        db: Database session

    Returns:
        IRestaurantCategoryRepository implementation
    """
    return RestaurantCategoryRepository(db)


def get_restaurant_command_service(db: Session) -> RestaurantCommandService:
    return RestaurantCommandService(
        db,
        restaurant_repo=get_restaurant_repository(db),
        category_repo=get_restaurant_category_repository(db),
    )


def get_restaurant_query_service(db: Session) -> RestaurantQueryService:
    return RestaurantQueryService(
        db,
        restaurant_repo=get_restaurant_repository(db),
        category_repo=get_restaurant_category_repository(db),
    )


def get_menu_command_service(db: Session) -> MenuCommandService:
    return MenuCommandService(db, restaurant_repo=get_restaurant_repository(db))


def get_menu_query_service(db: Session) -> MenuQueryService:
    return MenuQueryService(db, restaurant_repo=get_restaurant_repository(db))


def get_restaurant_category_service(db: Session) -> RestaurantCategoryService:
    return RestaurantCategoryService(db, category_repo=get_restaurant_category_repository(db))


def get_statistics_event_handler(db: Session) -> StatisticsEventHandler:
    """
    Factory function for the statistics event consumer.

    Args:
        db: Database session

    Returns:
        StatisticsEventHandler instance
    """
    return StatisticsEventHandler(
        db,
        restaurant_repo=get_restaurant_repository(db),
        category_repo=get_restaurant_category_repository(db),
    )
