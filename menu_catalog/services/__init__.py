"""
Application services: one unit of work per command, read views for queries.
"""

from .menu_command_service import MenuCommandService
from .menu_query_service import MenuQueryService
from .restaurant_category_service import RestaurantCategoryService
from .restaurant_command_service import RestaurantCommandService
from .restaurant_query_service import RestaurantQueryService
from .statistics_event_handler import StatisticsEventHandler

__all__ = [
    "MenuCommandService",
    "MenuQueryService",
    "RestaurantCategoryService",
    "RestaurantCommandService",
    "RestaurantQueryService",
    "StatisticsEventHandler",
]
