"""
Repository layer for catalog data access.

Provides an abstraction over SQLAlchemy so services work with domain
aggregates instead of rows.
"""

from .restaurant_category_repository import RestaurantCategoryRepository
from .restaurant_repository import RestaurantRepository

__all__ = ["RestaurantCategoryRepository", "RestaurantRepository"]
