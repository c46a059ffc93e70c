"""
Restaurant Category Service

Admin commands and public queries over the platform-wide restaurant
category taxonomy.
"""

from typing import List, Optional
from sqlalchemy.orm import Session
import logging

from menu_catalog.constants import ErrorCode
from menu_catalog.database import transaction
from menu_catalog.domain.category_tree import build_tree
from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.exceptions import DuplicateError, InvalidCategoryDepthError, NotFoundError
from menu_catalog.repositories.interfaces import IRestaurantCategoryRepository
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.schemas import (
    RestaurantCategoryCreate,
    RestaurantCategoryTree,
    RestaurantCategoryUpdate,
    RestaurantCategoryView,
)
from menu_catalog.utils.logging_utils import log_operation

logger = logging.getLogger(__name__)


class RestaurantCategoryService:
    """Service for the restaurant category taxonomy."""

    def __init__(self, db: Session, category_repo: Optional[IRestaurantCategoryRepository] = None):
        self.db = db
        self.category_repo = category_repo or RestaurantCategoryRepository(db)

    def _get(self, category_id: str) -> RestaurantCategory:
        category = self.category_repo.find_by_id(category_id)
        if category is None:
            raise NotFoundError(ErrorCode.RESTAURANT_CATEGORY_NOT_FOUND, category_id)
        return category

    # ---- Commands ---- #

    @log_operation("create_category")
    def create_category(self, request: RestaurantCategoryCreate, actor: str) -> RestaurantCategoryView:
        """
        Create a category, deriving its depth from the parent.

        Raises:
            DuplicateError: If the category code is taken
            NotFoundError: If the parent does not exist
            InvalidCategoryDepthError: If the category would be deeper than 3
        """
        with transaction(self.db):
            if self.category_repo.find_by_category_code(request.category_code) is not None:
                raise DuplicateError(
                    ErrorCode.DUPLICATE_CATEGORY_CODE,
                    details={"category_code": request.category_code},
                )
            category = RestaurantCategory.create(
                request.category_code,
                request.category_name,
                actor,
                self.category_repo.find_by_id,
                parent_category_id=request.parent_category_id,
                description=request.description,
                icon_url=request.icon_url,
                color_code=request.color_code,
                display_order=request.display_order,
            )
            category.is_popular = request.is_popular
            category.is_new = request.is_new
            category.set_policy_info(
                request.default_minimum_order_amount,
                request.average_delivery_time,
                request.platform_commission_rate,
                actor,
            )
            self.category_repo.save(category)
            logger.info(f"Created restaurant category {category.id} ({category.category_code}) depth {category.depth}")
            return RestaurantCategoryView.model_validate(category)

    @log_operation("update_category")
    def update_category(self, category_id: str, request: RestaurantCategoryUpdate, actor: str) -> RestaurantCategoryView:
        with transaction(self.db):
            category = self._get(category_id)
            category.update(
                request.category_name,
                request.description,
                request.icon_url,
                request.color_code,
                request.display_order,
                actor,
            )
            category.set_active(request.is_active, actor)
            category.set_popular(request.is_popular, actor)
            category.set_new(request.is_new, actor)
            category.set_policy_info(
                request.default_minimum_order_amount,
                request.average_delivery_time,
                request.platform_commission_rate,
                actor,
            )
            self.category_repo.save(category)
            return RestaurantCategoryView.model_validate(category)

    @log_operation("delete_category")
    def delete_category(self, category_id: str, actor: str) -> None:
        """Soft-delete and deactivate a category. Children are left as they are."""
        with transaction(self.db):
            category = self._get(category_id)
            category.delete(actor)
            self.category_repo.save(category)

    @log_operation("restore_category")
    def restore_category(self, category_id: str, actor: str) -> RestaurantCategoryView:
        with transaction(self.db):
            category = self.category_repo.find_by_id_including_deleted(category_id)
            if category is None:
                raise NotFoundError(ErrorCode.RESTAURANT_CATEGORY_NOT_FOUND, category_id)
            category.restore(actor)
            self.category_repo.save(category)
            return RestaurantCategoryView.model_validate(category)

    # ---- Queries ---- #

    def get_category(self, category_id: str) -> RestaurantCategoryView:
        return RestaurantCategoryView.model_validate(self._get(category_id))

    def get_root_categories(self) -> List[RestaurantCategoryView]:
        return [RestaurantCategoryView.model_validate(c) for c in self.category_repo.find_root_categories()]

    def get_sub_categories(self, parent_id: str, expected_depth: Optional[int] = None) -> List[RestaurantCategoryView]:
        """
        Direct children of a category.

        Args:
            parent_id: Parent category id
            expected_depth: When given, the depth the children must have

        Raises:
            NotFoundError: If the parent does not exist
            InvalidCategoryDepthError: If the children are not at expected_depth
        """
        parent = self._get(parent_id)
        if expected_depth is not None and parent.depth + 1 != expected_depth:
            raise InvalidCategoryDepthError(expected_depth)
        children = self.category_repo.find_by_parent_category_id(parent_id)
        return [RestaurantCategoryView.model_validate(c) for c in children]

    def get_category_hierarchy(self) -> List[RestaurantCategoryTree]:
        """Every active category nested under its parent, ordered by display_order."""
        roots = build_tree(self.category_repo.find_all_active())
        return [RestaurantCategoryTree.from_node(node) for node in roots]

    def get_popular_categories(self) -> List[RestaurantCategoryView]:
        """Popular categories by total order count, highest first."""
        return [RestaurantCategoryView.model_validate(c) for c in self.category_repo.find_popular_categories()]
