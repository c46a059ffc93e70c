"""
Restaurant category repository for the shared taxonomy.
"""

from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.models import RestaurantCategoryRecord
from .base_repository import BaseRepository
from .interfaces import IRestaurantCategoryRepository

_FIELDS = (
    "category_code", "category_name", "description", "icon_url", "color_code",
    "parent_category_id", "depth", "display_order", "is_active", "is_popular", "is_new",
    "default_minimum_order_amount", "average_delivery_time", "platform_commission_rate",
    "active_restaurant_count", "total_order_count",
    "created_at", "created_by", "updated_at", "updated_by",
    "is_deleted", "deleted_at", "deleted_by",
)


class RestaurantCategoryRepository(BaseRepository[RestaurantCategoryRecord], IRestaurantCategoryRepository):
    """Repository for RestaurantCategory entities, one row each."""

    def __init__(self, db: Session):
        super().__init__(db, RestaurantCategoryRecord)

    @staticmethod
    def _to_domain(record: RestaurantCategoryRecord) -> RestaurantCategory:
        return RestaurantCategory(id=record.id, **{name: getattr(record, name) for name in _FIELDS})

    def _available(self):
        return self._query().filter(
            RestaurantCategoryRecord.is_deleted.is_(False),
            RestaurantCategoryRecord.is_active.is_(True),
        )

    def save(self, category: RestaurantCategory) -> RestaurantCategory:
        record = self.get_record(category.id)
        if record is None:
            record = RestaurantCategoryRecord(id=category.id)
            for name in _FIELDS:
                setattr(record, name, getattr(category, name))
            self.add(record)
        else:
            for name in _FIELDS:
                setattr(record, name, getattr(category, name))
            self.db.flush()
        return category

    def find_by_id(self, category_id: str) -> Optional[RestaurantCategory]:
        """
        Get a category that is not soft-deleted.

        Args:
            category_id: Category id

        Returns:
            RestaurantCategory or None
        """
        record = self._query().filter(
            RestaurantCategoryRecord.id == category_id,
            RestaurantCategoryRecord.is_deleted.is_(False),
        ).first()
        return self._to_domain(record) if record else None

    def find_by_id_including_deleted(self, category_id: str) -> Optional[RestaurantCategory]:
        record = self.get_record(category_id)
        return self._to_domain(record) if record else None

    def find_all_by_ids(self, category_ids: Iterable[str]) -> List[RestaurantCategory]:
        """
        Resolve many category ids with a single IN query.

        Args:
            category_ids: Ids to resolve; unknown ids are skipped

        Returns:
            Categories ordered by display_order
        """
        ids = list(set(category_ids))
        if not ids:
            return []
        records = self._query().filter(
            RestaurantCategoryRecord.id.in_(ids),
            RestaurantCategoryRecord.is_deleted.is_(False),
        ).order_by(RestaurantCategoryRecord.display_order).all()
        return [self._to_domain(r) for r in records]

    def find_by_category_code(self, category_code: str) -> Optional[RestaurantCategory]:
        record = self._query().filter(RestaurantCategoryRecord.category_code == category_code).first()
        return self._to_domain(record) if record else None

    def find_all_active(self) -> List[RestaurantCategory]:
        records = self._available().order_by(
            RestaurantCategoryRecord.depth, RestaurantCategoryRecord.display_order
        ).all()
        return [self._to_domain(r) for r in records]

    def find_root_categories(self) -> List[RestaurantCategory]:
        records = self._available().filter(
            RestaurantCategoryRecord.parent_category_id.is_(None)
        ).order_by(RestaurantCategoryRecord.display_order).all()
        return [self._to_domain(r) for r in records]

    def find_by_parent_category_id(self, parent_category_id: str) -> List[RestaurantCategory]:
        records = self._available().filter(
            RestaurantCategoryRecord.parent_category_id == parent_category_id
        ).order_by(RestaurantCategoryRecord.display_order).all()
        return [self._to_domain(r) for r in records]

    def find_popular_categories(self) -> List[RestaurantCategory]:
        records = self._available().filter(
            RestaurantCategoryRecord.is_popular.is_(True)
        ).order_by(RestaurantCategoryRecord.total_order_count.desc()).all()
        return [self._to_domain(r) for r in records]

    def exists_by_id(self, category_id: str) -> bool:
        return self.exists(
            RestaurantCategoryRecord.id == category_id,
            RestaurantCategoryRecord.is_deleted.is_(False),
        )
