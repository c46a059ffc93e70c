"""
Restaurant repository for aggregate persistence.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.models import RestaurantRecord
from . import aggregate_mapper
from .base_repository import BaseRepository
from .interfaces import IRestaurantRepository
from .restaurant_specifications import NotDeletedRestaurantSpec
from .specifications import Specification

logger = logging.getLogger(__name__)


def _delimited(values) -> str:
    return "," + "".join(f"{v}," for v in values)


class RestaurantRepository(BaseRepository[RestaurantRecord], IRestaurantRepository):
    """
    Stores each Restaurant aggregate as one row.

    save() rewrites the searchable columns and the JSON snapshot together,
    so a reload always returns exactly what was saved.
    """

    def __init__(self, db: Session):
        super().__init__(db, RestaurantRecord)

    def _to_domain(self, record: RestaurantRecord) -> Restaurant:
        return aggregate_mapper.loads(record.aggregate_json)

    def _to_domain_list(self, records: List[RestaurantRecord]) -> List[Restaurant]:
        return [self._to_domain(r) for r in records]

    def _apply_columns(self, record: RestaurantRecord, restaurant: Restaurant) -> None:
        address = restaurant.address
        coordinate = restaurant.coordinate
        record.owner_id = restaurant.owner_id
        record.owner_name = restaurant.owner_name
        record.restaurant_name = restaurant.restaurant_name
        record.status = restaurant.status.value
        record.province = address.province if address else None
        record.city = address.city if address else None
        record.district = address.district if address else None
        record.latitude = coordinate.latitude if coordinate else None
        record.longitude = coordinate.longitude if coordinate else None
        record.tags = _delimited(restaurant.tags)
        record.category_ids = _delimited(sorted(restaurant.active_restaurant_category_ids()))
        record.menu_names = _delimited(m.menu_name for m in restaurant.active_menus())
        record.is_active = restaurant.is_active
        record.is_deleted = restaurant.is_deleted
        record.view_count = restaurant.view_count
        record.wishlist_count = restaurant.wishlist_count
        record.purchase_count = restaurant.purchase_count
        record.created_at = restaurant.created_at
        record.updated_at = restaurant.updated_at
        record.deleted_at = restaurant.deleted_at
        record.aggregate_json = aggregate_mapper.dumps(restaurant)

    def save(self, restaurant: Restaurant) -> Restaurant:
        """
        Insert or update the aggregate.

        Args:
            restaurant: Aggregate to persist

        Returns:
            The same aggregate
        """
        record = self.get_record(restaurant.id)
        if record is None:
            record = RestaurantRecord(id=restaurant.id)
            self._apply_columns(record, restaurant)
            self.add(record)
            logger.debug(f"Inserted restaurant {restaurant.id}")
        else:
            self._apply_columns(record, restaurant)
            self.db.flush()
            logger.debug(f"Updated restaurant {restaurant.id}")
        return restaurant

    def find_by_id(self, restaurant_id: str) -> Optional[Restaurant]:
        record = self._query().filter(
            RestaurantRecord.id == restaurant_id,
            RestaurantRecord.is_deleted.is_(False),
        ).first()
        return self._to_domain(record) if record else None

    def find_by_id_including_deleted(self, restaurant_id: str) -> Optional[Restaurant]:
        record = self.get_record(restaurant_id)
        return self._to_domain(record) if record else None

    def find_by_owner_id(self, owner_id: str, include_deleted: bool = False) -> List[Restaurant]:
        """
        Get restaurants of an owner, newest first.

        Args:
            owner_id: Owner user id
            include_deleted: Whether to include soft-deleted restaurants

        Returns:
            List of restaurant aggregates
        """
        query = self._query().filter(RestaurantRecord.owner_id == owner_id)
        if not include_deleted:
            query = query.filter(RestaurantRecord.is_deleted.is_(False))
        return self._to_domain_list(query.order_by(RestaurantRecord.created_at.desc()).all())

    def find_all(self, include_deleted: bool = False, limit: Optional[int] = None, offset: int = 0) -> List[Restaurant]:
        query = self._query()
        if not include_deleted:
            query = NotDeletedRestaurantSpec().apply(query)
        query = query.order_by(RestaurantRecord.created_at.desc())
        return self._to_domain_list(self.paginate(query, limit, offset))

    def search(self, spec: Specification[Restaurant], limit: Optional[int] = None, offset: int = 0) -> List[Restaurant]:
        """
        Find restaurants matching a specification.

        Args:
            spec: Search criteria
            limit: Maximum number of results
            offset: Number of results to skip

        Returns:
            Matching aggregates, newest first
        """
        query = spec.apply(self._query()).order_by(RestaurantRecord.created_at.desc())
        return self._to_domain_list(self.paginate(query, limit, offset))

    def exists_by_id(self, restaurant_id: str) -> bool:
        return self.exists(
            RestaurantRecord.id == restaurant_id,
            RestaurantRecord.is_deleted.is_(False),
        )

    def exists_by_owner_id_and_name(self, owner_id: str, restaurant_name: str) -> bool:
        return self.exists(
            RestaurantRecord.owner_id == owner_id,
            RestaurantRecord.restaurant_name == restaurant_name,
            RestaurantRecord.is_deleted.is_(False),
        )
