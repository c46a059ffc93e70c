"""
Restaurant-specific Specifications

Concrete specifications for searching restaurants. In memory they check a
Restaurant aggregate; in SQL they filter the restaurants table.
"""

from typing import Iterable, Optional

from sqlalchemy import false, or_

from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus
from menu_catalog.models import RestaurantRecord
from .specifications import Specification


def _delimited(value: str) -> str:
    return f"%,{value},%"


class NotDeletedRestaurantSpec(Specification[Restaurant]):
    """Restaurants that are not soft-deleted."""

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        return not restaurant.is_deleted

    def to_sql_filter(self):
        return RestaurantRecord.is_deleted.is_(False)


class ActiveRestaurantSpec(Specification[Restaurant]):
    """Restaurants visible to customers: active and not deleted."""

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        return restaurant.is_active and not restaurant.is_deleted

    def to_sql_filter(self):
        return (RestaurantRecord.is_active.is_(True)) & (RestaurantRecord.is_deleted.is_(False))


class RestaurantsByOwnerSpec(Specification[Restaurant]):
    """Restaurants belonging to one owner."""

    def __init__(self, owner_id: str):
        self.owner_id = owner_id

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        return restaurant.owner_id == self.owner_id

    def to_sql_filter(self):
        return RestaurantRecord.owner_id == self.owner_id


class RestaurantsByStatusSpec(Specification[Restaurant]):
    """Restaurants in a given lifecycle status."""

    def __init__(self, status: RestaurantStatus):
        self.status = status

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        return restaurant.status is self.status

    def to_sql_filter(self):
        return RestaurantRecord.status == self.status.value


class RestaurantInRegionSpec(Specification[Restaurant]):
    """
    Restaurants in a region. Unset levels are not constrained, so
    RestaurantInRegionSpec(province="서울특별시") matches the whole province.
    """

    def __init__(self, province: Optional[str] = None, city: Optional[str] = None, district: Optional[str] = None):
        self.province = province
        self.city = city
        self.district = district

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        address = restaurant.address
        if address is None:
            return not (self.province or self.city or self.district)
        return all(
            expected is None or actual == expected
            for expected, actual in (
                (self.province, address.province),
                (self.city, address.city),
                (self.district, address.district),
            )
        )

    def to_sql_filter(self):
        clauses = []
        if self.province:
            clauses.append(RestaurantRecord.province == self.province)
        if self.city:
            clauses.append(RestaurantRecord.city == self.city)
        if self.district:
            clauses.append(RestaurantRecord.district == self.district)
        if not clauses:
            return RestaurantRecord.id.isnot(None)
        expression = clauses[0]
        for clause in clauses[1:]:
            expression = expression & clause
        return expression


class RestaurantInCategoriesSpec(Specification[Restaurant]):
    """Restaurants with an active link to any of the given categories."""

    def __init__(self, category_ids: Iterable[str]):
        self.category_ids = sorted(set(category_ids))

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        return bool(restaurant.active_restaurant_category_ids() & set(self.category_ids))

    def to_sql_filter(self):
        if not self.category_ids:
            return false()
        return or_(*[RestaurantRecord.category_ids.like(_delimited(cid)) for cid in self.category_ids])


class RestaurantKeywordSpec(Specification[Restaurant]):
    """
    Keyword match on restaurant name, tags or active menu names
    (case-insensitive substring).
    """

    def __init__(self, keyword: str):
        self.keyword = keyword.strip()

    def is_satisfied_by(self, restaurant: Restaurant) -> bool:
        needle = self.keyword.lower()
        if needle in restaurant.restaurant_name.lower():
            return True
        if any(needle in tag.lower() for tag in restaurant.tags):
            return True
        return any(needle in menu.menu_name.lower() for menu in restaurant.active_menus())

    def to_sql_filter(self):
        literal = self.keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{literal}%"
        return or_(
            RestaurantRecord.restaurant_name.ilike(pattern, escape="\\"),
            RestaurantRecord.tags.ilike(pattern, escape="\\"),
            RestaurantRecord.menu_names.ilike(pattern, escape="\\"),
        )
