"""
Restaurant aggregate snapshot codec.

Converts a Restaurant and its whole object graph to a JSON-compatible dict
and back. Every audit and soft-delete field is kept so that admin tooling
reads exactly what the domain methods wrote.
"""

import json
from datetime import datetime, time
from decimal import Decimal
from typing import Any, Dict, Optional

from menu_catalog.domain.aggregates.operating_schedule import OperatingSchedule
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.entities.base import AuditedEntity
from menu_catalog.domain.entities.category_relation import (
    MenuCategoryRelation,
    RestaurantCategoryRelation,
    relation_key,
)
from menu_catalog.domain.entities.menu import Menu, MenuOption, MenuOptionGroup
from menu_catalog.domain.entities.menu_category import MenuCategory
from menu_catalog.domain.entities.operating_day import OperatingDay
from menu_catalog.domain.value_objects.address import Address
from menu_catalog.domain.value_objects.coordinate import Coordinate
from menu_catalog.domain.value_objects.day_type import DayType, OperatingTimeType
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus

SNAPSHOT_VERSION = 1


def _dt(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _tm(value: Optional[time]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_tm(value: Optional[str]) -> Optional[time]:
    return time.fromisoformat(value) if value else None


def _dec(value: Optional[Decimal]) -> Optional[str]:
    return str(value) if value is not None else None


def _parse_dec(value: Optional[str]) -> Optional[Decimal]:
    return Decimal(value) if value is not None else None


def _audit_to_dict(entity: AuditedEntity) -> Dict[str, Any]:
    return {
        "created_at": _dt(entity.created_at),
        "created_by": entity.created_by,
        "updated_at": _dt(entity.updated_at),
        "updated_by": entity.updated_by,
        "is_deleted": entity.is_deleted,
        "deleted_at": _dt(entity.deleted_at),
        "deleted_by": entity.deleted_by,
    }


def _audit_from_dict(data: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "created_at": _parse_dt(data.get("created_at")) or datetime.now(),
        "created_by": data.get("created_by"),
        "updated_at": _parse_dt(data.get("updated_at")),
        "updated_by": data.get("updated_by"),
        "is_deleted": data.get("is_deleted", False),
        "deleted_at": _parse_dt(data.get("deleted_at")),
        "deleted_by": data.get("deleted_by"),
    }


# ---- Encoding ---- #

def _option_to_dict(option: MenuOption) -> Dict[str, Any]:
    return {
        "id": option.id,
        "option_group_id": option.option_group_id,
        "menu_id": option.menu_id,
        "restaurant_id": option.restaurant_id,
        "option_name": option.option_name,
        "description": option.description,
        "additional_price": _dec(option.additional_price),
        "is_available": option.is_available,
        "is_default": option.is_default,
        "display_order": option.display_order,
        "purchase_count": option.purchase_count,
        **_audit_to_dict(option),
    }


def _group_to_dict(group: MenuOptionGroup) -> Dict[str, Any]:
    return {
        "id": group.id,
        "menu_id": group.menu_id,
        "restaurant_id": group.restaurant_id,
        "group_name": group.group_name,
        "description": group.description,
        "min_selection": group.min_selection,
        "max_selection": group.max_selection,
        "is_required": group.is_required,
        "display_order": group.display_order,
        "is_active": group.is_active,
        "options": [_option_to_dict(o) for o in group.options],
        **_audit_to_dict(group),
    }


def _relation_to_dict(relation) -> Dict[str, Any]:
    owner_id, category_id = relation_key(relation)
    data = {
        "owner_id": owner_id,
        "category_id": category_id,
        "is_primary": relation.is_primary,
        **_audit_to_dict(relation),
    }
    if isinstance(relation, MenuCategoryRelation):
        data["restaurant_id"] = relation.restaurant_id
    return data


def _menu_to_dict(menu: Menu) -> Dict[str, Any]:
    return {
        "id": menu.id,
        "restaurant_id": menu.restaurant_id,
        "menu_name": menu.menu_name,
        "description": menu.description,
        "ingredients": menu.ingredients,
        "price": _dec(menu.price),
        "calorie": menu.calorie,
        "is_available": menu.is_available,
        "is_main": menu.is_main,
        "is_popular": menu.is_popular,
        "is_new": menu.is_new,
        "purchase_count": menu.purchase_count,
        "wishlist_count": menu.wishlist_count,
        "review_count": menu.review_count,
        "review_rating": _dec(menu.review_rating),
        "category_relations": [_relation_to_dict(r) for r in menu.category_relations],
        "option_groups": [_group_to_dict(g) for g in menu.option_groups],
        **_audit_to_dict(menu),
    }


def _category_to_dict(category: MenuCategory) -> Dict[str, Any]:
    return {
        "id": category.id,
        "restaurant_id": category.restaurant_id,
        "category_name": category.category_name,
        "description": category.description,
        "parent_category_id": category.parent_category_id,
        "depth": category.depth,
        "display_order": category.display_order,
        "is_active": category.is_active,
        "menu_ids": sorted(category.menu_ids),
        **_audit_to_dict(category),
    }


def _day_to_dict(day: OperatingDay) -> Dict[str, Any]:
    return {
        "day_type": day.day_type.value,
        "time_type": day.time_type.value,
        "start_time": _tm(day.start_time),
        "end_time": _tm(day.end_time),
        "is_holiday": day.is_holiday,
        "break_start_time": _tm(day.break_start_time),
        "break_end_time": _tm(day.break_end_time),
        "note": day.note,
    }


def restaurant_to_dict(restaurant: Restaurant) -> Dict[str, Any]:
    """Encode a restaurant aggregate as a JSON-compatible dict."""
    return {
        "version": SNAPSHOT_VERSION,
        "id": restaurant.id,
        "owner_id": restaurant.owner_id,
        "owner_name": restaurant.owner_name,
        "restaurant_name": restaurant.restaurant_name,
        "description": restaurant.description,
        "status": restaurant.status.value,
        "address": restaurant.address.to_dict() if restaurant.address else None,
        "coordinate": restaurant.coordinate.to_dict() if restaurant.coordinate else None,
        "contact_number": restaurant.contact_number,
        "tags": list(restaurant.tags),
        "is_active": restaurant.is_active,
        "view_count": restaurant.view_count,
        "wishlist_count": restaurant.wishlist_count,
        "review_count": restaurant.review_count,
        "review_rating": _dec(restaurant.review_rating),
        "purchase_count": restaurant.purchase_count,
        "menus": [_menu_to_dict(m) for m in restaurant.menus],
        "menu_categories": [_category_to_dict(c) for c in restaurant.menu_categories],
        "operating_days": [_day_to_dict(d) for d in restaurant.schedule.ordered()],
        "category_relations": [_relation_to_dict(r) for r in restaurant.category_relations],
        **_audit_to_dict(restaurant),
    }


# ---- Decoding ---- #

def _option_from_dict(data: Dict[str, Any]) -> MenuOption:
    return MenuOption(
        id=data["id"],
        option_group_id=data["option_group_id"],
        menu_id=data["menu_id"],
        restaurant_id=data["restaurant_id"],
        option_name=data["option_name"],
        description=data.get("description"),
        additional_price=_parse_dec(data.get("additional_price")) or Decimal("0"),
        is_available=data.get("is_available", True),
        is_default=data.get("is_default", False),
        display_order=data.get("display_order", 0),
        purchase_count=data.get("purchase_count", 0),
        **_audit_from_dict(data),
    )


def _group_from_dict(data: Dict[str, Any]) -> MenuOptionGroup:
    return MenuOptionGroup(
        id=data["id"],
        menu_id=data["menu_id"],
        restaurant_id=data["restaurant_id"],
        group_name=data["group_name"],
        description=data.get("description"),
        min_selection=data.get("min_selection", 0),
        max_selection=data.get("max_selection", 1),
        is_required=data.get("is_required", False),
        display_order=data.get("display_order", 0),
        is_active=data.get("is_active", True),
        options=[_option_from_dict(o) for o in data.get("options", [])],
        **_audit_from_dict(data),
    )


def _menu_relation_from_dict(data: Dict[str, Any]) -> MenuCategoryRelation:
    return MenuCategoryRelation(
        owner_id=data["owner_id"],
        category_id=data["category_id"],
        restaurant_id=data.get("restaurant_id"),
        is_primary=data.get("is_primary", False),
        **_audit_from_dict(data),
    )


def _restaurant_relation_from_dict(data: Dict[str, Any]) -> RestaurantCategoryRelation:
    return RestaurantCategoryRelation(
        owner_id=data["owner_id"],
        category_id=data["category_id"],
        is_primary=data.get("is_primary", False),
        **_audit_from_dict(data),
    )


def _menu_from_dict(data: Dict[str, Any]) -> Menu:
    return Menu(
        id=data["id"],
        restaurant_id=data["restaurant_id"],
        menu_name=data["menu_name"],
        description=data.get("description"),
        ingredients=data.get("ingredients"),
        price=_parse_dec(data.get("price")),
        calorie=data.get("calorie"),
        is_available=data.get("is_available", True),
        is_main=data.get("is_main", False),
        is_popular=data.get("is_popular", False),
        is_new=data.get("is_new", False),
        purchase_count=data.get("purchase_count", 0),
        wishlist_count=data.get("wishlist_count", 0),
        review_count=data.get("review_count", 0),
        review_rating=_parse_dec(data.get("review_rating")),
        category_relations=[_menu_relation_from_dict(r) for r in data.get("category_relations", [])],
        option_groups=[_group_from_dict(g) for g in data.get("option_groups", [])],
        **_audit_from_dict(data),
    )


def _category_from_dict(data: Dict[str, Any]) -> MenuCategory:
    return MenuCategory(
        id=data["id"],
        restaurant_id=data["restaurant_id"],
        category_name=data["category_name"],
        description=data.get("description"),
        parent_category_id=data.get("parent_category_id"),
        depth=data.get("depth", 1),
        display_order=data.get("display_order", 0),
        is_active=data.get("is_active", True),
        menu_ids=set(data.get("menu_ids", [])),
        **_audit_from_dict(data),
    )


def _day_from_dict(restaurant_id: str, data: Dict[str, Any]) -> OperatingDay:
    return OperatingDay(
        restaurant_id=restaurant_id,
        day_type=DayType(data["day_type"]),
        time_type=OperatingTimeType(data.get("time_type", OperatingTimeType.REGULAR.value)),
        start_time=_parse_tm(data.get("start_time")),
        end_time=_parse_tm(data.get("end_time")),
        is_holiday=data.get("is_holiday", False),
        break_start_time=_parse_tm(data.get("break_start_time")),
        break_end_time=_parse_tm(data.get("break_end_time")),
        note=data.get("note"),
    )


def restaurant_from_dict(data: Dict[str, Any]) -> Restaurant:
    """Rebuild a restaurant aggregate from restaurant_to_dict output."""
    address = data.get("address")
    coordinate = data.get("coordinate")
    restaurant_id = data["id"]
    return Restaurant(
        id=restaurant_id,
        owner_id=data.get("owner_id"),
        owner_name=data.get("owner_name"),
        restaurant_name=data["restaurant_name"],
        description=data.get("description"),
        status=RestaurantStatus(data.get("status", RestaurantStatus.OPEN.value)),
        address=Address(**address) if address else None,
        coordinate=Coordinate.of(coordinate["latitude"], coordinate["longitude"]) if coordinate else None,
        contact_number=data.get("contact_number"),
        tags=list(data.get("tags", [])),
        is_active=data.get("is_active", True),
        view_count=data.get("view_count", 0),
        wishlist_count=data.get("wishlist_count", 0),
        review_count=data.get("review_count", 0),
        review_rating=_parse_dec(data.get("review_rating")),
        purchase_count=data.get("purchase_count", 0),
        menus=[_menu_from_dict(m) for m in data.get("menus", [])],
        menu_categories=[_category_from_dict(c) for c in data.get("menu_categories", [])],
        schedule=OperatingSchedule(_day_from_dict(restaurant_id, d) for d in data.get("operating_days", [])),
        category_relations=[_restaurant_relation_from_dict(r) for r in data.get("category_relations", [])],
        **_audit_from_dict(data),
    )


def dumps(restaurant: Restaurant) -> str:
    return json.dumps(restaurant_to_dict(restaurant), ensure_ascii=False)


def loads(payload: str) -> Restaurant:
    return restaurant_from_dict(json.loads(payload))
