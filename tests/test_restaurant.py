"""Tests for the Restaurant aggregate root."""

from datetime import datetime, time
from decimal import Decimal

import pytest

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.value_objects.day_type import DayType
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus
from menu_catalog.exceptions import (
    AlreadyDeletedError,
    CannotModifyWhileOpenError,
    InvalidAddressError,
    InvalidCategoryDepthError,
    NotFoundError,
    RequiredFieldError,
)

from conftest import ACTOR, make_address, make_restaurant

MONDAY_NOON = datetime(2024, 1, 1, 12, 0)


class TestCreate:
    def test_generated_id(self, restaurant):
        assert restaurant.id.startswith("REST-")
        assert restaurant.created_by == ACTOR

    def test_name_required(self):
        with pytest.raises(RequiredFieldError) as exc:
            make_restaurant(restaurant_name="  ")
        assert exc.value.error_code is ErrorCode.RESTAURANT_NAME_REQUIRED

    def test_owner_required(self):
        with pytest.raises(RequiredFieldError) as exc:
            make_restaurant(owner_id=None)
        assert exc.value.error_code is ErrorCode.OWNER_REQUIRED

    def test_incomplete_address(self):
        with pytest.raises(InvalidAddressError):
            make_restaurant(address=make_address(district=""))


class TestTags:
    def test_dedup_and_blank(self, restaurant):
        assert restaurant.add_tag("국밥")
        assert not restaurant.add_tag("국밥")
        assert not restaurant.add_tag("  ")
        assert restaurant.tags == ["국밥"]

    def test_replace_keeps_order(self, restaurant):
        restaurant.replace_tags(["혼밥", "가성비", "혼밥"], ACTOR)
        assert restaurant.tags == ["혼밥", "가성비"]


class TestMenuStatusGate:
    def test_add_menu_rejected_while_open(self):
        restaurant = make_restaurant(status=RestaurantStatus.OPEN)
        with pytest.raises(CannotModifyWhileOpenError):
            restaurant.add_menu("김밥", Decimal("3000"), ACTOR)
        assert restaurant.menus == []

    @pytest.mark.parametrize("status", [
        RestaurantStatus.CLOSED, RestaurantStatus.TEMPORARILY_CLOSED, RestaurantStatus.PREPARING,
    ])
    def test_add_menu_allowed_otherwise(self, status):
        restaurant = make_restaurant(status=status)
        menu = restaurant.add_menu("김밥", Decimal("3000"), ACTOR)
        assert menu.restaurant_id == restaurant.id
        assert restaurant.active_menu_count() == 1

    def test_add_menu_requires_price(self, restaurant):
        with pytest.raises(RequiredFieldError):
            restaurant.add_menu("김밥", None, ACTOR)


class TestMenuCategories:
    def test_depth_chain(self, restaurant):
        root = restaurant.add_menu_category("메인", ACTOR)
        child = restaurant.add_menu_category("찌개", ACTOR, parent_category_id=root.id)
        grandchild = restaurant.add_menu_category("김치찌개류", ACTOR, parent_category_id=child.id)
        assert (root.depth, child.depth, grandchild.depth) == (1, 2, 3)
        with pytest.raises(InvalidCategoryDepthError):
            restaurant.add_menu_category("너무 깊음", ACTOR, parent_category_id=grandchild.id)

    def test_unknown_parent(self, restaurant):
        with pytest.raises(NotFoundError) as exc:
            restaurant.add_menu_category("사이드", ACTOR, parent_category_id="CAT-NOPE")
        assert exc.value.error_code is ErrorCode.CATEGORY_NOT_FOUND

    def test_update_menu_categories_syncs_membership(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        main = restaurant.add_menu_category("메인", ACTOR)
        soup = restaurant.add_menu_category("찌개", ACTOR)

        restaurant.update_menu_categories(menu.id, [main.id, soup.id], ACTOR, primary_id=soup.id)
        assert main.menu_ids == {menu.id}
        assert menu.primary_category_id() == soup.id

        added, removed = restaurant.update_menu_categories(menu.id, [soup.id], ACTOR, primary_id=soup.id)
        assert (added, removed) == ([], [main.id])
        assert main.menu_ids == set()
        assert [m.id for m in restaurant.menus_by_category(soup.id)] == [menu.id]

    def test_update_menu_categories_rejects_unknown(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        with pytest.raises(NotFoundError):
            restaurant.update_menu_categories(menu.id, ["CAT-NOPE"], ACTOR)
        assert menu.active_category_ids() == set()

    def test_category_tree(self, restaurant):
        root = restaurant.add_menu_category("메인", ACTOR)
        restaurant.add_menu_category("찌개", ACTOR, parent_category_id=root.id)
        tree = restaurant.menu_category_tree()
        assert len(tree) == 1
        assert tree[0].children[0].category.category_name == "찌개"

    def test_category_path(self, restaurant):
        root = restaurant.add_menu_category("메인", ACTOR)
        child = restaurant.add_menu_category("찌개", ACTOR, parent_category_id=root.id)
        assert [c.category_name for c in restaurant.menu_category_path(child.id)] == ["메인", "찌개"]
        assert restaurant.menu_category_path("CAT-NOPE") == []

    def test_remove_menu_category_goes_through_root(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        category = restaurant.add_menu_category("메인", ACTOR)
        restaurant.add_menu_to_category(menu.id, category.id, True, ACTOR)

        removed = restaurant.remove_menu_category(category.id, "OWNER_99")

        assert removed is category
        assert category.is_deleted
        assert category.deleted_by == "OWNER_99"
        assert category.menu_ids == set()
        assert menu.active_category_ids() == set()
        assert restaurant.updated_by == "OWNER_99"
        assert restaurant.updated_at is not None
        with pytest.raises(NotFoundError) as exc:
            restaurant.remove_menu_category(category.id, "OWNER_99")
        assert exc.value.error_code is ErrorCode.CATEGORY_NOT_FOUND


class TestRemoveMenu:
    def test_remove_menu_drops_membership(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        category = restaurant.add_menu_category("메인", ACTOR)
        restaurant.add_menu_to_category(menu.id, category.id, True, ACTOR)

        restaurant.remove_menu(menu.id, ACTOR)

        assert menu.is_deleted
        assert category.menu_ids == set()
        assert restaurant.active_menu_count() == 0
        with pytest.raises(NotFoundError):
            restaurant.find_active_menu_by_id(menu.id)
        assert restaurant.find_menu_by_id(menu.id) is menu


class TestRestaurantCategories:
    def test_primary_exclusive(self, restaurant):
        restaurant.add_restaurant_category("RCAT-1", True, ACTOR)
        restaurant.add_restaurant_category("RCAT-2", True, ACTOR)
        assert restaurant.primary_restaurant_category_id() == "RCAT-2"
        assert restaurant.active_restaurant_category_ids() == {"RCAT-1", "RCAT-2"}

    def test_reconcile(self, restaurant):
        restaurant.update_restaurant_categories(["RCAT-1", "RCAT-2"], ACTOR, "RCAT-1")
        added, removed = restaurant.update_restaurant_categories(["RCAT-2"], ACTOR)
        assert (added, removed) == ([], ["RCAT-1"])
        assert restaurant.primary_restaurant_category_id() is None


class TestOperatingHours:
    def test_open_now(self):
        restaurant = make_restaurant(status=RestaurantStatus.OPEN)
        restaurant.set_operating_day(DayType.MON, ACTOR, start_time=time(10, 0), end_time=time(22, 0))
        assert restaurant.is_open_now(MONDAY_NOON)
        assert restaurant.can_accept_order(MONDAY_NOON)

    def test_status_gates_opening(self):
        restaurant = make_restaurant(status=RestaurantStatus.TEMPORARILY_CLOSED)
        restaurant.set_operating_day(DayType.MON, ACTOR, start_time=time(10, 0), end_time=time(22, 0))
        assert not restaurant.is_open_now(MONDAY_NOON)
        assert not restaurant.can_accept_order(MONDAY_NOON)

    def test_inactive_cannot_accept_order(self):
        restaurant = make_restaurant(status=RestaurantStatus.OPEN)
        restaurant.set_operating_day(DayType.MON, ACTOR, start_time=time(10, 0), end_time=time(22, 0))
        restaurant.set_active(False, ACTOR)
        assert not restaurant.can_accept_order(MONDAY_NOON)

    def test_set_break_time(self):
        restaurant = make_restaurant(status=RestaurantStatus.OPEN)
        restaurant.set_operating_day(DayType.MON, ACTOR, start_time=time(10, 0), end_time=time(22, 0))
        restaurant.set_break_time(DayType.MON, time(11, 30), time(12, 30), ACTOR)
        assert not restaurant.is_open_now(MONDAY_NOON)

    def test_set_break_time_without_window(self, restaurant):
        with pytest.raises(NotFoundError) as exc:
            restaurant.set_break_time(DayType.SUN, time(11, 0), time(12, 0), ACTOR)
        assert exc.value.error_code is ErrorCode.OPERATING_DAY_NOT_FOUND


class TestLifecycle:
    def test_delete_cascades(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        category = restaurant.add_menu_category("메인", ACTOR)
        relation = restaurant.add_restaurant_category("RCAT-1", True, ACTOR)

        restaurant.delete(ACTOR)

        assert restaurant.is_deleted
        assert not restaurant.is_active
        assert restaurant.status is RestaurantStatus.CLOSED
        assert menu.is_deleted
        assert all(g.is_deleted for g in menu.option_groups)
        assert all(o.is_deleted for g in menu.option_groups for o in g.options)
        assert category.is_deleted
        assert relation.is_deleted

    def test_delete_skips_already_deleted_children(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        restaurant.remove_menu(menu.id, "OWNER_earlier")
        restaurant.delete(ACTOR)
        assert menu.deleted_by == "OWNER_earlier"

    def test_already_deleted_guard(self, restaurant):
        restaurant.delete(ACTOR)
        before = (restaurant.deleted_at, restaurant.deleted_by, restaurant.status, restaurant.is_active)
        with pytest.raises(AlreadyDeletedError) as exc:
            restaurant.delete("OWNER_other")
        assert exc.value.error_code is ErrorCode.RESTAURANT_ALREADY_DELETED
        assert (restaurant.deleted_at, restaurant.deleted_by, restaurant.status, restaurant.is_active) == before

    def test_restore_does_not_cascade(self, restaurant_with_menu):
        restaurant, menu = restaurant_with_menu
        restaurant.delete(ACTOR)
        restaurant.restore("ADMIN_1")
        assert not restaurant.is_deleted
        assert restaurant.is_active
        assert restaurant.deleted_at is None
        assert menu.is_deleted
        assert restaurant.active_menu_count() == 0
