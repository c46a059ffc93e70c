"""Tests for menu, option group and option entities."""

from decimal import Decimal

import pytest

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.entities.menu import Menu
from menu_catalog.exceptions import (
    AlreadyDeletedError,
    InvalidPriceError,
    InvalidSelectionRuleError,
    NotFoundError,
    RequiredFieldError,
)

from conftest import ACTOR


@pytest.fixture
def menu():
    return Menu.create("REST-1", "비빔밥", Decimal("8000"), ACTOR)


class TestMenuPrice:
    def test_create_sets_decimal_price(self, menu):
        assert menu.price == Decimal("8000")

    def test_negative_price_rejected(self, menu):
        with pytest.raises(InvalidPriceError):
            menu.set_price(Decimal("-1"))
        assert menu.price == Decimal("8000")

    @pytest.mark.parametrize("price", ["NaN", "Infinity", "-Infinity", Decimal("sNaN")])
    def test_non_finite_price_rejected(self, menu, price):
        with pytest.raises(InvalidPriceError) as exc:
            menu.set_price(price)
        assert exc.value.error_code is ErrorCode.INVALID_MENU_PRICE
        assert menu.price == Decimal("8000")

    def test_non_finite_option_price_rejected(self, menu):
        group = menu.add_option_group("토핑", ACTOR)
        with pytest.raises(InvalidPriceError) as exc:
            group.add_option("치즈", "NaN", ACTOR)
        assert exc.value.error_code is ErrorCode.INVALID_OPTION_PRICE

    def test_missing_price_fails_validation(self):
        menu = Menu.create("REST-1", "비빔밥", None, ACTOR)
        with pytest.raises(RequiredFieldError) as exc:
            menu.validate()
        assert exc.value.error_code is ErrorCode.MENU_PRICE_REQUIRED

    def test_blank_name_fails_validation(self):
        menu = Menu.create("REST-1", " ", Decimal("1000"), ACTOR)
        with pytest.raises(RequiredFieldError):
            menu.validate()

    def test_update(self, menu):
        menu.update("돌솥비빔밥", "뜨거운 돌솥", "쌀, 나물", "9500", 650, ACTOR)
        assert menu.menu_name == "돌솥비빔밥"
        assert menu.price == Decimal("9500")
        assert menu.updated_by == ACTOR


class TestOptionGroups:
    def test_required_group_gets_min_one(self, menu):
        group = menu.add_option_group("사이즈", ACTOR, min_selection=0, max_selection=1, is_required=True)
        assert group.min_selection == 1

    def test_display_order_defaults_to_count(self, menu):
        menu.add_option_group("사이즈", ACTOR)
        second = menu.add_option_group("토핑", ACTOR)
        assert second.display_order == 1

    @pytest.mark.parametrize("min_sel,max_sel", [(-1, 1), (3, 2)])
    def test_invalid_selection_rule(self, menu, min_sel, max_sel):
        with pytest.raises(InvalidSelectionRuleError):
            menu.add_option_group("사이즈", ACTOR, min_selection=min_sel, max_selection=max_sel)
        assert menu.option_groups == []

    def test_blank_group_name(self, menu):
        with pytest.raises(RequiredFieldError):
            menu.add_option_group("", ACTOR)

    def test_option_price_must_not_be_negative(self, menu):
        group = menu.add_option_group("토핑", ACTOR)
        with pytest.raises(InvalidPriceError) as exc:
            group.add_option("치즈", Decimal("-500"), ACTOR)
        assert exc.value.error_code is ErrorCode.INVALID_OPTION_PRICE

    def test_remove_option_group_soft_deletes_options(self, menu):
        group = menu.add_option_group("토핑", ACTOR)
        option = group.add_option("치즈", Decimal("500"), ACTOR)
        menu.remove_option_group(group.id, ACTOR)
        assert group.is_deleted
        assert option.is_deleted
        assert menu.active_option_group_count() == 0

    def test_unknown_group(self, menu):
        with pytest.raises(NotFoundError) as exc:
            menu.find_option_group("OPTG-NOPE")
        assert exc.value.error_code is ErrorCode.OPTION_GROUP_NOT_FOUND

    def test_has_required_options(self, menu):
        assert not menu.has_required_options()
        menu.add_option_group("맵기", ACTOR, is_required=True)
        assert menu.has_required_options()


class TestMenuDelete:
    def test_cascade(self, menu):
        group = menu.add_option_group("토핑", ACTOR)
        option = group.add_option("치즈", Decimal("500"), ACTOR)
        relation = menu.add_category("CAT-1", True, ACTOR)

        menu.delete(ACTOR)

        assert menu.is_deleted
        assert not menu.is_orderable()
        assert group.is_deleted
        assert option.is_deleted
        assert relation.is_deleted
        assert menu.deleted_by == ACTOR

    def test_already_deleted_guard_mutates_nothing(self, menu):
        menu.delete(ACTOR)
        before = (menu.deleted_at, menu.deleted_by, menu.is_available, menu.updated_at)
        with pytest.raises(AlreadyDeletedError) as exc:
            menu.delete("OWNER_other")
        assert exc.value.error_code is ErrorCode.MENU_ALREADY_DELETED
        assert (menu.deleted_at, menu.deleted_by, menu.is_available, menu.updated_at) == before

    def test_restore_does_not_revive_children(self, menu):
        group = menu.add_option_group("토핑", ACTOR)
        menu.delete(ACTOR)
        menu.restore(ACTOR)
        assert not menu.is_deleted
        assert group.is_deleted


class TestMenuCounters:
    def test_wishlist_never_negative(self, menu):
        menu.decrement_wishlist_count()
        assert menu.wishlist_count == 0
        menu.increment_wishlist_count()
        assert menu.wishlist_count == 1

    def test_purchase_count(self, menu):
        menu.increment_purchase_count(3)
        assert menu.purchase_count == 3
