"""Tests for the statistics event handler."""

import logging
from decimal import Decimal

import pytest

from menu_catalog.constants import ErrorCode
from menu_catalog.dependencies import get_statistics_event_handler
from menu_catalog.domain.entities.restaurant_category import RestaurantCategory
from menu_catalog.exceptions import NotFoundError
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.schemas import OrderCompletedEvent, OrderItem, ReviewCreatedEvent, WishlistChangedEvent
from menu_catalog.services.statistics_event_handler import calculate_average_rating

from conftest import ACTOR


@pytest.fixture
def stored(db_session, restaurant_with_menu):
    restaurant, menu = restaurant_with_menu
    category = RestaurantCategory.create("KOREAN", "한식", ACTOR, lambda _id: None)
    RestaurantCategoryRepository(db_session).save(category)
    restaurant.add_restaurant_category(category.id, True, ACTOR)
    RestaurantRepository(db_session).save(restaurant)
    db_session.commit()
    return restaurant.id, menu.id, category.id


def _reload(db_session, restaurant_id):
    return RestaurantRepository(db_session).get_by_id(restaurant_id)


class TestAverageRating:
    def test_first_rating_taken_as_is(self):
        assert calculate_average_rating(None, 0, Decimal("4.5")) == Decimal("4.5")

    def test_running_average_half_up(self):
        # (4.00 * 2 + 5) / 3 = 4.333...
        assert calculate_average_rating(Decimal("4.00"), 2, Decimal("5")) == Decimal("4.33")
        # (4.25 * 2 + 4) / 3 = 4.1666...
        assert calculate_average_rating(Decimal("4.25"), 2, Decimal("4")) == Decimal("4.17")

    def test_exact_half_rounds_up(self):
        # (3.01 * 1 + 3) / 2 = 3.005
        assert calculate_average_rating(Decimal("3.01"), 1, Decimal("3")) == Decimal("3.01")


class TestOrderCompleted:
    def test_counts_restaurant_menu_and_category(self, db_session, stored):
        restaurant_id, menu_id, category_id = stored
        handler = get_statistics_event_handler(db_session)
        handler.handle_order_completed(OrderCompletedEvent(
            order_id="ORD-1", restaurant_id=restaurant_id, items=[OrderItem(menu_id=menu_id, quantity=2)],
        ))

        restaurant = _reload(db_session, restaurant_id)
        assert restaurant.purchase_count == 2
        assert restaurant.find_menu_by_id(menu_id).purchase_count == 2
        assert RestaurantCategoryRepository(db_session).find_by_id(category_id).total_order_count == 1

    def test_missing_menu_skipped_with_warning(self, db_session, stored, caplog):
        restaurant_id, menu_id, _ = stored
        handler = get_statistics_event_handler(db_session)
        with caplog.at_level(logging.WARNING):
            handler.handle_order_completed(OrderCompletedEvent(
                order_id="ORD-2",
                restaurant_id=restaurant_id,
                items=[OrderItem(menu_id="MENU-GONE", quantity=1), OrderItem(menu_id=menu_id, quantity=1)],
            ))
        assert "MENU-GONE" in caplog.text
        assert _reload(db_session, restaurant_id).purchase_count == 1

    def test_all_menus_unknown_leaves_counts(self, db_session, stored, caplog):
        restaurant_id, _, category_id = stored
        handler = get_statistics_event_handler(db_session)
        with caplog.at_level(logging.WARNING):
            handler.handle_order_completed(OrderCompletedEvent(
                order_id="ORD-4", restaurant_id=restaurant_id, items=[OrderItem(menu_id="MENU-GONE", quantity=3)],
            ))
        assert "statistics unchanged" in caplog.text
        assert _reload(db_session, restaurant_id).purchase_count == 0
        assert RestaurantCategoryRepository(db_session).find_by_id(category_id).total_order_count == 0

    def test_unknown_restaurant(self, db_session):
        handler = get_statistics_event_handler(db_session)
        with pytest.raises(NotFoundError) as exc:
            handler.handle_order_completed(OrderCompletedEvent(order_id="ORD-3", restaurant_id="REST-NOPE"))
        assert exc.value.error_code is ErrorCode.RESTAURANT_NOT_FOUND


class TestWishlistChanged:
    def test_restaurant_and_menu(self, db_session, stored):
        restaurant_id, menu_id, _ = stored
        handler = get_statistics_event_handler(db_session)
        handler.handle_wishlist_changed(WishlistChangedEvent(
            restaurant_id=restaurant_id, target_type="RESTAURANT", target_id=restaurant_id, action="ADDED",
        ))
        handler.handle_wishlist_changed(WishlistChangedEvent(
            restaurant_id=restaurant_id, target_type="MENU", target_id=menu_id, action="ADDED",
        ))
        handler.handle_wishlist_changed(WishlistChangedEvent(
            restaurant_id=restaurant_id, target_type="MENU", target_id=menu_id, action="REMOVED",
        ))
        handler.handle_wishlist_changed(WishlistChangedEvent(
            restaurant_id=restaurant_id, target_type="MENU", target_id=menu_id, action="REMOVED",
        ))

        restaurant = _reload(db_session, restaurant_id)
        assert restaurant.wishlist_count == 1
        assert restaurant.find_menu_by_id(menu_id).wishlist_count == 0


class TestReviewCreated:
    def test_running_average(self, db_session, stored):
        restaurant_id, menu_id, _ = stored
        handler = get_statistics_event_handler(db_session)
        for review_id, rating in (("R1", "4.5"), ("R2", "4"), ("R3", "4")):
            handler.handle_review_created(ReviewCreatedEvent(
                review_id=review_id, restaurant_id=restaurant_id, menu_id=menu_id, rating=Decimal(rating),
            ))

        restaurant = _reload(db_session, restaurant_id)
        assert restaurant.review_count == 3
        assert restaurant.review_rating == Decimal("4.17")
        assert restaurant.find_menu_by_id(menu_id).review_rating == Decimal("4.17")

    def test_rating_out_of_range_rejected(self):
        with pytest.raises(ValueError):
            ReviewCreatedEvent(review_id="R1", restaurant_id="REST-1", rating=Decimal("5.5"))
