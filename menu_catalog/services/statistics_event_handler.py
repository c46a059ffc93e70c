"""
Statistics Event Handler

Applies order, wishlist and review events to restaurant, menu and
restaurant category counters. Each event is one transaction.
"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional
from sqlalchemy.orm import Session
import logging

from menu_catalog.constants import CatalogLimits, ErrorCode
from menu_catalog.database import transaction
from menu_catalog.exceptions import CatalogError, NotFoundError
from menu_catalog.repositories.interfaces import IRestaurantCategoryRepository, IRestaurantRepository
from menu_catalog.repositories.restaurant_category_repository import RestaurantCategoryRepository
from menu_catalog.repositories.restaurant_repository import RestaurantRepository
from menu_catalog.schemas import OrderCompletedEvent, ReviewCreatedEvent, WishlistChangedEvent
from menu_catalog.utils.logging_utils import StructuredLogger

logger = StructuredLogger(__name__)

_RATING_QUANTUM = Decimal(1).scaleb(-CatalogLimits.RATING_SCALE)


def calculate_average_rating(current_rating: Optional[Decimal], current_count: int, new_rating: Decimal) -> Decimal:
    """
    Fold one rating into a running average.

    The first rating is taken as is; later ones give
    (current * count + new) / (count + 1) rounded half-up to 2 places.

    Raises:
        CatalogError: STATISTICS_UPDATE_FAILED if the arithmetic fails
    """
    if current_count == 0 or current_rating is None:
        return new_rating
    try:
        total = current_rating * current_count + new_rating
        return (total / (current_count + 1)).quantize(_RATING_QUANTUM, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        logger.error(
            f"Rating calculation failed: rating={current_rating} count={current_count} new={new_rating}",
            exc_info=True,
        )
        raise CatalogError(ErrorCode.STATISTICS_UPDATE_FAILED, "Rating calculation failed") from e


class StatisticsEventHandler:
    """Consumes catalog statistics events."""

    def __init__(
        self,
        db: Session,
        restaurant_repo: Optional[IRestaurantRepository] = None,
        category_repo: Optional[IRestaurantCategoryRepository] = None,
        count_category_orders: bool = True,
    ):
        """
        Initialize StatisticsEventHandler.

        Args:
            db: Database session
            restaurant_repo: Restaurant repository (defaults to SQLAlchemy)
            category_repo: Restaurant category repository (defaults to SQLAlchemy)
            count_category_orders: Also add completed orders to the linked
                restaurant categories' total order count
        """
        self.db = db
        self.restaurant_repo = restaurant_repo or RestaurantRepository(db)
        self.category_repo = category_repo or RestaurantCategoryRepository(db)
        self.count_category_orders = count_category_orders

    def _run(self, name: str, handler, event, restaurant_id: str):
        """Run one event in a transaction; wrap unexpected failures."""
        log = logger.bind(operation=name, restaurant_id=restaurant_id)
        log.info(f"Handling {name}")
        try:
            with transaction(self.db):
                handler(event)
        except CatalogError as e:
            log.warning(f"{name} rejected: {e.code} {e.message}")
            raise
        except Exception as e:
            log.error(f"{name} failed: {e}", exc_info=True)
            raise CatalogError(
                ErrorCode.STATISTICS_UPDATE_FAILED,
                f"Failed to handle {name}: {e}",
                {"restaurant_id": restaurant_id},
            ) from e
        log.info(f"Handled {name}")

    # ---- Orders ---- #

    def handle_order_completed(self, event: OrderCompletedEvent) -> None:
        """
        Add an order's quantities to the restaurant and menu purchase counts.

        Menus that no longer exist are logged at WARNING and skipped.

        Raises:
            NotFoundError: If the restaurant does not exist
        """
        self._run("order_completed", self._apply_order, event, event.restaurant_id)

    def _apply_order(self, event: OrderCompletedEvent) -> None:
        restaurant = self.restaurant_repo.get_by_id(event.restaurant_id)
        total_quantity = 0
        applied = 0
        for item in event.items:
            try:
                menu = restaurant.find_menu_by_id(item.menu_id)
            except NotFoundError:
                logger.warning(
                    f"Order {event.order_id}: menu {item.menu_id} not found, skipped",
                    extra={"restaurant_id": restaurant.id, "menu_id": item.menu_id},
                )
                continue
            menu.increment_purchase_count(item.quantity)
            total_quantity += item.quantity
            applied += 1
        if not applied:
            logger.warning(
                f"Order {event.order_id}: no known menus, statistics unchanged",
                extra={"restaurant_id": restaurant.id},
            )
            return
        restaurant.increment_purchase_count(total_quantity)
        self.restaurant_repo.save(restaurant)

        if self.count_category_orders:
            for category in self.category_repo.find_all_by_ids(restaurant.active_restaurant_category_ids()):
                category.increment_order_count()
                self.category_repo.save(category)

    # ---- Wishlists ---- #

    def handle_wishlist_changed(self, event: WishlistChangedEvent) -> None:
        """
        Raises:
            NotFoundError: If the restaurant (or target menu) does not exist
        """
        self._run("wishlist_changed", self._apply_wishlist, event, event.restaurant_id)

    def _apply_wishlist(self, event: WishlistChangedEvent) -> None:
        restaurant = self.restaurant_repo.get_by_id(event.restaurant_id)
        added = event.action == "ADDED"
        if event.target_type == "RESTAURANT":
            target = restaurant
        else:
            target = restaurant.find_active_menu_by_id(event.target_id)
        if added:
            target.increment_wishlist_count()
        else:
            target.decrement_wishlist_count()
        self.restaurant_repo.save(restaurant)

    # ---- Reviews ---- #

    def handle_review_created(self, event: ReviewCreatedEvent) -> None:
        """
        Fold a review into the restaurant rating, and the menu rating when
        the review names a menu.
        """
        self._run("review_created", self._apply_review, event, event.restaurant_id)

    def _apply_review(self, event: ReviewCreatedEvent) -> None:
        restaurant = self.restaurant_repo.get_by_id(event.restaurant_id)
        count = restaurant.review_count
        rating = calculate_average_rating(restaurant.review_rating, count, event.rating)
        restaurant.update_review_stats(rating, count + 1)
        logger.debug(
            f"Review {event.review_id}: count {count} -> {count + 1}, "
            f"rating {restaurant.review_rating}",
            extra={"restaurant_id": restaurant.id},
        )

        if event.menu_id:
            menu = restaurant.find_active_menu_by_id(event.menu_id)
            menu.update_review_stats(
                calculate_average_rating(menu.review_rating, menu.review_count, event.rating),
                menu.review_count + 1,
            )
        self.restaurant_repo.save(restaurant)
