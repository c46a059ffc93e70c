"""
Actor and ownership helpers shared by the command and query services.
"""

from menu_catalog.constants import Actors
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.exceptions import AccessDeniedError
from menu_catalog.repositories.interfaces import IRestaurantRepository


def owner_actor(owner_id: str) -> str:
    """Actor id recorded in audit fields for an owner."""
    return f"{Actors.OWNER_PREFIX}{owner_id}"


def load_owned_restaurant(
    repo: IRestaurantRepository,
    restaurant_id: str,
    owner_id: str,
    include_deleted: bool = False,
) -> Restaurant:
    """
    Load a restaurant and check that owner_id owns it.

    Raises:
        NotFoundError: If the restaurant does not exist (or is deleted)
        AccessDeniedError: If it belongs to another owner
    """
    if include_deleted:
        restaurant = repo.get_by_id_including_deleted(restaurant_id)
    else:
        restaurant = repo.get_by_id(restaurant_id)
    if restaurant.owner_id != owner_id:
        raise AccessDeniedError(restaurant_id, owner_id)
    return restaurant
