import sys
from decimal import Decimal
from pathlib import Path

# Add project root to Python path FIRST
project_dir = Path(__file__).parent.parent
sys.path.insert(0, str(project_dir))

# Now import after path is set
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from menu_catalog.database import Base
from menu_catalog.domain.aggregates.restaurant import Restaurant
from menu_catalog.domain.value_objects.address import Address
from menu_catalog.domain.value_objects.coordinate import Coordinate
from menu_catalog.domain.value_objects.restaurant_status import RestaurantStatus
import menu_catalog.models  # noqa: F401

ACTOR = "OWNER_owner-1"
OWNER_ID = "owner-1"


@pytest.fixture
def db_session():
    """Create in-memory database for testing"""
    engine = create_engine('sqlite:///:memory:')
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine)
    session = SessionLocal()
    yield session
    session.close()


def make_address(**overrides) -> Address:
    values = dict(province="서울특별시", city="강남구", district="역삼동", detail_address="123-45")
    values.update(overrides)
    return Address(**values)


def make_restaurant(status: RestaurantStatus = RestaurantStatus.CLOSED, **overrides) -> Restaurant:
    """A valid restaurant; CLOSED by default so menus can be edited."""
    values = dict(
        owner_id=OWNER_ID,
        restaurant_name="만족 식당",
        actor=ACTOR,
        owner_name="김사장",
        address=make_address(),
        coordinate=Coordinate.of(37.5665, 126.9780),
        contact_number="02-123-4567",
        status=status,
    )
    values.update(overrides)
    return Restaurant.create(**values)


@pytest.fixture
def restaurant() -> Restaurant:
    return make_restaurant()


@pytest.fixture
def restaurant_with_menu(restaurant):
    """Restaurant with one menu that has a required option group with two options."""
    menu = restaurant.add_menu("김치찌개", Decimal("9000"), ACTOR)
    group = restaurant.add_option_group_to_menu(menu.id, "맵기", ACTOR, is_required=True)
    restaurant.add_option_to_group(menu.id, group.id, "순한맛", Decimal("0"), ACTOR)
    restaurant.add_option_to_group(menu.id, group.id, "매운맛", Decimal("500"), ACTOR)
    return restaurant, menu
