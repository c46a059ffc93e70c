"""
Value Objects

Immutable value types without identity. Two value objects with the same
attributes are considered equal.

- Coordinate: latitude/longitude with Haversine distance
- Address: province / city / district postal address
- RestaurantStatus: lifecycle status with ordering and menu-edit gates
- DayType, OperatingTimeType: schedule keys
"""

from .address import Address
from .coordinate import Coordinate
from .day_type import DayType, OperatingTimeType
from .restaurant_status import RestaurantStatus

__all__ = ["Address", "Coordinate", "DayType", "OperatingTimeType", "RestaurantStatus"]
