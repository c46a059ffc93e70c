"""
Coordinate Value Object

Immutable WGS84 latitude/longitude pair with Haversine distance.
"""

import math
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from menu_catalog.constants import CatalogLimits, ErrorCode, MapUrls
from menu_catalog.exceptions import InvalidCoordinateError, InvalidRangeError

Number = Union[int, float, Decimal]


@dataclass(frozen=True)
class Coordinate:
    """
    Immutable geographic coordinate.

    A restaurant either has both components or no coordinate at all, so
    construction always goes through the validating factory.
    """

    latitude: float
    longitude: float

    def __post_init__(self):
        """Validate ranges."""
        if not CatalogLimits.MIN_LATITUDE <= self.latitude <= CatalogLimits.MAX_LATITUDE:
            raise InvalidRangeError(ErrorCode.INVALID_LATITUDE_RANGE, self.latitude)
        if not CatalogLimits.MIN_LONGITUDE <= self.longitude <= CatalogLimits.MAX_LONGITUDE:
            raise InvalidRangeError(ErrorCode.INVALID_LONGITUDE_RANGE, self.longitude)

    @classmethod
    def of(cls, latitude: Optional[Number], longitude: Optional[Number]) -> "Coordinate":
        """
        Create a validated coordinate.

        Args:
            latitude: Degrees in [-90, 90]
            longitude: Degrees in [-180, 180]

        Returns:
            Coordinate instance

        Raises:
            InvalidCoordinateError: If either component is missing
            InvalidRangeError: If a component is out of range
        """
        if latitude is None or longitude is None:
            raise InvalidCoordinateError(ErrorCode.COORDINATE_REQUIRED)
        return cls(latitude=float(latitude), longitude=float(longitude))

    def distance_to(self, other: Optional["Coordinate"]) -> float:
        """
        Great-circle distance using the Haversine formula.

        Args:
            other: Target coordinate

        Returns:
            Distance in kilometres

        Raises:
            InvalidCoordinateError: If other is None
        """
        if other is None:
            raise InvalidCoordinateError(ErrorCode.INVALID_COORDINATE)

        lat1 = math.radians(self.latitude)
        lat2 = math.radians(other.latitude)
        d_lat = math.radians(other.latitude - self.latitude)
        d_lon = math.radians(other.longitude - self.longitude)

        a = (math.sin(d_lat / 2) ** 2
             + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2)
        c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
        return CatalogLimits.EARTH_RADIUS_KM * c

    def is_nearby(self, other: Optional["Coordinate"], radius_km: float) -> bool:
        """Check whether other lies within radius_km. A missing coordinate is never nearby."""
        if other is None:
            return False
        return self.distance_to(other) <= radius_km

    def to_google_maps_url(self) -> str:
        return MapUrls.GOOGLE.format(lat=self.latitude, lon=self.longitude)

    def to_naver_map_url(self) -> str:
        return MapUrls.NAVER.format(lat=self.latitude, lon=self.longitude)

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    def __str__(self) -> str:
        """String representation."""
        return MapUrls.COORDINATE_DISPLAY.format(lat=self.latitude, lon=self.longitude)
