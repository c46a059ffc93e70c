"""
Address Value Object

Immutable Korean postal address (province / city / district + detail).
"""

from dataclasses import dataclass
from typing import Optional


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


@dataclass(frozen=True)
class Address:
    """Immutable postal address value object."""

    province: str
    city: str
    district: str
    detail_address: Optional[str] = None

    def full_address(self) -> str:
        """
        Join every part with a single space.

        Returns:
            String like "서울특별시 강남구 역삼동 123-45"
        """
        parts = [self.province, self.city, self.district]
        if not _blank(self.detail_address):
            parts.append(self.detail_address)
        return " ".join(parts)

    def area_address(self) -> str:
        """Province, city and district only."""
        return f"{self.province} {self.city} {self.district}"

    def is_valid(self) -> bool:
        """Check that province, city and district are all present."""
        return not (_blank(self.province) or _blank(self.city) or _blank(self.district))

    def to_dict(self) -> dict:
        return {
            "province": self.province,
            "city": self.city,
            "district": self.district,
            "detail_address": self.detail_address,
        }

    def __str__(self) -> str:
        return self.full_address()
