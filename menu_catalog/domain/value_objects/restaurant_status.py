"""
RestaurantStatus Value Object

Lifecycle status of a restaurant and the gates derived from it.
"""

from enum import Enum


class RestaurantStatus(str, Enum):
    """
    Restaurant lifecycle status.

    Any status may move to any other; the status only gates ordering and
    menu editing.
    """

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    TEMPORARILY_CLOSED = "TEMPORARILY_CLOSED"
    PREPARING = "PREPARING"

    @property
    def display_name(self) -> str:
        return _DISPLAY[self][0]

    @property
    def description(self) -> str:
        return _DISPLAY[self][1]

    def can_accept_order(self) -> bool:
        """Only an open restaurant takes orders."""
        return self is RestaurantStatus.OPEN

    def can_modify_menu(self) -> bool:
        """Menus are editable in every status except OPEN."""
        return self is not RestaurantStatus.OPEN

    @classmethod
    def from_string(cls, value: str) -> "RestaurantStatus":
        """
        Create RestaurantStatus from string value.

        Raises:
            ValueError: If value is not a valid status
        """
        try:
            return cls(value.upper())
        except (ValueError, AttributeError):
            raise ValueError(f"Invalid restaurant status: {value}")


_DISPLAY = {
    RestaurantStatus.OPEN: ("영업중", "영업 중입니다"),
    RestaurantStatus.CLOSED: ("영업종료", "영업이 종료되었습니다"),
    RestaurantStatus.TEMPORARILY_CLOSED: ("임시휴업", "임시 휴업 중입니다"),
    RestaurantStatus.PREPARING: ("준비중", "영업 준비 중입니다"),
}
