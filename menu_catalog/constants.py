"""
Application-wide constants for the menu catalog.

This module centralizes error codes, identifier prefixes, limits and the
Korean display strings shown to customers so that the domain layer never
carries magic strings of its own.
"""
from enum import Enum


class HTTPStatus:
    """HTTP status codes attached to error codes for outer layers"""

    BAD_REQUEST = 400
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    INTERNAL_SERVER_ERROR = 500


class ErrorCode(Enum):
    """
    Catalog error codes.

    Each member carries (code, default message, http status). The code string
    is stable and safe to expose; the message is a developer-facing default.
    """

    # Menu
    MENU_NAME_REQUIRED = ("MENU_001", "Menu name is required", HTTPStatus.BAD_REQUEST)
    MENU_PRICE_REQUIRED = ("MENU_002", "Menu price is required", HTTPStatus.BAD_REQUEST)
    INVALID_MENU_PRICE = ("MENU_003", "Menu price must not be negative", HTTPStatus.BAD_REQUEST)
    MENU_NOT_FOUND = ("MENU_004", "Menu not found", HTTPStatus.NOT_FOUND)
    MENU_ALREADY_DELETED = ("MENU_005", "Menu is already deleted", HTTPStatus.BAD_REQUEST)
    CATEGORY_NAME_REQUIRED = ("MENU_006", "Category name is required", HTTPStatus.BAD_REQUEST)
    CATEGORY_NOT_FOUND = ("MENU_007", "Category not found", HTTPStatus.NOT_FOUND)
    INVALID_CATEGORY_DEPTH = ("MENU_008", "Category depth must be between 1 and 3", HTTPStatus.BAD_REQUEST)
    CIRCULAR_CATEGORY_REFERENCE = ("MENU_009", "Circular category reference", HTTPStatus.BAD_REQUEST)
    OPTION_GROUP_NAME_REQUIRED = ("MENU_010", "Option group name is required", HTTPStatus.BAD_REQUEST)
    INVALID_MAX_SELECTION = ("MENU_011", "Invalid option selection rule", HTTPStatus.BAD_REQUEST)
    OPTION_GROUP_NOT_FOUND = ("MENU_012", "Option group not found", HTTPStatus.NOT_FOUND)
    OPTION_NAME_REQUIRED = ("MENU_013", "Option name is required", HTTPStatus.BAD_REQUEST)
    INVALID_OPTION_PRICE = ("MENU_014", "Option price must not be negative", HTTPStatus.BAD_REQUEST)
    OPTION_NOT_FOUND = ("MENU_015", "Option not found", HTTPStatus.NOT_FOUND)

    # Restaurant
    COORDINATE_REQUIRED = ("RESTAURANT_001", "Latitude and longitude are required", HTTPStatus.BAD_REQUEST)
    INVALID_LATITUDE_RANGE = ("RESTAURANT_002", "Latitude must be between -90 and 90", HTTPStatus.BAD_REQUEST)
    INVALID_LONGITUDE_RANGE = ("RESTAURANT_003", "Longitude must be between -180 and 180", HTTPStatus.BAD_REQUEST)
    INVALID_COORDINATE = ("RESTAURANT_004", "Invalid coordinate", HTTPStatus.BAD_REQUEST)
    RESTAURANT_NAME_REQUIRED = ("RESTAURANT_005", "Restaurant name is required", HTTPStatus.BAD_REQUEST)
    OWNER_REQUIRED = ("RESTAURANT_006", "Restaurant owner is required", HTTPStatus.BAD_REQUEST)
    INVALID_ADDRESS = ("RESTAURANT_007", "Province, city and district are required", HTTPStatus.BAD_REQUEST)
    RESTAURANT_NOT_FOUND = ("RESTAURANT_008", "Restaurant not found", HTTPStatus.NOT_FOUND)
    RESTAURANT_ALREADY_DELETED = ("RESTAURANT_009", "Restaurant is already deleted", HTTPStatus.BAD_REQUEST)
    CANNOT_MODIFY_MENU_WHILE_OPEN = ("RESTAURANT_010", "Menus cannot be modified while the restaurant is open", HTTPStatus.BAD_REQUEST)
    OPERATING_DAY_NOT_FOUND = ("RESTAURANT_011", "Operating day not found", HTTPStatus.NOT_FOUND)
    DUPLICATE_RESTAURANT_NAME = ("RESTAURANT_014", "Owner already has a restaurant with this name", HTTPStatus.CONFLICT)
    STATISTICS_UPDATE_FAILED = ("RESTAURANT_015", "Failed to update statistics", HTTPStatus.INTERNAL_SERVER_ERROR)
    RESTAURANT_ACCESS_DENIED = ("RESTAURANT_016", "Restaurant belongs to another owner", HTTPStatus.FORBIDDEN)

    # Restaurant category taxonomy
    RESTAURANT_CATEGORY_NOT_FOUND = ("CATEGORY_001", "Restaurant category not found", HTTPStatus.NOT_FOUND)
    DUPLICATE_CATEGORY_CODE = ("CATEGORY_002", "Category code already exists", HTTPStatus.CONFLICT)

    @property
    def code(self) -> str:
        return self.value[0]

    @property
    def message(self) -> str:
        return self.value[1]

    @property
    def status(self) -> int:
        return self.value[2]


class IdPrefix:
    """Prefixes for generated entity identifiers"""

    RESTAURANT = "REST"
    MENU = "MENU"
    MENU_CATEGORY = "CAT"
    OPTION_GROUP = "OPTG"
    OPTION = "OPT"
    RESTAURANT_CATEGORY = "RCAT"

    SUFFIX_LENGTH = 8


class CatalogLimits:
    """Structural limits enforced by the domain"""

    MAX_CATEGORY_DEPTH = 3
    EARTH_RADIUS_KM = 6371.0
    MIN_LATITUDE = -90.0
    MAX_LATITUDE = 90.0
    MIN_LONGITUDE = -180.0
    MAX_LONGITUDE = 180.0
    RATING_SCALE = 2


class ScheduleMessages:
    """Customer-facing operating hours strings"""

    HOLIDAY = "휴무"
    HOURS_UNDECIDED = "운영 시간 미정"
    BREAK_TIME = "브레이크 타임 ({minutes}분 후 재오픈)"
    OPENS_IN = "{minutes}분 후 오픈"
    CLOSED_FOR_DAY = "영업 종료"
    HOURS_RANGE = "{start} ~ {end}"
    BREAK_SUFFIX = " (브레이크타임: {start} ~ {end})"
    FULL_DISPLAY = "[{day}/{time_type}] {hours}"
    TIME_FORMAT = "%H:%M"


class MapUrls:
    """External map link templates (7 decimal places)"""

    GOOGLE = "https://www.google.com/maps?q={lat:.7f},{lon:.7f}"
    NAVER = "https://map.naver.com/v5/search/{lat:.7f},{lon:.7f}"
    COORDINATE_DISPLAY = "위도: {lat:.7f}, 경도: {lon:.7f}"
    NO_COORDINATE = "좌표 없음"


class Actors:
    """Actor id conventions used by the application services"""

    OWNER_PREFIX = "OWNER_"
    SYSTEM = "SYSTEM"
