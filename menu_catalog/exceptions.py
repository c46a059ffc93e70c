"""
Custom exception classes for the menu catalog.

Every domain failure is a CatalogError carrying an ErrorCode, grouped into a
small set of kinds (not found, already deleted, invalid value...) so callers
can handle a whole family with one except clause.
"""
from menu_catalog.constants import ErrorCode


class ApplicationError(Exception):
    """Base exception for all application errors"""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ApplicationError):
    """Raised when there's a configuration issue"""

    def __init__(self, message: str, invalid_keys: list[str] | None = None):
        details = {"invalid_keys": invalid_keys} if invalid_keys else {}
        super().__init__(message, details)


class DatabaseError(ApplicationError):
    """Raised when database operations fail"""

    def __init__(self, operation: str, message: str):
        details = {"operation": operation}
        super().__init__(message, details)


class CatalogError(ApplicationError):
    """Base exception for catalog domain rule violations"""

    def __init__(self, error_code: ErrorCode, message: str | None = None, details: dict | None = None):
        self.error_code = error_code
        merged = {"code": error_code.code}
        if details:
            merged.update(details)
        super().__init__(message or error_code.message, merged)

    @property
    def code(self) -> str:
        return self.error_code.code

    @property
    def status(self) -> int:
        return self.error_code.status


class NotFoundError(CatalogError):
    """Raised when a referenced entity does not exist"""

    def __init__(self, error_code: ErrorCode, entity_id: str | None = None, message: str | None = None):
        details = {"entity_id": entity_id} if entity_id is not None else None
        msg = message or (f"{error_code.message}: {entity_id}" if entity_id is not None else None)
        super().__init__(error_code, msg, details)


class AlreadyDeletedError(CatalogError):
    """Raised when soft-deleting an entity that is already deleted"""

    def __init__(self, error_code: ErrorCode, entity_id: str | None = None):
        details = {"entity_id": entity_id} if entity_id is not None else None
        super().__init__(error_code, details=details)


class InvalidRangeError(CatalogError):
    """Raised when a coordinate component is outside its valid range"""

    def __init__(self, error_code: ErrorCode, value: float):
        super().__init__(error_code, f"{error_code.message} (got {value})", {"value": value})


class InvalidCoordinateError(CatalogError):
    """Raised when a coordinate is missing or unusable"""


class InvalidAddressError(CatalogError):
    """Raised when an address lacks province, city or district"""

    def __init__(self, message: str | None = None):
        super().__init__(ErrorCode.INVALID_ADDRESS, message)


class InvalidPriceError(CatalogError):
    """Raised when a menu or option price is missing or negative"""

    def __init__(self, error_code: ErrorCode, price=None):
        details = {"price": str(price)} if price is not None else None
        super().__init__(error_code, details=details)


class InvalidSelectionRuleError(CatalogError):
    """Raised when an option group's min/max selection is inconsistent"""

    def __init__(self, min_selection: int, max_selection: int):
        super().__init__(
            ErrorCode.INVALID_MAX_SELECTION,
            f"Invalid selection rule: min={min_selection}, max={max_selection}",
            {"min_selection": min_selection, "max_selection": max_selection},
        )


class InvalidCategoryDepthError(CatalogError):
    """Raised when a category would be nested deeper than allowed"""

    def __init__(self, depth: int):
        super().__init__(ErrorCode.INVALID_CATEGORY_DEPTH, details={"depth": depth})


class CannotModifyWhileOpenError(CatalogError):
    """Raised when menus are changed while the restaurant is OPEN"""

    def __init__(self, restaurant_id: str | None = None):
        details = {"restaurant_id": restaurant_id} if restaurant_id else None
        super().__init__(ErrorCode.CANNOT_MODIFY_MENU_WHILE_OPEN, details=details)


class RequiredFieldError(CatalogError):
    """Raised when a required name, owner or price is missing"""


class DuplicateError(CatalogError):
    """Raised when a uniqueness rule enforced by a service is violated"""


class AccessDeniedError(CatalogError):
    """Raised when an owner acts on another owner's restaurant"""

    def __init__(self, restaurant_id: str, owner_id: str):
        super().__init__(
            ErrorCode.RESTAURANT_ACCESS_DENIED,
            details={"restaurant_id": restaurant_id, "owner_id": owner_id},
        )
