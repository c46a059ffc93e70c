"""
Error handling decorators and utilities for catalog entry points.

Outer layers (a web handler, a CLI, a message consumer) wrap calls into the
services with ``handle_catalog_errors`` and render failures with
``to_error_response``. Errors are never swallowed.
"""

from functools import wraps
from typing import Callable
import logging

from menu_catalog.constants import HTTPStatus
from menu_catalog.exceptions import (
    ApplicationError,
    CatalogError,
    ConfigurationError,
    DatabaseError,
)
from menu_catalog.schemas import ErrorResponse

logger = logging.getLogger(__name__)


def handle_catalog_errors(operation_name: str):
    """
    Decorator that logs failures consistently and re-raises them.

    Args:
        operation_name: Human-readable name of the operation (e.g., "Menu creation")

    Returns:
        Decorated function

    Example:
        @handle_catalog_errors("Menu creation")
        def create_menu(...):
            return menu_service.create_menu(...)
    """
    def decorator(func: Callable):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except CatalogError as e:
                logger.warning(f"{operation_name} - {e.code}: {e.message}")
                raise
            except ConfigurationError as e:
                logger.error(f"{operation_name} - Configuration error: {e.message}")
                raise
            except ApplicationError as e:
                logger.error(f"{operation_name} - Application error: {e.message}", exc_info=True)
                raise
            except Exception as e:
                logger.error(f"{operation_name} - Unexpected error: {e}", exc_info=True)
                raise

        return wrapper

    return decorator


def to_error_response(error: Exception) -> ErrorResponse:
    """
    Translate an exception into a client-safe error payload.

    Catalog errors keep their code, message and status; other application
    errors map to 500 with their message; anything else gets a generic
    message so internals do not leak.
    """
    if isinstance(error, CatalogError):
        return ErrorResponse(
            code=error.code,
            message=error.message,
            status=error.status,
            details=error.details,
        )
    if isinstance(error, DatabaseError):
        return ErrorResponse(
            code="DATABASE_ERROR",
            message=f"Database operation failed: {error.message}",
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            details=error.details,
        )
    if isinstance(error, ApplicationError):
        return ErrorResponse(
            code="APPLICATION_ERROR",
            message=error.message,
            status=HTTPStatus.INTERNAL_SERVER_ERROR,
            details=error.details,
        )
    return ErrorResponse(
        code="INTERNAL_ERROR",
        message="Unexpected error. Please check server logs.",
        status=HTTPStatus.INTERNAL_SERVER_ERROR,
    )
