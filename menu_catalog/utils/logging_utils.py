"""
Catalog log context

Attaches catalog identifiers (restaurant, menu, category, actor) to log
records so a single command can be followed through the service layer.
Identifiers come from three places, later ones winning: the command-scoped
context, fields bound to the logger, and the ``extra`` of the call.
"""

import inspect
import logging
from contextlib import contextmanager
from contextvars import ContextVar
from functools import wraps
from typing import Any, Dict, Optional

from menu_catalog.exceptions import CatalogError


# Command-scoped fields, reset by clear_logging_context()
_logging_context: ContextVar[Dict[str, Any]] = ContextVar('catalog_logging_context', default={})

CONTEXT_KEYS = ("restaurant_id", "menu_id", "category_id", "group_id", "actor")


class StructuredLogger:
    """
    Facade over a stdlib logger that fills ``extra`` with catalog fields.

    Usage:
        logger = StructuredLogger(__name__)
        logger.info("Menu hidden", extra={"restaurant_id": rid, "menu_id": mid})

        scoped = logger.bind(restaurant_id=rid)
        scoped.warning("Menu not found")
    """

    def __init__(self, name: str, **bound: Any):
        self.logger = logging.getLogger(name)
        self.bound = bound

    def bind(self, **fields: Any) -> "StructuredLogger":
        """Return a logger that adds ``fields`` to every record."""
        return StructuredLogger(self.logger.name, **{**self.bound, **fields})

    def _log(self, level: int, message: str, extra: Optional[Dict[str, Any]], exc_info: bool = False):
        fields = {**_logging_context.get(), **self.bound, **(extra or {})}
        self.logger.log(level, message, extra=fields, exc_info=exc_info)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log(logging.DEBUG, message, extra)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log(logging.INFO, message, extra)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self._log(logging.WARNING, message, extra)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None, exc_info: bool = False):
        self._log(logging.ERROR, message, extra, exc_info)


def set_logging_context(**fields: Any):
    """
    Add fields to the context of the current command.

    Example:
        set_logging_context(actor="OWNER_42", restaurant_id="REST-1A2B3C4D")
    """
    _logging_context.set({**_logging_context.get(), **fields})


def clear_logging_context():
    _logging_context.set({})


@contextmanager
def logging_context(**fields: Any):
    """Extend the context for the duration of a block."""
    token = _logging_context.set({**_logging_context.get(), **fields})
    try:
        yield
    finally:
        _logging_context.reset(token)


def log_operation(operation_name: str):
    """
    Log the start, completion and failure of a command.

    Catalog identifiers among the call arguments, positional or keyword,
    are bound to every record. Catalog rule violations are logged at
    WARNING, anything else at ERROR with a traceback. The exception is
    always re-raised.

    Example:
        @log_operation("delete_menu")
        def delete_menu(self, restaurant_id: str, menu_id: str, owner_id: str):
            ...

        service.delete_menu("REST-1", "MENU-2", "7")
    """
    def decorator(func):
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            arguments = signature.bind_partial(*args, **kwargs).arguments
            ids = {key: arguments[key] for key in CONTEXT_KEYS if key in arguments}
            logger = StructuredLogger(func.__module__, operation=operation_name, **ids)

            logger.debug(f"Starting {operation_name}")
            try:
                result = func(*args, **kwargs)
            except CatalogError as e:
                logger.warning(
                    f"Rejected {operation_name}: {e.code} {e.message}",
                    extra={"error": e.message, "error_code": e.code},
                )
                raise
            except Exception as e:
                logger.error(
                    f"Failed {operation_name}",
                    extra={"error": str(e), "error_type": type(e).__name__},
                    exc_info=True,
                )
                raise
            logger.info(f"Completed {operation_name}")
            return result

        return wrapper

    return decorator
