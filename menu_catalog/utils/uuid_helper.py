"""
UUID generation helper for the catalog.

Provides consistent identifier generation across all entities.
"""
import uuid

from menu_catalog.constants import IdPrefix


def generate_uuid() -> str:
    """
    Generate a new UUID string.

    Returns:
        str: A new UUID4 string
    """
    return str(uuid.uuid4())


def generate_prefixed_id(prefix: str) -> str:
    """
    Generate a short human-readable identifier.

    Args:
        prefix: Entity prefix such as "REST" or "MENU"

    Returns:
        str: Identifier like "MENU-1A2B3C4D"
    """
    suffix = uuid.uuid4().hex[:IdPrefix.SUFFIX_LENGTH].upper()
    return f"{prefix}-{suffix}"
