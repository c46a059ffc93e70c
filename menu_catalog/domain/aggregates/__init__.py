"""
Domain Aggregates

Aggregates are clusters of entities treated as a single unit for data changes.
The aggregate root is the only entry point for modifications.

- Restaurant: owns menus, menu categories, operating hours and category links
- OperatingSchedule: the restaurant's operating windows
"""

from .operating_schedule import OperatingSchedule
from .restaurant import Restaurant

__all__ = ["OperatingSchedule", "Restaurant"]
