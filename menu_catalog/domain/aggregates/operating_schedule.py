"""
OperatingSchedule

The set of operating windows owned by one restaurant, at most one per
(day, time type).
"""

from dataclasses import replace
from datetime import datetime, time
from typing import Iterable, List, Optional

from menu_catalog.constants import ErrorCode
from menu_catalog.exceptions import NotFoundError

from ..entities.operating_day import OperatingDay, operating_day_key
from ..value_objects.day_type import DayType, OperatingTimeType


class OperatingSchedule:
    """Collection of OperatingDay windows with replace-on-set semantics."""

    def __init__(self, days: Optional[Iterable[OperatingDay]] = None):
        self._days: List[OperatingDay] = []
        for day in days or ():
            self.set_day(day)

    def set_day(self, day: OperatingDay) -> OperatingDay:
        """Insert a window, dropping any existing window with the same key."""
        key = operating_day_key(day)
        self._days = [d for d in self._days if operating_day_key(d) != key]
        self._days.append(day)
        return day

    def get(self, day_type: DayType, time_type: OperatingTimeType = OperatingTimeType.REGULAR) -> Optional[OperatingDay]:
        for day in self._days:
            if day.day_type is day_type and day.time_type is time_type:
                return day
        return None

    def days_for(self, day_type: DayType) -> List[OperatingDay]:
        return [d for d in self._days if d.day_type is day_type]

    def set_break_time(self, day_type: DayType, break_start: Optional[time], break_end: Optional[time]) -> OperatingDay:
        """
        Set the break on the REGULAR window of a day.

        Raises:
            NotFoundError: If no REGULAR window exists for that day
        """
        current = self.get(day_type, OperatingTimeType.REGULAR)
        if current is None:
            raise NotFoundError(ErrorCode.OPERATING_DAY_NOT_FOUND, day_type.value)
        return self.set_day(replace(current, break_start_time=break_start, break_end_time=break_end))

    def is_open_at(self, moment: datetime, time_type: Optional[OperatingTimeType] = None) -> bool:
        """True if any window (optionally of one time type) is open at moment."""
        return any(
            day.is_open_at(moment)
            for day in self._days
            if time_type is None or day.time_type is time_type
        )

    def summary(self) -> List[str]:
        return [d.full_display() for d in self.ordered()]

    def ordered(self) -> List[OperatingDay]:
        return sorted(self._days, key=lambda d: (d.day_type.order, d.time_type.order))

    def __iter__(self):
        return iter(list(self._days))

    def __len__(self) -> int:
        return len(self._days)
