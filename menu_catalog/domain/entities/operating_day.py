"""
OperatingDay Value Object

One operating window of a restaurant, keyed by (restaurant, day, time type).
Windows may cross midnight (end before start) and may contain a break.
"""

from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional, Tuple

from menu_catalog.constants import ScheduleMessages

from ..value_objects.day_type import DayType, OperatingTimeType


def _minutes_between(start: time, end: time) -> int:
    """Whole minutes from start to end on the same day, truncated."""
    delta = datetime.combine(date.min, end) - datetime.combine(date.min, start)
    return int(delta.total_seconds() // 60)


def _fmt(value: time) -> str:
    return value.strftime(ScheduleMessages.TIME_FORMAT)


@dataclass(frozen=True)
class OperatingDay:
    """
    Immutable operating window.

    The normal window is inclusive at both ends; the break is half-open
    [break_start_time, break_end_time).
    """

    restaurant_id: str
    day_type: DayType
    time_type: OperatingTimeType = OperatingTimeType.REGULAR
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    is_holiday: bool = False
    break_start_time: Optional[time] = None
    break_end_time: Optional[time] = None
    note: Optional[str] = None

    def has_operating_hours(self) -> bool:
        return not self.is_holiday and self.start_time is not None and self.end_time is not None

    def is_overnight(self) -> bool:
        return (self.start_time is not None and self.end_time is not None
                and self.end_time < self.start_time)

    def is_open_at(self, moment: datetime) -> bool:
        """
        Check whether this window is open at a given instant.

        Args:
            moment: Local date and time

        Returns:
            True if the day matches, it is not a holiday, hours are set and
            the time falls inside the window outside any break
        """
        if DayType.of(moment) is not self.day_type:
            return False
        if self.is_holiday:
            return False
        if self.start_time is None or self.end_time is None:
            return False
        return self.is_time_in_operating_hours(moment.time())

    def is_time_in_operating_hours(self, current: time) -> bool:
        if self.start_time is None or self.end_time is None:
            return False
        if self.is_in_break_time(current):
            return False
        if self.is_overnight():
            return current >= self.start_time or current <= self.end_time
        return self.start_time <= current <= self.end_time

    def is_in_break_time(self, current: time) -> bool:
        if self.break_start_time is None or self.break_end_time is None:
            return False
        return self.break_start_time <= current < self.break_end_time

    def time_until_open(self, current: time) -> Optional[str]:
        """
        Human-readable status relative to the next opening.

        Returns:
            None when open, otherwise a holiday, break, countdown or closed message
        """
        if self.is_holiday:
            return ScheduleMessages.HOLIDAY
        if self.start_time is None or self.end_time is None:
            return ScheduleMessages.HOURS_UNDECIDED
        if self.is_in_break_time(current):
            minutes = _minutes_between(current, self.break_end_time)
            return ScheduleMessages.BREAK_TIME.format(minutes=minutes)
        if self.is_time_in_operating_hours(current):
            return None
        if current < self.start_time:
            minutes = _minutes_between(current, self.start_time)
            return ScheduleMessages.OPENS_IN.format(minutes=minutes)
        return ScheduleMessages.CLOSED_FOR_DAY

    def operating_hours_display(self) -> str:
        if self.is_holiday:
            return ScheduleMessages.HOLIDAY
        if self.start_time is None or self.end_time is None:
            return ScheduleMessages.HOURS_UNDECIDED
        display = ScheduleMessages.HOURS_RANGE.format(start=_fmt(self.start_time), end=_fmt(self.end_time))
        if self.break_start_time is not None and self.break_end_time is not None:
            display += ScheduleMessages.BREAK_SUFFIX.format(
                start=_fmt(self.break_start_time), end=_fmt(self.break_end_time)
            )
        return display

    def full_display(self) -> str:
        return ScheduleMessages.FULL_DISPLAY.format(
            day=self.day_type.korean_name,
            time_type=self.time_type.description,
            hours=self.operating_hours_display(),
        )


def operating_day_key(day: OperatingDay) -> Tuple[str, DayType, OperatingTimeType]:
    """Business identity of an operating window."""
    return day.restaurant_id, day.day_type, day.time_type
