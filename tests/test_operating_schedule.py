"""Tests for operating windows and the operating schedule."""

from datetime import datetime, time

import pytest

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.aggregates.operating_schedule import OperatingSchedule
from menu_catalog.domain.entities.operating_day import OperatingDay
from menu_catalog.domain.value_objects.day_type import DayType, OperatingTimeType
from menu_catalog.exceptions import NotFoundError

# 2024-01-01 is a Monday
MONDAY = (2024, 1, 1)


def at(hour, minute=0):
    return datetime(*MONDAY, hour, minute)


def window(start, end, **kwargs):
    return OperatingDay(restaurant_id="REST-1", day_type=DayType.MON, start_time=start, end_time=end, **kwargs)


class TestOvernightWindow:
    day = window(time(20, 0), time(2, 0))

    @pytest.mark.parametrize("hour,minute", [(21, 0), (23, 59), (0, 30), (1, 30)])
    def test_open(self, hour, minute):
        assert self.day.is_open_at(at(hour, minute))

    @pytest.mark.parametrize("hour,minute", [(2, 1), (10, 0)])
    def test_closed(self, hour, minute):
        assert not self.day.is_open_at(at(hour, minute))

    def test_is_overnight(self):
        assert self.day.is_overnight()
        assert not window(time(10, 0), time(22, 0)).is_overnight()


class TestBreakTime:
    day = window(time(10, 0), time(22, 0), break_start_time=time(15, 0), break_end_time=time(17, 0))

    def test_open_around_break(self):
        assert self.day.is_open_at(at(14, 0))
        assert self.day.is_open_at(at(18, 0))

    @pytest.mark.parametrize("hour,minute", [(15, 0), (15, 30), (16, 59)])
    def test_closed_during_break(self, hour, minute):
        assert not self.day.is_open_at(at(hour, minute))

    def test_break_end_is_exclusive(self):
        assert self.day.is_open_at(at(17, 0))

    def test_window_is_inclusive(self):
        assert self.day.is_open_at(at(10, 0))
        assert self.day.is_open_at(at(22, 0))
        assert not self.day.is_open_at(at(22, 1))

    def test_time_until_open_in_break(self):
        assert self.day.time_until_open(time(15, 30)) == "브레이크 타임 (90분 후 재오픈)"

    def test_time_until_open_before_opening(self):
        assert self.day.time_until_open(time(9, 15)) == "45분 후 오픈"

    def test_time_until_open_when_open_or_closed(self):
        assert self.day.time_until_open(time(12, 0)) is None
        assert self.day.time_until_open(time(23, 0)) == "영업 종료"

    def test_display(self):
        assert self.day.operating_hours_display() == "10:00 ~ 22:00 (브레이크타임: 15:00 ~ 17:00)"
        assert self.day.full_display() == "[월요일/평일/정규] 10:00 ~ 22:00 (브레이크타임: 15:00 ~ 17:00)"


class TestOperatingDay:
    def test_other_day_is_closed(self):
        day = window(time(0, 0), time(23, 59))
        assert not day.is_open_at(datetime(2024, 1, 2, 12, 0))

    def test_holiday_is_closed(self):
        day = window(time(10, 0), time(22, 0), is_holiday=True)
        assert not day.is_open_at(at(12, 0))
        assert day.time_until_open(time(12, 0)) == "휴무"
        assert day.operating_hours_display() == "휴무"

    def test_missing_hours(self):
        day = window(None, None)
        assert not day.has_operating_hours()
        assert not day.is_open_at(at(12, 0))
        assert day.time_until_open(time(12, 0)) == "운영 시간 미정"


class TestOperatingSchedule:
    def test_set_day_replaces_same_key(self):
        schedule = OperatingSchedule()
        schedule.set_day(window(time(9, 0), time(18, 0)))
        schedule.set_day(window(time(10, 0), time(20, 0)))
        assert len(schedule) == 1
        assert schedule.get(DayType.MON).start_time == time(10, 0)

    def test_time_types_coexist(self):
        schedule = OperatingSchedule([
            window(time(9, 0), time(18, 0)),
            window(time(11, 0), time(15, 0), time_type=OperatingTimeType.HOLIDAY),
        ])
        assert len(schedule.days_for(DayType.MON)) == 2

    def test_set_break_time(self):
        schedule = OperatingSchedule([window(time(9, 0), time(18, 0))])
        day = schedule.set_break_time(DayType.MON, time(13, 0), time(14, 0))
        assert day.break_start_time == time(13, 0)
        assert not schedule.is_open_at(at(13, 30))

    def test_set_break_time_requires_regular_window(self):
        schedule = OperatingSchedule()
        with pytest.raises(NotFoundError) as exc:
            schedule.set_break_time(DayType.TUE, time(13, 0), time(14, 0))
        assert exc.value.error_code is ErrorCode.OPERATING_DAY_NOT_FOUND

    def test_is_open_at_filters_time_type(self):
        schedule = OperatingSchedule([
            window(time(11, 0), time(15, 0), time_type=OperatingTimeType.HOLIDAY),
        ])
        assert schedule.is_open_at(at(12, 0))
        assert not schedule.is_open_at(at(12, 0), OperatingTimeType.REGULAR)

    def test_ordered(self):
        schedule = OperatingSchedule([
            OperatingDay(restaurant_id="REST-1", day_type=DayType.FRI),
            OperatingDay(restaurant_id="REST-1", day_type=DayType.MON),
        ])
        assert [d.day_type for d in schedule.ordered()] == [DayType.MON, DayType.FRI]
