"""
Day / OperatingTimeType Value Objects

Days of the week and the kind of operating window (regular or holiday).
"""

from datetime import datetime
from enum import Enum


class DayType(str, Enum):
    """Day of the week in Monday-first order."""

    MON = "MON"
    TUE = "TUE"
    WED = "WED"
    THU = "THU"
    FRI = "FRI"
    SAT = "SAT"
    SUN = "SUN"

    @property
    def korean_name(self) -> str:
        return _KOREAN_DAYS[self.order]

    @property
    def order(self) -> int:
        """0 for Monday through 6 for Sunday, matching datetime.weekday()."""
        return list(DayType).index(self)

    def is_weekday(self) -> bool:
        return self.order < 5

    def is_weekend(self) -> bool:
        return self.order >= 5

    @classmethod
    def from_weekday(cls, weekday: int) -> "DayType":
        return list(cls)[weekday]

    @classmethod
    def of(cls, moment: datetime) -> "DayType":
        """Day type of a datetime."""
        return cls.from_weekday(moment.weekday())


_KOREAN_DAYS = ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일")


class OperatingTimeType(str, Enum):
    """Kind of operating window."""

    REGULAR = "REGULAR"
    HOLIDAY = "HOLIDAY"
    SPECIAL_HOLIDAY = "SPECIAL_HOLIDAY"

    @property
    def description(self) -> str:
        return {
            OperatingTimeType.REGULAR: "평일/정규",
            OperatingTimeType.HOLIDAY: "일반 공휴일",
            OperatingTimeType.SPECIAL_HOLIDAY: "특별 공휴일",
        }[self]

    @property
    def order(self) -> int:
        return list(OperatingTimeType).index(self)

    def is_regular(self) -> bool:
        return self is OperatingTimeType.REGULAR

    def is_holiday_related(self) -> bool:
        return self in {OperatingTimeType.HOLIDAY, OperatingTimeType.SPECIAL_HOLIDAY}
