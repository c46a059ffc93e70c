"""Tests for menu_catalog.domain.value_objects."""

from datetime import datetime
from decimal import Decimal

import pytest

from menu_catalog.constants import ErrorCode
from menu_catalog.domain.value_objects import (
    Address,
    Coordinate,
    DayType,
    OperatingTimeType,
    RestaurantStatus,
)
from menu_catalog.exceptions import InvalidCoordinateError, InvalidRangeError


class TestCoordinate:
    def test_seoul_to_busan_distance(self):
        seoul = Coordinate.of(37.5665, 126.9780)
        busan = Coordinate.of(35.1796, 129.0756)
        assert 320 <= seoul.distance_to(busan) <= 330

    def test_distance_to_self_is_zero(self):
        seoul = Coordinate.of(37.5665, 126.9780)
        assert seoul.distance_to(seoul) == pytest.approx(0.0)

    @pytest.mark.parametrize("lat", [91, -91])
    def test_latitude_out_of_range(self, lat):
        with pytest.raises(InvalidRangeError) as exc:
            Coordinate.of(lat, 0)
        assert exc.value.error_code is ErrorCode.INVALID_LATITUDE_RANGE

    @pytest.mark.parametrize("lon", [181, -181])
    def test_longitude_out_of_range(self, lon):
        with pytest.raises(InvalidRangeError) as exc:
            Coordinate.of(0, lon)
        assert exc.value.error_code is ErrorCode.INVALID_LONGITUDE_RANGE

    def test_missing_component_is_required(self):
        with pytest.raises(InvalidCoordinateError) as exc:
            Coordinate.of(None, 0)
        assert exc.value.error_code is ErrorCode.COORDINATE_REQUIRED

    def test_boundaries_are_valid(self):
        Coordinate.of(90, 180)
        Coordinate.of(-90, -180)

    def test_accepts_decimal(self):
        c = Coordinate.of(Decimal("37.5"), Decimal("127.0"))
        assert c.latitude == 37.5

    def test_is_nearby(self):
        gangnam = Coordinate.of(37.4979, 127.0276)
        yeoksam = Coordinate.of(37.5006, 127.0364)
        assert gangnam.is_nearby(yeoksam, 1.0)
        assert not gangnam.is_nearby(None, 100.0)

    def test_map_urls_use_seven_decimals(self):
        c = Coordinate.of(37.5665, 126.978)
        assert c.to_google_maps_url() == "https://www.google.com/maps?q=37.5665000,126.9780000"
        assert c.to_naver_map_url() == "https://map.naver.com/v5/search/37.5665000,126.9780000"


class TestAddress:
    def test_full_address_skips_blank_detail(self):
        a = Address("서울특별시", "강남구", "역삼동")
        assert a.full_address() == "서울특별시 강남구 역삼동"

    def test_full_address_with_detail(self):
        a = Address("서울특별시", "강남구", "역삼동", "123-45")
        assert a.full_address() == "서울특별시 강남구 역삼동 123-45"
        assert a.area_address() == "서울특별시 강남구 역삼동"

    def test_is_valid(self):
        assert Address("서울특별시", "강남구", "역삼동").is_valid()
        assert not Address("서울특별시", " ", "역삼동").is_valid()
        assert not Address(None, "강남구", "역삼동").is_valid()


class TestRestaurantStatus:
    def test_only_open_accepts_orders(self):
        assert RestaurantStatus.OPEN.can_accept_order()
        for status in (RestaurantStatus.CLOSED, RestaurantStatus.TEMPORARILY_CLOSED, RestaurantStatus.PREPARING):
            assert not status.can_accept_order()

    def test_menu_editable_unless_open(self):
        assert not RestaurantStatus.OPEN.can_modify_menu()
        assert RestaurantStatus.PREPARING.can_modify_menu()

    def test_from_string(self):
        assert RestaurantStatus.from_string("closed") is RestaurantStatus.CLOSED
        with pytest.raises(ValueError):
            RestaurantStatus.from_string("GONE")

    def test_display_name(self):
        assert RestaurantStatus.OPEN.display_name == "영업중"


class TestDayType:
    def test_of_datetime(self):
        # 2024-01-01 is a Monday
        assert DayType.of(datetime(2024, 1, 1, 12, 0)) is DayType.MON
        assert DayType.of(datetime(2024, 1, 7, 12, 0)) is DayType.SUN

    def test_weekend(self):
        assert DayType.SAT.is_weekend()
        assert DayType.FRI.is_weekday()

    def test_korean_name(self):
        assert DayType.WED.korean_name == "수요일"

    def test_time_type_flags(self):
        assert OperatingTimeType.REGULAR.is_regular()
        assert OperatingTimeType.SPECIAL_HOLIDAY.is_holiday_related()
        assert not OperatingTimeType.REGULAR.is_holiday_related()
