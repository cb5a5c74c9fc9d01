"""Tests for resolving partial report times."""

import pytest
from datetime import datetime, timedelta

from dateutil.relativedelta import relativedelta

from aero_wx.weather.timeutils import (
    parse_day_time,
    resolve_near,
    resolve_validity_window,
    resolve_window_near,
    resolve_zulu,
    shift_window,
)


class TestParseDayTime:

    def test_day_hour_minute(self):
        assert parse_day_time("052253Z") == (5, 22, 53)
        assert parse_day_time("052253") == (5, 22, 53)

    def test_day_hour(self):
        assert parse_day_time("0518") == (5, 18, 0)

    @pytest.mark.parametrize("group", [
        None, "", "5223Z", "0522533Z", "O52253Z", "002253Z", "322253Z", "052560Z", "052501Z", "052401",
    ])
    def test_malformed(self, group):
        assert parse_day_time(group) is None


class TestResolveZulu:

    def test_same_month(self, reference_now, utc):
        assert resolve_zulu("052253Z", reference_now) == utc(2024, 5, 5, 22, 53)

    def test_earlier_day_same_month(self, reference_now, utc):
        assert resolve_zulu("010000Z", reference_now) == utc(2024, 5, 1, 0, 0)

    def test_later_day_rolls_back_one_month(self, utc):
        # Day 30 reported while it is the 3rd: the report is from last month
        assert resolve_zulu("302359Z", utc(2024, 5, 3, 1, 0)) == utc(2024, 4, 30, 23, 59)

    def test_rollback_across_year(self, utc):
        assert resolve_zulu("311200Z", utc(2024, 1, 2, 6, 0)) == utc(2023, 12, 31, 12, 0)

    def test_day_missing_from_previous_month(self, utc):
        # February 2024 has no 30th
        assert resolve_zulu("302359Z", utc(2024, 3, 3, 1, 0)) is None

    def test_later_hour_on_reference_day_rolls_back(self, utc):
        assert resolve_zulu("152253Z", utc(2024, 5, 15, 12, 0)) == utc(2024, 4, 15, 22, 53)

    def test_earlier_hour_on_reference_day_kept(self, utc):
        assert resolve_zulu("151153Z", utc(2024, 5, 15, 12, 0)) == utc(2024, 5, 15, 11, 53)

    def test_hour_24_is_next_midnight(self, utc):
        assert resolve_zulu("052400Z", utc(2024, 5, 6, 1, 0)) == utc(2024, 5, 6, 0, 0)

    def test_invalid_group_returns_none(self, reference_now):
        assert resolve_zulu("ABCDEFZ", reference_now) is None
        assert resolve_zulu("0522Z", reference_now) is None
        assert resolve_zulu(None, reference_now) is None

    def test_naive_reference_gives_naive_result(self):
        resolved = resolve_zulu("052253Z", datetime(2024, 5, 5, 23, 0))
        assert resolved == datetime(2024, 5, 5, 22, 53)
        assert resolved.tzinfo is None

    def test_reference_must_be_datetime(self):
        with pytest.raises(TypeError):
            resolve_zulu("052253Z", "2024-05-05")

    def test_never_later_nor_more_than_a_month_earlier(self, utc):
        reference = utc(2024, 5, 15, 12, 0)
        for day in range(1, 32):
            for hour in (0, 6, 12, 18, 23):
                resolved = resolve_zulu(f"{day:02d}{hour:02d}00Z", reference)
                if resolved is None:
                    continue
                assert resolved <= reference
                assert resolved >= reference - relativedelta(months=1)


class TestResolveValidityWindow:

    def test_window_within_month(self, reference_now, utc):
        start, end = resolve_validity_window("0518", "0624", reference_now)
        assert start == utc(2024, 5, 5, 18, 0)
        assert end == utc(2024, 5, 7, 0, 0)

    def test_window_crossing_month_end(self, utc):
        start, end = resolve_validity_window("3018", "0118", utc(2024, 4, 30, 20, 0))
        assert start == utc(2024, 4, 30, 18, 0)
        assert end == utc(2024, 5, 1, 18, 0)

    def test_window_crossing_month_end_after_midnight(self, utc):
        start, end = resolve_validity_window("3018", "0118", utc(2024, 5, 1, 1, 0))
        assert start == utc(2024, 4, 30, 18, 0)
        assert end == utc(2024, 5, 1, 18, 0)

    def test_end_never_precedes_start(self, utc):
        reference = utc(2024, 5, 15, 12, 0)
        for start_day in (1, 14, 15, 16, 28):
            for end_day in (1, 2, 15, 16, 29):
                window = resolve_validity_window(f"{start_day:02d}12", f"{end_day:02d}06", reference)
                if window is not None:
                    assert window[1] > window[0]

    def test_zero_length_window_rejected(self, reference_now):
        assert resolve_validity_window("0518", "0518", reference_now) is None

    def test_window_may_start_after_reference(self, utc):
        start, end = resolve_validity_window("0518", "0624", utc(2024, 5, 5, 17, 40))
        assert start == utc(2024, 5, 5, 18, 0)
        assert end == utc(2024, 5, 7, 0, 0)

    @pytest.mark.parametrize("start,end", [("05AB", "0624"), ("0518", "062"), (None, "0624"), ("051800", "0624")])
    def test_malformed_window(self, reference_now, start, end):
        assert resolve_validity_window(start, end, reference_now) is None


class TestResolveNear:

    def test_future_group_not_rolled_back(self, utc):
        assert resolve_near("060300", utc(2024, 5, 5, 18, 0)) == utc(2024, 5, 6, 3, 0)

    def test_next_month(self, utc):
        assert resolve_near("010600", utc(2024, 4, 30, 18, 0)) == utc(2024, 5, 1, 6, 0)

    def test_previous_month(self, utc):
        assert resolve_near("302300", utc(2024, 5, 1, 0, 0)) == utc(2024, 4, 30, 23, 0)

    def test_invalid(self, utc):
        assert resolve_near("99", utc(2024, 5, 1, 0, 0)) is None

    def test_window_near(self, utc):
        start, end = resolve_window_near("3022", "0104", utc(2024, 4, 30, 18, 0))
        assert start == utc(2024, 4, 30, 22, 0)
        assert end == utc(2024, 5, 1, 4, 0)

    def test_empty_window_near(self, utc):
        assert resolve_window_near("0600", "0600", utc(2024, 5, 5, 18, 0)) is None


class TestShiftWindow:

    def test_window_moved_to_issuance_month(self, utc):
        window = (utc(2024, 4, 1, 0, 0), utc(2024, 4, 2, 6, 0))
        shifted = shift_window(window, utc(2024, 4, 30, 23, 30), timedelta(days=15))
        assert shifted == (utc(2024, 5, 1, 0, 0), utc(2024, 5, 2, 6, 0))

    def test_close_window_unchanged(self, utc):
        window = (utc(2024, 5, 5, 18, 0), utc(2024, 5, 7, 0, 0))
        assert shift_window(window, utc(2024, 5, 5, 17, 30), timedelta(days=15)) == window
