"""Tests for WeatherCollection."""

import pytest

from aero_wx.weather.collection import DATAFRAME_COLUMNS, WeatherCollection
from aero_wx.weather.metar import decode_metar
from aero_wx.weather.models import FlightCategory, ReportKind


@pytest.fixture
def collection(reference_now):
    reports = [
        "KATL 052153Z 12008KT 10SM FEW250 24/12 A3008",
        "KATL 052253Z 12010KT 2SM BR OVC006 20/19 A3005",
        "SPECI KATL 052212Z 12010KT 4SM BR BKN015 21/19 A3006",
        "KJFK 052251Z 33015KT 10SM SCT250 18/05 A3012",
        "KBOS 052254Z 18008KT 1/2SM FG VV002 12/11 A2990",
        "not a report",
    ]
    return WeatherCollection([decode_metar(r, reference_now) for r in reports])


class TestWeatherCollection:

    def test_specials(self, collection):
        specials = collection.specials()
        assert len(specials) == 1
        assert specials.first().report_kind is ReportKind.SPECI

    def test_decoded(self, collection):
        assert len(collection.decoded()) == 5

    def test_for_station(self, collection):
        assert len(collection.for_station("katl")) == 3
        assert len(collection.for_stations(["KJFK", "kbos"])) == 2

    def test_by_category(self, collection):
        assert [r.station for r in collection.by_category(FlightCategory.VFR)] == ["KATL", "KJFK"]

    def test_worse_than(self, collection):
        worse = collection.worse_than(FlightCategory.MVFR)
        assert {r.category for r in worse} == {FlightCategory.IFR, FlightCategory.LIFR}

    def test_at_or_worse_than_excludes_unknown(self, collection):
        result = collection.at_or_worse_than(FlightCategory.VFR)
        assert len(result) == 5
        assert all(r.category.is_known for r in result)

    def test_unknown_threshold_matches_nothing(self, collection):
        assert len(collection.worse_than(FlightCategory.UNKNOWN)) == 0
        assert len(collection.at_or_worse_than(FlightCategory.UNKNOWN)) == 0
        assert isinstance(collection.worse_than(FlightCategory.UNKNOWN), WeatherCollection)

    def test_latest(self, collection, utc):
        latest = collection.for_station("KATL").latest()
        assert latest.observed_at == utc(2024, 5, 5, 22, 53)

    def test_latest_empty(self):
        assert WeatherCollection([]).latest() is None

    def test_time_filters(self, collection, utc):
        assert len(collection.before(utc(2024, 5, 5, 22, 0))) == 1
        assert len(collection.after(utc(2024, 5, 5, 22, 50))) == 3
        assert len(collection.between(utc(2024, 5, 5, 22, 12), utc(2024, 5, 5, 22, 51))) == 2

    def test_chronological(self, collection):
        ordered = collection.chronological()
        times = [r.observed_at for r in ordered if r.observed_at is not None]
        assert times == sorted(times)
        assert ordered.last().station is None

    def test_group_by_station(self, collection):
        groups = collection.decoded().group_by_station()
        assert set(groups) == {"KATL", "KJFK", "KBOS"}
        assert isinstance(groups["KATL"], WeatherCollection)
        assert len(groups["KATL"]) == 3

    def test_chaining_keeps_type(self, collection):
        result = collection.for_station("KATL").at_or_worse_than(FlightCategory.MVFR)
        assert isinstance(result, WeatherCollection)
        assert len(result) == 2

    def test_to_dataframe(self, collection):
        df = collection.decoded().to_dataframe()
        assert list(df.columns) == DATAFRAME_COLUMNS
        assert len(df) == 5
        row = df.iloc[3]
        assert row['station'] == "KJFK"
        assert row['wind_direction'] == 330
        assert row['category'] == "VFR"

    def test_empty_dataframe(self):
        df = WeatherCollection([]).to_dataframe()
        assert list(df.columns) == DATAFRAME_COLUMNS
        assert df.empty
