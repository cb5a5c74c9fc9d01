"""Tests for WeatherParser dispatch."""

from aero_wx.weather.models import MetarRecord, RawReport, ReportKind, TafRecord
from aero_wx.weather.parser import WeatherParser, decode_report


class TestWeatherParser:

    def test_parse_metar(self, reference_now):
        record = WeatherParser.parse_metar("KATL 052253Z 12008KT 10SM FEW250 24/12 A3008", reference_now)
        assert isinstance(record, MetarRecord)
        assert record.station == "KATL"

    def test_parse_taf(self, sample_taf, reference_now):
        record = WeatherParser.parse_taf(sample_taf, reference_now)
        assert isinstance(record, TafRecord)
        assert record.station == "KJFK"

    def test_auto_uses_raw_report_kind(self, reference_now):
        taf = WeatherParser.parse_auto(
            RawReport(ReportKind.TAF, "KJFK 051730Z 0518/0624 33015KT P6SM"), reference_now
        )
        assert isinstance(taf, TafRecord)

        speci = WeatherParser.parse_auto(
            RawReport(ReportKind.SPECI, "SPECI KATL 052212Z 4SM BR BKN015"), reference_now
        )
        assert isinstance(speci, MetarRecord)
        assert speci.report_kind is ReportKind.SPECI

    def test_auto_detects_taf_prefix(self, sample_taf, reference_now):
        assert isinstance(decode_report(sample_taf, reference_now), TafRecord)
        assert isinstance(decode_report("KATL 052253Z 10SM CLR", reference_now), MetarRecord)

    def test_auto_empty(self, reference_now):
        record = decode_report("", reference_now)
        assert isinstance(record, MetarRecord)
        assert record.station is None
