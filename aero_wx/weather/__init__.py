"""
Weather module for decoding and analyzing METAR/TAF reports.

Provides:
- decode_metar / decode_taf / decode_report: Decode raw report text
- MetarRecord, TafRecord, ForecastPeriod: Decoded records
- FlightCategory: VFR/MVFR/IFR/LIFR enum with ordering
- WeatherAnalyzer: Flight categories, TAF period lookup
- WeatherCollection: Queryable collection of decoded observations

Example:
    from datetime import datetime, timezone
    from aero_wx.weather import decode_metar

    now = datetime(2024, 5, 5, 23, 0, tzinfo=timezone.utc)
    record = decode_metar("KATL 052253Z 12008KT 10SM FEW250 24/12 A3008", now)
    print(record.category)  # FlightCategory.VFR
"""

from aero_wx.weather.models import (
    ChangeIndicator,
    CloudCoverage,
    CloudLayer,
    FlightCategory,
    ForecastPeriod,
    MetarRecord,
    RawReport,
    ReportIssue,
    ReportKind,
    TafRecord,
    Visibility,
    Wind,
    WindDirection,
)
from aero_wx.weather.tokenizer import tokenize
from aero_wx.weather.timeutils import resolve_validity_window, resolve_zulu
from aero_wx.weather.analysis import WeatherAnalyzer, classify
from aero_wx.weather.metar import decode_metar
from aero_wx.weather.taf import decode_taf
from aero_wx.weather.parser import WeatherParser, decode_report
from aero_wx.weather.collection import WeatherCollection

__all__ = [
    'ChangeIndicator',
    'CloudCoverage',
    'CloudLayer',
    'FlightCategory',
    'ForecastPeriod',
    'MetarRecord',
    'RawReport',
    'ReportIssue',
    'ReportKind',
    'TafRecord',
    'Visibility',
    'Wind',
    'WindDirection',
    'tokenize',
    'resolve_zulu',
    'resolve_validity_window',
    'WeatherAnalyzer',
    'classify',
    'decode_metar',
    'decode_taf',
    'WeatherParser',
    'decode_report',
    'WeatherCollection',
]
