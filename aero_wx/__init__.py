"""
Aviation weather report decoding library.

This package turns raw METAR and TAF text into typed records.

The main public API includes:
- decode_metar: Decode a METAR/SPECI observation
- decode_taf: Decode a TAF into chained forecast periods
- decode_report: Decode either, dispatching on the report kind
- FlightCategory: VFR/MVFR/IFR/LIFR classification
"""

from aero_wx.weather import (
    FlightCategory,
    MetarRecord,
    RawReport,
    ReportKind,
    TafRecord,
    decode_metar,
    decode_report,
    decode_taf,
)

__version__ = '0.1.0'
__all__ = [
    'FlightCategory',
    'MetarRecord',
    'RawReport',
    'ReportKind',
    'TafRecord',
    'decode_metar',
    'decode_report',
    'decode_taf',
]
