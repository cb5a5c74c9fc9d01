"""Entry points dispatching raw reports to the METAR and TAF decoders."""

import logging
from datetime import datetime
from typing import Union

from aero_wx.weather.metar import decode_metar
from aero_wx.weather.models import MetarRecord, RawReport, ReportKind, TafRecord
from aero_wx.weather.taf import decode_taf

logger = logging.getLogger(__name__)


class WeatherParser:
    """
    Decode METAR and TAF reports into typed records.

    The reference time is always supplied by the caller so that decoding
    is deterministic.

    Example:
        now = datetime(2024, 5, 5, 23, 0, tzinfo=timezone.utc)
        record = WeatherParser.parse_metar(
            "KATL 052253Z 12008KT 10SM FEW250 24/12 A3008", now
        )
    """

    @classmethod
    def parse_metar(cls, raw_text: str, reference_now: datetime) -> MetarRecord:
        """Decode a METAR or SPECI."""
        return decode_metar(raw_text, reference_now)

    @classmethod
    def parse_taf(cls, raw_text: str, reference_now: datetime) -> TafRecord:
        """Decode a TAF."""
        return decode_taf(raw_text, reference_now)

    @classmethod
    def parse_auto(
        cls,
        report: Union[RawReport, str],
        reference_now: datetime,
    ) -> Union[MetarRecord, TafRecord]:
        """
        Decode a report, choosing the decoder from its kind.

        Plain strings starting with "TAF" are decoded as TAFs, anything
        else as a METAR.

        Args:
            report: RawReport or raw text
            reference_now: Current time

        Returns:
            MetarRecord or TafRecord
        """
        if isinstance(report, RawReport):
            kind = report.kind
            text = report.text
        else:
            text = report or ""
            kind = ReportKind.TAF if text.strip().upper().startswith("TAF") else ReportKind.METAR

        logger.debug("Decoding %s report", kind.value)
        if kind is ReportKind.TAF:
            return cls.parse_taf(text, reference_now)
        return cls.parse_metar(text, reference_now)


def decode_report(report: Union[RawReport, str], reference_now: datetime) -> Union[MetarRecord, TafRecord]:
    """Decode a METAR or TAF; see WeatherParser.parse_auto."""
    return WeatherParser.parse_auto(report, reference_now)
