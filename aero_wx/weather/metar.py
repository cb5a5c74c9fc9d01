"""METAR/SPECI decoder."""

import logging
import re
from datetime import datetime
from typing import List, Optional

from aero_wx.weather.analysis import WeatherAnalyzer
from aero_wx.weather.fields import decode_conditions
from aero_wx.weather.models import MetarRecord, ReportIssue, ReportKind
from aero_wx.weather.timeutils import resolve_zulu
from aero_wx.weather.tokenizer import split_remarks, tokenize

logger = logging.getLogger(__name__)

STATION_PATTERN = re.compile(r'^[A-Z][A-Z0-9]{3}$')
OBSERVATION_TIME_PATTERN = re.compile(r'^\d{6}Z$')

_KIND_PREFIXES = {
    'METAR': ReportKind.METAR,
    'SPECI': ReportKind.SPECI,
}
_CORRECTION = 'COR'


def strip_prefixes(tokens: List[str], prefixes) -> List[str]:
    """Drop leading report-type groups; returns the stripped prefixes in order."""
    stripped = []
    while tokens and tokens[0] in prefixes:
        stripped.append(tokens.pop(0))
    return stripped


def decode_metar(raw: Optional[str], reference_now: datetime) -> MetarRecord:
    """
    Decode a METAR or SPECI report.

    The station is the first group and the observation time the second;
    every other group is matched against the shared recognizers in any
    order. Never raises on malformed text: missing fields are None and
    problems are listed in the record's issues.

    Args:
        raw: Raw report text (may include a "METAR"/"SPECI" prefix)
        reference_now: Current time, used to resolve the day-of-month

    Returns:
        MetarRecord

    Example:
        record = decode_metar("KATL 052253Z 12008KT 10SM FEW250 24/12 A3008", now)
        record.category  # FlightCategory.VFR
    """
    raw_text = (raw or "").strip()
    tokens = tokenize(raw_text)

    report_kind = ReportKind.METAR
    for prefix in strip_prefixes(tokens, set(_KIND_PREFIXES) | {_CORRECTION}):
        report_kind = _KIND_PREFIXES.get(prefix, report_kind)

    if not tokens or not STATION_PATTERN.match(tokens[0]):
        logger.debug("Unparseable METAR: %r", raw_text[:80])
        return MetarRecord(
            report_kind=report_kind,
            remarks=tuple(tokens),
            issues=(ReportIssue.UNPARSEABLE_REPORT,),
            raw_text=raw_text,
        )

    station = tokens[0]
    body = tokens[1:]
    issues = []

    observed_at = None
    if body and OBSERVATION_TIME_PATTERN.match(body[0]):
        observed_at = resolve_zulu(body.pop(0), reference_now)
    if observed_at is None:
        logger.debug("METAR %s has no valid observation time", station)
        issues.append(ReportIssue.INVALID_TIME_FIELD)

    body, remarks = split_remarks(body)
    conditions = decode_conditions(body)

    clouds = conditions.clouds if conditions.sky_reported else None
    category = WeatherAnalyzer.classify(conditions.visibility, clouds)

    return MetarRecord(
        station=station,
        report_kind=report_kind,
        observed_at=observed_at,
        wind=conditions.wind,
        visibility=conditions.visibility,
        clouds=tuple(conditions.clouds),
        cavok=conditions.cavok,
        weather=tuple(conditions.weather),
        temperature=conditions.temperature,
        dewpoint=conditions.dewpoint,
        altimeter=conditions.altimeter,
        category=category,
        remarks=tuple(conditions.residue + remarks),
        issues=tuple(issues),
        raw_text=raw_text,
    )
