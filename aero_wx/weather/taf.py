"""
TAF decoder.

A TAF is a header (station, issuance time, validity window) followed by
an initial forecast and change groups:

    KJFK 051730Z 0518/0624 33015KT P6SM SCT250
         FM052000 34010KT P6SM BKN040
         TEMPO 0522/0602 3SM -SHRA BKN020

FM and BECMG periods replace the conditions before them and are chained
end to end. TEMPO and PROB periods describe temporary excursions inside
the surrounding period; they keep their own window and are not chained.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from aero_wx import config
from aero_wx.weather.analysis import WeatherAnalyzer
from aero_wx.weather.fields import decode_conditions
from aero_wx.weather.metar import STATION_PATTERN, strip_prefixes
from aero_wx.weather.models import (
    ChangeIndicator,
    ForecastPeriod,
    ReportIssue,
    TafRecord,
)
from aero_wx.weather.timeutils import (
    resolve_near,
    resolve_validity_window,
    resolve_window_near,
    resolve_zulu,
    shift_window,
)
from aero_wx.weather.tokenizer import tokenize

logger = logging.getLogger(__name__)

# Regex patterns
ISSUE_TIME_PATTERN = re.compile(r'^\d{6}Z$')
WINDOW_PATTERN = re.compile(r'^(\d{4})/(\d{4})$')
FROM_PATTERN = re.compile(r'^FM(\d{6})$')
PROBABILITY_PATTERN = re.compile(r'^PROB(\d{2})?$')
PROBABILITY_VALUE_PATTERN = re.compile(r'^\d{2}$')

_KEYWORD_INDICATORS = {
    'BECMG': ChangeIndicator.BECOMING,
    'TEMPO': ChangeIndicator.TEMPORARY,
}
_PREFIXES = {'TAF', 'AMD', 'COR'}


@dataclass
class _Chunk:
    """Groups belonging to one change indicator, before time resolution."""

    indicator: ChangeIndicator
    indicator_tokens: List[str] = field(default_factory=list)
    tokens: List[str] = field(default_factory=list)
    time_group: Optional[str] = None
    window: Optional[Tuple[str, str]] = None
    probability: Optional[int] = None


@dataclass
class _Draft:
    chunk: _Chunk
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None


def read_change_indicator(tokens: List[str], index: int) -> Optional[Tuple[_Chunk, int]]:
    """
    Read a change indicator starting at tokens[index].

    Returns:
        (chunk with indicator fields set, index of the first group after
        the indicator) or None if tokens[index] does not start one
    """
    token = tokens[index]

    match = FROM_PATTERN.match(token)
    if match:
        chunk = _Chunk(ChangeIndicator.FROM, [token], time_group=match.group(1))
        return chunk, index + 1

    if token in _KEYWORD_INDICATORS:
        chunk = _Chunk(_KEYWORD_INDICATORS[token], [token])
        return chunk, _read_window(tokens, index + 1, chunk)

    match = PROBABILITY_PATTERN.match(token)
    if match:
        chunk = _Chunk(ChangeIndicator.PROBABILITY, [token])
        position = index + 1
        if match.group(1):
            chunk.probability = int(match.group(1))
        elif position < len(tokens) and PROBABILITY_VALUE_PATTERN.match(tokens[position]):
            chunk.probability = int(tokens[position])
            chunk.indicator_tokens.append(tokens[position])
            position += 1
        # PROB30 TEMPO is a single indicator
        if position < len(tokens) and tokens[position] == 'TEMPO':
            chunk.indicator_tokens.append(tokens[position])
            position += 1
        return chunk, _read_window(tokens, position, chunk)

    return None


def _read_window(tokens: List[str], index: int, chunk: _Chunk) -> int:
    if index < len(tokens):
        match = WINDOW_PATTERN.match(tokens[index])
        if match:
            chunk.window = (match.group(1), match.group(2))
            chunk.indicator_tokens.append(tokens[index])
            return index + 1
    return index


def segment(tokens: List[str]) -> List[_Chunk]:
    """Slice the groups after the header into an initial chunk plus one chunk per change indicator."""
    chunks = [_Chunk(ChangeIndicator.INITIAL)]
    index = 0
    while index < len(tokens):
        indicator = read_change_indicator(tokens, index)
        if indicator is not None:
            chunk, index = indicator
            chunks.append(chunk)
            continue
        chunks[-1].tokens.append(tokens[index])
        index += 1
    return chunks


def decode_taf(raw: Optional[str], reference_now: datetime) -> TafRecord:
    """
    Decode a TAF report.

    Never raises on malformed text: when the header cannot be located the
    record has station None and a single INITIAL period holding the raw
    groups as residue.

    Args:
        raw: Raw TAF text, single or multi-line, with or without "TAF" prefix
        reference_now: Current time, used to resolve the day-of-month

    Returns:
        TafRecord with periods ordered by valid_from
    """
    raw_text = (raw or "").strip()
    tokens = tokenize(raw_text)
    prefixes = strip_prefixes(tokens, _PREFIXES)
    amended = 'AMD' in prefixes
    corrected = 'COR' in prefixes

    if not _has_header(tokens):
        logger.debug("Unparseable TAF: %r", raw_text[:80])
        return TafRecord(
            periods=(ForecastPeriod(
                change_type=ChangeIndicator.INITIAL,
                remarks=tuple(tokens),
                raw_text=" ".join(tokens),
            ),),
            amended=amended,
            corrected=corrected,
            issues=(ReportIssue.UNPARSEABLE_REPORT,),
            raw_text=raw_text,
        )

    station, issue_group, window_group = tokens[:3]
    issues = []

    issued_at = resolve_zulu(issue_group, reference_now)
    window_start, window_end = WINDOW_PATTERN.match(window_group).groups()
    window = resolve_validity_window(window_start, window_end, reference_now)
    if window is not None and issued_at is not None:
        window = shift_window(
            window, issued_at, timedelta(days=config.MAX_WINDOW_ISSUANCE_GAP_DAYS)
        )
    valid_from, valid_to = window if window is not None else (None, None)
    if issued_at is None or window is None:
        logger.debug("TAF %s has invalid header times", station)
        issues.append(ReportIssue.INVALID_TIME_FIELD)

    anchor = valid_from or issued_at or reference_now
    drafts = []
    for chunk in segment(tokens[3:]):
        draft = _Draft(chunk)
        if chunk.indicator is ChangeIndicator.INITIAL:
            draft.valid_from = valid_from
        elif chunk.time_group is not None:
            draft.valid_from = resolve_near(chunk.time_group, anchor)
        elif chunk.window is not None:
            resolved = resolve_window_near(chunk.window[0], chunk.window[1], anchor)
            if resolved is not None:
                draft.valid_from, draft.valid_to = resolved
        has_time = chunk.time_group is not None or chunk.window is not None
        if chunk.indicator is not ChangeIndicator.INITIAL and has_time and draft.valid_from is None:
            if ReportIssue.INVALID_TIME_FIELD not in issues:
                issues.append(ReportIssue.INVALID_TIME_FIELD)
        drafts.append(draft)

    _chain(drafts, valid_to)
    periods = [_build_period(draft) for draft in _ordered(drafts)]

    return TafRecord(
        station=station,
        issued_at=issued_at,
        valid_from=valid_from,
        valid_to=valid_to,
        periods=tuple(periods),
        amended=amended,
        corrected=corrected,
        issues=tuple(issues),
        raw_text=raw_text,
    )


def _has_header(tokens: List[str]) -> bool:
    return (
        len(tokens) >= 3
        and STATION_PATTERN.match(tokens[0]) is not None
        and ISSUE_TIME_PATTERN.match(tokens[1]) is not None
        and WINDOW_PATTERN.match(tokens[2]) is not None
    )


def _chain(drafts: List[_Draft], taf_valid_to: Optional[datetime]) -> None:
    """
    Link chained periods end to end; TEMPO/PROB without a window
    take the window of the chained period they sit in.

    Chained periods whose start could not be resolved stay untimed and
    are left out of the chain.
    """
    chained = sorted(
        (d for d in drafts if d.chunk.indicator.is_chained and d.valid_from is not None),
        key=lambda d: d.valid_from,
    )
    for current, following in zip(chained, chained[1:]):
        current.valid_to = following.valid_from
    if chained:
        chained[-1].valid_to = taf_valid_to

    enclosing = None
    for draft in drafts:
        if draft.chunk.indicator.is_chained:
            if draft.valid_from is not None:
                enclosing = draft
        elif draft.chunk.window is None and enclosing is not None:
            draft.valid_from = enclosing.valid_from
            draft.valid_to = enclosing.valid_to


def _ordered(drafts: List[_Draft]) -> List[_Draft]:
    if all(d.valid_from is not None for d in drafts):
        return sorted(drafts, key=lambda d: d.valid_from)
    return drafts


def _build_period(draft: _Draft) -> ForecastPeriod:
    chunk = draft.chunk
    conditions = decode_conditions(chunk.tokens)
    clouds = conditions.clouds if conditions.sky_reported else None
    return ForecastPeriod(
        change_type=chunk.indicator,
        valid_from=draft.valid_from,
        valid_to=draft.valid_to,
        wind=conditions.wind,
        visibility=conditions.visibility,
        clouds=tuple(conditions.clouds),
        cavok=conditions.cavok,
        weather=tuple(conditions.weather),
        category=WeatherAnalyzer.classify(conditions.visibility, clouds),
        probability=chunk.probability,
        remarks=tuple(conditions.residue),
        raw_text=" ".join(chunk.indicator_tokens + chunk.tokens),
    )
