"""
Recognizers for the groups shared by METAR and TAF reports.

Each recognizer looks at a single group and returns a Recognized tuple:
the decoded value (or None) and whether the group was consumed. A group is
consumed when it has the recognizer's shape, even if it decodes to no value
(e.g. CLR for clouds). The shape of each group is enough to identify it, so
recognizers can be applied in any order.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from typing import Any, List, NamedTuple, Optional, Sequence, Set, Tuple

from aero_wx import config
from aero_wx.weather.models import (
    CloudCoverage,
    CloudLayer,
    Visibility,
    Wind,
    WindDirection,
)

logger = logging.getLogger(__name__)


class Recognized(NamedTuple):
    value: Any
    consumed: bool


NOT_RECOGNIZED = Recognized(None, False)

# Regex patterns
WIND_PATTERN = re.compile(r'^(VRB|\d{3})(\d{2,3})(G(\d{2,3}))?KT$')
WIND_VARIATION_PATTERN = re.compile(r'^(\d{3})V(\d{3})$')
VISIBILITY_SM_PATTERN = re.compile(r'^([MP])?(\d+(?:\.\d+)?|\d+/\d+)SM$')
VISIBILITY_PLUS_PATTERN = re.compile(r'^P(\d+(?:\.\d+)?)(SM)?$')
VISIBILITY_METRIC_PATTERN = re.compile(r'^(\d{4})$')
WHOLE_MILES_PATTERN = re.compile(r'^\d$')
CLOUD_PATTERN = re.compile(r'^(FEW|SCT|BKN|OVC)(\d{3}|///)?(CB|TCU|///)?$')
CLEAR_SKY_CODES = frozenset({'CLR', 'SKC', 'NSC', 'NCD'})
CAVOK = 'CAVOK'
TEMPERATURE_PATTERN = re.compile(r'^(M?\d{2})/(M?\d{2})?$')
ALTIMETER_PATTERN = re.compile(r'^A(\d{4})$')
QNH_PATTERN = re.compile(r'^Q(\d{4})$')
WEATHER_PATTERN = re.compile(
    r'^(\+|-|VC)?'
    r'(MI|PR|BC|DR|BL|SH|TS|FZ)?'
    r'((?:DZ|RA|SN|SG|IC|PL|GR|GS|UP|BR|FG|FU|VA|DU|SA|HZ|PY|PO|SQ|FC|SS|DS)+)$'
)
WEATHER_DESCRIPTOR_ONLY_PATTERN = re.compile(r'^(\+|-|VC)?(TS|SH)$')


# --- Single-group recognizers ---

def recognize_wind(token: str) -> Recognized:
    """
    Recognize a dddssKT / dddssGggKT / VRBssKT wind group.

    Example:
        recognize_wind("24015G25KT").value
        # Wind(direction=240, speed_kt=15, gust_kt=25)
    """
    match = WIND_PATTERN.match(token)
    if not match:
        return NOT_RECOGNIZED

    speed = int(match.group(2))
    gust = int(match.group(4)) if match.group(3) else None
    if match.group(1) == 'VRB':
        direction = WindDirection.VARIABLE
    elif match.group(1) == '000' and speed == 0 and gust is None:
        direction = WindDirection.CALM
    else:
        direction = int(match.group(1))
    return Recognized(Wind(direction=direction, speed_kt=speed, gust_kt=gust), True)


def recognize_wind_variation(token: str) -> Recognized:
    """Recognize a dddVddd variable wind sector; value is (from, to)."""
    match = WIND_VARIATION_PATTERN.match(token)
    if not match:
        return NOT_RECOGNIZED
    return Recognized((int(match.group(1)), int(match.group(2))), True)


def recognize_visibility(token: str) -> Recognized:
    """
    Recognize a visibility group.

    Handles statute miles (10SM, 1/2SM, M1/4SM, P6SM, P6), metric
    (4000, 9999) and CAVOK.
    """
    if token == CAVOK:
        return Recognized(_metric_visibility(config.METRIC_VISIBILITY_MAX_M, at_least=True), True)

    match = VISIBILITY_SM_PATTERN.match(token)
    if match:
        miles = _parse_miles(match.group(2))
        if miles is None:
            return NOT_RECOGNIZED
        return Recognized(
            Visibility(
                statute_miles=miles,
                is_at_least=match.group(1) == 'P',
                is_less_than=match.group(1) == 'M',
            ),
            True,
        )

    match = VISIBILITY_PLUS_PATTERN.match(token)
    if match:
        return Recognized(Visibility(statute_miles=float(match.group(1)), is_at_least=True), True)

    match = VISIBILITY_METRIC_PATTERN.match(token)
    if match:
        meters = int(match.group(1))
        if meters == 9999:
            return Recognized(_metric_visibility(config.METRIC_VISIBILITY_MAX_M, at_least=True), True)
        return Recognized(_metric_visibility(meters), True)

    return NOT_RECOGNIZED


def recognize_cloud_layer(token: str) -> Recognized:
    """
    Recognize a cloud group.

    FEW/SCT/BKN/OVC followed by the base in hundreds of feet yields a
    CloudLayer. CLR, SKC, NSC and NCD are consumed with no layer.
    """
    if token in CLEAR_SKY_CODES:
        return Recognized(None, True)

    match = CLOUD_PATTERN.match(token)
    if not match:
        return NOT_RECOGNIZED

    height = match.group(2)
    base = int(height) * 100 if height and height != '///' else None
    cloud_type = match.group(3) if match.group(3) in ('CB', 'TCU') else None
    return Recognized(
        CloudLayer(coverage=CloudCoverage(match.group(1)), base_ft_agl=base, cloud_type=cloud_type),
        True,
    )


def recognize_temperature(token: str) -> Recognized:
    """Recognize a TT/DD group; value is (temperature, dewpoint), M = minus."""
    match = TEMPERATURE_PATTERN.match(token)
    if not match:
        return NOT_RECOGNIZED
    temperature = _signed(match.group(1))
    dewpoint = _signed(match.group(2)) if match.group(2) else None
    return Recognized((temperature, dewpoint), True)


def recognize_altimeter(token: str) -> Recognized:
    """Recognize Adddd (inHg x 100) or Qdddd (hPa); value is inHg."""
    match = ALTIMETER_PATTERN.match(token)
    if match:
        return Recognized(round(int(match.group(1)) / 100, 2), True)

    match = QNH_PATTERN.match(token)
    if match:
        return Recognized(round(int(match.group(1)) * config.HPA_TO_INHG, 2), True)

    return NOT_RECOGNIZED


def recognize_weather(token: str) -> Recognized:
    """Recognize a present-weather group such as -RA, +TSRA, BR or VCSH."""
    if WEATHER_PATTERN.match(token) or WEATHER_DESCRIPTOR_ONLY_PATTERN.match(token):
        return Recognized(token, True)
    return NOT_RECOGNIZED


def scan_clouds(tokens: Sequence[str]) -> Tuple[List[CloudLayer], Set[int]]:
    """
    Scan a whole group sequence for cloud layers.

    Returns:
        (layers in report order, indices of consumed groups)
    """
    layers = []
    consumed = set()
    for index, token in enumerate(tokens):
        layer, used = recognize_cloud_layer(token)
        if used:
            consumed.add(index)
            if layer is not None:
                layers.append(layer)
    return layers, consumed


# --- Shared conditions decoding ---

@dataclass
class Conditions:
    """Fields decoded from a run of groups (a METAR body or a TAF period)."""

    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    clouds: List[CloudLayer] = field(default_factory=list)
    sky_reported: bool = False
    cavok: bool = False
    weather: List[str] = field(default_factory=list)
    temperature: Optional[int] = None
    dewpoint: Optional[int] = None
    temperature_reported: bool = False
    altimeter: Optional[float] = None
    residue: List[str] = field(default_factory=list)


def decode_conditions(tokens: Sequence[str]) -> Conditions:
    """
    Apply the recognizers to every group, first match per field wins.

    Groups that no recognizer consumes, and later duplicates of a field
    already decoded, are kept verbatim in residue.
    """
    result = Conditions()
    cloud_layers, cloud_indices = scan_clouds(tokens)
    result.clouds = cloud_layers
    result.sky_reported = bool(cloud_indices)

    skip = set()
    variation = None
    variation_token = None
    for index, token in enumerate(tokens):
        if index in cloud_indices or index in skip:
            continue

        if result.wind is None:
            wind, used = recognize_wind(token)
            if used:
                result.wind = wind
                continue

        if variation is None:
            sector, used = recognize_wind_variation(token)
            if used:
                variation, variation_token = sector, token
                continue

        if result.visibility is None:
            visibility, used = recognize_visibility(token)
            if used:
                result.visibility = visibility
                if token == CAVOK:
                    result.cavok = True
                    result.sky_reported = True
                continue
            whole = _mixed_fraction(tokens, index)
            if whole is not None:
                result.visibility = whole
                skip.add(index + 1)
                continue

        if not result.temperature_reported:
            temps, used = recognize_temperature(token)
            if used:
                result.temperature, result.dewpoint = temps
                result.temperature_reported = True
                continue

        if result.altimeter is None:
            altimeter, used = recognize_altimeter(token)
            if used:
                result.altimeter = altimeter
                continue

        weather, used = recognize_weather(token)
        if used:
            result.weather.append(weather)
            continue

        result.residue.append(token)

    # The variable sector may be reported before or after the wind group
    if variation is not None:
        if result.wind is not None:
            result.wind = replace(result.wind, variable_from=variation[0], variable_to=variation[1])
        else:
            result.residue.append(variation_token)

    if result.residue:
        logger.debug("Undecoded groups: %s", " ".join(result.residue))
    return result


# --- Helpers ---

def _signed(text: str) -> int:
    if text.startswith('M'):
        return -int(text[1:])
    return int(text)


def _metric_visibility(meters: int, at_least: bool = False) -> Visibility:
    return Visibility(statute_miles=round(meters * config.METERS_TO_SM, 2), is_at_least=at_least)


def _parse_miles(text: str) -> Optional[float]:
    """Parse "10", "1.5" or "1/2" statute miles."""
    if '/' in text:
        numerator, denominator = text.split('/')
        if int(denominator) == 0:
            return None
        return int(numerator) / int(denominator)
    return float(text)


def _mixed_fraction(tokens: Sequence[str], index: int) -> Optional[Visibility]:
    """Combine a whole-mile group with a following fractional SM group (1 1/2SM)."""
    if index + 1 >= len(tokens) or not WHOLE_MILES_PATTERN.match(tokens[index]):
        return None
    fraction, used = recognize_visibility(tokens[index + 1])
    if not used or '/' not in tokens[index + 1] or fraction.is_less_than:
        return None
    return Visibility(statute_miles=int(tokens[index]) + fraction.statute_miles)
