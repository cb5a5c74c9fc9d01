"""Weather report data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple, Union

from aero_wx import config


class FlightCategory(Enum):
    """
    FAA flight category based on ceiling and visibility.

    Ordered from worst to best: LIFR < IFR < MVFR < VFR.
    UNKNOWN is not part of the ordering; comparing it raises TypeError.

    Thresholds (ceiling OR visibility, whichever is worse):
        LIFR:  visibility < 1 SM   or  ceiling < 500 ft
        IFR:   1 <= vis < 3 SM     or  500 <= ceiling < 1000 ft
        MVFR:  3 <= vis < 5 SM     or  1000 <= ceiling < 3000 ft
        VFR:   visibility >= 5 SM  and ceiling >= 3000 ft
    """

    LIFR = "LIFR"
    IFR = "IFR"
    MVFR = "MVFR"
    VFR = "VFR"
    UNKNOWN = "UNKNOWN"

    @property
    def order(self) -> Optional[int]:
        """Numeric ordering from worst (0) to best (3), None for UNKNOWN."""
        return _CATEGORY_ORDER.get(self)

    @property
    def is_known(self) -> bool:
        return self is not FlightCategory.UNKNOWN

    def _comparable(self, other) -> bool:
        return (
            isinstance(other, FlightCategory)
            and self.is_known
            and other.is_known
        )

    def __lt__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order < other.order

    def __le__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order <= other.order

    def __gt__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order > other.order

    def __ge__(self, other: 'FlightCategory') -> bool:
        if not self._comparable(other):
            return NotImplemented
        return self.order >= other.order


_CATEGORY_ORDER = {
    FlightCategory.LIFR: 0,
    FlightCategory.IFR: 1,
    FlightCategory.MVFR: 2,
    FlightCategory.VFR: 3,
}


class ReportKind(Enum):
    """Type of weather report."""

    METAR = "METAR"
    SPECI = "SPECI"
    TAF = "TAF"


class WindDirection(Enum):
    """Wind direction that is not a bearing."""

    VARIABLE = "VRB"
    CALM = "CALM"


class CloudCoverage(Enum):
    """Sky cover amount of a cloud layer."""

    FEW = "FEW"
    SCT = "SCT"
    BKN = "BKN"
    OVC = "OVC"
    CLR = "CLR"


class ChangeIndicator(Enum):
    """How a TAF forecast period relates to the periods around it."""

    INITIAL = "INITIAL"
    FROM = "FM"
    BECOMING = "BECMG"
    TEMPORARY = "TEMPO"
    PROBABILITY = "PROB"

    @property
    def is_chained(self) -> bool:
        """Whether the period replaces the conditions before it."""
        return self not in (ChangeIndicator.TEMPORARY, ChangeIndicator.PROBABILITY)


class ReportIssue(Enum):
    """Problems found while decoding, carried on the record."""

    UNPARSEABLE_REPORT = "UNPARSEABLE_REPORT"
    INVALID_TIME_FIELD = "INVALID_TIME_FIELD"


def _enum_or_none(enum_cls, value):
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return None


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def _from_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class RawReport:
    """Raw report text as received from a collaborator."""

    kind: ReportKind
    text: str


@dataclass(frozen=True)
class Wind:
    """
    Surface wind.

    Attributes:
        direction: Bearing in degrees, or WindDirection.VARIABLE/CALM
        speed_kt: Mean speed in knots
        gust_kt: Gust speed in knots, if reported
        variable_from: Start of the variable sector (dddVddd group)
        variable_to: End of the variable sector
    """

    direction: Union[int, WindDirection]
    speed_kt: int
    gust_kt: Optional[int] = None
    variable_from: Optional[int] = None
    variable_to: Optional[int] = None

    @property
    def is_variable(self) -> bool:
        return self.direction is WindDirection.VARIABLE

    @property
    def is_calm(self) -> bool:
        return self.direction is WindDirection.CALM

    @property
    def degrees(self) -> Optional[int]:
        return self.direction if isinstance(self.direction, int) else None

    def to_dict(self) -> dict:
        direction = self.direction
        if isinstance(direction, WindDirection):
            direction = direction.value
        return {
            'direction': direction,
            'speed_kt': self.speed_kt,
            'gust_kt': self.gust_kt,
            'variable_from': self.variable_from,
            'variable_to': self.variable_to,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Wind':
        direction = data.get('direction')
        if isinstance(direction, str):
            direction = WindDirection(direction)
        return cls(
            direction=direction,
            speed_kt=data.get('speed_kt', 0),
            gust_kt=data.get('gust_kt'),
            variable_from=data.get('variable_from'),
            variable_to=data.get('variable_to'),
        )


@dataclass(frozen=True)
class Visibility:
    """
    Prevailing visibility in statute miles.

    is_at_least models unbounded reports such as P6SM or 9999,
    is_less_than models M1/4SM.
    """

    statute_miles: float
    is_at_least: bool = False
    is_less_than: bool = False

    def to_dict(self) -> dict:
        return {
            'statute_miles': self.statute_miles,
            'is_at_least': self.is_at_least,
            'is_less_than': self.is_less_than,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Visibility':
        return cls(
            statute_miles=data.get('statute_miles', 0.0),
            is_at_least=data.get('is_at_least', False),
            is_less_than=data.get('is_less_than', False),
        )


@dataclass(frozen=True)
class CloudLayer:
    """A reported cloud layer; base_ft_agl is None when reported as ///."""

    coverage: CloudCoverage
    base_ft_agl: Optional[int] = None
    cloud_type: Optional[str] = None  # "CB" or "TCU"

    @property
    def is_ceiling(self) -> bool:
        return self.coverage.value in config.CEILING_COVERAGES

    def to_dict(self) -> dict:
        return {
            'coverage': self.coverage.value,
            'base_ft_agl': self.base_ft_agl,
            'cloud_type': self.cloud_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'CloudLayer':
        return cls(
            coverage=CloudCoverage(data['coverage']),
            base_ft_agl=data.get('base_ft_agl'),
            cloud_type=data.get('cloud_type'),
        )


def ceiling_of(clouds: Optional[Tuple[CloudLayer, ...]]) -> Optional[int]:
    """Lowest BKN/OVC base in feet, or None if there is no ceiling."""
    if not clouds:
        return None
    bases = [c.base_ft_agl for c in clouds if c.is_ceiling and c.base_ft_agl is not None]
    return min(bases) if bases else None


@dataclass(frozen=True)
class MetarRecord:
    """
    Decoded METAR or SPECI observation.

    Attributes:
        station: ICAO station identifier, None if the report was unparseable
        report_kind: METAR or SPECI
        observed_at: Observation time, None if the time group was invalid
        wind: Surface wind
        visibility: Prevailing visibility
        clouds: Cloud layers in report order
        cavok: Ceiling And Visibility OK was reported
        weather: Present weather groups (e.g. "-RA", "BR")
        temperature: Temperature in Celsius
        dewpoint: Dewpoint in Celsius
        altimeter: Altimeter setting in inHg
        category: Flight category
        remarks: Undecoded groups, including the RMK section, verbatim
        issues: Problems found while decoding
        raw_text: Original report text
    """

    station: Optional[str] = None
    report_kind: ReportKind = ReportKind.METAR
    observed_at: Optional[datetime] = None
    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    clouds: Tuple[CloudLayer, ...] = ()
    cavok: bool = False
    weather: Tuple[str, ...] = ()
    temperature: Optional[int] = None
    dewpoint: Optional[int] = None
    altimeter: Optional[float] = None
    category: FlightCategory = FlightCategory.UNKNOWN
    remarks: Tuple[str, ...] = ()
    issues: Tuple[ReportIssue, ...] = ()
    raw_text: str = ""

    @property
    def ceiling_ft(self) -> Optional[int]:
        return ceiling_of(self.clouds)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            'station': self.station,
            'report_kind': self.report_kind.value,
            'observed_at': _iso(self.observed_at),
            'wind': self.wind.to_dict() if self.wind else None,
            'visibility': self.visibility.to_dict() if self.visibility else None,
            'clouds': [c.to_dict() for c in self.clouds],
            'ceiling_ft': self.ceiling_ft,
            'cavok': self.cavok,
            'weather': list(self.weather),
            'temperature': self.temperature,
            'dewpoint': self.dewpoint,
            'altimeter': self.altimeter,
            'category': self.category.value,
            'remarks': list(self.remarks),
            'issues': [i.value for i in self.issues],
            'raw_text': self.raw_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'MetarRecord':
        """Create MetarRecord from dictionary."""
        return cls(
            station=data.get('station'),
            report_kind=_enum_or_none(ReportKind, data.get('report_kind')) or ReportKind.METAR,
            observed_at=_from_iso(data.get('observed_at')),
            wind=Wind.from_dict(data['wind']) if data.get('wind') else None,
            visibility=Visibility.from_dict(data['visibility']) if data.get('visibility') else None,
            clouds=tuple(CloudLayer.from_dict(c) for c in data.get('clouds', [])),
            cavok=data.get('cavok', False),
            weather=tuple(data.get('weather', [])),
            temperature=data.get('temperature'),
            dewpoint=data.get('dewpoint'),
            altimeter=data.get('altimeter'),
            category=_enum_or_none(FlightCategory, data.get('category')) or FlightCategory.UNKNOWN,
            remarks=tuple(data.get('remarks', [])),
            issues=tuple(
                issue for issue in (_enum_or_none(ReportIssue, i) for i in data.get('issues', []))
                if issue is not None
            ),
            raw_text=data.get('raw_text', ''),
        )

    def __repr__(self) -> str:
        return f"MetarRecord({self.report_kind.value} {self.station} {self.category.value})"


@dataclass(frozen=True)
class ForecastPeriod:
    """
    One forecast period of a TAF.

    valid_to is None only when the TAF validity window could not be resolved.
    """

    change_type: ChangeIndicator
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    wind: Optional[Wind] = None
    visibility: Optional[Visibility] = None
    clouds: Tuple[CloudLayer, ...] = ()
    cavok: bool = False
    weather: Tuple[str, ...] = ()
    category: FlightCategory = FlightCategory.UNKNOWN
    probability: Optional[int] = None
    remarks: Tuple[str, ...] = ()
    raw_text: str = ""

    @property
    def ceiling_ft(self) -> Optional[int]:
        return ceiling_of(self.clouds)

    def contains(self, when: datetime) -> bool:
        """Whether when falls in [valid_from, valid_to)."""
        if self.valid_from is None or when < self.valid_from:
            return False
        return self.valid_to is None or when < self.valid_to

    def to_dict(self) -> dict:
        return {
            'change_type': self.change_type.value,
            'valid_from': _iso(self.valid_from),
            'valid_to': _iso(self.valid_to),
            'wind': self.wind.to_dict() if self.wind else None,
            'visibility': self.visibility.to_dict() if self.visibility else None,
            'clouds': [c.to_dict() for c in self.clouds],
            'ceiling_ft': self.ceiling_ft,
            'cavok': self.cavok,
            'weather': list(self.weather),
            'category': self.category.value,
            'probability': self.probability,
            'remarks': list(self.remarks),
            'raw_text': self.raw_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'ForecastPeriod':
        return cls(
            change_type=_enum_or_none(ChangeIndicator, data.get('change_type')) or ChangeIndicator.INITIAL,
            valid_from=_from_iso(data.get('valid_from')),
            valid_to=_from_iso(data.get('valid_to')),
            wind=Wind.from_dict(data['wind']) if data.get('wind') else None,
            visibility=Visibility.from_dict(data['visibility']) if data.get('visibility') else None,
            clouds=tuple(CloudLayer.from_dict(c) for c in data.get('clouds', [])),
            cavok=data.get('cavok', False),
            weather=tuple(data.get('weather', [])),
            category=_enum_or_none(FlightCategory, data.get('category')) or FlightCategory.UNKNOWN,
            probability=data.get('probability'),
            remarks=tuple(data.get('remarks', [])),
            raw_text=data.get('raw_text', ''),
        )


@dataclass(frozen=True)
class TafRecord:
    """
    Decoded TAF.

    Attributes:
        station: ICAO station identifier, None if the header was not found
        issued_at: Issuance time
        valid_from: Start of the forecast validity window
        valid_to: End of the forecast validity window
        periods: Forecast periods ordered by valid_from
        amended: TAF AMD
        corrected: TAF COR
        issues: Problems found while decoding
        raw_text: Original report text
    """

    station: Optional[str] = None
    issued_at: Optional[datetime] = None
    valid_from: Optional[datetime] = None
    valid_to: Optional[datetime] = None
    periods: Tuple[ForecastPeriod, ...] = field(default_factory=tuple)
    amended: bool = False
    corrected: bool = False
    issues: Tuple[ReportIssue, ...] = ()
    raw_text: str = ""

    @property
    def category(self) -> FlightCategory:
        """Category of the initial period."""
        return self.periods[0].category if self.periods else FlightCategory.UNKNOWN

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            'station': self.station,
            'report_kind': ReportKind.TAF.value,
            'issued_at': _iso(self.issued_at),
            'valid_from': _iso(self.valid_from),
            'valid_to': _iso(self.valid_to),
            'periods': [p.to_dict() for p in self.periods],
            'amended': self.amended,
            'corrected': self.corrected,
            'issues': [i.value for i in self.issues],
            'raw_text': self.raw_text,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'TafRecord':
        """Create TafRecord from dictionary."""
        return cls(
            station=data.get('station'),
            issued_at=_from_iso(data.get('issued_at')),
            valid_from=_from_iso(data.get('valid_from')),
            valid_to=_from_iso(data.get('valid_to')),
            periods=tuple(ForecastPeriod.from_dict(p) for p in data.get('periods', [])),
            amended=data.get('amended', False),
            corrected=data.get('corrected', False),
            issues=tuple(
                issue for issue in (_enum_or_none(ReportIssue, i) for i in data.get('issues', []))
                if issue is not None
            ),
            raw_text=data.get('raw_text', ''),
        )

    def __repr__(self) -> str:
        return f"TafRecord({self.station} periods={len(self.periods)})"
