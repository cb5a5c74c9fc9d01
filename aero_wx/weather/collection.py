"""Queryable collection of decoded METAR records."""

from datetime import datetime
from typing import Dict, List, Optional

import pandas as pd

from aero_wx.models.queryable_collection import QueryableCollection
from aero_wx.weather.models import (
    FlightCategory,
    MetarRecord,
    ReportIssue,
    ReportKind,
)


class WeatherCollection(QueryableCollection[MetarRecord]):
    """
    Queryable collection of decoded observations.

    Adds aviation weather filters for:
    - Report kind (METAR, SPECI)
    - Station
    - Flight category (VFR, MVFR, IFR, LIFR)
    - Observation time (latest, before, after, between, chronological)

    Example:
        # Latest observation at an airport
        latest = collection.for_station("KJFK").latest()

        # IFR or worse
        bad_wx = collection.at_or_worse_than(FlightCategory.IFR).all()
    """

    def __init__(self, items: List[MetarRecord]):
        super().__init__(items)

    def _new_collection(self, items: List[MetarRecord]) -> 'WeatherCollection':
        return WeatherCollection(items)

    # --- Type filters ---

    def specials(self) -> 'WeatherCollection':
        """Filter to SPECI reports only."""
        return self.filter(lambda r: r.report_kind is ReportKind.SPECI)

    def decoded(self) -> 'WeatherCollection':
        """Drop records whose report could not be parsed."""
        return self.filter(lambda r: ReportIssue.UNPARSEABLE_REPORT not in r.issues)

    # --- Location filters ---

    def for_station(self, icao: str) -> 'WeatherCollection':
        """Filter reports for a specific station."""
        icao_upper = icao.upper()
        return self.filter(lambda r: r.station is not None and r.station == icao_upper)

    def for_stations(self, icaos: List[str]) -> 'WeatherCollection':
        """Filter reports for any of the specified stations."""
        icaos_upper = {i.upper() for i in icaos}
        return self.filter(lambda r: r.station in icaos_upper)

    # --- Category filters ---

    def by_category(self, category: FlightCategory) -> 'WeatherCollection':
        return self.filter(lambda r: r.category is category)

    def worse_than(self, category: FlightCategory) -> 'WeatherCollection':
        """Filter reports with category strictly worse than given (UNKNOWN excluded)."""
        if not category.is_known:
            return self._new_collection([])
        return self.filter(lambda r: r.category.is_known and r.category < category)

    def at_or_worse_than(self, category: FlightCategory) -> 'WeatherCollection':
        """Filter reports with category at or worse than given (UNKNOWN excluded)."""
        if not category.is_known:
            return self._new_collection([])
        return self.filter(lambda r: r.category.is_known and r.category <= category)

    # --- Time filters ---

    def latest(self) -> Optional[MetarRecord]:
        """Most recent report by observation time, or the last one if none has a time."""
        with_time = [r for r in self._items if r.observed_at is not None]
        if not with_time:
            return self.last()
        return max(with_time, key=lambda r: r.observed_at)

    def before(self, dt: datetime) -> 'WeatherCollection':
        return self.filter(lambda r: r.observed_at is not None and r.observed_at < dt)

    def after(self, dt: datetime) -> 'WeatherCollection':
        return self.filter(lambda r: r.observed_at is not None and r.observed_at > dt)

    def between(self, start: datetime, end: datetime) -> 'WeatherCollection':
        """Filter reports observed within [start, end]."""
        return self.filter(
            lambda r: r.observed_at is not None and start <= r.observed_at <= end
        )

    def chronological(self) -> 'WeatherCollection':
        """Sort by observation time, oldest first; untimed reports last."""
        timed = [r for r in self._items if r.observed_at is not None]
        untimed = [r for r in self._items if r.observed_at is None]
        return self._new_collection(sorted(timed, key=lambda r: r.observed_at) + untimed)

    # --- Grouping ---

    def group_by_station(self) -> Dict[Optional[str], 'WeatherCollection']:
        groups = self.group_by(lambda r: r.station)
        return {k: self._new_collection(v) for k, v in groups.items()}

    # --- Export ---

    def to_dataframe(self) -> pd.DataFrame:
        """One row per record with the scalar decoded fields."""
        rows = []
        for r in self._items:
            rows.append({
                'station': r.station,
                'report_kind': r.report_kind.value,
                'observed_at': r.observed_at,
                'wind_direction': r.wind.degrees if r.wind else None,
                'wind_speed_kt': r.wind.speed_kt if r.wind else None,
                'wind_gust_kt': r.wind.gust_kt if r.wind else None,
                'visibility_sm': r.visibility.statute_miles if r.visibility else None,
                'ceiling_ft': r.ceiling_ft,
                'temperature': r.temperature,
                'dewpoint': r.dewpoint,
                'altimeter': r.altimeter,
                'category': r.category.value,
                'raw_text': r.raw_text,
            })
        return pd.DataFrame(rows, columns=DATAFRAME_COLUMNS)


DATAFRAME_COLUMNS = [
    'station',
    'report_kind',
    'observed_at',
    'wind_direction',
    'wind_speed_kt',
    'wind_gust_kt',
    'visibility_sm',
    'ceiling_ft',
    'temperature',
    'dewpoint',
    'altimeter',
    'category',
    'raw_text',
]
