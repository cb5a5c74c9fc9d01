"""Weather analysis: flight categories, TAF period lookup, category comparison."""

from datetime import datetime
from typing import List, Optional, Sequence

from aero_wx import config
from aero_wx.weather.models import (
    CloudLayer,
    FlightCategory,
    ForecastPeriod,
    TafRecord,
    Visibility,
    ceiling_of,
)


class WeatherAnalyzer:
    """
    Aviation weather analysis functions.

    All methods are static - pure functions with no state.
    """

    @staticmethod
    def classify(
        visibility: Optional[Visibility],
        clouds: Optional[Sequence[CloudLayer]],
    ) -> FlightCategory:
        """
        Determine flight category from visibility and cloud layers.

        Uses FAA thresholds (see config.CATEGORY_THRESHOLDS). The more
        restrictive of the visibility and ceiling categories wins.

        Args:
            visibility: Prevailing visibility, None if not reported
            clouds: Cloud layers; None if no sky condition was reported,
                an empty sequence for a clear sky

        Returns:
            FlightCategory, UNKNOWN only when both inputs are absent
        """
        return WeatherAnalyzer.worse_of(
            WeatherAnalyzer.classify_by_visibility(visibility),
            WeatherAnalyzer.classify_by_ceiling(clouds),
        )

    @staticmethod
    def classify_by_visibility(visibility: Optional[Visibility]) -> FlightCategory:
        if visibility is None:
            return FlightCategory.UNKNOWN
        return _category_for(visibility.statute_miles, "visibility")

    @staticmethod
    def classify_by_ceiling(clouds: Optional[Sequence[CloudLayer]]) -> FlightCategory:
        """Category from the lowest BKN/OVC layer; no such layer means no restriction."""
        if clouds is None:
            return FlightCategory.UNKNOWN
        ceiling = ceiling_of(tuple(clouds))
        if ceiling is None:
            return FlightCategory.VFR
        return _category_for(ceiling, "ceiling")

    @staticmethod
    def worse_of(first: FlightCategory, second: FlightCategory) -> FlightCategory:
        """Return the more restrictive category, ignoring UNKNOWN."""
        if not first.is_known:
            return second
        if not second.is_known:
            return first
        return min(first, second)

    @staticmethod
    def compare_categories(
        actual: FlightCategory,
        forecast: FlightCategory,
    ) -> Optional[str]:
        """
        Compare actual vs forecast flight categories.

        Args:
            actual: Actual (observed) category
            forecast: Forecast category

        Returns:
            "exact" if same, "worse" if actual is worse, "better" if actual is better,
            None if either is UNKNOWN
        """
        if not actual.is_known or not forecast.is_known:
            return None
        if actual == forecast:
            return "exact"
        elif actual < forecast:
            return "worse"
        else:
            return "better"

    @staticmethod
    def prevailing_period(
        taf: TafRecord,
        check_time: datetime,
    ) -> Optional[ForecastPeriod]:
        """
        Find the chained (INITIAL/FM/BECMG) period in force at a given time.

        Args:
            taf: Decoded TAF
            check_time: Time to check

        Returns:
            The prevailing ForecastPeriod or None if outside the TAF validity
        """
        for period in taf.periods:
            if period.change_type.is_chained and period.contains(check_time):
                return period
        return None

    @staticmethod
    def applicable_periods(
        taf: TafRecord,
        check_time: datetime,
    ) -> List[ForecastPeriod]:
        """
        Find all TAF periods valid at a given time.

        The prevailing period comes first, followed by any TEMPO/PROB
        periods overlapping it, in report order.
        """
        result = []
        prevailing = WeatherAnalyzer.prevailing_period(taf, check_time)
        if prevailing is not None:
            result.append(prevailing)
        for period in taf.periods:
            if not period.change_type.is_chained and period.contains(check_time):
                result.append(period)
        return result

    @staticmethod
    def worst_category_at(
        taf: TafRecord,
        check_time: datetime,
    ) -> FlightCategory:
        """Most restrictive category among the periods applicable at check_time."""
        category = FlightCategory.UNKNOWN
        for period in WeatherAnalyzer.applicable_periods(taf, check_time):
            category = WeatherAnalyzer.worse_of(category, period.category)
        return category


def _category_for(value: float, threshold: str) -> FlightCategory:
    thresholds = config.CATEGORY_THRESHOLDS
    if value >= thresholds["VFR"][threshold]:
        return FlightCategory.VFR
    if value >= thresholds["MVFR"][threshold]:
        return FlightCategory.MVFR
    if value >= thresholds["IFR"][threshold]:
        return FlightCategory.IFR
    return FlightCategory.LIFR


def classify(
    visibility: Optional[Visibility],
    clouds: Optional[Sequence[CloudLayer]],
) -> FlightCategory:
    """Module-level shortcut for WeatherAnalyzer.classify."""
    return WeatherAnalyzer.classify(visibility, clouds)
