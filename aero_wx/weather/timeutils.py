"""
Resolve partial report times (ddhhmm, ddhh/ddhh) into absolute datetimes.

Report times carry only day-of-month, hour and minute. The month and year
come from a reference time supplied by the caller; nothing here reads the
system clock.
"""

import logging
import re
from datetime import datetime, timedelta
from typing import Optional, Tuple

from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

_DAY_HOUR_MINUTE_PATTERN = re.compile(r'^(\d{2})(\d{2})(?:(\d{2})Z?)?$')


def parse_day_time(group: Optional[str]) -> Optional[Tuple[int, int, int]]:
    """
    Split a ddhh, ddhhmm or ddhhmmZ group into (day, hour, minute).

    Returns:
        Tuple of ints or None if the group is malformed
    """
    if not group or not isinstance(group, str):
        return None
    match = _DAY_HOUR_MINUTE_PATTERN.match(group.strip().upper())
    if not match:
        return None
    day = int(match.group(1))
    hour = int(match.group(2))
    minute = int(match.group(3)) if match.group(3) else 0
    if not 1 <= day <= 31 or hour > 24 or minute > 59:
        return None
    if hour == 24 and minute != 0:
        return None
    return day, hour, minute


def _check_reference(reference_now) -> None:
    if not isinstance(reference_now, datetime):
        raise TypeError(f"reference_now must be a datetime, not {type(reference_now).__name__}")


def _month_start(when: datetime) -> datetime:
    return when.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def _build(month_start: datetime, day: int, hour: int, minute: int) -> Optional[datetime]:
    """Place day/hour/minute in the month starting at month_start; hour 24 rolls to the next day."""
    try:
        base = month_start.replace(day=day)
    except ValueError:
        return None
    return base + timedelta(hours=hour, minutes=minute)


def _reported_month(day: int, reference_now: datetime) -> datetime:
    """Start of the month a day-of-month refers to: the previous month if the day is still to come."""
    month_start = _month_start(reference_now)
    if day > reference_now.day:
        month_start -= relativedelta(months=1)
    return month_start


def resolve_zulu(ddhhmm: Optional[str], reference_now: datetime) -> Optional[datetime]:
    """
    Resolve a ddhhmm[Z] group against a reference time.

    The day is taken in the reference month unless that would date the
    report after reference_now (a later day, or a later hour on the
    reference day), in which case the report comes from the previous month.

    Args:
        ddhhmm: Time group, e.g. "052253Z"
        reference_now: Current time supplied by the caller

    Returns:
        Resolved datetime (with the reference's tzinfo) or None if invalid
    """
    _check_reference(reference_now)
    parts = parse_day_time(ddhhmm)
    if parts is None:
        logger.debug("Invalid time group: %r", ddhhmm)
        return None
    day, hour, minute = parts

    month_start = _reported_month(day, reference_now)
    resolved = _build(month_start, day, hour, minute)
    if resolved is not None and resolved > reference_now:
        month_start -= relativedelta(months=1)
        resolved = _build(month_start, day, hour, minute)
    if resolved is None:
        logger.debug("Day %d does not exist in %s", day, month_start.strftime('%Y-%m'))
    return resolved


def resolve_validity_window(
    ddhh_from: Optional[str],
    ddhh_to: Optional[str],
    reference_now: datetime,
) -> Optional[Tuple[datetime, datetime]]:
    """
    Resolve a TAF ddhh/ddhh validity window.

    Both ends are placed by day of month like resolve_zulu; a window may
    start later on the reference day. If the end precedes the start, the
    end moves one month forward.

    Returns:
        (start, end) or None if either end is invalid or the window is empty
    """
    _check_reference(reference_now)
    if not _is_day_hour(ddhh_from) or not _is_day_hour(ddhh_to):
        logger.debug("Invalid validity window: %r/%r", ddhh_from, ddhh_to)
        return None

    start_parts = parse_day_time(ddhh_from)
    end_parts = parse_day_time(ddhh_to)
    if start_parts is None or end_parts is None:
        return None
    start = _build(_reported_month(start_parts[0], reference_now), *start_parts)
    if start is None:
        logger.debug("Day %d does not exist before %s", start_parts[0], reference_now)
        return None

    day, hour, minute = end_parts
    month_start = _reported_month(day, reference_now)
    end = _build(month_start, day, hour, minute)

    if end is None or end < start:
        end = _build(month_start + relativedelta(months=1), day, hour, minute)
    if end is None or end <= start:
        logger.debug("Cannot place window end %r after start %s", ddhh_to, start)
        return None
    return start, end


def resolve_near(group: Optional[str], anchor: datetime) -> Optional[datetime]:
    """
    Resolve a ddhh or ddhhmm group to the month placement closest to anchor.

    Used for TAF change groups, which may lie after the reference time
    and must not be rolled back a month.
    """
    _check_reference(anchor)
    parts = parse_day_time(group)
    if parts is None:
        logger.debug("Invalid time group: %r", group)
        return None
    day, hour, minute = parts

    month_start = _month_start(anchor)
    candidates = []
    for offset in (-1, 0, 1):
        resolved = _build(month_start + relativedelta(months=offset), day, hour, minute)
        if resolved is not None:
            candidates.append(resolved)
    if not candidates:
        return None
    return min(candidates, key=lambda c: abs(c - anchor))


def resolve_window_near(
    ddhh_from: Optional[str],
    ddhh_to: Optional[str],
    anchor: datetime,
) -> Optional[Tuple[datetime, datetime]]:
    """Resolve a ddhh/ddhh window with its start placed closest to anchor."""
    if not _is_day_hour(ddhh_from) or not _is_day_hour(ddhh_to):
        return None
    start = resolve_near(ddhh_from, anchor)
    if start is None:
        return None
    end = resolve_near(ddhh_to, start)
    if end is not None and end < start:
        end_parts = parse_day_time(ddhh_to)
        end = _build(_month_start(start) + relativedelta(months=1), *end_parts)
    if end is None or end <= start:
        logger.debug("Empty change window: %r/%r", ddhh_from, ddhh_to)
        return None
    return start, end


def shift_window(
    window: Tuple[datetime, datetime],
    anchor: datetime,
    max_gap: timedelta,
) -> Tuple[datetime, datetime]:
    """Move a window one month towards anchor when its start is more than max_gap away."""
    start, end = window
    if start - anchor > max_gap:
        step = relativedelta(months=-1)
    elif anchor - start > max_gap:
        step = relativedelta(months=1)
    else:
        return window
    return start + step, end + step


def _is_day_hour(group: Optional[str]) -> bool:
    return isinstance(group, str) and len(group) == 4 and group.isdigit()
