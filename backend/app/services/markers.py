"""Marker generation: the discrete, labelled ticks of the life timeline axis.

Everything here is pure. "Now" is always an explicit argument so a marker set
depends only on its inputs and can be regenerated at will.
"""

import math
from datetime import date, datetime
from typing import Optional

import pendulum

from app.config import settings
from app.models import Granularity, TimelineMarker


def to_local(instant: datetime, tz=None) -> pendulum.DateTime:
    """
    Convert a datetime to a pendulum DateTime on the given calendar.

    Naive values are read as wall time in ``tz`` (the host timezone when
    omitted). Aware values keep their instant and are shifted into ``tz``
    when one is given.
    """
    if instant.tzinfo is None:
        return pendulum.instance(instant, tz=tz or pendulum.local_timezone())
    local = pendulum.instance(instant)
    return local.in_tz(tz) if tz is not None else local


def _birth_start(birthdate: date, tz) -> pendulum.DateTime:
    return pendulum.datetime(birthdate.year, birthdate.month, birthdate.day, tz=tz)


def marker_window(
    birthdate: date,
    granularity: Granularity,
    focused_instant: Optional[datetime],
    now: datetime,
    years_span: Optional[int] = None,
) -> tuple[pendulum.DateTime, pendulum.DateTime]:
    """
    Compute the first and last tick (both inclusive) for a granularity.

    Anchors are snapped to the start of their bucket so that marker instants
    stay stable between regenerations and a note stored on one can be found
    again.

    A focused hours window is the whole focused day, 00:00 to 23:00, not
    the focused hour +/-12 clamped to that day. The clamped form would
    shrink the window toward either end of the day.

    :param birthdate: Start of the years window
    :type birthdate: date
    :param granularity: Active granularity
    :type granularity: Granularity
    :param focused_instant: Last instant the user selected, if any
    :type focused_instant: Optional[datetime]
    :param now: Current instant
    :type now: datetime
    :param years_span: Length of the years window (defaults to settings)
    :type years_span: Optional[int]
    :return: First and last tick of the window
    :rtype: tuple[pendulum.DateTime, pendulum.DateTime]
    """
    now = to_local(now)
    focus = to_local(focused_instant, now.tz) if focused_instant is not None else None

    if granularity is Granularity.HOURS:
        if focus is not None:
            start = focus.start_of("day")
            return start, start.add(hours=23)
        anchor = now.start_of("hour")
        return anchor.subtract(hours=12), anchor.add(hours=11)

    if granularity is Granularity.DAYS:
        if focus is not None:
            start = focus.start_of("month")
            return start, start.add(days=start.days_in_month - 1)
        anchor = now.start_of("day")
        return anchor.subtract(days=15), anchor.add(days=14)

    if granularity is Granularity.WEEKS:
        # Focus never moves the weeks window.
        anchor = now.start_of("day")
        return anchor.subtract(days=28), anchor.add(days=21)

    if granularity is Granularity.MONTHS:
        if focus is not None:
            start = focus.start_of("year")
            return start, start.add(months=11)
        anchor = now.start_of("month")
        return anchor.subtract(months=6), anchor.add(months=5)

    span = settings.YEARS_SPAN if years_span is None else years_span
    start = _birth_start(birthdate, now.tz)
    return start, start.add(years=span)


def _tick(start: pendulum.DateTime, granularity: Granularity, index: int) -> pendulum.DateTime:
    if granularity is Granularity.HOURS:
        return start.add(hours=index)
    if granularity is Granularity.DAYS:
        return start.add(days=index)
    if granularity is Granularity.WEEKS:
        return start.add(days=7 * index)
    if granularity is Granularity.MONTHS:
        return start.add(months=index)
    return start.add(years=index)


def format_label(instant: pendulum.DateTime, granularity: Granularity) -> str:
    """
    Format a marker label.

    Examples:
        hours  -> "3 PM"
        days   -> "5 Oct"
        weeks  -> "Week 1"
        months -> "Oct"
        years  -> "2026"
    """
    if granularity is Granularity.HOURS:
        return instant.format("h A")
    if granularity is Granularity.DAYS:
        return instant.format("D MMM")
    if granularity is Granularity.WEEKS:
        return f"Week {math.ceil(instant.day / 7)}"
    if granularity is Granularity.MONTHS:
        return instant.format("MMM")
    return instant.format("YYYY")


def same_bucket(marker_instant: datetime, other: datetime, granularity: Granularity) -> bool:
    """
    Whether ``other`` falls into the bucket that starts at ``marker_instant``.

    Calendar fields are compared on the marker's calendar. A weeks bucket is
    the seven days starting at the marker, not the "Week N" of the label:
    week-of-month numbers restart every month and a tick's seven days can
    straddle two of them.
    """
    marker = to_local(marker_instant)
    other = to_local(other, marker.tz)

    if granularity is Granularity.WEEKS:
        return marker <= other < marker.add(days=7)
    if marker.year != other.year:
        return False
    if granularity is Granularity.YEARS:
        return True
    if marker.month != other.month:
        return False
    if granularity is Granularity.MONTHS:
        return True
    if marker.day != other.day:
        return False
    return granularity is not Granularity.HOURS or marker.hour == other.hour


def walk_markers(
    start: datetime,
    end: datetime,
    granularity: Granularity,
    now: datetime,
) -> list[TimelineMarker]:
    """
    Emit one marker per step from ``start`` to ``end`` inclusive.

    Each tick is computed from ``start`` and its index rather than by
    advancing a shared cursor, so every marker owns its instant.
    An inverted range yields no markers.
    """
    start = to_local(start)
    end = to_local(end, start.tz)
    now = to_local(now, start.tz)
    if end < start:
        return []

    markers: list[TimelineMarker] = []
    current_seen = False
    index = 0
    while True:
        instant = _tick(start, granularity, index)
        if instant > end:
            break
        is_current = not current_seen and same_bucket(instant, now, granularity)
        current_seen = current_seen or is_current
        markers.append(
            TimelineMarker(
                sequence_id=index,
                instant=instant,
                label=format_label(instant, granularity),
                is_current=is_current,
                granularity=granularity,
            )
        )
        index += 1
    return markers


def generate_markers(
    birthdate: date,
    granularity: Granularity,
    focused_instant: Optional[datetime],
    now: datetime,
    years_span: Optional[int] = None,
) -> list[TimelineMarker]:
    """
    Generate the ordered marker set for a granularity.

    :param birthdate: The user's birthdate
    :type birthdate: date
    :param granularity: Active granularity
    :type granularity: Granularity
    :param focused_instant: Last instant the user selected, if any
    :type focused_instant: Optional[datetime]
    :param now: Current instant; naive values are host-local wall time
    :type now: datetime
    :param years_span: Length of the years window (defaults to settings)
    :type years_span: Optional[int]
    :return: Markers in ascending instant order
    :rtype: list[TimelineMarker]
    """
    start, end = marker_window(birthdate, granularity, focused_instant, now, years_span)
    return walk_markers(start, end, granularity, now)
