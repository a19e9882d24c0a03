"""Month grid construction for calendar rendering.

Weekdays use the :mod:`calendar` convention: Monday=0 … Sunday=6.
"""

from __future__ import annotations

import calendar
import logging
from datetime import MAXYEAR, MINYEAR, date, datetime

from src.cycle.records import day_of

logger = logging.getLogger("heriod.cycle.calendar_grid")


def first_of_month(anchor: date | datetime) -> date:
    return day_of(anchor).replace(day=1)


def leading_blanks(anchor: date | datetime, first_weekday: int) -> int:
    """Number of empty cells before the 1st of the month."""
    return (first_of_month(anchor).weekday() - first_weekday) % 7


def build_month_grid(
    anchor: date | datetime,
    first_weekday: int = calendar.SUNDAY,
    pad_to_full_weeks: bool = False,
) -> list[date | None]:
    """Build the cells for the month containing ``anchor``.

    Args:
        anchor:            Any day in the target month.
        first_weekday:     Weekday shown in the first column (Monday=0).
        pad_to_full_weeks: Append trailing blanks so the grid ends on a full week.

    Returns:
        Leading None cells, then every day of the month in ascending order.
    """
    if not 0 <= first_weekday <= 6:
        raise ValueError(f"first_weekday must be in 0..6, got {first_weekday}")

    first = first_of_month(anchor)
    _, day_count = calendar.monthrange(first.year, first.month)

    cells: list[date | None] = [None] * leading_blanks(first, first_weekday)
    cells.extend(first.replace(day=n) for n in range(1, day_count + 1))
    if pad_to_full_weeks and len(cells) % 7:
        cells.extend([None] * (7 - len(cells) % 7))
    return cells


def weekday_headers(first_weekday: int = calendar.SUNDAY) -> list[str]:
    """Abbreviated weekday names starting at ``first_weekday``."""
    return [calendar.day_abbr[(first_weekday + i) % 7] for i in range(7)]


def shift_month(anchor: date | datetime, months: int) -> date | None:
    """Move ``anchor`` by ``months``, clamping the day to the target month's length.

    Returns None when the target month lies outside the supported date range.
    """
    start = day_of(anchor)
    index = start.year * 12 + (start.month - 1) + months
    year, month = divmod(index, 12)
    month += 1
    if not MINYEAR <= year <= MAXYEAR:
        logger.debug("Month shift out of range: %s %+d months", start, months)
        return None
    _, day_count = calendar.monthrange(year, month)
    return date(year, month, min(start.day, day_count))
