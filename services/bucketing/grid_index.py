from __future__ import annotations
from datetime import date, timedelta
from typing import Tuple


def _row_length(y_axis_length: int, week_style: bool) -> int:
    # Week grids carry a closing "24h" label on Y that is not a bucket.
    return y_axis_length - 1 if week_style else y_axis_length


def cell_index(x_key: int, y_key: int, y_axis_length: int, week_style: bool = False) -> int:
    """Flat position of cell (x_key, y_key), x-major."""
    return x_key * _row_length(y_axis_length, week_style) + y_key


def cell_count(x_axis_length: int, y_axis_length: int, week_style: bool = False) -> int:
    return x_axis_length * _row_length(y_axis_length, week_style)


def decompose(index: int, y_axis_length: int, week_style: bool = False) -> Tuple[int, int]:
    """Inverse of cell_index: (x_key, y_key)."""
    return divmod(index, _row_length(y_axis_length, week_style))


def reconstruct_date(iso_year: int, iso_week: int, iso_weekday: int) -> date:
    """Calendar date of an ISO-8601 week date (weekday 1=Monday..7=Sunday).

    Week 1 is the week holding the year's first Thursday. Weeks or weekdays
    past the end of a year carry over into the next one (week 53 of a
    52-week year is week 1 of the following ISO year).
    """
    week_one_monday = date.fromisocalendar(iso_year, 1, 1)
    return week_one_monday + timedelta(weeks=iso_week - 1, days=iso_weekday - 1)
