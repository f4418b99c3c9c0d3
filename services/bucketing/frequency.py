from __future__ import annotations
from datetime import datetime, timedelta
from enum import Enum
from typing import List, Tuple

from dateutil.relativedelta import relativedelta

from services.bucketing.errors import InvalidFrequency


class Frequency(Enum):
    """Bucketing frequency: (axis format, label format, calendar step unit)."""

    HOUR = ("%d/%m/%Y %H:%M", "%A %d/%m/%Y %H:%M", "hours")
    DAY = ("%d/%m/%Y", "%A %d/%m/%Y", "days")
    WEEK = ("%d/%m/%Y", "%d/%m/%Y", "weeks")
    MONTH = ("%b %Y", "%b %Y", "months")
    YEAR = ("%Y", "%Y", "years")

    def __init__(self, axis_format: str, label_format: str, unit: str):
        self.axis_format = axis_format
        self.label_format = label_format
        self.unit = unit

    @classmethod
    def from_key(cls, key: str) -> "Frequency":
        try:
            return cls[str(key).strip().upper()]
        except KeyError:
            raise InvalidFrequency(f"unknown frequency '{key}'") from None

    def step(self, n: int = 1) -> relativedelta:
        """Calendar-aware offset of n units (months and years clip to month end)."""
        return relativedelta(**{self.unit: n})

    def format_axis(self, d: datetime) -> str:
        return d.strftime(self.axis_format)

    def format_label(self, d: datetime) -> str:
        return d.strftime(self.label_format)

    def truncate(self, d: datetime) -> datetime:
        """Start of the bucket containing d (weeks start on Monday)."""
        if self is Frequency.HOUR:
            return d.replace(minute=0, second=0, microsecond=0)
        day = d.replace(hour=0, minute=0, second=0, microsecond=0)
        if self is Frequency.DAY:
            return day
        if self is Frequency.WEEK:
            return day - timedelta(days=day.weekday())
        if self is Frequency.MONTH:
            return day.replace(day=1)
        return day.replace(month=1, day=1)


def labels(frequency: Frequency, start: datetime, end: datetime) -> Tuple[List[str], List[str]]:
    """Calendar labels for every bucket from start up to and including end.

    Returns (axis labels, long labels). Each step is computed from start
    (start + n units) so month-end clipping never drifts: 31/01, 29/02, 31/03.
    """
    axis: List[str] = []
    long_labels: List[str] = []
    n = 0
    current = start
    while current <= end:
        axis.append(frequency.format_axis(current))
        long_labels.append(frequency.format_label(current))
        n += 1
        current = start + frequency.step(n)
    return axis, long_labels
