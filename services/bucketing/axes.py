from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from services.bucketing.errors import ConfigurationError, InvalidRepartitionType
from services.bucketing.frequency import Frequency, labels

Label = Union[str, int]


class RepartitionType(Enum):
    WEEK = "WEEK"
    YEAR_HORIZONTAL = "YEAR_H"
    YEAR_VERTICAL = "YEAR_V"

    @classmethod
    def from_key(cls, key: str) -> "RepartitionType":
        try:
            return cls(str(key).strip().upper())
        except ValueError:
            raise InvalidRepartitionType(f"unknown repartition type '{key}'") from None

    @property
    def week_style(self) -> bool:
        return self is RepartitionType.WEEK


@dataclass(frozen=True)
class Axis:
    x: Tuple[Label, ...]
    y: Tuple[Label, ...]
    year: Optional[Tuple[int, ...]] = None  # ISO year of each week label

    def swapped(self) -> "Axis":
        return Axis(x=self.y, y=self.x, year=self.year)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"x": list(self.x), "y": list(self.y)}
        if self.year is not None:
            out["year"] = list(self.year)
        return out


@dataclass(frozen=True)
class RepartitionAxes:
    axis: Axis
    x_field: str
    y_field: str
    frequency: Frequency


@dataclass(frozen=True)
class EvolutionAxis:
    x: Tuple[str, ...]
    label: Tuple[str, ...]


HOURS_PER_DAY = 24


def hour_labels() -> Tuple[str, ...]:
    """'00h'..'24h': 24 hourly buckets plus the closing boundary."""
    return tuple(f"{h:02d}h" for h in range(HOURS_PER_DAY + 1))


def widen_to_sunday(end: datetime) -> datetime:
    # w: 0=Sunday..6=Saturday; a Sunday end moves a full week forward
    w = end.isoweekday() % 7
    return end + timedelta(days=7 - w)


def iso_weeks(start: datetime, end: datetime) -> Tuple[List[int], List[int]]:
    """ISO (week numbers, ISO years) stepping weekly from start through the widened end."""
    weeks: List[int] = []
    years: List[int] = []
    last = widen_to_sunday(end)
    current = start
    while current <= last:
        iso_year, iso_week, _ = current.isocalendar()
        weeks.append(iso_week)
        years.append(iso_year)
        current += timedelta(weeks=1)
    return weeks, years


def _check_weekday_labels(weekday_labels: Sequence[str]) -> Tuple[str, ...]:
    out = tuple(weekday_labels)
    if len(out) != 7:
        raise ConfigurationError(f"expected 7 weekday labels, got {len(out)}")
    return out


def build_repartition_axes(
    repartition_type: RepartitionType,
    start: datetime,
    end: datetime,
    weekday_labels: Sequence[str],
) -> RepartitionAxes:
    """Axis definition of a repartition (heatmap) chart.

    - WEEK: weekdays on X, hours on Y, hourly buckets
    - YEAR_H: ISO weeks on X, weekdays on Y, daily buckets
    - YEAR_V: weekdays on X, ISO weeks on Y, daily buckets
    """
    days = _check_weekday_labels(weekday_labels)
    if repartition_type is RepartitionType.WEEK:
        return RepartitionAxes(
            axis=Axis(x=days, y=hour_labels()),
            x_field="weekDay",
            y_field="hour",
            frequency=Frequency.HOUR,
        )
    if repartition_type in (RepartitionType.YEAR_HORIZONTAL, RepartitionType.YEAR_VERTICAL):
        weeks, years = iso_weeks(start, end)
        axis = Axis(x=tuple(weeks), y=days, year=tuple(years))
        if repartition_type is RepartitionType.YEAR_VERTICAL:
            axis = axis.swapped()
        return RepartitionAxes(axis=axis, x_field="week", y_field="weekDay", frequency=Frequency.DAY)
    raise InvalidRepartitionType(f"unknown repartition type '{repartition_type}'")


def build_evolution_axis(frequency: Frequency, start: datetime, end: datetime) -> EvolutionAxis:
    x, long_labels = labels(frequency, start, end)
    return EvolutionAxis(x=tuple(x), label=tuple(long_labels))
