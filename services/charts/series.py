from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Sequence, Tuple
import logging

from services.bucketing.axes import EvolutionAxis
from services.bucketing.frequency import Frequency
from services.storage.repository import GroupRow, SeriesRow, XYRow

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Series:
    label: Tuple[str, ...]
    axe_x: Tuple[str, ...]
    axe_y: Tuple[float, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"label": list(self.label), "axeX": list(self.axe_x), "axeY": list(self.axe_y)}


@dataclass(frozen=True)
class XYSeries:
    axe_x: Tuple[float, ...]
    axe_y: Tuple[float, ...]
    date: Tuple[str, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"axeX": list(self.axe_x), "axeY": list(self.axe_y), "date": list(self.date)}


def build_evolution_series(axis: EvolutionAxis, frequency: Frequency, results: Iterable[SeriesRow]) -> Series:
    """Align storage rows on the calendar axis; buckets without a row are 0.

    Rows are joined on the date formatted with the same pattern that built
    axis.x. Rows whose bucket is not on the axis are dropped.
    """
    position: Dict[str, int] = {}
    for i, x in enumerate(axis.x):
        position.setdefault(x, i)
    values: List[float] = [0] * len(axis.x)
    for r in results:
        key = frequency.format_axis(r.date)
        i = position.get(key)
        if i is None:
            logger.debug("dropping %s row outside axis: %s", frequency.name, key)
            continue
        values[i] = r.value
    return Series(label=axis.label, axe_x=axis.x, axe_y=tuple(values))


def build_group_by_series(labels: Sequence[str], rows: Iterable[GroupRow]) -> Series:
    """Align group-by rows on a fixed categorical axis (ordinal 0..len-1).

    Ordinals outside the axis are ignored; missing categories are 0.
    """
    values: List[float] = [0] * len(labels)
    for r in rows:
        k = r.group_key
        if not isinstance(k, int) or isinstance(k, bool) or not (0 <= k < len(labels)):
            logger.warning("ignoring group key outside 0..%d: %r", len(labels) - 1, k)
            continue
        values[k] = r.value
    return Series(label=tuple(labels), axe_x=tuple(labels), axe_y=tuple(values))


def build_xy_series(frequency: Frequency, rows: Iterable[XYRow]) -> XYSeries:
    """Scatter points of two data types sharing a bucket, in storage order."""
    xs: List[float] = []
    ys: List[float] = []
    dates: List[str] = []
    for r in rows:
        xs.append(r.x_value)
        ys.append(r.y_value)
        dates.append(frequency.format_label(r.date))
    return XYSeries(axe_x=tuple(xs), axe_y=tuple(ys), date=tuple(dates))
