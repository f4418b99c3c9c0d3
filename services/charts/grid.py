from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Tuple, Union
import logging

from services.bucketing.axes import Axis, RepartitionAxes, RepartitionType
from services.bucketing.grid_index import cell_count, cell_index, reconstruct_date
from services.storage.repository import GridTuple

logger = logging.getLogger(__name__)

# Marks a cell without data; charts must not render it as 0.
BLANK = ""

YEAR_DATE_FORMAT = "%d/%m/%y"

Cell = Union[float, str]


@dataclass(frozen=True)
class Grid:
    values: Tuple[Cell, ...]
    dates: Tuple[str, ...]  # bucket description, aligned with values

    def to_dict(self) -> Dict[str, Any]:
        return {"values": list(self.values), "dates": list(self.dates)}


def _week_descriptions(axis: Axis) -> List[str]:
    out = [""] * cell_count(len(axis.x), len(axis.y), week_style=True)
    for x, day in enumerate(axis.x):
        for y in range(len(axis.y) - 1):
            # e.g. 'Lun. 12h -> 13h'
            out[cell_index(x, y, len(axis.y), week_style=True)] = f"{day} {axis.y[y]} -> {axis.y[y + 1]}"
    return out


def _year_descriptions(axis: Axis) -> List[str]:
    if axis.year is None or len(axis.year) != len(axis.x):
        raise ValueError("year-style axis needs one ISO year per week label")
    out = [""] * cell_count(len(axis.x), len(axis.y))
    for x, week in enumerate(axis.x):
        for y in range(len(axis.y)):
            day = reconstruct_date(axis.year[x], int(week), y + 1)
            out[cell_index(x, y, len(axis.y))] = day.strftime(YEAR_DATE_FORMAT)
    return out


def _merge_week(axis: Axis, values: List[Cell], aggregates: Iterable[GridTuple]) -> None:
    rows = len(axis.y) - 1
    for t in aggregates:
        if not (0 <= t.x_key < len(axis.x) and 0 <= t.y_key < rows):
            logger.debug("dropping week tuple outside grid: x=%s y=%s", t.x_key, t.y_key)
            continue
        values[cell_index(t.x_key, t.y_key, len(axis.y), week_style=True)] = t.value


def _merge_year(dates: List[str], values: List[Cell], aggregates: Iterable[GridTuple]) -> None:
    # Tuples are matched on their rebuilt calendar date, not on raw keys, so
    # rows keyed on the neighbouring ISO year still land on the right day.
    position: Dict[str, int] = {}
    for i, d in enumerate(dates):
        position.setdefault(d, i)
    for t in aggregates:
        if t.year is None:
            logger.debug("dropping year tuple without ISO year: x=%s y=%s", t.x_key, t.y_key)
            continue
        key = reconstruct_date(t.year, t.x_key, t.y_key + 1).strftime(YEAR_DATE_FORMAT)
        i = position.get(key)
        if i is None:
            logger.debug("dropping year tuple outside axis: %s", key)
            continue
        values[i] = t.value


def build_grid(axis: Axis, week_style: bool, aggregates: Iterable[GridTuple]) -> Grid:
    """Dense grid for axis with aggregates merged in.

    The grid size and order depend on the axis only. Cells with no matching
    tuple hold BLANK; tuples that match no cell are dropped.
    """
    size = cell_count(len(axis.x), len(axis.y), week_style=week_style)
    values: List[Cell] = [BLANK] * size
    if week_style:
        dates = _week_descriptions(axis)
        _merge_week(axis, values, aggregates)
    else:
        dates = _year_descriptions(axis)
        _merge_year(dates, values, aggregates)
    return Grid(values=tuple(values), dates=tuple(dates))


def repartition_grid(
    axes: RepartitionAxes, repartition_type: RepartitionType, aggregates: Iterable[GridTuple]
) -> Grid:
    if repartition_type is RepartitionType.YEAR_VERTICAL:
        # Same week-major cell order as YEAR_H; only the displayed axis is swapped.
        return build_grid(axes.axis.swapped(), False, aggregates)
    return build_grid(axes.axis, repartition_type.week_style, aggregates)
