from __future__ import annotations
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from services.bucketing.axes import RepartitionType, build_evolution_axis, build_repartition_axes
from services.bucketing.frequency import Frequency
from services.charts.grid import repartition_grid
from services.charts.series import build_evolution_series, build_group_by_series, build_xy_series
from services.storage.repository import DataType, DataValueRepository, FeedData


def _feed(repo: DataValueRepository, place_id: str, data_type: DataType) -> FeedData:
    # Lookup errors propagate to the caller unchanged.
    return repo.find_feed_data(repo.find_place(place_id), data_type)


def repartition(
    repo: DataValueRepository,
    place_id: str,
    data_type: DataType,
    repartition_type: RepartitionType,
    start: datetime,
    end: datetime,
    weekday_labels: Sequence[str],
) -> Dict[str, Any]:
    """Heatmap payload: {"axe": {x, y, year?}, "data": {values, dates}}."""
    feed = _feed(repo, place_id, data_type)
    axes = build_repartition_axes(repartition_type, start, end, weekday_labels)
    aggregates = repo.get_repartition_value(
        start, end, feed, axes.x_field, axes.y_field, axes.frequency, repartition_type.value
    )
    grid = repartition_grid(axes, repartition_type, aggregates)
    return {"axe": axes.axis.to_dict(), "data": grid.to_dict()}


def evolution(
    repo: DataValueRepository,
    place_id: str,
    data_type: DataType,
    frequency: Frequency,
    start: datetime,
    end: datetime,
) -> Dict[str, Any]:
    feed = _feed(repo, place_id, data_type)
    # Storage dates rows at their bucket start; align the axis with it.
    start = frequency.truncate(start)
    results = repo.get_value(start, end, feed, frequency)
    axis = build_evolution_axis(frequency, start, end)
    return build_evolution_series(axis, frequency, results).to_dict()


def sum_group_by(
    repo: DataValueRepository,
    place_id: str,
    data_type: DataType,
    frequency: Frequency,
    group_by: str,
    start: datetime,
    end: datetime,
    weekday_labels: Sequence[str],
) -> Dict[str, Any]:
    feed = _feed(repo, place_id, data_type)
    rows = repo.get_sum_value_group_by(start, end, feed, frequency, group_by)
    return build_group_by_series(weekday_labels, rows).to_dict()


def total(repo: DataValueRepository, place_id: str, data_type: DataType, start: datetime, end: datetime) -> float:
    feed = _feed(repo, place_id, data_type)
    return repo.get_sum_value(start, end, feed, Frequency.DAY)


def statistic(
    repo: DataValueRepository,
    place_id: str,
    data_type: DataType,
    frequency: Frequency,
    start: datetime,
    end: datetime,
    kind: str,
) -> Optional[float]:
    """avg | max | min of the bucket values in range (None when there are none)."""
    feed = _feed(repo, place_id, data_type)
    query = {
        "avg": repo.get_average_value,
        "max": repo.get_max_value,
        "min": repo.get_min_value,
    }[kind]
    return query(start, end, feed, frequency)


def count_below(
    repo: DataValueRepository,
    place_id: str,
    data_type: DataType,
    threshold: float,
    frequency: Frequency,
    start: datetime,
    end: datetime,
) -> int:
    feed = _feed(repo, place_id, data_type)
    return repo.get_number_inf_value(start, end, feed, frequency, threshold)


def xy(
    repo: DataValueRepository,
    place_id: str,
    data_type_x: DataType,
    data_type_y: DataType,
    frequency: Frequency,
    start: datetime,
    end: datetime,
) -> Dict[str, Any]:
    place = repo.find_place(place_id)
    feed_x = repo.find_feed_data(place, data_type_x)
    feed_y = repo.find_feed_data(place, data_type_y)
    rows = repo.get_xy(start, end, feed_x, feed_y, frequency)
    return build_xy_series(frequency, rows).to_dict()
