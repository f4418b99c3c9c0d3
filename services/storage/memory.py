from __future__ import annotations
from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple
import json
import logging
import threading

from services.bucketing.errors import ConfigurationError
from services.bucketing.frequency import Frequency
from services.storage.repository import (
    DataType,
    FeedData,
    FeedDataNotFound,
    GridTuple,
    GroupRow,
    Place,
    PlaceNotFound,
    SeriesRow,
    XYRow,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataValue:
    feed_data_id: str
    date: datetime  # bucket start
    frequency: Frequency
    value: float


# Calendar coordinates a query may group on (weekDay: 0=Monday).
FIELDS: Dict[str, Callable[[datetime], int]] = {
    "weekDay": lambda d: d.weekday(),
    "hour": lambda d: d.hour,
    "week": lambda d: d.isocalendar()[1],
}


def _field(name: str) -> Callable[[datetime], int]:
    try:
        return FIELDS[name]
    except KeyError:
        raise ConfigurationError(f"cannot group on '{name}'") from None


class InMemoryRepository:
    """Process-local store of pre-aggregated values, one per bucket and frequency."""

    def __init__(self):
        self._places: Dict[str, Place] = {}
        self._feeds: Dict[Tuple[str, DataType], FeedData] = {}
        self._values: Dict[Tuple[str, Frequency], List[DataValue]] = defaultdict(list)
        self._lock = threading.Lock()

    @classmethod
    def from_json(cls, path: str | Path) -> "InMemoryRepository":
        """Load a seed file:

        {"places": [{"id": "p1", "name": "...", "feeds": {"temperature": {"DAY": [["2020-01-01", 4.5]]}}}]}
        """
        data = json.loads(Path(path).read_text())
        repo = cls()
        for p in data.get("places", []):
            place = repo.add_place(str(p["id"]), p.get("name") or str(p["id"]))
            for dtype, by_freq in (p.get("feeds") or {}).items():
                feed = repo.add_feed_data(place.id, DataType.from_key(dtype))
                for freq, points in by_freq.items():
                    frequency = Frequency.from_key(freq)
                    for d, v in points:
                        repo.add_value(feed, datetime.fromisoformat(d), frequency, float(v))
        logger.info("loaded %d places from %s", len(repo._places), path)
        return repo

    def add_place(self, place_id: str, name: str) -> Place:
        place = Place(id=place_id, name=name)
        with self._lock:
            self._places[place_id] = place
        return place

    def add_feed_data(self, place_id: str, data_type: DataType) -> FeedData:
        feed = FeedData(id=f"{place_id}:{data_type.value}", place_id=place_id, data_type=data_type)
        with self._lock:
            self._feeds[(place_id, data_type)] = feed
        return feed

    def add_value(self, feed_data: FeedData, date: datetime, frequency: Frequency, value: float) -> None:
        with self._lock:
            self._values[(feed_data.id, frequency)].append(
                DataValue(feed_data_id=feed_data.id, date=frequency.truncate(date), frequency=frequency, value=value)
            )

    # Lookups

    def find_place(self, place_id: str) -> Place:
        with self._lock:
            place = self._places.get(place_id)
        if place is None:
            raise PlaceNotFound(f"place '{place_id}' does not exist")
        return place

    def find_feed_data(self, place: Place, data_type: DataType) -> FeedData:
        with self._lock:
            feed = self._feeds.get((place.id, data_type))
        if feed is None:
            raise FeedDataNotFound(f"no {data_type.value} feed for place '{place.id}'")
        return feed

    # Queries

    def _select(self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency) -> List[DataValue]:
        with self._lock:
            rows = list(self._values.get((feed_data.id, frequency), ()))
        rows = [r for r in rows if start <= r.date <= end]
        rows.sort(key=lambda r: r.date)
        return rows

    def get_value(self, start, end, feed_data, frequency) -> List[SeriesRow]:
        return [SeriesRow(date=r.date, value=r.value) for r in self._select(start, end, feed_data, frequency)]

    def get_repartition_value(self, start, end, feed_data, x_field, y_field, frequency, repartition_type) -> List[GridTuple]:
        """Average of the values sharing the same (x, y) coordinates.

        Year repartitions also group on the ISO year, so a week number is
        never merged across years.
        """
        fx, fy = _field(x_field), _field(y_field)
        with_year = str(repartition_type).upper() != "WEEK"
        groups: Dict[Tuple[int, int, Optional[int]], List[float]] = defaultdict(list)
        for r in self._select(start, end, feed_data, frequency):
            year = r.date.isocalendar()[0] if with_year else None
            groups[(fx(r.date), fy(r.date), year)].append(r.value)
        out: List[GridTuple] = []
        for (x, y, year), vals in sorted(groups.items(), key=lambda kv: (kv[0][2] or 0, kv[0][0], kv[0][1])):
            out.append(GridTuple(x_key=x, y_key=y, value=sum(vals) / len(vals), year=year))
        return out

    def get_sum_value_group_by(self, start, end, feed_data, frequency, group_by) -> List[GroupRow]:
        fg = _field(group_by)
        sums: Dict[int, float] = defaultdict(float)
        for r in self._select(start, end, feed_data, frequency):
            sums[fg(r.date)] += r.value
        return [GroupRow(group_key=k, value=v) for k, v in sorted(sums.items())]

    def get_sum_value(self, start, end, feed_data, frequency) -> float:
        return float(sum(r.value for r in self._select(start, end, feed_data, frequency)))

    def get_average_value(self, start, end, feed_data, frequency) -> Optional[float]:
        vals = [r.value for r in self._select(start, end, feed_data, frequency)]
        return sum(vals) / len(vals) if vals else None

    def get_max_value(self, start, end, feed_data, frequency) -> Optional[float]:
        return max((r.value for r in self._select(start, end, feed_data, frequency)), default=None)

    def get_min_value(self, start, end, feed_data, frequency) -> Optional[float]:
        return min((r.value for r in self._select(start, end, feed_data, frequency)), default=None)

    def get_number_inf_value(self, start, end, feed_data, frequency, value) -> int:
        return sum(1 for r in self._select(start, end, feed_data, frequency) if r.value < value)

    def get_xy(self, start, end, feed_data_x, feed_data_y, frequency) -> List[XYRow]:
        ys = {r.date: r.value for r in self._select(start, end, feed_data_y, frequency)}
        return [
            XYRow(date=r.date, x_value=r.value, y_value=ys[r.date])
            for r in self._select(start, end, feed_data_x, frequency)
            if r.date in ys
        ]
