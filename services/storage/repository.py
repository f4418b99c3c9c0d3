from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import List, Optional, Protocol

from services.bucketing.errors import InvalidDataType
from services.bucketing.frequency import Frequency


class DataType(Enum):
    CONSO_ELEC = "CONSO_ELEC"
    TEMPERATURE = "TEMPERATURE"
    DJU = "DJU"  # heating degree days
    PRESSURE = "PRESSURE"
    NEBULOSITY = "NEBULOSITY"
    HUMIDITY = "HUMIDITY"

    @classmethod
    def from_key(cls, key: str) -> "DataType":
        try:
            return cls(str(key).strip().upper())
        except ValueError:
            raise InvalidDataType(f"unknown data type '{key}'") from None


class NotFoundError(LookupError):
    pass


class PlaceNotFound(NotFoundError):
    pass


class FeedDataNotFound(NotFoundError):
    pass


@dataclass(frozen=True)
class Place:
    id: str
    name: str


@dataclass(frozen=True)
class FeedData:
    id: str
    place_id: str
    data_type: DataType


# Rows returned by storage queries

@dataclass(frozen=True)
class GridTuple:
    x_key: int
    y_key: int
    value: float
    year: Optional[int] = None  # ISO year, year repartitions only


@dataclass(frozen=True)
class SeriesRow:
    date: datetime  # bucket start
    value: float


@dataclass(frozen=True)
class GroupRow:
    group_key: int
    value: float


@dataclass(frozen=True)
class XYRow:
    date: datetime
    x_value: float
    y_value: float


class DataValueRepository(Protocol):
    """Storage of per-place aggregated measurements.

    Every query returns an empty result rather than failing when no value
    falls in the range. Lookups raise NotFoundError subclasses.
    """

    def find_place(self, place_id: str) -> Place: ...

    def find_feed_data(self, place: Place, data_type: DataType) -> FeedData: ...

    def get_value(self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency) -> List[SeriesRow]: ...

    def get_repartition_value(
        self,
        start: datetime,
        end: datetime,
        feed_data: FeedData,
        x_field: str,
        y_field: str,
        frequency: Frequency,
        repartition_type: str,
    ) -> List[GridTuple]: ...

    def get_sum_value_group_by(
        self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency, group_by: str
    ) -> List[GroupRow]: ...

    def get_sum_value(self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency) -> float: ...

    def get_average_value(self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency) -> Optional[float]: ...

    def get_max_value(self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency) -> Optional[float]: ...

    def get_min_value(self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency) -> Optional[float]: ...

    def get_number_inf_value(
        self, start: datetime, end: datetime, feed_data: FeedData, frequency: Frequency, value: float
    ) -> int: ...

    def get_xy(
        self, start: datetime, end: datetime, feed_data_x: FeedData, feed_data_y: FeedData, frequency: Frequency
    ) -> List[XYRow]: ...
