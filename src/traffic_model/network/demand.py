from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from scipy.sparse import dok_matrix

from .container import EntityContainer
from .mode import Mode
from .zoning import Zone

SECONDS_PER_HOUR = 3600


@dataclass(eq=False)
class TimePeriod:
    id: int
    external_id: str
    description: str
    start_time_seconds: int
    duration_seconds: int

    @property
    def duration_hours(self) -> float:
        return self.duration_seconds / SECONDS_PER_HOUR

    def __repr__(self):
        return f"TimePeriod({self.description})"


class Demand(NamedTuple):
    origin: Zone
    destination: Zone
    volume: float


class OdDemandMatrix:
    """Sparse origin-destination demand between the zones of a zoning.

    Zones index the matrix by their internal id; pairs that were never set
    read as 0.0.
    """

    def __init__(self, zones: Sequence[Zone]):
        self.zones = zones
        n = len(zones)
        self._data = dok_matrix((n, n), dtype=np.float64)

    def set_value(self, origin: Zone, destination: Zone, value: float) -> None:
        self._data[origin.id, destination.id] = value

    def get_value(self, origin: Zone, destination: Zone) -> float:
        return float(self._data[origin.id, destination.id])

    def number_of_od_pairs(self) -> int:
        return self._data.nnz

    def total(self) -> float:
        return float(self._data.sum())

    def to_array(self) -> np.ndarray:
        return self._data.toarray()

    def __iter__(self) -> Iterator[Demand]:
        for (i, j), volume in sorted(self._data.items()):
            yield Demand(self.zones[i], self.zones[j], float(volume))

    def __len__(self) -> int:
        return self.number_of_od_pairs()


class TravelDemand:
    """OD demand per time period and mode."""

    def __init__(self):
        self.time_periods: EntityContainer[TimePeriod] = EntityContainer()
        self._od_demands: Dict[Tuple[TimePeriod, Mode], OdDemandMatrix] = {}

    def register_new_time_period(self, external_id: str, description: str,
                                 start_time_seconds: int,
                                 duration_seconds: int) -> TimePeriod:
        return self.time_periods.register_new(
            TimePeriod, external_id, description, start_time_seconds,
            duration_seconds)

    def register_od_demand(self, time_period: TimePeriod, mode: Mode,
                           od_demand: OdDemandMatrix) -> None:
        self._od_demands[time_period, mode] = od_demand

    def od_demand(self, time_period: TimePeriod,
                  mode: Mode) -> Optional[OdDemandMatrix]:
        return self._od_demands.get((time_period, mode))

    def __iter__(self) -> Iterator[Tuple[Tuple[TimePeriod, Mode], OdDemandMatrix]]:
        return iter(self._od_demands.items())

    def __len__(self):
        return len(self._od_demands)
