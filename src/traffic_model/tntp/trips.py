"""Build the OD demand of a TNTP trips file.

After the metadata block the file holds one block per origin::

    Origin 1
        2 :      50.0;    3 :     100.0;

TNTP knows a single mode and a single time period; the demand is stored as
read, without dividing by the period duration.
"""
from __future__ import annotations

import math
import re
from typing import Dict, Iterator, List, Optional, Tuple

from toolz import partition

from traffic_model.exceptions import (ConfigurationError, FormatError,
                                      InvalidReferenceError, TNTPError)
from traffic_model.logging import get_logger
from traffic_model.network import (OdDemandMatrix, RoadNetwork,
                                   TimePeriod, TravelDemand, Zone, Zoning)
from traffic_model.registry import SourceIdRegistries
from traffic_model.utils import Timer, value_or_default

from . import common
from .settings import TripsReaderSettings

logger = get_logger(__name__)

ORIGIN = 'Origin'
TIME_PERIOD_EXTERNAL_ID = '1'

_whitespace = re.compile(r'\s+')
_separators = re.compile(r'[:;]')


def parse_destinations(line: str) -> List[Tuple[str, float]]:
    """Split ``dest : demand; dest : demand; ...`` into pairs."""
    tokens = _separators.split(_whitespace.sub('', line))
    # a closing ';' leaves one empty token behind
    if not tokens[-1]:
        tokens.pop()
    if len(tokens) % 2:
        raise FormatError(
            f"Expected destination:demand pairs, found {line!r}")
    pairs = []
    for destination, value in partition(2, tokens):
        if not destination or not value:
            raise FormatError(
                f"Missing destination or demand in {line!r}")
        try:
            volume = float(value)
        except ValueError as e:
            raise FormatError(
                f"Invalid demand {value!r} for destination {destination}") from e
        if not math.isfinite(volume):
            raise FormatError(
                f"Invalid demand {value!r} for destination {destination}")
        pairs.append((destination, volume))
    return pairs


class TNTPTripsReader:

    def __init__(self, settings: TripsReaderSettings, network: RoadNetwork,
                 zoning: Zoning, demand: Optional[TravelDemand] = None):
        self.settings = settings
        self.network = network
        self.zoning = zoning
        self.demand_to_populate = demand
        self._registries = SourceIdRegistries()

    def reset(self) -> None:
        self._registries.clear()

    def _validate(self) -> None:
        self.settings.validate()
        if self.network is None or not self.network.modes:
            raise ConfigurationError(
                "Network is not provided or empty, unable to create demands")
        if len(self.network.modes) > 1:
            raise ConfigurationError(
                "TNTP demands only support a single mode, found "
                f"{len(self.network.modes)} on the network")
        if self.zoning is None or not self.zoning.number_of_zones():
            raise ConfigurationError(
                "Zoning is not provided or empty, unable to create demands")

    def _create_time_period(self, demand: TravelDemand) -> TimePeriod:
        settings = self.settings
        time_period = demand.register_new_time_period(
            TIME_PERIOD_EXTERNAL_ID,
            settings.time_period_description,
            settings.start_time_seconds,
            settings.duration_seconds,
        )
        self._registries[TimePeriod].register(time_period.external_id,
                                              time_period)
        return time_period

    def read(self) -> TravelDemand:
        timer = Timer().start()
        self._validate()
        self.settings.log_settings(logger)
        demand = value_or_default(self.demand_to_populate, TravelDemand())

        self.reset()
        self._registries.seed(Zone, self.zoning.zones)
        mode = self.network.modes.first()

        source = self.settings.trips_file
        od_demand = OdDemandMatrix(self.zoning.zones)
        with common.open_tntp(source) as lines:
            data = common.read_metadata(lines, source)
            number_of_zones = common.get_int(
                data, common.metadata_tags.number_of_zones, source,
                required=False)
            if (number_of_zones is not None
                    and number_of_zones != self.zoning.number_of_zones()):
                raise FormatError(
                    f"Network file contained {self.zoning.number_of_zones()} "
                    f"zones but trips file indicates {number_of_zones}", source)
            total_od_flow = common.get_float(
                data, common.metadata_tags.total_od_flow, source)
            self._read_origin_blocks(lines, od_demand, source)

        # the demand is only touched once the whole file was read
        time_period = self._create_time_period(demand)
        demand.register_od_demand(time_period, mode, od_demand)
        total = od_demand.total()
        if total_od_flow is not None and not math.isclose(
                total, total_od_flow, rel_tol=1e-6, abs_tol=1e-6):
            logger.warning("Header says total OD flow is %.2f but trips add "
                           "up to %.2f", total_od_flow, total)
        logger.info("TNTP total OD demand: %.2f (%s) over %d OD pairs in %.2fs",
                    total, time_period.description,
                    od_demand.number_of_od_pairs(), timer.time_elapsed())
        return demand

    def _zone(self, source_id: str) -> Zone:
        zone = self._registries[Zone].get(source_id)
        if zone is None:
            raise InvalidReferenceError(f"Unknown zone {source_id}")
        return zone

    def _read_origin_blocks(self, lines: Iterator[common.NumberedLine],
                            od_demand: OdDemandMatrix, source: str) -> None:
        origin = None
        destinations: Dict[Zone, float] = {}
        for line_number, line in lines:
            if not line or common.is_comment(line):
                continue
            try:
                if line.startswith(ORIGIN):
                    if origin is not None:
                        self._update_od_demand(od_demand, origin, destinations)
                    origin = self._parse_origin(line)
                    destinations = {}
                elif origin is None:
                    raise FormatError("Demand found before the first Origin")
                else:
                    # repeated destinations within a block overwrite
                    for destination, value in parse_destinations(line):
                        destinations[self._zone(destination)] = value
            except TNTPError as e:
                logger.error("Unable to read demand on line %d: %s",
                             line_number, e.message)
                raise e.at(source, line_number)
        if origin is not None:
            self._update_od_demand(od_demand, origin, destinations)

    def _parse_origin(self, line: str) -> Zone:
        cols = line.rstrip(common.END_OF_LINE).split()
        if len(cols) < 2:
            raise FormatError(f"Origin line without a zone: {line!r}")
        return self._zone(cols[1])

    @staticmethod
    def _update_od_demand(od_demand: OdDemandMatrix, origin: Zone,
                          destinations: Dict[Zone, float]) -> None:
        """Write one origin's demand, replacing what an earlier block set."""
        for destination, value in destinations.items():
            value = max(value, 0.0)
            od_demand.set_value(origin, destination, value)
