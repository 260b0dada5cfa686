"""Build a :class:`RoadNetwork` from a TNTP network file.

Each data row of the network file is one directed link; it becomes a
:class:`Link` with exactly one :class:`LinkSegment`. Segment types are keyed
by the row's link type and the first row of a type defines its capacity and
speed.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Iterator, Mapping, NamedTuple, Optional

from marshmallow import Schema, ValidationError, fields, post_load, validate

from traffic_model.exceptions import (FormatError, InvalidReferenceError,
                                      ConfigurationError, TNTPError)
from traffic_model.logging import get_logger
from traffic_model.network import (AccessProperties, BprParameters, Coordinate,
                                   Link, LinkSegment, LinkSegmentType, Mode,
                                   Node, RoadNetwork)
from traffic_model.registry import SourceIdRegistries
from traffic_model.utils import Timer, is_positive, value_or_default

from . import common
from .columns import NetworkFileColumns
from .settings import NetworkReaderSettings

logger = get_logger(__name__)

MODE_EXTERNAL_ID = '1'

# link types whose free flow speed follows from length and free flow time
LENGTH_BASED_LINK_TYPES = (1, 2)
SPEED_BASED_LINK_TYPES = (3,)


class LinkRow(NamedTuple):
    from_node: str
    to_node: str
    capacity: float
    length: float
    free_flow_time: float
    speed_limit: float
    link_type: int
    b: Optional[float] = None
    power: Optional[float] = None
    toll: Optional[float] = None


node_id = validate.Regexp(r'^\d+$', error="Node ids must be non-negative integers")


class LinkRowSchema(Schema):
    from_node = fields.String(validate=node_id)
    to_node = fields.String(validate=node_id)
    capacity = fields.Float()
    length = fields.Float()
    free_flow_time = fields.Float()
    b = fields.Float()
    power = fields.Float()
    speed_limit = fields.Float(allow_nan=True)
    toll = fields.Float()
    link_type = fields.Integer()

    @post_load
    def to_link_row(self, data: dict, **kw) -> LinkRow:
        return LinkRow(**data)


class TNTPNetworkReader:

    def __init__(self, settings: NetworkReaderSettings,
                 network: Optional[RoadNetwork] = None):
        self.settings = settings
        self.network_to_populate = network
        self._registries = SourceIdRegistries()
        self._bpr_parameters = {}
        self._row_schema = LinkRowSchema()
        self._number_of_nodes = 0
        self._number_of_links = 0

    @property
    def bpr_parameters(self) -> Mapping[LinkSegment, BprParameters]:
        """BPR parameters of the link segments whose rows supplied them."""
        return MappingProxyType(self._bpr_parameters)

    def reset(self) -> None:
        self._registries.clear()
        self._bpr_parameters = {}

    def read(self) -> RoadNetwork:
        timer = Timer().start()
        settings = self.settings
        settings.validate()
        settings.log_settings(logger)

        network = value_or_default(self.network_to_populate, RoadNetwork())
        if not network.is_empty():
            raise ConfigurationError("Cannot populate a non-empty network")
        if settings.coordinate_reference_system is None:
            logger.info("Source CRS not set, assuming cartesian coordinates")
        else:
            logger.info("Source CRS set to %s",
                        settings.coordinate_reference_system)
        network.coordinate_reference_system = settings.coordinate_reference_system

        self.reset()
        # TNTP only has one mode
        mode = network.register_new_mode(MODE_EXTERNAL_ID)
        self._registries[Mode].register(mode.external_id, mode)

        source = settings.network_file
        with common.open_tntp(source) as lines:
            data = common.read_metadata(lines, source)
            self._number_of_nodes = common.get_int(
                data, common.metadata_tags.number_of_nodes, source)
            self._number_of_links = common.get_int(
                data, common.metadata_tags.number_of_links, source)
            number_of_rows = self._read_link_rows(network, mode, lines, source)

        if number_of_rows != self._number_of_links:
            message = (f"Header says {self._number_of_links} links but "
                       f"{number_of_rows} were actually defined")
            logger.error(message)
            raise FormatError(message, source)

        if settings.node_coordinate_file is not None:
            self._read_node_coordinates(settings.node_coordinate_file)

        logger.info("Read %d nodes, %d links and %d link segment types in %.2fs",
                    network.number_of_nodes(), network.number_of_links(),
                    len(network.link_segment_types), timer.time_elapsed())
        return network

    def _read_link_rows(self, network: RoadNetwork, mode: Mode,
                        lines: Iterator[common.NumberedLine],
                        source: str) -> int:
        """Read the data section; rows only start after the ``~`` header."""
        reading_link_data = False
        row_id = 0
        for line_number, line in lines:
            if common.is_comment(line):
                reading_link_data = True
                continue
            if not reading_link_data or not line:
                continue
            row_id += 1
            try:
                self._read_link_data(network, mode, line, row_id)
            except TNTPError as e:
                logger.error("Unable to read link on line %d: %s",
                             line_number, e.message)
                raise e.at(source, line_number)
        return row_id

    def _parse_row(self, line: str) -> LinkRow:
        tokens = line.rstrip(common.END_OF_LINE).split()
        columns = self.settings.columns
        if len(tokens) < columns.width:
            raise FormatError(f"Expected at least {columns.width} columns, "
                              f"found {len(tokens)}")
        try:
            return self._row_schema.load(columns.extract(tokens))
        except ValidationError as e:
            raise FormatError(f"Invalid link row: {e.messages}") from e

    def _collect_or_create_node(self, network: RoadNetwork,
                                source_id: str) -> Node:
        if int(source_id) > self._number_of_nodes:
            raise InvalidReferenceError(
                f"Number of nodes is specified as {self._number_of_nodes} "
                f"but found a reference to node {source_id}")
        return self._registries[Node].get_or_create(
            source_id, lambda: network.register_new_node(source_id))

    def _free_flow_speed(self, link_type: int, length_km: float,
                         free_flow_time_h: float, maximum_speed_kmh: float) -> float:
        if link_type in LENGTH_BASED_LINK_TYPES:
            if is_positive(length_km) and is_positive(free_flow_time_h):
                return (length_km / free_flow_time_h
                        * self.settings.speed_units.multiplier)
            return maximum_speed_kmh
        if link_type in SPEED_BASED_LINK_TYPES:
            return maximum_speed_kmh
        raise FormatError(f"Unsupported link type {link_type}")

    def _read_link_data(self, network: RoadNetwork, mode: Mode, line: str,
                        row_id: int) -> None:
        settings = self.settings
        row = self._parse_row(line)

        upstream_node = self._collect_or_create_node(network, row.from_node)
        downstream_node = self._collect_or_create_node(network, row.to_node)
        length_km = settings.length_units.convert(row.length)
        link = network.register_new_link(str(row_id), upstream_node,
                                         downstream_node, length_km)
        self._registries[Link].register(link.external_id, link)

        maximum_speed_kmh = settings.speed_units.convert(
            settings.default_maximum_speed)
        if is_positive(row.speed_limit):
            maximum_speed_kmh = settings.speed_units.convert(row.speed_limit)
        free_flow_time_h = settings.free_flow_travel_time_units.convert(
            row.free_flow_time)
        capacity_per_lane = row.capacity * settings.capacity_per_hour_multiplier
        free_flow_speed_kmh = self._free_flow_speed(
            row.link_type, length_km, free_flow_time_h, maximum_speed_kmh)

        # first row of a type defines it, later rows reuse it untouched
        link_segment_type = self._registries[LinkSegmentType].get_or_create(
            str(row.link_type),
            lambda: network.register_new_link_segment_type(
                str(row.link_type), capacity_per_lane,
                {mode: AccessProperties(free_flow_speed_kmh,
                                        free_flow_speed_kmh)},
            ),
        )

        link_segment = network.register_new_link_segment(
            str(row_id), link, link_segment_type, maximum_speed_kmh,
            free_flow_time_h)
        self._registries[LinkSegment].register(link_segment.external_id,
                                               link_segment)

        columns = settings.columns
        has_alpha = columns.has(NetworkFileColumns.B)
        has_beta = columns.has(NetworkFileColumns.POWER)
        if has_alpha or has_beta:
            default = BprParameters()
            self._bpr_parameters[link_segment] = BprParameters(
                row.b if has_alpha else default.alpha,
                row.power if has_beta else default.beta,
            )

    def _read_node_coordinates(self, path: str) -> None:
        registry = self._registries[Node]
        with common.open_tntp(path) as lines:
            for line_number, line in lines:
                line = line.replace(common.END_OF_LINE, '').strip()
                if not line or not line[0].isdigit():
                    continue
                cols = line.split()
                try:
                    position = Coordinate(float(cols[1]), float(cols[2]))
                except (IndexError, ValueError) as e:
                    raise FormatError(f"Invalid node coordinates {line!r}",
                                      path, line_number) from e
                node = registry.get(cols[0])
                if node is None:
                    raise InvalidReferenceError(
                        f"Node {cols[0]} in node coordinate file is not "
                        f"part of the network", path, line_number)
                node.position = position
        logger.debug("Read node coordinates from %s", path)
