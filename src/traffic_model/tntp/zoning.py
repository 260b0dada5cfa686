"""Derive the zoning of a TNTP network.

TNTP has no zone file: the network file declares ``<NUMBER OF ZONES>`` and
zone ``i`` is connected to node ``i`` through a single connectoid.
"""
from __future__ import annotations

from typing import Optional

from traffic_model.exceptions import ConfigurationError, InvalidReferenceError
from traffic_model.logging import get_logger
from traffic_model.network import Connectoid, Node, RoadNetwork, Zone, Zoning
from traffic_model.network.zoning import DEFAULT_CONNECTOID_LENGTH_KM
from traffic_model.registry import SourceIdRegistries
from traffic_model.utils import value_or_default

from . import common
from .settings import ZoningReaderSettings

logger = get_logger(__name__)


class TNTPZoningReader:

    def __init__(self, settings: ZoningReaderSettings, network: RoadNetwork,
                 zoning: Optional[Zoning] = None):
        self.settings = settings
        self.network = network
        self.zoning_to_populate = zoning
        self._registries = SourceIdRegistries()

    def reset(self) -> None:
        self._registries.clear()

    def _validate(self) -> None:
        self.settings.validate()
        if self.network is None or not self.network.modes or not self.network.nodes:
            raise ConfigurationError(
                "Network is not provided or empty, unable to create zoning")

    def _read_number_of_zones(self) -> int:
        source = self.settings.network_file
        with common.open_tntp(source) as lines:
            data = common.read_metadata(lines, source)
        return common.get_int(data, common.metadata_tags.number_of_zones, source)

    def read(self) -> Zoning:
        self._validate()
        zoning = value_or_default(
            self.zoning_to_populate,
            Zoning(self.network.coordinate_reference_system))
        if zoning.number_of_zones():
            raise ConfigurationError("Cannot populate a non-empty zoning")
        if zoning.coordinate_reference_system is None:
            zoning.coordinate_reference_system = self.network.coordinate_reference_system

        self.reset()
        self._registries.seed(Node, self.network.nodes)
        nodes = self._registries[Node]
        zones = self._registries[Zone]
        connectoids = self._registries[Connectoid]

        number_of_zones = self._read_number_of_zones()
        logger.debug("Populating %d zones", number_of_zones)
        for zone_source_id in map(str, range(1, number_of_zones + 1)):
            node = nodes.get(zone_source_id)
            if node is None:
                raise InvalidReferenceError(
                    f"Zone {zone_source_id} has no node with the same id to "
                    f"connect to", self.settings.network_file)
            zone = zoning.register_new_zone(zone_source_id, node.position)
            zones.register(zone.external_id, zone)
            # TODO: derive connectoid length from node coordinates once a
            #  distance policy for the coordinate reference system exists
            connectoid = zoning.register_new_connectoid(
                zone.external_id, zone, node, DEFAULT_CONNECTOID_LENGTH_KM)
            connectoids.register(connectoid.external_id, connectoid)

        logger.info("Created %d zones and %d connectoids",
                    zoning.number_of_zones(), len(zoning.connectoids))
        return zoning
