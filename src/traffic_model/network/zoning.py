from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .container import EntityContainer
from .node import Coordinate, Node

# TNTP has no connector geometry; every connectoid gets this length
DEFAULT_CONNECTOID_LENGTH_KM = 1.0


@dataclass(eq=False)
class Zone:
    id: int
    external_id: str
    centroid: Optional[Coordinate] = None

    def __repr__(self):
        return f"Zone({self.external_id})"


@dataclass(eq=False)
class Connectoid:
    id: int
    external_id: str
    zone: Zone
    access_node: Node
    length_km: float = DEFAULT_CONNECTOID_LENGTH_KM

    def __repr__(self):
        return f"Connectoid({self.zone.external_id}<->{self.access_node.external_id})"


class Zoning:

    def __init__(self, coordinate_reference_system: Optional[str] = None):
        self.coordinate_reference_system = coordinate_reference_system
        self.zones: EntityContainer[Zone] = EntityContainer()
        self.connectoids: EntityContainer[Connectoid] = EntityContainer()

    def number_of_zones(self) -> int:
        return len(self.zones)

    def register_new_zone(self, external_id: str,
                          centroid: Optional[Coordinate] = None) -> Zone:
        return self.zones.register_new(Zone, external_id, centroid)

    def register_new_connectoid(
            self, external_id: str, zone: Zone, access_node: Node,
            length_km: float = DEFAULT_CONNECTOID_LENGTH_KM) -> Connectoid:
        return self.connectoids.register_new(Connectoid, external_id, zone,
                                             access_node, length_km)
