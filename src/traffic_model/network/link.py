from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, NamedTuple, Optional

from .mode import AccessProperties, Mode
from .node import Node

DEFAULT_MAX_DENSITY_PCU_KM_LANE = 180.0


class BprParameters(NamedTuple):
    alpha: float = 0.15
    beta: float = 4.0


@dataclass(eq=False)
class Link:
    id: int
    external_id: str
    node_a: Node
    node_b: Node
    length_km: float

    def __repr__(self):
        return f"Link({self.external_id}: {self.node_a.external_id}->{self.node_b.external_id})"


@dataclass(eq=False)
class LinkSegmentType:
    id: int
    external_id: str
    capacity_per_lane: float
    maximum_density_per_lane: float = DEFAULT_MAX_DENSITY_PCU_KM_LANE
    access_properties: Dict[Mode, AccessProperties] = field(
        default_factory=dict)

    def maximum_speed_kmh(self, mode: Mode) -> Optional[float]:
        properties = self.access_properties.get(mode)
        return None if properties is None else properties.maximum_speed_kmh

    def __repr__(self):
        return f"LinkSegmentType({self.external_id})"


@dataclass(eq=False)
class LinkSegment:
    """The directed, traversable part of a link.

    ``maximum_speed_kmh`` is set per segment and takes precedence over the
    speed of the segment's type.
    """
    id: int
    external_id: str
    parent_link: Link
    link_segment_type: LinkSegmentType
    maximum_speed_kmh: float
    free_flow_travel_time_h: float
    direction_ab: bool = True

    @property
    def upstream_node(self) -> Node:
        return self.parent_link.node_a if self.direction_ab else self.parent_link.node_b

    @property
    def downstream_node(self) -> Node:
        return self.parent_link.node_b if self.direction_ab else self.parent_link.node_a

    @property
    def length_km(self) -> float:
        return self.parent_link.length_km

    @property
    def capacity_per_lane(self) -> float:
        return self.link_segment_type.capacity_per_lane

    def __repr__(self):
        return (f"LinkSegment({self.external_id}: "
                f"{self.upstream_node.external_id}->{self.downstream_node.external_id})")
