from __future__ import annotations

from typing import Dict, Optional

import networkx as nx

from .container import EntityContainer
from .link import Link, LinkSegment, LinkSegmentType
from .mode import AccessProperties, Mode
from .node import Node


class RoadNetwork:
    """A single-layer macroscopic road network.

    Entities are only ever added; lookups by external id are the business of
    the readers that build the network.
    """
    NODE_KEY = 'node'
    LINK_SEGMENT_KEY = 'link_segment'

    def __init__(self, coordinate_reference_system: Optional[str] = None):
        self.coordinate_reference_system = coordinate_reference_system
        self.modes: EntityContainer[Mode] = EntityContainer()
        self.nodes: EntityContainer[Node] = EntityContainer()
        self.links: EntityContainer[Link] = EntityContainer()
        self.link_segments: EntityContainer[LinkSegment] = EntityContainer()
        self.link_segment_types: EntityContainer[LinkSegmentType] = EntityContainer()

    def is_empty(self) -> bool:
        return not (self.modes or self.nodes or self.links)

    def number_of_nodes(self) -> int:
        return len(self.nodes)

    def number_of_links(self) -> int:
        return len(self.links)

    def register_new_mode(self, external_id: str, name: str = 'car',
                          pcu: float = 1.0) -> Mode:
        return self.modes.register_new(Mode, external_id, name, pcu)

    def register_new_node(self, external_id: str) -> Node:
        return self.nodes.register_new(Node, external_id)

    def register_new_link(self, external_id: str, node_a: Node, node_b: Node,
                          length_km: float) -> Link:
        return self.links.register_new(Link, external_id, node_a, node_b,
                                       length_km)

    def register_new_link_segment_type(
            self, external_id: str, capacity_per_lane: float,
            access_properties: Dict[Mode, AccessProperties]
    ) -> LinkSegmentType:
        return self.link_segment_types.register_new(
            LinkSegmentType, external_id, capacity_per_lane,
            access_properties=dict(access_properties),
        )

    def register_new_link_segment(self, external_id: str, link: Link,
                                  link_segment_type: LinkSegmentType,
                                  maximum_speed_kmh: float,
                                  free_flow_travel_time_h: float) -> LinkSegment:
        return self.link_segments.register_new(
            LinkSegment, external_id, link, link_segment_type,
            maximum_speed_kmh, free_flow_travel_time_h,
        )

    def to_networkx_graph(self) -> nx.DiGraph:
        """A directed graph keyed by node external id, one edge per segment."""
        graph = nx.DiGraph(crs=self.coordinate_reference_system)
        for node in self.nodes:
            graph.add_node(node.external_id, **{self.NODE_KEY: node})
        for segment in self.link_segments:
            graph.add_edge(
                segment.upstream_node.external_id,
                segment.downstream_node.external_id,
                **{
                    self.LINK_SEGMENT_KEY: segment,
                    'length': segment.length_km,
                    'capacity': segment.capacity_per_lane,
                    'free_flow_travel_time': segment.free_flow_travel_time_h,
                    'maximum_speed': segment.maximum_speed_kmh,
                }
            )
        return graph
