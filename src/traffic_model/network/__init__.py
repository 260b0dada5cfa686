from .node import Node, Coordinate
from .mode import Mode, AccessProperties
from .link import Link, LinkSegment, LinkSegmentType, BprParameters
from .road_network import RoadNetwork
from .zoning import Zone, Connectoid, Zoning
from .demand import TimePeriod, OdDemandMatrix, TravelDemand
