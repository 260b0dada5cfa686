from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from traffic_model.logging import get_logger
from traffic_model.network import (BprParameters, LinkSegment, RoadNetwork,
                                   TravelDemand, Zoning)

from .common import TNTPDirectory
from .network import TNTPNetworkReader
from .settings import TNTPSettings
from .trips import TNTPTripsReader
from .zoning import TNTPZoningReader

logger = get_logger(__name__)


@dataclass
class TNTPModel:
    network: RoadNetwork
    zoning: Zoning
    demand: TravelDemand
    bpr_parameters: Mapping[LinkSegment, BprParameters]
    name: Optional[str] = None

    @classmethod
    def read(cls, settings: TNTPSettings, name: Optional[str] = None) -> TNTPModel:
        """Read network, zoning and demand, in that order.

        Each stage only starts once the previous one succeeded.
        """
        network_reader = TNTPNetworkReader(settings.network)
        network = network_reader.read()
        zoning = TNTPZoningReader(settings.zoning, network).read()
        demand = TNTPTripsReader(settings.trips, network, zoning).read()
        logger.info("Read TNTP model %s", name or settings.network.network_file)
        return TNTPModel(
            network,
            zoning,
            demand,
            network_reader.bpr_parameters,
            name,
        )

    @classmethod
    def from_directory(cls, path: str, **network_settings) -> TNTPModel:
        """Read a TransportationNetworks data set directory.

        Keyword arguments override the network reader settings.
        """
        name = TNTPDirectory(path).name()
        settings = TNTPSettings.from_directory(path, **network_settings)
        return cls.read(settings, name)


def read_tntp(settings: TNTPSettings) -> TNTPModel:
    return TNTPModel.read(settings)
