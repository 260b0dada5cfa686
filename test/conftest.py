import os
from textwrap import dedent

import pytest
from traffic_model.tntp.settings import (NetworkReaderSettings,
                                         TripsReaderSettings,
                                         ZoningReaderSettings)
from traffic_model.units import (CapacityPeriod, LengthUnits, SpeedUnits,
                                 TimeUnits)

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'fixtures')


class TransportationNetworksDirectories:
    parent_directory = os.path.join(FIXTURES_DIR, 'TransportationNetworks')
    braess = os.path.join(parent_directory, 'Braess')


TWO_ZONE_NETWORK = """
<NUMBER OF ZONES> 2
<NUMBER OF NODES> 2
<NUMBER OF LINKS> 1
<END OF METADATA>
~ upstream downstream capacity length fftt b power speed toll type
1 2 1000 5 10 0.15 4 60 0 3
"""

TWO_ZONE_TRIPS = """
<NUMBER OF ZONES> 2
<END OF METADATA>
Origin 1
2 : 50.0 ;
Origin 2
1 : 30.0 ;
"""


def network_text(rows, zones=2, nodes=2, links=None):
    """A network file around the given data rows."""
    links = len(rows) if links is None else links
    header = (f"<NUMBER OF ZONES> {zones}\n"
              f"<NUMBER OF NODES> {nodes}\n"
              f"<NUMBER OF LINKS> {links}\n"
              "<END OF METADATA>\n"
              "~ upstream downstream capacity length fftt b power speed toll type\n")
    return header + "".join(f"{row}\n" for row in rows)


@pytest.fixture
def write_file(tmp_path):
    def write(name, contents):
        path = tmp_path / name
        path.write_text(dedent(contents).lstrip('\n'))
        return str(path)
    return write


@pytest.fixture
def two_zone_network_file(write_file):
    return write_file('two_zone_net.tntp', TWO_ZONE_NETWORK)


@pytest.fixture
def two_zone_trips_file(write_file):
    return write_file('two_zone_trips.tntp', TWO_ZONE_TRIPS)


def make_network_settings(network_file, **kwargs):
    kwargs.setdefault('length_units', LengthUnits.KM)
    kwargs.setdefault('speed_units', SpeedUnits.KM_H)
    kwargs.setdefault('free_flow_travel_time_units', TimeUnits.MINUTES)
    kwargs.setdefault('capacity_period', CapacityPeriod.HOUR)
    kwargs.setdefault('default_maximum_speed', 60.0)
    return NetworkReaderSettings(network_file=network_file, **kwargs)


@pytest.fixture
def network_settings(two_zone_network_file):
    return make_network_settings(two_zone_network_file)


@pytest.fixture
def zoning_settings(two_zone_network_file):
    return ZoningReaderSettings(network_file=two_zone_network_file)


@pytest.fixture
def trips_settings(two_zone_trips_file):
    return TripsReaderSettings(trips_file=two_zone_trips_file)


@pytest.fixture
def braess_directory():
    return TransportationNetworksDirectories.braess
