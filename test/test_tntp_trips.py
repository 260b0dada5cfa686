import logging
import os

import pytest
from hypothesis import given
from hypothesis.strategies import floats, integers, lists, tuples

from conftest import make_network_settings
from traffic_model.exceptions import (ConfigurationError, FormatError,
                                      InvalidReferenceError)
from traffic_model.network import RoadNetwork, TravelDemand, Zoning
from traffic_model.tntp.network import TNTPNetworkReader
from traffic_model.tntp.settings import TripsReaderSettings, ZoningReaderSettings
from traffic_model.tntp.trips import TNTPTripsReader, parse_destinations
from traffic_model.tntp.zoning import TNTPZoningReader
from traffic_model.units import TimeUnits


@pytest.fixture
def network(network_settings):
    return TNTPNetworkReader(network_settings).read()


@pytest.fixture
def zoning(zoning_settings, network):
    return TNTPZoningReader(zoning_settings, network).read()


@pytest.fixture
def read_trips(write_file, network, zoning):
    def read(contents, **settings):
        path = write_file('trips.tntp', contents)
        reader = TNTPTripsReader(TripsReaderSettings(path, **settings),
                                 network, zoning)
        return reader.read()
    return read


def od_demand_of(demand, network):
    time_period = demand.time_periods.first()
    return demand.od_demand(time_period, network.modes.first())


def test_two_zone_demand(trips_settings, network, zoning):
    demand = TNTPTripsReader(trips_settings, network, zoning).read()
    assert len(demand) == 1
    od_demand = od_demand_of(demand, network)
    first, second = zoning.zones
    assert od_demand.get_value(first, second) == 50.0
    assert od_demand.get_value(second, first) == 30.0
    assert od_demand.get_value(first, first) == 0.0
    assert od_demand.get_value(second, second) == 0.0
    assert od_demand.number_of_od_pairs() == 2
    assert od_demand.total() == 80.0


def test_default_time_period(trips_settings, network, zoning):
    demand = TNTPTripsReader(trips_settings, network, zoning).read()
    assert len(demand.time_periods) == 1
    time_period = demand.time_periods.first()
    assert time_period.external_id == '1'
    assert time_period.description == 'All Day'
    assert time_period.start_time_seconds == 0
    assert time_period.duration_seconds == 86400
    assert time_period.duration_hours == 24.0


def test_configured_time_period(read_trips):
    demand = read_trips("""
        <END OF METADATA>
        Origin 1
        2 : 5.0;
        """, time_period_description='AM peak', start_time=420,
        start_time_units=TimeUnits.MINUTES, time_period_duration=2,
        time_period_duration_units='hours')
    time_period = demand.time_periods.first()
    assert time_period.description == 'AM peak'
    assert time_period.start_time_seconds == 25200
    assert time_period.duration_seconds == 7200


def test_zone_count_mismatch(read_trips):
    with pytest.raises(FormatError, match="Network file contained 2 zones "
                                          "but trips file indicates 3") as e:
        read_trips("""
            <NUMBER OF ZONES> 3
            <END OF METADATA>
            Origin 1
            9 : 5.0;
            """)
    # the mismatch is reported before any entry is read
    assert e.value.line_number is None
    assert e.value.source.endswith('trips.tntp')


def test_missing_zone_count(read_trips, network, zoning):
    demand = read_trips("""
        <TOTAL OD FLOW> 5.0
        <END OF METADATA>
        Origin 2
        1 : 5.0;
        """)
    first, second = zoning.zones
    assert od_demand_of(demand, network).get_value(second, first) == 5.0


def test_empty_origin_blocks(read_trips, network):
    demand = read_trips("""
        <NUMBER OF ZONES> 2
        <END OF METADATA>
        Origin 1

        Origin 2
        """)
    od_demand = od_demand_of(demand, network)
    assert od_demand.number_of_od_pairs() == 0
    assert list(od_demand) == []


def test_no_origin_blocks(read_trips, network):
    demand = read_trips("<NUMBER OF ZONES> 2\n<END OF METADATA>\n")
    assert od_demand_of(demand, network).total() == 0.0


def test_repeated_destination_overwrites(read_trips, network, zoning):
    demand = read_trips("""
        <END OF METADATA>
        Origin 1
        2 : 5.0; 2 : 7.0;
        2 : 9.0;
        """)
    first, second = zoning.zones
    od_demand = od_demand_of(demand, network)
    assert od_demand.get_value(first, second) == 9.0
    assert od_demand.total() == 9.0


def test_repeated_origin_overwrites(read_trips, network, zoning):
    demand = read_trips("""
        <END OF METADATA>
        Origin 1
        2 : 5.0; 1 : 1.0;
        Origin 1
        2 : 3.0;
        """)
    first, second = zoning.zones
    od_demand = od_demand_of(demand, network)
    assert od_demand.get_value(first, second) == 3.0
    assert od_demand.get_value(first, first) == 1.0


def test_negative_demand_is_zero(read_trips, network, zoning):
    demand = read_trips("""
        <END OF METADATA>
        Origin 1
        1 : -4.0; 2 : 3.0;
        """)
    first, second = zoning.zones
    od_demand = od_demand_of(demand, network)
    assert od_demand.get_value(first, first) == 0.0
    assert od_demand.get_value(first, second) == 3.0


def test_destinations_across_lines(read_trips, network, zoning):
    demand = read_trips("""
        <END OF METADATA>
        ~ demand per origin
        Origin\t2
            1 :        1.5;
            2 :        2.5;
        """)
    first, second = zoning.zones
    od_demand = od_demand_of(demand, network)
    assert od_demand.get_value(second, first) == 1.5
    assert od_demand.get_value(second, second) == 2.5
    assert [(d.origin, d.destination, d.volume) for d in od_demand] == [
        (second, first, 1.5), (second, second, 2.5)]


def test_demand_before_origin(read_trips):
    with pytest.raises(FormatError, match="before the first Origin") as e:
        read_trips("""
            <END OF METADATA>
            2 : 5.0;
            """)
    assert e.value.line_number == 2


def test_unknown_destination(read_trips):
    with pytest.raises(InvalidReferenceError, match="Unknown zone 3") as e:
        read_trips("""
            <NUMBER OF ZONES> 2
            <END OF METADATA>
            Origin 1
            2 : 5.0;
            3 : 5.0;
            """)
    assert e.value.line_number == 5
    assert e.value.source.endswith('trips.tntp')


def test_unknown_origin(read_trips):
    with pytest.raises(InvalidReferenceError, match="Unknown zone 7") as e:
        read_trips("""
            <END OF METADATA>
            Origin 7
            """)
    assert e.value.line_number == 2


@pytest.mark.parametrize('line', [
    "2 : 5.0; 1",
    "2 : five;",
    "2 : nan;",
    "2 : inf;",
    "2 : ; 3 : ;",
    ": 5.0;",
])
def test_malformed_destinations(read_trips, line):
    with pytest.raises(FormatError) as e:
        read_trips(f"<END OF METADATA>\nOrigin 1\n{line}\n")
    assert e.value.line_number == 3


def test_total_flow_mismatch_is_a_warning(read_trips, caplog, network):
    with caplog.at_level(logging.WARNING, logger='traffic_model'):
        demand = read_trips("""
            <TOTAL OD FLOW> 100.0
            <END OF METADATA>
            Origin 1
            2 : 5.0;
            """)
    assert od_demand_of(demand, network).total() == 5.0
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "total OD flow" in warnings[0].getMessage()


def test_missing_sentinel(read_trips):
    with pytest.raises(FormatError, match="END OF METADATA"):
        read_trips("Origin 1\n2 : 5.0;\n")


def test_trips_file_not_configured(network, zoning):
    with pytest.raises(ConfigurationError):
        TNTPTripsReader(TripsReaderSettings(), network, zoning).read()


def test_zoning_required(trips_settings, network):
    with pytest.raises(ConfigurationError, match="Zoning"):
        TNTPTripsReader(trips_settings, network, Zoning()).read()


def test_network_required(trips_settings, zoning):
    with pytest.raises(ConfigurationError, match="Network"):
        TNTPTripsReader(trips_settings, RoadNetwork(), zoning).read()


def test_single_mode_only(trips_settings, network, zoning):
    network.register_new_mode('2', 'bus')
    with pytest.raises(ConfigurationError, match="single mode"):
        TNTPTripsReader(trips_settings, network, zoning).read()


def test_populate_given_demand(trips_settings, network, zoning):
    demand = TravelDemand()
    reader = TNTPTripsReader(trips_settings, network, zoning, demand)
    assert reader.read() is demand
    assert len(demand) == 1


def test_braess_demand(braess_directory):
    path = os.path.join(braess_directory, 'Braess_net.tntp')
    network = TNTPNetworkReader(make_network_settings(path)).read()
    zoning = TNTPZoningReader(ZoningReaderSettings(path), network).read()
    settings = TripsReaderSettings(os.path.join(braess_directory,
                                                'Braess_trips.tntp'))
    demand = TNTPTripsReader(settings, network, zoning).read()
    od_demand = od_demand_of(demand, network)
    assert od_demand.total() == 6.0
    assert od_demand.get_value(zoning.zones[0], zoning.zones[3]) == 6.0
    assert od_demand.number_of_od_pairs() == 1


def test_parse_destinations():
    assert parse_destinations("2 : 50.0 ;    3:1e3;") == [('2', 50.0),
                                                         ('3', 1000.0)]
    assert parse_destinations("") == []
    assert parse_destinations("2:1;") == [('2', 1.0)]
    with pytest.raises(FormatError):
        parse_destinations(" ; ")


@given(lists(tuples(integers(min_value=1, max_value=10**6),
                    floats(min_value=0, max_value=1e9))))
def test_parse_destination_pairs(pairs):
    line = "".join(f"    {d} :  {v!r};" for d, v in pairs)
    assert parse_destinations(line) == [(str(d), v) for d, v in pairs]


def test_total_flow_of_repeated_origin(read_trips, caplog, network, zoning):
    with caplog.at_level(logging.INFO, logger='traffic_model'):
        demand = read_trips("""
            <TOTAL OD FLOW> 3.0
            <END OF METADATA>
            Origin 1
            2 : 5.0;
            Origin 1
            2 : 3.0;
            """)
    first, second = zoning.zones
    assert od_demand_of(demand, network).get_value(first, second) == 3.0
    assert not [r for r in caplog.records if r.levelno == logging.WARNING]
    assert "TNTP total OD demand: 3.00" in caplog.text


def test_failed_read_leaves_demand_untouched(write_file, network, zoning):
    path = write_file('trips.tntp', """
        <END OF METADATA>
        Origin 1
        2 : 5.0;
        9 : 1.0;
        """)
    demand = TravelDemand()
    reader = TNTPTripsReader(TripsReaderSettings(path), network, zoning, demand)
    with pytest.raises(InvalidReferenceError):
        reader.read()
    assert len(demand.time_periods) == 0
    assert len(demand) == 0
