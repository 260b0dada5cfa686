"""Configuration of the TNTP readers.

Settings are plain dataclasses; the marshmallow schemas below load them from
dictionaries or a JSON file.
"""
from __future__ import annotations

import json
import logging
import math
import os
from dataclasses import dataclass, field
from typing import Optional

from marshmallow import Schema, ValidationError, fields, post_load, validate

from traffic_model.exceptions import ConfigurationError
from traffic_model.units import CapacityPeriod, LengthUnits, SpeedUnits, TimeUnits

from .columns import ColumnSchema, NetworkFileColumns
from .common import TNTPDirectory

DEFAULT_MAXIMUM_SPEED = 80.0
SECONDS_PER_HOUR = 3600


@dataclass
class NetworkReaderSettings:
    network_file: Optional[str] = None
    node_coordinate_file: Optional[str] = None
    columns: ColumnSchema = field(default_factory=ColumnSchema.default)
    length_units: LengthUnits = LengthUnits.KM
    speed_units: SpeedUnits = SpeedUnits.KM_H
    free_flow_travel_time_units: TimeUnits = TimeUnits.MINUTES
    capacity_period: CapacityPeriod = CapacityPeriod.HOUR
    capacity_period_duration: float = 1.0
    default_maximum_speed: float = DEFAULT_MAXIMUM_SPEED
    coordinate_reference_system: Optional[str] = None

    def validate(self) -> None:
        """Check the settings before any file is touched.

        Unit names given as strings are resolved to their enum members.
        """
        if self.network_file is None:
            raise ConfigurationError("TNTP network file location is not provided")
        if not isinstance(self.columns, ColumnSchema):
            self.columns = ColumnSchema(self.columns)
        self.columns.validate()
        self.length_units = LengthUnits.parse(self.length_units)
        self.speed_units = SpeedUnits.parse(self.speed_units)
        self.free_flow_travel_time_units = TimeUnits.parse(
            self.free_flow_travel_time_units)
        self.capacity_period = CapacityPeriod.parse(self.capacity_period)
        self.capacity_period.per_hour_multiplier(self.capacity_period_duration)
        if not 0 < self.default_maximum_speed < math.inf:
            raise ConfigurationError(
                f"Default maximum speed must be positive and finite, "
                f"found {self.default_maximum_speed}")

    @property
    def capacity_per_hour_multiplier(self) -> float:
        return self.capacity_period.per_hour_multiplier(
            self.capacity_period_duration)

    def log_settings(self, logger: logging.Logger) -> None:
        logger.info("TNTP network file: %s", self.network_file)
        if self.node_coordinate_file is not None:
            logger.info("TNTP node coordinate file: %s",
                        self.node_coordinate_file)
        logger.info("TNTP units: length %s, speed %s, free flow time %s, "
                    "capacity per %.2f %s",
                    self.length_units.name, self.speed_units.name,
                    self.free_flow_travel_time_units.name,
                    self.capacity_period_duration, self.capacity_period.name)
        logger.debug("TNTP network columns: %s", self.columns)


@dataclass
class ZoningReaderSettings:
    network_file: Optional[str] = None

    def validate(self) -> None:
        if self.network_file is None:
            raise ConfigurationError(
                "TNTP network file location is not provided, unable to create zoning")


@dataclass
class TripsReaderSettings:
    trips_file: Optional[str] = None
    time_period_description: str = 'All Day'
    start_time: float = 0.0
    start_time_units: TimeUnits = TimeUnits.HOURS
    time_period_duration: float = 24.0
    time_period_duration_units: TimeUnits = TimeUnits.HOURS

    def validate(self) -> None:
        if self.trips_file is None:
            raise ConfigurationError(
                "TNTP trips file location is not provided, unable to create demands")
        self.start_time_units = TimeUnits.parse(self.start_time_units)
        self.time_period_duration_units = TimeUnits.parse(
            self.time_period_duration_units)
        if self.start_time < 0:
            raise ConfigurationError(
                f"Start time must not be negative, found {self.start_time}")
        if not self.time_period_duration > 0:
            raise ConfigurationError(
                f"Time period duration must be positive, "
                f"found {self.time_period_duration}")

    @property
    def start_time_seconds(self) -> int:
        return round(self.start_time_units.convert(self.start_time)
                     * SECONDS_PER_HOUR)

    @property
    def duration_seconds(self) -> int:
        return round(self.time_period_duration_units.convert(
            self.time_period_duration) * SECONDS_PER_HOUR)

    def log_settings(self, logger: logging.Logger) -> None:
        logger.info("TNTP trips file: %s", self.trips_file)
        logger.info("TNTP time period %r starts at %.2f (%s) and lasts %.2f (%s)",
                    self.time_period_description,
                    self.start_time, self.start_time_units.name,
                    self.time_period_duration,
                    self.time_period_duration_units.name)


@dataclass
class TNTPSettings:
    network: NetworkReaderSettings = field(default_factory=NetworkReaderSettings)
    zoning: ZoningReaderSettings = field(default_factory=ZoningReaderSettings)
    trips: TripsReaderSettings = field(default_factory=TripsReaderSettings)

    def __post_init__(self):
        # zones are declared in the network file
        if self.zoning.network_file is None:
            self.zoning.network_file = self.network.network_file

    @classmethod
    def from_directory(cls, path: str, **network_settings) -> TNTPSettings:
        directory = TNTPDirectory(path)
        network_settings.setdefault('node_coordinate_file',
                                    directory.node_file())
        return cls(
            NetworkReaderSettings(network_file=directory.network_file(),
                                  **network_settings),
            ZoningReaderSettings(),
            TripsReaderSettings(trips_file=directory.trips_file()),
        )


class NetworkReaderSettingsSchema(Schema):
    network_file = fields.String(allow_none=True)
    node_coordinate_file = fields.String(allow_none=True)
    columns = fields.Dict(keys=fields.Enum(NetworkFileColumns),
                          values=fields.Integer(validate=validate.Range(min=0)))
    length_units = fields.Enum(LengthUnits)
    speed_units = fields.Enum(SpeedUnits)
    free_flow_travel_time_units = fields.Enum(TimeUnits)
    capacity_period = fields.Enum(CapacityPeriod)
    capacity_period_duration = fields.Float(validate=validate.Range(min=0, min_inclusive=False))
    default_maximum_speed = fields.Float(validate=validate.Range(min=0, min_inclusive=False))
    coordinate_reference_system = fields.String(allow_none=True)

    @post_load
    def to_settings(self, data: dict, **kw) -> NetworkReaderSettings:
        if 'columns' in data:
            data['columns'] = ColumnSchema(data['columns'])
        return NetworkReaderSettings(**data)


class ZoningReaderSettingsSchema(Schema):
    network_file = fields.String(allow_none=True)

    @post_load
    def to_settings(self, data: dict, **kw) -> ZoningReaderSettings:
        return ZoningReaderSettings(**data)


class TripsReaderSettingsSchema(Schema):
    trips_file = fields.String(allow_none=True)
    time_period_description = fields.String()
    start_time = fields.Float(validate=validate.Range(min=0))
    start_time_units = fields.Enum(TimeUnits)
    time_period_duration = fields.Float(validate=validate.Range(min=0, min_inclusive=False))
    time_period_duration_units = fields.Enum(TimeUnits)

    @post_load
    def to_settings(self, data: dict, **kw) -> TripsReaderSettings:
        return TripsReaderSettings(**data)


class TNTPSettingsSchema(Schema):
    network = fields.Nested(NetworkReaderSettingsSchema, required=True)
    zoning = fields.Nested(ZoningReaderSettingsSchema)
    trips = fields.Nested(TripsReaderSettingsSchema)

    @post_load
    def to_settings(self, data: dict, **kw) -> TNTPSettings:
        return TNTPSettings(**data)


def _resolve(path: Optional[str], base: str) -> Optional[str]:
    if path is None or os.path.isabs(path):
        return path
    return os.path.join(base, path)


def load_settings(data: dict) -> TNTPSettings:
    try:
        return TNTPSettingsSchema().load(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid TNTP settings: {e.messages}") from e


def load_settings_file(path: str) -> TNTPSettings:
    """Load settings from JSON; relative file paths are taken from its folder."""
    try:
        fp = open(path)
    except OSError as e:
        raise ConfigurationError(f"Unable to open file: {e.strerror}", path) from e
    with fp:
        try:
            data = json.load(fp)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON: {e}", path) from e
    try:
        settings = load_settings(data)
    except ConfigurationError as e:
        raise e.at(path)
    base = os.path.dirname(os.path.abspath(path))
    settings.network.network_file = _resolve(settings.network.network_file, base)
    settings.network.node_coordinate_file = _resolve(
        settings.network.node_coordinate_file, base)
    settings.zoning.network_file = _resolve(settings.zoning.network_file, base)
    settings.trips.trips_file = _resolve(settings.trips.trips_file, base)
    return settings
