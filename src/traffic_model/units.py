"""Multiplier tables converting TNTP file values to canonical units.

Canonical units are kilometres, km/h and hours; capacities are expressed
per hour.
"""
from __future__ import annotations

from enum import Enum
from typing import Union

from .exceptions import ConfigurationError


class _Unit(Enum):

    @property
    def multiplier(self) -> float:
        return self.value

    def convert(self, value: float) -> float:
        return value * self.value

    @classmethod
    def parse(cls, unit: Union[_Unit, str]):
        """Resolve a member or its (case-insensitive) name."""
        if isinstance(unit, cls):
            return unit
        if isinstance(unit, str):
            try:
                return cls[unit.strip().upper()]
            except KeyError:
                pass
        raise ConfigurationError(
            f"Unrecognised {cls.__name__} unit {unit!r}, expected one of "
            f"{', '.join(cls.__members__)}."
        )


class LengthUnits(_Unit):
    KM = 1.0
    M = 0.001
    MILES = 1.61
    FEET = 0.00030492424


class SpeedUnits(_Unit):
    KM_H = 1.0
    M_SEC = 3.6
    MILES_H = 1.61
    FEET_MIN = 0.01829545455


class TimeUnits(_Unit):
    HOURS = 1.0
    MINUTES = 0.0166666667
    SECONDS = 0.0002777778


class CapacityPeriod(_Unit):
    """Period a capacity is expressed for, as a multiplier to capacity/h."""
    HOUR = 1.0
    DAY = 1.0 / 24.0

    def per_hour_multiplier(self, duration: float = 1.0) -> float:
        """Multiplier turning a capacity per ``duration`` periods into per hour."""
        if not duration > 0:
            raise ConfigurationError(
                f"Capacity period duration must be positive, found {duration}"
            )
        return self.value / duration


Unit = Union[LengthUnits, SpeedUnits, TimeUnits, CapacityPeriod]


def convert(value: float, unit: Unit) -> float:
    return unit.convert(value)
