from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False)
class Mode:
    id: int
    external_id: str
    name: str = 'car'
    pcu: float = 1.0

    def __repr__(self):
        return f"Mode({self.name})"


@dataclass(frozen=True)
class AccessProperties:
    """Speeds a mode may travel at on a link segment type (km/h)."""
    maximum_speed_kmh: float
    critical_speed_kmh: float
