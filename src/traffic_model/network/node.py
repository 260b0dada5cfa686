from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional


class Coordinate(NamedTuple):
    x: float
    y: float


@dataclass(eq=False)
class Node:
    id: int
    external_id: str
    position: Optional[Coordinate] = None

    def __repr__(self):
        return f"Node({self.external_id})"
