"""Where each field of a network file row lives.

Published TNTP networks do not agree on a column order, so the position of
every field is part of the reader configuration.
"""
from __future__ import annotations

from enum import Enum
from typing import Dict, List, Mapping, Optional, Sequence, Union

from toolz import keymap

from traffic_model.exceptions import ConfigurationError


class NetworkFileColumns(Enum):
    UPSTREAM_NODE = 'from_node'
    DOWNSTREAM_NODE = 'to_node'
    CAPACITY_PER_LANE = 'capacity'
    LENGTH = 'length'
    FREE_FLOW_TIME = 'free_flow_time'
    B = 'b'
    POWER = 'power'
    MAXIMUM_SPEED = 'speed_limit'
    TOLL = 'toll'
    LINK_TYPE = 'link_type'

    @property
    def field_name(self) -> str:
        return self.value

    @classmethod
    def parse(cls, column: Union[NetworkFileColumns, str]) -> NetworkFileColumns:
        if isinstance(column, cls):
            return column
        try:
            return cls[str(column).strip().upper()]
        except KeyError:
            raise ConfigurationError(f"Unknown network file column {column!r}")


REQUIRED_COLUMNS = (
    NetworkFileColumns.UPSTREAM_NODE,
    NetworkFileColumns.DOWNSTREAM_NODE,
    NetworkFileColumns.CAPACITY_PER_LANE,
    NetworkFileColumns.LENGTH,
    NetworkFileColumns.FREE_FLOW_TIME,
    NetworkFileColumns.MAXIMUM_SPEED,
    NetworkFileColumns.LINK_TYPE,
)

# init_node term_node capacity length free_flow_time b power speed toll link_type
DEFAULT_COLUMN_ORDER = (
    NetworkFileColumns.UPSTREAM_NODE,
    NetworkFileColumns.DOWNSTREAM_NODE,
    NetworkFileColumns.CAPACITY_PER_LANE,
    NetworkFileColumns.LENGTH,
    NetworkFileColumns.FREE_FLOW_TIME,
    NetworkFileColumns.B,
    NetworkFileColumns.POWER,
    NetworkFileColumns.MAXIMUM_SPEED,
    NetworkFileColumns.TOLL,
    NetworkFileColumns.LINK_TYPE,
)


class ColumnSchema:
    """Mapping of :class:`NetworkFileColumns` to zero-based column indices."""

    def __init__(self, columns: Mapping[Union[NetworkFileColumns, str], int]):
        self.columns: Dict[NetworkFileColumns, int] = keymap(
            NetworkFileColumns.parse, dict(columns))

    @classmethod
    def default(cls) -> ColumnSchema:
        return cls({c: i for i, c in enumerate(DEFAULT_COLUMN_ORDER)})

    @classmethod
    def from_order(cls, order: Sequence[Union[NetworkFileColumns, str]]) -> ColumnSchema:
        return cls({c: i for i, c in enumerate(order)})

    def validate(self) -> None:
        missing = [c.name for c in REQUIRED_COLUMNS if c not in self.columns]
        if missing:
            raise ConfigurationError(
                f"Network file columns missing for {', '.join(missing)}")
        for column, index in self.columns.items():
            if isinstance(index, bool) or not isinstance(index, int) or index < 0:
                raise ConfigurationError(
                    f"Column index for {column.name} must be a non-negative "
                    f"integer, found {index!r}")
        indices = list(self.columns.values())
        if len(set(indices)) != len(indices):
            raise ConfigurationError(
                "Network file columns must map to distinct indices")

    def has(self, column: NetworkFileColumns) -> bool:
        return column in self.columns

    def index(self, column: NetworkFileColumns) -> Optional[int]:
        return self.columns.get(column)

    @property
    def width(self) -> int:
        """Minimum number of tokens a row needs."""
        return max(self.columns.values()) + 1

    def extract(self, tokens: List[str]) -> Dict[str, str]:
        """Pick the configured fields out of a tokenised row."""
        return {column.field_name: tokens[index]
                for column, index in self.columns.items()}

    def __eq__(self, other):
        return isinstance(other, ColumnSchema) and self.columns == other.columns

    def __repr__(self):
        names = {c.name: i for c, i in self.columns.items()}
        return f"ColumnSchema({names})"
