"""Pieces of the TNTP text format shared by the network, node and trips files.

Every TNTP file starts with a metadata block of ``<KEY> value`` lines that
ends with ``<END OF METADATA>``.
"""
from __future__ import annotations

import os
from contextlib import contextmanager
from typing import Dict, Iterator, NamedTuple, Optional, TextIO, Tuple

from traffic_model.exceptions import ConfigurationError, FormatError, TNTPError

END_OF_LINE = ';'
COMMENT = '~'
METADATA_OPEN = '<'
METADATA_CLOSE = '>'

NumberedLine = Tuple[int, str]


class MetadataTag(NamedTuple):
    key: str

    @property
    def indicator(self) -> str:
        return f"{METADATA_OPEN}{self.key}{METADATA_CLOSE}"


class metadata_tags:
    number_of_zones = MetadataTag('NUMBER OF ZONES')
    number_of_nodes = MetadataTag('NUMBER OF NODES')
    number_of_links = MetadataTag('NUMBER OF LINKS')
    first_thru_node = MetadataTag('FIRST THRU NODE')
    total_od_flow = MetadataTag('TOTAL OD FLOW')
    end_of_metadata = MetadataTag('END OF METADATA')


def is_comment(line: str) -> bool:
    return line.lstrip().startswith(COMMENT)


def is_metadata_line(line: str) -> bool:
    line = line.strip()
    return line.startswith(METADATA_OPEN) and METADATA_CLOSE in line


def is_end_of_metadata(line: str) -> bool:
    return line.strip() == metadata_tags.end_of_metadata.indicator


def parse_metadata(line: str) -> Tuple[str, str]:
    """Split ``<KEY> value`` into ``(KEY, value)``."""
    key, value = line.strip()[len(METADATA_OPEN):].split(METADATA_CLOSE, 1)
    return key.strip(), value.strip()


def numbered_lines(fp: TextIO) -> Iterator[NumberedLine]:
    """Stripped lines of a file along with their 1-based line number."""
    for line_number, line in enumerate(fp, start=1):
        yield line_number, line.strip()


def read_metadata(lines: Iterator[NumberedLine],
                  source: Optional[str] = None) -> Dict[str, str]:
    """Consume ``lines`` up to and including ``<END OF METADATA>``.

    The iterator is left positioned on the first line after the sentinel so
    the caller can carry on with the data section.
    """
    data = {}
    for _, line in lines:
        if is_end_of_metadata(line):
            return data
        if is_metadata_line(line):
            key, value = parse_metadata(line)
            data[key] = value
    raise FormatError(
        f"Missing {metadata_tags.end_of_metadata.indicator} sentinel",
        source)


def get_int(data: Dict[str, str], tag: MetadataTag,
            source: Optional[str] = None,
            required: bool = True) -> Optional[int]:
    value = data.get(tag.key)
    if value is None:
        if required:
            raise FormatError(f"Missing {tag.indicator} metadata", source)
        return None
    try:
        return int(value)
    except ValueError as e:
        raise FormatError(
            f"Expected an integer for {tag.indicator}, found {value!r}",
            source) from e


def get_float(data: Dict[str, str], tag: MetadataTag,
              source: Optional[str] = None) -> Optional[float]:
    value = data.get(tag.key)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as e:
        raise FormatError(
            f"Expected a number for {tag.indicator}, found {value!r}",
            source) from e


class TNTPDirectory:
    """A TransportationNetworks data set directory, e.g. ``SiouxFalls/``."""
    NETWORK_SUFFIX = '_net.tntp'
    TRIPS_SUFFIX = '_trips.tntp'
    NODE_SUFFIX = '_node.tntp'

    def __init__(self, path: str):
        self.path = path

    def name(self) -> str:
        return os.path.basename(os.path.normpath(self.path))

    def _find(self, suffix: str) -> Optional[str]:
        if not os.path.isdir(self.path):
            raise ConfigurationError(f"{self.path} is not a directory")
        for fname in sorted(os.listdir(self.path)):
            if fname.lower().endswith(suffix):
                return os.path.join(self.path, fname)
        return None

    def _require(self, suffix: str) -> str:
        path = self._find(suffix)
        if path is None:
            raise ConfigurationError(
                f"No *{suffix} file found in {self.path}")
        return path

    def network_file(self) -> str:
        return self._require(self.NETWORK_SUFFIX)

    def trips_file(self) -> str:
        return self._require(self.TRIPS_SUFFIX)

    def node_file(self) -> Optional[str]:
        return self._find(self.NODE_SUFFIX)


@contextmanager
def open_tntp(path: str) -> Iterator[Iterator[NumberedLine]]:
    """Open a TNTP file for streaming, tagging escaping errors with its path.

    The file is closed on every exit path.
    """
    try:
        fp = open(path)
    except OSError as e:
        raise TNTPError(f"Unable to open file: {e.strerror}", path) from e
    with fp:
        try:
            yield numbered_lines(fp)
        except TNTPError as e:
            raise e.at(path)
        except UnicodeDecodeError as e:
            raise FormatError(f"File is not valid text: {e}", path) from e
