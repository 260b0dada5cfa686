from __future__ import annotations

from typing import Optional


class TNTPError(Exception):
    """Base class for all errors raised while reading TNTP data.

    An error may carry the file it was raised for and the (1-based) line
    number that triggered it; both are rendered by ``str``.
    """

    def __init__(self, message: str, source: Optional[str] = None,
                 line_number: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.source = source
        self.line_number = line_number

    def at(self, source: Optional[str],
           line_number: Optional[int] = None) -> TNTPError:
        """Attach a location unless one is already known."""
        if self.source is None:
            self.source = source
        if self.line_number is None:
            self.line_number = line_number
        return self

    def __str__(self):
        if self.source is None:
            return self.message
        if self.line_number is None:
            return f"{self.source}: {self.message}"
        return f"{self.source}:{self.line_number}: {self.message}"


class ConfigurationError(TNTPError):
    """Settings are incomplete or inconsistent; raised before parsing."""


class FormatError(TNTPError):
    """File contents do not follow the TNTP format."""


class InvalidReferenceError(TNTPError):
    """A row references an entity that does not (and may not) exist."""


class DuplicateIdError(TNTPError):
    """An external id was registered twice for the same entity kind."""
