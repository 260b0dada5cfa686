"""Read TNTP transportation networks into a traffic network model."""
from .exceptions import (
    TNTPError,
    ConfigurationError,
    FormatError,
    InvalidReferenceError,
    DuplicateIdError,
)

__version__ = "0.1"
