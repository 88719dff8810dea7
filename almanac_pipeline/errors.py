from __future__ import annotations
from typing import Optional


class AlmanacError(Exception):
    """Base class for every failure raised by the almanac pipeline."""


class AlmanacParseError(AlmanacError, ValueError):
    """Malformed almanac text. Fatal, the table set is all-or-nothing."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)


class ChainConfigError(AlmanacError):
    """A mapping chain could not be assembled from the parsed tables."""


class InvalidRangeError(AlmanacError, ValueError):
    """A range or rule with a non-positive length, or an unusable range set."""


class BruteForceLimitError(AlmanacError):
    """Enumeration would exceed the configured value bound."""


class ConfigError(AlmanacError, ValueError):
    """A configuration value outside what the pipeline accepts."""
