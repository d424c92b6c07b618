"""
Error types for the ionosonde filter pipeline.

Batch-level failures (unreadable input, malformed lines, unsortable
timestamps) abort the whole run. Channel-level failures (bad channel index,
renderer problems) are reported per channel and never block the others.

Each error also derives from the matching builtin so callers that already
catch ``ValueError``/``IndexError``/``OSError`` keep working.
"""

from pathlib import Path
from typing import Optional, Union


class IonoFilterError(Exception):
    """Base class for all ionofilter errors."""


class FileAccessError(IonoFilterError, OSError):
    """Input or configuration file is missing or unreadable."""

    def __init__(self, path: Union[str, Path], reason: str = "cannot be opened"):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")

    def __str__(self) -> str:
        return f"{self.path}: {self.reason}"


class SchemaViolation(IonoFilterError, ValueError):
    """A data line does not match the 15-token station record schema."""

    def __init__(self, message: str, line_number: Optional[int] = None,
                 line: Optional[str] = None):
        self.message = message
        self.line_number = line_number
        self.line = line
        super().__init__(message)

    def __str__(self) -> str:
        if self.line_number:
            return f"line {self.line_number}: {self.message}"
        return self.message


class ChronoFormatError(SchemaViolation):
    """Date/time fields cannot be ordered lexicographically."""


class ChannelIndexError(IonoFilterError, IndexError):
    """Requested channel index is outside the record's channel range."""

    def __init__(self, index, channel_count: int):
        self.index = index
        self.channel_count = channel_count
        super().__init__(
            f"Channel index {index!r} out of range [0, {channel_count - 1}]"
        )


class PlotSinkError(IonoFilterError, RuntimeError):
    """A plot renderer failed to consume a raw/filtered pair."""


class ConfigError(IonoFilterError, ValueError):
    """Configuration file or options hold an invalid value."""
