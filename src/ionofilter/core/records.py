#!/usr/bin/env python3
"""
Station Record Parser - Fixed-Schema Ionosonde Lines

Turns text lines exported from an ionosonde station archive into Record
objects. Each data line holds 15 whitespace-separated tokens:

    2021.03.03 (062) 11:00:00 75  4.875 ... 254.1 ...
    |          |     |        |   |
    date       doy   time     seq 11 channel values (foF2 first, hmF2 sixth)

File layout:
------------
    line 1    header (ignored)
    line 2    blank (ignored)
    line 3..  one record per line

The leading lines are dropped by position, not by looking at them. A file
without exactly two leading non-data lines loses its first data rows.

Timestamp layout:
-----------------
Records are later sorted by date+time as plain strings, which is only
chronological when every field is zero padded with the most significant
unit first. That layout is checked here, per line and across the batch,
instead of being assumed.
"""

import logging
import math
import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple, Union

from ..errors import ChronoFormatError, FileAccessError, SchemaViolation
from ..interfaces.data_models import CHANNEL_COUNT, TOKEN_COUNT, ParseResult, Record

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEFAULT_HEADER_LINES = 2        # header + blank line

ON_ERROR_ABORT = 'abort'
ON_ERROR_SKIP = 'skip'
ERROR_POLICIES = (ON_ERROR_ABORT, ON_ERROR_SKIP)

# YYYY-MM-DD, YYYY.MM.DD or YYYY/MM/DD, one separator throughout
DATE_PATTERN = re.compile(r'^(\d{4})([-./])(\d{2})\2(\d{2})$')
# HH:MM, HH:MM:SS or HH:MM:SS.fff
TIME_PATTERN = re.compile(r'^(\d{2}):(\d{2})(?::(\d{2})(\.\d+)?)?$')

CHANNEL_FIELDS = tuple(f'channel[{i}]' for i in range(CHANNEL_COUNT))


def tokenize(line: str) -> Tuple[str, ...]:
    """Split a line on any run of whitespace."""
    return tuple(line.split())


def _validate_date(date: str, line_number: int, line: str) -> None:
    match = DATE_PATTERN.match(date)
    if not match:
        raise ChronoFormatError(
            f"date {date!r} is not zero-padded YYYY-MM-DD", line_number, line
        )
    month, day = int(match.group(3)), int(match.group(4))
    if not 1 <= month <= 12 or not 1 <= day <= 31:
        raise ChronoFormatError(f"date {date!r} out of range", line_number, line)


def _validate_time(time: str, line_number: int, line: str) -> None:
    match = TIME_PATTERN.match(time)
    if not match:
        raise ChronoFormatError(
            f"time {time!r} is not zero-padded HH:MM[:SS[.fff]]", line_number, line
        )
    hour, minute = int(match.group(1)), int(match.group(2))
    second = int(match.group(3)) if match.group(3) else 0
    # 60 allows a leap second
    if hour > 23 or minute > 59 or second > 60:
        raise ChronoFormatError(f"time {time!r} out of range", line_number, line)


def timestamp_layout(record: Record) -> Tuple[str, int]:
    """
    Describe the shape of a record's timestamp.

    Two records compare chronologically as strings only if they share the
    same date separator and the same time length (same precision).
    """
    return record.date[4], len(record.time)


def parse_record(line: str, line_number: int = 0) -> Record:
    """
    Parse one station data line.

    Args:
        line: Raw text line (trailing newline allowed)
        line_number: 1-based position in the source, for diagnostics

    Returns:
        Record with exactly CHANNEL_COUNT finite channel values

    Raises:
        SchemaViolation: wrong token count, non-numeric or non-finite value
        ChronoFormatError: date/time not in a sortable layout
    """
    tokens = tokenize(line)
    if len(tokens) != TOKEN_COUNT:
        raise SchemaViolation(
            f"expected {TOKEN_COUNT} tokens, found {len(tokens)}",
            line_number, line
        )

    date, symbol, time, sequence_token = tokens[:4]
    _validate_date(date, line_number, line)
    _validate_time(time, line_number, line)

    try:
        sequence = int(sequence_token)
    except ValueError:
        raise SchemaViolation(
            f"sequence {sequence_token!r} is not an integer", line_number, line
        ) from None

    channels = []
    for name, token in zip(CHANNEL_FIELDS, tokens[4:]):
        try:
            value = float(token)
        except ValueError:
            raise SchemaViolation(
                f"{name} {token!r} is not a number", line_number, line
            ) from None
        if not math.isfinite(value):
            raise SchemaViolation(f"{name} {token!r} is not finite", line_number, line)
        channels.append(value)

    return Record(
        date=date,
        symbol=symbol,
        time=time,
        sequence=sequence,
        channels=tuple(channels),
        line_number=line_number,
    )


def _check_uniform_layout(records: List[Record]) -> None:
    """Raise ChronoFormatError if the batch mixes timestamp layouts."""
    if not records:
        return
    expected = timestamp_layout(records[0])
    for record in records[1:]:
        layout = timestamp_layout(record)
        if layout != expected:
            raise ChronoFormatError(
                f"timestamp {record.date} {record.time} does not match the layout "
                f"of line {records[0].line_number} ({records[0].date} {records[0].time})",
                record.line_number,
            )


def read_records(
    lines: Iterable[str],
    header_lines: int = DEFAULT_HEADER_LINES,
    on_error: str = ON_ERROR_ABORT,
    source: Optional[Path] = None
) -> ParseResult:
    """
    Parse every data line of a station file.

    Args:
        lines: Text lines including the leading header lines
        header_lines: Leading lines to discard by position
        on_error: 'abort' re-raises the first SchemaViolation,
                  'skip' logs it and drops the line; a ChronoFormatError
                  always propagates
        source: Origin of the lines, kept on the result

    Returns:
        ParseResult with records in file order
    """
    if on_error not in ERROR_POLICIES:
        raise ValueError(f"on_error must be one of {ERROR_POLICIES}, got {on_error!r}")
    if header_lines < 0:
        raise ValueError(f"header_lines must be >= 0, got {header_lines}")

    result = ParseResult(source=source)

    for line_number, line in enumerate(lines, start=1):
        if line_number <= header_lines:
            continue
        if not line.strip():
            continue
        try:
            result.records.append(parse_record(line, line_number))
        except ChronoFormatError:
            raise
        except SchemaViolation as e:
            if on_error == ON_ERROR_ABORT:
                raise
            result.skipped += 1
            logger.warning(f"Skipping malformed line: {e}")

    _check_uniform_layout(result.records)

    logger.debug(f"Parsed {len(result.records)} records "
                 f"({result.skipped} skipped) from {source or 'input'}")
    return result


def load_records(
    path: Union[str, Path],
    header_lines: int = DEFAULT_HEADER_LINES,
    on_error: str = ON_ERROR_ABORT
) -> ParseResult:
    """
    Read and parse a station file.

    Raises:
        FileAccessError: path missing or unreadable
        SchemaViolation: malformed line (in 'abort' mode) or mixed layouts
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8', errors='replace') as f:
            return read_records(f, header_lines=header_lines,
                                on_error=on_error, source=path)
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e
