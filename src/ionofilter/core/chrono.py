"""
Chronological ordering of station records.

Records are ordered by their ChronoKey (date + time compared as plain
strings). The parser guarantees the zero-padded, most-significant-first
layout that makes string order equal time order.
"""

import logging
from typing import List, Sequence

from ..errors import SchemaViolation
from ..interfaces.data_models import Record

logger = logging.getLogger(__name__)


def chrono_key(record: Record) -> str:
    """Date concatenated with time."""
    return record.date + record.time


def sort_records(records: List[Record]) -> List[Record]:
    """
    Sort records in place, earliest first, and return the same list.

    Records sharing a ChronoKey may come out in either relative order.
    """
    records.sort(key=chrono_key)
    return records


def is_chronological(records: Sequence[Record]) -> bool:
    return all(
        chrono_key(a) <= chrono_key(b) for a, b in zip(records, records[1:])
    )


def verify_order(records: Sequence[Record]) -> None:
    """Raise SchemaViolation at the first adjacent pair out of order."""
    for position, (a, b) in enumerate(zip(records, records[1:])):
        if chrono_key(a) > chrono_key(b):
            raise SchemaViolation(
                f"records out of order at position {position}: "
                f"{a.date} {a.time} > {b.date} {b.time}",
                b.line_number,
            )

    if records:
        logger.debug(f"Verified order of {len(records)} records: "
                     f"{records[0].date} {records[0].time} .. "
                     f"{records[-1].date} {records[-1].time}")
