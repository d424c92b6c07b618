"""Ionosonde Filter - Core Module

Parse -> sort -> extract -> filter, in that order:

- records:       station lines -> Record (schema + timestamp layout checks)
- chrono:        ChronoKey ordering and order verification
- channels:      records -> one channel as a float array
- median_filter: fixed-width median filter with pass-through edges

Example:
    from ionofilter.core import load_records, sort_records, extract_channel, median_filter

    records = sort_records(load_records('station.txt').records)
    fof2 = extract_channel(records, 0)
    smoothed = median_filter(fof2, window=3)
"""

from .records import (
    DEFAULT_HEADER_LINES,
    ON_ERROR_ABORT,
    ON_ERROR_SKIP,
    tokenize,
    parse_record,
    read_records,
    load_records,
)
from .chrono import (
    chrono_key,
    sort_records,
    is_chronological,
    verify_order,
)
from .channels import (
    FOF2_CHANNEL,
    HMF2_CHANNEL,
    DEFAULT_CHANNELS,
    DEFAULT_LABELS,
    check_channel_index,
    channel_label,
    extract_channel,
)
from .median_filter import (
    DEFAULT_WINDOW,
    validate_window,
    filter_edge,
    window_median,
    median_filter,
)

__all__ = [
    'DEFAULT_HEADER_LINES',
    'ON_ERROR_ABORT',
    'ON_ERROR_SKIP',
    'tokenize',
    'parse_record',
    'read_records',
    'load_records',
    'chrono_key',
    'sort_records',
    'is_chronological',
    'verify_order',
    'FOF2_CHANNEL',
    'HMF2_CHANNEL',
    'DEFAULT_CHANNELS',
    'DEFAULT_LABELS',
    'check_channel_index',
    'channel_label',
    'extract_channel',
    'DEFAULT_WINDOW',
    'validate_window',
    'filter_edge',
    'window_median',
    'median_filter',
]
