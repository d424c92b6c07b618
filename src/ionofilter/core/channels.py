"""
Channel projection: one scalar series out of the multi-channel records.
"""

import operator
from typing import Mapping, Optional, Sequence

import numpy as np

from ..errors import ChannelIndexError
from ..interfaces.data_models import CHANNEL_COUNT, Record

# Channels exercised by the reference use case
FOF2_CHANNEL = 0    # F2 critical frequency (MHz)
HMF2_CHANNEL = 5    # F2 peak height (km)

DEFAULT_CHANNELS = (FOF2_CHANNEL, HMF2_CHANNEL)

DEFAULT_LABELS = {
    FOF2_CHANNEL: 'foF2',
    HMF2_CHANNEL: 'hmF2',
}


def check_channel_index(index) -> int:
    """Return index as int, or raise ChannelIndexError if outside [0, 10]."""
    try:
        position = operator.index(index)
    except TypeError:
        raise ChannelIndexError(index, CHANNEL_COUNT) from None
    if isinstance(index, bool) or not 0 <= position < CHANNEL_COUNT:
        raise ChannelIndexError(index, CHANNEL_COUNT)
    return position


def channel_label(index: int, labels: Optional[Mapping[int, str]] = None) -> str:
    """Human-readable name for a channel index."""
    if labels and index in labels:
        return labels[index]
    return DEFAULT_LABELS.get(index, f'channel_{index}')


def extract_channel(records: Sequence[Record], index: int) -> np.ndarray:
    """
    Project records onto one channel, preserving record order.

    Raises:
        ChannelIndexError: index outside [0, CHANNEL_COUNT)
    """
    position = check_channel_index(index)
    return np.array([record.channels[position] for record in records],
                    dtype=np.float64)
