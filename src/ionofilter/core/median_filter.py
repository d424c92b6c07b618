#!/usr/bin/env python3
"""
One-Dimensional Median Filter with Pass-Through Edges

================================================================================
PURPOSE
================================================================================
Suppress isolated spikes in ionosonde channel series (foF2, hmF2, ...)
while keeping step changes sharp. Each interior sample is replaced by the
median of the W samples centered on it.

================================================================================
DEFINITION
================================================================================
For an ordered sequence S of length N and odd window width W:

    edge = floor(W / 2)

    output[i] = S[i]                               i < edge or i >= N - edge
    output[i] = median(S[i-edge], ..., S[i+edge])  edge <= i < N - edge

The median of an odd-sized window is its middle value after ascending sort.

EXAMPLE (W = 3, edge = 1):
    S      = [7, 8, 2, 1, 3, 6, 5, 7, 4]
    i = 1:   sort(7, 8, 2) = (2, 7, 8)   -> 7
    i = 2:   sort(8, 2, 1) = (1, 2, 8)   -> 2
    ...
    output = [7, 7, 2, 2, 3, 5, 6, 5, 4]

BOUNDARIES:
    The first and last `edge` samples have no full window and pass through
    unchanged. When W > N there is no interior at all and the output equals
    the input.

================================================================================
COMPLEXITY
================================================================================
O(N * W log W): every window is sorted independently. With the small fixed
windows used here (W = 3 by default) this beats maintaining a rolling
median structure.

Inputs must be finite; the parser rejects NaN/inf before they get here.
"""

import logging
import operator
from typing import Sequence

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = 3


def validate_window(window) -> int:
    """Return window as int, or raise ValueError unless it is odd and >= 1."""
    try:
        width = operator.index(window)
    except TypeError:
        raise ValueError(f"Window width must be an integer, got {window!r}") from None
    if isinstance(window, bool) or width < 1 or width % 2 == 0:
        raise ValueError(f"Window width must be odd and >= 1, got {window!r}")
    return width


def filter_edge(window: int) -> int:
    """Number of pass-through samples at each end."""
    return validate_window(window) // 2


def window_median(values: Sequence[float]) -> float:
    """Middle value of an odd-sized window after ascending sort."""
    if len(values) % 2 == 0:
        raise ValueError(f"Window must hold an odd number of values, got {len(values)}")
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def median_filter(values: Sequence[float], window: int = DEFAULT_WINDOW) -> np.ndarray:
    """
    Median-filter an ordered sequence.

    Args:
        values: Ordered samples (not modified)
        window: Odd window width W >= 1

    Returns:
        New float64 array, same length as values

    Raises:
        ValueError: window is even, < 1 or not an integer
    """
    width = validate_window(window)
    edge = width // 2

    # np.array copies, so the caller's data is never touched
    filtered = np.array(values, dtype=np.float64)
    if filtered.ndim != 1:
        raise ValueError(f"Expected a 1-D sequence, got shape {filtered.shape}")

    n = len(filtered)
    if width == 1 or width > n:
        if width > n > 0:
            logger.debug(f"Window {width} exceeds {n} samples: all samples pass through")
        return filtered

    windows = sliding_window_view(filtered, width)      # (n - 2*edge, width) view
    medians = np.sort(windows, axis=1)[:, edge]
    filtered[edge:n - edge] = medians
    return filtered
