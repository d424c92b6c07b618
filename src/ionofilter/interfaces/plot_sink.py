"""
Plot Sink Interface

Defines the contract for consuming a raw/filtered channel pair.
The filtering core only hands data over; renderers own every output
concern (files, external processes, figures).
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

import numpy as np


def check_pair(raw: Sequence[float], filtered: Sequence[float]) -> None:
    """Raise ValueError unless both sequences have the same length."""
    if len(raw) != len(filtered):
        raise ValueError(
            f"raw and filtered sequences differ in length "
            f"({len(raw)} != {len(filtered)})"
        )


class PlotSink(ABC):
    """
    Interface for rendering an unfiltered sequence against its filtered one.

    Implementations:
        MatplotlibPlotSink - PNG file per channel
        GnuplotPlotSink    - streams inline data to a gnuplot pipe
        CsvPlotSink        - tabular dump per channel
        NullPlotSink       - discards data

    Design principle:
        The x axis is the sample index (chronological rank), so renderers
        never need the records themselves, only two equal-length
        sequences and a label.
    """

    @abstractmethod
    def render(
        self,
        raw: np.ndarray,
        filtered: np.ndarray,
        label: str
    ) -> Optional[str]:
        """
        Render one channel.

        Args:
            raw: Unfiltered values in chronological order
            filtered: Median-filtered values, same length as raw
            label: Channel label used for titles/file names

        Returns:
            Description of what was produced (e.g. file path), or None

        Raises:
            ValueError: raw and filtered lengths differ
            PlotSinkError: renderer could not produce its output
        """
        pass

    def close(self) -> None:
        """Release renderer resources. Default: nothing to release."""
        pass

    def __enter__(self) -> 'PlotSink':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
