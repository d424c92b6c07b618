"""
Shared fixtures for the ionofilter test suite.
"""

import sys
from pathlib import Path
from typing import List, Optional, Tuple

import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest

# Add src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from ionofilter.interfaces.plot_sink import PlotSink, check_pair


HEADER = "#Time CS foF2 foF1 foE foEs h'Es hmF2 hmF1 hmE B0 B1 D1"


def make_line(date: str = '2021.03.03', time: str = '11:00:00',
              sequence: int = 75, channels: Optional[List[float]] = None,
              symbol: str = '(062)') -> str:
    """Build one 15-token station line."""
    if channels is None:
        channels = [float(i) for i in range(11)]
    values = ' '.join(f"{v:.3f}" for v in channels)
    return f"{date} {symbol} {time} {sequence} {values}\n"


def make_station_text(rows: List[Tuple[str, str, float, float]]) -> str:
    """
    Station file text from (date, time, foF2, hmF2) tuples, header and blank
    line included.
    """
    lines = [HEADER + "\n", "\n"]
    for seq, (date, time, fof2, hmf2) in enumerate(rows):
        channels = [fof2, 0.0, 2.5, 0.0, 0.0, hmf2, 0.0, 110.0, 100.0, 2.0, 0.5]
        lines.append(make_line(date, time, 70 + seq, channels))
    return ''.join(lines)


# Deliberately out of order; foF2 carries a spike at 11:15
UNSORTED_ROWS = [
    ('2021.03.03', '11:30:00', 5.1, 252.0),
    ('2021.03.03', '11:00:00', 4.9, 250.0),
    ('2021.03.02', '23:45:00', 4.8, 249.0),
    ('2021.03.03', '11:15:00', 9.9, 251.0),
    ('2021.03.03', '11:45:00', 5.2, 253.0),
]


@pytest.fixture
def station_text() -> str:
    return make_station_text(UNSORTED_ROWS)


@pytest.fixture
def station_file(tmp_path, station_text) -> Path:
    path = tmp_path / 'station.txt'
    path.write_text(station_text)
    return path


class RecordingPlotSink(PlotSink):
    """PlotSink that keeps every rendered pair in memory."""

    def __init__(self, fail_on: Optional[str] = None):
        self.rendered: List[Tuple[np.ndarray, np.ndarray, str]] = []
        self.fail_on = fail_on
        self.closed = False

    def render(self, raw, filtered, label):
        check_pair(raw, filtered)
        if label == self.fail_on:
            from ionofilter.errors import PlotSinkError
            raise PlotSinkError(f"refusing to render {label}")
        self.rendered.append((np.array(raw), np.array(filtered), label))
        return f"memory:{label}"

    def close(self):
        self.closed = True

    @property
    def labels(self) -> List[str]:
        return [label for _, _, label in self.rendered]


@pytest.fixture
def recording_sink() -> RecordingPlotSink:
    return RecordingPlotSink()
