#!/usr/bin/env python3
"""
Plot Sinks - Raw vs. Median-Filtered Channel Renderers

Concrete implementations of the PlotSink interface:

    MatplotlibPlotSink  PNG per channel (Agg backend, headless safe)
    GnuplotPlotSink     inline-data plot streamed to a gnuplot text pipe
    CsvPlotSink         sample/raw/filtered table per channel (pandas)
    NullPlotSink        discards everything

All renderers plot sample index (chronological rank) on the x axis.

Usage:
------
    sink = create_plot_sink('matplotlib', output_dir=Path('plots'))
    with sink:
        sink.render(raw, filtered, 'foF2')
"""

import logging
import re
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')  # Non-interactive backend for batch use
import matplotlib.pyplot as plt
import numpy as np
import pandas as pd

from .errors import ConfigError, PlotSinkError
from .interfaces.plot_sink import PlotSink, check_pair

logger = logging.getLogger(__name__)

BACKENDS = ('matplotlib', 'gnuplot', 'csv', 'none')

DEFAULT_DPI = 150
GNUPLOT_COMMAND = ('gnuplot', '-persistent')


def label_to_filename(label: str) -> str:
    """Convert a channel label to a file-name stem.

    Examples:
        >>> label_to_filename("foF2")
        'foF2'
        >>> label_to_filename("h'Es (km)")
        'h_Es_km'
    """
    stem = re.sub(r'[^A-Za-z0-9._-]+', '_', label).strip('_')
    return stem or 'channel'


class MatplotlibPlotSink(PlotSink):
    """Write one PNG per channel: unfiltered points vs. filtered line."""

    def __init__(self, output_dir: Path, dpi: int = DEFAULT_DPI, prefix: str = ''):
        self.output_dir = Path(output_dir)
        self.dpi = dpi
        self.prefix = prefix
        self.written: List[Path] = []

    def output_path(self, label: str) -> Path:
        return self.output_dir / f"{self.prefix}{label_to_filename(label)}_median.png"

    def render(self, raw: np.ndarray, filtered: np.ndarray, label: str) -> Optional[str]:
        check_pair(raw, filtered)
        output_path = self.output_path(label)
        samples = np.arange(len(raw))

        fig, ax = plt.subplots(figsize=(12, 5))
        try:
            ax.plot(samples, raw, linestyle=':', marker='.', color='0.4',
                    label='unfiltered')
            ax.plot(samples, filtered, linestyle='-', color='tab:green',
                    label='filtered')
            ax.set_title(label, fontsize=14, fontweight='bold')
            ax.set_xlabel('Sample (chronological order)')
            ax.set_ylabel(label)
            ax.grid(True, alpha=0.3, linestyle='--')
            ax.legend(loc='best')
            fig.tight_layout()

            output_path.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(output_path, dpi=self.dpi)
        except OSError as e:
            raise PlotSinkError(f"Cannot write plot {output_path}: {e}") from e
        finally:
            plt.close(fig)

        self.written.append(output_path)
        logger.info(f"✅ Plot saved: {output_path}")
        return str(output_path)


class GnuplotPlotSink(PlotSink):
    """
    Stream each channel to a gnuplot process through a text pipe.

    One process per render; '-persistent' keeps the window open after the
    pipe closes.
    """

    def __init__(self, command: Sequence[str] = GNUPLOT_COMMAND):
        self.command = tuple(command)

    @staticmethod
    def script(raw: np.ndarray, filtered: np.ndarray, label: str) -> str:
        """Gnuplot commands with both series as inline data blocks."""
        title = label.replace("'", "''")
        lines = [
            f"set title '{title}'",
            "plot '-' u 1:2 t 'unfiltered' w lp lt 0, '' u 1:2 t 'filtered' w lines lt 2",
        ]
        for series in (raw, filtered):
            lines.extend(f"{float(i):f} {float(v):f}" for i, v in enumerate(series))
            lines.append("e")
        return "\n".join(lines) + "\n"

    def render(self, raw: np.ndarray, filtered: np.ndarray, label: str) -> Optional[str]:
        check_pair(raw, filtered)
        try:
            process = subprocess.Popen(self.command, stdin=subprocess.PIPE, text=True)
        except OSError as e:
            raise PlotSinkError(f"Cannot launch {self.command[0]}: {e}") from e

        try:
            process.communicate(self.script(raw, filtered, label))
        except OSError as e:
            process.kill()
            raise PlotSinkError(f"{self.command[0]} pipe failed: {e}") from e

        if process.returncode:
            raise PlotSinkError(f"{self.command[0]} exited with status {process.returncode}")

        logger.info(f"Sent {label} ({len(raw)} samples) to {self.command[0]}")
        return None


class CsvPlotSink(PlotSink):
    """Write sample, raw and filtered columns to <label>_median.csv."""

    def __init__(self, output_dir: Path, prefix: str = ''):
        self.output_dir = Path(output_dir)
        self.prefix = prefix

    def output_path(self, label: str) -> Path:
        return self.output_dir / f"{self.prefix}{label_to_filename(label)}_median.csv"

    def render(self, raw: np.ndarray, filtered: np.ndarray, label: str) -> Optional[str]:
        check_pair(raw, filtered)
        output_path = self.output_path(label)
        frame = pd.DataFrame({
            'sample': np.arange(len(raw)),
            'raw': np.asarray(raw, dtype=np.float64),
            'filtered': np.asarray(filtered, dtype=np.float64),
        })
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(output_path, index=False)
        except OSError as e:
            raise PlotSinkError(f"Cannot write table {output_path}: {e}") from e

        logger.info(f"✅ Table saved: {output_path}")
        return str(output_path)


class NullPlotSink(PlotSink):
    """Accept and drop every pair."""

    def render(self, raw: np.ndarray, filtered: np.ndarray, label: str) -> Optional[str]:
        check_pair(raw, filtered)
        return None


def create_plot_sink(
    backend: str = 'matplotlib',
    output_dir: Path = Path('plots'),
    dpi: int = DEFAULT_DPI,
    gnuplot_command: Tuple[str, ...] = GNUPLOT_COMMAND
) -> PlotSink:
    """
    Create a plot sink by backend name.

    Args:
        backend: One of BACKENDS
        output_dir: Directory for file-based renderers
        dpi: PNG resolution (matplotlib only)
        gnuplot_command: Command line for the gnuplot pipe

    Raises:
        ConfigError: unknown backend
    """
    backend = backend.strip().lower()
    if backend == 'matplotlib':
        return MatplotlibPlotSink(output_dir, dpi=dpi)
    if backend == 'gnuplot':
        return GnuplotPlotSink(gnuplot_command)
    if backend == 'csv':
        return CsvPlotSink(output_dir)
    if backend == 'none':
        return NullPlotSink()
    raise ConfigError(f"Unknown plot backend {backend!r} (expected one of {BACKENDS})")
