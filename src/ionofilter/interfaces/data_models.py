"""
Shared data structures for the ionosonde filter pipeline.

Record is produced by the parser and owned by the pipeline; the per-channel
results are what plot sinks and callers consume.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import numpy as np
import pandas as pd

# Fixed station line schema: date, symbol, time, sequence, 11 channels
CHANNEL_COUNT = 11
TOKEN_COUNT = 4 + CHANNEL_COUNT


@dataclass(frozen=True)
class Record:
    """One parsed station measurement line."""
    date: str                        # e.g. '2021.03.03'
    symbol: str                      # day-of-year marker, e.g. '(062)'
    time: str                        # e.g. '11:00:00'
    sequence: int                    # integer field (confidence score / row id)
    channels: Tuple[float, ...]      # exactly CHANNEL_COUNT finite values
    line_number: int = 0             # 1-based source line, 0 if unknown

    @property
    def chrono_key(self) -> str:
        """Ordering key: date concatenated with time."""
        return self.date + self.time

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'symbol': self.symbol,
            'time': self.time,
            'sequence': self.sequence,
            'channels': list(self.channels),
            'line_number': self.line_number,
        }


@dataclass
class ParseResult:
    """Records read from one station file plus what was dropped."""
    records: List[Record] = field(default_factory=list)
    skipped: int = 0                 # malformed lines dropped in 'skip' mode
    source: Optional[Path] = None

    def __len__(self) -> int:
        return len(self.records)


@dataclass
class ChannelResult:
    """Raw and median-filtered sequence for one channel."""
    index: int
    label: str
    raw: np.ndarray
    filtered: np.ndarray
    window: int
    output: Optional[str] = None     # what the plot sink produced, if anything

    def __len__(self) -> int:
        return len(self.raw)

    @property
    def changed(self) -> int:
        """Number of samples the filter replaced."""
        return int(np.count_nonzero(self.raw != self.filtered))

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame({
            'sample': np.arange(len(self.raw)),
            'raw': self.raw,
            'filtered': self.filtered,
        })

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'label': self.label,
            'window': self.window,
            'samples': len(self.raw),
            'changed': self.changed,
            'output': self.output,
        }


@dataclass
class ChannelFailure:
    """A channel that could not be extracted, filtered or rendered."""
    index: Any
    label: str
    error: str
    error_type: str

    @classmethod
    def from_exception(cls, index, label: str, exc: BaseException) -> 'ChannelFailure':
        return cls(index=index, label=label, error=str(exc),
                   error_type=type(exc).__name__)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'index': self.index,
            'label': self.label,
            'error': self.error,
            'error_type': self.error_type,
        }


@dataclass
class PipelineReport:
    """Outcome of one pipeline run over a station file."""
    source: Optional[Path] = None
    record_count: int = 0
    skipped_lines: int = 0
    results: List[ChannelResult] = field(default_factory=list)
    failures: List[ChannelFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    def result_for(self, index: int) -> Optional[ChannelResult]:
        for result in self.results:
            if result.index == index:
                return result
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'source': str(self.source) if self.source else None,
            'record_count': self.record_count,
            'skipped_lines': self.skipped_lines,
            'results': [r.to_dict() for r in self.results],
            'failures': [f.to_dict() for f in self.failures],
        }
