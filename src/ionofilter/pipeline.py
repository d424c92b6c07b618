#!/usr/bin/env python3
"""
Station Filter Pipeline

Runs one station file through the filter core, once per requested channel:

    station file
         │
         ▼
    ┌──────────────────────────────────────────────┐
    │ Parse: 15-token records, timestamp layout     │  batch failure on error
    │ Sort:  ChronoKey (date + time), then verify   │  batch failure on error
    └──────────────────────┬───────────────────────┘
                           │  (for each channel)
                           ▼
    ┌──────────────────────────────────────────────┐
    │ Extract channel -> median filter -> PlotSink  │  failure local to channel
    └──────────────────────────────────────────────┘

The pipeline owns the record list for the whole run; extraction and
filtering only read it.

Usage:
------
    config = PipelineConfig(window=3, channels=(0, 5))
    pipeline = FilterPipeline(config, sink=MatplotlibPlotSink(Path('plots')))
    report = pipeline.run(Path('station.txt'))

    for result in report.results:
        print(result.label, result.changed)
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union

from .core.channels import DEFAULT_CHANNELS, channel_label, extract_channel
from .core.chrono import sort_records, verify_order
from .core.median_filter import DEFAULT_WINDOW, median_filter, validate_window
from .core.records import (
    DEFAULT_HEADER_LINES,
    ERROR_POLICIES,
    ON_ERROR_ABORT,
    load_records,
    read_records,
)
from .errors import ConfigError, PlotSinkError
from .interfaces.data_models import (
    ChannelFailure,
    ChannelResult,
    ParseResult,
    PipelineReport,
    Record,
)
from .interfaces.plot_sink import PlotSink
from .plotting import DEFAULT_DPI, create_plot_sink
from .version import log_version_info

logger = logging.getLogger(__name__)


@dataclass
class PipelineConfig:
    """
    Configuration for a filter run.
    """
    # Filter settings
    window: int = DEFAULT_WINDOW
    channels: Tuple[int, ...] = DEFAULT_CHANNELS
    labels: Dict[int, str] = field(default_factory=dict)

    # Input settings
    header_lines: int = DEFAULT_HEADER_LINES
    on_schema_error: str = ON_ERROR_ABORT   # 'abort' or 'skip'

    # Output settings
    backend: str = 'matplotlib'
    output_dir: Path = Path('plots')
    dpi: int = DEFAULT_DPI

    log_level: str = 'INFO'

    def __post_init__(self):
        try:
            self.window = validate_window(self.window)
        except ValueError as e:
            raise ConfigError(str(e)) from None
        if self.on_schema_error not in ERROR_POLICIES:
            raise ConfigError(
                f"on_schema_error must be one of {ERROR_POLICIES}, got {self.on_schema_error!r}"
            )
        if isinstance(self.header_lines, bool) or not isinstance(self.header_lines, int) \
                or self.header_lines < 0:
            raise ConfigError(f"header_lines must be an integer >= 0, got {self.header_lines!r}")
        # Channel indices are checked per channel at run time, not here
        self.channels = tuple(self.channels)
        self.output_dir = Path(self.output_dir)

    def label_for(self, index) -> str:
        return channel_label(index, self.labels)


class FilterPipeline:
    """
    Parse, sort and median-filter one station file.

    Batch failures (FileAccessError, SchemaViolation) propagate from
    load()/run(). Channel failures are collected in the report.
    """

    def __init__(self, config: Optional[PipelineConfig] = None,
                 sink: Optional[PlotSink] = None):
        """
        Args:
            config: PipelineConfig, defaults if omitted
            sink: Renderer for each channel; built from config.backend if omitted
        """
        self.config = config or PipelineConfig()
        self.sink = sink if sink is not None else create_plot_sink(
            self.config.backend, self.config.output_dir, self.config.dpi
        )

    def sort(self, parsed: ParseResult) -> List[Record]:
        records = sort_records(parsed.records)
        verify_order(records)
        return records

    def load(self, path: Union[str, Path]) -> List[Record]:
        """Read, parse and chronologically sort a station file."""
        parsed = self._load(path)
        return parsed.records

    def _load(self, path: Union[str, Path]) -> ParseResult:
        parsed = load_records(path, header_lines=self.config.header_lines,
                              on_error=self.config.on_schema_error)
        self.sort(parsed)
        logger.info(f"Loaded {len(parsed)} records from {path}"
                    + (f" ({parsed.skipped} malformed lines skipped)" if parsed.skipped else ""))
        return parsed

    def load_lines(self, lines: Sequence[str]) -> List[Record]:
        """Same as load() for lines already in memory."""
        parsed = read_records(lines, header_lines=self.config.header_lines,
                              on_error=self.config.on_schema_error)
        return self.sort(parsed)

    def filter_channel(self, records: Sequence[Record], index: int) -> ChannelResult:
        """
        Extract one channel and median-filter it.

        Raises:
            ChannelIndexError: index outside [0, 10]
        """
        raw = extract_channel(records, index)
        filtered = median_filter(raw, self.config.window)
        return ChannelResult(
            index=index,
            label=self.config.label_for(index),
            raw=raw,
            filtered=filtered,
            window=self.config.window,
        )

    def process_records(self, records: Sequence[Record],
                        source: Optional[Path] = None,
                        skipped_lines: int = 0) -> PipelineReport:
        """Filter and render every configured channel of sorted records."""
        report = PipelineReport(source=source, record_count=len(records),
                                skipped_lines=skipped_lines)

        for index in self.config.channels:
            label = self.config.label_for(index)
            try:
                result = self.filter_channel(records, index)
                result.output = self.sink.render(result.raw, result.filtered, result.label)
            except (IndexError, ValueError, PlotSinkError) as e:
                logger.error(f"❌ Channel {label} ({index!r}) failed: {e}")
                report.failures.append(ChannelFailure.from_exception(index, label, e))
                continue

            report.results.append(result)
            logger.info(f"Channel {result.label}: {len(result)} samples, "
                        f"{result.changed} replaced by window-{result.window} median")

        return report

    def run(self, path: Union[str, Path]) -> PipelineReport:
        """Load a station file and process every configured channel."""
        log_version_info(logger)
        path = Path(path)
        try:
            parsed = self._load(path)
            return self.process_records(parsed.records, source=path,
                                        skipped_lines=parsed.skipped)
        finally:
            self.sink.close()


def run_pipeline(
    path: Union[str, Path],
    config: Optional[PipelineConfig] = None,
    sink: Optional[PlotSink] = None
) -> PipelineReport:
    """
    Run the filter pipeline with standard configuration.

    Args:
        path: Station file
        config: Pipeline settings (defaults if omitted)
        sink: Renderer (built from config.backend if omitted)

    Returns:
        PipelineReport with one result or failure per channel
    """
    return FilterPipeline(config, sink).run(path)
