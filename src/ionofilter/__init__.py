"""
Ionosonde Median Filter (ionofilter)

Batch pipeline for ionosonde station exports: parses fixed-schema
measurement lines, puts them in verified chronological order and applies
a sliding-window median filter to selected channels (foF2, hmF2, ...),
producing raw/filtered pairs for comparison plots.

Quick Start:
    from ionofilter import run_pipeline, PipelineConfig

    report = run_pipeline('station.txt', PipelineConfig(window=3, backend='csv'))
    for result in report.results:
        print(f"{result.label}: {result.changed} samples replaced")

See DESIGN.md for design details.
"""

from .version import IONOFILTER_VERSION as __version__

# =============================================================================
# FILTER CORE
# =============================================================================
from .core import (
    tokenize,
    parse_record,
    read_records,
    load_records,
    chrono_key,
    sort_records,
    is_chronological,
    verify_order,
    extract_channel,
    channel_label,
    median_filter,
    window_median,
    FOF2_CHANNEL,
    HMF2_CHANNEL,
)

# =============================================================================
# DATA CONTRACTS
# =============================================================================
from .interfaces import (
    CHANNEL_COUNT,
    Record,
    ParseResult,
    ChannelResult,
    ChannelFailure,
    PipelineReport,
    PlotSink,
)

# =============================================================================
# RENDERERS, PIPELINE, CONFIGURATION
# =============================================================================
from .plotting import (
    MatplotlibPlotSink,
    GnuplotPlotSink,
    CsvPlotSink,
    NullPlotSink,
    create_plot_sink,
)
from .pipeline import PipelineConfig, FilterPipeline, run_pipeline
from .config import load_config, config_from_dict
from .errors import (
    IonoFilterError,
    FileAccessError,
    SchemaViolation,
    ChronoFormatError,
    ChannelIndexError,
    PlotSinkError,
    ConfigError,
)

__all__ = [
    "__version__",
    # === Core ===
    "tokenize",
    "parse_record",
    "read_records",
    "load_records",
    "chrono_key",
    "sort_records",
    "is_chronological",
    "verify_order",
    "extract_channel",
    "channel_label",
    "median_filter",
    "window_median",
    "FOF2_CHANNEL",
    "HMF2_CHANNEL",
    # === Data contracts ===
    "CHANNEL_COUNT",
    "Record",
    "ParseResult",
    "ChannelResult",
    "ChannelFailure",
    "PipelineReport",
    "PlotSink",
    # === Renderers ===
    "MatplotlibPlotSink",
    "GnuplotPlotSink",
    "CsvPlotSink",
    "NullPlotSink",
    "create_plot_sink",
    # === Pipeline ===
    "PipelineConfig",
    "FilterPipeline",
    "run_pipeline",
    "load_config",
    "config_from_dict",
    # === Errors ===
    "IonoFilterError",
    "FileAccessError",
    "SchemaViolation",
    "ChronoFormatError",
    "ChannelIndexError",
    "PlotSinkError",
    "ConfigError",
]
