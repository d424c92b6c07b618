"""
Ionosonde Filter Interfaces

Data contracts shared by the parser, the filter core and the renderers.
"""

# Data models (shared structures)
from .data_models import (
    CHANNEL_COUNT,
    TOKEN_COUNT,
    Record,
    ParseResult,
    ChannelResult,
    ChannelFailure,
    PipelineReport,
)

# Interface definitions (abstract base classes)
from .plot_sink import (
    PlotSink,
    check_pair,
)

__all__ = [
    'CHANNEL_COUNT',
    'TOKEN_COUNT',
    'Record',
    'ParseResult',
    'ChannelResult',
    'ChannelFailure',
    'PipelineReport',
    'PlotSink',
    'check_pair',
]
