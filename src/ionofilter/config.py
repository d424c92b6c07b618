"""
Configuration loading for the filter pipeline

Reads a TOML file into a PipelineConfig. Every section is optional;
missing keys keep their defaults and unknown keys are ignored.

Example file:

    [input]
    header_lines = 2
    on_schema_error = "skip"

    [filter]
    window = 5
    channels = [0, 5]

    [filter.labels]
    0 = "foF2"
    5 = "hmF2"

    [output]
    backend = "csv"
    output_dir = "plots"
    dpi = 150

    [logging]
    level = "DEBUG"
"""

import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Union

import toml

from .errors import ConfigError, FileAccessError
from .pipeline import PipelineConfig
from .plotting import BACKENDS

logger = logging.getLogger(__name__)


def _section(data: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    section = data.get(name, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{name}] must be a table")
    return section


def _int(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{key} must be an integer, got {value!r}")
    return value


def _labels(raw: Any) -> Dict[int, str]:
    if not isinstance(raw, Mapping):
        raise ConfigError("[filter.labels] must be a table")
    labels = {}
    for key, label in raw.items():
        try:
            index = int(key)
        except ValueError:
            raise ConfigError(f"channel label key {key!r} is not an integer") from None
        labels[index] = str(label)
    return labels


def config_from_dict(data: Mapping[str, Any]) -> PipelineConfig:
    """
    Build a PipelineConfig from parsed TOML data.

    Raises:
        ConfigError: a value has the wrong type or is out of range
    """
    kwargs: Dict[str, Any] = {}

    input_section = _section(data, 'input')
    if 'header_lines' in input_section:
        kwargs['header_lines'] = _int(input_section['header_lines'], 'input.header_lines')
    if 'on_schema_error' in input_section:
        kwargs['on_schema_error'] = str(input_section['on_schema_error']).strip().lower()

    filter_section = _section(data, 'filter')
    if 'window' in filter_section:
        kwargs['window'] = _int(filter_section['window'], 'filter.window')
    if 'channels' in filter_section:
        channels = filter_section['channels']
        if not isinstance(channels, list):
            raise ConfigError(f"filter.channels must be a list, got {channels!r}")
        kwargs['channels'] = tuple(_int(c, 'filter.channels') for c in channels)
    if 'labels' in filter_section:
        kwargs['labels'] = _labels(filter_section['labels'])

    output_section = _section(data, 'output')
    if 'backend' in output_section:
        backend = str(output_section['backend']).strip().lower()
        if backend not in BACKENDS:
            raise ConfigError(f"output.backend must be one of {BACKENDS}, got {backend!r}")
        kwargs['backend'] = backend
    if 'output_dir' in output_section:
        kwargs['output_dir'] = Path(str(output_section['output_dir']))
    if 'dpi' in output_section:
        kwargs['dpi'] = _int(output_section['dpi'], 'output.dpi')

    logging_section = _section(data, 'logging')
    if 'level' in logging_section:
        kwargs['log_level'] = str(logging_section['level']).strip().upper()

    return PipelineConfig(**kwargs)


def load_config(config_file: Union[str, Path]) -> PipelineConfig:
    """
    Load a TOML configuration file.

    Raises:
        FileAccessError: file missing or unreadable
        ConfigError: invalid TOML or invalid values
    """
    config_file = Path(config_file)
    try:
        with open(config_file, 'r') as f:
            data = toml.load(f)
    except OSError as e:
        raise FileAccessError(config_file, e.strerror or str(e)) from e
    except toml.TomlDecodeError as e:
        raise ConfigError(f"{config_file}: {e}") from e

    logger.debug(f"Loaded configuration from {config_file}")
    return config_from_dict(data)
