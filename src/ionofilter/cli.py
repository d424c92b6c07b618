#!/usr/bin/env python3
"""
Command Line Interface for the ionosonde median filter
"""

import sys
import logging
import argparse
from dataclasses import replace
from pathlib import Path

from .config import load_config
from .errors import ConfigError, FileAccessError, SchemaViolation
from .pipeline import FilterPipeline, PipelineConfig
from .plotting import BACKENDS

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_CHANNEL_FAILURE = 3


def configure_logging(level: str = 'INFO') -> None:
    """Set up the root logger for command line use."""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Add handler if none exists
    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter('%(levelname)s:%(name)s:%(message)s'))
        root_logger.addHandler(handler)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='iono-filter',
        description='Sort ionosonde station data chronologically and median-filter '
                    'selected channels (raw vs. filtered plots)',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('input', help='Station data file (header, blank line, data rows)')
    parser.add_argument('--config', '-c', help='TOML configuration file')
    parser.add_argument('--window', '-w', type=int,
                        help='Median window width (odd, default 3)')
    parser.add_argument('--channel', '-n', type=int, action='append', dest='channels',
                        help='Channel index 0-10 to filter (repeatable, default 0 and 5)')
    parser.add_argument('--backend', '-b', choices=BACKENDS,
                        help='Plot renderer (default matplotlib)')
    parser.add_argument('--output-dir', '-o', help='Directory for plot/table files')
    parser.add_argument('--skip-bad-lines', action='store_true',
                        help='Skip malformed data lines instead of aborting')
    parser.add_argument('--debug', '-d', action='store_true', help='Enable DEBUG logging')
    return parser


def resolve_config(args: argparse.Namespace) -> PipelineConfig:
    """Configuration file (if any) overridden by command line flags."""
    config = load_config(args.config) if args.config else PipelineConfig()

    overrides = {}
    if args.window is not None:
        overrides['window'] = args.window
    if args.channels:
        overrides['channels'] = tuple(args.channels)
    if args.backend:
        overrides['backend'] = args.backend
    if args.output_dir:
        overrides['output_dir'] = Path(args.output_dir)
    if args.skip_bad_lines:
        overrides['on_schema_error'] = 'skip'
    if args.debug:
        overrides['log_level'] = 'DEBUG'

    # replace() re-runs __post_init__ validation
    return replace(config, **overrides) if overrides else config


def main(argv=None) -> int:
    """Main entry point for the iono-filter command"""
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging('DEBUG' if args.debug else 'INFO')

    try:
        config = resolve_config(args)
    except FileAccessError as e:
        print(f"❌ Cannot read configuration file: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except ConfigError as e:
        print(f"❌ Invalid configuration: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    logging.getLogger().setLevel(getattr(logging, config.log_level, logging.INFO))

    try:
        report = FilterPipeline(config).run(args.input)
    except FileAccessError as e:
        print(f"❌ Cannot read file: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR
    except SchemaViolation as e:
        print(f"❌ Invalid station data in {args.input}: {e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    print(f"\n📈 {report.record_count} records from {args.input}"
          + (f" ({report.skipped_lines} skipped)" if report.skipped_lines else ""))
    for result in report.results:
        target = f" -> {result.output}" if result.output else ""
        print(f"  • {result.label}: {len(result)} samples, "
              f"{result.changed} filtered{target}")
    for failure in report.failures:
        print(f"  ✗ {failure.label}: {failure.error_type}: {failure.error}")

    return EXIT_OK if report.ok else EXIT_CHANNEL_FAILURE


if __name__ == '__main__':
    sys.exit(main())
