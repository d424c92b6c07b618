#!/usr/bin/env python3
"""
Filter Station Demo - Library API

Runs the sample ionosonde file through the filter core step by step, then
through the full pipeline with a CSV sink.

Usage:
    python examples/filter_station_demo.py
    python examples/filter_station_demo.py --input my_station.txt --window 5
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / 'src'))

from ionofilter import (
    FOF2_CHANNEL,
    HMF2_CHANNEL,
    CsvPlotSink,
    PipelineConfig,
    extract_channel,
    load_records,
    median_filter,
    run_pipeline,
    sort_records,
    verify_order,
)


def demo_step_by_step(path: Path, window: int):
    """Each stage of the core by hand"""
    print("\n" + "="*60)
    print("Demo 1: Parse -> sort -> extract -> filter")
    print("="*60)

    records = load_records(path).records
    print(f"Parsed {len(records)} records; first in file: {records[0].date} {records[0].time}")

    sort_records(records)
    verify_order(records)
    print(f"Sorted: {records[0].time} .. {records[-1].time}")

    for index, name in ((FOF2_CHANNEL, 'foF2'), (HMF2_CHANNEL, 'hmF2')):
        raw = extract_channel(records, index)
        filtered = median_filter(raw, window)
        print(f"\n{name}:")
        for record, before, after in zip(records, raw, filtered):
            marker = '  <- replaced' if before != after else ''
            print(f"  {record.time}  {before:8.3f}  {after:8.3f}{marker}")


def demo_pipeline(path: Path, window: int, output_dir: Path):
    """The same run through the pipeline with a CSV sink"""
    print("\n" + "="*60)
    print("Demo 2: Pipeline with CSV output")
    print("="*60)

    config = PipelineConfig(window=window, channels=(FOF2_CHANNEL, HMF2_CHANNEL))
    report = run_pipeline(path, config, sink=CsvPlotSink(output_dir))

    for result in report.results:
        print(f"  {result.label}: {result.changed} of {len(result)} samples replaced "
              f"-> {result.output}")


def main():
    parser = argparse.ArgumentParser(description='ionofilter library demo')
    parser.add_argument('--input', type=Path,
                        default=Path(__file__).parent / 'sample_station.txt')
    parser.add_argument('--window', type=int, default=3)
    parser.add_argument('--output-dir', type=Path, default=Path('demo_output'))
    args = parser.parse_args()

    demo_step_by_step(args.input, args.window)
    demo_pipeline(args.input, args.window, args.output_dir)


if __name__ == '__main__':
    main()
