#!/usr/bin/env python3
"""
Main pipeline for the Cyclistic (Divvy) trip data.

Reads one legacy-schema file (2019) and one current-schema file (2020),
normalizes both onto the 2020 schema, derives trip_duration and calendar
fields, drops invalid trips, stacks the two periods and writes summary
tables by rider type.

Steps (each a pure DataFrame -> DataFrame function):
    load -> normalize -> derive -> filter -> unify -> aggregate

Usage:
    cyclistic-pipeline
    cyclistic-pipeline --legacy trips_2019.csv --current trips_2020.csv
    cyclistic-pipeline --format parquet --output-dir out/
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, Tuple

import duckdb
import pandas as pd

from . import config
from .aggregate import build_summaries, noncanonical_rider_counts
from .derive import derive_fields
from .errors import PipelineError
from .filters import filter_stats, filter_trips
from .load import load_sources
from .normalize import detect_schema, normalize
from .unify import unify

EXPORT_FORMATS = {
    'csv': "FORMAT CSV, HEADER",
    'parquet': "FORMAT PARQUET, COMPRESSION ZSTD",
}


def prepare(raw: pd.DataFrame) -> Tuple[pd.DataFrame, str, dict]:
    """Normalize, derive and filter one source. Returns (trips, schema, stats)."""
    schema = detect_schema(raw)
    trips = normalize(raw, schema)
    trips = derive_fields(trips, schema)
    stats = {'schema': schema, **filter_stats(trips)}
    return filter_trips(trips), schema, stats


def build_unified(legacy_raw: pd.DataFrame, current_raw: pd.DataFrame) -> Tuple[pd.DataFrame, dict]:
    """Run both raw tables through the cleaning steps and stack them."""
    legacy, _, legacy_stats = prepare(legacy_raw)
    current, _, current_stats = prepare(current_raw)

    unified = unify(legacy, current)
    stats = {
        'legacy': legacy_stats,
        'current': current_stats,
        'rows_unified': len(unified),
    }
    return unified, stats


def export_summaries(summaries: Dict[str, pd.DataFrame], output_dir: Path, fmt: str = 'csv') -> list:
    """Write each summary table to output_dir. Returns the paths written."""
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unsupported export format: {fmt}")

    output_dir.mkdir(parents=True, exist_ok=True)
    written = []

    con = duckdb.connect()
    try:
        for name, table in summaries.items():
            output_path = output_dir / f"{name}.{fmt}"
            escaped = str(output_path).replace("'", "''")
            con.register("summary", table)
            con.execute(f"COPY summary TO '{escaped}' ({EXPORT_FORMATS[fmt]})")
            con.unregister("summary")
            written.append(output_path)
    finally:
        con.close()

    return written


def print_summaries(summaries: Dict[str, pd.DataFrame]):
    for name, table in summaries.items():
        print(f"\n{name} ({len(table)} rows)")
        print(table.to_string(index=False))


def main(argv=None):
    parser = argparse.ArgumentParser(description="Reconcile and summarize Cyclistic trip data")
    parser.add_argument("--legacy", type=Path, default=config.DEFAULT_LEGACY_FILE,
                        help="Trip file in the legacy (2019) schema")
    parser.add_argument("--current", type=Path, default=config.DEFAULT_CURRENT_FILE,
                        help="Trip file in the current (2020) schema")
    parser.add_argument("--output-dir", type=Path, default=config.OUTPUT_DIR,
                        help="Directory for summary tables")
    parser.add_argument("--logs-dir", type=Path, default=config.LOGS_DIR,
                        help="Directory for the JSON run log")
    parser.add_argument("--format", choices=sorted(EXPORT_FORMATS), default='csv',
                        help="Summary file format")
    parser.add_argument("--no-export", action="store_true",
                        help="Print summaries without writing files")

    args = parser.parse_args(argv)

    print("Loading trip files...")
    try:
        legacy_raw, current_raw = load_sources(args.legacy, args.current)
        print(f"  {args.legacy.name}: {len(legacy_raw):,} rows")
        print(f"  {args.current.name}: {len(current_raw):,} rows")

        print("\nCleaning and unifying...")
        unified, stats = build_unified(legacy_raw, current_raw)
    except PipelineError as e:
        print(f"✗ {e}")
        return 1

    for source in ('legacy', 'current'):
        s = stats[source]
        filtered = s['rows_in'] - s['rows_out']
        filter_pct = 100 * filtered / max(s['rows_in'], 1)
        print(f"  {source} ({s['schema']}): {s['rows_in']:,} → {s['rows_out']:,} rows ({filter_pct:.1f}% filtered)")
    print(f"  Unified: {stats['rows_unified']:,} rows")
    if stats['legacy']['schema'] == stats['current']['schema']:
        print(f"  ⚠ Both inputs use the {stats['legacy']['schema']} schema")

    noncanonical = noncanonical_rider_counts(unified)
    if noncanonical:
        total = sum(noncanonical.values())
        print(f"  ⚠ {total:,} rows with non-canonical rider type: {noncanonical}")

    print("\nBuilding summaries...")
    summaries = build_summaries(unified)
    print_summaries(summaries)

    written = []
    export_error = None
    if not args.no_export:
        try:
            written = export_summaries(summaries, args.output_dir, args.format)
        except (OSError, duckdb.Error) as e:
            print(f"✗ Export failed: {e}")
            export_error = str(e)

    # Save run log
    args.logs_dir.mkdir(parents=True, exist_ok=True)
    log_path = args.logs_dir / f"pipeline_run_{datetime.now().strftime('%Y%m%d_%H%M%S')}.json"
    log_data = {
        'timestamp': datetime.now().isoformat(),
        'legacy_file': str(args.legacy),
        'current_file': str(args.current),
        **stats,
        'noncanonical_rider_types': {str(k): v for k, v in noncanonical.items()},
        'noncanonical_rider_rows': sum(noncanonical.values()),
        'summaries_written': [str(p) for p in written],
        'export_error': export_error,
    }
    with open(log_path, 'w') as f:
        json.dump(log_data, f, indent=2)

    print(f"\n{'='*50}")
    print(f"✓ {stats['rows_unified']:,} trips summarized into {len(summaries)} tables")
    if written:
        print(f"✓ Output: {args.output_dir}")
    print(f"✓ Log: {log_path}")
    return 1 if export_error else 0


if __name__ == "__main__":
    sys.exit(main())
