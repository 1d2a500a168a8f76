#!/usr/bin/env python3
"""
Filter the dog zones dataset down to the zone codes the app processes.

Keeps only GROEN and ORANJE features (by default) to reduce file size and
startup time. A backup of the original file is kept next to it.

Usage:
    python scripts/filter_zones.py data/amersfoort-hondenkaart.json

Example:
    python scripts/filter_zones.py data/amersfoort-hondenkaart.json -o data/amersfoort-hondenkaart-filtered.json --code GROEN
"""

import sys
import json
import logging
import shutil
from pathlib import Path
from typing import Optional, List, Annotated

import typer

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from offleash_zones.dataset_tools import DEFAULT_CODES, filter_feature_collection
from offleash_zones.loader import ZoneDataError, load_feature_collection

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def default_output_path(source: Path) -> Path:
    return source.with_name(f"{source.stem}-filtered{source.suffix}")


def backup_path(source: Path) -> Path:
    return source.with_name(f"{source.stem}-original{source.suffix}")


app = typer.Typer(
    help="Filter the zones dataset to the processed zone codes.",
    no_args_is_help=True,
)


@app.command()
def filter_zones(
    source: Annotated[
        Path,
        typer.Argument(help="Input GeoJSON FeatureCollection")
    ],
    output: Annotated[
        Optional[Path],
        typer.Option("--output", "-o", help="Output file (defaults to <name>-filtered.json)")
    ] = None,
    codes: Annotated[
        Optional[List[str]],
        typer.Option("--code", "-c", help="CODE value to keep (repeatable, default: GROEN and ORANJE)")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
):
    """
    Write a filtered copy of the dataset and print size statistics.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    backup = backup_path(source)
    if not source.exists() and backup.exists():
        logger.info("Original file not found, restoring from backup...")
        shutil.copyfile(backup, source)

    try:
        document = load_feature_collection(source)
    except ZoneDataError as e:
        logger.error(f"Error loading the original data: {e}")
        raise typer.Exit(code=1)

    if not backup.exists():
        shutil.copyfile(source, backup)
        logger.info(f"Backup of original data created at: {backup}")

    filtered, stats = filter_feature_collection(document, codes or DEFAULT_CODES)

    output = output or default_output_path(source)
    try:
        output.write_text(json.dumps(filtered, separators=(",", ":")), encoding="utf-8")
    except OSError as e:
        logger.error(f"Error writing filtered data: {e}")
        raise typer.Exit(code=1)

    # Print summary
    print("\n" + "=" * 60)
    print("Filtering Complete!")
    print("=" * 60)
    print(f"Features kept:   {stats.filtered_features:,} of {stats.original_features:,}")
    print(f"Size:            {stats.original_bytes / (1024 * 1024):.2f} MB -> "
          f"{stats.filtered_bytes / (1024 * 1024):.2f} MB ({stats.reduction_percent}% reduction)")
    for code, count in stats.counts_by_code.items():
        print(f"  {code:<12} {count:,}")
    print(f"\nOutput file: {output}")


if __name__ == "__main__":
    app()
