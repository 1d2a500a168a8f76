#!/usr/bin/env python3
"""
Run the zone pipeline (classification + proximity merge) over a dataset.

Prints a summary, optionally the nearest zones to a position, and optionally
exports the processed zones as GeoJSON.

Usage:
    python scripts/process_zones.py data/amersfoort-hondenkaart-filtered.json --lat 52.1561 --lng 5.3878
    python scripts/process_zones.py data/amersfoort-hondenkaart-filtered.json --strategy connected --export out.geojson
"""

import sys
import logging
from collections import Counter
from pathlib import Path
from typing import Optional, Annotated

import typer

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from offleash_zones.export import zones_to_geodataframe
from offleash_zones.loader import ZoneDataError, load_feature_collection
from offleash_zones.merge import MergeStrategy
from offleash_zones.pipeline import process_feature_collection
from offleash_zones.position import UserPosition
from offleash_zones.ranking import rank_nearest
from offleash_zones.settings import zone_settings

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Process the zones dataset and report nearest zones.",
    no_args_is_help=True,
)


@app.command()
def process(
    source: Annotated[
        Path,
        typer.Argument(help="GeoJSON FeatureCollection")
    ],
    merge_distance: Annotated[
        float,
        typer.Option("--merge-distance", "-d", help="Merge distance in meters")
    ] = zone_settings.merge_distance_meters,
    strategy: Annotated[
        MergeStrategy,
        typer.Option("--strategy", "-s", help="Merge grouping strategy")
    ] = MergeStrategy.GREEDY,
    lat: Annotated[
        Optional[float],
        typer.Option("--lat", help="User latitude for the nearest-zone report")
    ] = None,
    lng: Annotated[
        Optional[float],
        typer.Option("--lng", help="User longitude for the nearest-zone report")
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Number of nearest zones to report")
    ] = zone_settings.max_nearest,
    export: Annotated[
        Optional[Path],
        typer.Option("--export", "-e", help="Write processed zones to this GeoJSON file")
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose output")
    ] = False,
):
    """
    Classify and merge the zones, then summarize the result.
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        document = load_feature_collection(source)
    except ZoneDataError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    zones = process_feature_collection(document, merge_distance_meters=merge_distance, strategy=strategy)

    counts = Counter((zone.category.name, zone.kind.value) for zone in zones)
    merged = sum(1 for zone in zones if zone.is_merged)

    print("\n" + "=" * 60)
    print("Processing Complete!")
    print("=" * 60)
    print(f"Total zones:   {len(zones):,}")
    print(f"Merged zones:  {merged:,}")
    for (category, kind), count in sorted(counts.items()):
        print(f"  {category:<8} {kind:<6} {count:,}")

    if lat is not None and lng is not None:
        position = UserPosition(latitude=lat, longitude=lng)
        print(f"\n--- Nearest {limit} zones to {lat}, {lng} ---")
        for i, item in enumerate(rank_nearest(zones, position, limit), start=1):
            print(f"{i}. {item.zone.id} ({item.zone.category.name}, {item.zone.kind.value}) {item.distance:.2f} km")

    if export is not None:
        zones_to_geodataframe(zones).to_file(str(export), driver="GeoJSON")
        print(f"\nExported to: {export}")


if __name__ == "__main__":
    app()
