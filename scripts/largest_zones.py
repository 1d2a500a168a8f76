#!/usr/bin/env python3
"""
Report the largest zones of one CODE in the dog zones dataset.

Usage:
    python scripts/largest_zones.py data/amersfoort-hondenkaart.json --code ORANJE --limit 5
"""

import sys
import logging
from pathlib import Path
from typing import Annotated

import typer

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from offleash_zones.dataset_tools import largest_zones
from offleash_zones.loader import ZoneDataError, load_feature_collection

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    help="Report the largest zones of a given code.",
    no_args_is_help=True,
)


@app.command()
def report(
    source: Annotated[
        Path,
        typer.Argument(help="GeoJSON FeatureCollection (file path or URL)")
    ],
    code: Annotated[
        str,
        typer.Option("--code", "-c", help="CODE value to report on")
    ] = "ORANJE",
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="How many of the largest zones to report")
    ] = 5,
):
    """
    Print the largest zones with their area and a coordinate usable in map apps.
    """
    try:
        document = load_feature_collection(source)
    except ZoneDataError as e:
        logger.error(str(e))
        raise typer.Exit(code=1)

    zones = largest_zones(document, code=code, limit=limit)
    if not zones:
        print(f"No zones found with CODE '{code}' and valid, numeric OPPERVLAKTE.")
        return

    print(f"--- Top {len(zones)} Largest '{code}' Zones ---")
    for i, zone in enumerate(zones, start=1):
        print(f"{i}. ID: {zone.id}")
        print(f"   Area: {zone.area:.2f} m2")
        # lat, lng order for pasting into map apps
        print(f"   Coordinate (Lat, Lng): {zone.coordinate.lat}, {zone.coordinate.lng}")
        print("----------")


if __name__ == "__main__":
    app()
