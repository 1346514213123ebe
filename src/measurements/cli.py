"""CLI for derived measurements of detection outlines."""
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional
import click

from schemas.detection import Page
from schemas.geometry import Point
from .derive import derive_measurements
from .totals import compute_page_totals, detection_points

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def parse_points(text: str) -> List[Point]:
    """Parse "x,y x,y ..." into Points."""
    points = []
    for pair in text.split():
        x, y = pair.split(",")
        points.append(Point(x=float(x), y=float(y)))
    return points


@click.group()
def cli():
    """Derived takeoff measurements from detection polygons."""
    pass


@cli.command()
@click.argument("class_name")
@click.option("--points", "points_text", required=True, help='Vertices as "x,y x,y ..." in pixels')
@click.option("--scale-ratio", type=float, required=True, help="Pixels per foot")
def polygon(class_name: str, points_text: str, scale_ratio: float):
    """
    Measure a single outline.

    Example:
        takeoff-measure polygon window --points "0,0 4,0 4,3 0,3" --scale-ratio 2
    """
    try:
        points = parse_points(points_text)
    except ValueError:
        click.echo(f"Error: could not parse points: {points_text}", err=True)
        sys.exit(1)

    derived = derive_measurements(class_name, points, scale_ratio)
    if derived is None:
        click.echo(f"No derived measurement for '{class_name}'")
        return
    for name, value in derived.model_dump().items():
        click.echo(f"  {name}: {value}")


@cli.command()
@click.argument("page_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--scale-ratio", type=float, default=None, help="Override the page scale ratio (pixels per foot)")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write measurements and totals JSON here")
def page(page_json: Path, scale_ratio: Optional[float], output: Optional[Path]):
    """
    Measure every detection on a page and print the page totals.

    PAGE_JSON: Page with scale_ratio and detections
    """
    page_data = Page.model_validate_json(page_json.read_text())
    ratio = scale_ratio if scale_ratio is not None else page_data.scale_ratio

    totals = compute_page_totals(page_data.detections, ratio)
    if totals is None:
        click.echo(f"Error: page {page_data.page_number} has no usable scale ratio", err=True)
        sys.exit(1)

    click.echo(f"\nPage {page_data.page_number} ({len(page_data.detections)} detections, {ratio} px/ft)")
    per_detection = {}
    for detection in page_data.detections:
        if detection.is_deleted:
            continue
        derived = derive_measurements(detection.class_name, detection_points(detection), ratio)
        if derived is None:
            continue
        per_detection[detection.id] = derived.model_dump()
        values = ", ".join(f"{k}={v}" for k, v in per_detection[detection.id].items())
        click.echo(f"  {detection.id} [{detection.class_name}] {values}")

    summary = totals.model_dump()
    click.echo("\nTotals:")
    for name, value in summary.items():
        if value:
            click.echo(f"  {name}: {value}")

    if output:
        output.write_text(json.dumps({"detections": per_detection, "totals": summary}, indent=2))
        click.echo(f"\nResults written to {output}")


if __name__ == "__main__":
    cli()
