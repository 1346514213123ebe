"""CLI entry point for annotation re-import reconciliation."""
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional, Tuple
import click

from schemas.reconciliation import ImportDiff
from .config import load_settings
from .runner import ApplyReport
from .session import ImportSession, ReconciliationError
from .sync_client import HttpEditSyncClient

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_diff(diff_path: Path) -> ImportDiff:
    """Load an import diff JSON file."""
    return ImportDiff.model_validate_json(Path(diff_path).read_text())


def format_box(box) -> str:
    if box is None:
        return "N/A"
    return f"{round(box.w)}x{round(box.h)} at ({round(box.x)}, {round(box.y)})"


@click.group()
def cli():
    """Reconcile re-imported annotations with the live detections."""
    pass


@cli.command()
@click.argument("diff_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def summarize(diff_json: Path):
    """
    Show the changes in an import diff and their selection keys.

    DIFF_JSON: Response of the annotation import service
    """
    diff = load_diff(diff_json)
    if not diff.success:
        click.echo(f"Error: import failed: {diff.error or 'unknown error'}", err=True)
        sys.exit(1)

    s = diff.summary
    click.echo(f"\n{'='*60}")
    click.echo(f"Import diff: job {diff.job_id}")
    click.echo(f"{'='*60}")
    click.echo(f"  Matched:  {s.matched}")
    click.echo(f"  Modified: {s.modified}")
    click.echo(f"  Deleted:  {s.deleted}")
    click.echo(f"  Added:    {s.added}")
    click.echo(f"  Annotations: {s.total_annotations}, detections: {s.total_detections}")

    session = ImportSession(job_id=diff.job_id)
    session.load_diff(diff)
    keyed = session.keyed_changes
    if not keyed:
        click.echo("\nNo changes to apply.")
        return

    click.echo(f"\nChanges ({len(keyed)}):")
    for key, change in keyed:
        label = change.detection_class or "detection"
        click.echo(f"  [{change.change_type.value}] {key}: {label} on page {change.page_number}")
        if change.original_bbox or change.imported_bbox:
            click.echo(f"    {format_box(change.original_bbox)} -> {format_box(change.imported_bbox)}")


def show_report(report: ApplyReport):
    click.echo(f"\n  Modified: {report.modified}")
    click.echo(f"  Deleted:  {report.deleted}")
    click.echo(f"  Added:    {report.added}")
    if report.skipped:
        click.echo(f"  Skipped:  {report.skipped}")
    if report.errors:
        click.echo(f"\nErrors ({report.error_count}):")
        for error in report.errors[:10]:
            click.echo(f"  - {error}")
        if report.error_count > 10:
            click.echo(f"  ... and {report.error_count - 10} more")


async def _apply(session: ImportSession, endpoint: str, timeout: float) -> ApplyReport:
    def progress(current: int, total: int):
        click.echo(f"  [{current}/{total}]")

    async with HttpEditSyncClient(endpoint, timeout=timeout) as client:
        return await session.apply(client, on_progress=progress)


@cli.command()
@click.argument("diff_json", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--job-id", default=None, help="Extraction job id (default: job_id from the diff)")
@click.option("--endpoint", default=None, help="Edit-sync endpoint URL (default: from settings)")
@click.option("--exclude", "excluded", multiple=True, help="Selection key to leave out (repeatable)")
@click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              default=None, help="Settings YAML (default: bundled settings.yaml)")
@click.option("--dry-run", is_flag=True, default=False, help="Print the apply plan without sending edits")
@click.option("--output", "-o", type=click.Path(path_type=Path), default=None,
              help="Write the apply report JSON here")
def apply(diff_json: Path, job_id: Optional[str], endpoint: Optional[str], excluded: Tuple[str, ...],
          config_path: Optional[Path], dry_run: bool, output: Optional[Path]):
    """
    Apply the changes of an import diff through the edit-sync endpoint.

    Every modified, deleted and added change is applied unless excluded.

    Example:
        takeoff-reconcile apply diff.json --exclude det-42 --dry-run
    """
    settings = load_settings(config_path)
    diff = load_diff(diff_json)

    job_id = job_id or diff.job_id
    if not job_id:
        click.echo("Error: no job id in the diff; pass --job-id", err=True)
        sys.exit(1)

    session = ImportSession(job_id=job_id, default_class=settings["apply"]["default_added_class"])
    try:
        session.load_diff(diff)
    except ReconciliationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    for key in excluded:
        if key in session.selection:
            session.toggle(key)
        else:
            click.echo(f"Warning: no change with key {key}", err=True)

    plan = session.build_plan()
    click.echo(f"Apply plan for job {job_id}: {plan.total} edits, {len(plan.skipped)} skipped")

    if dry_run:
        for command in plan.commands:
            click.echo(f"  {command.request.edit_type.value:<7} {command.describe()}")
        return

    if plan.total == 0:
        click.echo("Nothing to apply.")
        return

    endpoint = endpoint or settings["edit_sync"]["endpoint"]
    timeout = float(settings["edit_sync"]["timeout_seconds"])
    try:
        report = asyncio.run(_apply(session, endpoint, timeout))
    except ReconciliationError as e:
        click.echo(f"Error: {e}", err=True)
        if session.report:
            show_report(session.report)
        sys.exit(1)
    except Exception as e:
        click.echo(f"Apply failed: {e}", err=True)
        logger.exception("Apply error details:")
        sys.exit(1)

    click.echo(f"\n{report.summary_message()}")
    show_report(report)

    if output:
        output.write_text(json.dumps(report.to_dict(), indent=2))
        click.echo(f"\nReport written to {output}")


if __name__ == "__main__":
    cli()
