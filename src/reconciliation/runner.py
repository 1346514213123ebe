"""Sequential runner for apply plans.

Commands are awaited one at a time in plan order. Each call stands alone:
a failed response or an exception from the boundary is recorded and the
runner moves on, so one bad record never blocks the rest of the batch.
This is a best-effort batch, not a transaction.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Protocol

from schemas.enums import ApplyOutcome, ChangeType
from schemas.reconciliation import EditRequest, EditResponse
from .plan import ApplyPlan, EditCommand

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class EditSyncBoundary(Protocol):
    """Anything that can deliver one detection edit."""

    async def send(self, request: EditRequest) -> EditResponse:
        ...


@dataclass
class ApplyReport:
    """Outcome of running an apply plan."""
    modified: int = 0
    deleted: int = 0
    added: int = 0
    errors: List[str] = field(default_factory=list)
    skipped: int = 0
    created_ids: List[str] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return self.modified + self.deleted + self.added

    @property
    def error_count(self) -> int:
        return len(self.errors)

    @property
    def first_error(self) -> Optional[str]:
        return self.errors[0] if self.errors else None

    @property
    def outcome(self) -> ApplyOutcome:
        if self.errors:
            return ApplyOutcome.PARTIAL if self.success_count > 0 else ApplyOutcome.FAILED
        return ApplyOutcome.SUCCESS if self.success_count > 0 else ApplyOutcome.EMPTY

    def summary_message(self) -> str:
        """One-line message for the reviewer."""
        outcome = self.outcome
        if outcome == ApplyOutcome.FAILED:
            return f"All operations failed. First error: {self.first_error}"
        if outcome == ApplyOutcome.PARTIAL:
            return f"Applied {self.success_count} changes with {self.error_count} errors"
        if outcome == ApplyOutcome.EMPTY:
            return "No changes to apply"
        return f"Successfully applied {self.success_count} changes"

    def record_success(self, phase: ChangeType) -> None:
        if phase == ChangeType.MODIFIED:
            self.modified += 1
        elif phase == ChangeType.DELETED:
            self.deleted += 1
        elif phase == ChangeType.ADDED:
            self.added += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "outcome": self.outcome.value,
            "modified": self.modified,
            "deleted": self.deleted,
            "added": self.added,
            "success_count": self.success_count,
            "error_count": self.error_count,
            "skipped": self.skipped,
            "errors": list(self.errors),
            "created_ids": list(self.created_ids),
        }


async def _execute(command: EditCommand, boundary: EditSyncBoundary, log: logging.Logger) -> EditResponse:
    try:
        return await boundary.send(command.request)
    except Exception as e:
        log.warning(f"Edit call raised for {command.describe()}: {e}")
        return EditResponse(success=False, error=str(e) or type(e).__name__)


async def run_apply_plan(
    plan: ApplyPlan,
    boundary: EditSyncBoundary,
    on_progress: Optional[ProgressCallback] = None,
    log: Optional[logging.Logger] = None,
) -> ApplyReport:
    """Run every command of a plan, strictly in order.

    Args:
        plan: Commands ordered modified -> deleted -> added
        boundary: Edit-sync implementation receiving each request
        on_progress: Called with (current, total) after every command,
            whether it succeeded or not. A raising callback is logged and
            never stops the batch.
        log: Logger to report through (defaults to this module's logger)

    Returns:
        ApplyReport with per-phase success counts and error messages
    """
    log = log or logger
    report = ApplyReport(skipped=len(plan.skipped))
    total = plan.total

    if plan.skipped:
        log.info(f"Skipping {len(plan.skipped)} selected changes without ids or geometry")

    for current, command in enumerate(plan.commands, start=1):
        response = await _execute(command, boundary, log)

        if response.success:
            report.record_success(command.phase)
            if response.detection_id and command.phase == ChangeType.ADDED:
                report.created_ids.append(response.detection_id)
            log.debug(f"Applied {command.action} for {command.describe()}")
        else:
            message = f"Failed to {command.action} {command.describe()}: {response.error}"
            report.errors.append(message)
            log.error(message)

        if on_progress:
            try:
                on_progress(current, total)
            except Exception as e:
                log.warning(f"Progress callback failed at {current}/{total}: {e}")

    log.info(
        f"Apply complete for job {plan.job_id}: {report.modified} modified, "
        f"{report.deleted} deleted, {report.added} added, {report.error_count} errors"
    )
    return report
