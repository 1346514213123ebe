"""Import session: the lifecycle of one annotation re-import.

States:
    upload -> reviewing -> applying -> complete
    any stage -> error, error -> upload (reset) or reviewing (retry)

Closing the session before `applying` discards the diff with no side
effects. Once applying starts the batch runs to completion; the session
can only be dismissed afterwards. A completed session cannot apply again,
since re-running the added phase would create duplicate detections.
"""
import logging
from typing import List, Optional, Set, Tuple

from schemas.enums import DEFAULT_ADDED_CLASS, ApplyOutcome, ImportState
from schemas.reconciliation import ChangeRecord, ImportDiff
from .plan import ApplyPlan, build_apply_plan
from .runner import ApplyReport, EditSyncBoundary, ProgressCallback, run_apply_plan
from .selection import default_selection, keyed_changes, selected_changes, toggle_key

logger = logging.getLogger(__name__)


class ReconciliationError(Exception):
    """Base class for import/apply failures surfaced to the reviewer."""


class ImportFailedError(ReconciliationError):
    """The import service could not produce a diff."""


class ApplyFailedError(ReconciliationError):
    """No edit succeeded: most likely the edit endpoint itself is failing."""


class InvalidTransitionError(ValueError):
    """Operation not allowed in the session's current state."""


class ImportSession:
    """Holds the diff, the reviewer's selection and apply progress for one job."""

    def __init__(self, job_id: str, default_class: str = DEFAULT_ADDED_CLASS,
                 log: Optional[logging.Logger] = None):
        self.job_id = job_id
        self.default_class = default_class
        self.log = log or logger
        self.state = ImportState.UPLOAD
        self.diff: Optional[ImportDiff] = None
        self.selection: Set[str] = set()
        self.progress: Tuple[int, int] = (0, 0)
        self.report: Optional[ApplyReport] = None
        self.error_message: Optional[str] = None
        # False once an apply may have sent edits it did not finish accounting for
        self.retryable = True

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _require(self, *states: ImportState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.value for s in states)
            raise InvalidTransitionError(f"Cannot do this while {self.state.value} (allowed: {allowed})")

    def _enter(self, state: ImportState) -> None:
        self.log.debug(f"Import session {self.job_id}: {self.state.value} -> {state.value}")
        self.state = state

    def fail(self, message: str) -> None:
        """Move to the error state with a message for the reviewer."""
        self.error_message = message
        self._enter(ImportState.ERROR)

    def load_diff(self, diff: ImportDiff) -> None:
        """Accept the import service's diff and pre-select every actionable change."""
        self._require(ImportState.UPLOAD)
        if not diff.success:
            message = diff.error or "Import analysis failed"
            self.fail(message)
            raise ImportFailedError(message)

        self.diff = diff
        self.selection = default_selection(diff.changes)
        self.report = None
        self.error_message = None
        self.log.info(
            f"Loaded diff for job {self.job_id}: {diff.summary.matched} matched, "
            f"{diff.summary.modified} modified, {diff.summary.deleted} deleted, {diff.summary.added} added"
        )
        self._enter(ImportState.REVIEWING)

    def reset(self) -> None:
        """Recover from an error by starting over from upload."""
        self._require(ImportState.ERROR)
        self._clear()

    def retry(self) -> None:
        """Go back to reviewing the same diff after a failed apply."""
        self._require(ImportState.ERROR)
        if self.diff is None:
            raise InvalidTransitionError("No diff to retry; upload again")
        if not self.retryable:
            raise InvalidTransitionError(
                "The interrupted apply may already have created detections; upload again"
            )
        self.error_message = None
        self._enter(ImportState.REVIEWING)

    def close(self) -> None:
        """Dismiss the session, discarding any unapplied diff."""
        if self.state == ImportState.APPLYING:
            raise InvalidTransitionError("Cannot close while changes are being applied")
        self._clear()

    def _clear(self) -> None:
        self.diff = None
        self.selection = set()
        self.progress = (0, 0)
        self.report = None
        self.error_message = None
        self.retryable = True
        self._enter(ImportState.UPLOAD)

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    @property
    def keyed_changes(self) -> List[Tuple[str, ChangeRecord]]:
        if self.diff is None:
            return []
        return keyed_changes(self.diff.changes)

    @property
    def applicable_changes(self) -> List[ChangeRecord]:
        if self.diff is None:
            return []
        return selected_changes(self.diff.changes, self.selection)

    def toggle(self, key: str) -> None:
        """Flip one change in or out of the selection.

        Raises:
            ValueError: `key` is not the key of an actionable change in the diff
        """
        self._require(ImportState.REVIEWING)
        if key not in {k for k, _ in self.keyed_changes}:
            raise ValueError(f"No change with key {key}")
        self.selection = toggle_key(self.selection, key)

    def select_all(self) -> None:
        self._require(ImportState.REVIEWING)
        self.selection = default_selection(self.diff.changes)

    def clear_selection(self) -> None:
        self._require(ImportState.REVIEWING)
        self.selection = set()

    # ------------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------------

    def build_plan(self) -> ApplyPlan:
        return build_apply_plan(self.job_id, self.applicable_changes, self.default_class)

    def _track_progress(self, on_progress: Optional[ProgressCallback]) -> ProgressCallback:
        def update(current: int, total: int) -> None:
            self.progress = (current, total)
            if on_progress:
                on_progress(current, total)
        return update

    async def apply(self, boundary: EditSyncBoundary,
                    on_progress: Optional[ProgressCallback] = None) -> ApplyReport:
        """Apply the selected changes through the edit-sync boundary.

        Returns:
            ApplyReport for full or partial success

        Raises:
            InvalidTransitionError: Not reviewing, or nothing selected
            ApplyFailedError: Every attempted edit failed
        """
        self._require(ImportState.REVIEWING)
        if not self.applicable_changes:
            raise InvalidTransitionError("No changes selected")

        plan = self.build_plan()
        self.progress = (0, plan.total)
        self._enter(ImportState.APPLYING)

        try:
            report = await run_apply_plan(plan, boundary, self._track_progress(on_progress), self.log)
        except Exception as e:
            self.retryable = False
            self.fail(str(e))
            raise

        self.report = report
        if report.outcome == ApplyOutcome.FAILED:
            message = report.summary_message()
            self.fail(message)
            raise ApplyFailedError(message)

        if report.errors:
            self.log.warning(report.summary_message())
        else:
            self.log.info(report.summary_message())
        self._enter(ImportState.COMPLETE)
        return report
