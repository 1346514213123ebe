"""Tests for the import session lifecycle."""
import asyncio
import pytest

from reconciliation.session import (
    ImportSession,
    ImportFailedError,
    ApplyFailedError,
    InvalidTransitionError,
)
from schemas.enums import ImportState
from schemas.reconciliation import ImportDiff
from conftest import FakeEditSync


@pytest.fixture
def session(sample_diff):
    s = ImportSession(job_id="job-123")
    s.load_diff(sample_diff)
    return s


class TestLoadDiff:
    def test_preselects_actionable_changes(self, session):
        assert session.state == ImportState.REVIEWING
        assert session.selection == {"det-1", "det-2", "det-3", "new-2-4"}
        assert len(session.applicable_changes) == 4

    def test_failed_import(self):
        s = ImportSession(job_id="job-123")
        with pytest.raises(ImportFailedError, match="No annotations found"):
            s.load_diff(ImportDiff(success=False, error="No annotations found"))
        assert s.state == ImportState.ERROR
        assert s.error_message == "No annotations found"

    def test_reset_after_error(self):
        s = ImportSession(job_id="job-123")
        with pytest.raises(ImportFailedError):
            s.load_diff(ImportDiff(success=False))
        s.reset()
        assert s.state == ImportState.UPLOAD
        assert s.error_message is None

    def test_second_diff_needs_new_upload(self, session, sample_diff):
        with pytest.raises(InvalidTransitionError):
            session.load_diff(sample_diff)


class TestSelectionEditing:
    def test_toggle(self, session):
        session.toggle("det-3")
        assert "det-3" not in session.selection
        assert [c.detection_id for c in session.applicable_changes] == ["det-1", "det-2", None]
        session.toggle("det-3")
        assert "det-3" in session.selection

    def test_clear_and_select_all(self, session):
        session.clear_selection()
        assert session.applicable_changes == []
        session.select_all()
        assert len(session.selection) == 4

    def test_toggle_unknown_key(self, session):
        with pytest.raises(ValueError, match="No change with key"):
            session.toggle("det-404")
        with pytest.raises(ValueError):
            session.toggle("det-9")  # matched changes are not selectable
        assert len(session.selection) == 4

    def test_toggle_outside_review(self):
        with pytest.raises(InvalidTransitionError):
            ImportSession(job_id="job-123").toggle("det-1")


class TestApply:
    def test_success_completes(self, session):
        progress = []
        report = asyncio.run(session.apply(FakeEditSync(), on_progress=lambda c, t: progress.append(c)))
        assert report.success_count == 4
        assert session.state == ImportState.COMPLETE
        assert session.report is report
        assert session.progress == (4, 4)
        assert progress == [1, 2, 3, 4]

    def test_partial_failure_completes(self, session):
        report = asyncio.run(session.apply(FakeEditSync(fail_on={1})))
        assert report.error_count == 1
        assert session.state == ImportState.COMPLETE

    def test_only_selected_changes_are_sent(self, session):
        session.toggle("new-2-4")
        boundary = FakeEditSync()
        asyncio.run(session.apply(boundary))
        assert [r.detection_id for r in boundary.requests] == ["det-1", "det-2", "det-3"]

    def test_total_failure_raises_and_keeps_diff(self, session):
        with pytest.raises(ApplyFailedError, match="All operations failed"):
            asyncio.run(session.apply(FakeEditSync(fail_all=True)))
        assert session.state == ImportState.ERROR
        assert session.diff is not None
        assert session.report.error_count == 4

        session.retry()
        assert session.state == ImportState.REVIEWING
        report = asyncio.run(session.apply(FakeEditSync()))
        assert report.success_count == 4

    def test_nothing_selected(self, session):
        session.clear_selection()
        with pytest.raises(InvalidTransitionError, match="No changes selected"):
            asyncio.run(session.apply(FakeEditSync()))
        assert session.state == ImportState.REVIEWING

    def test_no_second_apply_after_complete(self, session):
        asyncio.run(session.apply(FakeEditSync()))
        with pytest.raises(InvalidTransitionError):
            asyncio.run(session.apply(FakeEditSync()))

    def test_close_refused_while_applying(self, session):
        seen = []

        class ClosingSync(FakeEditSync):
            async def send(self, request):
                try:
                    session.close()
                    seen.append("closed")
                except InvalidTransitionError:
                    seen.append(session.state)
                return await super().send(request)

        asyncio.run(session.apply(ClosingSync()))
        assert seen == [ImportState.APPLYING] * 4
        assert session.state == ImportState.COMPLETE

    def test_close_discards_diff(self, session):
        session.close()
        assert session.state == ImportState.UPLOAD
        assert session.diff is None
        assert session.selection == set()


class TestInterruptedApply:
    def test_raising_progress_callback_does_not_duplicate_creates(self, session):
        def progress(current, total):
            if current == total:
                raise RuntimeError("display closed")

        boundary = FakeEditSync()
        report = asyncio.run(session.apply(boundary, on_progress=progress))
        assert report.success_count == 4
        assert session.state == ImportState.COMPLETE

        with pytest.raises(InvalidTransitionError):
            asyncio.run(session.apply(boundary))
        assert [r.edit_type.value for r in boundary.requests].count("create") == 1

    def test_runner_crash_after_edits_blocks_retry(self, session, monkeypatch):
        boundary = FakeEditSync()

        async def crashing_runner(plan, sync, on_progress=None, log=None):
            for command in plan.commands:
                await sync.send(command.request)
            raise RuntimeError("event loop shutting down")

        monkeypatch.setattr("reconciliation.session.run_apply_plan", crashing_runner)
        with pytest.raises(RuntimeError):
            asyncio.run(session.apply(boundary))
        assert session.state == ImportState.ERROR
        assert not session.retryable

        with pytest.raises(InvalidTransitionError, match="upload again"):
            session.retry()
        assert [r.edit_type.value for r in boundary.requests].count("create") == 1

        session.reset()
        assert session.state == ImportState.UPLOAD
        assert session.retryable
