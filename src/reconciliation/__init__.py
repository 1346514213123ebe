"""Reconciliation - Apply re-imported annotation changes to live detections."""
from .selection import change_key, keyed_changes, default_selection, toggle_key, selected_changes
from .plan import ApplyPlan, EditCommand, build_apply_plan, PHASE_ORDER
from .runner import ApplyReport, EditSyncBoundary, run_apply_plan
from .session import (
    ImportSession,
    ReconciliationError,
    ImportFailedError,
    ApplyFailedError,
    InvalidTransitionError,
)
from .sync_client import HttpEditSyncClient
from .config import load_settings

__all__ = [
    "change_key",
    "keyed_changes",
    "default_selection",
    "toggle_key",
    "selected_changes",
    "ApplyPlan",
    "EditCommand",
    "build_apply_plan",
    "PHASE_ORDER",
    "ApplyReport",
    "EditSyncBoundary",
    "run_apply_plan",
    "ImportSession",
    "ReconciliationError",
    "ImportFailedError",
    "ApplyFailedError",
    "InvalidTransitionError",
    "HttpEditSyncClient",
    "load_settings",
]
