"""Apply plan: the ordered edit commands for a set of selected changes.

The plan always runs in three phases:
1. modified - geometry-only `resize` of existing detections
2. deleted  - soft `delete` (status transition) of existing detections
3. added    - `create` of new detections from the imported boxes

A modified change never touches class, materials or notes: `resize` only
carries pixel geometry. A class change arrives from the diff as a delete
plus an add.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from schemas.enums import DEFAULT_ADDED_CLASS, ChangeType, DetectionStatus, EditType
from schemas.reconciliation import ChangeRecord, EditChanges, EditRequest, ImportBox

PHASE_ORDER = (ChangeType.MODIFIED, ChangeType.DELETED, ChangeType.ADDED)

# Verb used in progress and error messages for each phase
PHASE_ACTIONS = {
    ChangeType.MODIFIED: "update",
    ChangeType.DELETED: "delete",
    ChangeType.ADDED: "add",
}


@dataclass
class EditCommand:
    """One edit-sync call and the change it came from."""
    phase: ChangeType
    request: EditRequest
    change: ChangeRecord

    @property
    def action(self) -> str:
        return PHASE_ACTIONS[self.phase]

    def describe(self) -> str:
        """Human-readable target, e.g. "window on page 3"."""
        detection_class = self.change.detection_class or "detection"
        return f"{detection_class} on page {self.change.page_number}"


@dataclass
class ApplyPlan:
    job_id: str
    commands: List[EditCommand] = field(default_factory=list)
    skipped: List[ChangeRecord] = field(default_factory=list)  # selected but missing ids or geometry

    @property
    def total(self) -> int:
        return len(self.commands)

    def for_phase(self, phase: ChangeType) -> List[EditCommand]:
        return [c for c in self.commands if c.phase == phase]


def _geometry(box: ImportBox) -> EditChanges:
    return EditChanges(
        pixel_x=box.x,
        pixel_y=box.y,
        pixel_width=box.w,
        pixel_height=box.h,
    )


def _modified_request(job_id: str, change: ChangeRecord) -> Optional[EditRequest]:
    if not (change.detection_id and change.imported_bbox and change.page_id):
        return None
    return EditRequest(
        job_id=job_id,
        page_id=change.page_id,
        edit_type=EditType.RESIZE,
        detection_id=change.detection_id,
        changes=_geometry(change.imported_bbox),
    )


def _deleted_request(job_id: str, change: ChangeRecord) -> Optional[EditRequest]:
    if not (change.detection_id and change.page_id) or change.imported_bbox is not None:
        return None
    return EditRequest(
        job_id=job_id,
        page_id=change.page_id,
        edit_type=EditType.DELETE,
        detection_id=change.detection_id,
        changes=EditChanges(status=DetectionStatus.DELETED.value),
    )


def _added_request(job_id: str, change: ChangeRecord, default_class: str) -> Optional[EditRequest]:
    if change.detection_id or not (change.imported_bbox and change.page_id):
        return None
    box = change.imported_bbox
    return EditRequest(
        job_id=job_id,
        page_id=change.page_id,
        edit_type=EditType.CREATE,
        changes=EditChanges(
            pixel_x=box.x,
            pixel_y=box.y,
            pixel_width=box.w,
            pixel_height=box.h,
            class_name=change.detection_class or default_class,
        ),
    )


def build_apply_plan(
    job_id: str,
    changes: Iterable[ChangeRecord],
    default_class: str = DEFAULT_ADDED_CLASS,
) -> ApplyPlan:
    """Turn selected changes into an ordered plan.

    Args:
        job_id: Extraction job the detections belong to
        changes: Selected changes (matched records are ignored)
        default_class: Class for added detections the diff left unclassified

    Returns:
        ApplyPlan with modified, then deleted, then added commands, each
        phase in diff order
    """
    changes = list(changes)
    plan = ApplyPlan(job_id=job_id)

    for phase in PHASE_ORDER:
        for change in changes:
            if change.change_type != phase:
                continue
            if phase == ChangeType.MODIFIED:
                request = _modified_request(job_id, change)
            elif phase == ChangeType.DELETED:
                request = _deleted_request(job_id, change)
            else:
                request = _added_request(job_id, change, default_class)

            if request is None:
                plan.skipped.append(change)
            else:
                plan.commands.append(EditCommand(phase=phase, request=request, change=change))

    return plan
