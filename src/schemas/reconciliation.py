"""Models for annotation re-import diffs and detection edit requests.

The diff is produced by an external import service that matches the
re-imported annotations against the current detections (IoU matching).
Edits are sent to the detection edit-sync endpoint one at a time.
"""
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from .enums import ACTIONABLE_CHANGE_TYPES, ChangeType, EditType


class ImportBox(BaseModel):
    """Bounding box as reported by the import service."""
    x: float
    y: float
    w: float = Field(ge=0)
    h: float = Field(ge=0)


class BoxShift(BaseModel):
    """Difference between the original and imported boxes."""
    dx: float = 0.0
    dy: float = 0.0
    dw: float = 0.0
    dh: float = 0.0


class ChangeRecord(BaseModel):
    """One classified difference between current detections and the import."""
    change_type: ChangeType
    detection_id: Optional[str] = Field(default=None, description="Existing detection, absent for additions")
    page_id: Optional[str] = Field(default=None)
    page_number: int = Field(default=0, ge=0)
    detection_class: Optional[str] = Field(default=None)
    original_bbox: Optional[ImportBox] = Field(default=None)
    imported_bbox: Optional[ImportBox] = Field(default=None)
    bbox_shift: Optional[BoxShift] = Field(default=None)
    iou: Optional[float] = Field(default=None, ge=0, le=1, description="Overlap score for matched/modified")
    annotation_subject: Optional[str] = Field(default=None)
    annotation_contents: Optional[str] = Field(default=None)

    @property
    def is_actionable(self) -> bool:
        return self.change_type in ACTIONABLE_CHANGE_TYPES


class ImportSummary(BaseModel):
    matched: int = 0
    modified: int = 0
    deleted: int = 0
    added: int = 0
    total_annotations: int = 0
    total_detections: int = 0
    annotations_with_metadata: int = 0

    @property
    def actionable(self) -> int:
        return self.modified + self.deleted + self.added


class PageChanges(BaseModel):
    matched: List[ChangeRecord] = Field(default_factory=list)
    modified: List[ChangeRecord] = Field(default_factory=list)
    deleted: List[ChangeRecord] = Field(default_factory=list)
    added: List[ChangeRecord] = Field(default_factory=list)


class ImportDiff(BaseModel):
    """Response of the annotation import service."""
    success: bool
    job_id: str = ""
    summary: ImportSummary = Field(default_factory=ImportSummary)
    changes: List[ChangeRecord] = Field(default_factory=list)
    changes_by_page: Dict[str, PageChanges] = Field(default_factory=dict)
    import_timestamp: Optional[str] = None
    error: Optional[str] = None


class EditChanges(BaseModel):
    """Fields an edit may touch. Unset fields are left alone by the server."""
    pixel_x: Optional[float] = None
    pixel_y: Optional[float] = None
    pixel_width: Optional[float] = None
    pixel_height: Optional[float] = None
    class_name: Optional[str] = Field(default=None, alias="class")
    status: Optional[str] = None

    model_config = {"populate_by_name": True}


class EditRequest(BaseModel):
    job_id: str
    page_id: str
    edit_type: EditType
    detection_id: Optional[str] = None
    changes: Optional[EditChanges] = None

    def to_payload(self) -> dict:
        """JSON body for the edit-sync endpoint (unset fields dropped, `class` aliased)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class EditResponse(BaseModel):
    success: bool
    error: Optional[str] = None
    detection_id: Optional[str] = None
