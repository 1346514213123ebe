"""Shared enums used across the geometry, measurement and reconciliation packages."""
from enum import Enum


class DetectionClass(str, Enum):
    """Canonical detection classes produced by the detector or the reviewer."""
    WINDOW = "window"
    DOOR = "door"
    GARAGE = "garage"
    GABLE = "gable"
    SIDING = "siding"
    ROOF = "roof"
    SOFFIT = "soffit"
    # Linear classes (LF)
    TRIM = "trim"
    FASCIA = "fascia"
    GUTTER = "gutter"
    EAVE = "eave"
    RAKE = "rake"
    RIDGE = "ridge"
    VALLEY = "valley"
    BELLY_BAND = "belly_band"
    CORNER_INSIDE = "corner_inside"
    CORNER_OUTSIDE = "corner_outside"
    # Internal classes, used for calculations only
    BUILDING = "building"
    EXTERIOR_WALL = "exterior_wall"


class DetectionStatus(str, Enum):
    AUTO = "auto"
    VERIFIED = "verified"
    EDITED = "edited"
    CONFIRMED = "confirmed"
    DELETED = "deleted"


class MarkupType(str, Enum):
    POLYGON = "polygon"
    LINE = "line"
    POINT = "point"


class MeasurementKind(str, Enum):
    """Which derived-measurement rule a class is measured with."""
    WINDOW = "window"
    DOOR = "door"
    GARAGE = "garage"
    GABLE = "gable"
    BUILDING = "building"
    LINE = "line"
    AREA = "area"


class ChangeType(str, Enum):
    MATCHED = "matched"
    MODIFIED = "modified"
    DELETED = "deleted"
    ADDED = "added"


class EditType(str, Enum):
    VERIFY = "verify"
    MOVE = "move"
    RESIZE = "resize"
    DELETE = "delete"
    RECLASSIFY = "reclassify"
    CREATE = "create"


class ImportState(str, Enum):
    """Import session lifecycle."""
    UPLOAD = "upload"
    REVIEWING = "reviewing"
    APPLYING = "applying"
    COMPLETE = "complete"
    ERROR = "error"


class ApplyOutcome(str, Enum):
    SUCCESS = "success"   # every command succeeded
    PARTIAL = "partial"   # some succeeded, some failed
    FAILED = "failed"     # nothing succeeded and at least one error
    EMPTY = "empty"       # nothing was attempted


# Change types the reviewer can act on
ACTIONABLE_CHANGE_TYPES = (ChangeType.MODIFIED, ChangeType.DELETED, ChangeType.ADDED)

# Class used for added detections when the diff does not report one
DEFAULT_ADDED_CLASS = DetectionClass.SIDING.value
