"""Takeoff review schemas - Pydantic models for detections, geometry and import diffs."""
from .enums import (
    DetectionClass,
    DetectionStatus,
    MarkupType,
    MeasurementKind,
    ChangeType,
    EditType,
    ImportState,
    ApplyOutcome,
)
from .geometry import Point, PolygonWithHoles, PolygonPoints, BoundingBox, EdgeHit, PolygonMeasurements
from .detection import Detection, Page
from .measurements import (
    WindowMeasurements,
    DoorMeasurements,
    GableMeasurements,
    BuildingMeasurements,
    LineMeasurements,
    AreaMeasurements,
    DerivedMeasurements,
    PageTotals,
)
from .reconciliation import (
    ImportBox,
    BoxShift,
    ChangeRecord,
    ImportSummary,
    PageChanges,
    ImportDiff,
    EditChanges,
    EditRequest,
    EditResponse,
)

__all__ = [
    # Enums
    "DetectionClass",
    "DetectionStatus",
    "MarkupType",
    "MeasurementKind",
    "ChangeType",
    "EditType",
    "ImportState",
    "ApplyOutcome",
    # Geometry
    "Point",
    "PolygonWithHoles",
    "PolygonPoints",
    "BoundingBox",
    "EdgeHit",
    "PolygonMeasurements",
    # Detections
    "Detection",
    "Page",
    # Derived measurements
    "WindowMeasurements",
    "DoorMeasurements",
    "GableMeasurements",
    "BuildingMeasurements",
    "LineMeasurements",
    "AreaMeasurements",
    "DerivedMeasurements",
    "PageTotals",
    # Import diff and edits
    "ImportBox",
    "BoxShift",
    "ChangeRecord",
    "ImportSummary",
    "PageChanges",
    "ImportDiff",
    "EditChanges",
    "EditRequest",
    "EditResponse",
]
