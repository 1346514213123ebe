"""Class-name normalization and measurement-kind lookup.

Class names reach us from several sources with different spellings:
- the ML detector (snake_case: "exterior_wall", "gable_vent")
- backend services (mixed case with spaces: "Exterior Wall", "Garage Door")
- legacy data (plurals and old names)

`normalize_class` maps all of them to one canonical name and
`measurement_kind` decides which derived-measurement rule applies.
"""
from typing import Dict, Optional

from schemas.enums import DetectionClass, MeasurementKind


CLASS_ALIASES: Dict[str, str] = {
    # Building / facade
    "exterior wall": "exterior_wall",
    "wall": "exterior_wall",
    "facade": "building",
    "cladding": "siding",
    # Openings
    "windows": "window",
    "doors": "door",
    "entry door": "door",
    "entry_door": "door",
    "garage door": "garage",
    "garage_door": "garage",
    # Gables
    "gable end": "gable",
    "gable_end": "gable",
    "gable wall": "gable",
    "gable_wall": "gable",
    # Area classes
    "roofing": "roof",
    "roof area": "roof",
    "roof_area": "roof",
    "soffits": "soffit",
    "eave soffit": "soffit",
    "eave_soffit": "soffit",
    # Roofline
    "eaves": "eave",
    "roof eave": "eave",
    "roof_eave": "eave",
    "rakes": "rake",
    "gable rake": "rake",
    "gable_rake": "rake",
    "roof rake": "rake",
    "roof_rake": "rake",
    "ridges": "ridge",
    "roof ridge": "ridge",
    "roof_ridge": "ridge",
    "valleys": "valley",
    "roof valley": "valley",
    "roof_valley": "valley",
    # Trim and linear accessories
    "window trim": "trim",
    "window_trim": "trim",
    "door trim": "trim",
    "door_trim": "trim",
    "fascia board": "fascia",
    "fascia_board": "fascia",
    "gutters": "gutter",
    "rain gutter": "gutter",
    "rain_gutter": "gutter",
    "belly band": "belly_band",
    "bellyband": "belly_band",
    "band board": "belly_band",
    "band_board": "belly_band",
    # Corners
    "inside corner": "corner_inside",
    "inside_corner": "corner_inside",
    "corner inside": "corner_inside",
    "interior corner": "corner_inside",
    "outside corner": "corner_outside",
    "outside_corner": "corner_outside",
    "corner outside": "corner_outside",
    "exterior corner": "corner_outside",
}

MEASUREMENT_KINDS: Dict[str, MeasurementKind] = {
    DetectionClass.WINDOW.value: MeasurementKind.WINDOW,
    DetectionClass.DOOR.value: MeasurementKind.DOOR,
    DetectionClass.GARAGE.value: MeasurementKind.GARAGE,
    DetectionClass.GABLE.value: MeasurementKind.GABLE,
    DetectionClass.BUILDING.value: MeasurementKind.BUILDING,
    DetectionClass.EXTERIOR_WALL.value: MeasurementKind.BUILDING,
    # Closed area classes
    DetectionClass.SIDING.value: MeasurementKind.AREA,
    DetectionClass.SOFFIT.value: MeasurementKind.AREA,
    DetectionClass.ROOF.value: MeasurementKind.AREA,
    # Open polylines
    DetectionClass.EAVE.value: MeasurementKind.LINE,
    DetectionClass.RAKE.value: MeasurementKind.LINE,
    DetectionClass.RIDGE.value: MeasurementKind.LINE,
    DetectionClass.VALLEY.value: MeasurementKind.LINE,
    DetectionClass.FASCIA.value: MeasurementKind.LINE,
    DetectionClass.TRIM.value: MeasurementKind.LINE,
    DetectionClass.GUTTER.value: MeasurementKind.LINE,
    DetectionClass.BELLY_BAND.value: MeasurementKind.LINE,
    DetectionClass.CORNER_INSIDE.value: MeasurementKind.LINE,
    DetectionClass.CORNER_OUTSIDE.value: MeasurementKind.LINE,
}


def normalize_class(class_name: Optional[str]) -> str:
    """Map a raw class name to its canonical form.

    Unknown names are returned lowercased and trimmed; empty input
    returns "".
    """
    if not class_name:
        return ""
    normalized = class_name.strip().lower()
    return CLASS_ALIASES.get(normalized, normalized)


def measurement_kind(class_name: Optional[str]) -> Optional[MeasurementKind]:
    """Derived-measurement rule for a class, or None when it has none."""
    return MEASUREMENT_KINDS.get(normalize_class(class_name))


def is_opening(class_name: Optional[str]) -> bool:
    """Windows, doors and garage doors are deducted from siding area."""
    return measurement_kind(class_name) in (
        MeasurementKind.WINDOW,
        MeasurementKind.DOOR,
        MeasurementKind.GARAGE,
    )
