"""Derived measurement results, all in real-world units (feet / square feet)."""
from pydantic import BaseModel, Field
from typing import Dict, Union


class WindowMeasurements(BaseModel):
    head_lf: float = Field(ge=0, description="Top edge length")
    sill_lf: float = Field(ge=0, description="Bottom edge length")
    jamb_lf: float = Field(ge=0, description="Left + right side lengths")
    perimeter_lf: float = Field(ge=0, description="head + sill + jamb")


class DoorMeasurements(BaseModel):
    """Doors and garage doors: no sill, the opening meets the floor."""
    head_lf: float = Field(ge=0)
    jamb_lf: float = Field(ge=0)
    perimeter_lf: float = Field(ge=0, description="head + jamb")


class GableMeasurements(BaseModel):
    rake_lf: float = Field(ge=0, description="Both sloped edges from the peak")
    base_lf: float = Field(ge=0)
    area_sf: float = Field(ge=0)


class BuildingMeasurements(BaseModel):
    area_sf: float = Field(ge=0)
    perimeter_lf: float = Field(ge=0)
    level_starter_lf: float = Field(ge=0, description="Lowest mostly-horizontal edge (base course)")


class LineMeasurements(BaseModel):
    length_lf: float = Field(ge=0)
    segment_count: int = Field(ge=0)


class AreaMeasurements(BaseModel):
    area_sf: float = Field(ge=0)
    perimeter_lf: float = Field(ge=0)


DerivedMeasurements = Union[
    WindowMeasurements,
    DoorMeasurements,
    GableMeasurements,
    BuildingMeasurements,
    LineMeasurements,
    AreaMeasurements,
]


class PageTotals(BaseModel):
    """Per-page (or multi-page) aggregate of derived measurements."""
    # Facade
    building_count: int = 0
    building_area_sf: float = 0.0
    building_perimeter_lf: float = 0.0
    building_level_starter_lf: float = 0.0
    # Windows
    window_count: int = 0
    window_area_sf: float = 0.0
    window_perimeter_lf: float = 0.0
    window_head_lf: float = 0.0
    window_jamb_lf: float = 0.0
    window_sill_lf: float = 0.0
    # Doors
    door_count: int = 0
    door_area_sf: float = 0.0
    door_perimeter_lf: float = 0.0
    door_head_lf: float = 0.0
    door_jamb_lf: float = 0.0
    # Garages
    garage_count: int = 0
    garage_area_sf: float = 0.0
    garage_perimeter_lf: float = 0.0
    garage_head_lf: float = 0.0
    garage_jamb_lf: float = 0.0
    # Gables
    gable_count: int = 0
    gable_area_sf: float = 0.0
    gable_rake_lf: float = 0.0
    # Other closed areas (siding zones, soffit, roof)
    area_sf_by_class: Dict[str, float] = Field(default_factory=dict)
    area_count_by_class: Dict[str, int] = Field(default_factory=dict)
    # Open lines (eave, rake, ridge, fascia, trim, ...)
    line_lf_by_class: Dict[str, float] = Field(default_factory=dict)
    line_count_by_class: Dict[str, int] = Field(default_factory=dict)
    # Corners derived from building outlines
    outside_corner_count: int = 0
    outside_corner_lf: float = 0.0
    inside_corner_count: int = 0
    inside_corner_lf: float = 0.0
    # Net siding = building area minus openings
    openings_area_sf: float = 0.0
    siding_net_sf: float = 0.0
    # Point markers
    counts_by_class: Dict[str, int] = Field(default_factory=dict)
    total_point_count: int = 0
