"""Detection and page models as stored by the detection service."""
from pydantic import BaseModel, Field
from typing import List, Optional

from .enums import DetectionStatus, MarkupType
from .geometry import PolygonPoints


class Detection(BaseModel):
    """A single located building element on one page.

    Legacy detections only carry a center-based rectangle
    (pixel_x/pixel_y are the CENTER of the box). Polygon detections carry
    `polygon_points` and keep the rectangle fields as their bounding box.
    """
    id: str = Field(description="Detection identifier")
    page_id: str = Field(description="Owning page identifier")
    class_name: str = Field(default="", alias="class", description="Raw class name, normalized on use")
    status: DetectionStatus = Field(default=DetectionStatus.AUTO)
    markup_type: MarkupType = Field(default=MarkupType.POLYGON)

    pixel_x: float = Field(default=0.0, description="Bounding box center X")
    pixel_y: float = Field(default=0.0, description="Bounding box center Y")
    pixel_width: float = Field(default=0.0, ge=0)
    pixel_height: float = Field(default=0.0, ge=0)
    polygon_points: Optional[PolygonPoints] = Field(default=None, description="Freeform outline, simple or with holes")

    confidence: Optional[float] = Field(default=None, ge=0, le=1)

    model_config = {"populate_by_name": True}

    @property
    def is_deleted(self) -> bool:
        return self.status == DetectionStatus.DELETED


class Page(BaseModel):
    """A rasterized plan page with its detections."""
    id: str
    page_number: int = Field(ge=1)
    scale_ratio: Optional[float] = Field(default=None, description="Pixels per foot; None when uncalibrated")
    detections: List[Detection] = Field(default_factory=list)
