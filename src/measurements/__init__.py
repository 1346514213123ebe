"""Measurements - Class-specific derived lengths and page totals.

Public API:
    derive_measurements: Window/door/gable/building/line/area rules for one outline
    compute_page_totals: Aggregate a page's detections into PageTotals
    sum_page_totals: Combine several pages
    normalize_class / measurement_kind: Class alias handling
"""

from .classes import normalize_class, measurement_kind, is_opening
from .derive import derive_measurements, has_valid_scale
from .totals import compute_page_totals, sum_page_totals, detection_points

__all__ = [
    "normalize_class",
    "measurement_kind",
    "is_opening",
    "derive_measurements",
    "has_valid_scale",
    "compute_page_totals",
    "sum_page_totals",
    "detection_points",
]
