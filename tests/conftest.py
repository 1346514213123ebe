"""Shared test fixtures and configuration."""
import pytest

from schemas.enums import ChangeType
from schemas.geometry import Point
from schemas.reconciliation import ChangeRecord, EditResponse, ImportBox, ImportDiff, ImportSummary


def pts(*pairs):
    """Build a list of Points from (x, y) pairs."""
    return [Point(x=x, y=y) for x, y in pairs]


class FakeEditSync:
    """Edit-sync boundary that records requests and answers from a script.

    `fail_on` holds 1-based call numbers that return a failed response;
    `raise_on` holds call numbers whose send raises.
    """

    def __init__(self, fail_on=(), raise_on=(), fail_all=False):
        self.fail_on = set(fail_on)
        self.raise_on = set(raise_on)
        self.fail_all = fail_all
        self.requests = []

    async def send(self, request):
        self.requests.append(request)
        call = len(self.requests)
        if call in self.raise_on:
            raise RuntimeError("connection reset")
        if self.fail_all or call in self.fail_on:
            return EditResponse(success=False, error="Detection not found")
        created = f"created-{call}" if request.detection_id is None else None
        return EditResponse(success=True, detection_id=created)


@pytest.fixture
def unit_square():
    return pts((0, 0), (1, 0), (1, 1), (0, 1))


@pytest.fixture
def window_rect():
    """4x3 px rectangle; at 2 px/ft: head 2, sill 2, jamb 3."""
    return pts((0, 0), (4, 0), (4, 3), (0, 3))


@pytest.fixture
def gable_triangle():
    return pts((5, 0), (0, 10), (10, 10))


@pytest.fixture
def sample_changes():
    """Two modified, one deleted, one added, one matched (diff order)."""
    return [
        ChangeRecord(
            change_type=ChangeType.MODIFIED, detection_id="det-1", page_id="page-1", page_number=1,
            detection_class="window",
            original_bbox=ImportBox(x=100, y=100, w=40, h=60),
            imported_bbox=ImportBox(x=102, y=100, w=44, h=60),
            iou=0.85,
        ),
        ChangeRecord(
            change_type=ChangeType.MATCHED, detection_id="det-9", page_id="page-1", page_number=1,
            detection_class="door", iou=0.97,
        ),
        ChangeRecord(
            change_type=ChangeType.MODIFIED, detection_id="det-2", page_id="page-2", page_number=2,
            detection_class="door",
            original_bbox=ImportBox(x=300, y=200, w=36, h=80),
            imported_bbox=ImportBox(x=310, y=200, w=36, h=84),
            iou=0.7,
        ),
        ChangeRecord(
            change_type=ChangeType.DELETED, detection_id="det-3", page_id="page-1", page_number=1,
            detection_class="gable",
            original_bbox=ImportBox(x=500, y=50, w=200, h=80),
        ),
        ChangeRecord(
            change_type=ChangeType.ADDED, page_id="page-2", page_number=2,
            detection_class="window",
            imported_bbox=ImportBox(x=700, y=120, w=40, h=60),
        ),
    ]


@pytest.fixture
def sample_diff(sample_changes):
    return ImportDiff(
        success=True,
        job_id="job-123",
        summary=ImportSummary(matched=1, modified=2, deleted=1, added=1, total_annotations=4, total_detections=4),
        changes=sample_changes,
    )


@pytest.fixture
def fake_sync():
    return FakeEditSync()
