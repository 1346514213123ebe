"""Reviewer selection over the changes of an import diff.

Every non-matched change starts selected: the common case is accepting the
re-import, so the reviewer opts out of individual changes.
"""
from typing import Iterable, List, Set, Tuple

from schemas.reconciliation import ChangeRecord


def change_key(change: ChangeRecord, index: int) -> str:
    """Selection key for a change.

    Existing detections are keyed by id. Additions have no id yet, so they
    are keyed by page number and their position in the full change list,
    which keeps several additions on one page apart.
    """
    if change.detection_id:
        return change.detection_id
    return f"new-{change.page_number}-{index}"


def keyed_changes(changes: List[ChangeRecord]) -> List[Tuple[str, ChangeRecord]]:
    """Actionable changes paired with their selection keys, in diff order."""
    return [
        (change_key(change, index), change)
        for index, change in enumerate(changes)
        if change.is_actionable
    ]


def default_selection(changes: List[ChangeRecord]) -> Set[str]:
    return {key for key, _ in keyed_changes(changes)}


def toggle_key(selection: Set[str], key: str) -> Set[str]:
    """Return a new selection with `key` flipped."""
    updated = set(selection)
    if key in updated:
        updated.remove(key)
    else:
        updated.add(key)
    return updated


def selected_changes(changes: List[ChangeRecord], selection: Iterable[str]) -> List[ChangeRecord]:
    """Actionable changes whose key is selected, in diff order."""
    chosen = set(selection)
    return [change for key, change in keyed_changes(changes) if key in chosen]
