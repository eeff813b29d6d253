"""
services/approval.py

Approval queue: facets, filtering, selection and the status transitions the
bulk actions apply. Works on the flattened rows returned by GET /api/od-request.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from config.settings import settings
from models.od_requests import RequestStatus

ALL = "All"

# ✅ bulk action -> status it writes
STATUS_ACTIONS: Dict[str, RequestStatus] = {
    "bulk_approve": RequestStatus.APPROVED,
    "bulk_reject": RequestStatus.REJECTED,
}
MODIFY_TIMINGS = "modify_timings"
BULK_ACTIONS = (*STATUS_ACTIONS, MODIFY_TIMINGS)

# pending -> approved | rejected; both are terminal
TRANSITIONS = {
    RequestStatus.PENDING: {RequestStatus.APPROVED, RequestStatus.REJECTED},
    RequestStatus.APPROVED: set(),
    RequestStatus.REJECTED: set(),
}


def can_transition(current: int, target: int) -> bool:
    return RequestStatus(target) in TRANSITIONS[RequestStatus(current)]


@dataclass
class QueueFilters:
    reason: str = ALL
    year: str = ALL
    section: str = ALL
    search: str = ""

    def is_default(self) -> bool:
        return self == QueueFilters()


def _unique(values: Iterable) -> List:
    seen = []
    for value in values:
        if value in (None, "") or value in seen:
            continue
        seen.append(value)
    return seen


def build_facets(rows: List[dict]) -> dict:
    """
    Filter options for the queue, each list led by "All", plus the number of
    requests per reason.
    """
    reasons = _unique(r.get("reason") for r in rows)
    years = _unique(r.get("year") for r in rows)
    sections = _unique(r.get("sec") for r in rows)

    reason_counts = {ALL: len(rows)}
    for reason in reasons:
        reason_counts[reason] = sum(1 for r in rows if r.get("reason") == reason)

    return {
        "reasons": [ALL, *reasons],
        "years": [ALL, *years],
        "sections": [ALL, *sections],
        "reason_counts": reason_counts,
    }


def filter_requests(rows: List[dict], filters: QueueFilters) -> List[dict]:
    result = rows
    if filters.reason != ALL:
        result = [r for r in result if r.get("reason") == filters.reason]
    if filters.year != ALL:
        wanted = str(filters.year).strip()
        result = [r for r in result if str(r.get("year")).strip() == wanted]
    if filters.section != ALL:
        result = [r for r in result if r.get("sec") == filters.section]
    if filters.search:
        query = filters.search.lower()
        result = [r for r in result if query in (r.get("name") or "").lower()]
    return result


class SelectionSet:
    """
    Request IDs picked for the next bulk action.

    Selection is independent of the active filters. Whether a filter change
    drops it is decided by CLEAR_SELECTION_ON_FILTER_CHANGE (default: keep).
    """

    def __init__(self, ids: Iterable[int] = (), clear_on_filter_change: Optional[bool] = None):
        if clear_on_filter_change is None:
            clear_on_filter_change = settings.CLEAR_SELECTION_ON_FILTER_CHANGE
        self.clear_on_filter_change = clear_on_filter_change
        self._ids: List[int] = list(dict.fromkeys(ids))

    @property
    def ids(self) -> List[int]:
        return list(self._ids)

    def __contains__(self, od_id: int) -> bool:
        return od_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def toggle(self, od_id: int) -> None:
        if od_id in self._ids:
            self._ids.remove(od_id)
        else:
            self._ids.append(od_id)

    def all_selected(self, visible_ids: Iterable[int]) -> bool:
        visible = list(visible_ids)
        return bool(visible) and set(visible) == set(self._ids)

    def toggle_all(self, visible_ids: Iterable[int]) -> None:
        """Select exactly the filtered requests, or clear if they already are."""
        visible = list(visible_ids)
        if self.all_selected(visible):
            self._ids = []
        else:
            self._ids = visible

    def retain(self, queue_ids: Iterable[int]) -> None:
        """Drop ids that left the queue, e.g. after a bulk action decided them."""
        keep = set(queue_ids)
        self._ids = [i for i in self._ids if i in keep]

    def on_filter_change(self) -> None:
        if self.clear_on_filter_change:
            self.clear()

    def clear(self) -> None:
        self._ids = []
