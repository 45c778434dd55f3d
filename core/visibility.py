# core/visibility.py
"""
Scheduled visibility for project content (updates, offers, events).

Every item carries `schedule_visibility` (immediate / scheduled / hidden)
and a nullable `scheduled_at`. Offers and events also carry a display
window `[start_datetime, end_datetime]`, closed at both ends.

The state itself never changes on its own; only the outcome does as
`now` passes `scheduled_at` or the window bounds. `now` is always
passed in, never read from the clock here.

Malformed rows (scheduled without a timestamp, window without a bound)
are treated as not visible to the public.
"""
from datetime import datetime
from typing import Iterable, List, Optional, TypeVar

from core.authz import check_ownership
from core.utils import as_utc
from models.enums import ProjectStatus, ScheduleVisibility
from models.user import Principal

T = TypeVar("T")

PUBLIC_PROJECT_STATUSES = frozenset({ProjectStatus.active, ProjectStatus.completed})


def _schedule_allows(item, now: datetime) -> bool:
    state = getattr(item, "schedule_visibility", None)

    if state == ScheduleVisibility.immediate:
        return True
    if state == ScheduleVisibility.scheduled:
        scheduled_at = as_utc(getattr(item, "scheduled_at", None))
        return scheduled_at is not None and scheduled_at <= now
    # hidden, or anything unrecognised
    return False


def _window_allows(item, now: datetime) -> bool:
    # Updates have no window
    if not hasattr(item, "start_datetime"):
        return True

    start = as_utc(getattr(item, "start_datetime", None))
    end = as_utc(getattr(item, "end_datetime", None))
    if start is None or end is None:
        return False
    return start <= now <= end


def is_visible(item, now: datetime, viewer_is_privileged: bool) -> bool:
    """
    Decide whether one content item is visible at `now`.

    Privileged viewers (project owner or admin) see everything so they
    can preview and manage content that is not public yet.
    """
    if viewer_is_privileged:
        return True

    now = as_utc(now)
    if not _schedule_allows(item, now):
        return False
    return _window_allows(item, now)


def filter_visible(items: Iterable[T], now: datetime, viewer_is_privileged: bool) -> List[T]:
    """Apply is_visible to each item independently."""
    return [item for item in items if is_visible(item, now, viewer_is_privileged)]


# ------------------------------------------------------------
# Project-level gating
# ------------------------------------------------------------
def is_project_manager(project: dict, principal: Optional[Principal]) -> bool:
    """Owner of the project or admin."""
    if principal is None:
        return False
    return check_ownership(principal, project.get("created_by"))


def can_view_project(project: dict, principal: Optional[Principal]) -> bool:
    """Draft and archived projects are visible to their owner and admins only."""
    if project.get("status") in {s.value for s in PUBLIC_PROJECT_STATUSES}:
        return True
    return is_project_manager(project, principal)
