# tests/test_visibility.py

"""
Tests for scheduled visibility of project content.
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.visibility import can_view_project, filter_visible, is_project_manager, is_visible
from models.enums import ScheduleVisibility, UserRole
from models.project import ProjectOfferRead, ProjectUpdateRead
from tests.conftest import make_principal


def utc(*args):
    return datetime(*args, tzinfo=timezone.utc)


def update(visibility, scheduled_at=None):
    return ProjectUpdateRead(
        id="u-1",
        project_id="proj-1",
        created_by="admin-1",
        schedule_visibility=visibility,
        scheduled_at=scheduled_at,
    )


def offer(start, end, visibility=ScheduleVisibility.immediate, scheduled_at=None):
    return ProjectOfferRead(
        id="o-1",
        project_id="proj-1",
        created_by="admin-1",
        title="Launch discount",
        schedule_visibility=visibility,
        scheduled_at=scheduled_at,
        start_datetime=start,
        end_datetime=end,
    )


# -----------------------------------------------------
# Schedule state
# -----------------------------------------------------
def test_scheduled_at_exactly_now_is_visible():
    item = update(ScheduleVisibility.scheduled, utc(2025, 1, 1))
    assert is_visible(item, utc(2025, 1, 1), False) is True


def test_scheduled_in_the_future_is_not_visible():
    item = update(ScheduleVisibility.scheduled, utc(2025, 1, 2))
    assert is_visible(item, utc(2025, 1, 1, 23, 59, 59), False) is False


def test_hidden_only_for_privileged_viewers():
    item = update(ScheduleVisibility.hidden)
    assert is_visible(item, utc(2025, 1, 1), False) is False
    assert is_visible(item, utc(2025, 1, 1), True) is True


def test_immediate_update_is_visible():
    assert is_visible(update(ScheduleVisibility.immediate), utc(2020, 1, 1), False) is True


def test_scheduled_without_timestamp_fails_closed():
    item = update(ScheduleVisibility.scheduled, None)
    assert is_visible(item, utc(2030, 1, 1), False) is False
    assert is_visible(item, utc(2030, 1, 1), True) is True


def test_naive_timestamps_are_read_as_utc():
    item = update(ScheduleVisibility.scheduled, datetime(2025, 1, 1, 0, 0, 0))
    assert is_visible(item, utc(2025, 1, 1), False) is True
    assert is_visible(item, datetime(2024, 12, 31, 23, 0, 0), False) is False


# -----------------------------------------------------
# Windows (offers / events)
# -----------------------------------------------------
def test_window_end_is_inclusive():
    item = offer(utc(2025, 6, 1), utc(2025, 6, 10))
    assert is_visible(item, utc(2025, 6, 10, 0, 0, 0), False) is True
    assert is_visible(item, utc(2025, 6, 10, 0, 0, 1), False) is False


def test_window_start_is_inclusive():
    item = offer(utc(2025, 6, 1), utc(2025, 6, 10))
    assert is_visible(item, utc(2025, 6, 1), False) is True
    assert is_visible(item, utc(2025, 6, 1) - timedelta(seconds=1), False) is False


@pytest.mark.parametrize("offset_days", [-30, -1, 10, 365])
def test_outside_window_is_never_visible(offset_days):
    start, end = utc(2025, 6, 1), utc(2025, 6, 10)
    item = offer(start, end)
    now = (start if offset_days < 0 else end) + timedelta(days=offset_days)
    assert is_visible(item, now, False) is False


@pytest.mark.parametrize("hours", [1, 24, 100, 215])
def test_inside_window_with_immediate_is_visible(hours):
    start = utc(2025, 6, 1)
    item = offer(start, utc(2025, 6, 10))
    assert is_visible(item, start + timedelta(hours=hours), False) is True


def test_scheduled_offer_needs_schedule_and_window():
    item = offer(
        utc(2025, 6, 1), utc(2025, 6, 10),
        visibility=ScheduleVisibility.scheduled,
        scheduled_at=utc(2025, 6, 5),
    )
    assert is_visible(item, utc(2025, 6, 4), False) is False
    assert is_visible(item, utc(2025, 6, 5), False) is True
    assert is_visible(item, utc(2025, 6, 11), False) is False


def test_hidden_offer_inside_window_is_not_visible():
    item = offer(utc(2025, 6, 1), utc(2025, 6, 10), visibility=ScheduleVisibility.hidden)
    assert is_visible(item, utc(2025, 6, 5), False) is False


def test_window_missing_a_bound_fails_closed():
    item = offer(utc(2025, 6, 1), None)
    assert is_visible(item, utc(2025, 6, 5), False) is False


def test_privileged_viewer_sees_expired_offer():
    item = offer(utc(2025, 6, 1), utc(2025, 6, 10))
    assert is_visible(item, utc(2026, 1, 1), True) is True


# -----------------------------------------------------
# Purity
# -----------------------------------------------------
def test_is_visible_is_idempotent():
    item = offer(utc(2025, 6, 1), utc(2025, 6, 10), ScheduleVisibility.scheduled, utc(2025, 6, 3))
    now = utc(2025, 6, 4)
    results = {is_visible(item, now, False) for _ in range(5)}
    assert results == {True}


def test_filter_visible_evaluates_each_item():
    items = [
        update(ScheduleVisibility.hidden),
        update(ScheduleVisibility.immediate),
        update(ScheduleVisibility.scheduled, None),
        update(ScheduleVisibility.scheduled, utc(2025, 1, 1)),
    ]
    visible = filter_visible(items, utc(2025, 6, 1), False)
    assert visible == [items[1], items[3]]
    assert filter_visible(items, utc(2025, 6, 1), True) == items


# -----------------------------------------------------
# Project-level gating
# -----------------------------------------------------
def test_draft_project_visible_to_owner_and_admin_only():
    project = {"id": "proj-1", "status": "draft", "created_by": "seller-1"}
    owner = make_principal(UserRole.seller, "seller-1")
    stranger = make_principal(UserRole.seller, "seller-2")
    admin = make_principal(UserRole.admin, "admin-1")

    assert can_view_project(project, None) is False
    assert can_view_project(project, stranger) is False
    assert can_view_project(project, owner) is True
    assert can_view_project(project, admin) is True


@pytest.mark.parametrize("status", ["active", "completed"])
def test_public_statuses_are_visible_to_everyone(status):
    assert can_view_project({"status": status, "created_by": "x"}, None) is True


def test_is_project_manager_anonymous():
    assert is_project_manager({"created_by": "x"}, None) is False
