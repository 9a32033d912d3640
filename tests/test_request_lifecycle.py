from datetime import datetime, timezone

import pytest

from maintenance_service.app.enum.maintenance_enum import RequestStatus as S
from maintenance_service.app.lifecycle.errors import InvalidTransition, MissingResolution
from maintenance_service.app.lifecycle.request_lifecycle import (
    RequestLifecycle,
    allowed_transitions,
    can_transition,
)

FIXED = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)

EXPECTED_EDGES = {
    (S.SUBMITTED, S.ACKNOWLEDGED), (S.SUBMITTED, S.ASSIGNED), (S.SUBMITTED, S.CANCELLED),
    (S.ACKNOWLEDGED, S.ASSIGNED), (S.ACKNOWLEDGED, S.CANCELLED),
    (S.ASSIGNED, S.IN_PROGRESS), (S.ASSIGNED, S.ON_HOLD), (S.ASSIGNED, S.CANCELLED),
    (S.IN_PROGRESS, S.COMPLETED), (S.IN_PROGRESS, S.ON_HOLD), (S.IN_PROGRESS, S.CANCELLED),
    (S.ON_HOLD, S.IN_PROGRESS), (S.ON_HOLD, S.CANCELLED),
    (S.REOPENED, S.IN_PROGRESS), (S.REOPENED, S.ASSIGNED), (S.REOPENED, S.CANCELLED),
    (S.COMPLETED, S.REOPENED),
    (S.CANCELLED, S.REOPENED),
}


@pytest.fixture
def lifecycle():
    return RequestLifecycle(clock=lambda: FIXED)


@pytest.mark.parametrize("current", list(S))
@pytest.mark.parametrize("target", list(S))
def test_transition_matches_edge_table(lifecycle, make_request, current, target):
    request = make_request(status=current, staff_id="STF001")

    if (current, target) in EXPECTED_EDGES:
        previous = lifecycle.transition(request, target, resolution="Done")
        assert previous == current
        assert request.status == target
        assert request.last_updated == FIXED
    else:
        before = request.last_updated
        with pytest.raises(InvalidTransition) as exc:
            lifecycle.transition(request, target, resolution="Done")
        assert exc.value.current == current
        assert exc.value.requested == target
        assert request.status == current
        assert request.last_updated == before


def test_submitted_straight_to_completed_is_rejected(lifecycle, make_request):
    request = make_request()

    with pytest.raises(InvalidTransition) as exc:
        lifecycle.transition(request, S.COMPLETED, resolution="Fixed leak")

    assert "submitted" in str(exc.value)
    assert "completed" in str(exc.value)
    assert request.status == S.SUBMITTED
    assert request.resolution_notes is None


def test_closed_has_no_outbound_edge():
    assert allowed_transitions(S.CLOSED) == []
    assert not any(can_transition(S.CLOSED, target) for target in S)


def test_allowed_transitions_follow_declaration_order():
    assert allowed_transitions(S.SUBMITTED) == [S.ACKNOWLEDGED, S.ASSIGNED, S.CANCELLED]
    assert allowed_transitions("in_progress") == [S.ON_HOLD, S.COMPLETED, S.CANCELLED]


@pytest.mark.parametrize("resolution", [None, "", "   "])
def test_complete_requires_resolution(lifecycle, make_request, resolution):
    request = make_request(status=S.IN_PROGRESS, staff_id="STF001")

    with pytest.raises(MissingResolution):
        lifecycle.transition(request, S.COMPLETED, resolution=resolution)

    assert request.status == S.IN_PROGRESS
    assert request.completion_date is None


def test_complete_stamps_resolution_and_completion_date(lifecycle, make_request):
    request = make_request(status=S.IN_PROGRESS, staff_id="STF001")

    lifecycle.transition(request, S.COMPLETED, resolution="  Fixed leak ")

    assert request.status == S.COMPLETED
    assert request.resolution_notes == "Fixed leak"
    assert request.completion_date == FIXED


def test_work_states_need_a_staff_member(lifecycle, make_request):
    request = make_request(status=S.SUBMITTED)

    with pytest.raises(InvalidTransition):
        lifecycle.transition(request, S.ASSIGNED)

    assert request.status == S.SUBMITTED


def test_transition_can_set_staff_in_same_step(lifecycle, make_request):
    request = make_request(status=S.ACKNOWLEDGED)

    lifecycle.transition(request, S.ASSIGNED, staff_id="STF042")

    assert request.status == S.ASSIGNED
    assert request.assigned_staff_id == "STF042"


@pytest.mark.parametrize("finished", [S.COMPLETED, S.CANCELLED])
def test_reopen_clears_archive_flags_and_completion(lifecycle, make_request, finished):
    request = make_request(
        status=finished, tenant_archived=True, staff_archived=True,
        completion_date=datetime(2024, 4, 1, tzinfo=timezone.utc))

    lifecycle.transition(request, S.REOPENED)

    assert request.status == S.REOPENED
    assert request.tenant_archived is False
    assert request.staff_archived is False
    assert request.completion_date is None


def test_rejected_reopen_keeps_archive_flags(lifecycle, make_request):
    request = make_request(status=S.CLOSED, tenant_archived=True, staff_archived=True)

    with pytest.raises(InvalidTransition):
        lifecycle.transition(request, S.REOPENED)

    assert request.tenant_archived is True
    assert request.staff_archived is True


@pytest.mark.parametrize("status", list(S))
def test_active_means_not_terminal(status):
    assert status.is_active is (status not in (S.COMPLETED, S.CANCELLED, S.CLOSED))


def test_paused_and_reopened_requests_are_active():
    assert S.ON_HOLD.is_active
    assert S.REOPENED.is_active


@pytest.mark.parametrize("status,expected", [
    (S.COMPLETED, True), (S.CANCELLED, True), (S.CLOSED, False), (S.IN_PROGRESS, False),
])
def test_request_can_reopen(make_request, status, expected):
    request = make_request(status=status)

    assert request.can_reopen is expected
    assert request.is_terminal is (status != S.IN_PROGRESS)
