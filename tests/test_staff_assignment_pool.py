import logging
import threading
import time

import pytest

from maintenance_service.app.enum.maintenance_enum import RequestStatus
from maintenance_service.app.lifecycle.errors import (
    CapacityExceeded,
    InvalidCapacity,
    InvalidTransition,
    MissingResolution,
    StaffUnavailable,
)
from maintenance_service.app.lifecycle.staff_assignment_pool import EntityLocks, request_key


def test_assign_until_capacity(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(max_capacity=1))
    first, second = make_request(), make_request()

    result = pool.assign(first, staff)

    assert result.staff_id == staff.staff_id
    assert first.status == RequestStatus.ASSIGNED
    assert first.assigned_staff_id == staff.staff_id
    assert staff.current_workload == 1

    with pytest.raises(CapacityExceeded):
        pool.assign(second, staff)

    assert staff.current_workload == 1
    assert second.status == RequestStatus.SUBMITTED
    assert second.assigned_staff_id is None


def test_assign_to_unavailable_staff(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(is_available=False))
    request = make_request()

    with pytest.raises(StaffUnavailable):
        pool.assign(request, staff)

    assert staff.current_workload == 0
    assert request.status == RequestStatus.SUBMITTED


def test_unavailable_is_reported_before_capacity(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(max_capacity=1, current_workload=1, is_available=False))

    with pytest.raises(StaffUnavailable):
        pool.assign(make_request(), staff)


def test_assign_rejects_illegal_transition_without_touching_workload(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff())
    request = make_request(status=RequestStatus.COMPLETED)

    with pytest.raises(InvalidTransition):
        pool.assign(request, staff)

    assert staff.current_workload == 0


def test_reassign_moves_the_slot(pool, directory, make_staff, make_request):
    old = directory.add(make_staff())
    new = directory.add(make_staff())
    request = make_request()
    pool.assign(request, old)

    result = pool.reassign(request, new)

    assert result.previous_staff_id == old.staff_id
    assert request.assigned_staff_id == new.staff_id
    assert request.status == RequestStatus.ASSIGNED
    assert old.current_workload == 0
    assert new.current_workload == 1


def test_reassign_to_full_staff_changes_nothing(pool, directory, make_staff, make_request):
    old = directory.add(make_staff())
    full = directory.add(make_staff(max_capacity=1, current_workload=1))
    request = make_request()
    pool.assign(request, old)

    with pytest.raises(CapacityExceeded):
        pool.reassign(request, full)

    assert request.assigned_staff_id == old.staff_id
    assert old.current_workload == 1
    assert full.current_workload == 1


def test_reassign_same_staff_is_a_no_op(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(max_capacity=1))
    request = make_request()
    pool.assign(request, staff)

    pool.reassign(request, staff)

    assert staff.current_workload == 1


@pytest.mark.parametrize("status", [RequestStatus.SUBMITTED, RequestStatus.ON_HOLD, RequestStatus.COMPLETED])
def test_reassign_only_from_work_states(pool, directory, make_staff, make_request, status):
    new = directory.add(make_staff())
    request = make_request(status=status, staff_id="STF999")

    with pytest.raises(InvalidTransition):
        pool.reassign(request, new)

    assert new.current_workload == 0


def test_complete_releases_slot(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff())
    request = make_request()
    pool.assign(request, staff)
    pool.lifecycle.transition(request, RequestStatus.IN_PROGRESS)

    pool.complete(request, "Fixed leak")

    assert request.status == RequestStatus.COMPLETED
    assert request.resolution_notes == "Fixed leak"
    assert staff.current_workload == 0


def test_complete_without_resolution_keeps_slot(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(current_workload=1))
    request = make_request(status=RequestStatus.IN_PROGRESS, staff_id=staff.staff_id)

    with pytest.raises(MissingResolution):
        pool.complete(request, "")

    assert request.status == RequestStatus.IN_PROGRESS
    assert staff.current_workload == 1


def test_complete_never_drives_workload_negative(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(current_workload=0))
    request = make_request(status=RequestStatus.IN_PROGRESS, staff_id=staff.staff_id)

    pool.complete(request, "Replaced fuse")

    assert staff.current_workload == 0


def test_cancel_releases_slot(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff())
    request = make_request()
    pool.assign(request, staff)

    pool.cancel(request)

    assert request.status == RequestStatus.CANCELLED
    assert staff.current_workload == 0


def test_reopen_returns_request_to_previous_staff(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff())
    request = make_request(status=RequestStatus.COMPLETED, staff_id=staff.staff_id,
                           tenant_archived=True, staff_archived=True)

    result = pool.reopen(request)

    assert result.staff_id == staff.staff_id
    assert request.status == RequestStatus.REOPENED
    assert staff.current_workload == 1
    assert request.tenant_archived is False
    assert request.staff_archived is False


def test_reopen_leaves_request_unassigned_when_staff_is_full(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(max_capacity=1, current_workload=1))
    other = directory.add(make_staff())
    request = make_request(status=RequestStatus.COMPLETED, staff_id=staff.staff_id)

    pool.reopen(request)

    assert request.status == RequestStatus.REOPENED
    assert request.assigned_staff_id is None
    assert staff.current_workload == 1

    pool.assign(request, other)
    assert request.status == RequestStatus.ASSIGNED
    assert other.current_workload == 1


def test_assign_after_reopen_to_same_staff_keeps_one_slot(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff())
    request = make_request(status=RequestStatus.CANCELLED, staff_id=staff.staff_id)
    pool.reopen(request)
    assert staff.current_workload == 1

    pool.assign(request, staff)

    assert request.status == RequestStatus.ASSIGNED
    assert staff.current_workload == 1


def test_list_available_orders_by_workload_then_insertion(pool, directory, make_staff):
    a = directory.add(make_staff(current_workload=2))
    b = directory.add(make_staff(current_workload=0))
    c = directory.add(make_staff(current_workload=2))
    directory.add(make_staff(is_available=False))
    directory.add(make_staff(max_capacity=3, current_workload=3))

    assert pool.list_available() == [b, a, c]


def test_set_availability_keeps_workload(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff())
    request = make_request()
    pool.assign(request, staff)

    pool.set_availability(staff, False)

    assert staff.is_available is False
    assert staff.current_workload == 1
    assert request.assigned_staff_id == staff.staff_id
    assert staff.updated_at is not None


@pytest.mark.parametrize("capacity", [0, -1, 2.5, True, None])
def test_set_capacity_rejects_non_positive(pool, make_staff, capacity):
    staff = make_staff(max_capacity=5)

    with pytest.raises(InvalidCapacity):
        pool.set_capacity(staff, capacity)

    assert staff.max_capacity == 5


def test_lowering_capacity_below_workload_only_warns(pool, make_staff, caplog):
    staff = make_staff(max_capacity=5, current_workload=4)

    with caplog.at_level(logging.WARNING):
        pool.set_capacity(staff, 2)

    assert staff.max_capacity == 2
    assert staff.current_workload == 4
    assert "below current workload" in caplog.text


def test_recount_sets_workload(pool, make_staff):
    staff = make_staff(current_workload=7)

    pool.recount(staff, 3)

    assert staff.current_workload == 3


def test_concurrent_assignments_respect_capacity(directory, make_staff, make_request):
    from maintenance_service.app.lifecycle.staff_assignment_pool import StaffAssignmentPool

    pool = StaffAssignmentPool(directory, locks=EntityLocks())
    staff = directory.add(make_staff(max_capacity=3))
    requests = [make_request() for _ in range(10)]
    failures = []

    def worker(request):
        try:
            pool.assign(request, staff)
        except CapacityExceeded:
            failures.append(request.id)

    threads = [threading.Thread(target=worker, args=(r,)) for r in requests]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert staff.current_workload == 3
    assert len(failures) == 7
    assert sum(1 for r in requests if r.status == RequestStatus.ASSIGNED) == 3


def test_interleaved_reassigns_move_exactly_one_slot(pool, directory, make_staff, make_request):
    a = directory.add(make_staff())
    b = directory.add(make_staff())
    c = directory.add(make_staff())
    request = make_request()
    pool.assign(request, a)
    started = threading.Event()

    def move_to_c():
        started.set()
        pool.reassign(request, c)

    with pool.locks.hold(request_key(request.id)):
        worker = threading.Thread(target=move_to_c)
        worker.start()
        started.wait()
        # give the worker time to queue on the request lock
        time.sleep(0.05)
        pool.reassign(request, b)
    worker.join()

    assert request.assigned_staff_id == c.staff_id
    assert (a.current_workload, b.current_workload, c.current_workload) == (0, 0, 1)


def test_lock_registry_empties_after_use(pool, directory, make_staff, make_request):
    staff = directory.add(make_staff(max_capacity=1))

    for _ in range(50):
        request = make_request()
        pool.assign(request, staff)
        pool.cancel(request)

    assert len(pool.locks) == 0
    assert staff.current_workload == 0


def test_nested_holds_keep_the_lock_until_the_outer_release():
    locks = EntityLocks()

    with locks.hold("request:REQ1", "staff:STF1"):
        with locks.hold("staff:STF1"):
            assert len(locks) == 2
        assert len(locks) == 2

    assert len(locks) == 0


def test_empty_registry_is_still_shared(directory):
    from maintenance_service.app.lifecycle.staff_assignment_pool import StaffAssignmentPool

    locks = EntityLocks()

    assert StaffAssignmentPool(directory, locks=locks).locks is locks
