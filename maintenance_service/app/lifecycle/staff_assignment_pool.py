import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, List, Optional

from ..enum.maintenance_enum import RequestStatus
from .errors import CapacityExceeded, InvalidCapacity, InvalidTransition, StaffUnavailable
from .request_lifecycle import REASSIGNABLE_STATUSES, RequestLifecycle

logger = logging.getLogger(__name__)


def request_key(request_id: str) -> Optional[str]:
    return f"request:{request_id}" if request_id else None


def staff_key(staff_id: str) -> Optional[str]:
    return f"staff:{staff_id}" if staff_id else None


class EntityLocks:
    """Re-entrant lock per request / staff member.

    ``hold`` takes its keys in sorted order, and "request:" sorts before
    "staff:", so every caller acquires requests first and staff second.
    Callers that need more keys later may nest another ``hold`` as long as
    the nested call only adds staff keys.

    A key's lock lives only while somebody holds or waits for it.
    """

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: Dict[str, threading.RLock] = {}
        self._users: Dict[str, int] = {}

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)

    def _checkout(self, key: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.RLock()
            self._users[key] = self._users.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._users[key] -= 1
            if not self._users[key]:
                del self._users[key]
                del self._locks[key]

    @contextmanager
    def hold(self, *keys):
        acquired = []
        try:
            for key in sorted({k for k in keys if k}):
                lock = self._checkout(key)
                try:
                    lock.acquire()
                except BaseException:
                    self._checkin(key)
                    raise
                acquired.append((key, lock))
            yield
        finally:
            for key, lock in reversed(acquired):
                lock.release()
                self._checkin(key)


@dataclass
class AssignmentResult:
    request_id: str
    staff_id: Optional[str]
    previous_staff_id: Optional[str] = None
    status: Optional[RequestStatus] = None


class StaffAssignmentPool:
    """Capacity-gated assignment of requests to staff members.

    Owns every change to ``current_workload``: a staff member's workload is
    the number of non-terminal requests pointing at them, and it never leaves
    ``0..max_capacity`` through this class.

    ``directory`` supplies staff members and needs two methods:
    ``find_staff(staff_id)`` returning the member or None, and
    ``list_staff()`` returning all members in insertion order.
    """

    def __init__(self, directory, lifecycle: RequestLifecycle = None,
                 locks: EntityLocks = None):
        self.directory = directory
        self.lifecycle = lifecycle or RequestLifecycle()
        self.locks = locks if locks is not None else EntityLocks()

    @contextmanager
    def _holding(self, request, *staff_ids):
        """Lock ``request``, then its current staff member and ``staff_ids``.

        Yields the staff id read under the request lock.
        """
        with self.locks.hold(request_key(request.id)):
            current_staff_id = request.assigned_staff_id
            with self.locks.hold(staff_key(current_staff_id),
                                 *(staff_key(s) for s in staff_ids)):
                yield current_staff_id

    # ---------------- Assignment ----------------

    def assign(self, request, staff) -> AssignmentResult:
        with self._holding(request, staff.staff_id) as previous_staff_id:
            self.lifecycle.validate(
                request, RequestStatus.ASSIGNED, staff_id=staff.staff_id)

            # a reopened request may still hold a slot with this member
            same_staff = previous_staff_id == staff.staff_id
            previous = None
            if not same_staff:
                self._check_can_take(staff)
                previous = self._find(previous_staff_id)

            self.lifecycle.transition(
                request, RequestStatus.ASSIGNED, staff_id=staff.staff_id)
            if not same_staff:
                self._take_slot(staff)
                if previous is not None:
                    self._release_slot(previous)

        return AssignmentResult(
            request.id, staff.staff_id, previous_staff_id, request.status)

    def reassign(self, request, new_staff) -> AssignmentResult:
        with self._holding(request, new_staff.staff_id) as previous_staff_id:
            current = RequestStatus(request.status)
            if current not in REASSIGNABLE_STATUSES:
                raise InvalidTransition(
                    current, RequestStatus.ASSIGNED,
                    "only assigned or in-progress requests can be reassigned")

            if previous_staff_id == new_staff.staff_id:
                return AssignmentResult(
                    request.id, new_staff.staff_id, previous_staff_id, current)

            self._check_can_take(new_staff)
            previous = self._find(previous_staff_id)

            request.assigned_staff_id = new_staff.staff_id
            request.last_updated = self.lifecycle.clock()
            self._take_slot(new_staff)
            if previous is not None:
                self._release_slot(previous)

        return AssignmentResult(
            request.id, new_staff.staff_id, previous_staff_id, current)

    # ---------------- Terminal moves ----------------

    def complete(self, request, resolution: str) -> AssignmentResult:
        with self._holding(request) as staff_id:
            self.lifecycle.transition(
                request, RequestStatus.COMPLETED, resolution=resolution)
            staff = self._find(staff_id)
            if staff is not None:
                self._release_slot(staff)

        return AssignmentResult(request.id, staff_id, staff_id, request.status)

    def cancel(self, request) -> AssignmentResult:
        with self._holding(request) as staff_id:
            self.lifecycle.transition(request, RequestStatus.CANCELLED)
            staff = self._find(staff_id)
            if staff is not None:
                self._release_slot(staff)

        return AssignmentResult(request.id, staff_id, staff_id, request.status)

    def reopen(self, request) -> AssignmentResult:
        """Reopen a finished request.

        The previous staff member gets it back when they are available and
        under capacity; otherwise it is left unassigned for ``assign``.
        """
        with self._holding(request) as previous_staff_id:
            self.lifecycle.validate(request, RequestStatus.REOPENED)

            staff = self._find(previous_staff_id)
            keep = staff is not None and staff.is_available and staff.has_capacity

            self.lifecycle.transition(
                request, RequestStatus.REOPENED,
                staff_id=staff.staff_id if keep else None)
            if keep:
                self._take_slot(staff)

        return AssignmentResult(
            request.id, request.assigned_staff_id, previous_staff_id, request.status)

    # ---------------- Staff administration ----------------

    def list_available(self) -> List:
        """Assignable staff, least loaded first; ties keep directory order."""
        candidates = [
            s for s in self.directory.list_staff()
            if s.is_available and s.current_workload < s.max_capacity
        ]
        return sorted(candidates, key=lambda s: s.current_workload)

    def set_availability(self, staff, available: bool) -> None:
        with self.locks.hold(staff_key(staff.staff_id)):
            staff.is_available = bool(available)
            staff.touch()

    def set_capacity(self, staff, max_capacity: int) -> None:
        if isinstance(max_capacity, bool) or not isinstance(max_capacity, int) or max_capacity < 1:
            raise InvalidCapacity(max_capacity)

        with self.locks.hold(staff_key(staff.staff_id)):
            staff.max_capacity = max_capacity
            staff.touch()
            if staff.current_workload > max_capacity:
                # existing assignments stay; only new ones are blocked
                logger.warning(
                    "Capacity of staff %s lowered to %s below current workload %s",
                    staff.staff_id, max_capacity, staff.current_workload)

    def recount(self, staff, active_requests: int) -> None:
        with self.locks.hold(staff_key(staff.staff_id)):
            staff.current_workload = max(0, int(active_requests))
            staff.touch()

    # ---------------- Helpers ----------------

    def _find(self, staff_id):
        if not staff_id:
            return None
        return self.directory.find_staff(staff_id)

    @staticmethod
    def _check_can_take(staff) -> None:
        if not staff.is_available:
            raise StaffUnavailable(staff.staff_id)
        if staff.current_workload >= staff.max_capacity:
            raise CapacityExceeded(
                staff.staff_id, staff.current_workload, staff.max_capacity)

    @staticmethod
    def _take_slot(staff) -> None:
        staff.current_workload += 1
        staff.touch()

    @staticmethod
    def _release_slot(staff) -> None:
        staff.current_workload = max(0, staff.current_workload - 1)
        staff.touch()
