from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, List, Optional

from ..enum.maintenance_enum import RequestStatus
from .archival_policy import ArchivalPolicy
from .errors import InvalidTransition, MissingResolution

S = RequestStatus

# Legal edges of the request state machine. CLOSED has no way out.
ALLOWED_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    S.SUBMITTED: frozenset({S.ACKNOWLEDGED, S.ASSIGNED, S.CANCELLED}),
    S.ACKNOWLEDGED: frozenset({S.ASSIGNED, S.CANCELLED}),
    S.ASSIGNED: frozenset({S.IN_PROGRESS, S.ON_HOLD, S.CANCELLED}),
    S.IN_PROGRESS: frozenset({S.COMPLETED, S.ON_HOLD, S.CANCELLED}),
    S.ON_HOLD: frozenset({S.IN_PROGRESS, S.CANCELLED}),
    S.REOPENED: frozenset({S.IN_PROGRESS, S.ASSIGNED, S.CANCELLED}),
    S.COMPLETED: frozenset({S.REOPENED}),
    S.CANCELLED: frozenset({S.REOPENED}),
    S.CLOSED: frozenset(),
}

# Entering these states requires somebody to be doing the work.
STAFFED_STATUSES = frozenset({S.ASSIGNED, S.IN_PROGRESS})

# Reassignment keeps the status and only swaps the staff member.
REASSIGNABLE_STATUSES = frozenset({S.ASSIGNED, S.IN_PROGRESS})

_KEEP = object()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def can_transition(current, target) -> bool:
    return RequestStatus(target) in ALLOWED_TRANSITIONS[RequestStatus(current)]


def allowed_transitions(current) -> List[RequestStatus]:
    """Legal next states of ``current``, in declaration order."""
    targets = ALLOWED_TRANSITIONS[RequestStatus(current)]
    return [status for status in RequestStatus if status in targets]


class RequestLifecycle:
    """State machine over ``MaintenanceRequest.status``.

    ``validate`` checks a move without touching the request; ``transition``
    validates first and only then mutates, so a rejected move leaves the
    request exactly as it was.
    """

    def __init__(self, archival_policy: ArchivalPolicy = None,
                 clock: Callable[[], datetime] = None):
        self.archival_policy = archival_policy or ArchivalPolicy()
        self.clock = clock or utcnow

    def validate(self, request, target, resolution: Optional[str] = None,
                 staff_id=_KEEP) -> RequestStatus:
        current = RequestStatus(request.status)
        target = RequestStatus(target)

        if target not in ALLOWED_TRANSITIONS[current]:
            raise InvalidTransition(current, target)

        effective_staff = request.assigned_staff_id if staff_id is _KEEP else staff_id
        if target in STAFFED_STATUSES and not effective_staff:
            raise InvalidTransition(
                current, target, "no staff member is assigned")

        if target == S.COMPLETED and not (resolution or "").strip():
            raise MissingResolution(request.id)

        return target

    def transition(self, request, target, resolution: Optional[str] = None,
                   staff_id=_KEEP) -> RequestStatus:
        """Move ``request`` to ``target`` and return the previous status.

        ``staff_id`` sets the assigned staff reference in the same step, for
        callers that assign and change status together.
        """
        target = self.validate(request, target, resolution, staff_id)
        previous = RequestStatus(request.status)
        now = self.clock()

        if staff_id is not _KEEP:
            request.assigned_staff_id = staff_id

        request.status = target
        request.last_updated = now

        if target == S.COMPLETED:
            request.resolution_notes = resolution.strip()
            request.completion_date = now

        if target == S.REOPENED and previous in (S.COMPLETED, S.CANCELLED):
            request.completion_date = None
            self.archival_policy.clear(request)

        return previous
