import logging
from contextlib import ExitStack, contextmanager
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from shared.utils.enums import UserAccountType
from ..crud import maintenance_request_crud, staff_crud, user_crud
from ..crud.staff_crud import StaffDirectory
from ..enum.maintenance_enum import ArchiveViewer, CategoryType, PriorityLevel, RequestStatus
from ..helpers.notification_helper import Notifier, disabled_notifier
from ..lifecycle.errors import InvalidCapacity, InvalidCost, InvalidTransition
from ..lifecycle.priority_classifier import classify
from ..lifecycle.request_lifecycle import RequestLifecycle, allowed_transitions
from ..lifecycle.staff_assignment_pool import EntityLocks, StaffAssignmentPool, request_key, staff_key
from ..models.maintenance_request import MaintenanceRequest
from ..models.maintenance_staff import MaintenanceStaff
from ..models.request_workflow import RequestWorkflow

logger = logging.getLogger(__name__)


class _Work:
    """A loaded request plus the lock stack that lives until commit."""

    def __init__(self, request: MaintenanceRequest, stack: ExitStack, locks: EntityLocks):
        self.request = request
        self._stack = stack
        self._locks = locks

    def lock_staff(self, *staff_ids):
        self._stack.enter_context(
            self._locks.hold(*(staff_key(s) for s in staff_ids)))


class RequestLifecycleService:
    """Entry point for everything that changes a maintenance request.

    Each operation loads its entities, holds the request lock and the locks
    of every staff member it touches until the session is committed, and
    only then notifies the tenant and the assigned staff member. Any
    MaintenanceError rolls the session back and is re-raised unchanged.
    """

    def __init__(self, db: Session, notifier: Notifier = None,
                 locks: EntityLocks = None, lifecycle: RequestLifecycle = None):
        self.db = db
        self.notifier = notifier or disabled_notifier
        self.lifecycle = lifecycle or RequestLifecycle()
        self.archival_policy = self.lifecycle.archival_policy
        self.directory = StaffDirectory(db, for_update=True)
        self.pool = StaffAssignmentPool(self.directory, self.lifecycle, locks)
        self.locks = self.pool.locks

    # ---------------- Unit of work ----------------

    @contextmanager
    def _unit_of_work(self, request_id: str):
        with ExitStack() as stack:
            stack.enter_context(self.locks.hold(request_key(request_id)))
            try:
                request = maintenance_request_crud.get_request(
                    self.db, request_id, for_update=True)
                yield _Work(request, stack, self.locks)
                maintenance_request_crud.update_request(self.db, request)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

    @contextmanager
    def _staff_unit(self, staff_id: str):
        with self.locks.hold(staff_key(staff_id)):
            try:
                yield self.directory.get_staff(staff_id)
                self.db.commit()
            except Exception:
                self.db.rollback()
                raise

    def _log_transition(self, request, old_status, action_taken, action_by=None):
        new_status = RequestStatus(request.status)
        maintenance_request_crud.add_workflow_log(
            self.db, request, old_status, new_status, action_taken, action_by)
        logger.info("Request %s moved %s -> %s",
                    request.id, old_status.value if old_status else None, new_status.value)

    def _notify(self, request: MaintenanceRequest, include_staff: bool = True):
        status = RequestStatus(request.status)
        contacts = [user_crud.get_contact(self.db, request.tenant_id)]
        if include_staff:
            contacts.append(user_crud.get_staff_contact(
                self.db, request.assigned_staff_id))

        for contact in dict.fromkeys(c for c in contacts if c):
            try:
                self.notifier(contact, request.id, status)
            except Exception:
                logger.exception(
                    "Could not hand off notification for request %s to %s", request.id, contact)

    @staticmethod
    def _check_cost(field: str, value) -> Optional[Decimal]:
        if value is None:
            return None
        amount = Decimal(str(value))
        if amount < 0:
            raise InvalidCost(field, value)
        return amount

    # ---------------- Creation ----------------

    def submit_request(
        self,
        tenant_id: str,
        description: str,
        category,
        apartment_number: Optional[str] = None,
        detailed_description: Optional[str] = None,
        estimated_cost=None,
    ) -> MaintenanceRequest:
        category = CategoryType(category)
        estimated = self._check_cost("estimated_cost", estimated_cost)

        if apartment_number is None:
            tenant = user_crud.get_user(self.db, tenant_id)
            if tenant is not None and tenant.account_type == UserAccountType.TENANT:
                apartment_number = tenant.profile.apartment_number

        request = MaintenanceRequest(
            tenant_id=tenant_id,
            apartment_number=apartment_number,
            description=description.strip(),
            detailed_description=detailed_description,
            category=category,
            priority=classify(category),
            status=RequestStatus.SUBMITTED,
            estimated_cost=estimated,
        )
        try:
            maintenance_request_crud.save_request(self.db, request)
            self._log_transition(request, None, "Request submitted", tenant_id)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(request)
        self._notify(request, include_staff=False)
        return request

    # ---------------- Transitions ----------------

    def _simple_transition(self, request_id: str, target: RequestStatus,
                           action_taken: str, action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            old_status = self.lifecycle.transition(request, target)
            self._log_transition(request, old_status, action_taken, action_by)

        self._notify(request)
        return request

    def acknowledge(self, request_id: str, action_by: Optional[str] = None):
        return self._simple_transition(
            request_id, RequestStatus.ACKNOWLEDGED, "Request acknowledged", action_by)

    def start_work(self, request_id: str, action_by: Optional[str] = None):
        return self._simple_transition(
            request_id, RequestStatus.IN_PROGRESS, "Work started", action_by)

    def put_on_hold(self, request_id: str, action_by: Optional[str] = None):
        return self._simple_transition(
            request_id, RequestStatus.ON_HOLD, "Request put on hold", action_by)

    def assign(self, request_id: str, staff_id: str, action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            work.lock_staff(staff_id, request.assigned_staff_id)
            staff = self.directory.get_staff(staff_id)

            old_status = RequestStatus(request.status)
            result = self.pool.assign(request, staff)

            self._log_transition(
                request, old_status,
                f"Request assigned to {staff.full_name or staff.staff_id}", action_by)
            staff_crud.add_assignment_log(
                self.db, request.id, result.previous_staff_id, staff.staff_id,
                "Manual assignment", action_by)

        self._notify(request)
        return request

    def reassign(self, request_id: str, staff_id: str, action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            work.lock_staff(staff_id, request.assigned_staff_id)
            staff = self.directory.get_staff(staff_id)

            result = self.pool.reassign(request, staff)
            if result.previous_staff_id != result.staff_id:
                maintenance_request_crud.add_workflow_log(
                    self.db, request, None, None,
                    f"Request reassigned from {result.previous_staff_id} to {staff.staff_id}",
                    action_by)
                staff_crud.add_assignment_log(
                    self.db, request.id, result.previous_staff_id, staff.staff_id,
                    "Reassignment", action_by)

        self._notify(request)
        return request

    def complete(self, request_id: str, resolution: Optional[str], actual_cost=None,
                 action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            work.lock_staff(request.assigned_staff_id)
            cost = self._check_cost("actual_cost", actual_cost)

            old_status = RequestStatus(request.status)
            self.pool.complete(request, resolution)
            if cost is not None:
                request.actual_cost = cost
            self._log_transition(request, old_status, "Request completed", action_by)

        self._notify(request)
        return request

    def cancel(self, request_id: str, action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            work.lock_staff(request.assigned_staff_id)

            old_status = RequestStatus(request.status)
            self.pool.cancel(request)
            self._log_transition(request, old_status, "Request cancelled", action_by)

        self._notify(request)
        return request

    def reopen(self, request_id: str, action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            work.lock_staff(request.assigned_staff_id)

            old_status = RequestStatus(request.status)
            result = self.pool.reopen(request)
            if result.staff_id:
                action_taken = f"Request reopened and returned to {result.staff_id}"
                staff_crud.add_assignment_log(
                    self.db, request.id, result.previous_staff_id, result.staff_id,
                    "Reopened", action_by)
            else:
                action_taken = "Request reopened, awaiting assignment"
            self._log_transition(request, old_status, action_taken, action_by)

        self._notify(request)
        return request

    def change_status(self, request_id: str, new_status, resolution: Optional[str] = None,
                      action_by: Optional[str] = None):
        new_status = RequestStatus(new_status)
        if new_status == RequestStatus.COMPLETED:
            return self.complete(request_id, resolution, action_by=action_by)

        handlers = {
            RequestStatus.ACKNOWLEDGED: self.acknowledge,
            RequestStatus.IN_PROGRESS: self.start_work,
            RequestStatus.ON_HOLD: self.put_on_hold,
            RequestStatus.CANCELLED: self.cancel,
            RequestStatus.REOPENED: self.reopen,
        }
        if new_status in handlers:
            return handlers[new_status](request_id, action_by=action_by)

        request = self.get_request(request_id)
        reason = "a staff member is required, use assign" if new_status == RequestStatus.ASSIGNED else None
        raise InvalidTransition(request.status, new_status, reason)

    # ---------------- Edits ----------------

    def update_priority(self, request_id: str, priority, action_by: Optional[str] = None):
        priority = PriorityLevel(priority)
        with self._unit_of_work(request_id) as work:
            request = work.request
            old_priority = PriorityLevel(request.priority)
            request.priority = priority
            request.last_updated = self.lifecycle.clock()
            maintenance_request_crud.add_workflow_log(
                self.db, request, None, None,
                f"Priority changed from {old_priority.value} to {priority.value}", action_by)
        return request

    def update_details(self, request_id: str, description: Optional[str] = None, category=None,
                       detailed_description: Optional[str] = None):
        category = CategoryType(category) if category is not None else None
        with self._unit_of_work(request_id) as work:
            request = work.request
            if description is not None:
                request.description = description.strip()
            if detailed_description is not None:
                request.detailed_description = detailed_description
            if category is not None:
                # priority keeps its current value
                request.category = category
            request.last_updated = self.lifecycle.clock()
        return request

    def post_staff_update(self, request_id: str, notes: str, action_by: Optional[str] = None):
        with self._unit_of_work(request_id) as work:
            request = work.request
            request.staff_update_notes = notes.strip()
            self.archival_policy.unarchive(request, ArchiveViewer.TENANT)
            request.last_updated = self.lifecycle.clock()
            maintenance_request_crud.add_workflow_log(
                self.db, request, None, None, "Staff update posted", action_by)

        self._notify(request, include_staff=False)
        return request

    def schedule(self, request_id: str, scheduled_date: datetime):
        with self._unit_of_work(request_id) as work:
            request = work.request
            request.scheduled_date = scheduled_date
            request.last_updated = self.lifecycle.clock()
        return request

    def record_costs(self, request_id: str, estimated_cost=None, actual_cost=None):
        estimated = self._check_cost("estimated_cost", estimated_cost)
        actual = self._check_cost("actual_cost", actual_cost)
        with self._unit_of_work(request_id) as work:
            request = work.request
            if estimated is not None:
                request.estimated_cost = estimated
            if actual is not None:
                request.actual_cost = actual
            request.last_updated = self.lifecycle.clock()
        return request

    def archive(self, request_id: str, viewer):
        with self._unit_of_work(request_id) as work:
            request = work.request
            if self.archival_policy.archive(request, viewer):
                request.last_updated = self.lifecycle.clock()
        return request

    def unarchive(self, request_id: str, viewer):
        with self._unit_of_work(request_id) as work:
            request = work.request
            if self.archival_policy.unarchive(request, viewer):
                request.last_updated = self.lifecycle.clock()
        return request

    # ---------------- Queries ----------------

    def get_request(self, request_id: str) -> MaintenanceRequest:
        return maintenance_request_crud.get_request(self.db, request_id)

    def list_for_tenant(self, tenant_id: str, archived: Optional[bool] = False) -> List[MaintenanceRequest]:
        return maintenance_request_crud.find_by_tenant(self.db, tenant_id, archived)

    def list_for_staff(self, staff_id: str, archived: Optional[bool] = False) -> List[MaintenanceRequest]:
        return maintenance_request_crud.find_by_staff(self.db, staff_id, archived)

    def list_by_status(self, status) -> List[MaintenanceRequest]:
        return maintenance_request_crud.find_by_status(self.db, RequestStatus(status))

    def next_statuses(self, request_id: str) -> List[RequestStatus]:
        request = self.get_request(request_id)
        return allowed_transitions(request.status)

    def workflow_log(self, request_id: str) -> List[RequestWorkflow]:
        self.get_request(request_id)
        return maintenance_request_crud.get_workflow_logs(self.db, request_id)

    # ---------------- Staff ----------------

    def register_staff(self, full_name: Optional[str] = None, user_id: Optional[str] = None,
                       max_capacity: Optional[int] = None,
                       specializations: Optional[List[str]] = None) -> MaintenanceStaff:
        if max_capacity is not None and (
                isinstance(max_capacity, bool) or not isinstance(max_capacity, int) or max_capacity < 1):
            raise InvalidCapacity(max_capacity)
        try:
            staff = staff_crud.create_staff(
                self.db, full_name=full_name, user_id=user_id,
                max_capacity=max_capacity, specializations=specializations)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        self.db.refresh(staff)
        return staff

    def get_staff(self, staff_id: str) -> MaintenanceStaff:
        return self.directory.get_staff(staff_id)

    def list_available_staff(self) -> List[MaintenanceStaff]:
        return self.pool.list_available()

    def set_staff_availability(self, staff_id: str, available: bool) -> MaintenanceStaff:
        with self._staff_unit(staff_id) as staff:
            self.pool.set_availability(staff, available)
        return staff

    def set_staff_capacity(self, staff_id: str, max_capacity: int) -> MaintenanceStaff:
        with self._staff_unit(staff_id) as staff:
            self.pool.set_capacity(staff, max_capacity)
        return staff

    def recount_workload(self, staff_id: str) -> MaintenanceStaff:
        with self._staff_unit(staff_id) as staff:
            active = maintenance_request_crud.count_active_by_staff(self.db, staff_id)
            self.pool.recount(staff, active)
        return staff
