from typing import List, Optional
from sqlalchemy import desc, func
from sqlalchemy.orm import Session

from ..enum.maintenance_enum import RequestStatus
from ..lifecycle.errors import RequestNotFound
from ..models.maintenance_request import MaintenanceRequest
from ..models.request_workflow import RequestWorkflow

ACTIVE_STATUSES = [s for s in RequestStatus if s.is_active]


def save_request(db: Session, request: MaintenanceRequest) -> MaintenanceRequest:
    db.add(request)
    db.flush()
    return request


def update_request(db: Session, request: MaintenanceRequest) -> MaintenanceRequest:
    db.add(request)
    db.flush()
    return request


def find_by_id(db: Session, request_id: str, for_update: bool = False) -> Optional[MaintenanceRequest]:
    query = db.query(MaintenanceRequest).filter(
        MaintenanceRequest.id == request_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    return query.first()


def get_request(db: Session, request_id: str, for_update: bool = False) -> MaintenanceRequest:
    request = find_by_id(db, request_id, for_update=for_update)
    if not request:
        raise RequestNotFound(request_id)
    return request


# ---------------- Listing ----------------
def find_by_tenant(db: Session, tenant_id: str, archived: Optional[bool] = None) -> List[MaintenanceRequest]:
    filters = [MaintenanceRequest.tenant_id == tenant_id]
    if archived is not None:
        filters.append(MaintenanceRequest.tenant_archived == archived)

    return (
        db.query(MaintenanceRequest)
        .filter(*filters)
        .order_by(desc(MaintenanceRequest.submission_date))
        .all()
    )


def find_by_staff(db: Session, staff_id: str, archived: Optional[bool] = None) -> List[MaintenanceRequest]:
    filters = [MaintenanceRequest.assigned_staff_id == staff_id]
    if archived is not None:
        filters.append(MaintenanceRequest.staff_archived == archived)

    return (
        db.query(MaintenanceRequest)
        .filter(*filters)
        .order_by(desc(MaintenanceRequest.last_updated))
        .all()
    )


def find_by_status(db: Session, status: RequestStatus) -> List[MaintenanceRequest]:
    return (
        db.query(MaintenanceRequest)
        .filter(MaintenanceRequest.status == RequestStatus(status))
        .order_by(desc(MaintenanceRequest.submission_date))
        .all()
    )


def count_active_by_staff(db: Session, staff_id: str) -> int:
    return (
        db.query(func.count(MaintenanceRequest.id))
        .filter(
            MaintenanceRequest.assigned_staff_id == staff_id,
            MaintenanceRequest.status.in_(ACTIVE_STATUSES),
        )
        .scalar()
    ) or 0


# ---------------- Workflow log ----------------
def add_workflow_log(
    db: Session,
    request: MaintenanceRequest,
    old_status: Optional[RequestStatus],
    new_status: Optional[RequestStatus],
    action_taken: str,
    action_by: Optional[str] = None,
) -> RequestWorkflow:
    log = RequestWorkflow(
        request_id=request.id,
        action_by=action_by,
        old_status=old_status.value if old_status else None,
        new_status=new_status.value if new_status else None,
        action_taken=action_taken,
    )
    db.add(log)
    return log


def get_workflow_logs(db: Session, request_id: str) -> List[RequestWorkflow]:
    return (
        db.query(RequestWorkflow)
        .filter(RequestWorkflow.request_id == request_id)
        .order_by(RequestWorkflow.action_time, RequestWorkflow.id)
        .all()
    )
