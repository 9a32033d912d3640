from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from shared.core.schemas import Lookup
from shared.helpers.json_response_helper import list_payload, success_response
from shared.utils.app_status_code import AppStatusCode
from ..core.dependencies import get_lifecycle_service
from ..enum.maintenance_enum import RequestStatus
from ..schemas.maintenance_request_schemas import (
    ActionBy,
    ArchiveRequest,
    AssignStaffRequest,
    CompleteRequest,
    CostsUpdate,
    DetailsUpdate,
    MaintenanceRequestCreate,
    MaintenanceRequestOut,
    PriorityUpdate,
    ScheduleUpdate,
    StaffUpdateNotes,
    StatusChangeRequest,
    WorkflowLogOut,
)
from ..services.request_lifecycle_service import RequestLifecycleService

router = APIRouter(prefix="/api/maintenance-requests",
                   tags=["maintenance-requests"])


def _out(request) -> MaintenanceRequestOut:
    return MaintenanceRequestOut.model_validate(request)


def _list(requests) -> dict:
    return list_payload("requests", [_out(r) for r in requests])


# ----------------- Create -----------------
@router.post("/")
def submit_request(
    data: MaintenanceRequestCreate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.submit_request(
        tenant_id=data.tenant_id,
        description=data.description,
        category=data.category,
        apartment_number=data.apartment_number,
        detailed_description=data.detailed_description,
        estimated_cost=data.estimated_cost,
    )
    return success_response(_out(request), "Request submitted", AppStatusCode.CREATED_SUCCESSFULLY)


# ----------------- Queries -----------------
@router.get("/tenant/{tenant_id}")
def list_tenant_requests(
    tenant_id: str,
    archived: Optional[bool] = Query(False),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    return success_response(_list(service.list_for_tenant(tenant_id, archived)))


@router.get("/staff/{staff_id}")
def list_staff_requests(
    staff_id: str,
    archived: Optional[bool] = Query(False),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    return success_response(_list(service.list_for_staff(staff_id, archived)))


@router.get("/status/{status}")
def list_requests_by_status(
    status: RequestStatus,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    return success_response(_list(service.list_by_status(status)))


@router.get("/{request_id}")
def get_request(
    request_id: str,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    return success_response(_out(service.get_request(request_id)))


@router.get("/{request_id}/next-statuses")
def get_next_statuses(
    request_id: str,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    statuses: List[Lookup] = [
        Lookup(id=s.value, name=s.display_name) for s in service.next_statuses(request_id)
    ]
    return success_response(statuses)


@router.get("/{request_id}/logs")
def get_workflow_logs(
    request_id: str,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    logs = service.workflow_log(request_id)
    return success_response([WorkflowLogOut.model_validate(log) for log in logs])


# ----------------- Lifecycle -----------------
@router.put("/{request_id}/acknowledge")
def acknowledge_request(
    request_id: str,
    data: ActionBy = ActionBy(),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.acknowledge(request_id, action_by=data.action_by)
    return success_response(_out(request), "Request acknowledged", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/assign")
def assign_request(
    request_id: str,
    data: AssignStaffRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.assign(request_id, data.staff_id, action_by=data.action_by)
    return success_response(_out(request), "Request assigned", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/reassign")
def reassign_request(
    request_id: str,
    data: AssignStaffRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.reassign(request_id, data.staff_id, action_by=data.action_by)
    return success_response(_out(request), "Request reassigned", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/start")
def start_work(
    request_id: str,
    data: ActionBy = ActionBy(),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.start_work(request_id, action_by=data.action_by)
    return success_response(_out(request), "Work started", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/hold")
def put_on_hold(
    request_id: str,
    data: ActionBy = ActionBy(),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.put_on_hold(request_id, action_by=data.action_by)
    return success_response(_out(request), "Request on hold", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/complete")
def complete_request(
    request_id: str,
    data: CompleteRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.complete(
        request_id, data.resolution_notes, actual_cost=data.actual_cost, action_by=data.action_by)
    return success_response(_out(request), "Request completed", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/cancel")
def cancel_request(
    request_id: str,
    data: ActionBy = ActionBy(),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.cancel(request_id, action_by=data.action_by)
    return success_response(_out(request), "Request cancelled", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/reopen")
def reopen_request(
    request_id: str,
    data: ActionBy = ActionBy(),
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.reopen(request_id, action_by=data.action_by)
    return success_response(_out(request), "Request reopened", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/status")
def change_status(
    request_id: str,
    data: StatusChangeRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.change_status(
        request_id, data.status, resolution=data.resolution_notes, action_by=data.action_by)
    return success_response(_out(request), "Status updated", AppStatusCode.OPERATION_SUCCESSFUL)


# ----------------- Edits -----------------
@router.put("/{request_id}/priority")
def update_priority(
    request_id: str,
    data: PriorityUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.update_priority(request_id, data.priority, action_by=data.action_by)
    return success_response(_out(request), "Priority updated", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/details")
def update_details(
    request_id: str,
    data: DetailsUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.update_details(
        request_id,
        description=data.description,
        category=data.category,
        detailed_description=data.detailed_description,
    )
    return success_response(_out(request), "Request updated", AppStatusCode.OPERATION_SUCCESSFUL)


@router.post("/{request_id}/staff-update")
def post_staff_update(
    request_id: str,
    data: StaffUpdateNotes,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.post_staff_update(request_id, data.notes, action_by=data.action_by)
    return success_response(_out(request), "Update posted", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/schedule")
def schedule_request(
    request_id: str,
    data: ScheduleUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.schedule(request_id, data.scheduled_date)
    return success_response(_out(request), "Request scheduled", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/costs")
def record_costs(
    request_id: str,
    data: CostsUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.record_costs(
        request_id, estimated_cost=data.estimated_cost, actual_cost=data.actual_cost)
    return success_response(_out(request), "Costs recorded", AppStatusCode.OPERATION_SUCCESSFUL)


# ----------------- Archive -----------------
@router.put("/{request_id}/archive")
def archive_request(
    request_id: str,
    data: ArchiveRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.archive(request_id, data.viewer)
    return success_response(_out(request), "Request archived", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{request_id}/unarchive")
def unarchive_request(
    request_id: str,
    data: ArchiveRequest,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    request = service.unarchive(request_id, data.viewer)
    return success_response(_out(request), "Request restored", AppStatusCode.OPERATION_SUCCESSFUL)
