from fastapi import APIRouter, Depends

from shared.helpers.json_response_helper import success_response
from shared.utils.app_status_code import AppStatusCode
from ..core.dependencies import get_lifecycle_service
from ..schemas.staff_schemas import AvailabilityUpdate, CapacityUpdate, StaffCreate, StaffOut
from ..services.request_lifecycle_service import RequestLifecycleService

router = APIRouter(prefix="/api/staff", tags=["staff"])


def _out(staff) -> StaffOut:
    return StaffOut.model_validate(staff)


@router.post("/")
def register_staff(
    data: StaffCreate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    staff = service.register_staff(
        full_name=data.full_name,
        user_id=data.user_id,
        max_capacity=data.max_capacity,
        specializations=data.specializations,
    )
    return success_response(_out(staff), "Staff registered", AppStatusCode.CREATED_SUCCESSFULLY)


@router.get("/available")
def list_available_staff(
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    return success_response([_out(s) for s in service.list_available_staff()])


@router.get("/{staff_id}")
def get_staff(
    staff_id: str,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    return success_response(_out(service.get_staff(staff_id)))


@router.put("/{staff_id}/availability")
def set_availability(
    staff_id: str,
    data: AvailabilityUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    staff = service.set_staff_availability(staff_id, data.is_available)
    return success_response(_out(staff), "Availability updated", AppStatusCode.OPERATION_SUCCESSFUL)


@router.put("/{staff_id}/capacity")
def set_capacity(
    staff_id: str,
    data: CapacityUpdate,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    staff = service.set_staff_capacity(staff_id, data.max_capacity)
    return success_response(_out(staff), "Capacity updated", AppStatusCode.OPERATION_SUCCESSFUL)


@router.post("/{staff_id}/recount")
def recount_workload(
    staff_id: str,
    service: RequestLifecycleService = Depends(get_lifecycle_service),
):
    staff = service.recount_workload(staff_id)
    return success_response(_out(staff), "Workload recounted", AppStatusCode.OPERATION_SUCCESSFUL)
