from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel, Field

from ..enum.maintenance_enum import ArchiveViewer, CategoryType, PriorityLevel, RequestStatus


# ----------------- Create -----------------
class MaintenanceRequestCreate(BaseModel):
    tenant_id: str
    description: str = Field(..., min_length=1)
    category: CategoryType
    apartment_number: Optional[str] = None
    detailed_description: Optional[str] = None
    estimated_cost: Optional[Decimal] = None


# ----------------- Out -----------------
class MaintenanceRequestOut(BaseModel):
    id: str
    tenant_id: str
    apartment_number: Optional[str] = None
    description: str
    detailed_description: Optional[str] = None
    category: CategoryType
    priority: PriorityLevel
    status: RequestStatus
    submission_date: Optional[datetime] = None
    last_updated: Optional[datetime] = None
    scheduled_date: Optional[datetime] = None
    completion_date: Optional[datetime] = None
    estimated_cost: Optional[Decimal] = None
    actual_cost: Optional[Decimal] = None
    assigned_staff_id: Optional[str] = None
    staff_update_notes: Optional[str] = None
    resolution_notes: Optional[str] = None
    tenant_archived: bool = False
    staff_archived: bool = False

    model_config = {"from_attributes": True}


# ----------------- Actions -----------------
class ActionBy(BaseModel):
    action_by: Optional[str] = None


class AssignStaffRequest(ActionBy):
    staff_id: str


class StatusChangeRequest(ActionBy):
    status: RequestStatus
    resolution_notes: Optional[str] = None


class CompleteRequest(ActionBy):
    resolution_notes: Optional[str] = None
    actual_cost: Optional[Decimal] = None


class PriorityUpdate(ActionBy):
    priority: PriorityLevel


class DetailsUpdate(BaseModel):
    description: Optional[str] = Field(None, min_length=1)
    category: Optional[CategoryType] = None
    detailed_description: Optional[str] = None


class StaffUpdateNotes(ActionBy):
    notes: str = Field(..., min_length=1)


class ScheduleUpdate(BaseModel):
    scheduled_date: datetime


class CostsUpdate(BaseModel):
    estimated_cost: Optional[Decimal] = None
    actual_cost: Optional[Decimal] = None


class ArchiveRequest(BaseModel):
    viewer: ArchiveViewer


# ----------------- Workflow -----------------
class WorkflowLogOut(BaseModel):
    id: str
    request_id: str
    action_by: Optional[str] = None
    old_status: Optional[str] = None
    new_status: Optional[str] = None
    action_taken: str
    action_time: Optional[datetime] = None

    model_config = {"from_attributes": True}
