from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class StaffCreate(BaseModel):
    full_name: Optional[str] = None
    user_id: Optional[str] = None
    max_capacity: Optional[int] = Field(None, ge=1)
    specializations: List[str] = []


class StaffOut(BaseModel):
    staff_id: str
    user_id: Optional[str] = None
    full_name: Optional[str] = None
    specializations: List[str] = []
    current_workload: int
    max_capacity: int
    is_available: bool
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class AvailabilityUpdate(BaseModel):
    is_available: bool


class CapacityUpdate(BaseModel):
    max_capacity: int
