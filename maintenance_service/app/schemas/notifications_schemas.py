from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from ..enum.maintenance_enum import PriorityLevel
from ..models.notifications import NotificationType


class NotificationOut(BaseModel):
    id: str
    recipient_contact: str
    request_id: Optional[str] = None
    type: NotificationType
    title: str
    message: str
    priority: PriorityLevel
    read: bool = False
    posted_date: datetime

    model_config = {"from_attributes": True}
