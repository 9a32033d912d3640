from datetime import datetime, timezone
from enum import Enum as PyEnum
from sqlalchemy import Boolean, Column, DateTime, Enum, String
from shared.core.database import Base
from shared.utils.id_generator import generate_notification_id
from ..enum.maintenance_enum import PriorityLevel


class NotificationType(PyEnum):
    request_submitted = "request_submitted"
    request_assigned = "request_assigned"
    status_update = "status_update"
    work_completed = "work_completed"


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(20), primary_key=True, default=generate_notification_id)
    recipient_contact = Column(String(200), nullable=False, index=True)
    request_id = Column(String(20), nullable=False, index=True)

    type = Column(Enum(NotificationType, native_enum=False), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(String(500), nullable=False)
    posted_date = Column(DateTime(timezone=True),
                         default=lambda: datetime.now(timezone.utc))
    read = Column(Boolean, default=False, nullable=False)
    priority = Column(Enum(PriorityLevel, native_enum=False,
                           values_callable=lambda x: [e.value for e in x]),
                      default=PriorityLevel.MEDIUM)
    is_deleted = Column(Boolean, default=False, nullable=False)
