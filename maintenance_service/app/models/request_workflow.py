import uuid
from datetime import datetime, timezone
from sqlalchemy import TIMESTAMP, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RequestWorkflow(Base):
    __tablename__ = "request_workflows"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    request_id = Column(String(20), ForeignKey(
        "maintenance_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    action_by = Column(String(20), nullable=True)
    old_status = Column(String(20), nullable=True)
    new_status = Column(String(20), nullable=True)
    action_taken = Column(Text)
    action_time = Column(TIMESTAMP(timezone=True), default=lambda: datetime.now(timezone.utc))

    request = relationship("MaintenanceRequest", back_populates="workflows")
