import uuid
from datetime import datetime, timezone
from sqlalchemy import TIMESTAMP, Column, ForeignKey, String, Text
from sqlalchemy.orm import relationship
from shared.core.database import Base


class RequestAssignment(Base):
    __tablename__ = "request_assignments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    request_id = Column(String(20), ForeignKey(
        "maintenance_requests.id", ondelete="CASCADE"), nullable=False, index=True)
    assigned_from = Column(String(20), nullable=True)
    assigned_to = Column(String(20), nullable=True)
    assigned_by = Column(String(20), nullable=True)
    assigned_at = Column(TIMESTAMP(timezone=True), default=lambda: datetime.now(timezone.utc))
    reason = Column(Text)

    request = relationship("MaintenanceRequest", back_populates="assignments")
