from datetime import datetime, timezone
from sqlalchemy import JSON, TIMESTAMP, Boolean, CheckConstraint, Column, ForeignKey, Integer, String, func
from sqlalchemy.orm import relationship
from shared.core.config import settings
from shared.core.database import Base
from shared.utils.id_generator import generate_staff_id
from ..enum.maintenance_enum import RequestStatus
from .maintenance_request import MaintenanceRequest  # noqa: F401


class MaintenanceStaff(Base):
    __tablename__ = "maintenance_staff"

    # insertion sequence, breaks workload ties when listing candidates
    id = Column(Integer, primary_key=True, autoincrement=True)
    staff_id = Column(String(20), unique=True, nullable=False,
                      default=generate_staff_id)
    user_id = Column(String(20), ForeignKey("users.id"), nullable=True)
    full_name = Column(String(200), nullable=True)
    specializations = Column(JSON, nullable=True)

    current_workload = Column(Integer, nullable=False, default=0)
    max_capacity = Column(Integer, nullable=False,
                          default=settings.DEFAULT_STAFF_CAPACITY)
    is_available = Column(Boolean, nullable=False, default=True)

    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), nullable=True)

    requests = relationship("MaintenanceRequest", viewonly=True)

    __table_args__ = (
        CheckConstraint("current_workload >= 0", name="ck_staff_workload_non_negative"),
        CheckConstraint("max_capacity > 0", name="ck_staff_capacity_positive"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("staff_id", generate_staff_id())
        kwargs.setdefault("current_workload", 0)
        kwargs.setdefault("max_capacity", settings.DEFAULT_STAFF_CAPACITY)
        kwargs.setdefault("is_available", True)
        kwargs.setdefault("specializations", [])
        super().__init__(**kwargs)

    @property
    def has_capacity(self) -> bool:
        return self.current_workload < self.max_capacity

    @property
    def assigned_request_ids(self):
        return {r.id for r in self.requests if RequestStatus(r.status).is_active}

    def touch(self):
        self.updated_at = datetime.now(timezone.utc)
