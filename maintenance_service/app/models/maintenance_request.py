from datetime import datetime, timezone
from sqlalchemy import TIMESTAMP, Boolean, Column, Enum, ForeignKey, Index, Numeric, String, Text
from sqlalchemy.orm import relationship
from shared.core.database import Base
from shared.utils.id_generator import generate_request_id
from shared.models.users import Users  # noqa: F401
from ..enum.maintenance_enum import CategoryType, PriorityLevel, RequestStatus
from .request_assignment import RequestAssignment  # noqa: F401
from .request_workflow import RequestWorkflow  # noqa: F401


def _enum_column(enum_cls, name):
    return Enum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda x: [e.value for e in x],
    )


class MaintenanceRequest(Base):
    __tablename__ = "maintenance_requests"

    id = Column(String(20), primary_key=True, default=generate_request_id)
    tenant_id = Column(String(20), ForeignKey("users.id"), nullable=False)
    apartment_number = Column(String(20), nullable=True)

    description = Column(Text, nullable=False)
    detailed_description = Column(Text, nullable=True)
    category = Column(_enum_column(CategoryType, "category_type_enum"), nullable=False)
    priority = Column(_enum_column(PriorityLevel, "priority_level_enum"), nullable=False)
    status = Column(
        _enum_column(RequestStatus, "request_status_enum"),
        default=RequestStatus.SUBMITTED,
        nullable=False,
    )

    submission_date = Column(TIMESTAMP(timezone=True), nullable=False)
    last_updated = Column(TIMESTAMP(timezone=True), nullable=False)
    scheduled_date = Column(TIMESTAMP(timezone=True), nullable=True)
    completion_date = Column(TIMESTAMP(timezone=True), nullable=True)

    estimated_cost = Column(Numeric(12, 2), nullable=True)
    actual_cost = Column(Numeric(12, 2), nullable=True)

    assigned_staff_id = Column(
        String(20), ForeignKey("maintenance_staff.staff_id"), nullable=True)
    staff_update_notes = Column(Text, nullable=True)
    resolution_notes = Column(Text, nullable=True)

    tenant_archived = Column(Boolean, default=False, nullable=False)
    staff_archived = Column(Boolean, default=False, nullable=False)

    workflows = relationship(
        "RequestWorkflow",
        back_populates="request",
        order_by="RequestWorkflow.action_time",
    )
    assignments = relationship(
        "RequestAssignment",
        back_populates="request",
        order_by="RequestAssignment.assigned_at",
    )

    __table_args__ = (
        Index("ix_request_tenant_submitted", "tenant_id", "submission_date"),
        Index("ix_request_staff_status", "assigned_staff_id", "status"),
        Index("ix_request_status", "status"),
    )

    def __init__(self, **kwargs):
        # Column defaults only fire on flush; the lifecycle works on
        # unsaved instances too.
        now = datetime.now(timezone.utc)
        kwargs.setdefault("id", generate_request_id())
        kwargs.setdefault("status", RequestStatus.SUBMITTED)
        kwargs.setdefault("submission_date", now)
        kwargs.setdefault("last_updated", now)
        kwargs.setdefault("tenant_archived", False)
        kwargs.setdefault("staff_archived", False)
        super().__init__(**kwargs)

    # -------------------------------
    # Computed flags
    # -------------------------------

    @property
    def is_terminal(self) -> bool:
        return RequestStatus(self.status).is_terminal

    @property
    def can_reopen(self) -> bool:
        """Completed or cancelled requests can be reopened; closed ones are final."""
        return self.status in (RequestStatus.COMPLETED, RequestStatus.CANCELLED)
