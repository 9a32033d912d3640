from enum import Enum


class CategoryType(str, Enum):
    PLUMBING = "plumbing"
    ELECTRICAL = "electrical"
    HVAC = "hvac"
    APPLIANCE = "appliance"
    STRUCTURAL = "structural"
    PEST_CONTROL = "pest_control"
    SAFETY_SECURITY = "safety_security"
    CLEANING = "cleaning"
    GENERAL_MAINTENANCE = "general_maintenance"
    EMERGENCY = "emergency"

    @property
    def display_name(self) -> str:
        if self is CategoryType.HVAC:
            return "HVAC"
        if self is CategoryType.SAFETY_SECURITY:
            return "Safety & Security"
        return self.value.replace("_", " ").title()


class PriorityLevel(str, Enum):
    """Ascending severity, LOW is 1 and EMERGENCY is 5."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"
    EMERGENCY = "emergency"

    @property
    def level(self) -> int:
        return list(PriorityLevel).index(self) + 1


class RequestStatus(str, Enum):
    SUBMITTED = "submitted"
    ACKNOWLEDGED = "acknowledged"
    ASSIGNED = "assigned"
    IN_PROGRESS = "in_progress"
    ON_HOLD = "on_hold"
    REOPENED = "reopened"
    COMPLETED = "completed"
    CLOSED = "closed"
    CANCELLED = "cancelled"

    @property
    def display_name(self) -> str:
        return self.value.replace("_", " ").title()

    @property
    def is_terminal(self) -> bool:
        return self in (RequestStatus.COMPLETED, RequestStatus.CLOSED, RequestStatus.CANCELLED)

    @property
    def is_active(self) -> bool:
        """Still open; an assigned active request holds a staff slot."""
        return not self.is_terminal


class ArchiveViewer(str, Enum):
    TENANT = "tenant"
    STAFF = "staff"
