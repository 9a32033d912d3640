from typing import List, Optional
from sqlalchemy.orm import Session

from ..lifecycle.errors import StaffNotFound
from ..models.maintenance_staff import MaintenanceStaff
from ..models.request_assignment import RequestAssignment


class StaffDirectory:
    """Staff lookups for the assignment pool, backed by a session."""

    def __init__(self, db: Session, for_update: bool = False):
        self.db = db
        self.for_update = for_update

    def find_staff(self, staff_id: str) -> Optional[MaintenanceStaff]:
        query = self.db.query(MaintenanceStaff).filter(
            MaintenanceStaff.staff_id == staff_id)
        if self.for_update:
            query = query.with_for_update().populate_existing()
        return query.first()

    def get_staff(self, staff_id: str) -> MaintenanceStaff:
        staff = self.find_staff(staff_id)
        if not staff:
            raise StaffNotFound(staff_id)
        return staff

    def list_staff(self) -> List[MaintenanceStaff]:
        return (
            self.db.query(MaintenanceStaff)
            .order_by(MaintenanceStaff.id)
            .all()
        )


def create_staff(
    db: Session,
    full_name: Optional[str] = None,
    user_id: Optional[str] = None,
    max_capacity: Optional[int] = None,
    specializations: Optional[List[str]] = None,
    is_available: bool = True,
) -> MaintenanceStaff:
    fields = {
        "full_name": full_name,
        "user_id": user_id,
        "specializations": list(specializations or []),
        "is_available": is_available,
    }
    if max_capacity is not None:
        fields["max_capacity"] = max_capacity

    staff = MaintenanceStaff(**fields)
    db.add(staff)
    db.flush()
    return staff


def add_assignment_log(
    db: Session,
    request_id: str,
    assigned_from: Optional[str],
    assigned_to: Optional[str],
    reason: str,
    assigned_by: Optional[str] = None,
) -> RequestAssignment:
    log = RequestAssignment(
        request_id=request_id,
        assigned_from=assigned_from,
        assigned_to=assigned_to,
        assigned_by=assigned_by,
        reason=reason,
    )
    db.add(log)
    return log
