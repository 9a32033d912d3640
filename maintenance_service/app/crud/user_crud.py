from typing import Optional
from sqlalchemy.orm import Session

from shared.core.schemas import UserAccountCreate
from shared.models.users import Users
from shared.utils.enums import UserStatus
from ..models.maintenance_staff import MaintenanceStaff


def create_user(db: Session, data: UserAccountCreate) -> Users:
    profile = data.profile.model_dump(exclude={"account_type"})
    user = Users(
        full_name=data.full_name,
        email=data.email,
        phone=data.phone,
        account_type=data.profile.account_type,
        role_profile=profile,
        status=UserStatus.ACTIVE.value,
    )
    db.add(user)
    db.flush()
    return user


def get_user(db: Session, user_id: str) -> Optional[Users]:
    if not user_id:
        return None
    return (
        db.query(Users)
        .filter(Users.id == user_id, Users.is_deleted == False)
        .first()
    )


def get_contact(db: Session, user_id: str) -> Optional[str]:
    user = get_user(db, user_id)
    return user.contact if user else None


def get_staff_contact(db: Session, staff_id: str) -> Optional[str]:
    if not staff_id:
        return None
    user_id = (
        db.query(MaintenanceStaff.user_id)
        .filter(MaintenanceStaff.staff_id == staff_id)
        .scalar()
    )
    return get_contact(db, user_id)
