from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy import desc
from sqlalchemy.orm import Session

from ..enum.maintenance_enum import PriorityLevel, RequestStatus
from ..models.notifications import Notification, NotificationType


def notification_type_for(status: RequestStatus) -> NotificationType:
    if status == RequestStatus.SUBMITTED:
        return NotificationType.request_submitted
    if status == RequestStatus.ASSIGNED:
        return NotificationType.request_assigned
    if status == RequestStatus.COMPLETED:
        return NotificationType.work_completed
    return NotificationType.status_update


def add_status_notification(
    db: Session,
    recipient_contact: str,
    request_id: str,
    new_status: RequestStatus,
    priority: Optional[PriorityLevel] = None,
) -> Notification:
    new_status = RequestStatus(new_status)
    notification = Notification(
        recipient_contact=recipient_contact,
        request_id=request_id,
        type=notification_type_for(new_status),
        title=f"Request {new_status.display_name}",
        message=f"Request #{request_id} status updated to: {new_status.display_name}",
        posted_date=datetime.now(timezone.utc),
        priority=priority or PriorityLevel.MEDIUM,
        read=False,
        is_deleted=False,
    )
    db.add(notification)
    return notification


def get_notifications(db: Session, recipient_contact: str, unread_only: bool = False) -> List[Notification]:
    filters = [
        Notification.recipient_contact == recipient_contact,
        Notification.is_deleted == False,
    ]
    if unread_only:
        filters.append(Notification.read == False)

    return (
        db.query(Notification)
        .filter(*filters)
        .order_by(desc(Notification.posted_date))
        .all()
    )


def mark_as_read(db: Session, notification_id: str) -> Optional[Notification]:
    notification = (
        db.query(Notification)
        .filter(Notification.id == notification_id, Notification.is_deleted == False)
        .first()
    )
    if notification:
        notification.read = True
        db.commit()
        db.refresh(notification)
    return notification
