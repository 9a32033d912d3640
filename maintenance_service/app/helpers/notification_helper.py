import logging
from typing import Callable

from fastapi import BackgroundTasks
from sqlalchemy.orm import sessionmaker

from shared.core.database import SessionLocal
from ..crud import notification_crud
from ..enum.maintenance_enum import RequestStatus
from ..models.maintenance_request import MaintenanceRequest

logger = logging.getLogger(__name__)

# (recipient_contact, request_id, new_status)
Notifier = Callable[[str, str, RequestStatus], None]


class NotificationHelper:
    """Stores status notifications in the notification table.

    Uses its own session so it can run after the request's session is gone.
    """

    def __init__(self, session_factory: sessionmaker = None):
        self.session_factory = session_factory or SessionLocal

    def send_status_update(self, recipient_contact: str, request_id: str, new_status: RequestStatus) -> bool:
        db = self.session_factory()
        try:
            priority = (
                db.query(MaintenanceRequest.priority)
                .filter(MaintenanceRequest.id == request_id)
                .scalar()
            )
            notification_crud.add_status_notification(
                db, recipient_contact, request_id, new_status, priority)
            db.commit()
            logger.info("Notified %s: request %s is %s",
                        recipient_contact, request_id, RequestStatus(new_status).value)
            return True
        except Exception:
            db.rollback()
            logger.exception(
                "Notification for request %s to %s failed", request_id, recipient_contact)
            return False
        finally:
            db.close()


def background_notifier(background_tasks: BackgroundTasks, helper: NotificationHelper) -> Notifier:
    """Notifier that delivers after the HTTP response has been sent."""

    def notify(recipient_contact: str, request_id: str, new_status: RequestStatus) -> None:
        background_tasks.add_task(
            helper.send_status_update, recipient_contact, request_id, new_status)

    return notify


def disabled_notifier(recipient_contact: str, request_id: str, new_status: RequestStatus) -> None:
    logger.debug("Notifications disabled, skipping %s for request %s",
                 recipient_contact, request_id)
