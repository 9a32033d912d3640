from fastapi import BackgroundTasks, Depends, Request
from sqlalchemy.orm import Session

from shared.core.config import settings
from shared.core.database import get_db
from ..helpers.notification_helper import (
    NotificationHelper,
    Notifier,
    background_notifier,
    disabled_notifier,
)
from ..lifecycle.staff_assignment_pool import EntityLocks
from ..services.request_lifecycle_service import RequestLifecycleService


def get_notifier(background_tasks: BackgroundTasks) -> Notifier:
    if not settings.NOTIFICATIONS_ENABLED:
        return disabled_notifier
    return background_notifier(background_tasks, NotificationHelper())


def get_entity_locks(request: Request) -> EntityLocks:
    # one registry per process, shared by every request handler
    return request.app.state.entity_locks


def get_lifecycle_service(
    db: Session = Depends(get_db),
    notifier: Notifier = Depends(get_notifier),
    locks: EntityLocks = Depends(get_entity_locks),
) -> RequestLifecycleService:
    return RequestLifecycleService(db, notifier=notifier, locks=locks)
