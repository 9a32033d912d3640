from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.helpers.json_response_helper import error_response, list_payload, success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import notification_crud as crud
from ..schemas.notifications_schemas import NotificationOut

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("/")
def get_notifications(
    contact: str = Query(...),
    unread_only: bool = Query(False),
    db: Session = Depends(get_db),
):
    notifications = crud.get_notifications(db, contact, unread_only)
    return success_response(list_payload(
        "notifications", [NotificationOut.model_validate(n) for n in notifications]))


@router.put("/{notification_id}/read")
def mark_notification_as_read(
    notification_id: str,
    db: Session = Depends(get_db),
):
    notification = crud.mark_as_read(db, notification_id)
    if not notification:
        return error_response("Notification not found", AppStatusCode.NOTIFICATION_NOT_FOUND, 404)
    return success_response(
        NotificationOut.model_validate(notification),
        "Notification marked as read",
        AppStatusCode.OPERATION_SUCCESSFUL,
    )
