from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from shared.core.database import get_db
from shared.core.schemas import UserAccountCreate
from shared.helpers.json_response_helper import error_response, success_response
from shared.utils.app_status_code import AppStatusCode
from ..crud import user_crud as crud

router = APIRouter(prefix="/api/users", tags=["users"])


@router.post("/")
def create_user(
    data: UserAccountCreate,
    db: Session = Depends(get_db),
):
    user = crud.create_user(db, data)
    db.commit()
    db.refresh(user)
    return success_response(
        user.to_account(), "User created", AppStatusCode.CREATED_SUCCESSFULLY)


@router.get("/{user_id}")
def get_user(
    user_id: str,
    db: Session = Depends(get_db),
):
    user = crud.get_user(db, user_id)
    if not user:
        return error_response("User not found", AppStatusCode.USER_NOT_FOUND, 404)
    return success_response(user.to_account())
