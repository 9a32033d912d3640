from fastapi import HTTPException
from pydantic import BaseModel
from typing import Any, List

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def _plain(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_plain(item) for item in data]
    return data


def success_response(data: Any, message: str = "Success", status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        data=_plain(data),
        status="Success",
        status_code=status_code,
        message=message
    )


def failure_payload(message: str, status_code: str = AppStatusCode.OPERATION_FAILED) -> dict:
    return JsonOutResult(
        data=None,
        status="Failure",
        status_code=status_code,
        message=message
    ).model_dump()


def list_payload(key: str, items: List[Any]) -> dict:
    return {key: _plain(items), "total": len(items)}


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    raise HTTPException(
        status_code=http_status,
        detail=failure_payload(message, status_code),
    )
