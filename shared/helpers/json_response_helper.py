from fastapi import HTTPException
from typing import Any

from shared.utils.app_status_code import AppStatusCode
from shared.core.schemas import JsonOutResult


def success_response(data: Any, message: str = "Success", status_code: str = AppStatusCode.DATA_RETRIEVED_SUCCESSFULLY):
    return JsonOutResult(
        data=data,
        status="Success",
        status_code=status_code,
        message=message
    )


def error_response(message: str, status_code: str = AppStatusCode.OPERATION_FAILED, http_status: int = 400):
    raise HTTPException(
        status_code=http_status,
        detail=JsonOutResult(
            data=None,
            status="Failure",
            status_code=status_code,
            message=message
        ).model_dump()
    )


def not_found_response(entity: str, entity_id: Any):
    return error_response(
        message=f"{entity} {entity_id} not found",
        status_code=AppStatusCode.NOT_FOUND,
        http_status=404
    )


def invalid_input_response(message: str):
    return error_response(
        message=message,
        status_code=AppStatusCode.INVALID_INPUT,
        http_status=400
    )


def lease_terminated_response(lease_id: Any, action: str):
    return error_response(
        message=f"Cannot {action} for terminated lease {lease_id}",
        status_code=AppStatusCode.LEASE_TERMINATED,
        http_status=409
    )
