"""Envelope constructors shared by all handlers."""

from __future__ import annotations

from typing import Any

import structlog

from userhub.api.schemas.result import OperationStatus, ResultStatus, ResultVO
from userhub.core.errors import OK_CODE, ErrorType

SUCCESS_MESSAGE = "success"
DELETED_MESSAGE = "%s deleted"


def success_resp(data: Any = None, message: str = SUCCESS_MESSAGE) -> ResultVO:
    """Wrap *data* in an OK envelope."""
    return ResultVO(
        status=ResultStatus.OK,
        operation_status=OperationStatus.SUCCESS,
        code=OK_CODE,
        message=message,
        data=data,
    )


def deleted_resp(resource: str) -> ResultVO:
    """OK envelope carrying only the ``"<resource> deleted"`` message."""
    return success_resp(message=DELETED_MESSAGE % resource)


def info_resp(
    error_type: ErrorType,
    message: str | None = None,
    *,
    log: structlog.stdlib.BoundLogger | None = None,
) -> ResultVO:
    """Expected failure: code and message go back to the caller verbatim."""
    message = message or error_type.format()
    if log is not None:
        emit = log.info if error_type.is_informational else log.error
        emit("request rejected", code=error_type.code, reason=message)
    return ResultVO(
        status=ResultStatus.ERROR,
        operation_status=OperationStatus.FAILURE,
        code=error_type.code,
        message=message,
    )


def error_resp(
    exc: BaseException,
    error_type: ErrorType = ErrorType.UNKNOWN,
    message: str | None = None,
    *,
    log: structlog.stdlib.BoundLogger | None = None,
) -> ResultVO:
    """Unexpected failure: logged with traceback, surfaced with a generic code."""
    message = message or str(exc) or error_type.format()
    if log is not None:
        log.error("request failed", code=error_type.code, exc_info=exc)
    return ResultVO(
        status=ResultStatus.ERROR,
        operation_status=OperationStatus.FAILURE,
        code=error_type.code,
        message=message,
    )
