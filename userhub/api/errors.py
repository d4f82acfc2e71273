"""App-level error handling — failures raised outside a handler body → envelope.

Handler bodies catch their own errors; these cover dependencies (bad
Bearer token) and FastAPI's own request validation.
Every envelope is returned with HTTP 200.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from userhub.api.result import error_resp, info_resp
from userhub.api.schemas.result import ResultVO
from userhub.core.errors import PARAM_ERROR
from userhub.services import ServiceError

log = structlog.get_logger()


def _envelope(result: ResultVO) -> JSONResponse:
    return JSONResponse(status_code=200, content=result.model_dump(mode="json", by_alias=True))


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    return _envelope(info_resp(exc.error_type, exc.message, log=log))


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return _envelope(info_resp(PARAM_ERROR, PARAM_ERROR.format("; ".join(messages)), log=log))


async def _unknown_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    return _envelope(error_resp(exc, log=log))


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unknown_error_handler)
