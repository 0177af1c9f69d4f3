"""Status codes and translation of failures into protocol responses."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .browser.base import BrowserEngineError

LOGGER = logging.getLogger(__name__)


class StatusCode(str, enum.Enum):
    """Failure classes reported to RPC callers."""

    FAILED_PRECONDITION = "FailedPrecondition"
    NOT_FOUND = "NotFound"
    INVALID_ARGUMENT = "InvalidArgument"
    UNKNOWN = "Unknown"


HTTP_STATUS = {
    StatusCode.INVALID_ARGUMENT: 400,
    StatusCode.NOT_FOUND: 404,
    StatusCode.FAILED_PRECONDITION: 412,
    StatusCode.UNKNOWN: 500,
}


@dataclass(frozen=True)
class RpcFailure:
    """A handler outcome describing why the call could not be served."""

    code: StatusCode
    message: str

    @classmethod
    def failed_precondition(cls, message: str) -> "RpcFailure":
        return cls(StatusCode.FAILED_PRECONDITION, message)

    @classmethod
    def not_found(cls, message: str) -> "RpcFailure":
        return cls(StatusCode.NOT_FOUND, message)

    @classmethod
    def invalid_argument(cls, message: str) -> "RpcFailure":
        return cls(StatusCode.INVALID_ARGUMENT, message)


def to_http_exception(failure: RpcFailure) -> HTTPException:
    return HTTPException(
        status_code=HTTP_STATUS[failure.code],
        detail={"code": failure.code.value, "message": failure.message},
    )


async def _engine_error_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.error("Browser engine failed during %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=HTTP_STATUS[StatusCode.UNKNOWN],
        content={"detail": {"code": StatusCode.UNKNOWN.value, "message": str(exc)}},
    )


async def _validation_error_handler(request: Request, exc: Exception) -> JSONResponse:
    errors = exc.errors() if isinstance(exc, RequestValidationError) else []
    problems = "; ".join(
        f"{'.'.join(str(part) for part in error.get('loc', ()))}: {error.get('msg', '')}"
        for error in errors
    )
    return JSONResponse(
        status_code=HTTP_STATUS[StatusCode.INVALID_ARGUMENT],
        content={
            "detail": {
                "code": StatusCode.INVALID_ARGUMENT.value,
                "message": f"Malformed request: {problems or exc}",
            }
        },
    )


def install_error_handlers(app: FastAPI) -> None:
    """Report malformed requests and unclassified engine failures as RPC errors."""

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(BrowserEngineError, _engine_error_handler)
