"""Translation of domain and request errors into the JSON error envelope."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from piggybank.modules.common.exceptions import ErrorKind, PiggyBankError

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[ErrorKind, tuple[int, str]] = {
    ErrorKind.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    # soft-deleted rows are indistinguishable from missing ones for clients
    ErrorKind.SOFT_DELETED: (status.HTTP_404_NOT_FOUND, "NOT_FOUND"),
    ErrorKind.FORBIDDEN: (status.HTTP_403_FORBIDDEN, "FORBIDDEN"),
    ErrorKind.ALREADY_DELETED: (status.HTTP_409_CONFLICT, "ALREADY_DELETED"),
    ErrorKind.PARENT_SOFT_DELETED: (status.HTTP_409_CONFLICT, "PARENT_SOFT_DELETED"),
    ErrorKind.NAME_CONFLICT: (status.HTTP_409_CONFLICT, "NAME_CONFLICT"),
    ErrorKind.VALIDATION: (status.HTTP_400_BAD_REQUEST, "VALIDATION_ERROR"),
    ErrorKind.SERVICE: (status.HTTP_500_INTERNAL_SERVER_ERROR, "SERVER_ERROR"),
}

_unmapped = set(ErrorKind) - set(ERROR_STATUS)
if _unmapped:
    raise RuntimeError(f"ErrorKind values without an HTTP mapping: {sorted(kind.value for kind in _unmapped)}")

_HTTP_CODES = {
    status.HTTP_400_BAD_REQUEST: "VALIDATION_ERROR",
    status.HTTP_401_UNAUTHORIZED: "UNAUTHORIZED",
    status.HTTP_403_FORBIDDEN: "FORBIDDEN",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
}


def error_response(
    request: Request,
    status_code: int,
    code: str,
    message: str,
    details: Optional[Any] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body: dict[str, Any] = {"code": code, "message": message}
    if details:
        body["details"] = details
    body["correlation_id"] = getattr(request.state, "correlation_id", None)
    return JSONResponse(status_code=status_code, content={"error": jsonable_encoder(body)}, headers=headers)


async def handle_domain_error(request: Request, exc: PiggyBankError) -> JSONResponse:
    status_code, code = ERROR_STATUS[exc.kind]
    if exc.kind is ErrorKind.SERVICE:
        logger.error("Service failure on %s %s: %s", request.method, request.url.path, exc.message)
        return error_response(request, status_code, code, "Internal server error")

    message = exc.message
    if exc.kind is ErrorKind.SOFT_DELETED and exc.entity is not None:
        message = f'{exc.entity.value.capitalize()} with id "{exc.entity_id}" was not found'
    logger.info("%s %s rejected: %s (%s)", request.method, request.url.path, exc.kind.value, exc.message)
    return error_response(request, status_code, code, message, exc.payload())


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {key: value for key, value in error.items() if key in {"type", "loc", "msg"}}
        for error in exc.errors()
    ]
    return error_response(
        request,
        status.HTTP_400_BAD_REQUEST,
        "VALIDATION_ERROR",
        "Request validation failed",
        details,
    )


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    code = _HTTP_CODES.get(exc.status_code, "HTTP_ERROR")
    return error_response(
        request,
        exc.status_code,
        code,
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        request,
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "SERVER_ERROR",
        "Internal server error",
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PiggyBankError, handle_domain_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)


__all__ = [
    "ERROR_STATUS",
    "error_response",
    "register_exception_handlers",
]
