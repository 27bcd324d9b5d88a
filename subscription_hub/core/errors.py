"""Error taxonomy and normalized HTTP handlers for the registry."""

import logging
from typing import Optional, Union
from uuid import uuid4

from fastapi import HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.requests import Request

from subscription_hub.core.logging import LOGGER_NAME, get_request_id


class AppError(Exception):
    code = "app_error"
    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None, status_code: Optional[int] = None, request_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        if status_code:
            self.status_code = status_code
        self.request_id = request_id


class ValidationError(AppError, ValueError):
    code = "validation_error"
    status_code = 400


class NotFoundError(AppError, LookupError):
    """A referenced record is absent."""
    code = "not_found"
    status_code = 404

    def __init__(self, kind: str, record_id: Union[int, str], **kwargs):
        super().__init__(f"{kind} {record_id} not found", **kwargs)
        self.kind = kind
        self.record_id = record_id


class UnauthorizedError(AppError):
    """Caller is not the required owner or subscriber."""
    code = "unauthorized"
    status_code = 403

    def __init__(self, message: str = "Unauthorized", **kwargs):
        super().__init__(message, **kwargs)


class NotCancelableError(AppError):
    code = "not_cancelable"
    status_code = 409

    def __init__(self, message: str = "Subscription cannot be canceled", **kwargs):
        super().__init__(message, **kwargs)


class AlreadyCanceledError(AppError):
    code = "already_canceled"
    status_code = 409

    def __init__(self, message: str = "Subscription is already canceled", **kwargs):
        super().__init__(message, **kwargs)


class AlreadyExpiredError(AppError):
    code = "already_expired"
    status_code = 409

    def __init__(self, message: str = "Subscription is already expired", **kwargs):
        super().__init__(message, **kwargs)


class AlreadySubscribedError(AppError):
    code = "already_subscribed"
    status_code = 409

    def __init__(self, message: str = "Already subscribed to this plan", **kwargs):
        super().__init__(message, **kwargs)


class StorageError(AppError):
    """Underlying store I/O failed. Always fatal to the request."""
    code = "storage_failure"
    status_code = 500


def _extract_request_id(request: Request, fallback: Optional[str] = None) -> str:
    return (
        getattr(request.state, "request_id", None)
        or get_request_id()
        or fallback
        or str(uuid4())
    )


def _error_payload(code: str, message: str, request_id: str) -> dict:
    return {
        "error": {"code": code, "message": message, "request_id": request_id},
        "detail": message,
    }


async def app_error_handler(request: Request, exc: AppError):
    rid = exc.request_id or _extract_request_id(request)
    payload = _error_payload(exc.code, exc.message, rid)
    logger = logging.getLogger(LOGGER_NAME)
    log_level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
    logger.log(
        log_level,
        "app.error",
        extra={"request_id": rid, "error_code": exc.code, "error_message": exc.message, "status": exc.status_code},
    )
    response = JSONResponse(status_code=exc.status_code, content=payload)
    response.headers["x-request-id"] = rid
    return response


async def http_error_handler(request: Request, exc: HTTPException):
    rid = _extract_request_id(request)
    if exc.status_code == 404:
        code = "not_found"
    elif exc.status_code == 401:
        code = "unauthorized"
    else:
        code = "http_error"
    message = exc.detail if exc.detail else "HTTP error"
    payload = _error_payload(code, message, rid)
    logger = logging.getLogger(LOGGER_NAME)
    logger.warning("http.error", extra={"request_id": rid, "error_code": code, "status": exc.status_code})
    response = JSONResponse(status_code=exc.status_code, content=payload)
    response.headers["x-request-id"] = rid
    return response


async def request_validation_handler(request: Request, exc: RequestValidationError):
    rid = _extract_request_id(request)
    errors = exc.errors()
    first = errors[0] if errors else {}
    location = ".".join(str(part) for part in first.get("loc", ()))
    message = f"{location}: {first.get('msg', 'invalid request')}" if location else "Invalid request"
    logger = logging.getLogger(LOGGER_NAME)
    logger.warning("request.invalid", extra={"request_id": rid, "error_code": "validation_error", "status": 400})
    response = JSONResponse(status_code=400, content=_error_payload("validation_error", message, rid))
    response.headers["x-request-id"] = rid
    return response


async def unhandled_exception_handler(request: Request, exc: Exception):
    rid = _extract_request_id(request)
    logger = logging.getLogger(LOGGER_NAME)
    logger.error("unhandled.exception", exc_info=True, extra={"request_id": rid, "error_code": "internal_error"})
    payload = _error_payload("internal_error", "Unexpected error", rid)
    response = JSONResponse(status_code=500, content=payload)
    response.headers["x-request-id"] = rid
    return response
