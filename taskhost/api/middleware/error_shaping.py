from __future__ import annotations

import logging
import traceback
import uuid
from typing import Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, Response

from taskhost.core.errors import (
    InvalidBuilderError,
    InvalidBuilderSpecifiedError,
    InvalidWorkspaceError,
    TaskHostError,
    UnknownBuilderError,
    UnknownConfigurationError,
    UnknownTargetError,
)

log = logging.getLogger("taskhost.errors")

_STATUS = (
    (UnknownBuilderError, 404),
    (UnknownTargetError, 404),
    (UnknownConfigurationError, 404),
    (InvalidBuilderSpecifiedError, 422),
    (InvalidBuilderError, 422),
    (InvalidWorkspaceError, 500),
)


def status_for(exc: TaskHostError) -> int:
    for cls, status in _STATUS:
        if isinstance(exc, cls):
            return status
    return 500


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = rid
        resp = await call_next(request)
        resp.headers["X-Request-Id"] = rid
        return resp


def _request_id(request: Request):
    return getattr(request.state, "request_id", None) or request.headers.get("x-request-id")


def host_error_response(request: Request, exc: TaskHostError) -> JSONResponse:
    status = status_for(exc)
    rid = _request_id(request)
    if status >= 500:
        log.error("host error: %s rid=%s path=%s", exc, rid, request.url.path)
    payload = {"detail": str(exc), "error": type(exc).__name__}
    if rid:
        payload["request_id"] = rid
    return JSONResponse(status_code=status, content=payload)


class SafeErrorMiddleware(BaseHTTPMiddleware):
    """
    Outermost error shaping.

    Host errors that escape the route handlers keep their mapped status and
    message. Anything else becomes a bare 500 with the request id; the
    traceback is only logged.
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        try:
            return await call_next(request)
        except TaskHostError as e:
            resp = host_error_response(request, e)
        except Exception as e:
            rid = _request_id(request)
            log.error(
                "unhandled error: %s rid=%s path=%s\n%s",
                e,
                rid,
                request.url.path,
                traceback.format_exc(),
            )
            payload = {"detail": "Internal Server Error", "error": "InternalError"}
            if rid:
                payload["request_id"] = rid
            resp = JSONResponse(status_code=500, content=payload)

        rid = _request_id(request)
        if rid:
            resp.headers["X-Request-Id"] = rid
        return resp


def install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(TaskHostError)
    async def _host_error(request: Request, exc: TaskHostError) -> JSONResponse:
        return host_error_response(request, exc)
