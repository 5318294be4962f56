"""
Request logging for the TalentLedger API.

One line per request with method, path, status, duration and the username
behind the session cookie, if any. Session tokens and headers are never
written to the log.
"""

import json
import logging
import time
import uuid
from contextvars import ContextVar
from typing import Callable, Optional

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

logger = logging.getLogger("talentledger.api")

REQUEST_ID_HEADER = "X-Request-ID"
QUIET_PATHS = frozenset({"/health", "/favicon.ico"})
SLOW_REQUEST_SECONDS = 2.0

_RECORD_FIELDS = ("method", "path", "status_code", "duration_ms", "username")


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record, tagged with the current request id."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = request_id_var.get()
        if request_id:
            payload["request_id"] = request_id

        for name in _RECORD_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False)


def get_request_id() -> str:
    return request_id_var.get()


def session_username(request: Request) -> Optional[str]:
    """Username the request's session cookie resolves to, without touching the DB."""
    services = getattr(request.app.state, "services", None)
    if services is None:
        return None
    token = request.cookies.get(services.settings.session_cookie_name)
    return services.session_registry.resolve(token)


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    def __init__(
        self,
        app: FastAPI,
        quiet_paths: frozenset = QUIET_PATHS,
        slow_threshold: float = SLOW_REQUEST_SECONDS,
    ):
        super().__init__(app)
        self.quiet_paths = quiet_paths
        self.slow_threshold = slow_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(request_id)

        if request.url.path in self.quiet_paths:
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

        # Resolved up front: logout and renames revoke the token mid-request
        username = session_username(request)

        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started
        duration_ms = round(elapsed * 1000, 2)

        response.headers[REQUEST_ID_HEADER] = request_id

        slow = elapsed > self.slow_threshold
        if response.status_code >= 500:
            level = logging.ERROR
        elif response.status_code >= 400 or slow:
            level = logging.WARNING
        else:
            level = logging.INFO

        message = (
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({duration_ms}ms) user={username or '-'}"
        )
        if slow:
            message = f"[SLOW] {message}"

        logger.log(
            level,
            message,
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "username": username,
            },
        )
        return response


def setup_logging(app: FastAPI, structured: bool = True) -> None:
    """
    Install request logging.

    Args:
        app: FastAPI application instance.
        structured: Emit JSON lines from the ``talentledger`` logger tree.
    """
    if structured:
        app_logger = logging.getLogger("talentledger")
        if not any(isinstance(h.formatter, JsonLineFormatter) for h in app_logger.handlers):
            handler = logging.StreamHandler()
            handler.setFormatter(JsonLineFormatter())
            app_logger.addHandler(handler)
        app_logger.setLevel(logging.INFO)

    app.add_middleware(RequestLoggingMiddleware)
