"""Audit logging middleware for FastAPI.

Records every mutating API request (create, update, delete) with:
- User identity (ID, company)
- Action performed (HTTP method mapped to an action name)
- Module accessed
- Response status and duration
- Client IP address and user agent

Recording is independent of the access decision: denied writes are
recorded too, with their 401/403 status.
"""

import logging
import time
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Callable, List, Optional, Protocol

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("hrms.audit")


# Map mutating HTTP methods to action names
METHOD_TO_ACTION = {
    "POST": "create",
    "PUT": "update",
    "PATCH": "update",
    "DELETE": "delete",
}

# Paths that should not be recorded
EXCLUDED_PATHS = {
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
}


@dataclass
class AuditEvent:
    request_id: str
    action: str
    method: str
    path: str
    module: str
    status_code: int
    user_id: Optional[str] = None
    company_id: Optional[str] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    duration_ms: int = 0
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict:
        return asdict(self)


class AuditSink(Protocol):
    def record(self, event: AuditEvent) -> None:
        ...


class LoggingAuditSink:
    """Writes audit events to the ``hrms.audit`` logger."""

    def record(self, event: AuditEvent) -> None:
        audit_logger.info(
            "%s %s module=%s user=%s company=%s status=%s ip=%s duration_ms=%s",
            event.action, event.path, event.module, event.user_id,
            event.company_id, event.status_code, event.ip_address, event.duration_ms,
        )


class MemoryAuditSink:
    """Keeps events in a list. Useful for tests and local debugging."""

    def __init__(self):
        self.events: List[AuditEvent] = []

    def record(self, event: AuditEvent) -> None:
        self.events.append(event)


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        # First entry is the original client
        return forwarded.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


def extract_module(path: str) -> str:
    """'/api/payroll/42' -> 'payroll'."""
    parts = [p for p in path.strip("/").split("/") if p]
    if parts and parts[0] == "api":
        parts = parts[1:]
    return parts[0] if parts else "root"


class AuditMiddleware(BaseHTTPMiddleware):
    """Middleware that hands mutating requests to an audit sink."""

    def __init__(self, app, sink: Optional[AuditSink] = None):
        super().__init__(app)
        self.sink = sink or LoggingAuditSink()

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        method = request.method.upper()
        if method not in METHOD_TO_ACTION or request.url.path in EXCLUDED_PATHS:
            return await call_next(request)

        request_id = str(uuid.uuid4())[:8]
        start_time = time.time()

        response = await call_next(request)

        # Set by the authentication dependency when it succeeded
        principal = getattr(request.state, "principal", None)

        event = AuditEvent(
            request_id=request_id,
            action=METHOD_TO_ACTION[method],
            method=method,
            path=request.url.path,
            module=extract_module(request.url.path),
            status_code=response.status_code,
            user_id=principal.user_id if principal else None,
            company_id=principal.company_id if principal else None,
            ip_address=get_client_ip(request),
            user_agent=request.headers.get("user-agent"),
            duration_ms=int((time.time() - start_time) * 1000),
        )

        try:
            self.sink.record(event)
        except Exception:
            # The sink is a side channel; the response already exists
            logger.exception("Audit sink failed for request %s %s", method, request.url.path)

        return response
