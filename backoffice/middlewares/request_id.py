from __future__ import annotations

import logging
import time
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)
principal_ctx_var: ContextVar[str | None] = ContextVar("principal_id", default=None)
tenant_ctx_var: ContextVar[int | None] = ContextVar("restaurant_id", default=None)
logger = logging.getLogger("backoffice.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Give every request a correlation id and log one line when it finishes."""

    def __init__(self, app, header_name: str = "X-Request-ID") -> None:  # type: ignore[override]
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get(self.header_name) or str(uuid4())
        token = request_id_ctx_var.set(request_id)
        principal_token = principal_ctx_var.set(None)
        tenant_token = tenant_ctx_var.set(None)
        request.state.request_id = request_id
        start = time.perf_counter()
        try:
            response = await call_next(request)
        finally:
            request_id_ctx_var.reset(token)
            principal_ctx_var.reset(principal_token)
            tenant_ctx_var.reset(tenant_token)
        duration_ms = (time.perf_counter() - start) * 1000
        response.headers[self.header_name] = request_id
        response.headers.setdefault("X-Response-Time", f"{duration_ms:.2f}ms")
        extra = {
            "extra_data": {
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            }
        }
        principal = getattr(request.state, "principal", None)
        if principal:
            extra["extra_data"]["principal"] = principal
        restaurant_id = getattr(request.state, "restaurant_id", None)
        if restaurant_id is not None:
            extra["extra_data"]["restaurant_id"] = restaurant_id
        logger.info("request.completed", extra=extra)
        return response
