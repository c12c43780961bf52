"""
SmartHome API: Access Log Middleware
====================================

What:  One access log line per HTTP request, naming the pipeline that served it.
How:   Resource routes tag request.state with the resource name and pipeline
       (see routes.resources.run_pipeline). After the response is produced the
       middleware reads those tags back, so a line reads e.g.

           POST /users 409 3.2ms [a1b2c3d4] user.create

       Requests that never reached a pipeline (unknown paths, /docs) are
       tagged "-". The level follows the status class (5xx ERROR, 4xx WARNING,
       otherwise INFO). /health is not logged.

Request bodies are never logged: user payloads carry passwords.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from smarthome.middleware.request_id import request_id_var

logger = logging.getLogger("smarthome.access")

UNTAGGED = "-"


def operation_of(request: Request) -> str:
    """'<resource>.<pipeline>' as tagged by the route, or '-'."""
    resource = getattr(request.state, "resource", None)
    pipeline = getattr(request.state, "pipeline", None)
    if resource is None or pipeline is None:
        return UNTAGGED
    return f"{resource}.{pipeline}"


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - start_time) * 1000

        operation = operation_of(request)
        logger.log(
            level_for(response.status_code),
            "%s %s %d %.1fms [%s] %s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            request_id_var.get(""),
            operation,
            extra={"operation": operation, "status": response.status_code},
        )
        return response
