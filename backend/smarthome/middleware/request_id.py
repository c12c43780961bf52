"""
SmartHome API: Request ID Middleware
====================================

What:  Assigns an ID to each incoming request and returns it in X-Request-ID.
Why:   Pipeline halts, access log lines and unexpected-error logs of one
       request can be correlated by that ID.
How:   A client-supplied X-Request-ID is reused only when it is a short token
       (letters, digits, '.', '_', '-'; at most 64 chars). Anything else is
       replaced by a fresh 8-char id, so log lines never carry arbitrary
       client text. The id lives in a ContextVar and on request.state.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
MAX_REQUEST_ID_LENGTH = 64

_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


def resolve_request_id(supplied: Optional[str]) -> str:
    """Return the client's id when it is a safe token, else a new one."""
    if (
        supplied
        and len(supplied) <= MAX_REQUEST_ID_LENGTH
        and _REQUEST_ID_PATTERN.match(supplied)
    ):
        return supplied
    return new_request_id()


class RequestIDMiddleware(BaseHTTPMiddleware):

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))
        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response
