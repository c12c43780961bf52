"""
SmartHome API: Request Pipeline
===============================

What:  Runs an ordered list of steps for one request and renders the outcome.
Why:   Every resource route is "a few small checks, then respond". Expressing
       routes as step lists keeps each check tiny and makes the short-circuit
       rule uniform: the first step that fails decides the response.
How:   A step is an async function (RequestContext, StepServices) -> RequestContext.
       On success it returns a NEW context (the model is frozen). On failure it
       raises a SmartHomeError subclass; the runner catches it at the step
       boundary, logs it and answers {"status", "message"} with the error's
       status code. No later step runs.

    create:  validate_body -> ensure_unique -> insert_document -> respond_created
    list:    find_all -> respond_list
    read:    find_one -> respond_one
    delete:  delete_one -> respond_deleted

Nothing is compensated on failure: a step that fails after an earlier step
wrote to the store leaves that write in place.
"""

import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

from smarthome.exceptions import SmartHomeError
from smarthome.middleware.request_id import request_id_var
from smarthome.models.resource import Key, ResourceDefinition
from smarthome.schemas.responses import error_response
from smarthome.services.store import ResourceStore
from smarthome.services.validator import SchemaValidator

logger = logging.getLogger(__name__)


class RequestContext(BaseModel):
    """
    Request-scoped value threaded through the steps of one pipeline run.

    Fields are filled progressively: the route sets resource/body/key/query,
    steps set document/documents.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    resource: ResourceDefinition
    body: Any = None
    key: Optional[Key] = None
    query: Dict[str, str] = {}
    document: Optional[Dict[str, Any]] = None
    documents: List[Dict[str, Any]] = []

    def advance(self, **changes: Any) -> "RequestContext":
        return self.model_copy(update=changes)


class StepServices:
    """What a step may touch: the resource's store and the schema validator."""

    def __init__(self, store: ResourceStore, validator: SchemaValidator):
        self.store = store
        self.validator = validator


Step = Callable[[RequestContext, StepServices], Awaitable[RequestContext]]
Responder = Callable[[RequestContext], JSONResponse]


class Pipeline:

    def __init__(self, name: str, steps: Sequence[Step], respond: Responder):
        self.name = name
        self.steps = tuple(steps)
        self.respond = respond

    async def run(self, ctx: RequestContext, services: StepServices) -> JSONResponse:
        for step in self.steps:
            try:
                ctx = await step(ctx, services)
            except SmartHomeError as exc:
                return self._halt(ctx, step, exc)
        return self.respond(ctx)

    def _halt(self, ctx: RequestContext, step: Step, exc: SmartHomeError) -> JSONResponse:
        rid = request_id_var.get("")
        level = logging.ERROR if exc.status_code >= 500 else logging.WARNING
        logger.log(
            level,
            "[%s] %s %s halted at %s (%d): %s | Context: %s",
            rid,
            ctx.resource.name,
            self.name,
            getattr(step, "__name__", repr(step)),
            exc.status_code,
            exc.message,
            exc.context,
        )
        return error_response(exc.status_code)
