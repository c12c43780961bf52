"""
SmartHome API: Resource Route Table
===================================

What:  Maps method + path to a pipeline for each resource type.
How:   build_resource_router() is called once per ResourceDefinition. Handlers
       stay thin: they turn the HTTP request into a RequestContext (resolving
       the path key into NaturalKey | RecordId here, and only here) and hand
       it to the pipeline.

    POST    /<plural>          CREATE
    GET     /<plural>          LIST    (?<key_field>= optional filter)
    GET     /<plural>/{key}    READ
    DELETE  /<plural>/{key}    DELETE
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from smarthome.dependencies import AppDependencies, get_dependencies
from smarthome.models.resource import ResourceDefinition, resolve_key
from smarthome.schemas.responses import ErrorResponse
from smarthome.services.pipeline import Pipeline, RequestContext, StepServices
from smarthome.services.steps import CREATE, DELETE, LIST, READ

logger = logging.getLogger(__name__)


async def read_json_body(request: Request) -> Any:
    """
    Parse the request body as JSON.

    A missing or malformed body becomes None, which no create schema accepts,
    so the client gets the same 400 as for a schema violation.
    """
    try:
        return await request.json()
    except ValueError:
        logger.debug("Request body is not valid JSON")
        return None


async def run_pipeline(
    request: Request,
    pipeline: Pipeline,
    ctx: RequestContext,
    deps: AppDependencies,
) -> JSONResponse:
    """Tag the request for the access log, then run the pipeline."""
    request.state.resource = ctx.resource.name
    request.state.pipeline = pipeline.name
    services = StepServices(store=deps.store_for(ctx.resource), validator=deps.validator)
    return await pipeline.run(ctx, services)


def build_resource_router(resource: ResourceDefinition) -> APIRouter:
    router = APIRouter(prefix=f"/{resource.plural}", tags=[resource.plural.capitalize()])

    @router.post(
        "",
        summary=f"Create a {resource.name}",
        responses={
            400: {"model": ErrorResponse},
            409: {"model": ErrorResponse},
            500: {"model": ErrorResponse},
        },
    )
    async def create(
        request: Request,
        deps: AppDependencies = Depends(get_dependencies),
    ) -> JSONResponse:
        ctx = RequestContext(resource=resource, body=await read_json_body(request))
        return await run_pipeline(request, CREATE, ctx, deps)

    @router.get(
        "",
        summary=f"List {resource.plural}",
        responses={400: {"model": ErrorResponse}},
    )
    async def list_all(
        request: Request,
        deps: AppDependencies = Depends(get_dependencies),
    ) -> JSONResponse:
        ctx = RequestContext(resource=resource, query=dict(request.query_params))
        return await run_pipeline(request, LIST, ctx, deps)

    @router.get(
        "/{key}",
        summary=f"Get a {resource.name} by {resource.key_field} or id",
        responses={404: {"model": ErrorResponse}},
    )
    async def read_one(
        request: Request,
        key: str,
        deps: AppDependencies = Depends(get_dependencies),
    ) -> JSONResponse:
        ctx = RequestContext(resource=resource, key=resolve_key(key))
        return await run_pipeline(request, READ, ctx, deps)

    @router.delete(
        "/{key}",
        summary=f"Delete a {resource.name} by {resource.key_field} or id",
        responses={404: {"model": ErrorResponse}},
    )
    async def delete_one(
        request: Request,
        key: str,
        deps: AppDependencies = Depends(get_dependencies),
    ) -> JSONResponse:
        ctx = RequestContext(resource=resource, key=resolve_key(key))
        return await run_pipeline(request, DELETE, ctx, deps)

    return router
