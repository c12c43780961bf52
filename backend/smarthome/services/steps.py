"""
SmartHome API: Pipeline Steps and Responders
============================================

What:  The concrete steps the resource pipelines are built from, the
       responders that render a successful run, and the four pipelines.
How:   Steps are resource-agnostic: the ResourceDefinition in the context says
       which key field, schema and hidden fields apply.

Status mapping per step:
    validate_body    schema invalid                 -> 400
    ensure_unique    key exists                     -> 409
                     store raised                   -> 500
    insert_document  store raised                   -> 500
    find_all         store raised                   -> 400
    find_one         no match, or store raised      -> 404
    delete_one       nothing removed, or store raised -> 404

find_all answers 400 where the create steps answer 500 for the same kind of
failure. That is the established contract of the list endpoint and is kept
as-is.
"""

import logging

from fastapi import status
from fastapi.responses import JSONResponse

from smarthome.exceptions import (
    ConflictError,
    DatabaseError,
    NotFoundError,
    ValidationError,
)
from smarthome.schemas.responses import serialize_document
from smarthome.services.pipeline import Pipeline, RequestContext, StepServices

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Create
# ══════════════════════════════════════════════════════════════════════════

async def validate_body(ctx: RequestContext, services: StepServices) -> RequestContext:
    """Ensure the new resource matches its create schema."""
    schema = ctx.resource.create_schema
    valid, errors = services.validator.validate(schema, ctx.body)
    if not valid:
        raise ValidationError(
            message=f"{ctx.resource.name} payload rejected by {schema}",
            errors=errors,
        )
    return ctx.advance(document=dict(ctx.body))


async def ensure_unique(ctx: RequestContext, services: StepServices) -> RequestContext:
    """Ensure no stored document already uses the natural key."""
    resource = ctx.resource
    key = ctx.document[resource.key_field]
    try:
        existing = await services.store.find_by_natural_key(key)
    except Exception as e:
        raise DatabaseError(
            message=f"uniqueness check for {resource.name} {key} failed: {e}",
            context={"error_type": type(e).__name__},
        )

    if existing is not None:
        raise ConflictError(resource=resource.name, key=key)
    return ctx


async def insert_document(ctx: RequestContext, services: StepServices) -> RequestContext:
    """Save the resource; the stored copy (with _id and timestamps) replaces the draft."""
    resource = ctx.resource
    try:
        stored = await services.store.insert(ctx.document)
    except Exception as e:
        raise DatabaseError(
            message=f"insert of {resource.name} {ctx.document.get(resource.key_field)} failed: {e}",
            context={"error_type": type(e).__name__},
        )

    logger.info("inserted %s %s into the database", resource.name, stored.get(resource.key_field))
    return ctx.advance(document=stored)


# ══════════════════════════════════════════════════════════════════════════
# Read / List / Delete
# ══════════════════════════════════════════════════════════════════════════

async def find_all(ctx: RequestContext, services: StepServices) -> RequestContext:
    resource = ctx.resource
    query = {}
    # only the natural key is filterable
    if ctx.query.get(resource.key_field):
        query[resource.key_field] = ctx.query[resource.key_field]

    try:
        documents = await services.store.list(query)
    except Exception as e:
        raise DatabaseError(
            message=f"listing {resource.plural} failed: {e}",
            context={"error_type": type(e).__name__, "filter": query},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    return ctx.advance(documents=documents)


async def find_one(ctx: RequestContext, services: StepServices) -> RequestContext:
    resource = ctx.resource
    try:
        document = await services.store.find_by_key(ctx.key)
    except Exception as e:
        raise NotFoundError(
            resource=resource.name,
            key=ctx.key.value,
            context={"error": str(e), "error_type": type(e).__name__},
        )

    if document is None:
        raise NotFoundError(resource=resource.name, key=ctx.key.value)
    return ctx.advance(document=document)


async def delete_one(ctx: RequestContext, services: StepServices) -> RequestContext:
    resource = ctx.resource
    try:
        removed = await services.store.delete_by_key(ctx.key)
    except Exception as e:
        raise NotFoundError(
            resource=resource.name,
            key=ctx.key.value,
            context={"error": str(e), "error_type": type(e).__name__},
        )

    if not removed:
        raise NotFoundError(resource=resource.name, key=ctx.key.value)
    logger.info("deleted %s %s", resource.name, ctx.key.value)
    return ctx


# ══════════════════════════════════════════════════════════════════════════
# Responders
# ══════════════════════════════════════════════════════════════════════════

def respond_created(ctx: RequestContext) -> JSONResponse:
    resource = ctx.resource
    body = serialize_document(ctx.document, exclude=resource.hidden_fields)
    return JSONResponse(
        content={"status": status.HTTP_200_OK, resource.name: body},
        headers={"Location": f"/{resource.plural}/{body['id']}"},
    )


def respond_list(ctx: RequestContext) -> JSONResponse:
    items = [serialize_document(document) for document in ctx.documents]
    return JSONResponse(content={"status": status.HTTP_200_OK, ctx.resource.plural: items})


def respond_one(ctx: RequestContext) -> JSONResponse:
    return JSONResponse(
        content={
            "status": status.HTTP_200_OK,
            ctx.resource.name: serialize_document(ctx.document),
        }
    )


def respond_deleted(ctx: RequestContext) -> JSONResponse:
    return JSONResponse(content={"status": status.HTTP_200_OK})


CREATE = Pipeline("create", [validate_body, ensure_unique, insert_document], respond_created)
LIST = Pipeline("list", [find_all], respond_list)
READ = Pipeline("read", [find_one], respond_one)
DELETE = Pipeline("delete", [delete_one], respond_deleted)
