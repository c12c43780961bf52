"""
SmartHome API: Response Envelopes
=================================

What:  Pydantic models and helpers for the JSON the API returns.
Why:   Every response carries a numeric `status`; errors add the standard
       reason phrase as `message`. Centralizing that here keeps the pipeline,
       the global exception handlers and the health route consistent.

Document serialization:
    Stored documents carry a BSON ObjectId under `_id`. Clients receive it as a
    24-character hex string under `id`, which is also what the Location header
    and GET /<resource>/<id> use.
"""

from http import HTTPStatus
from typing import Any, Dict, Iterable

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """
    Example:
        {"status": 409, "message": "Conflict"}
    """
    status: int = Field(description="HTTP status code, repeated in the body")
    message: str = Field(description="Standard HTTP reason phrase")


class HealthResponse(BaseModel):
    api: str = Field(default="ok", description="Always 'ok' when the process answers")
    database: str = Field(description="'ok' if the startup ping succeeded, else 'error'")


def error_response(status_code: int) -> JSONResponse:
    body = ErrorResponse(status=status_code, message=HTTPStatus(status_code).phrase)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def serialize_document(
    document: Dict[str, Any], exclude: Iterable[str] = ()
) -> Dict[str, Any]:
    """Rename _id to id, drop excluded fields, make ObjectIds JSON-safe."""
    hidden = set(exclude)
    out: Dict[str, Any] = {}
    if "_id" in document:
        out["id"] = str(document["_id"])
    for field, value in document.items():
        if field == "_id" or field in hidden:
            continue
        out[field] = value
    return jsonable_encoder(out, custom_encoder={ObjectId: str})
