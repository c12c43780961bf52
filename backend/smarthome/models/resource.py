"""
SmartHome API: Resource Definitions and Lookup Keys
===================================================

What:  Describes the two stored resource types (users, devices) and the key
       a client uses to address a single document.
Why:   Users and devices share one pipeline; everything that differs between
       them (collection, natural key field, schema, hidden fields) lives in a
       ResourceDefinition instead of in two copies of the route code.
How:   Path parameters are resolved once, at the route boundary, into a Key:

           Key = NaturalKey | RecordId

       A RecordId is any string that parses as a MongoDB ObjectId. Since such
       a string is also a legal natural key, a RecordId matches either field.
"""

from typing import Annotated, Any, Dict, Literal, Tuple, Union

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class ResourceDefinition(BaseModel):
    """Static description of one resource type."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Singular name, used as the response field")
    plural: str = Field(description="Plural name, used as path prefix and list field")
    collection: str
    key_field: str = Field(description="Natural key, unique by pre-insert check")
    create_schema: str = Field(description="Name of the JSON schema for create bodies")
    hidden_fields: Tuple[str, ...] = Field(
        default=(),
        description="Fields stripped from the create response",
    )

    @property
    def list_projection(self) -> Dict[str, int]:
        return {"_id": 1, self.key_field: 1}


USERS = ResourceDefinition(
    name="user",
    plural="users",
    collection="users",
    key_field="username",
    create_schema="user_create",
    hidden_fields=("password", "__version"),
)

DEVICES = ResourceDefinition(
    name="device",
    plural="devices",
    collection="devices",
    key_field="chipId",
    create_schema="device_create",
)

RESOURCES: Tuple[ResourceDefinition, ...] = (USERS, DEVICES)


# ── Lookup Keys ───────────────────────────────────────────────────────────

class NaturalKey(BaseModel):
    """A domain key (username, chipId)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["natural"] = "natural"
    value: str

    def to_filter(self, key_field: str) -> Dict[str, Any]:
        return {key_field: self.value}


class RecordId(BaseModel):
    """A string that is a valid ObjectId; matches the natural key or _id."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    kind: Literal["record_id"] = "record_id"
    value: str
    object_id: ObjectId

    def to_filter(self, key_field: str) -> Dict[str, Any]:
        return {"$or": [{key_field: self.value}, {"_id": self.object_id}]}


Key = Annotated[Union[NaturalKey, RecordId], Field(discriminator="kind")]


def resolve_key(raw: str) -> Union[NaturalKey, RecordId]:
    """Classify a raw path parameter using the store's identifier format."""
    if ObjectId.is_valid(raw):
        return RecordId(value=raw, object_id=ObjectId(raw))
    return NaturalKey(value=raw)
