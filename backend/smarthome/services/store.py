"""
SmartHome API: Resource Store
=============================

What:  Thin accessor over one MongoDB collection per resource type.
Why:   Pipeline steps talk to this class instead of building Mongo filters
       themselves, so the dual-key matching rule lives in exactly one place.
How:   Each ResourceStore wraps a Motor collection and a ResourceDefinition.
       Driver exceptions are NOT caught here: the calling step knows which
       HTTP status a failure maps to and translates it.

Operations:
    find_by_key(key)           natural key OR _id (if the key looks like an ObjectId)
    find_by_natural_key(value) natural key only (uniqueness check)
    list(filter)               projection {_id, <key_field>}
    insert(document)           stamps createdAt / lastModified, returns stored doc
    delete_by_key(key)         same matching as find_by_key, returns removed?

Uniqueness:
    There is no unique index. find_by_natural_key() followed by insert() is a
    check-then-act sequence, and two concurrent creates with the same key can
    both pass the check.
"""

import logging
import time
from typing import Any, Dict, List, Optional, Union

from motor.motor_asyncio import AsyncIOMotorCollection

from smarthome.models.resource import NaturalKey, RecordId, ResourceDefinition

logger = logging.getLogger(__name__)


def now_millis() -> int:
    """Current time as integer milliseconds since the Unix epoch."""
    return int(time.time() * 1000)


class ResourceStore:

    def __init__(self, collection: AsyncIOMotorCollection, resource: ResourceDefinition):
        self.collection = collection
        self.resource = resource

    async def find_by_key(
        self, key: Union[NaturalKey, RecordId]
    ) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one(key.to_filter(self.resource.key_field))

    async def find_by_natural_key(self, value: Any) -> Optional[Dict[str, Any]]:
        return await self.collection.find_one({self.resource.key_field: value})

    async def list(self, filter: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        cursor = self.collection.find(filter or {}, self.resource.list_projection)
        return await cursor.to_list(length=None)

    async def insert(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """
        Stamp timestamps and write the document.

        The caller's dict is not modified; the returned copy carries the
        timestamps and the database-assigned _id.
        """
        stamp = now_millis()
        stored = {**document, "createdAt": stamp, "lastModified": stamp}
        result = await self.collection.insert_one(stored)
        stored["_id"] = result.inserted_id
        logger.debug("Inserted %s %s", self.resource.name, result.inserted_id)
        return stored

    async def delete_by_key(self, key: Union[NaturalKey, RecordId]) -> bool:
        result = await self.collection.delete_one(key.to_filter(self.resource.key_field))
        return result.deleted_count > 0
