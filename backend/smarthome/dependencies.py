"""
SmartHome API: Application Dependencies
=======================================

What:  The bundle of process-wide dependencies handed to the route table.
Why:   Routes receive the database handle and validator explicitly instead of
       reading them from module globals, so tests can build an app around an
       in-memory database.
How:   create_app() stores one AppDependencies on app.state; route handlers
       get it through FastAPI's Depends(get_dependencies).
"""

from fastapi import Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from smarthome.models.resource import ResourceDefinition
from smarthome.services.store import ResourceStore
from smarthome.services.validator import SchemaValidator


class AppDependencies:
    """
    Attributes:
        database:            Motor database handle (read-only after startup)
        validator:           Compiled JSON schemas
        database_connected:  Result of the startup ping, reported by /health
    """

    def __init__(
        self,
        database: AsyncIOMotorDatabase,
        validator: SchemaValidator,
        database_connected: bool = True,
    ):
        self.database = database
        self.validator = validator
        self.database_connected = database_connected

    def store_for(self, resource: ResourceDefinition) -> ResourceStore:
        return ResourceStore(self.database[resource.collection], resource)


def get_dependencies(request: Request) -> AppDependencies:
    return request.app.state.dependencies
