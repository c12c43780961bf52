"""
SmartHome API: Database Connection Management
=============================================

What:  Motor (async MongoDB) client creation, connectivity check and shutdown.
Why:   Keeps every driver-specific connection detail in one place; the rest of
       the app only sees an AsyncIOMotorDatabase handle.
How:   The client is created once in the lifespan handler and stays read-only
       for the life of the process. Motor connects lazily, so creating the
       client never fails on an unreachable server; ping() is what tells us
       whether the database is actually there.
Who:   Called from main.lifespan().
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from smarthome.config import Settings

logger = logging.getLogger(__name__)


def create_client(settings: Settings) -> AsyncIOMotorClient:
    """Build the process-wide Motor client from settings."""
    return AsyncIOMotorClient(
        settings.mongodb_url,
        serverSelectionTimeoutMS=settings.mongodb_server_selection_timeout_ms,
    )


def get_database(client: AsyncIOMotorClient, settings: Settings) -> AsyncIOMotorDatabase:
    return client[settings.mongodb_database]


async def ping(client: AsyncIOMotorClient) -> bool:
    """
    Run the `ping` admin command.

    Returns:
        True when the server answered, False on any driver error. The error is
        logged; the caller decides whether a dead database is fatal.
    """
    try:
        await client.admin.command("ping")
    except PyMongoError as e:
        logger.error("MongoDB ping failed: %s", str(e))
        return False
    return True


def close_client(client: AsyncIOMotorClient) -> None:
    """Close all pooled connections. Called during application shutdown."""
    client.close()
