# specflow/db/__init__.py
"""
Database module.
"""
from typing import Optional

from specflow.core.config import settings
from specflow.core.logging import log, log_error

# Motor client instance
_client = None
_db = None
_connection_error: Optional[str] = None


async def init_database(database) -> None:
    """Initialize Beanie on an already-selected database."""
    global _db, _connection_error
    from beanie import init_beanie
    from specflow.models import DOCUMENT_MODELS

    await init_beanie(database=database, document_models=DOCUMENT_MODELS)
    _db = database
    _connection_error = None
    log("DB", "Beanie ODM initialized")


async def connect_db(url: Optional[str] = None) -> None:
    """
    Connect to MongoDB.

    If MongoDB is not available, stores the error for later retrieval
    rather than raising; routes then fail with a 500 envelope.
    """
    global _client, _db, _connection_error
    url = url or settings.database.url
    try:
        from motor.motor_asyncio import AsyncIOMotorClient

        _client = AsyncIOMotorClient(url, serverSelectionTimeoutMS=settings.database.server_selection_timeout_ms)

        try:
            database = _client.get_default_database()
        except Exception:
            database = _client[settings.database.default_name]

        # Fails fast if MongoDB is not running
        await _client.admin.command("ping")
        log("DB", f"Connected to MongoDB database '{database.name}'")

        await init_database(database)
    except Exception as e:
        log_error("DB", "MongoDB not available", e)
        _client = None
        _db = None
        _connection_error = str(e)


async def disconnect_db() -> None:
    """Disconnect from MongoDB."""
    global _client, _db
    if _client:
        _client.close()
        log("DB", "Disconnected from MongoDB")
    _client = None
    _db = None


def is_connected() -> bool:
    """Check if database is connected."""
    return _db is not None


def get_connection_error() -> Optional[str]:
    """Get connection error message if connection failed."""
    return _connection_error
