from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from mongomock_motor import AsyncMongoMockClient
from .config import get_settings

_settings = get_settings()
_client = None
_db: AsyncIOMotorDatabase | None = None


def _make_client():
    # memory:// keeps everything in-process; data is lost on restart
    if _settings.uses_memory_store:
        return AsyncMongoMockClient()
    return AsyncIOMotorClient(_settings.mongodb_uri)


async def get_db() -> AsyncIOMotorDatabase:
    global _client, _db
    if _db is None:
        _client = _make_client()
        _db = _client[_settings.db_name]
        await _db.listings.create_index("reviews.id")
    return _db


def reset_db() -> None:
    """Drops the cached handle so the next get_db() starts from an empty store."""
    global _client, _db
    _client = None
    _db = None
