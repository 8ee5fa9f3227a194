from fastapi import HTTPException

import config
from adapter.memory.user_repository import InMemoryUserRepository
from adapter.mongodb.connection import get_mongodb_client
from adapter.mongodb.user_repository import MongoUserRepository
from port.user_repository import UserRepository

# Shared for the life of the process when USER_STORE=memory
_memory_user_repo = InMemoryUserRepository()


def _get_db():
    """Get MongoDB database, raising 503 if unavailable."""
    client = get_mongodb_client()
    if client is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return client[config.DATABASE_NAME]


def get_user_repo() -> UserRepository:
    if config.USER_STORE == "mongodb":
        return MongoUserRepository(_get_db())
    return _memory_user_repo
