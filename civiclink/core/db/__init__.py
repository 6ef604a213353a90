# Local application imports
from civiclink.core.db.create_async_engine import async_engine, create_async_engine
from civiclink.core.db.errors import translate_store_errors
from civiclink.core.db.get_async_session import AsyncSessionLocal, get_async_session
from civiclink.core.db.run_with_new_session import run_with_new_session

__all__ = [
    "AsyncSessionLocal",
    "async_engine",
    "create_async_engine",
    "get_async_session",
    "run_with_new_session",
    "translate_store_errors",
]
