# Third-party imports
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine as sa_create_async_engine
from sqlalchemy.pool import NullPool

# Local application imports
from civiclink.settings import settings


def create_async_engine(url: str | None = None, echo: bool | None = None) -> AsyncEngine:
    url = url or settings.SQLALCHEMY_ASYNC_DATABASE_URI
    kwargs: dict = {"echo": settings.DATABASE_ECHO if echo is None else echo}
    if url.startswith("sqlite"):
        # aiosqlite connections are bound to the loop that opened them
        kwargs["poolclass"] = NullPool
    else:
        kwargs["pool_pre_ping"] = True
    return sa_create_async_engine(url, **kwargs)


# Asynchronous Engine
async_engine = create_async_engine()
