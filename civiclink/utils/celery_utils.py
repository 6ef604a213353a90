# Standard library imports
import asyncio
from collections.abc import Awaitable, Callable, Coroutine
import functools
from typing import Any, TypeVar

T = TypeVar("T")


def run_async_in_celery(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run a coroutine to completion from a synchronous Celery task.

    Each call gets its own event loop, closed afterwards, so connections
    opened inside the coroutine never outlive the loop they belong to.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.run_until_complete(loop.shutdown_asyncgens())
        loop.close()
        asyncio.set_event_loop(None)


def celery_async_task(func: Callable[..., Awaitable[T]]) -> Callable[..., T]:
    """
    Decorator to convert async functions to sync functions for Celery tasks.

    Usage:
        @celery_app.task(bind=True)
        @celery_async_task
        async def my_async_task(self, param1, param2):
            return await some_async_function()
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        return run_async_in_celery(func(*args, **kwargs))

    return wrapper
