"""
Async helpers for running blocking collaborator calls (Firecrawl over requests)
without blocking the event loop, and for processing source/target pairs concurrently.
"""

import asyncio
import functools
from concurrent.futures import ThreadPoolExecutor
import logging
from typing import Any, Awaitable, Callable, Tuple, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Thread pool for blocking I/O (scraping)
_executor = ThreadPoolExecutor(max_workers=4)


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """
    Run a blocking function in the thread pool.
    Exceptions propagate to the awaiting caller unchanged.
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, functools.partial(func, *args, **kwargs))


async def run_pair(source: Awaitable[T], target: Awaitable[T]) -> Tuple[T, T]:
    """
    Await the source and target coroutines concurrently.

    Returns:
        (source_result, target_result) tuple

    The first failure is raised; there is no partial result for a pair.
    """
    source_result, target_result = await asyncio.gather(source, target)
    return source_result, target_result


def shutdown_executor():
    """Cleanup thread pool (call on app shutdown)."""
    _executor.shutdown(wait=True)
