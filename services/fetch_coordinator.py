"""
Per-key de-duplication of geography lookups
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict

from services.result_cache import ResultCache

logger = logging.getLogger(__name__)


class FetchCoordinator:
    """
    Makes sure at most one lookup per cache key is running at any time.

    Concurrent callers for the same key all await the same pending task and
    see the same outcome. A failure leaves the cache untouched and is raised
    to every waiting caller; the key is released either way so a later call
    can try again.
    """

    def __init__(self, cache: ResultCache):
        self.cache = cache
        self.in_flight: Dict[str, "asyncio.Task[Any]"] = {}

    def is_pending(self, key: str) -> bool:
        return key in self.in_flight

    async def ensure(self, key: str, populate: Callable[[], Awaitable[Any]]) -> None:
        if self.cache.has(key):
            return

        task = self.in_flight.get(key)
        if task is None:
            logger.debug(f"Starting fetch for {key}")
            task = asyncio.ensure_future(self._populate(key, populate))
            self.in_flight[key] = task
        else:
            logger.debug(f"Joining in-flight fetch for {key}")

        # shield: one caller giving up must not cancel the others' fetch
        await asyncio.shield(task)

    async def _populate(self, key: str, populate: Callable[[], Awaitable[Any]]) -> Any:
        try:
            value = await populate()
            if isinstance(value, Exception):
                raise value
            self.cache.set(key, value)
            return value
        finally:
            self.in_flight.pop(key, None)
