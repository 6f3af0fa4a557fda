"""
Session-lifetime store for resolved lookups
"""
import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)


class ResultCache:
    """
    Key-value store for resolved country, province and city lists.
    Each key is written once; there is no expiry or eviction.
    """

    def __init__(self):
        self.cache: Dict[str, Any] = {}

    def has(self, key: str) -> bool:
        return key in self.cache

    def get(self, key: str, default: Any = None) -> Any:
        if key in self.cache:
            logger.debug(f"Cache hit for {key}")
        return self.cache.get(key, default)

    def set(self, key: str, value: Any) -> None:
        if key in self.cache:
            logger.debug(f"Ignoring second write for {key}")
            return
        self.cache[key] = value

    def clear(self) -> None:
        self.cache.clear()

    def __len__(self) -> int:
        return len(self.cache)
