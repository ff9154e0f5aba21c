"""
Rendered-view cache keyed by path.

Action handlers call ``revalidate_path`` after a successful write so the
next read of that path re-renders from the store instead of serving a
stale copy.
"""

import logging
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)


class PathCache:
    """
    In-process cache of rendered views.
    
    Entries expire after ``ttl_seconds`` (0 disables expiry) or when
    their path is revalidated, whichever comes first.
    """
    
    def __init__(self, ttl_seconds: int = 0) -> None:
        self.ttl = ttl_seconds
        self._cache: dict[str, tuple[Any, datetime]] = {}
        self._generations: dict[str, int] = {}
    
    def get(self, path: str) -> Any | None:
        """Get cached rendering if present and not expired."""
        if path not in self._cache:
            return None
        
        value, cached_at = self._cache[path]
        if self.ttl:
            age_seconds = (datetime.now(timezone.utc) - cached_at).total_seconds()
            if age_seconds > self.ttl:
                del self._cache[path]
                return None
        
        return value
    
    def set(self, path: str, value: Any) -> None:
        self._cache[path] = (value, datetime.now(timezone.utc))
    
    def revalidate_path(self, path: str) -> None:
        """Mark the cached rendering of ``path`` stale."""
        self._cache.pop(path, None)
        self._generations[path] = self._generations.get(path, 0) + 1
        logger.debug(f"Revalidated {path}")
    
    async def get_or_render(self, path: str, render: Callable[[], Awaitable[Any]]) -> Any:
        """Return the cached rendering of ``path``, rendering it on a miss."""
        cached = self.get(path)
        if cached is not None:
            return cached
        
        generation = self._generations.get(path, 0)
        value = await render()
        # A revalidation during the render means the value may predate a write
        if self._generations.get(path, 0) == generation:
            self.set(path, value)
        return value
