"""Single-slot, time-windowed in-memory cache for the tournament list."""

from typing import Any

CACHE_TTL_SECONDS = 5 * 60


class TournamentCache:
    def __init__(self, ttl_seconds: float = CACHE_TTL_SECONDS):
        # (result, cached_at), always replaced as one tuple
        self._entry: tuple[Any, float] | None = None
        self._ttl = ttl_seconds

    def read(self, now: float) -> Any | None:
        """Return the cached result if it is younger than the TTL, else None."""
        entry = self._entry
        if entry is None:
            return None
        val, ts = entry
        if now - ts < self._ttl:
            return val
        return None

    def write(self, value: Any, now: float) -> None:
        self._entry = (value, now)

    def clear(self) -> None:
        self._entry = None
