"""Cache entry domain entity."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntryEntity:
    """Domain entity for a cached upstream payload.

    Entries are never updated in place; a write replaces the whole entry.

    Attributes:
        key: Cache key derived from endpoint name and query parameters
        value: JSON-serializable payload
        expires_at: Absolute expiry on the store's clock (write time + TTL)
    """

    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at
