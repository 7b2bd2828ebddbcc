"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Easy swapping of implementations (Redis → in-process map, TMDB → fixture)
- Unit testing with fake implementations
- Clear separation of concerns
"""

from .cache_store import CacheStore
from .catalog_provider import CatalogProvider
from .completion_provider import CompletionProvider

__all__ = [
    "CacheStore",
    "CatalogProvider",
    "CompletionProvider",
]
