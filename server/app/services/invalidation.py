"""Purge cached search results after catalog writes.

A new document can match any number of cached filter combinations, and
the set of live keys is not tracked, so every successful publish purges
the whole search cache. Must run only after the store write is committed:
purging first would let a concurrent search refill the cache from a
snapshot that lacks the new row.
"""

import logging

from sqlalchemy import inspect

from app.models.document import Document
from app.services.search_cache import SearchCache, SearchCacheError

logger = logging.getLogger(__name__)


def _document_id(document: Document) -> int | None:
    # Read the id from the identity map so an expired row is never reloaded
    identity = inspect(document).identity
    if identity:
        return identity[0]
    return document.id


class CacheInvalidationCoordinator:
    def __init__(self, cache: SearchCache) -> None:
        self.cache = cache

    def on_document_published(self, document: Document) -> bool:
        """Purge all cached search results. Returns False if the purge failed.

        Never raises: a failed purge leaves stale entries that expire by TTL.
        """
        document_id = _document_id(document)
        try:
            removed = self.cache.invalidate_all()
        except SearchCacheError as e:
            logger.warning(
                "Search cache purge failed after publishing document %s: %s", document_id, e
            )
            return False
        logger.info(
            "Purged %d cached search result(s) after publishing document %s", removed, document_id
        )
        return True
