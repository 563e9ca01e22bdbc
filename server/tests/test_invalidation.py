"""Tests for cache invalidation after publish."""

from unittest.mock import MagicMock

from app.models.document import Document
from app.services.invalidation import CacheInvalidationCoordinator
from app.services.search_cache import InMemorySearchCache, SearchCacheError


def _document() -> Document:
    return Document(id=7, owner_id=1, subject="math", class_name="10th", school="dps")


class TestCacheInvalidationCoordinator:
    def test_purges_every_entry(self):
        cache = InMemorySearchCache()
        cache.put("pdfs:search:math:*:*", "[]", 60)
        cache.put("pdfs:search:*:*:*", "[]", 60)

        assert CacheInvalidationCoordinator(cache).on_document_published(_document()) is True
        assert len(cache) == 0

    def test_one_purge_per_publish(self):
        cache = MagicMock()
        cache.invalidate_all.return_value = 0
        coordinator = CacheInvalidationCoordinator(cache)

        coordinator.on_document_published(_document())
        coordinator.on_document_published(_document())

        assert cache.invalidate_all.call_count == 2

    def test_failure_is_absorbed(self, caplog):
        cache = MagicMock()
        cache.invalidate_all.side_effect = SearchCacheError("connection refused")

        result = CacheInvalidationCoordinator(cache).on_document_published(_document())

        assert result is False
        assert "purge failed" in caplog.text
