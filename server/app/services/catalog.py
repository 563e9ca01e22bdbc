"""Catalog service: publishing documents and searching them through the cache.

Store failures propagate and fail the request. Cache failures never do:
a failed read is a miss, a failed write or purge is logged and dropped.
"""

import json
import logging
from dataclasses import dataclass
from typing import Literal

from sqlalchemy.orm import Session

from app.core.validation import canonicalize, normalize_single_line
from app.models.document import Document
from app.models.user import User
from app.schemas.document import DocumentResult
from app.services.catalog_store import create_document, find_documents, get_owner_emails
from app.services.invalidation import CacheInvalidationCoordinator
from app.services.query_normalizer import SearchQuery, normalize_query
from app.services.search_cache import SearchCache, SearchCacheError

logger = logging.getLogger(__name__)

UNKNOWN_OWNER = "Unknown"
DEFAULT_CACHE_TTL_SECONDS = 60 * 60

# Column widths of the documents table
FIELD_MAX_LENGTHS = {
    "subject": 255,
    "class_name": 255,
    "school": 255,
    "file_location": 1024,
}


class NotAcademyError(Exception):
    """Raised when a non-academy account attempts an academy-only operation."""


class DocumentValidationError(ValueError):
    """Raised when required document fields are missing, blank or too long."""


@dataclass
class SearchOutcome:
    results: list[DocumentResult]
    source: Literal["cache", "database"]


class CatalogService:
    def __init__(
        self,
        db: Session,
        cache: SearchCache,
        coordinator: CacheInvalidationCoordinator | None = None,
        cache_ttl_seconds: int = DEFAULT_CACHE_TTL_SECONDS,
    ) -> None:
        self.db = db
        self.cache = cache
        self.coordinator = coordinator or CacheInvalidationCoordinator(cache)
        self.cache_ttl_seconds = cache_ttl_seconds

    def publish(
        self,
        caller: User,
        subject: str | None,
        class_name: str | None,
        school: str | None,
        file_location: str | None,
    ) -> Document:
        """Record a new document and purge cached search results.

        Raises:
            NotAcademyError: caller is not an academy account.
            DocumentValidationError: a required field is missing, blank or too long.
        """
        if not caller.is_academy:
            raise NotAcademyError("Only academy accounts can publish documents")

        fields = {
            "subject": canonicalize(subject),
            "class_name": canonicalize(class_name),
            "school": canonicalize(school),
            # Opaque reference: trimmed, never lowercased
            "file_location": normalize_single_line(file_location) or None,
        }
        missing = [name for name, value in fields.items() if value is None]
        if missing:
            raise DocumentValidationError(f"Missing required fields: {', '.join(missing)}")
        # NFC can lengthen a value, so limits are checked on the stored form
        too_long = [
            name for name, value in fields.items() if len(value) > FIELD_MAX_LENGTHS[name]
        ]
        if too_long:
            raise DocumentValidationError(f"Fields too long: {', '.join(too_long)}")

        caller_id = caller.id
        document = create_document(self.db, owner_id=caller_id, **fields)
        # The row is durable from here on: purge even if reloading it fails
        try:
            self.db.refresh(document)
        finally:
            self.coordinator.on_document_published(document)
        logger.info("Academy %s published document %s", caller_id, document.id)
        return document

    def search(
        self,
        caller: User,
        subject: str | None = None,
        class_name: str | None = None,
        school: str | None = None,
        personal: bool = False,
    ) -> SearchOutcome:
        """Search the catalog, serving non-personal queries from the cache when possible.

        ``personal`` is honored only for academy callers and restricts results
        to the caller's own documents. Personal queries never touch the cache.
        """
        query = normalize_query(subject, class_name, school, personal and caller.is_academy)
        cache_key = query.cache_key(self.cache.prefix)

        if cache_key is not None:
            cached = self._read_cache(cache_key)
            if cached is not None:
                return SearchOutcome(results=cached, source="cache")

        results = self._query_store(query, caller)

        if cache_key is not None:
            self._write_cache(cache_key, results)

        return SearchOutcome(results=results, source="database")

    def _query_store(self, query: SearchQuery, caller: User) -> list[DocumentResult]:
        owner_id = caller.id if query.personal else None
        documents = find_documents(self.db, query, owner_id=owner_id)
        emails = get_owner_emails(self.db, {d.owner_id for d in documents})
        return [enrich_document(d, emails) for d in documents]

    def _read_cache(self, key: str) -> list[DocumentResult] | None:
        try:
            cached = self.cache.get(key)
        except SearchCacheError as e:
            logger.warning("Search cache read failed for %s, querying store: %s", key, e)
            return None
        if cached is None:
            return None
        try:
            return [DocumentResult(**row) for row in json.loads(cached)]
        except (ValueError, TypeError) as e:
            # Unreadable entry (e.g. written by an older schema); recompute it
            logger.warning("Discarding unreadable search cache entry %s: %s", key, e)
            return None

    def _write_cache(self, key: str, results: list[DocumentResult]) -> None:
        payload = json.dumps([r.model_dump(mode="json") for r in results])
        try:
            self.cache.put(key, payload, self.cache_ttl_seconds)
        except SearchCacheError as e:
            logger.warning("Search cache write failed for %s: %s", key, e)


def enrich_document(document: Document, owner_emails: dict[int, str]) -> DocumentResult:
    return DocumentResult(
        id=document.id,
        owner_id=document.owner_id,
        file_location=document.file_location,
        subject=document.subject,
        class_name=document.class_name,
        school=document.school,
        created_at=document.created_at,
        owner_email=owner_emails.get(document.owner_id, UNKNOWN_OWNER),
    )
