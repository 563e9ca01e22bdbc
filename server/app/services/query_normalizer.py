"""Canonical search queries and their cache keys.

A query is three optional substring filters plus a ``personal`` flag.
Raw filters are canonicalized with the same function used on stored
documents, so equivalent inputs (``" Math "``, ``"math"``, ``"MATH"``)
produce equal queries and identical cache keys.

Key layout: ``<prefix><subject>:<class>:<school>``. Present filters are
percent-encoded, so neither ``:`` nor ``*`` can appear inside a field;
an absent filter is written as ``*``.
"""

from dataclasses import dataclass
from urllib.parse import quote

from app.core.validation import canonicalize

DEFAULT_KEY_PREFIX = "pdfs:search:"
ANY_VALUE = "*"
KEY_DELIMITER = ":"


@dataclass(frozen=True)
class SearchQuery:
    subject: str | None = None
    class_name: str | None = None
    school: str | None = None
    personal: bool = False

    @property
    def filters(self) -> tuple[str | None, str | None, str | None]:
        return (self.subject, self.class_name, self.school)

    def cache_key(self, prefix: str = DEFAULT_KEY_PREFIX) -> str | None:
        """Return the cache key, or None for personal queries (never cached)."""
        if self.personal:
            return None
        parts = [ANY_VALUE if value is None else quote(value, safe="") for value in self.filters]
        return prefix + KEY_DELIMITER.join(parts)


def normalize_query(
    subject: str | None = None,
    class_name: str | None = None,
    school: str | None = None,
    personal: bool = False,
) -> SearchQuery:
    """Build a canonical SearchQuery. Never raises; blank filters become absent."""
    return SearchQuery(
        subject=canonicalize(subject),
        class_name=canonicalize(class_name),
        school=canonicalize(school),
        personal=bool(personal),
    )
