"""Input normalization shared by the write path and the query path.

Classification fields are stored in exactly the form produced by
``canonicalize`` so that a filter normalized the same way can be matched
with a plain substring comparison.
"""

import re
import unicodedata

# Control characters to remove
CONTROL_CHAR_PATTERN = re.compile(r"[\x00-\x1f\x7f]")

MULTI_WHITESPACE_PATTERN = re.compile(r"\s+")


def normalize_single_line(text: str | None) -> str | None:
    """
    Normalize text for single-line fields by:
    - Normalizing Unicode to NFC form
    - Replacing control characters (newlines included) with spaces
    - Stripping leading/trailing whitespace
    - Collapsing whitespace runs to a single space

    Returns None if input is None.
    """
    if text is None:
        return None

    text = unicodedata.normalize("NFC", text)
    text = CONTROL_CHAR_PATTERN.sub(" ", text)
    text = text.strip()
    return MULTI_WHITESPACE_PATTERN.sub(" ", text)


def canonicalize(text: str | None) -> str | None:
    """Return the canonical lowercase form of a classification value.

    Empty input (after trimming) becomes None.
    """
    text = normalize_single_line(text)
    if not text:
        return None
    return text.lower()
