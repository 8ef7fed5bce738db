"""Cheap checks for whether a document is worth handing to the parser.

Neither check parses the document. ``supports_content_type`` looks at the
declared MIME type; ``try_magic`` sniffs the bytes for a root tag.
"""

import re
from typing import Optional, Union

# Matched as substrings so parameters like "; charset=utf-8" are allowed.
SUPPORTED_MIME_TYPES = (
    "application/rss+xml",
    "application/xml",
    "text/x-opml",
    "text/xml",
)

MAGIC_PATTERNS = (
    re.compile(r"<rss\b"),
    re.compile(r"<opml\b"),
)


def supports_content_type(content_type: Optional[str]) -> bool:
    """Check whether a declared content type may hold a podcast or OPML document.

    An empty content type means the server did not say, so it is accepted.

    Args:
        content_type: Value of the Content-Type header, possibly with parameters.

    Returns:
        True if the document should be parsed.
    """
    if not content_type:
        return True
    return any(mime_type in content_type for mime_type in SUPPORTED_MIME_TYPES)


def try_magic(data: Union[bytes, str]) -> bool:
    """Sniff raw document data for an ``<rss`` or ``<opml`` root tag."""
    if isinstance(data, (bytes, bytearray)):
        text = bytes(data).decode("utf-8", errors="replace")
    else:
        text = data
    return any(pattern.search(text) for pattern in MAGIC_PATTERNS)
