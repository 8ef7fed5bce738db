"""Podcast feed parsing.

Provides functionality for:
- Parsing podcast RSS feeds into Podcast/PodcastEpisode structures
- Parsing OPML subscription lists into OpmlContainer trees
- Sniffing content types and document data before parsing
"""

from .detector import supports_content_type, try_magic
from .errors import FeedParseError, MalformedDocumentError, UnrecognizedRootError
from .feed_parser import FeedParser
from .models import OpmlContainer, Podcast, PodcastEpisode
from .opml_parser import OPMLParser
from .podcast_parser import PodcastParser
from .xml_cursor import TokenCursor, TokenType

__all__ = [
    "PodcastParser",
    "FeedParser",
    "OPMLParser",
    "TokenCursor",
    "TokenType",
    "Podcast",
    "PodcastEpisode",
    "OpmlContainer",
    "FeedParseError",
    "MalformedDocumentError",
    "UnrecognizedRootError",
    "supports_content_type",
    "try_magic",
]
