"""Entry point for parsing podcast feed documents.

Looks at the root element of a document and hands it to the RSS or OPML
parser. Also exposes the content-type and magic sniffing checks callers
use before fetching or parsing a document.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from . import detector
from .errors import FeedParseError, MalformedDocumentError, UnrecognizedRootError
from .feed_parser import FeedParser
from .models import OpmlContainer, Podcast
from .opml_parser import OPMLParser
from .xml_cursor import DEFAULT_CHUNK_SIZE, Source, TokenCursor, TokenType

logger = logging.getLogger(__name__)

ParseResult = Union[Podcast, OpmlContainer]


class PodcastParser:
    """Parser for podcast RSS feeds and OPML subscription lists.

    Instances hold no per-document state, so one parser can be shared
    between threads as long as each call gets its own source.

    Example:
        parser = PodcastParser()
        if parser.supports_content_type(content_type):
            result = parser.load(response_body, feed_url)
            if isinstance(result, Podcast):
                print(f"{result.title}: {len(result.episodes)} episodes")
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize the parser.

        Args:
            chunk_size: Number of bytes read from a stream per pull
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")
        self.chunk_size = chunk_size
        self.feed_parser = FeedParser()
        self.opml_parser = OPMLParser()

    def supports_content_type(self, content_type: Optional[str]) -> bool:
        return detector.supports_content_type(content_type)

    def try_magic(self, data: Union[bytes, str]) -> bool:
        return detector.try_magic(data)

    def sniff(self, data: Union[bytes, str], content_type: Optional[str] = None) -> bool:
        """Decide whether data looks like something load() can handle.

        A supported declared content type wins; otherwise the data itself is
        sniffed for an rss or opml root tag.
        """
        if content_type and detector.supports_content_type(content_type):
            return True
        return detector.try_magic(data)

    def load(self, source: Source, url: str = "") -> ParseResult:
        """Parse a podcast or OPML document.

        Args:
            source: Document bytes/str or a readable file object
            url: URL the document was fetched from, stored on the result

        Returns:
            Podcast for an RSS document, OpmlContainer for an OPML document

        Raises:
            MalformedDocumentError: If the XML is malformed or a required
                element is missing
            UnrecognizedRootError: If the root element is neither rss nor opml
        """
        cursor = TokenCursor(source, chunk_size=self.chunk_size)

        try:
            while cursor.next() is not TokenType.START_ELEMENT:
                if cursor.at_end:
                    raise MalformedDocumentError("Document has no root element")

            root = cursor.name
            if root == "rss":
                podcast = self.feed_parser.parse(cursor)
                podcast.url = url
                return podcast
            elif root == "opml":
                container = self.opml_parser.parse(cursor)
                container.url = url
                return container

            raise UnrecognizedRootError(root)

        except FeedParseError as e:
            logger.error(f"Failed to parse {url or 'document'}: {e}")
            raise

    def parse_string(self, content: Union[str, bytes], url: str = "") -> ParseResult:
        """Parse a document held in memory."""
        return self.load(content, url)

    def parse_file(self, file_path: Union[str, Path], url: Optional[str] = None) -> ParseResult:
        """
        Parse a podcast or OPML document stored on disk.

        Parameters:
            file_path: Path of the document.
            url: URL to stamp on the result; defaults to the file's file:// URI.

        Raises:
            FileNotFoundError: If the given file path does not exist.
            FeedParseError: If the document cannot be parsed.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"Feed file not found: {file_path}")

        logger.info(f"Parsing feed file: {file_path}")

        if url is None:
            url = file_path.resolve().as_uri()

        with open(file_path, "rb") as f:
            return self.load(f, url)
