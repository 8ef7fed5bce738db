"""RSS parser for podcast metadata and episodes.

Walks a TokenCursor through the ``<channel>`` element of an RSS document
and extracts podcast metadata, including the iTunes and Atom namespace
extensions podcast feeds commonly carry. Elements that are not understood
are skipped whole.
"""

import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import quote, urlparse

from .errors import MalformedDocumentError
from .models import Podcast, PodcastEpisode
from .xml_cursor import TokenCursor, TokenType, consume_current_element, parse_until_element

logger = logging.getLogger(__name__)

# Namespace constants must be lower case.
ATOM_NAMESPACE = "http://www.w3.org/2005/atom"
ITUNES_NAMESPACE = "http://www.itunes.com/dtds/podcast-1.0.dtd"

AUDIO_MIME_PREFIXES = ("audio/", "x-audio/")
AUDIO_EXTENSIONS = (".mp3", ".m4a", ".wav")

# Everything that may legitimately appear in a URL, including "%" so that
# existing escapes survive untouched.
_URL_SAFE_CHARS = "!#$%&'()*+,-./:;=?@[]_~"


def url_from_text(text: Optional[str]) -> str:
    """Build a URL from loosely-formatted feed text.

    Surrounding whitespace is dropped and characters that cannot appear in a
    URL are percent-encoded. Existing escapes are kept as-is.
    """
    if not text:
        return ""
    return quote(text.strip(), safe=_URL_SAFE_CHARS)


class FeedParser:
    """Parser for podcast RSS documents.

    Example:
        parser = FeedParser()
        podcast = parser.parse(TokenCursor(data))
        print(f"Podcast: {podcast.title}")
        for episode in podcast.episodes:
            print(f"  - {episode.title}")
    """

    def parse(self, cursor: TokenCursor) -> Podcast:
        """Parse an RSS document from the cursor.

        The cursor may be anywhere before the ``<channel>`` element,
        typically on the ``<rss>`` start element.

        Args:
            cursor: Token cursor over the document

        Returns:
            Podcast with channel metadata and episodes

        Raises:
            MalformedDocumentError: If there is no channel element or the
                XML is malformed
        """
        if not parse_until_element(cursor, "channel"):
            raise MalformedDocumentError("Invalid RSS: missing channel element")

        podcast = Podcast()
        self._parse_channel(cursor, podcast)

        logger.info(f"Parsed podcast '{podcast.title}' with {len(podcast.episodes)} episodes")
        return podcast

    def _parse_channel(self, cursor: TokenCursor, podcast: Podcast) -> None:
        while True:
            token = cursor.next()
            if token is TokenType.END_DOCUMENT or token is TokenType.END_ELEMENT:
                return
            if token is not TokenType.START_ELEMENT:
                continue

            name = cursor.name
            namespace = cursor.namespace

            if name == "title":
                podcast.title = cursor.read_element_text()
            elif name == "link" and not namespace:
                podcast.link = url_from_text(cursor.read_element_text())
            elif name == "description":
                podcast.description = cursor.read_element_text()
            elif name == "owner" and namespace == ITUNES_NAMESPACE:
                self._parse_itunes_owner(cursor, podcast)
            elif name == "image":
                self._parse_image(cursor, podcast)
            elif name == "copyright":
                podcast.copyright = cursor.read_element_text()
            elif (
                name == "link"
                and namespace == ATOM_NAMESPACE
                and not podcast.url
                and cursor.attributes.get("rel") == "self"
            ):
                href = cursor.attributes.get("href", "")
                podcast.url = url_from_text(cursor.read_element_text() or href)
            elif name == "item":
                self._parse_item(cursor, podcast)
            else:
                consume_current_element(cursor)

    def _parse_image(self, cursor: TokenCursor, podcast: Podcast) -> None:
        while True:
            token = cursor.next()
            if token is TokenType.END_DOCUMENT or token is TokenType.END_ELEMENT:
                return
            if token is not TokenType.START_ELEMENT:
                continue

            if cursor.name == "url":
                podcast.image_url_large = url_from_text(cursor.read_element_text())
            else:
                consume_current_element(cursor)

    def _parse_itunes_owner(self, cursor: TokenCursor, podcast: Podcast) -> None:
        while True:
            token = cursor.next()
            if token is TokenType.END_DOCUMENT or token is TokenType.END_ELEMENT:
                return
            if token is not TokenType.START_ELEMENT:
                continue

            if cursor.name == "name":
                podcast.owner_name = cursor.read_element_text()
            elif cursor.name == "email":
                podcast.owner_email = cursor.read_element_text()
            else:
                consume_current_element(cursor)

    def _parse_item(self, cursor: TokenCursor, podcast: Podcast) -> None:
        """Parse one ``<item>`` and add it to the podcast if it has audio.

        Args:
            cursor: Cursor positioned on the item's start element
            podcast: Podcast that receives the episode
        """
        episode = PodcastEpisode()

        while True:
            token = cursor.next()
            if token is TokenType.END_DOCUMENT or token is TokenType.END_ELEMENT:
                break
            if token is not TokenType.START_ELEMENT:
                continue

            name = cursor.name
            namespace = cursor.namespace

            if name == "title":
                episode.title = cursor.read_element_text()
            elif name == "description":
                episode.description = cursor.read_element_text()
            elif name == "pubDate":
                date = cursor.read_element_text()
                episode.publication_date = self._parse_date(date)
                if episode.publication_date is None:
                    logger.warning(f"Unable to parse date: {date!r}")
            elif name == "duration" and namespace == ITUNES_NAMESPACE:
                episode.duration_secs = self._parse_duration(cursor.read_element_text())
            elif name == "enclosure":
                attributes = cursor.attributes
                url = self._extract_enclosure_url(attributes.get("type", ""), attributes.get("url", ""))
                if url and not episode.url:
                    episode.url = url
                consume_current_element(cursor)
            elif name == "author" and namespace == ITUNES_NAMESPACE:
                episode.author = cursor.read_element_text()
            else:
                consume_current_element(cursor)

        if episode.publication_date is None:
            episode.publication_date = datetime.now(timezone.utc)

        if not podcast.add_episode(episode):
            logger.debug(f"Skipping episode without audio enclosure: {episode.title!r}")

    def _extract_enclosure_url(self, mime_type: str, raw_url: str) -> Optional[str]:
        """Return the enclosure URL if it points at audio.

        Args:
            mime_type: Value of the enclosure's type attribute
            raw_url: Value of the enclosure's url attribute

        Returns:
            The URL, or None if the enclosure is not audio
        """
        url = url_from_text(raw_url)

        if mime_type.startswith(AUDIO_MIME_PREFIXES):
            return url

        # No type given, so fall back to the obvious file extensions
        if not mime_type and urlparse(url).path.lower().endswith(AUDIO_EXTENSIONS):
            return url

        logger.debug(f"Ignoring non-audio enclosure {url!r} ({mime_type or 'no type'})")
        return None

    def _parse_date(self, value: Optional[str]) -> Optional[datetime]:
        """Parse an RFC 822 date into an aware datetime.

        Dates without a zone offset are taken to be UTC.

        Args:
            value: Date string, e.g. "Mon, 01 Jan 2024 12:00:00 +0000"

        Returns:
            The datetime, or None if the string cannot be parsed
        """
        if not value or not value.strip():
            return None

        try:
            parsed = parsedate_to_datetime(value.strip())
        except (TypeError, ValueError, IndexError):
            return None

        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    def _parse_duration(self, value: Optional[str]) -> Optional[int]:
        """Parse an iTunes duration into seconds.

        Handles:
        - MM:SS: "45:30"
        - HH:MM:SS: "1:00:00" (further parts are ignored)

        Args:
            value: Duration string

        Returns:
            Duration in seconds or None
        """
        if not value:
            return None

        # http://www.apple.com/itunes/podcasts/specs.html
        parts = value.strip().split(":")
        try:
            if len(parts) == 2:
                return int(parts[0]) * 60 + int(parts[1])
            elif len(parts) >= 3:
                return int(parts[0]) * 3600 + int(parts[1]) * 60 + int(parts[2])
        except ValueError:
            logger.debug(f"Malformed duration: {value!r}")

        return None
