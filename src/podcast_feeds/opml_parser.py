"""OPML parser for podcast subscription lists.

Builds a tree of OpmlContainer folders from nested ``<outline>`` elements.
Outlines with ``type="rss"`` become feed stubs; every other outline becomes
a folder whose children are parsed with the same rule.
"""

import logging

from .errors import MalformedDocumentError
from .feed_parser import url_from_text
from .models import OpmlContainer, Podcast
from .xml_cursor import TokenCursor, TokenType, consume_current_element, parse_until_element

logger = logging.getLogger(__name__)


class OPMLParser:
    """Parser for OPML files containing podcast subscriptions.

    Example:
        parser = OPMLParser()
        container = parser.parse(TokenCursor(data))
        for feed in container.iter_feeds():
            print(f"{feed.title}: {feed.url}")
    """

    def parse(self, cursor: TokenCursor) -> OpmlContainer:
        """
        Parse an OPML document from the cursor.

        Documents that wrap all of their content in a single top level folder
        are unwrapped, so the returned container is that folder.

        Returns:
            OpmlContainer: Root folder of the subscription tree.

        Raises:
            MalformedDocumentError: If there is no body element or the XML is malformed.
        """
        if not parse_until_element(cursor, "body"):
            raise MalformedDocumentError("Invalid OPML: missing body element")

        root = OpmlContainer()
        self._parse_outline(cursor, root)
        root = self._collapse(root)

        logger.info(
            f"Parsed OPML: {root.feed_count()} feeds found, "
            f"{len(root.feeds)} at top level, {len(root.containers)} folders"
        )
        return root

    def _parse_outline(self, cursor: TokenCursor, container: OpmlContainer) -> None:
        """
        Parse the children of the current element into `container`, recursing into folders.

        Returns when the end element of the current level is reached.
        """
        while True:
            token = cursor.next()
            if token is TokenType.END_DOCUMENT or token is TokenType.END_ELEMENT:
                return
            if token is not TokenType.START_ELEMENT:
                continue

            if cursor.name != "outline":
                consume_current_element(cursor)
                continue

            attributes = cursor.attributes

            if attributes.get("type") == "rss":
                container.feeds.append(self._extract_feed(attributes))
                # An rss outline is a leaf; drop any children it has.
                consume_current_element(cursor)
            else:
                child = OpmlContainer(name=attributes.get("fullname") or attributes.get("text", ""))
                self._parse_outline(cursor, child)
                container.containers.append(child)

    def _extract_feed(self, attributes: dict) -> Podcast:
        """Create a feed stub from an rss outline's attributes."""
        feed = Podcast(
            title=attributes.get("title") or attributes.get("text", ""),
            description=attributes.get("description", ""),
            image_url_large=url_from_text(attributes.get("imageHref")),
            url=url_from_text(attributes.get("xmlUrl")),
        )
        logger.debug(f"Found feed: {feed.title or feed.url}")
        return feed

    def _collapse(self, container: OpmlContainer) -> OpmlContainer:
        """Unwrap folders that hold nothing but a single sub-folder."""
        while not container.feeds and len(container.containers) == 1:
            logger.debug(f"Collapsing single top level folder {container.containers[0].name!r}")
            container = container.containers[0]
        return container
