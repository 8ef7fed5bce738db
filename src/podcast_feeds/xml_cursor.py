"""Forward-only token cursor over an XML document.

Wraps ElementTree's pull parser so the feed and OPML parsers can walk a
document one token at a time, the way a recursive-descent parser expects,
without building the whole tree up front and without seeking backwards.

Namespaces are compared as lower-cased URI strings. Prefix remapping and
namespace scoping rules are not modelled.
"""

import enum
import io
import logging
import xml.etree.ElementTree as ET
from collections import deque
from typing import Deque, Dict, Optional, Tuple, Union

from .errors import MalformedDocumentError

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64 * 1024

Source = Union[bytes, bytearray, str, io.IOBase]


class TokenType(enum.Enum):
    """Kinds of token produced by TokenCursor.next()."""

    START_ELEMENT = "start"
    END_ELEMENT = "end"
    TEXT = "text"
    END_DOCUMENT = "end_document"


def _split_tag(tag: str) -> Tuple[str, str]:
    """Split an ElementTree ``{uri}local`` tag into (namespace, local name)."""
    if tag.startswith("{"):
        namespace, _, name = tag[1:].partition("}")
        return namespace, name
    return "", tag


class TokenCursor:
    """Pull-style cursor over an XML byte stream.

    Example:
        cursor = TokenCursor(b"<rss><channel><title>Hi</title></channel></rss>")
        while cursor.next() is not TokenType.END_DOCUMENT:
            if cursor.token_type is TokenType.START_ELEMENT and cursor.name == "title":
                print(cursor.read_element_text())
    """

    def __init__(self, source: Source, chunk_size: int = DEFAULT_CHUNK_SIZE):
        """Initialize the cursor.

        Args:
            source: Document as bytes/str, or a file object opened in
                binary or text mode.
            chunk_size: Number of bytes (or characters) read per pull from
                a file object.
        """
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {chunk_size}")

        if isinstance(source, (bytes, bytearray)):
            self._stream = io.BytesIO(bytes(source))
        elif isinstance(source, str):
            self._stream = io.StringIO(source)
        elif hasattr(source, "read"):
            self._stream = source
        else:
            raise TypeError(f"Unsupported XML source type: {type(source).__name__}")

        self._chunk_size = chunk_size
        self._parser: Optional[ET.XMLPullParser] = ET.XMLPullParser(events=("start", "end"))
        self._events: Deque[Tuple[str, ET.Element]] = deque()
        self._previous: Optional[Tuple[str, ET.Element]] = None
        self._pending: Optional[Tuple[str, ET.Element]] = None

        self.token_type: Optional[TokenType] = None
        self.depth = 0
        self.text = ""
        self._element: Optional[ET.Element] = None
        self._name = ""
        self._namespace = ""

    @property
    def at_end(self) -> bool:
        return self.token_type is TokenType.END_DOCUMENT

    @property
    def name(self) -> str:
        """Local name of the current element, or "" for non-element tokens."""
        return self._name

    @property
    def namespace(self) -> str:
        """Lower-cased namespace URI of the current element."""
        return self._namespace

    @property
    def attributes(self) -> Dict[str, str]:
        """Attributes of the current element.

        Reading attributes does not move the cursor.
        """
        if self._element is None:
            return {}
        return dict(self._element.attrib)

    def next(self) -> TokenType:
        """Advance to the next token and return its type.

        Raises:
            MalformedDocumentError: If the document is not well-formed.
        """
        if self.at_end:
            return self.token_type

        if self._pending is not None:
            event, element = self._pending
            self._pending = None
            return self._enter(event, element)

        item = self._next_event()
        if item is None:
            self._set_token(TokenType.END_DOCUMENT)
            return self.token_type

        text = self._preceding_text()
        self._previous = item
        if text:
            self._pending = item
            self._set_token(TokenType.TEXT)
            self.text = text
            return self.token_type

        return self._enter(*item)

    def read_element_text(self) -> str:
        """Return the text of the current element and move past its end.

        Must be called while positioned on a start element. Text from any
        nested elements is concatenated in document order.

        Raises:
            ValueError: If the cursor is not on a start element.
            MalformedDocumentError: If the document is not well-formed.
        """
        if self.token_type is not TokenType.START_ELEMENT or self._element is None:
            raise ValueError("read_element_text() requires a start element")

        element = self._element
        target_depth = self.depth - 1
        while True:
            token = self.next()
            if token is TokenType.END_DOCUMENT:
                break
            if token is TokenType.END_ELEMENT and self.depth == target_depth:
                break

        return "".join(element.itertext())

    def _enter(self, event: str, element: ET.Element) -> TokenType:
        if event == "start":
            self.depth += 1
            self._set_token(TokenType.START_ELEMENT, element)
        else:
            self.depth -= 1
            self._set_token(TokenType.END_ELEMENT, element)
        return self.token_type

    def _set_token(self, token_type: TokenType, element: Optional[ET.Element] = None) -> None:
        self.token_type = token_type
        self.text = ""
        self._element = element
        if element is None:
            self._namespace, self._name = "", ""
        else:
            namespace, self._name = _split_tag(element.tag)
            self._namespace = namespace.lower()

    def _preceding_text(self) -> str:
        """Character data between the previous event and the one just pulled.

        ElementTree flushes pending character data into ``text`` or ``tail``
        before it reports the next start or end event, so it is complete by
        the time the event reaches us.
        """
        if self._previous is None:
            return ""
        event, element = self._previous
        if event == "start":
            return element.text or ""
        return element.tail or ""

    def _next_event(self) -> Optional[Tuple[str, ET.Element]]:
        while not self._events:
            if self._parser is None:
                return None
            self._feed_chunk()
        return self._events.popleft()

    def _feed_chunk(self) -> None:
        parser = self._parser
        try:
            data = self._stream.read(self._chunk_size)
            if data:
                parser.feed(data)
            else:
                self._parser = None
                parser.close()
            # Syntax errors seen by feed() are queued and re-raised here.
            self._events.extend(parser.read_events())
        except ET.ParseError as e:
            self._parser = None
            raise MalformedDocumentError(f"Malformed XML document: {e}") from e


def consume_current_element(cursor: TokenCursor) -> None:
    """Skip the element the cursor is positioned on, including all descendants.

    Leaves the cursor on the matching end element. Does nothing if the
    cursor is not on a start element. Returns early at end of document.
    """
    if cursor.token_type is not TokenType.START_ELEMENT:
        return

    skipped = cursor.name
    target_depth = cursor.depth - 1
    while True:
        token = cursor.next()
        if token is TokenType.END_DOCUMENT:
            return
        if token is TokenType.END_ELEMENT and cursor.depth == target_depth:
            logger.debug(f"Skipped element <{skipped}>")
            return


def parse_until_element(cursor: TokenCursor, name: str) -> bool:
    """Advance until a start element with the given local name.

    Returns:
        True if the element was found, False if the document ended first.
    """
    while True:
        token = cursor.next()
        if token is TokenType.END_DOCUMENT:
            return False
        if token is TokenType.START_ELEMENT and cursor.name == name:
            return True
