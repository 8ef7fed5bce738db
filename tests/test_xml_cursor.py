"""Tests for the XML token cursor and element skipping helpers."""

import io

import pytest

from podcast_feeds.errors import MalformedDocumentError
from podcast_feeds.xml_cursor import (
    TokenCursor,
    TokenType,
    consume_current_element,
    parse_until_element,
)


def collect(cursor):
    """Drain the cursor, returning (token type, name) pairs."""
    tokens = []
    while True:
        token = cursor.next()
        tokens.append((token, cursor.name))
        if token is TokenType.END_DOCUMENT:
            return tokens


class TestTokenCursor:
    """Tests for token iteration."""

    def test_token_sequence(self):
        """Test start, text and end tokens are produced in document order."""
        cursor = TokenCursor(b"<a><b>hi</b><c/></a>")

        assert collect(cursor) == [
            (TokenType.START_ELEMENT, "a"),
            (TokenType.START_ELEMENT, "b"),
            (TokenType.TEXT, ""),
            (TokenType.END_ELEMENT, "b"),
            (TokenType.START_ELEMENT, "c"),
            (TokenType.END_ELEMENT, "c"),
            (TokenType.END_ELEMENT, "a"),
            (TokenType.END_DOCUMENT, ""),
        ]

    def test_text_token_content(self):
        """Test that text tokens expose their character data."""
        cursor = TokenCursor(b"<a>hello<b/>world</a>")

        assert cursor.next() is TokenType.START_ELEMENT
        assert cursor.next() is TokenType.TEXT
        assert cursor.text == "hello"
        assert cursor.next() is TokenType.START_ELEMENT
        assert cursor.next() is TokenType.END_ELEMENT
        assert cursor.next() is TokenType.TEXT
        assert cursor.text == "world"
        assert cursor.next() is TokenType.END_ELEMENT
        assert cursor.name == "a"

    def test_depth_tracking(self):
        """Test depth follows element nesting."""
        cursor = TokenCursor(b"<a><b><c/></b></a>")

        depths = []
        while cursor.next() is not TokenType.END_DOCUMENT:
            depths.append(cursor.depth)

        assert depths == [1, 2, 3, 2, 1, 0]

    def test_namespace_is_lower_cased(self):
        """Test namespace URIs are lower-cased and separated from the name."""
        cursor = TokenCursor(
            b'<rss xmlns:atom="http://www.w3.org/2005/Atom"><atom:link rel="self"/></rss>'
        )

        cursor.next()
        assert cursor.name == "rss"
        assert cursor.namespace == ""

        cursor.next()
        assert cursor.name == "link"
        assert cursor.namespace == "http://www.w3.org/2005/atom"

    def test_attributes(self):
        """Test attributes are available without consuming the element."""
        cursor = TokenCursor(b'<enclosure url="https://example.com/a.mp3" type="audio/mpeg"/>')

        cursor.next()
        assert cursor.attributes == {"url": "https://example.com/a.mp3", "type": "audio/mpeg"}
        assert cursor.attributes["type"] == "audio/mpeg"
        assert cursor.next() is TokenType.END_ELEMENT

    def test_end_document_is_sticky(self):
        """Test that next() keeps returning END_DOCUMENT once reached."""
        cursor = TokenCursor(b"<a/>")
        collect(cursor)

        assert cursor.at_end
        assert cursor.next() is TokenType.END_DOCUMENT

    def test_reads_stream_in_chunks(self):
        """Test reading a file object a few bytes at a time."""
        data = b"<root><title>Chunked document</title></root>"
        cursor = TokenCursor(io.BytesIO(data), chunk_size=3)

        assert parse_until_element(cursor, "title")
        assert cursor.read_element_text() == "Chunked document"

    def test_accepts_str_source(self):
        """Test that str documents are accepted."""
        cursor = TokenCursor("<root><title>café</title></root>")

        assert parse_until_element(cursor, "title")
        assert cursor.read_element_text() == "café"

    def test_rejects_unsupported_source(self):
        """Test that unsupported source types raise TypeError."""
        with pytest.raises(TypeError):
            TokenCursor(42)

    def test_rejects_non_positive_chunk_size(self):
        """Test that chunk sizes must be positive."""
        with pytest.raises(ValueError, match="chunk_size"):
            TokenCursor(b"<a/>", chunk_size=0)

    def test_malformed_document(self):
        """Test that mismatched tags raise MalformedDocumentError."""
        cursor = TokenCursor(b"<a><b></a>")

        with pytest.raises(MalformedDocumentError):
            collect(cursor)

    def test_empty_document(self):
        """Test that an empty document is malformed."""
        cursor = TokenCursor(b"")

        with pytest.raises(MalformedDocumentError):
            cursor.next()


class TestReadElementText:
    """Tests for read_element_text."""

    def test_reads_text_and_moves_past_end(self):
        """Test the cursor ends on the element's end tag."""
        cursor = TokenCursor(b"<a><title>  Spaced Title </title><b/></a>")
        parse_until_element(cursor, "title")

        assert cursor.read_element_text() == "  Spaced Title "
        assert cursor.token_type is TokenType.END_ELEMENT
        assert cursor.name == "title"
        assert cursor.next() is TokenType.START_ELEMENT
        assert cursor.name == "b"

    def test_empty_element(self):
        """Test that an empty element yields an empty string."""
        cursor = TokenCursor(b"<a><title/></a>")
        parse_until_element(cursor, "title")

        assert cursor.read_element_text() == ""

    def test_cdata_and_entities(self):
        """Test that CDATA sections and entities are decoded."""
        cursor = TokenCursor(b"<a><d><![CDATA[<p>Hi</p>]]> &amp; more</d></a>")
        parse_until_element(cursor, "d")

        assert cursor.read_element_text() == "<p>Hi</p> & more"

    def test_requires_start_element(self):
        """Test that calling off a start element raises ValueError."""
        cursor = TokenCursor(b"<a/>")

        with pytest.raises(ValueError, match="start element"):
            cursor.read_element_text()


class TestConsumeCurrentElement:
    """Tests for skipping whole elements."""

    def test_skips_nested_subtree(self):
        """Test the cursor lands on the matching end element."""
        cursor = TokenCursor(
            b"<root><skip><x><skip><y>text</y></skip></x></skip><keep/></root>"
        )
        parse_until_element(cursor, "skip")

        consume_current_element(cursor)

        assert cursor.token_type is TokenType.END_ELEMENT
        assert cursor.name == "skip"
        assert cursor.depth == 1
        assert cursor.next() is TokenType.START_ELEMENT
        assert cursor.name == "keep"

    def test_skips_empty_element(self):
        """Test skipping a self-closing element."""
        cursor = TokenCursor(b"<root><skip/><keep/></root>")
        parse_until_element(cursor, "skip")

        consume_current_element(cursor)

        assert cursor.next() is TokenType.START_ELEMENT
        assert cursor.name == "keep"

    def test_noop_when_not_on_start_element(self):
        """Test nothing is consumed when not on a start element."""
        cursor = TokenCursor(b"<root><a/></root>")

        consume_current_element(cursor)

        assert cursor.token_type is None
        assert cursor.next() is TokenType.START_ELEMENT
        assert cursor.name == "root"


class TestParseUntilElement:
    """Tests for parse_until_element."""

    def test_finds_nested_element(self):
        """Test locating an element at any depth."""
        cursor = TokenCursor(b"<rss><junk/><channel><title>T</title></channel></rss>")

        assert parse_until_element(cursor, "channel") is True
        assert cursor.name == "channel"
        assert cursor.depth == 2

    def test_missing_element(self):
        """Test that False is returned at end of document."""
        cursor = TokenCursor(b"<rss><junk/></rss>")

        assert parse_until_element(cursor, "channel") is False
        assert cursor.at_end
