"""Exceptions raised while parsing podcast feed documents."""


class FeedParseError(ValueError):
    """Base exception for fatal feed document parse failures."""

    pass


class MalformedDocumentError(FeedParseError):
    """The document is not well-formed XML or lacks a required element."""

    pass


class UnrecognizedRootError(FeedParseError):
    """The document root is neither ``rss`` nor ``opml``."""

    def __init__(self, root_name: str):
        self.root_name = root_name
        super().__init__(f"Unrecognized root element '{root_name}', expected 'rss' or 'opml'")
