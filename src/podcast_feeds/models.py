"""Data models for parsed podcast feeds and OPML subscription lists."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Iterator, List, Optional


@dataclass
class PodcastEpisode:
    """A single episode parsed from an RSS ``<item>``."""

    title: str = ""
    description: str = ""
    author: str = ""
    url: str = ""
    publication_date: Optional[datetime] = None
    duration_secs: Optional[int] = None


@dataclass
class Podcast:
    """Podcast channel metadata and its episodes.

    Also used as the feed stub stored in an OpmlContainer, in which case
    only title, description, image_url_large and url are filled in.
    """

    title: str = ""
    link: str = ""
    description: str = ""
    copyright: str = ""
    url: str = ""
    image_url_large: str = ""
    owner_name: str = ""
    owner_email: str = ""
    episodes: List[PodcastEpisode] = field(default_factory=list)

    def add_episode(self, episode: PodcastEpisode) -> bool:
        """Append an episode if it has a media URL.

        Returns:
            True if the episode was added, False if it was dropped.
        """
        if not episode.url:
            return False
        self.episodes.append(episode)
        return True


@dataclass
class OpmlContainer:
    """A folder of an OPML document: feed stubs plus nested folders."""

    name: str = ""
    url: str = ""
    feeds: List[Podcast] = field(default_factory=list)
    containers: List["OpmlContainer"] = field(default_factory=list)

    def iter_feeds(self) -> Iterator[Podcast]:
        """Yield every feed in this container and its descendants, depth first."""
        yield from self.feeds
        for child in self.containers:
            yield from child.iter_feeds()

    def feed_count(self) -> int:
        return sum(1 for _ in self.iter_feeds())
