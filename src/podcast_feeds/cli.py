"""Command line tool for inspecting podcast feeds and OPML files.

Sniffs a local document, parses it and prints either a readable summary
or the parsed structure as JSON.
"""

import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from .argparse_shared import (
    add_content_type_argument,
    add_json_argument,
    add_log_level_argument,
    add_url_argument,
    get_base_parser,
)
from .config import Config
from .errors import FeedParseError
from .models import OpmlContainer, Podcast
from .podcast_parser import PodcastParser

logger = logging.getLogger(__name__)


def build_parser():
    parser = get_base_parser()
    add_log_level_argument(parser)
    add_url_argument(parser)
    add_content_type_argument(parser)
    add_json_argument(parser)
    parser.add_argument("file", help="Path to an RSS feed or OPML file")
    return parser


def print_podcast(podcast: Podcast) -> None:
    print(f"\nPodcast: {podcast.title}")
    if podcast.url:
        print(f"Feed URL: {podcast.url}")
    if podcast.link:
        print(f"Website: {podcast.link}")
    if podcast.owner_name or podcast.owner_email:
        print(f"Owner: {podcast.owner_name} <{podcast.owner_email}>")
    print(f"Episodes: {len(podcast.episodes)}")
    for episode in podcast.episodes:
        date = episode.publication_date.strftime("%Y-%m-%d") if episode.publication_date else "?"
        duration = f" ({episode.duration_secs}s)" if episode.duration_secs is not None else ""
        print(f"  - [{date}] {episode.title}{duration}")


def print_container(container: OpmlContainer, indent: int = 0) -> None:
    pad = "  " * indent
    print(f"{pad}{container.name or '(root)'}/")
    for feed in container.feeds:
        print(f"{pad}  - {feed.title}: {feed.url}")
    for child in container.containers:
        print_container(child, indent + 1)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the command line tool.

    Returns:
        Process exit status: 0 on success, 1 if the document was rejected
        or could not be parsed.
    """
    args = build_parser().parse_args(argv)

    config = Config(env_file=args.env_file)
    logging.basicConfig(
        level=(args.log_level or config.LOG_LEVEL).upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    path = Path(args.file)
    if not path.exists():
        logger.error(f"File not found: {path}")
        return 1

    data = path.read_bytes()
    parser = PodcastParser(chunk_size=config.READ_CHUNK_SIZE)

    if not parser.sniff(data, args.content_type):
        logger.error(f"{path} does not look like a podcast feed or OPML file")
        return 1

    url = args.url if args.url is not None else path.resolve().as_uri()
    try:
        result = parser.load(data, url)
    except FeedParseError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(asdict(result), indent=2, default=str))
    elif isinstance(result, Podcast):
        print_podcast(result)
    else:
        print(f"\nOPML: {result.feed_count()} feeds")
        print_container(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
