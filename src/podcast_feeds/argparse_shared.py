import argparse

def get_base_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Parse podcast RSS feeds and OPML subscription lists")
    parser.add_argument("-e", "--env-file", help="Path to a custom .env file", default=None)
    return parser

def add_log_level_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-l", "--log-level", help="Set log level (DEBUG, INFO, WARNING, ERROR)", default=None)

def add_url_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-u", "--url", help="URL the document was fetched from (defaults to the file's URI)", default=None)

def add_content_type_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-t", "--content-type", help="Declared Content-Type of the document", default=None)

def add_json_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--json", action="store_true", help="Print the parsed structure as JSON")
