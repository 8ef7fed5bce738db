"""
Pytest configuration and fixtures for podcast-feeds tests.

This module runs before any test imports, setting up the test environment.
Environment variables are explicitly set to ensure deterministic test behavior
regardless of external environment configuration.
"""

import os

import pytest

from podcast_feeds.podcast_parser import PodcastParser

# Force defaults for the settings Config reads
os.environ["PODCAST_FEEDS_LOG_LEVEL"] = "INFO"
os.environ.pop("PODCAST_FEEDS_READ_CHUNK_SIZE", None)


@pytest.fixture
def podcast_parser():
    """
    Provide a new PodcastParser instance for tests.

    Returns:
        PodcastParser: A parser with the default read chunk size.
    """
    return PodcastParser()
