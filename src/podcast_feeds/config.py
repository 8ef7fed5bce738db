import logging
import os

from dotenv import load_dotenv

from .xml_cursor import DEFAULT_CHUNK_SIZE

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Config:
    def __init__(self, env_file=None):
        """
        Initialize configuration by loading environment variables and setting default attributes.

        Loads environment variables from the provided .env file path when `env_file` is given; otherwise loads from the default environment.
        Parameters:
            env_file (str | None): Optional path to a .env file to load environment variables from.

        Raises:
            ValueError: If a configured value is out of range.
        """
        if env_file:
            load_dotenv(env_file)
        else:
            load_dotenv()

        # Logging
        self.LOG_LEVEL = os.getenv("PODCAST_FEEDS_LOG_LEVEL", "INFO").upper()
        if self.LOG_LEVEL not in LOG_LEVELS:
            raise ValueError(
                f"PODCAST_FEEDS_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: {self.LOG_LEVEL}"
            )

        # Bytes pulled from a stream per read while parsing
        self.READ_CHUNK_SIZE = int(
            os.getenv("PODCAST_FEEDS_READ_CHUNK_SIZE", str(DEFAULT_CHUNK_SIZE))
        )
        if self.READ_CHUNK_SIZE <= 0:
            raise ValueError(
                f"PODCAST_FEEDS_READ_CHUNK_SIZE must be positive, got {self.READ_CHUNK_SIZE}"
            )

    @property
    def log_level(self) -> int:
        return getattr(logging, self.LOG_LEVEL)
