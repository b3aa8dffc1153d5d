"""
Search Configuration - Centralized settings for the text search.

Uses environment variables with sensible defaults. The virtual filesystem
prefixes are fixed and are not read from the environment.
"""

import os
from dataclasses import dataclass, field
from typing import Tuple


# Entering these would most likely loop forever or exhaust memory
VIRTUAL_FILESYSTEMS: Tuple[str, ...] = (
    "/proc",
    "/sys",
    "/dev",
    "/run",
)


def default_scanner_concurrency() -> int:
    """Half of the available cores, at least one."""
    return max(1, (os.cpu_count() or 1) // 2)


@dataclass
class SearchConfig:
    """
    Configuration for one or more searches.

    Concurrency defaults to half of the cores to avoid overwhelming
    the disk and the CPU with simultaneous reads.
    """

    # --- Concurrency Limits ---
    scanner_concurrency: int = field(default_factory=default_scanner_concurrency)
    queue_size: int = 1024          # Buffered occurrences before scanners wait

    # --- Reading ---
    encoding: str = "utf-8"
    encoding_errors: str = "replace"  # Malformed bytes never abort a file
    read_chunk_hint: int = 64 * 1024  # Bytes of lines read per thread hop

    # --- Exclusions ---
    virtual_filesystems: Tuple[str, ...] = VIRTUAL_FILESYSTEMS

    def __post_init__(self):
        """Clamp limits and normalize the excluded prefixes."""
        self.scanner_concurrency = max(1, int(self.scanner_concurrency))
        self.queue_size = max(1, int(self.queue_size))
        self.read_chunk_hint = max(1, int(self.read_chunk_hint))
        self.virtual_filesystems = tuple(
            os.path.abspath(p) for p in self.virtual_filesystems
        )

    @classmethod
    def from_env(cls) -> "SearchConfig":
        """
        Create config from environment variables.

        Supported env vars:
            TEXTSEARCH_SCANNER_CONCURRENCY: Files read at the same time
            TEXTSEARCH_QUEUE_SIZE: Occurrences buffered for the consumer
            TEXTSEARCH_ENCODING: Text encoding used to read files
            TEXTSEARCH_ENCODING_ERRORS: Codec error handler (replace, ignore, strict)
            TEXTSEARCH_READ_CHUNK_HINT: Bytes of lines read per chunk
        """
        config = cls()

        if scanner := os.environ.get("TEXTSEARCH_SCANNER_CONCURRENCY"):
            config.scanner_concurrency = int(scanner)

        if queue_size := os.environ.get("TEXTSEARCH_QUEUE_SIZE"):
            config.queue_size = int(queue_size)

        if encoding := os.environ.get("TEXTSEARCH_ENCODING"):
            config.encoding = encoding

        if errors := os.environ.get("TEXTSEARCH_ENCODING_ERRORS"):
            config.encoding_errors = errors

        if chunk := os.environ.get("TEXTSEARCH_READ_CHUNK_HINT"):
            config.read_chunk_hint = int(chunk)

        config.__post_init__()
        return config


# Singleton default config
_default_config: SearchConfig | None = None


def get_config() -> SearchConfig:
    """Get the default configuration (singleton)."""
    global _default_config
    if _default_config is None:
        _default_config = SearchConfig.from_env()
    return _default_config


def set_config(config: SearchConfig | None) -> None:
    """Override the default configuration (for testing)."""
    global _default_config
    _default_config = config
