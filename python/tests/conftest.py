"""
Test Configuration - Shared fixtures for search tests.

Uses pytest fixtures to create isolated test environments.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Generator

import pytest

from textsearch.config import SearchConfig, set_config


def is_privileged() -> bool:
    """Root can read anything, so permission tests are meaningless there."""
    return hasattr(os, "geteuid") and os.geteuid() == 0


requires_permissions = pytest.mark.skipif(
    os.name == "nt" or is_privileged(),
    reason="needs POSIX permissions enforced for the current user",
)


@pytest.fixture
def deny_read(monkeypatch) -> Callable[[Path], None]:
    """Make os.access report chosen paths as unreadable, even for root."""
    denied: set[str] = set()
    real_access = os.access

    def access(path, mode, *args, **kwargs):
        if os.path.abspath(path) in denied and mode & os.R_OK:
            return False
        return real_access(path, mode, *args, **kwargs)

    monkeypatch.setattr(os, "access", access)
    return lambda path: denied.add(os.path.abspath(path))


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="textsearch_test_")
    # Resolve to handle macOS /var -> /private/var symlink
    resolved = Path(tmp).resolve()
    yield resolved
    # Restore permissions changed by tests so cleanup can succeed
    for base, dirs, files in os.walk(resolved):
        for name in dirs + files:
            path = os.path.join(base, name)
            if not os.path.islink(path):
                os.chmod(path, 0o700)
    shutil.rmtree(str(resolved), ignore_errors=True)


@pytest.fixture
def test_config() -> Generator[SearchConfig, None, None]:
    """Create an isolated test configuration."""
    config = SearchConfig(
        scanner_concurrency=2,
        queue_size=4,
        read_chunk_hint=64,
    )
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def sample_files(temp_dir: Path) -> dict[str, Path]:
    """Create sample files for testing."""
    files = {}

    # Plain match
    txt = temp_dir / "sample.txt"
    txt.write_text("First line \nSecond line with a PATTERN \nThird line")
    files["txt"] = txt

    # No match
    empty = temp_dir / "nothing.txt"
    empty.write_text("Nothing here...")
    files["nothing"] = empty

    # Nested file
    nested_dir = temp_dir / "subdir" / "nested"
    nested_dir.mkdir(parents=True)
    nested = nested_dir / "deep.txt"
    nested.write_text("A deeply nested PATTERN file.")
    files["nested"] = nested

    # Hidden file (should be skipped by default)
    hidden = temp_dir / ".hidden"
    hidden.write_text("PATTERN in a hidden file")
    files["hidden"] = hidden

    # File in a hidden directory (should be skipped by default)
    hidden_dir = temp_dir / ".config"
    hidden_dir.mkdir()
    inside_hidden = hidden_dir / "settings.txt"
    inside_hidden.write_text("PATTERN=1")
    files["inside_hidden"] = inside_hidden

    return files
