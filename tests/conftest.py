"""
Shared fixtures for deduplication tests.
Creates isolated temporary directories with controlled test files.
"""
import os
import pytest
import tempfile
from pathlib import Path
from typing import Dict


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory (symlinks resolved), auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(os.path.realpath(tmpdir))


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 2 identical .txt files at the root + 1 more copy in a subdirectory
    - 2 identical .jpg files
    - 2 unique files (different content)
    - 1 hidden file with duplicate content (skipped unless hidden files are included)
    - 1 symlink (never scanned)
    """
    files = {}

    # Duplicate set #1 (1KB of 'A'), three members
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "photo_a.jpg"
    files["dup2_b"] = temp_dir / "photo_b.jpg"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.png"
    files["unique2"].write_bytes(b"D" * 2500)

    # Hidden copy of set #1
    files["hidden"] = temp_dir / ".hidden.txt"
    files["hidden"].write_bytes(content_a)

    # Existing symlink to a duplicate
    files["link"] = temp_dir / "link.txt"
    files["link"].symlink_to("dup1_a.txt")

    return files


def _snapshot(root: Path) -> Dict[str, tuple]:
    """Records every entry under root: link target for symlinks, bytes for files."""
    state = {}
    for dirpath, dirnames, filenames in os.walk(root):
        for name in dirnames + filenames:
            path = Path(dirpath) / name
            rel = str(path.relative_to(root))
            if path.is_symlink():
                state[rel] = ("link", os.readlink(path))
            elif path.is_file():
                state[rel] = ("file", path.read_bytes())
            else:
                state[rel] = ("dir", None)
    return state


@pytest.fixture
def snapshot():
    """Returns a function that captures the state of a directory tree."""
    return _snapshot
