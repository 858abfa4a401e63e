"""
Unit tests for DuplicateIndexImpl.
Verifies digest grouping, singleton filtering and first-wins source selection.
"""
import random
import threading
import time
import pytest
from linkdedupe.core.index import DuplicateIndexImpl
from linkdedupe.core.models import FileHandle, HashedFile
from linkdedupe.core.scanner import FileScannerImpl


class FakeHasher:
    """Hasher returning preset digests, optionally with random delays to shuffle completion order."""

    def __init__(self, digests, jitter: bool = False, fail_on=None):
        self.digests = digests
        self.jitter = jitter
        self.fail_on = fail_on
        self.calls = []
        self._lock = threading.Lock()

    def compute_digest(self, handle: FileHandle) -> HashedFile:
        with self._lock:
            self.calls.append(handle.path)
        if self.jitter:
            time.sleep(random.uniform(0, 0.01))
        if handle.path == self.fail_on:
            raise PermissionError(13, "Permission denied", handle.path)
        return HashedFile(handle=handle, digest=self.digests[handle.path])

    def hash_path(self, path: str) -> bytes:
        raise NotImplementedError


def handles(*names):
    return [FileHandle(root="/data", path=n, size=1) for n in names]


class TestDuplicateIndexImpl:
    """Test grouping by digest."""

    def test_groups_identical_content_together(self):
        files = handles("a", "b", "c", "d")
        hasher = FakeHasher({"a": b"1", "b": b"2", "c": b"1", "d": b"2"})

        index = DuplicateIndexImpl(hasher, workers=2)
        result = index.build(files)

        assert set(result) == {b"1", b"2"}
        assert [f.path for f in result[b"1"].files] == ["a", "c"]
        assert [f.path for f in result[b"2"].files] == ["b", "d"]

    def test_singleton_groups_are_removed(self):
        files = handles("a", "b", "c")
        hasher = FakeHasher({"a": b"1", "b": b"2", "c": b"1"})

        index = DuplicateIndexImpl(hasher)
        index.build(files)

        groups = index.groups()
        assert len(groups) == 1
        assert all(g.duplicate_count >= 2 for g in groups)
        assert index.unique_count == 2

    def test_all_unique_files_give_no_groups(self):
        files = handles("a", "b", "c")
        hasher = FakeHasher({"a": b"1", "b": b"2", "c": b"3"})

        index = DuplicateIndexImpl(hasher)
        assert index.build(files) == {}
        assert index.groups() == []
        assert index.unique_count == 3

    def test_empty_input(self):
        index = DuplicateIndexImpl(FakeHasher({}))
        assert index.build([]) == {}
        assert index.unique_count == 0

    def test_every_handle_hashed_once(self):
        files = handles("a", "b", "c", "d", "e")
        hasher = FakeHasher({n: b"x" for n in "abcde"})

        DuplicateIndexImpl(hasher, workers=3).build(files)
        assert sorted(hasher.calls) == ["a", "b", "c", "d", "e"]

    def test_source_is_first_discovered_regardless_of_completion_order(self):
        """Canonical selection is deterministic even when hashing finishes out of order."""
        names = [f"f{i:02d}" for i in range(40)]
        digests = {n: bytes([i % 4]) for i, n in enumerate(names)}

        for _ in range(3):
            index = DuplicateIndexImpl(FakeHasher(digests, jitter=True), workers=8)
            index.build(handles(*names))
            groups = index.groups()

            assert [g.source.path for g in groups] == ["f00", "f01", "f02", "f03"]
            for g in groups:
                member_paths = [f.path for f in g.files]
                assert member_paths == sorted(member_paths)

    def test_groups_follow_first_encounter_order(self):
        files = handles("a", "b", "c", "d")
        hasher = FakeHasher({"a": b"z", "b": b"y", "c": b"y", "d": b"z"})

        index = DuplicateIndexImpl(hasher)
        index.build(files)
        assert [g.digest for g in index.groups()] == [b"z", b"y"]

    def test_hash_error_propagates(self):
        files = handles("a", "b", "c")
        hasher = FakeHasher({"a": b"1", "b": b"1", "c": b"1"}, fail_on="b")

        index = DuplicateIndexImpl(hasher, workers=2)
        with pytest.raises(PermissionError):
            index.build(files)

    def test_groups_before_build_raises(self):
        with pytest.raises(RuntimeError, match="not been built"):
            DuplicateIndexImpl(FakeHasher({})).groups()

    def test_invalid_worker_count(self):
        with pytest.raises(ValueError):
            DuplicateIndexImpl(FakeHasher({}), workers=0)

    def test_progress_callback(self):
        calls = []
        files = handles("a", "b")
        DuplicateIndexImpl(FakeHasher({"a": b"1", "b": b"1"})).build(
            files, progress_callback=lambda s, c, t: calls.append((s, c, t)))
        assert calls == [("hashing", 1, 2), ("hashing", 2, 2)]


class TestIndexWithRealFiles:
    def test_identical_files_share_group_distinct_never(self, test_files, temp_dir):
        scanned = FileScannerImpl(str(temp_dir)).scan()
        index = DuplicateIndexImpl(workers=4)
        index.build(scanned)
        groups = index.groups()

        assert index.unique_count == 4
        assert len(groups) == 2
        by_source = {g.source.path: [f.path for f in g.copies] for g in groups}
        assert by_source == {
            "dup1_a.txt": ["dup1_b.txt", "subdir/dup_in_subdir.txt"],
            "photo_a.jpg": ["photo_b.jpg"],
        }

        contents = [{(temp_dir / f.path).read_bytes() for f in g.files} for g in groups]
        assert all(len(c) == 1 for c in contents)
        assert contents[0] != contents[1]
