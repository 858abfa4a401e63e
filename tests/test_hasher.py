"""
Unit tests for HasherImpl with the xxHash and SHA-1 algorithms.
Verifies full-content digests, chunked reading and error propagation.
"""
import hashlib
import pytest
import xxhash
from linkdedupe.core.hasher import HasherImpl, XXHash128AlgorithmImpl, SHA1AlgorithmImpl, get_algorithm
from linkdedupe.core.models import FileHandle, HashedFile, HashAlgorithmName


def make_handle(root, name, content: bytes) -> FileHandle:
    (root / name).write_bytes(content)
    return FileHandle(root=str(root), path=name, size=len(content))


class TestHasherImpl:
    """Test full-content digest computation."""

    def test_same_content_produces_same_digest(self, temp_dir):
        """Identical files must produce identical 16-byte xxh128 digests."""
        content = b"test content " * 1000
        h1 = make_handle(temp_dir, "a.bin", content)
        h2 = make_handle(temp_dir, "b.bin", content)

        hasher = HasherImpl(XXHash128AlgorithmImpl())
        r1 = hasher.compute_digest(h1)
        r2 = hasher.compute_digest(h2)

        assert isinstance(r1, HashedFile)
        assert r1.digest == r2.digest
        assert len(r1.digest) == 16  # xxh3_128 = 16 bytes
        assert r1.handle is h1

    def test_different_content_produces_different_digests(self, temp_dir):
        h1 = make_handle(temp_dir, "a.bin", b"A" * 1024)
        h2 = make_handle(temp_dir, "b.bin", b"B" * 1024)

        hasher = HasherImpl()
        assert hasher.compute_digest(h1).digest != hasher.compute_digest(h2).digest

    def test_difference_after_first_chunk_is_detected(self, temp_dir):
        """Whole file is hashed, not only a prefix."""
        prefix = b"X" * 4096
        h1 = make_handle(temp_dir, "a.bin", prefix + b"tail-1")
        h2 = make_handle(temp_dir, "b.bin", prefix + b"tail-2")

        hasher = HasherImpl(chunk_size=1024)
        assert hasher.compute_digest(h1).digest != hasher.compute_digest(h2).digest

    def test_chunked_digest_matches_one_shot_digest(self, temp_dir):
        content = bytes(range(256)) * 100
        handle = make_handle(temp_dir, "data.bin", content)

        hasher = HasherImpl(XXHash128AlgorithmImpl(), chunk_size=777)
        assert hasher.compute_digest(handle).digest == xxhash.xxh3_128(content).digest()

    def test_sha1_algorithm(self, temp_dir):
        content = b"hello"
        handle = make_handle(temp_dir, "hello.txt", content)

        hasher = HasherImpl(SHA1AlgorithmImpl())
        digest = hasher.compute_digest(handle).digest
        assert digest == hashlib.sha1(content).digest()
        assert len(digest) == 20

    def test_empty_file_has_a_digest(self, temp_dir):
        h1 = make_handle(temp_dir, "empty1", b"")
        h2 = make_handle(temp_dir, "empty2", b"")

        hasher = HasherImpl()
        assert hasher.compute_digest(h1).digest == hasher.compute_digest(h2).digest

    def test_missing_file_raises_oserror(self, temp_dir):
        """Read errors are not swallowed: they abort the run."""
        handle = FileHandle(root=str(temp_dir), path="missing.txt", size=10)

        with pytest.raises(OSError):
            HasherImpl().compute_digest(handle)

    def test_handle_in_subdirectory(self, temp_dir):
        (temp_dir / "nested" / "deep").mkdir(parents=True)
        (temp_dir / "nested" / "deep" / "f.txt").write_bytes(b"abc")
        handle = FileHandle(root=str(temp_dir), path="nested/deep/f.txt", size=3)

        assert HasherImpl().hash_path(handle.absolute_path) == xxhash.xxh3_128(b"abc").digest()


class TestGetAlgorithm:
    def test_known_algorithms(self):
        assert isinstance(get_algorithm(HashAlgorithmName.XXH128), XXHash128AlgorithmImpl)
        assert isinstance(get_algorithm(HashAlgorithmName.SHA1), SHA1AlgorithmImpl)

    def test_unknown_algorithm(self):
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            get_algorithm("md5")
