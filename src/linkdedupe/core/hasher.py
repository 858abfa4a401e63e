"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file hashing using FileHandle objects and pluggable hash algorithms.

HasherImpl reads the whole file in fixed-size chunks and returns a HashedFile.
Each handle is hashed once per run by the duplicate index; read errors are not
caught here and abort the run.
"""

import hashlib
import logging

import xxhash

from linkdedupe.core.interfaces import Hasher, HashAlgorithm, HashState
from linkdedupe.core.models import FileHandle, HashedFile, HashAlgorithmName

logger = logging.getLogger(__name__)

READ_CHUNK_SIZE = 1024 * 1024  # 1 MiB


# Use the same way to implement and use any other hashing algorithm
class XXHash128AlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> HashState:
        return xxhash.xxh3_128()


class SHA1AlgorithmImpl(HashAlgorithm):
    @staticmethod
    def new() -> HashState:
        return hashlib.sha1()


_ALGORITHMS = {
    HashAlgorithmName.XXH128: XXHash128AlgorithmImpl,
    HashAlgorithmName.SHA1: SHA1AlgorithmImpl,
}


def get_algorithm(name: HashAlgorithmName) -> HashAlgorithm:
    """Returns the algorithm implementation registered for `name`."""
    try:
        return _ALGORITHMS[name]()
    except KeyError:
        raise ValueError(f"Unsupported hash algorithm: {name!r}")


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    """

    def __init__(self, algorithm: HashAlgorithm = None, chunk_size: int = READ_CHUNK_SIZE):
        self.algorithm = algorithm or XXHash128AlgorithmImpl()
        self.chunk_size = chunk_size

    def compute_digest(self, handle: FileHandle) -> HashedFile:
        """Reads the file behind `handle` and returns it with its digest."""
        digest = self.hash_path(handle.absolute_path)
        logger.debug(f"Hashed {handle.path}: {digest.hex()}")
        return HashedFile(handle=handle, digest=digest)

    def hash_path(self, path: str) -> bytes:
        state = self.algorithm.new()
        with open(path, 'rb') as f:
            while True:
                chunk = f.read(self.chunk_size)
                if not chunk:
                    break
                state.update(chunk)
        return state.digest()
