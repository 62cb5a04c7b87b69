"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

hasher.py
Implements file fingerprinting with pluggable hash algorithms.

- Partial hash: digest of at most the first PARTIAL_HASH_SIZE bytes
- Full hash: digest of the whole file, streamed in READ_CHUNK_SIZE windows
Read errors propagate as OSError; the grouper decides what to do with them.
"""

from typing import BinaryIO, Optional

import xxhash

from dupfinder.core.models import SizedFile, PartialHashedFile
from dupfinder.core.interfaces import Hasher, HashAlgorithm


class FingerprintConfig:
    PARTIAL_HASH_SIZE = 8 * 1024  # Leading bytes hashed by the partial stage
    READ_CHUNK_SIZE = 8 * 1024    # Window for streaming reads and comparisons


# Use the same way to implement and use any other hashing algorithm
class XXHash128AlgorithmImpl(HashAlgorithm):
    """128-bit xxHash3. Fast, deterministic, not cryptographic."""

    def __init__(self, chunk_size: int = FingerprintConfig.READ_CHUNK_SIZE):
        self.chunk_size = chunk_size

    def hash_stream(self, stream: BinaryIO, limit: Optional[int] = None) -> bytes:
        hasher = xxhash.xxh3_128()
        remaining = limit
        while remaining is None or remaining > 0:
            to_read = self.chunk_size if remaining is None else min(self.chunk_size, remaining)
            chunk = stream.read(to_read)
            if not chunk:
                break
            hasher.update(chunk)
            if remaining is not None:
                remaining -= len(chunk)
        return hasher.digest()


class HasherImpl(Hasher):
    """
    A hasher implementation that supports any algorithm via the HashAlgorithm interface.
    File handles are opened per call and closed before returning.
    """

    def __init__(self, algorithm: Optional[HashAlgorithm] = None,
                 partial_size: int = FingerprintConfig.PARTIAL_HASH_SIZE):
        self.algorithm = algorithm or XXHash128AlgorithmImpl()
        self.partial_size = partial_size

    def compute_partial_hash(self, file: SizedFile) -> bytes:
        """Hash of the first bytes of a file (fewer if the file is shorter)."""
        with open(file.path, 'rb') as f:
            return self.algorithm.hash_stream(f, limit=self.partial_size)

    def compute_full_hash(self, file: PartialHashedFile) -> bytes:
        """Hash of the entire file content."""
        with open(file.path, 'rb') as f:
            return self.algorithm.hash_stream(f)
