"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/comparator.py
Byte-exact file comparison, the last line of defence against hash collisions.
"""

import os

from dupfinder.core.hasher import FingerprintConfig
from dupfinder.core.interfaces import FileComparator


class ByteComparatorImpl(FileComparator):
    """
    Compares two files chunk by chunk in lock-step.
    Files are equal only when every chunk pair matches and both reach EOF together.
    """

    def __init__(self, chunk_size: int = FingerprintConfig.READ_CHUNK_SIZE):
        self.chunk_size = chunk_size

    @staticmethod
    def is_same_file(path1: str, path2: str) -> bool:
        """True when both paths point at the same inode (hard links)."""
        try:
            return os.path.samefile(path1, path2)
        except OSError:
            return False

    def contents_equal(self, path1: str, path2: str) -> bool:
        with open(path1, 'rb') as f1, open(path2, 'rb') as f2:
            while True:
                chunk1 = f1.read(self.chunk_size)
                chunk2 = f2.read(self.chunk_size)
                if chunk1 != chunk2:
                    return False
                if not chunk1:
                    return True
