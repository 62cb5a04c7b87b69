"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the duplicate finder.
These protocols use Python's `typing.Protocol` for structural typing, so any
object with matching methods can be plugged into the pipeline.

Key Components:
---------------
- NameFilter: Accept/reject predicate applied to file names.
- HashAlgorithm: Standardized interface for streaming hash functions.
- Hasher: Computes partial and full fingerprints of files.
- FileComparator: Byte-exact comparison and same-file detection.
- PathCollector: Walks a directory tree and returns candidate paths.
- DuplicateFinder: The pipeline orchestrator.
"""

from typing import Protocol, List, Tuple, Optional, Callable, BinaryIO
from dupfinder.core.models import (
    SizedFile,
    PartialHashedFile,
    DuplicateGroup,
    ScanStats,
)


class NameFilter(Protocol):
    """Decides whether a file name takes part in the scan."""
    def accepts(self, filename: str) -> bool: ...


class HashAlgorithm(Protocol):
    """
    Interface for generic hash algorithms.

    Allows plugging in different hashing functions like MD5 or xxHash
    without affecting the rest of the pipeline.
    """

    def hash_stream(self, stream: BinaryIO, limit: Optional[int] = None) -> bytes:
        """
        Hashes the stream from its current position.
        Reads at most `limit` bytes when given, otherwise until EOF.
        """
        ...


class Hasher(Protocol):
    """Interface for fingerprinting files."""
    def compute_partial_hash(self, file: SizedFile) -> bytes: ...
    def compute_full_hash(self, file: PartialHashedFile) -> bytes: ...


class FileComparator(Protocol):
    """Interface for the final byte-exact verification."""
    def is_same_file(self, path1: str, path2: str) -> bool: ...
    def contents_equal(self, path1: str, path2: str) -> bool: ...


class PathCollector(Protocol):
    """
    Interface for walking file systems and collecting candidate paths.
    """
    def collect(
        self,
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[str]:
        """
        Collect paths from the configured directory.

        Args:
            stopped_flag: Function that returns True if operation should be canceled.
            progress_callback: Optional callback for reporting progress (stage, current, total).

        Returns:
            Paths of regular files accepted by the name filter, in walk order.
        """
        ...


class DuplicateFinder(Protocol):
    """
    Interface for the main duplicate detection engine.

    Coordinates the stages (size -> partial hash -> full hash -> byte comparison)
    and collects statistics about the run.
    """
    def find_duplicates(
        self,
        paths: List[str],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """
        Run the full pipeline over candidate paths.

        Returns:
            A tuple containing:
                - List of verified duplicate groups
                - Statistics collected during processing
        """
        ...
