"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/grouper.py
Implements file grouping by size and by content fingerprints.
Hashing stages advance each file to its next state while grouping it.
"""

import logging
from collections import defaultdict
from typing import List, Dict, Tuple, Any, Callable, Optional

from dupfinder.core.models import SizedFile, PartialHashedFile, FullHashedFile, FileRecord
from dupfinder.core.hasher import HasherImpl
from dupfinder.core.interfaces import Hasher

logger = logging.getLogger(__name__)


class FileGrouperImpl:
    """
    Groups files by a key and drops groups with fewer than two members.
    Uses an injected Hasher instance for flexibility and testability.
    """

    def __init__(self, hasher: Optional[Hasher] = None):
        self.hasher = hasher or HasherImpl()

    def group_by_size(self, files: List[SizedFile]) -> Dict[int, List[SizedFile]]:
        """Groups files by their size."""
        return self._group_by(files, lambda f: (f.size, f))

    def group_by_partial_hash(self, files: List[SizedFile]) -> Dict[bytes, List[PartialHashedFile]]:
        """Hashes the leading bytes of each file and groups by that digest."""
        def advance(file: SizedFile) -> Tuple[bytes, PartialHashedFile]:
            digest = self.hasher.compute_partial_hash(file)
            return digest, file.with_partial_hash(digest)
        return self._group_by(files, advance)

    def group_by_full_hash(self, files: List[PartialHashedFile]) -> Dict[bytes, List[FullHashedFile]]:
        """Hashes the full content of each file and groups by that digest."""
        def advance(file: PartialHashedFile) -> Tuple[bytes, FullHashedFile]:
            digest = self.hasher.compute_full_hash(file)
            return digest, file.with_full_hash(digest)
        return self._group_by(files, advance)

    @staticmethod
    def _group_by(files: List[FileRecord],
                  key_func: Callable[[FileRecord], Tuple[Any, FileRecord]]) -> Dict[Any, List[FileRecord]]:
        """
        Helper method to group files by any computed key.
        Args:
            files: List of files to group, in discovery order
            key_func: Function returning (key, record to store) for a file
        Returns:
            Dict[key, List[record]] in first-seen key order; members keep input order
        """
        groups = defaultdict(list)
        skipped_files = 0
        for file in files:
            try:
                key, record = key_func(file)
            except OSError as e:
                logger.warning(f"Error processing {file.path}: {e}")
                skipped_files += 1
                continue
            groups[key].append(record)

        if skipped_files > 0:
            logger.warning(f"Skipped {skipped_files} files due to read errors")

        return {key: group for key, group in groups.items() if len(group) >= 2}
