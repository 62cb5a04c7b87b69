"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/stages.py
Pipeline stages of the duplicate detection engine.

CLASS HIERARCHY
---------------
SizeStageImpl       : Stats candidate paths and groups them by exact size
HashStageBase       : Shared re-bucketing loop for the fingerprint stages
PartialHashStage    : Re-buckets by the digest of the leading bytes
FullHashStage       : Re-buckets by the digest of the whole content
ByteVerifyStage     : Confirms each bucket against its first member byte by byte

STAGE CONTRACTS
---------------
Each stage implements a `process()` method that:
  - Takes ownership of the buckets handed over by the previous stage
  - Returns a new list; every bucket in it has 2+ members
  - Never mixes files of different sizes (re-bucketing happens within a bucket)
  - Reports progress via callback (stage name, processed count, total count)
  - Returns an empty list when stopped_flag fires, never a half-built bucket
"""

import os
import logging
from typing import List, Dict, Optional, Callable

from dupfinder.core.models import SizedFile, Bucket, DuplicateGroup, FileRecord, Stage
from dupfinder.core.grouper import FileGrouperImpl
from dupfinder.core.comparator import ByteComparatorImpl
from dupfinder.core.interfaces import FileComparator

logger = logging.getLogger(__name__)


class SizeStageImpl:
    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def process(
            self,
            paths: List[str],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[Bucket]:
        """
        Group by file size.
        Unstattable and zero-byte files are dropped here, before any hashing.
        """
        if stopped_flag and stopped_flag():
            return []

        files = []
        for path in paths:
            try:
                size = os.stat(path).st_size
            except OSError as e:
                logger.debug(f"Could not get size of {path}: {e}")
                continue

            if size == 0:
                logger.debug(f"Skipping zero-byte file: {path}")
                continue

            files.append(SizedFile(path=path, size=size))

        size_groups = self.grouper.group_by_size(files)
        buckets = [Bucket(key=size, files=group) for size, group in size_groups.items()]

        if progress_callback:
            total_files = len(paths)
            progress_callback(Stage.SIZE.value, total_files, total_files)

        return buckets


class HashStageBase:
    """
    Base class for fingerprint stages.
    Subclasses provide the grouping function and the stage name.
    """

    def __init__(self, grouper: FileGrouperImpl):
        self.grouper = grouper

    def get_stage_name(self) -> str:
        raise NotImplementedError

    def _group_files(self, files: List[FileRecord]) -> Dict[bytes, List[FileRecord]]:
        """
        Fingerprints files and groups them by digest.

        Args:
            files (List[FileRecord]): Members of one incoming bucket.

        Returns:
            Dict[bytes, List[FileRecord]]: Advanced records grouped by digest.
        """
        raise NotImplementedError

    def process(
        self,
        buckets: List[Bucket],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[Bucket]:
        if stopped_flag and stopped_flag():
            return []

        new_buckets = []
        total_files = sum(len(bucket.files) for bucket in buckets)
        processed_files = 0

        for bucket in buckets:
            if stopped_flag and stopped_flag():
                return []

            for digest, files in self._group_files(bucket.files).items():
                new_buckets.append(Bucket(key=digest, files=files))

            processed_files += len(bucket.files)
            if progress_callback:
                progress_callback(self.get_stage_name(), processed_files, total_files)

        return new_buckets


class PartialHashStage(HashStageBase):
    def get_stage_name(self) -> str:
        return Stage.PARTIAL.value

    def _group_files(self, files):
        return self.grouper.group_by_partial_hash(files)


class FullHashStage(HashStageBase):
    def get_stage_name(self) -> str:
        return Stage.FULL.value

    def _group_files(self, files):
        return self.grouper.group_by_full_hash(files)


class ByteVerifyStage:
    """
    Confirms full-hash buckets by direct content comparison against the first member.

    Only anchor-to-member comparisons are made: byte equality is transitive, so
    members equal to the anchor are equal to each other.
    Hard links to the anchor are excluded unless include_hardlinks is set,
    because removing one would not free any space.
    """

    def __init__(self, comparator: Optional[FileComparator] = None, include_hardlinks: bool = False):
        self.comparator = comparator or ByteComparatorImpl()
        self.include_hardlinks = include_hardlinks
        self.comparisons = 0
        self.hardlinks_skipped = 0

    def process(
            self,
            buckets: List[Bucket],
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[DuplicateGroup]:
        if stopped_flag and stopped_flag():
            return []

        groups = []
        total_files = sum(len(b.files) for b in buckets)
        processed_files = 0

        for bucket in buckets:
            if stopped_flag and stopped_flag():
                return []

            anchor = bucket.files[0]
            confirmed = [anchor]
            for candidate in bucket.files[1:]:
                if self._matches_anchor(anchor, candidate):
                    confirmed.append(candidate)

            if len(confirmed) >= 2:
                groups.append(DuplicateGroup(files=tuple(confirmed)))

            processed_files += len(bucket.files)
            if progress_callback:
                progress_callback(Stage.VERIFY.value, processed_files, total_files)

        return groups

    def _matches_anchor(self, anchor: FileRecord, candidate: FileRecord) -> bool:
        if not self.include_hardlinks and self.comparator.is_same_file(anchor.path, candidate.path):
            logger.info(f"Skipping hard link: {anchor.path} <-> {candidate.path}")
            self.hardlinks_skipped += 1
            return False

        try:
            equal = self.comparator.contents_equal(anchor.path, candidate.path)
        except OSError as e:
            logger.warning(f"Could not compare {candidate.path} with {anchor.path}: {e}")
            return False

        self.comparisons += 1
        if not equal:
            logger.info(f"Content differs despite equal hashes: {anchor.path} <-> {candidate.path}")
        return equal
