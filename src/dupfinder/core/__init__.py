"""
Core duplicate detection engine: collector, hasher, grouper, comparator and pipeline orchestrator.

This package contains the performance-critical foundation of dupfinder:
- PathCollectorImpl: directory traversal with regular-file and name filters
- HasherImpl + XXHash128AlgorithmImpl: xxHash3-128 partial/full content hashing
- FileGrouperImpl: order-preserving grouping with singleton pruning
- ByteComparatorImpl: lock-step byte comparison and hard link detection
- DuplicateFinderImpl: four-stage pipeline (size -> partial hash -> full hash -> bytes)
- Models: file states, Bucket, DuplicateGroup, ScanConfig, ScanStats

No console or output dependencies: suitable for embedding in other tools.
"""

from .models import (
    SizedFile, PartialHashedFile, FullHashedFile, FileRecord, Bucket, DuplicateGroup,
    ScanConfig, ScanStats, PathDisplay, Stage)
from .filters import NameFilterImpl
from .scanner import PathCollectorImpl
from .hasher import HasherImpl, XXHash128AlgorithmImpl, FingerprintConfig
from .grouper import FileGrouperImpl
from .comparator import ByteComparatorImpl
from .finder import DuplicateFinderImpl

__all__ = [
    "SizedFile",
    "PartialHashedFile",
    "FullHashedFile",
    "FileRecord",
    "Bucket",
    "DuplicateGroup",
    "ScanConfig",
    "ScanStats",
    "PathDisplay",
    "Stage",
    "NameFilterImpl",
    "PathCollectorImpl",
    "HasherImpl",
    "XXHash128AlgorithmImpl",
    "FingerprintConfig",
    "FileGrouperImpl",
    "ByteComparatorImpl",
    "DuplicateFinderImpl",
]
