"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models and domain logic for duplicate file detection.

A file moves through the pipeline as a tagged state:
    SizedFile -> PartialHashedFile -> FullHashedFile
Every state is immutable; a stage produces the next state instead of
filling in optional fields, so a full hash can never exist without a partial one.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union


# =============================
# Enums
# =============================

class Stage(str, Enum):
    SIZE = "Size grouping"
    PARTIAL = "Partial Hash"
    FULL = "Full Hash"
    VERIFY = "Byte comparison"

    @classmethod
    def get_all(cls):
        return [cls.SIZE, cls.PARTIAL, cls.FULL, cls.VERIFY]


class PathDisplay(Enum):
    """How paths are rendered in console and JSON output."""
    ABSOLUTE = "absolute"
    RELATIVE = "relative"

    @property
    def display_name(self) -> str:
        mapping = {
            PathDisplay.ABSOLUTE: "Absolute paths",
            PathDisplay.RELATIVE: "Relative paths",
        }
        return mapping.get(self, self.value)


# ======================
#  File states
# ======================

@dataclass(frozen=True)
class SizedFile:
    """A regular, non-empty file whose size is known."""
    path: str
    size: int  # in bytes

    def __post_init__(self):
        if self.size <= 0:
            raise ValueError(f"File size must be positive: {self.path} ({self.size} bytes)")

    def with_partial_hash(self, digest: bytes) -> "PartialHashedFile":
        return PartialHashedFile(path=self.path, size=self.size, partial_hash=digest)

    def __repr__(self):
        return f"<SizedFile path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class PartialHashedFile(SizedFile):
    """A sized file with the digest of its leading bytes."""
    partial_hash: bytes = b""

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.partial_hash, bytes) or not self.partial_hash:
            raise ValueError(f"Partial hash must be non-empty bytes: {self.path}")

    def with_full_hash(self, digest: bytes) -> "FullHashedFile":
        return FullHashedFile(
            path=self.path,
            size=self.size,
            partial_hash=self.partial_hash,
            full_hash=digest,
        )

    def __repr__(self):
        return f"<PartialHashedFile path={self.path}, size={self.size}>"


@dataclass(frozen=True)
class FullHashedFile(PartialHashedFile):
    """A file fingerprinted over its entire content."""
    full_hash: bytes = b""

    def __post_init__(self):
        super().__post_init__()
        if not isinstance(self.full_hash, bytes) or not self.full_hash:
            raise ValueError(f"Full hash must be non-empty bytes: {self.path}")

    def __repr__(self):
        return f"<FullHashedFile path={self.path}, size={self.size}>"


FileRecord = Union[SizedFile, PartialHashedFile, FullHashedFile]


# ======================
#  Buckets and groups
# ======================

@dataclass
class Bucket:
    """
    Candidate files sharing one discriminant key (size, partial or full hash).
    Members keep the order in which the collector discovered them.
    """
    key: Any
    files: List[FileRecord]

    @property
    def size(self) -> int:
        return self.files[0].size if self.files else 0

    def __len__(self) -> int:
        return len(self.files)

    def __repr__(self):
        return f"<Bucket size={self.size}, count={len(self.files)}>"


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Files confirmed byte-identical. The first file is the anchor that is kept,
    all following files are removable.
    """
    files: Tuple[FullHashedFile, ...]

    def __post_init__(self):
        if len(self.files) < 2:
            raise ValueError("A duplicate group needs at least two files")
        sizes = {f.size for f in self.files}
        if len(sizes) != 1:
            raise ValueError("Cannot group files with different sizes")

    @property
    def size(self) -> int:
        return self.files[0].size

    @property
    def kept(self) -> FullHashedFile:
        return self.files[0]

    @property
    def removable(self) -> Tuple[FullHashedFile, ...]:
        return self.files[1:]

    @property
    def fingerprint(self) -> str:
        """Hex form of the anchor's full-content hash."""
        return self.files[0].full_hash.hex()

    @property
    def duplicate_count(self) -> int:
        return len(self.files)

    @property
    def space_savings(self) -> int:
        """Bytes reclaimed by removing every file except the anchor."""
        return self.size * (len(self.files) - 1)

    def __repr__(self):
        return f"<DuplicateGroup size={self.size}, count={len(self.files)}>"


# ======================
#  Statistics
# ======================

class ScanStats:
    """
    Statistics collected while the pipeline runs.
    """
    def __init__(self):
        self.total_time: float = 0.0
        self.comparisons: int = 0
        self.hardlinks_skipped: int = 0
        self.cancelled: bool = False
        self.stage_stats: Dict[str, Dict[str, Union[int, float]]] = {}
        self._listeners: List[Callable[[str, Dict], None]] = []

    def add_listener(self, listener: Callable[[str, Dict], None]):
        """Adds a listener to receive updates when stats are updated."""
        self._listeners.append(listener)

    def update_stage(
            self,
            stage_name: str,
            files_in: int,
            buckets: int,
            files_out: int,
            duration: float
    ) -> None:
        self.stage_stats[stage_name] = {
            "files_in": files_in,
            "buckets": buckets,
            "files_out": files_out,
            "time": duration,
        }
        for listener in self._listeners:
            listener(stage_name, self.stage_stats[stage_name])

    def print_summary(self) -> str:
        lines = [
            "Pipeline Statistics:",
            f"Total Execution Time: {self.total_time:.3f}s\n",
            "Stage: FILES IN / BUCKETS / FILES OUT / TIME"
        ]

        for stage, data in self.stage_stats.items():
            lines.append(
                f"{stage}: {data['files_in']} / {data['buckets']} / "
                f"{data['files_out']} / {data['time']:.3f}s"
            )

        lines.append(f"Byte comparisons: {self.comparisons}")
        if self.hardlinks_skipped:
            lines.append(f"Hard links skipped: {self.hardlinks_skipped}")
        if self.cancelled:
            lines.append("Scan was cancelled before completion")

        return "\n".join(lines)


"""
DTO for scan configuration with built-in validation.
Passed explicitly to every component that needs display or filtering decisions.
"""

def glob_class_end(pattern: str, start: int) -> int:
    """Index of the ']' closing the character class opened at start, or -1."""
    j = start + 1
    if j < len(pattern) and pattern[j] in "!^":
        j += 1
    if j < len(pattern) and pattern[j] == "]":
        j += 1
    while j < len(pattern) and pattern[j] != "]":
        j += 1
    return j if j < len(pattern) else -1


def validate_glob(pattern: str) -> None:
    """
    Raises ValueError for glob patterns that cannot match as intended.
    Supports '{a,b}' alternate groups; they cannot be nested.
    """
    if not pattern:
        raise ValueError("Glob pattern cannot be empty")

    in_group = False
    i = 0
    while i < len(pattern):
        char = pattern[i]
        if char == "[":
            end = glob_class_end(pattern, i)
            if end < 0:
                raise ValueError(f"Unclosed character class in glob pattern: '{pattern}'")
            i = end
        elif char == "{":
            if in_group:
                raise ValueError(f"Nested alternate groups are not allowed in glob pattern: '{pattern}'")
            in_group = True
        elif char == "}":
            if not in_group:
                raise ValueError(f"Unopened alternate group in glob pattern: '{pattern}'")
            in_group = False
        i += 1

    if in_group:
        raise ValueError(f"Unclosed alternate group in glob pattern: '{pattern}'")


@dataclass
class ScanConfig:
    """Parameters for one duplicate scan with validation."""
    root_dir: str
    recursive: bool = True
    include_hardlinks: bool = False
    patterns: List[str] = field(default_factory=list)
    regex: Optional[str] = None
    verbose: bool = False
    show_size: bool = False
    path_display: PathDisplay = PathDisplay.ABSOLUTE
    json_path: Optional[str] = None
    script_path: Optional[str] = None

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if not self.root_dir:
            raise ValueError("Root directory cannot be empty")

        for pattern in self.patterns:
            validate_glob(pattern)

        if self.regex is not None:
            try:
                re.compile(self.regex)
            except re.error as e:
                raise ValueError(f"Invalid regular expression '{self.regex}': {e}") from e

    @property
    def has_name_filter(self) -> bool:
        return bool(self.patterns) or self.regex is not None

    def build_name_filter(self):
        """Compiles the configured glob set and regex into one predicate."""
        from dupfinder.core.filters import NameFilterImpl
        return NameFilterImpl(patterns=self.patterns, regex=self.regex)
