"""
DupFinder: finds byte-identical files with a four-stage verification pipeline.

Core features:
- Size grouping, partial-content hash, full-content hash, then byte-by-byte comparison
- Glob and regex file name filters, recursive or top-level scans
- Hard links excluded unless requested
- Console summary, JSON report and a reviewable removal script (bash or PowerShell)
"""

# Get version
try:
    from importlib.metadata import version as _version, PackageNotFoundError
    __version__ = _version("dupfinder")
except PackageNotFoundError:
    __version__ = "0.0.0+local"

# Public API: only what users should import directly
from dupfinder.commands import DuplicateSearchCommand, SearchResult
from dupfinder.core import ScanConfig, ScanStats, PathDisplay, DuplicateGroup, FullHashedFile
from dupfinder.utils.convert_utils import ConvertUtils
from dupfinder.services import ReportService, ScriptService

__all__ = [
    "DuplicateSearchCommand",
    "SearchResult",
    "ScanConfig",
    "ScanStats",
    "PathDisplay",
    "DuplicateGroup",
    "FullHashedFile",
    "ConvertUtils",
    "ReportService",
    "ScriptService",
    "__version__",
]
