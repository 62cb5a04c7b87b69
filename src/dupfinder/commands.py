"""
Unified command orchestrator for duplicate search.
This is the single entry point for business logic, used by the CLI and by library callers.
No console dependencies, pure Python.
"""
from dataclasses import dataclass
from typing import List, Dict, Optional, Callable

from dupfinder.core.models import DuplicateGroup, ScanStats, ScanConfig
from dupfinder.core.scanner import PathCollectorImpl
from dupfinder.core.finder import DuplicateFinderImpl


@dataclass
class SearchResult:
    """Outcome of one scan."""
    groups: List[DuplicateGroup]
    stats: ScanStats
    candidate_count: int
    filtered: bool = False

    @property
    def cancelled(self) -> bool:
        return self.stats.cancelled

    @property
    def no_files_matched(self) -> bool:
        """True when the collector found nothing, as opposed to finding only unique files or being stopped."""
        return self.candidate_count == 0 and not self.cancelled


class DuplicateSearchCommand:
    """
    Orchestrates the whole workflow:
    1. Build the name filter from the config
    2. Collect candidate paths
    3. Run the four-stage pipeline with progress/cancellation support

    Usage:
        config = ScanConfig(root_dir="~/Downloads", patterns=["*.jpg"])
        result = DuplicateSearchCommand().execute(
            config,
            progress_callback=cli_progress_printer,
            stopped_flag=signal_handler_check
        )
    """

    def __init__(self):
        self._paths: List[str] = []

    def execute(
            self,
            config: ScanConfig,
            progress_callback: Optional[Callable[[str, int, Optional[int]], None]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            stage_listener: Optional[Callable[[str, Dict], None]] = None
    ) -> SearchResult:
        """
        Execute a duplicate search with the given configuration.

        Args:
            config: Validated scan configuration
            progress_callback: (stage: str, current: int, total: Optional[int]) -> None
            stopped_flag: () -> bool (returns True if operation should stop)
            stage_listener: (stage: str, stage_stats: dict) -> None, called as each stage finishes

        Returns:
            SearchResult with verified groups, statistics and the candidate count

        Raises:
            ValueError: If the name filter cannot be compiled
            RuntimeError: If the root directory is missing or not a directory
        """
        collector = PathCollectorImpl(
            root_dir=config.root_dir,
            recursive=config.recursive,
            name_filter=config.build_name_filter()
        )

        self._paths = collector.collect(
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )

        finder = DuplicateFinderImpl(
            config,
            stage_listeners=[stage_listener] if stage_listener else None
        )
        groups, stats = finder.find_duplicates(
            self._paths,
            stopped_flag=stopped_flag,
            progress_callback=progress_callback
        )
        # An empty candidate list from a stopped walk is not a real result
        if collector.cancelled:
            stats.cancelled = True

        return SearchResult(
            groups=groups,
            stats=stats,
            candidate_count=len(self._paths),
            filtered=config.has_name_filter
        )

    def get_paths(self) -> List[str]:
        """Get collected candidate paths after execution."""
        return self._paths.copy()
