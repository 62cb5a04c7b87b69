"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

finder.py
Implements the four-stage duplicate detection pipeline:
    size -> partial hash -> full hash -> byte comparison
Each stage completes before the next one starts.
"""
import time
import logging
from typing import List, Tuple, Dict, Optional, Callable

from dupfinder.core.models import DuplicateGroup, ScanStats, ScanConfig, Stage
from dupfinder.core.grouper import FileGrouperImpl
from dupfinder.core.comparator import ByteComparatorImpl
from dupfinder.core.interfaces import DuplicateFinder, FileComparator
from dupfinder.core.stages import SizeStageImpl, PartialHashStage, FullHashStage, ByteVerifyStage

logger = logging.getLogger(__name__)


# =============================
# Main Finder Class
# =============================
class DuplicateFinderImpl(DuplicateFinder):
    """
    Sequences the pipeline stages and collects per-stage statistics.
    Display and filtering decisions come from the ScanConfig handed to the constructor.
    """
    def __init__(
            self,
            config: Optional[ScanConfig] = None,
            grouper: Optional[FileGrouperImpl] = None,
            comparator: Optional[FileComparator] = None,
            stage_listeners: Optional[List[Callable[[str, Dict], None]]] = None
    ):
        self.config = config
        self.grouper = grouper or FileGrouperImpl()
        self.comparator = comparator or ByteComparatorImpl()
        self.stage_listeners = stage_listeners or []

    @property
    def include_hardlinks(self) -> bool:
        return self.config.include_hardlinks if self.config else False

    def find_duplicates(
        self,
        paths: List[str],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> Tuple[List[DuplicateGroup], ScanStats]:
        """
        Main pipeline.
        Args:
            paths: Candidate paths in discovery order
            stopped_flag: Function that returns True if operation should be stopped.
            progress_callback: Reports progress per stage.
        Returns:
            Tuple[List[DuplicateGroup], ScanStats]
        """
        stats = ScanStats()
        for listener in self.stage_listeners:
            stats.add_listener(listener)
        total_start_time = time.time()

        def cancelled() -> bool:
            if stopped_flag and stopped_flag():
                stats.cancelled = True
                logger.info("Pipeline cancelled between stages")
                return True
            return False

        size_stage = SizeStageImpl(self.grouper)
        buckets = self._run_stage(stats, Stage.SIZE, size_stage, paths, len(paths),
                                  stopped_flag, progress_callback)
        if cancelled():
            return [], self._finish(stats, total_start_time)

        for stage_name, stage in ((Stage.PARTIAL, PartialHashStage(self.grouper)),
                                  (Stage.FULL, FullHashStage(self.grouper))):
            files_in = sum(len(b) for b in buckets)
            buckets = self._run_stage(stats, stage_name, stage, buckets, files_in,
                                      stopped_flag, progress_callback)
            if cancelled():
                return [], self._finish(stats, total_start_time)

        verify_stage = ByteVerifyStage(self.comparator, include_hardlinks=self.include_hardlinks)
        files_in = sum(len(b) for b in buckets)
        groups = self._run_stage(stats, Stage.VERIFY, verify_stage, buckets, files_in,
                                 stopped_flag, progress_callback)
        stats.comparisons = verify_stage.comparisons
        stats.hardlinks_skipped = verify_stage.hardlinks_skipped

        # Largest groups first; ties keep discovery order
        groups.sort(key=lambda g: -g.size)

        return groups, self._finish(stats, total_start_time)

    @staticmethod
    def _run_stage(stats: ScanStats, stage_name: Stage, stage, items, files_in: int,
                   stopped_flag, progress_callback) -> list:
        logger.info(f"{stage_name.value}: processing {files_in} files")
        start_time = time.time()
        result = stage.process(items, stopped_flag=stopped_flag, progress_callback=progress_callback)
        duration = time.time() - start_time

        files_out = sum(len(item.files) for item in result)
        stats.update_stage(
            stage_name=stage_name.value,
            files_in=files_in,
            buckets=len(result),
            files_out=files_out,
            duration=duration
        )
        logger.info(f"{stage_name.value}: {len(result)} groups ({files_out} files)")
        return result

    @staticmethod
    def _finish(stats: ScanStats, start_time: float) -> ScanStats:
        stats.total_time = time.time() - start_time
        return stats
