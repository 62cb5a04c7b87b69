"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements candidate path collection.
Features:
- Walks the root directory recursively, or only its immediate children
- Keeps regular files only (symlinks, devices, FIFOs and sockets are skipped)
- Applies the file name filter
- Skips unreadable entries instead of failing the scan
"""

import os
import stat
import time
import logging
from pathlib import Path
from typing import List, Optional, Callable

from dupfinder.core.interfaces import PathCollector, NameFilter
from dupfinder.core.filters import NameFilterImpl

logger = logging.getLogger(__name__)


class PathCollectorImpl(PathCollector):
    """
    Walks a directory tree and collects paths of regular files accepted by a name filter.

    Attributes:
        root_dir: Root directory to scan
        recursive: Descend into subdirectories when True, otherwise depth 1 only
        name_filter: Predicate applied to each file name
    """

    PROGRESS_INTERVAL = 5000

    def __init__(
        self,
        root_dir: str,
        recursive: bool = True,
        name_filter: Optional[NameFilter] = None
    ):
        self.root_dir = root_dir
        self.recursive = recursive
        self.name_filter = name_filter or NameFilterImpl()
        self.cancelled = False

    def collect(self,
                stopped_flag: Optional[Callable[[], bool]] = None,
                progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[str]:
        """
        Single-pass walk. Returns candidate paths in discovery order;
        directory entries are visited in name order so runs are repeatable.
        Sets `cancelled` when stopped_flag ends the walk early.
        """
        self.cancelled = False
        logger.debug(f"Collecting files under {self.root_dir} (recursive={self.recursive})")

        root_path = Path(self.root_dir)
        if not root_path.exists():
            error_msg = f"Directory does not exist: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)
        if not root_path.is_dir():
            error_msg = f"Not a directory: {self.root_dir}"
            logger.error(error_msg)
            raise RuntimeError(error_msg)

        if stopped_flag and stopped_flag():
            logger.debug("Collection cancelled before start")
            self.cancelled = True
            return []

        found_paths: List[str] = []
        visited = 0
        progress_counter = 0
        start_time = time.time()

        for root, dirs, files in os.walk(str(root_path), onerror=self._on_walk_error):
            if stopped_flag and stopped_flag():
                logger.debug("Collection interrupted by user")
                self.cancelled = True
                return []

            if self.recursive:
                dirs.sort()
            else:
                dirs[:] = []

            for filename in sorted(files):
                path = os.path.join(root, filename)
                if self._accepts(path, filename):
                    found_paths.append(path)
                visited += 1
                progress_counter += 1

                if progress_callback and progress_counter >= self.PROGRESS_INTERVAL:
                    progress_callback("Collecting", visited, None)
                    progress_counter = 0

        if progress_callback and progress_counter > 0:
            progress_callback("Collecting", visited, None)

        logger.debug(f"Collection took {time.time() - start_time:.2f} seconds")
        logger.info(f"Collected {len(found_paths)} of {visited} files")
        return found_paths

    @staticmethod
    def _on_walk_error(error: OSError) -> None:
        logger.debug(f"Skipping unreadable directory {error.filename}: {error}")

    def _accepts(self, path: str, filename: str) -> bool:
        """True for regular files whose name passes the filter."""
        try:
            mode = os.lstat(path).st_mode
        except OSError as e:
            logger.debug(f"Could not stat {path}: {e}")
            return False

        if not stat.S_ISREG(mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return False

        if not self.name_filter.accepts(filename):
            logger.debug(f"Skipping {path} (name filter)")
            return False

        return True
