"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/report_service.py
Aggregate statistics, path formatting and the structured JSON report.
"""
import json
import time
import logging
from pathlib import Path
from typing import List, Dict, Any, Optional

from dupfinder.core.models import DuplicateGroup, ScanConfig, PathDisplay
from dupfinder.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class ReportService:
    @staticmethod
    def total_duplicate_files(groups: List[DuplicateGroup]) -> int:
        return sum(len(g.files) for g in groups)

    @staticmethod
    def deletable_files(groups: List[DuplicateGroup]) -> int:
        """Files that could go while keeping one per group."""
        return sum(len(g.files) - 1 for g in groups)

    @staticmethod
    def space_savings(groups: List[DuplicateGroup]) -> int:
        """Sum over groups of size * (count - 1)."""
        return sum(g.space_savings for g in groups)

    @staticmethod
    def absolute_path(path: str) -> str:
        """Resolved absolute path, or the path unchanged if it cannot be resolved."""
        try:
            return str(Path(path).resolve(strict=True))
        except (OSError, RuntimeError):
            return path

    @staticmethod
    def format_path(path: str, config: ScanConfig) -> str:
        """Renders a path the way the config asks for (absolute or ./relative)."""
        if config.path_display == PathDisplay.RELATIVE:
            try:
                relative = Path(path).relative_to(config.root_dir)
            except ValueError:
                return path
            return f"./{relative.as_posix()}"
        return ReportService.absolute_path(path)

    @staticmethod
    def build_report(groups: List[DuplicateGroup], config: ScanConfig,
                     timestamp: Optional[float] = None) -> Dict[str, Any]:
        """
        Builds the structured report:
            scan_info        - base path, group count, ISO-8601 timestamp
            duplicate_groups - id, size, file count, fingerprint, display/absolute paths
            statistics       - duplicate files, deletable files, reclaimable bytes
        """
        if timestamp is None:
            timestamp = time.time()

        duplicate_groups = []
        for group_id, group in enumerate(groups, 1):
            duplicate_groups.append({
                "group_id": group_id,
                "file_size": group.size,
                "file_count": group.duplicate_count,
                "fingerprint": group.fingerprint,
                "files": [
                    {
                        "path": ReportService.format_path(f.path, config),
                        "absolute_path": ReportService.absolute_path(f.path),
                    }
                    for f in group.files
                ],
            })

        return {
            "scan_info": {
                "base_path": config.root_dir,
                "total_groups": len(groups),
                "timestamp": ConvertUtils.timestamp_to_iso(timestamp),
            },
            "duplicate_groups": duplicate_groups,
            "statistics": {
                "total_duplicate_files": ReportService.total_duplicate_files(groups),
                "deletable_files": ReportService.deletable_files(groups),
                "potential_space_savings": ReportService.space_savings(groups),
            },
        }

    @staticmethod
    def export_json(groups: List[DuplicateGroup], config: ScanConfig, output_path: str) -> None:
        """
        Writes the report as pretty-printed UTF-8 JSON.

        Raises:
            RuntimeError: If the file cannot be written
        """
        report = ReportService.build_report(groups, config)
        try:
            with open(output_path, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2, ensure_ascii=False)
                f.write("\n")
        except OSError as e:
            raise RuntimeError(f"Failed to write JSON report: {e}") from e
        logger.info(f"JSON report written to {output_path}")
