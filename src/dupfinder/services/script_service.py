"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/script_service.py
Generates a removal script for the user to review and run.
The script keeps the first file of every group and removes the rest, behind an
interactive confirmation and with per-file existence checks.

Two renderers share one interface; the platform decides which one is used,
once, when the service is created.
"""
import os
import sys
import time
import shlex
import logging
from typing import List, Optional, Protocol

from dupfinder.core.models import DuplicateGroup, ScanConfig
from dupfinder.services.report_service import ReportService
from dupfinder.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)

RULE = "# " + "=" * 76
PS_SINGLE_QUOTES = "'\u2018\u2019\u201a\u201b"


def comment_text(text: str) -> str:
    """
    Makes text safe to place after a '#' comment marker.
    A line break in a file name would end the comment and turn the rest of
    the name into a command, so every non-printable character becomes '?'.
    """
    return "".join(c if c.isprintable() else "?" for c in text)


class ScriptRenderer(Protocol):
    """Turns duplicate groups into the text of a removal script."""
    name: str

    def render(self, groups: List[DuplicateGroup], config: ScanConfig,
               output_path: str, timestamp: float) -> str: ...

    def run_hint(self, output_path: str) -> str: ...


class BashScriptRenderer:
    """POSIX shell script for Linux and macOS."""
    name = "bash"

    @staticmethod
    def quote(path: str) -> str:
        return shlex.quote(path)

    def run_hint(self, output_path: str) -> str:
        return f"bash {shlex.quote(output_path)}"

    def render(self, groups: List[DuplicateGroup], config: ScanConfig,
               output_path: str, timestamp: float) -> str:
        q = self.quote
        base = config.root_dir
        lines = [
            "#!/bin/bash",
            RULE,
            "# Removal script generated by dupfinder",
            f"# Generated: {ConvertUtils.timestamp_to_human(timestamp)}",
            f"# Scan path: {comment_text(base)}",
            f"# Duplicate groups: {len(groups)}",
            RULE,
            "#",
            "# WARNING: this script deletes files!",
            "#   The first file of every group is kept, the others are removed.",
            "#   Comment out any rm block you want to skip.",
            "#",
            "# Usage:",
            f"#   chmod +x {comment_text(output_path)}",
            f"#   ./{comment_text(os.path.basename(output_path))}",
            RULE,
            "",
            "set -u",
            "",
            'echo "WARNING: about to delete duplicate files!"',
            f"echo {q('Scan path: ' + base)}",
            f'echo "Duplicate groups: {len(groups)}"',
            f'echo "Files to delete: {ReportService.deletable_files(groups)}"',
            f'echo "Space to reclaim: {ConvertUtils.bytes_to_human(ReportService.space_savings(groups))}"',
            'echo ""',
            'read -r -p "Continue? (yes/no): " confirm',
            'if [ "$confirm" != "yes" ]; then',
            '    echo "Cancelled, nothing was deleted"',
            "    exit 0",
            "fi",
            "",
            "deleted_count=0",
            "deleted_size=0",
            "failed_count=0",
        ]

        for group_id, group in enumerate(groups, 1):
            lines += [
                "",
                RULE,
                f"# Group {group_id}: {group.duplicate_count} files ({group.size} bytes)",
                RULE,
                f"# Keep: {comment_text(ReportService.absolute_path(group.kept.path))}",
            ]
            removable = group.removable
            for index, file in enumerate(removable, 1):
                path = q(ReportService.absolute_path(file.path))
                lines += [
                    "",
                    f"# Delete {index}/{len(removable)}",
                    f"if [ -f {path} ]; then",
                    f"    echo \"Deleting: \"{path}",
                    f"    if rm -- {path}; then",
                    "        deleted_count=$((deleted_count + 1))",
                    f"        deleted_size=$((deleted_size + {file.size}))",
                    "    else",
                    f"        echo \"Failed to delete: \"{path}",
                    "        failed_count=$((failed_count + 1))",
                    "    fi",
                    "else",
                    f"    echo \"File not found: \"{path}",
                    "fi",
                ]

        lines += [
            "",
            RULE,
            "# Summary",
            RULE,
            'echo ""',
            'echo "Deleted: $deleted_count files"',
            'echo "Failed: $failed_count files"',
            'echo "Reclaimed: $(numfmt --to=iec-i --suffix=B "$deleted_size" 2>/dev/null || echo "$deleted_size bytes")"',
            "",
        ]
        return "\n".join(lines)


class PowerShellScriptRenderer:
    """PowerShell script for Windows."""
    name = "powershell"

    @staticmethod
    def quote(path: str) -> str:
        # Single-quoted strings are literal; a quote is escaped by doubling it.
        # PowerShell also reads the typographic single quotes as quote marks.
        return "'" + "".join(c * 2 if c in PS_SINGLE_QUOTES else c for c in path) + "'"

    def run_hint(self, output_path: str) -> str:
        return f"PowerShell -ExecutionPolicy Bypass -File {self.quote(output_path)}"

    def render(self, groups: List[DuplicateGroup], config: ScanConfig,
               output_path: str, timestamp: float) -> str:
        q = self.quote
        base = config.root_dir
        lines = [
            RULE,
            "# Removal script generated by dupfinder (PowerShell)",
            f"# Generated: {ConvertUtils.timestamp_to_human(timestamp)}",
            f"# Scan path: {comment_text(base)}",
            f"# Duplicate groups: {len(groups)}",
            RULE,
            "#",
            "# WARNING: this script deletes files!",
            "#   The first file of every group is kept, the others are removed.",
            "#   Comment out any Remove-Item block you want to skip.",
            "#",
            "# Usage:",
            f"#   PowerShell -ExecutionPolicy Bypass -File {comment_text(os.path.basename(output_path))}",
            RULE,
            "",
            '$ErrorActionPreference = "Stop"',
            "",
            'Write-Host "WARNING: about to delete duplicate files!" -ForegroundColor Yellow',
            f"Write-Host {q('Scan path: ' + base)}",
            f'Write-Host "Duplicate groups: {len(groups)}"',
            f'Write-Host "Files to delete: {ReportService.deletable_files(groups)}"',
            f'Write-Host "Space to reclaim: {ConvertUtils.bytes_to_human(ReportService.space_savings(groups))}"',
            'Write-Host ""',
            '$confirm = Read-Host "Continue? (yes/no)"',
            'if ($confirm -ne "yes") {',
            '    Write-Host "Cancelled, nothing was deleted" -ForegroundColor Red',
            "    exit 0",
            "}",
            "",
            "$deletedCount = 0",
            "$deletedSize = 0",
            "$failedCount = 0",
        ]

        for group_id, group in enumerate(groups, 1):
            lines += [
                "",
                RULE,
                f"# Group {group_id}: {group.duplicate_count} files ({group.size} bytes)",
                RULE,
                f"# Keep: {comment_text(ReportService.absolute_path(group.kept.path))}",
            ]
            removable = group.removable
            for index, file in enumerate(removable, 1):
                path = q(ReportService.absolute_path(file.path))
                lines += [
                    "",
                    f"# Delete {index}/{len(removable)}",
                    f"if (Test-Path -LiteralPath {path}) {{",
                    f"    Write-Host ('Deleting: ' + {path})",
                    "    try {",
                    f"        Remove-Item -LiteralPath {path} -Force",
                    "        $deletedCount++",
                    f"        $deletedSize += {file.size}",
                    "    } catch {",
                    f"        Write-Host ('Failed to delete: ' + {path}) -ForegroundColor Red",
                    "        $failedCount++",
                    "    }",
                    "} else {",
                    f"    Write-Host ('File not found: ' + {path}) -ForegroundColor Yellow",
                    "}",
                ]

        lines += [
            "",
            RULE,
            "# Summary",
            RULE,
            'Write-Host ""',
            'Write-Host "Deleted: $deletedCount files" -ForegroundColor Green',
            'Write-Host "Failed: $failedCount files" -ForegroundColor Red',
            "$sizeInMB = [math]::Round($deletedSize / 1MB, 2)",
            "if ($sizeInMB -gt 0) {",
            '    Write-Host "Reclaimed: $sizeInMB MB ($deletedSize bytes)" -ForegroundColor Green',
            "} else {",
            '    Write-Host "Reclaimed: $deletedSize bytes" -ForegroundColor Green',
            "}",
            'Write-Host ""',
            'Write-Host "Press any key to exit..." -ForegroundColor Gray',
            '$null = $Host.UI.RawUI.ReadKey("NoEcho,IncludeKeyDown")',
            "",
        ]
        return "\r\n".join(lines)


class ScriptService:
    """
    Writes removal scripts with a renderer chosen for the platform.
    """

    def __init__(self, renderer: Optional[ScriptRenderer] = None):
        self.renderer = renderer or ScriptService.select_renderer()

    @staticmethod
    def select_renderer(platform: Optional[str] = None) -> ScriptRenderer:
        """PowerShell on Windows, bash everywhere else."""
        platform = platform or sys.platform
        if platform == "win32":
            return PowerShellScriptRenderer()
        return BashScriptRenderer()

    def write_script(self, groups: List[DuplicateGroup], config: ScanConfig,
                     output_path: str, timestamp: Optional[float] = None) -> None:
        """
        Renders and writes the script; makes it executable on POSIX systems.

        Raises:
            RuntimeError: If the file cannot be written
        """
        if timestamp is None:
            timestamp = time.time()
        script = self.renderer.render(groups, config, output_path, timestamp)

        try:
            with open(output_path, "w", encoding="utf-8", newline="") as f:
                f.write(script)
            if os.name == "posix":
                os.chmod(output_path, 0o755)
        except OSError as e:
            raise RuntimeError(f"Failed to write delete script: {e}") from e
        logger.info(f"{self.renderer.name} script written to {output_path}")
