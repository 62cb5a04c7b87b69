#!/usr/bin/env python3
"""
DupFinder CLI: command line interface for duplicate file detection.
Runs the four-stage pipeline and reports the result on the console,
optionally as a JSON report and as a removal script. Never deletes anything itself.
"""
from __future__ import annotations  # Enable postponed evaluation of annotations (PEP 563)
import argparse
import sys
import os
import time
from pathlib import Path
from typing import List, Optional, NoReturn, Dict
import logging

logging.basicConfig(
    level=logging.ERROR,
    format="%(levelname)-8s | %(name)-25s | %(message)s"
)

# === EARLY DEPENDENCY VALIDATION ===
_MISSING_DEPS = []
try:
    import xxhash
except ImportError:
    _MISSING_DEPS.append("xxhash")

try:
    from rich.console import Console
    from rich.markup import escape
except ImportError:
    _MISSING_DEPS.append("rich")

if _MISSING_DEPS:
    print("Missing required dependencies:", file=sys.stderr)
    print(f"   pip install {' '.join(_MISSING_DEPS)}", file=sys.stderr)
    sys.exit(1)

# === NORMAL IMPORTS (after validation) ===
from dupfinder.core.models import DuplicateGroup, ScanConfig, PathDisplay
from dupfinder.commands import DuplicateSearchCommand, SearchResult
from dupfinder.services.report_service import ReportService
from dupfinder.services.script_service import ScriptService
from dupfinder.utils.convert_utils import ConvertUtils

RULE = "=" * 70

EPILOG_TEXT = """
Pipeline:
  1. group files by size
  2. hash the first 8 KB of each candidate
  3. hash the full content of the remaining candidates
  4. compare the survivors byte by byte

Examples:
  Find duplicates under the current directory
  %(prog)s

  Only look at PDF files, show sizes and reclaimable space
  %(prog)s ~/Documents -p "*.pdf" -S

  Images by glob, office documents by regex
  %(prog)s ~/Pictures -p "*.jpg" -p "*.png" --regex ".*\\.(docx?|xlsx?)$"

  Save a JSON report and a removal script to review
  %(prog)s ~/Downloads --json report.json --delete-script remove_dups.sh
"""


class CLIApplication:
    """Main CLI application controller."""

    def __init__(self):
        self.start_time: float = time.time()
        self.verbose: bool = False
        self.console = Console(highlight=False, soft_wrap=True)
        self.err_console = Console(stderr=True, highlight=False, soft_wrap=True)

        # Fix encoding for Windows consoles to prevent UnicodeEncodeError
        for stream in (sys.stdout, sys.stderr):
            if hasattr(stream, "reconfigure"):
                stream.reconfigure(encoding='utf-8')

    @staticmethod
    def parse_args(args=None) -> argparse.Namespace:
        """Parse command-line arguments."""
        parser = argparse.ArgumentParser(
            prog="dupfinder",
            description="DupFinder: find byte-identical files with four-stage verification",
            formatter_class=argparse.RawTextHelpFormatter,
            epilog=EPILOG_TEXT
        )

        parser.add_argument(
            "path",
            nargs="?",
            default=".",
            help="Directory to scan (default: current directory)"
        )

        recursion = parser.add_mutually_exclusive_group()
        recursion.add_argument(
            "--recursive", "-r",
            action="store_true",
            default=True,
            help="Scan subdirectories (default)"
        )
        recursion.add_argument(
            "--no-recursive", "-n",
            action="store_true",
            dest="no_recursive",
            help="Scan only the files directly inside the directory"
        )

        # Filtering options
        parser.add_argument(
            "--pattern", "-p",
            action="append",
            default=[],
            dest="patterns",
            metavar="GLOB",
            help="File name glob, repeatable (e.g. -p '*.jpg' -p '*.png')"
        )
        parser.add_argument(
            "--regex",
            default=None,
            metavar="REGEX",
            help="File name regular expression (e.g. '.*\\.pdf$').\n"
                 "A file passes when it matches any glob OR the regex"
        )
        parser.add_argument(
            "--hardlinks", "-H",
            action="store_true",
            help="Report hard links to the same file as duplicates (skipped by default)"
        )

        # Output options
        parser.add_argument(
            "--size", "-S",
            action="store_true",
            dest="show_size",
            help="Show file sizes and reclaimable space"
        )
        parser.add_argument(
            "--relative", "-R",
            action="store_true",
            help="Show paths relative to the scanned directory (default: absolute)"
        )
        parser.add_argument(
            "--json",
            default=None,
            metavar="FILE",
            dest="json_path",
            help="Write a JSON report to FILE"
        )
        parser.add_argument(
            "--delete-script",
            default=None,
            metavar="FILE",
            dest="script_path",
            help="Write a removal script to FILE (bash, or PowerShell on Windows)"
        )
        parser.add_argument(
            "--verbose", "-v",
            action="store_true",
            help="Show each verification stage and statistics"
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug logging"
        )

        return parser.parse_args(args)

    def validate_args(self, args: argparse.Namespace) -> None:
        """Validate command-line arguments before any scanning."""
        root_path = Path(args.path)
        if not root_path.exists():
            self.error_exit(f"Directory not found: {args.path}")
        if not root_path.is_dir():
            self.error_exit(f"Path is not a directory: {args.path}")

    def create_config(self, args: argparse.Namespace) -> ScanConfig:
        """Create ScanConfig from CLI arguments; invalid globs or regex end the run."""
        try:
            return ScanConfig(
                root_dir=str(Path(args.path).resolve()),
                recursive=not args.no_recursive,
                include_hardlinks=args.hardlinks,
                patterns=list(args.patterns),
                regex=args.regex,
                verbose=args.verbose,
                show_size=args.show_size,
                path_display=PathDisplay.RELATIVE if args.relative else PathDisplay.ABSOLUTE,
                json_path=args.json_path,
                script_path=args.script_path,
            )
        except ValueError as e:
            self.error_exit(f"Invalid filter: {e}")

    @staticmethod
    def configure_logging(args: argparse.Namespace) -> None:
        package_logger = logging.getLogger("dupfinder")
        if args.debug:
            package_logger.setLevel(logging.DEBUG)
        elif args.verbose:
            package_logger.setLevel(logging.INFO)

    def print_header(self, args: argparse.Namespace, config: ScanConfig) -> None:
        self.console.print("[bold bright_cyan]DupFinder - duplicate file finder[/]")
        self.console.print(f"[dim]Scan path: {escape(args.path)}[/]")
        if config.patterns:
            self.console.print(f"[dim]Glob patterns: {escape(', '.join(config.patterns))}[/]")
        if config.regex is not None:
            self.console.print(f"[dim]Regex: {escape(config.regex)}[/]")
        if config.recursive:
            self.console.print("[dim]Recursive: on[/]")
        else:
            self.console.print("[dim]Recursive: off (top-level files only)[/]")
        self.console.print(f"[dim]Path display: {config.path_display.display_name}[/]")
        if config.verbose:
            self.console.print("[dim]Verbose: on[/]")
        self.console.print()

    def progress_callback(self, stage: str, current: int, total: Optional[int]) -> None:
        """CLI progress callback - shows progress in console."""
        if not self.verbose:
            return

        if total and total > 0:
            percent = (current / total) * 100
            sys.stderr.write(f"\r  [{stage}] {current}/{total} ({percent:.1f}%)")
        else:
            sys.stderr.write(f"\r  [{stage}] {current} files processed...")
        sys.stderr.flush()

    def stage_listener(self, stage: str, data: Dict) -> None:
        """Prints the outcome of each stage in verbose mode."""
        sys.stderr.write("\n")
        sys.stderr.flush()
        self.console.print(
            f"[cyan]{stage}:[/] checked {data['files_in']} files, "
            f"{data['buckets']} groups remain ({data['files_out']} files)"
        )

    @staticmethod
    def stopped_flag() -> bool:
        """Check if operation should stop (Ctrl+C is handled via KeyboardInterrupt)."""
        return False

    def run_search(self, config: ScanConfig) -> SearchResult:
        """Execute the duplicate search."""
        command = DuplicateSearchCommand()
        try:
            result = command.execute(
                config,
                progress_callback=self.progress_callback if self.verbose else None,
                stopped_flag=self.stopped_flag,
                stage_listener=self.stage_listener if self.verbose else None
            )
        except (RuntimeError, ValueError) as e:
            self.error_exit(f"Search failed: {e}")

        if self.verbose:
            self.console.print()
            self.console.print("[bold]Pipeline statistics:[/]")
            self.console.print(escape(result.stats.print_summary()))

        return result

    def format_path(self, path: str, config: ScanConfig) -> str:
        return ReportService.format_path(path, config)

    def output_results(self, groups: List[DuplicateGroup], config: ScanConfig) -> None:
        """Print duplicate groups and totals."""
        if not groups:
            self.console.print("[green]No duplicate files found[/]")
            return

        self.console.print(f"\n{RULE}")
        self.console.print(f"[bold yellow]Found {len(groups)} duplicate groups[/]")
        self.console.print(RULE)

        for idx, group in enumerate(groups, 1):
            self.console.print(f"\n[bold bright_blue]Group {idx}:[/]")
            if config.show_size:
                self.console.print(f"  [dim]File size: {group.size} bytes[/]")
            for file in group.files:
                self.console.print(f"  {escape(self.format_path(file.path, config))}")

        total_files = ReportService.total_duplicate_files(groups)
        deletable = ReportService.deletable_files(groups)

        self.console.print(f"\n{RULE}")
        self.console.print("[bold cyan]Statistics:[/]")
        self.console.print(f"  Duplicate files: {total_files}")
        self.console.print(f"  Deletable files: {deletable} (keeping 1 per group)")
        if config.show_size:
            savings = ReportService.space_savings(groups)
            self.console.print(
                f"  Reclaimable space: {ConvertUtils.bytes_to_human(savings)} ({savings} bytes)"
            )
        self.console.print(RULE)

    def export_outputs(self, groups: List[DuplicateGroup], config: ScanConfig) -> None:
        """
        Writes the optional JSON report and removal script.
        A failure is reported as a warning and does not stop the other output.
        """
        if config.json_path:
            try:
                ReportService.export_json(groups, config, config.json_path)
                self.console.print(f"\n[green]JSON report saved to:[/] {escape(config.json_path)}")
            except RuntimeError as e:
                self.warning(f"JSON export failed: {e}")

        if config.script_path:
            service = ScriptService()
            try:
                service.write_script(groups, config, config.script_path)
            except RuntimeError as e:
                self.warning(f"Delete script generation failed: {e}")
                return
            self.console.print(f"\n[green]Delete script written to:[/] {escape(config.script_path)}")
            self.console.print("[yellow]   Review it carefully before running it![/]")
            self.console.print(f"[cyan]   Run with: {escape(service.renderer.run_hint(config.script_path))}[/]")

    def warning(self, message: str) -> None:
        """Print a warning message to stderr."""
        self.err_console.print(f"[yellow]Warning: {escape(message)}[/]")

    def error_exit(self, message: str, code: int = 1) -> NoReturn:
        """Print error and exit."""
        self.err_console.print(f"[red]Error: {escape(message)}[/]")
        sys.exit(code)

    def run(self, argv=None) -> None:
        """Main entry point."""
        args = self.parse_args(argv)
        self.verbose = args.verbose
        self.configure_logging(args)

        self.validate_args(args)
        config = self.create_config(args)
        self.print_header(args, config)

        result = self.run_search(config)
        if result.cancelled:
            self.warning("Scan was cancelled before completion, no results to report")
            return
        if result.no_files_matched and result.filtered:
            self.console.print("[yellow]No files matched the name filter[/]")
        else:
            if self.verbose:
                self.console.print()
            self.console.print(f"[green]Scanned {result.candidate_count} files[/]")
            self.output_results(result.groups, config)

        self.export_outputs(result.groups, config)

        elapsed = time.time() - self.start_time
        if self.verbose:
            self.console.print(f"\n[green]Completed in {elapsed:.2f} seconds[/]")


def main() -> None:
    """Application entry point."""
    app = CLIApplication()
    try:
        app.run()
    except KeyboardInterrupt:
        print("\nOperation cancelled by user (Ctrl+C)", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        if os.environ.get("DEBUG"):
            raise
        print(f"Unexpected error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
