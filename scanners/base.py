#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Base Scanner Class
Provides the shared discover -> collect -> classify loop and CLI plumbing.
"""

import argparse
import sys
from abc import ABC, abstractmethod
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from lib.config import get_config
from lib.discovery import SOURCE_DIRECTORY, SOURCE_FILE, discover_targets
from lib.logger import get_logger, set_verbose
from lib.paths import get_paths
from lib.powershell import PowerShell
from lib.progress import ProgressTracker


class BaseScanner(ABC):
    """Base class for all scanners.

    Targets are processed one at a time, in order; each target's results are
    appended before the next target starts.
    """

    SCANNER_NAME = "base"
    SCANNER_DESCRIPTION = "Base scanner class"

    def __init__(self, shell: Optional[PowerShell] = None, show_progress: bool = True):
        self.paths = get_paths()
        self.config = get_config()
        self.shell = shell if shell is not None else PowerShell()
        self.logger = get_logger(self.SCANNER_NAME)
        self.show_progress = show_progress

        self.results: List[Any] = []
        self.start_time: Optional[datetime] = None
        self.end_time: Optional[datetime] = None

    @abstractmethod
    def scan_target(self, target: str) -> List[Any]:
        """Collect and classify everything for one target.

        Must never raise for remote failures; those become result rows.
        """

    def scan(self, targets: List[str]) -> List[Any]:
        """Run scan_target over every target in order."""
        self.start_time = datetime.now()
        self.logger.info(f"Starting {self.SCANNER_DESCRIPTION} on {len(targets)} target(s)")

        tracker = ProgressTracker(len(targets), task_name=self.SCANNER_DESCRIPTION,
                                  enabled=self.show_progress)
        for target in targets:
            tracker.update(status=target)
            target_results = self.scan_target(target)
            self.logger.debug(f"{target}: {len(target_results)} result(s)")
            self.results.extend(target_results)

        self.end_time = datetime.now()
        tracker.complete(f"{len(self.results)} results")
        self.logger.info(f"Finished {self.SCANNER_DESCRIPTION}: {len(self.results)} result(s)")
        return self.results

    def _count_by_status(self) -> Dict[str, int]:
        return dict(Counter(result.status.value for result in self.results))

    def get_summary(self) -> Dict:
        """Get scan summary."""
        return {
            'scanner': self.SCANNER_NAME,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'duration': str(self.end_time - self.start_time) if self.end_time and self.start_time else None,
            'results_count': len(self.results),
            'results_by_status': self._count_by_status(),
        }


def print_summary(scanner: BaseScanner):
    """Print the end-of-run summary line."""
    summary = scanner.get_summary()
    counts = ', '.join(f"{status}: {n}" for status, n in summary['results_by_status'].items())
    print(f"{scanner.SCANNER_DESCRIPTION}: {summary['results_count']} result(s) "
          f"in {summary['duration']}" + (f" ({counts})" if counts else ''))


# ---------------------------------------------------------------------------
# Command line helpers shared by the scripts
# ---------------------------------------------------------------------------

def build_parser(description: str) -> argparse.ArgumentParser:
    """Parser with the options every script accepts."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument('--targets-file', type=Path,
                        help='Read servers from this file (one per line) '
                             'instead of the default discovery source')
    parser.add_argument('--output-dir', type=Path,
                        help='Directory for reports (default: reporting.output_dir)')
    parser.add_argument('--verbose', '-v', action='store_true',
                        help='Print per-item status messages')
    parser.add_argument('--no-progress', action='store_true',
                        help='Do not draw a progress bar')
    return parser


def configure_console(args: argparse.Namespace):
    set_verbose(args.verbose)


def select_targets(args: argparse.Namespace, shell: PowerShell,
                   default_source: str) -> List[str]:
    """Discover targets from --targets-file or the script's default source.

    Raises DiscoveryError, which callers treat as fatal.
    """
    config = get_config()
    if args.targets_file is not None:
        return discover_targets(SOURCE_FILE, targets_file=args.targets_file)
    if default_source == SOURCE_FILE:
        return discover_targets(SOURCE_FILE, targets_file=config.get_targets_file())
    return discover_targets(SOURCE_DIRECTORY, shell=shell)


def output_dir(args: argparse.Namespace) -> Path:
    if args.output_dir is not None:
        return args.output_dir
    return get_config().get_output_dir()


def fatal(logger, message: str) -> int:
    """Report a fatal error and return the process exit code."""
    logger.error(message)
    print(f"ERROR: {message}", file=sys.stderr)
    return 1
