#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Progress indicator

Usage:
  tracker = ProgressTracker(total_items=len(targets), task_name="SCHANNEL audit")
  for target in targets:
      tracker.update(status=f"Querying {target}")
  tracker.complete()
"""

import sys
from datetime import datetime, timedelta


class Colors:
    """ANSI color codes"""
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    NC = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'


class ProgressTracker:
    """Single-line progress bar with ETA, written to stderr."""

    BAR_LENGTH = 40

    def __init__(self, total_items, task_name="Task", enabled=True, stream=None):
        self.total_items = max(int(total_items), 0)
        self.task_name = task_name
        self.stream = stream or sys.stderr
        self.enabled = enabled and hasattr(self.stream, 'isatty') and self.stream.isatty()
        self.current_item = 0
        self.start_time = datetime.now()

    def update(self, current=None, status=""):
        """Advance the bar (by one unless current is given)."""
        if current is not None:
            self.current_item = current
        else:
            self.current_item += 1

        if not self.enabled or self.total_items == 0:
            return

        progress_pct = int((self.current_item / self.total_items) * 100)

        elapsed = datetime.now() - self.start_time
        if self.current_item > 0:
            rate = elapsed.total_seconds() / self.current_item
            eta = timedelta(seconds=int(rate * (self.total_items - self.current_item)))
            eta_str = str(eta)
        else:
            eta_str = "Calculating..."

        filled = int((progress_pct / 100) * self.BAR_LENGTH)
        bar = '#' * filled + '-' * (self.BAR_LENGTH - filled)

        output = f"\r\033[K{Colors.BOLD}{self.task_name}:{Colors.NC} "
        output += f"[{Colors.CYAN}{bar}{Colors.NC}] "
        output += f"{Colors.BOLD}{progress_pct}%{Colors.NC} "
        output += f"({self.current_item}/{self.total_items}) "
        output += f"{Colors.YELLOW}ETA: {eta_str}{Colors.NC}"
        if status:
            output += f" {Colors.DIM}{status}{Colors.NC}"

        self.stream.write(output)
        self.stream.flush()

    def complete(self, final_message=""):
        """Clear the bar and print a completion line."""
        if not self.enabled:
            return
        elapsed = datetime.now() - self.start_time
        output = f"\r\033[K{Colors.GREEN}{self.task_name} complete{Colors.NC} "
        output += f"({self.total_items} items in {str(elapsed).split('.')[0]})"
        if final_message:
            output += f" {Colors.CYAN}{final_message}{Colors.NC}"
        self.stream.write(output + "\n")
        self.stream.flush()
