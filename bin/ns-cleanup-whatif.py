#!/usr/bin/env python3
"""
DC Hygiene Toolkit - NS cleanup what-if report (never deletes)

Usage:
    python bin/ns-cleanup-whatif.py --targets-file servers.txt
"""

import sys
from pathlib import Path

# Set up paths - auto-detect from script location
SCRIPT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(SCRIPT_DIR.parent))

from scanners.ns_cleanup import main_what_if

if __name__ == '__main__':
    sys.exit(main_what_if())
