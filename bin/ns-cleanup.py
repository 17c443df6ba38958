#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Remove NS records that no longer resolve

Usage:
    python bin/ns-cleanup.py                      # servers from discovery.targets_file
    python bin/ns-cleanup.py --targets-file servers.txt --zone corp.example.com
    python bin/ns-cleanup.py --what-if            # report only, delete nothing
"""

import sys
from pathlib import Path

# Set up paths - auto-detect from script location
SCRIPT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(SCRIPT_DIR.parent))

from scanners.ns_cleanup import main

if __name__ == '__main__':
    sys.exit(main())
