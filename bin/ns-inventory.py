#!/usr/bin/env python3
"""
DC Hygiene Toolkit - NS record inventory of every domain controller

Usage:
    python bin/ns-inventory.py --zone corp.example.com
    python bin/ns-inventory.py --targets-file servers.txt -v
"""

import sys
from pathlib import Path

# Set up paths - auto-detect from script location
SCRIPT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(SCRIPT_DIR.parent))

from scanners.ns_inventory import main

if __name__ == '__main__':
    sys.exit(main())
