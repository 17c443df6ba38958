#!/usr/bin/env python3
"""
DC Hygiene Toolkit - SCHANNEL protocol audit of every domain controller

Usage:
    python bin/schannel-audit.py                  # all DCs, CSV + HTML, opens report
    python bin/schannel-audit.py --no-open        # do not open the HTML report
    python bin/schannel-audit.py --targets-file servers.txt -v
"""

import sys
from pathlib import Path

# Set up paths - auto-detect from script location
SCRIPT_DIR = Path(__file__).resolve().parent
sys.path.insert(0, str(SCRIPT_DIR.parent))

from scanners.tls_scanner import main

if __name__ == '__main__':
    sys.exit(main())
