#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Target Discovery

Produces the ordered, de-duplicated list of servers a run works on, either
from Active Directory (every domain controller) or from a plain text file with
one server per line.  Any failure here is fatal: DiscoveryError.
"""

from pathlib import Path
from typing import Iterable, List, Optional

from .exceptions import DiscoveryError, PowerShellError
from .logger import get_logger

logger = get_logger('discovery')

SOURCE_DIRECTORY = 'directory'
SOURCE_FILE = 'file'

DC_QUERY = (
    "Import-Module ActiveDirectory -ErrorAction Stop; "
    "Get-ADDomainController -Filter * -ErrorAction Stop "
    "| Select-Object HostName,Name"
)


def unique_targets(names: Iterable[str]) -> List[str]:
    """Strip, drop blanks and drop case-insensitive duplicates, keeping order."""
    seen = set()
    targets = []
    for name in names:
        name = (name or '').strip()
        if not name:
            continue
        key = name.lower()
        if key in seen:
            continue
        seen.add(key)
        targets.append(name)
    return targets


def discover_domain_controllers(shell) -> List[str]:
    """List every domain controller in the current domain."""
    try:
        rows = shell.run_json(DC_QUERY, timeout=180)
    except PowerShellError as exc:
        raise DiscoveryError(f"Directory query failed: {exc}") from exc

    targets = unique_targets(row.get('HostName') or row.get('Name') for row in rows)
    if not targets:
        raise DiscoveryError("Directory query returned no domain controllers")

    logger.info(f"Discovered {len(targets)} domain controller(s)")
    return targets


def load_targets_file(path) -> List[str]:
    """Read newline-delimited server names from a file."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8-sig') as f:
            lines = f.read().splitlines()
    except OSError as exc:
        raise DiscoveryError(f"Cannot read targets file {path}: {exc}") from exc

    targets = unique_targets(lines)
    if not targets:
        raise DiscoveryError(f"Targets file {path} lists no servers")

    logger.info(f"Loaded {len(targets)} target(s) from {path}")
    return targets


def discover_targets(source: str, shell=None,
                     targets_file: Optional[Path] = None) -> List[str]:
    """Run the configured discovery strategy."""
    if source == SOURCE_DIRECTORY:
        if shell is None:
            raise DiscoveryError("Directory discovery needs a PowerShell runner")
        return discover_domain_controllers(shell)
    if source == SOURCE_FILE:
        if targets_file is None:
            raise DiscoveryError("File discovery needs a targets file")
        return load_targets_file(targets_file)
    raise DiscoveryError(f"Unknown discovery source: {source}")
