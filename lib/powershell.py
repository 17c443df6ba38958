#!/usr/bin/env python3
"""
DC Hygiene Toolkit - PowerShell runner

All remote work (directory queries, registry reads, DNS server cmdlets) goes
through PowerShell on the admin workstation.  Failures raise PowerShellError so
callers decide whether they are fatal or recorded per item.
"""

import json
import subprocess
from typing import Any, Dict, List, Optional

from .config import config
from .exceptions import PowerShellError
from .logger import get_logger


def ps_quote(value: str) -> str:
    """Quote a value as a single-quoted PowerShell string literal."""
    return "'" + str(value).replace("'", "''") + "'"


class PowerShell:
    """Thin wrapper around powershell.exe -Command."""

    def __init__(self, executable: Optional[str] = None,
                 timeout: Optional[int] = None):
        default_exe, default_timeout = config.get_powershell()
        self.executable = executable or default_exe
        self.timeout = timeout or default_timeout
        self.logger = get_logger('powershell')

    def run(self, script: str, timeout: Optional[int] = None) -> str:
        """Execute a PowerShell command and return stripped stdout."""
        timeout = timeout or self.timeout
        cmd = [
            self.executable,
            '-NoProfile',
            '-NonInteractive',
            '-ExecutionPolicy', 'Bypass',
            '-Command', script,
        ]
        self.logger.debug(f"PS> {script[:120]}{'...' if len(script) > 120 else ''}")
        try:
            proc = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as exc:
            raise PowerShellError(f"PowerShell command timed out ({timeout}s)") from exc
        except FileNotFoundError as exc:
            raise PowerShellError(f"{self.executable} not found on PATH") from exc
        except OSError as exc:
            raise PowerShellError(f"PowerShell execution error: {exc}") from exc

        if proc.returncode != 0:
            stderr = (proc.stderr or '').strip()
            self.logger.debug(f"PS non-zero exit ({proc.returncode}): {stderr[:200]}")
            first_line = stderr.splitlines()[0] if stderr else f"exit code {proc.returncode}"
            raise PowerShellError(first_line, returncode=proc.returncode, stderr=stderr)

        return (proc.stdout or '').strip()

    def run_json(self, script: str, timeout: Optional[int] = None) -> List[Dict[str, Any]]:
        """Execute a PowerShell command and parse its JSON output.

        The script runs inside a script block piped to ``ConvertTo-Json``, so
        callers should *not* convert themselves.  A single object is returned
        as a one-element list; empty output is an empty list.
        """
        raw = self.run(f"& {{ {script} }} | ConvertTo-Json -Depth 4 -Compress",
                       timeout=timeout)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PowerShellError(f"Failed to parse PowerShell JSON output: {exc}") from exc
        if isinstance(data, dict):
            return [data]
        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]
        raise PowerShellError(f"Unexpected PowerShell JSON output: {type(data).__name__}")
