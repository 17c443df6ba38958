#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Error taxonomy

Two tiers:
  fatal        DiscoveryError aborts the run before any collection starts.
  recoverable  PowerShellError / ResolutionError are caught at the per-key
               seam and turned into QueryError values in the report.
"""


class HygieneError(Exception):
    """Base class for all toolkit exceptions."""


class DiscoveryError(HygieneError):
    """Raised when the target list cannot be obtained or is empty."""


class PowerShellError(HygieneError):
    """Raised when a PowerShell command fails, times out or returns bad JSON."""

    def __init__(self, message: str, returncode: int = None, stderr: str = ''):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class ResolutionError(HygieneError):
    """Raised when a host name does not resolve to any address."""
