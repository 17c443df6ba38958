#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Path Resolver
Provides portable, relative path resolution for all components.
All paths are relative to DC_HYGIENE_HOME (env var or auto-detected).
"""

import os
from pathlib import Path
from typing import Optional


class PortablePaths:
    """Portable path resolver - works from any installation location."""

    _instance: Optional['PortablePaths'] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._resolve_home()

    def _resolve_home(self):
        """Resolve DC_HYGIENE_HOME from environment or auto-detect."""
        # Priority 1: Environment variable
        if 'DC_HYGIENE_HOME' in os.environ:
            self.home = Path(os.environ['DC_HYGIENE_HOME']).resolve()
            return

        # Priority 2: Auto-detect from this file's location
        # This file is in lib/, so parent is home; only valid in a checkout
        self.home = Path(__file__).resolve().parent.parent

        if not (self.home / 'lib' / 'paths.py').exists() or \
                not (self.home / 'pyproject.toml').exists():
            raise RuntimeError(
                f"Invalid DC_HYGIENE_HOME: {self.home}\n"
                f"Not a source checkout; install with 'pip install -e .' "
                f"or set DC_HYGIENE_HOME."
            )

    @property
    def config_active(self) -> Path:
        """Active configuration file."""
        return self.home / 'config' / 'active' / 'config.yaml'

    @property
    def logs(self) -> Path:
        """Execution logs."""
        return self.home / 'data' / 'logs'

    def resolve(self, value) -> Path:
        """Resolve a configured path; relative values are taken from home."""
        path = Path(value).expanduser()
        if not path.is_absolute():
            path = self.home / path
        return path

    def __str__(self) -> str:
        return f"PortablePaths(home={self.home})"

    def __repr__(self) -> str:
        return self.__str__()


# Singleton instance for easy import
paths = PortablePaths()


def get_paths() -> PortablePaths:
    """Get the singleton paths instance."""
    return paths


if __name__ == '__main__':
    # Self-test
    p = get_paths()
    print(f"DC Hygiene Home: {p.home}")
    print(f"Logs: {p.logs}")
    print(f"Config: {p.config_active}")
