"""
DC Hygiene Toolkit - Shared Library
"""

from .paths import paths, get_paths
from .config import config, get_config

__all__ = [
    'paths', 'get_paths',
    'config', 'get_config'
]
