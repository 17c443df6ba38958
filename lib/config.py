#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Configuration Manager
Loads the YAML configuration and merges it over built-in defaults.
"""

import copy
import yaml
from typing import Any, Dict, List, Optional

from .paths import paths


class Config:
    """Configuration manager with portable defaults."""

    _instance: Optional['Config'] = None

    DEFAULTS = {
        'version': '1.0.0',
        'discovery': {
            'targets_file': 'config/targets.txt'
        },
        'dns': {
            'zone': 'corp.example.com'
        },
        'tls': {
            'protocols': [
                'PCT 1.0',
                'SSL 2.0',
                'SSL 3.0',
                'TLS 1.0',
                'TLS 1.1',
                'TLS 1.2',
                'TLS 1.3'
            ],
            'roles': ['Client', 'Server']
        },
        'reporting': {
            'output_dir': 'data/reports',
            'open_html': True,
            'csv_encoding': 'utf-8'
        },
        'powershell': {
            'executable': 'powershell.exe',
            'timeout_seconds': 60
        },
        'logging': {
            'level': 'INFO',
            'max_bytes': 10 * 1024 * 1024,
            'backup_count': 30
        }
    }

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return
        self._initialized = True
        self._config: Dict[str, Any] = {}
        self._load()

    def _load(self):
        """Load configuration from file, falling back to defaults."""
        config_file = paths.config_active

        if config_file.exists():
            try:
                with open(config_file, 'r', encoding='utf-8') as f:
                    loaded = yaml.safe_load(f) or {}
                # Merge with defaults for any missing keys
                self._config = self._deep_merge(copy.deepcopy(self.DEFAULTS), loaded)
            except (OSError, yaml.YAMLError) as e:
                print(f"Warning: Failed to load config, using defaults: {e}")
                self._config = copy.deepcopy(self.DEFAULTS)
        else:
            self._config = copy.deepcopy(self.DEFAULTS)

    def _deep_merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge override into base."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value
        return result

    def get(self, key: str, default: Any = None) -> Any:
        """Get a config value using dot notation (e.g., 'dns.zone')."""
        keys = key.split('.')
        value = self._config
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def get_zone(self) -> str:
        return self.get('dns.zone', '')

    def get_tls_protocols(self) -> List[str]:
        return list(self.get('tls.protocols', []))

    def get_tls_roles(self) -> List[str]:
        return list(self.get('tls.roles', []))

    def get_output_dir(self):
        """Report directory as an absolute path."""
        return paths.resolve(self.get('reporting.output_dir', 'data/reports'))

    def get_targets_file(self):
        """Default targets file as an absolute path."""
        return paths.resolve(self.get('discovery.targets_file', 'config/targets.txt'))

    def get_csv_encoding(self) -> str:
        return self.get('reporting.csv_encoding', 'utf-8')

    def get_powershell(self) -> tuple:
        """Get PowerShell executable and timeout in seconds."""
        return (
            self.get('powershell.executable', 'powershell.exe'),
            int(self.get('powershell.timeout_seconds', 60))
        )


# Singleton instance
config = Config()


def get_config() -> Config:
    """Get the singleton config instance."""
    return config


if __name__ == '__main__':
    # Self-test
    c = get_config()
    print(f"Config file: {paths.config_active}")
    print(f"Zone: {c.get_zone()}")
    print(f"TLS protocols: {c.get_tls_protocols()}")
    print(f"Output dir: {c.get_output_dir()}")
