#!/usr/bin/env python3
"""
DC Hygiene Toolkit - Logging System
Provides consistent logging across all components: a rotating file per
component plus a console stream whose verbosity the caller controls.
"""

import logging
from logging.handlers import RotatingFileHandler

from .paths import paths
from .config import config


class HygieneLogger:
    """Centralized logging with rotation."""

    _loggers: dict = {}
    _console_level: int = logging.WARNING

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get or create a logger for a component."""
        if name in cls._loggers:
            return cls._loggers[name]

        level = logging.getLevelName(str(config.get('logging.level', 'INFO')).upper())
        if not isinstance(level, int):
            level = logging.INFO

        # Ensure log directory exists
        paths.logs.mkdir(parents=True, exist_ok=True)

        logger = logging.getLogger(f"dc-hygiene.{name}")
        logger.setLevel(logging.DEBUG)
        logger.handlers.clear()
        logger.propagate = False

        # File handler with rotation
        file_handler = RotatingFileHandler(
            paths.logs / f"{name}.log",
            maxBytes=int(config.get('logging.max_bytes', 10 * 1024 * 1024)),
            backupCount=int(config.get('logging.backup_count', 30)),
            encoding='utf-8'
        )
        file_handler.setLevel(level)

        # Console handler
        console_handler = logging.StreamHandler()
        console_handler.setLevel(cls._console_level)

        formatter = logging.Formatter(
            '%(asctime)s | %(name)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(formatter)
        console_handler.setFormatter(formatter)

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)

        cls._loggers[name] = logger
        return logger

    @classmethod
    def set_console_level(cls, level: int):
        """Change console verbosity for existing and future loggers."""
        cls._console_level = level
        for logger in cls._loggers.values():
            for handler in logger.handlers:
                if type(handler) is logging.StreamHandler:
                    handler.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a logger by name."""
    return HygieneLogger.get_logger(name)


def set_verbose(verbose: bool = True):
    """Show per-item progress lines on the console."""
    HygieneLogger.set_console_level(logging.DEBUG if verbose else logging.WARNING)


if __name__ == '__main__':
    # Self-test
    logger = get_logger('test')
    logger.info("Test info message")
    logger.warning("Test warning message")
    print(f"Logs written to: {paths.logs}")
