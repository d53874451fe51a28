"""
Logging infrastructure for hmmkit.

Every module logs through a child of the ``hmmkit`` logger. The handlers
on that logger are built from the ``logging`` config section and can be
rebuilt after the configuration changes. Console output goes to stderr
so command results on stdout stay clean.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Optional

from .config import get_config

ROOT_LOGGER_NAME = 'hmmkit'


def _resolve_level(level: str) -> int:
    """Map a level name such as 'debug' to its logging constant."""
    value = getattr(logging, str(level).upper(), None)
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


class HMMKitLogger:
    """Owns the console and file handlers attached to the ``hmmkit`` logger."""

    def __init__(self):
        self.root = logging.getLogger(ROOT_LOGGER_NAME)
        self.root.propagate = False
        self._console = logging.StreamHandler(sys.stderr)
        self.root.addHandler(self._console)
        self._file: Optional[logging.FileHandler] = None
        self.configure()

    def configure(self):
        """Apply the current ``logging`` config section to the handlers."""
        settings = get_config('logging')
        level = _resolve_level(settings.get('level') or 'WARNING')
        self._formatter = logging.Formatter(settings.get('format'))

        self._console.setFormatter(self._formatter)

        self.disable_file_logging()
        if settings.get('file_logging'):
            self.enable_file_logging(settings.get('log_file'))

        self.set_level(level)

    def set_level(self, level):
        log_level = level if isinstance(level, int) else _resolve_level(level)
        self.root.setLevel(log_level)
        for handler in self.root.handlers:
            handler.setLevel(log_level)

    def enable_file_logging(self, log_file: Optional[str] = None):
        """Add a file handler; a second call with the same path is a no-op."""
        log_path = Path(log_file or get_config('logging', 'log_file') or 'hmmkit.log')

        if self._file is not None:
            if self._file.baseFilename == os.path.abspath(log_path):
                return
            self.disable_file_logging()

        log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = logging.FileHandler(log_path)
        self._file.setFormatter(self._formatter)
        self._file.setLevel(self.root.level)
        self.root.addHandler(self._file)

    def disable_file_logging(self):
        if self._file is None:
            return
        self.root.removeHandler(self._file)
        self._file.close()
        self._file = None


# Global logger manager instance
_logger_manager = HMMKitLogger()


def get_logger(name: str = 'main') -> logging.Logger:
    """
    Get a logger under the ``hmmkit`` hierarchy.

    Module names already inside the package (``hmmkit.io.text``) are used
    as is; anything else is nested under ``hmmkit``.
    """
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + '.'):
        return logging.getLogger(name)
    return logging.getLogger(f'{ROOT_LOGGER_NAME}.{name}')


def configure_logging():
    """Re-apply the ``logging`` config section after it changed."""
    _logger_manager.configure()


def set_log_level(level: str):
    """Set global logging level."""
    _logger_manager.set_level(level)


def enable_file_logging(log_file: Optional[str] = None):
    """Enable file logging globally."""
    _logger_manager.enable_file_logging(log_file)


def disable_file_logging():
    """Disable file logging globally."""
    _logger_manager.disable_file_logging()
