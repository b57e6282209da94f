"""
Exception hierarchy for zlog.

Frame resolution never raises; these cover configuration problems and
caller mistakes only.
"""

from pathlib import Path
from typing import Optional, Union


class ZLogError(Exception):
    """Base class for all zlog errors."""


class ConfigError(ZLogError, ValueError):
    """A policy file or output destination could not be used."""

    def __init__(self, message: str, path: Optional[Union[str, Path]] = None):
        self.path = str(path) if path is not None else None
        if self.path:
            message = f"{message} ({self.path})"
        super().__init__(message)


class BuilderEmittedError(ZLogError, RuntimeError):
    """A builder was used again after its terminal call."""


class ZLogPanic(ZLogError, RuntimeError):
    """Raised by panic()/panicf() for unrecoverable situations."""
