"""
Per-level auto-attach and call-stack depth policy.

The process-wide policy is an immutable snapshot. ``set_config`` swaps the
whole snapshot under a lock; it is never patched field by field, so a
logger created concurrently sees either the old or the new policy.

Usage::

    set_config(configure(
        auto_source_config(Level.ERROR, True),
        auto_callstack_config(Level.ERROR, True),
        max_callstack_depth_config(Level.ERROR, 8),
    ))
"""

import logging
import threading
from dataclasses import dataclass, replace
from enum import IntEnum
from types import MappingProxyType
from typing import Any, Callable, Dict, Mapping, Optional


class Level(IntEnum):
    """Closed set of log levels, numerically aligned with stdlib logging."""

    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARN = logging.WARNING
    ERROR = logging.ERROR

    @classmethod
    def parse(cls, value: Any) -> "Level":
        """Accept a Level, a stdlib numeric level or a level name."""
        if isinstance(value, cls):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARNING":
                name = "WARN"
            if name in cls.__members__:
                return cls[name]
        raise ValueError(f"Unknown log level: {value!r}")


DEFAULT_MAX_DEPTH: Dict[Level, int] = {
    Level.DEBUG: 20,
    Level.INFO: 5,
    Level.WARN: 5,
    Level.ERROR: 10,
}

FALLBACK_MAX_DEPTH = 5


@dataclass(frozen=True)
class LevelConfig:
    """Settings for one level. A max_depth of None or <= 0 means "use default"."""

    auto_source: bool = False
    auto_callstack: bool = False
    max_depth: Optional[int] = None


class DepthPolicy:
    """Immutable mapping from level to LevelConfig."""

    __slots__ = ("_levels",)

    def __init__(self, levels: Optional[Mapping[Level, LevelConfig]] = None):
        merged = {level: LevelConfig() for level in Level}
        if levels:
            merged.update(levels)
        self._levels = MappingProxyType(merged)

    @property
    def levels(self) -> Mapping[Level, LevelConfig]:
        return self._levels

    def level_config(self, level: Any) -> LevelConfig:
        try:
            return self._levels[Level.parse(level)]
        except ValueError:
            return LevelConfig()

    def effective_max_depth(self, level: Any) -> int:
        try:
            parsed = Level.parse(level)
        except ValueError:
            return FALLBACK_MAX_DEPTH
        configured = self._levels[parsed].max_depth
        if configured is not None and configured > 0:
            return configured
        return DEFAULT_MAX_DEPTH.get(parsed, FALLBACK_MAX_DEPTH)

    def auto_source(self, level: Any) -> bool:
        return self.level_config(level).auto_source

    def auto_callstack(self, level: Any) -> bool:
        return self.level_config(level).auto_callstack

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DepthPolicy):
            return NotImplemented
        return dict(self._levels) == dict(other._levels)

    def __repr__(self) -> str:
        return f"DepthPolicy({dict(self._levels)!r})"


# ---------------------------------------------------------------------------
# Options
# ---------------------------------------------------------------------------

ConfigOption = Callable[[Dict[Level, LevelConfig]], None]


def auto_source_config(level: Any, enabled: bool) -> ConfigOption:
    """Attach the caller's source location to every record at this level."""
    parsed = Level.parse(level)

    def apply(levels: Dict[Level, LevelConfig]) -> None:
        levels[parsed] = replace(levels[parsed], auto_source=enabled)

    return apply


def auto_callstack_config(level: Any, enabled: bool) -> ConfigOption:
    """Attach the call stack to every record at this level."""
    parsed = Level.parse(level)

    def apply(levels: Dict[Level, LevelConfig]) -> None:
        levels[parsed] = replace(levels[parsed], auto_callstack=enabled)

    return apply


def max_callstack_depth_config(level: Any, depth: int) -> ConfigOption:
    """Override the call-stack depth for this level."""
    parsed = Level.parse(level)

    def apply(levels: Dict[Level, LevelConfig]) -> None:
        levels[parsed] = replace(levels[parsed], max_depth=depth)

    return apply


def configure(*options: ConfigOption) -> DepthPolicy:
    """Build a new policy from all-defaults plus the given options."""
    levels = {level: LevelConfig() for level in Level}
    for option in options:
        option(levels)
    return DepthPolicy(levels)


# ---------------------------------------------------------------------------
# Process-wide snapshot
# ---------------------------------------------------------------------------

_lock = threading.Lock()
_current = DepthPolicy()


def set_config(policy: DepthPolicy) -> None:
    """Replace the process-wide policy. Loggers created afterwards use it."""
    if not isinstance(policy, DepthPolicy):
        raise TypeError(f"Expected DepthPolicy, got {type(policy).__name__}")
    global _current
    with _lock:
        _current = policy


def get_config() -> DepthPolicy:
    with _lock:
        return _current


def reset_config() -> None:
    set_config(DepthPolicy())
