"""
Structured JSON sink built on structlog.

Every record is rendered as one JSON line::

    {"time": "2024-03-07T10:00:00Z", "level": "ERROR", "msg": "...", "segment": "api/users"}

Destinations are "stdout", "stderr", a file path (appended to), or several
of those at once.
"""

import logging
import sys
import threading
from pathlib import Path
from typing import IO, Any, Dict, List, Sequence, Union

import structlog
from loguru import logger

from zlog.attributes import LogAttribute
from zlog.errors import ConfigError
from zlog.policy import Level

_LEVEL_NAMES = {
    "debug": "DEBUG",
    "info": "INFO",
    "warning": "WARN",
    "warn": "WARN",
    "error": "ERROR",
}

_LEADING_KEYS = ("time", "level", "msg")

# Attributes travel to the processor chain as one dict under this key.
ATTRIBUTES_KEY = "_zlog_attributes"

Destination = Union[str, Path, IO[str]]


# ---------------------------------------------------------------------------
# Processors
# ---------------------------------------------------------------------------


def merge_record_attributes(
    _logger: Any, _method_name: str, event_dict: Dict[str, Any]
) -> Dict[str, Any]:
    """Unpack the record's attributes into the event dict; record fields win."""
    merged = dict(event_dict.pop(ATTRIBUTES_KEY, None) or {})
    merged.update(event_dict)
    return merged


def normalize_level(_logger: Any, _method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Rewrite structlog's lowercase level names to DEBUG/INFO/WARN/ERROR."""
    level = event_dict.get("level")
    if isinstance(level, str):
        event_dict["level"] = _LEVEL_NAMES.get(level, level.upper())
    return event_dict


def order_record_keys(_logger: Any, _method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Put time, level and msg first, attributes after in insertion order."""
    ordered = {key: event_dict.pop(key) for key in _LEADING_KEYS if key in event_dict}
    ordered.update(event_dict)
    return ordered


def build_processors() -> List[Any]:
    return [
        merge_record_attributes,
        structlog.processors.add_log_level,
        normalize_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%dT%H:%M:%SZ", utc=True, key="time"),
        structlog.processors.EventRenamer("msg"),
        order_record_keys,
        structlog.processors.JSONRenderer(),
    ]


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------


class ConsoleStream:
    """Writes to sys.stdout/sys.stderr as they are at write time."""

    def __init__(self, name: str = "stdout"):
        if name not in ("stdout", "stderr"):
            raise ConfigError(f"Unknown console stream: {name!r}")
        self.name = name

    def write(self, data: str) -> int:
        return getattr(sys, self.name).write(data)

    def flush(self) -> None:
        getattr(sys, self.name).flush()


class FanOutStream:
    """Duplicates every write to several streams."""

    def __init__(self, streams: Sequence[IO[str]]):
        self.streams = list(streams)

    def write(self, data: str) -> int:
        for stream in self.streams:
            stream.write(data)
        return len(data)

    def flush(self) -> None:
        for stream in self.streams:
            stream.flush()


def open_destination(destination: Destination) -> IO[str]:
    """Turn a destination name or path into a writable text stream."""
    if not isinstance(destination, (str, Path)):
        return destination

    target = str(destination).strip()
    if not target:
        raise ConfigError("Empty output destination")
    if target.lower() in ("stdout", "console"):
        return ConsoleStream("stdout")
    if target.lower() == "stderr":
        return ConsoleStream("stderr")

    path = Path(target)
    path.parent.mkdir(parents=True, exist_ok=True)
    return open(path, "a", encoding="utf-8")


def parse_destinations(value: str) -> List[str]:
    """Split a comma-separated destination list."""
    parts = [part.strip() for part in value.split(",")]
    parts = [part for part in parts if part]
    if not parts:
        raise ConfigError(f"No output destination in {value!r}")
    return parts


# ---------------------------------------------------------------------------
# Sink
# ---------------------------------------------------------------------------


class StructuredSink:
    """Serializes (level, message, attributes) records as JSON lines."""

    def __init__(self, *destinations: Destination):
        if not destinations:
            destinations = ("stdout",)
        streams: List[IO[str]] = []
        # files this sink opened itself and must close
        self._owned: List[IO[str]] = []
        try:
            for destination in destinations:
                stream = open_destination(destination)
                streams.append(stream)
                if isinstance(destination, (str, Path)) and not isinstance(stream, ConsoleStream):
                    self._owned.append(stream)
        except Exception:
            self.close()
            raise
        self.stream = streams[0] if len(streams) == 1 else FanOutStream(streams)
        self._logger = structlog.wrap_logger(
            structlog.WriteLogger(self.stream),
            processors=build_processors(),
            wrapper_class=structlog.make_filtering_bound_logger(logging.DEBUG),
            context_class=dict,
            cache_logger_on_first_use=False,
        )

    def emit(self, level: Level, message: str, attributes: Sequence[LogAttribute] = ()) -> None:
        values = dict(attr.render() for attr in attributes)
        self._logger.log(int(level), message, **{ATTRIBUTES_KEY: values})

    def flush(self) -> None:
        self.stream.flush()

    def close(self) -> None:
        """Close the files this sink opened. Console and caller streams stay open."""
        for stream in self._owned:
            if not stream.closed:
                stream.close()
        self._owned = []


_lock = threading.Lock()
_sink = StructuredSink()


def set_output(*destinations: Destination) -> StructuredSink:
    """Route all subsequently created loggers to the given destinations."""
    global _sink
    sink = StructuredSink(*destinations)
    with _lock:
        previous, _sink = _sink, sink
    previous.close()
    logger.debug(f"Log output switched to {len(destinations) or 1} destination(s)")
    return sink


def get_sink() -> StructuredSink:
    with _lock:
        return _sink
