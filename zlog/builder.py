"""
Fluent log record builder.

A builder is created per log call, enriched by chained calls and finished
by exactly one terminal call::

    error().segment("order", "process").err(exc).alert().msgf("taskId: %s", task_id)

The level's policy is read once, at creation. If the policy asks for it,
``source`` and ``callstack`` are attached right away, resolved against the
code that asked for the logger.
"""

import os
import sys
import threading
from typing import Any, Iterable, List, Optional, Tuple

from zlog.attributes import LogAttribute
from zlog.context import extract
from zlog.errors import BuilderEmittedError, ZLogPanic
from zlog.frames import FrameDescriptor, collect_callstack, resolve_frame
from zlog.metrics import ALERT_RECORDS, FATAL_EXITS, RECORDS_EMITTED
from zlog.policy import DepthPolicy, Level, get_config
from zlog.sink import StructuredSink, get_sink


def join_segment(main_segment: str, *detail: str) -> str:
    """Join a segment path, dropping empty detail parts."""
    parts = [main_segment]
    parts.extend(part for part in detail if part)
    return "/".join(parts)


class LogRecordBuilder:
    """Accumulates attributes for one record and writes it on the terminal call."""

    def __init__(
        self,
        level: Any,
        sink: Optional[StructuredSink] = None,
        policy: Optional[DepthPolicy] = None,
    ):
        self.level = Level.parse(level)
        self.policy = policy if policy is not None else get_config()
        self.max_depth = self.policy.effective_max_depth(self.level)
        self._sink = sink if sink is not None else get_sink()
        self._attributes: List[LogAttribute] = []
        self._alert = False
        self._emitted = False

    @property
    def attributes(self) -> Tuple[LogAttribute, ...]:
        return tuple(self._attributes)

    @property
    def emitted(self) -> bool:
        return self._emitted

    # -- enrichment ---------------------------------------------------------

    def context(self, source: Any, keys: Iterable[str]) -> "LogRecordBuilder":
        """
        Attach values from a context source under ``app_ctx``.

        Args:
            source: Mapping, object with lookup(key), or None for the
                current request-scoped context
            keys: Keys to look up; missing or None values are skipped
        """
        self._ensure_open()
        values = extract(source, keys)
        if not values:
            return self
        return self._append(LogAttribute.mapping("app_ctx", values))

    def segment(self, main_segment: str, *detail: str) -> "LogRecordBuilder":
        self._ensure_open()
        return self._append(LogAttribute.string("segment", join_segment(main_segment, *detail)))

    def with_error(self, error: Optional[BaseException]) -> "LogRecordBuilder":
        self._ensure_open()
        if error is None:
            return self
        return self._append(LogAttribute.string("error_msg", str(error)))

    err = with_error

    def key_value(self, key: str, value: str) -> "LogRecordBuilder":
        self._ensure_open()
        return self._append(LogAttribute.string(key, value))

    def alert(self) -> "LogRecordBuilder":
        self._ensure_open()
        self._alert = True
        return self._append(LogAttribute.boolean("alert", True))

    def with_source(self) -> "LogRecordBuilder":
        self._ensure_open()
        return self._append_source(resolve_frame(1))

    def with_source_skip(self, skip: int) -> "LogRecordBuilder":
        """Attach the frame ``skip`` levels above the caller as ``source``."""
        self._ensure_open()
        return self._append_source(resolve_frame(1 + skip))

    def with_call_stack(self) -> "LogRecordBuilder":
        self._ensure_open()
        return self._append_callstack(collect_callstack(1, self.max_depth))

    # -- terminal calls -----------------------------------------------------

    def message(self, message: str) -> None:
        self._emit(message)

    msg = message

    def messagef(self, fmt: str, *args: Any) -> None:
        self._emit(fmt % args if args else fmt)

    msgf = messagef

    def fatal(self, message: str) -> None:
        """Write the record, flush, and exit with status 1."""
        self._emit(message)
        self._exit()

    def fatalf(self, fmt: str, *args: Any) -> None:
        self._emit(fmt % args if args else fmt)
        self._exit()

    # -- internals ----------------------------------------------------------

    def _append(self, attribute: LogAttribute) -> "LogRecordBuilder":
        self._attributes.append(attribute)
        return self

    def _append_source(self, frame: Optional[FrameDescriptor]) -> "LogRecordBuilder":
        if frame is None:
            return self
        return self._append(LogAttribute.string("source", frame.format()))

    def _append_callstack(self, stack: List[str]) -> "LogRecordBuilder":
        return self._append(LogAttribute.strings("callstack", stack))

    def _ensure_open(self) -> None:
        if self._emitted:
            raise BuilderEmittedError("Log record already emitted; create a new logger")

    def _emit(self, message: str) -> None:
        self._ensure_open()
        self._emitted = True
        self._sink.emit(self.level, message, self._attributes)
        RECORDS_EMITTED.labels(level=self.level.name).inc()
        if self._alert:
            ALERT_RECORDS.inc()

    def _exit(self) -> None:
        try:
            self._sink.flush()
        except Exception:
            # best effort, the process exits regardless
            pass
        FATAL_EXITS.inc()
        if threading.current_thread() is threading.main_thread():
            sys.exit(1)
        # SystemExit would only end this thread
        os._exit(1)


# ---------------------------------------------------------------------------
# Constructors
# ---------------------------------------------------------------------------


def new_builder(level: Any, skip: int = 0) -> LogRecordBuilder:
    """
    Create a builder and apply the level's auto-attach settings.

    Args:
        level: Record level
        skip: Frames between the caller of this function and the
            application code the auto-attached source should point at
    """
    builder = LogRecordBuilder(level)
    if builder.policy.auto_source(builder.level):
        builder._append_source(resolve_frame(skip + 1))
    if builder.policy.auto_callstack(builder.level):
        builder._append_callstack(collect_callstack(skip + 1, builder.max_depth))
    return builder


def debug() -> LogRecordBuilder:
    """Detailed troubleshooting records. Call stacks default to 20 frames."""
    return new_builder(Level.DEBUG, skip=1)


def info() -> LogRecordBuilder:
    """Normal operational records. Call stacks default to 5 frames."""
    return new_builder(Level.INFO, skip=1)


def warn() -> LogRecordBuilder:
    """Recoverable problems. Call stacks default to 5 frames."""
    return new_builder(Level.WARN, skip=1)


def error() -> LogRecordBuilder:
    """Errors worth investigating. Call stacks default to 10 frames."""
    return new_builder(Level.ERROR, skip=1)


def panic(message: str) -> None:
    """Abort the current flow without logging."""
    raise ZLogPanic(message)


def panicf(fmt: str, *args: Any) -> None:
    raise ZLogPanic(fmt % args if args else fmt)
