"""
Caller-frame introspection and bounded call-stack capture.

Skip distances are always counted from the caller of the function being
called: ``resolve_frame(0)`` describes the function that called
``resolve_frame``, ``resolve_frame(1)`` that function's caller, and so on.
``collect_callstack`` counts the same way from its own caller.

Frames that cannot be resolved are omitted, never replaced by a placeholder
frame.

Usage::

    here = resolve_frame()
    print(here.format())          # "#orders.submit @ /app/orders.py:42"

    stack = collect_callstack(0, max_depth=5)
"""

import sys
from dataclasses import dataclass
from types import FrameType
from typing import List, Optional

ENTRY_POINT_MARKER = "#__main__.<module>"
UNKNOWN_FUNCTION = "?"


@dataclass(frozen=True)
class FrameDescriptor:
    """One resolved stack frame."""

    function_name: str
    file_path: str
    line_number: int

    @classmethod
    def from_frame(cls, frame: FrameType) -> "FrameDescriptor":
        code = frame.f_code
        # co_qualname only exists from 3.11 on
        name = getattr(code, "co_qualname", None) or code.co_name or ""
        module = frame.f_globals.get("__name__") or ""
        if name and module:
            name = f"{module.rsplit('.', 1)[-1]}.{name}"
        return cls(
            function_name=name or UNKNOWN_FUNCTION,
            file_path=code.co_filename,
            line_number=frame.f_lineno or 0,
        )

    def format(self) -> str:
        return f"#{self.function_name} @ {self.file_path}:{self.line_number}"

    def __str__(self) -> str:
        return self.format()


def resolve_frame(skip: int = 0) -> Optional[FrameDescriptor]:
    """
    Describe one frame of the current call stack.

    Args:
        skip: Frames to walk past, starting at the caller of this function

    Returns:
        The descriptor, or None when no such frame exists
    """
    if skip < 0:
        return None
    try:
        frame = sys._getframe(skip + 1)
    except ValueError:
        # walked past the bottom of the stack
        return None
    return FrameDescriptor.from_frame(frame)


def collect_callstack(
    start_skip: int,
    max_depth: int,
    stop_marker: str = ENTRY_POINT_MARKER,
) -> List[str]:
    """
    Collect at most ``max_depth`` formatted frames, innermost first.

    Args:
        start_skip: First frame to collect, counted from the caller of this function
        max_depth: Upper bound on the number of frames returned
        stop_marker: Prefix of the frame after which collection stops

    Returns:
        Formatted frames; empty when nothing could be collected
    """
    stack: List[str] = []
    if not isinstance(max_depth, int) or max_depth <= 0:
        return stack

    for skip in range(start_skip, start_skip + max_depth):
        # +1 steps over this function's own frame
        descriptor = resolve_frame(skip + 1)
        if descriptor is None:
            continue
        current = descriptor.format()
        stack.append(current)
        if stop_marker and current.startswith(stop_marker):
            break

    return stack
