"""
Context lookup adapters for ``LogRecordBuilder.context``.

Anything with a ``lookup(key) -> (value, present)`` method can be passed
as a context source. Plain mappings are wrapped automatically, and
``None`` means the current request-scoped context, which lives in
structlog's contextvars store.
"""

from typing import Any, Dict, Iterable, Mapping, Optional, Protocol, Tuple, runtime_checkable

import structlog


@runtime_checkable
class ContextLookup(Protocol):
    """Source of contextual values keyed by string."""

    def lookup(self, key: str) -> Tuple[Any, bool]:
        ...


class MappingLookup:
    """Look up values in a plain mapping."""

    def __init__(self, values: Mapping[str, Any]):
        self._values = values

    def lookup(self, key: str) -> Tuple[Any, bool]:
        if key in self._values:
            return self._values[key], True
        return None, False


class ContextVarsLookup:
    """Look up values bound with ``structlog.contextvars.bind_contextvars``."""

    def lookup(self, key: str) -> Tuple[Any, bool]:
        values = structlog.contextvars.get_contextvars()
        if key in values:
            return values[key], True
        return None, False


def as_lookup(source: Any) -> ContextLookup:
    if source is None:
        return ContextVarsLookup()
    if isinstance(source, ContextLookup):
        return source
    if isinstance(source, Mapping):
        return MappingLookup(source)
    raise TypeError(
        f"Context source must be a mapping or provide lookup(key), got {type(source).__name__}"
    )


def extract(source: Any, keys: Iterable[str]) -> Dict[str, Any]:
    """
    Build a key -> value map from a context source.

    Keys that are missing or bound to None are left out.
    """
    lookup = as_lookup(source)
    found: Dict[str, Any] = {}
    for key in keys:
        value, present = lookup.lookup(key)
        if present and value is not None:
            found[key] = value
    return found


def bind_context(**values: Any) -> None:
    """Bind request-scoped values for the current context."""
    structlog.contextvars.bind_contextvars(**values)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


def current_context() -> Optional[Dict[str, Any]]:
    values = structlog.contextvars.get_contextvars()
    return dict(values) if values else None
