"""
Typed attribute values attached to a log record.

Each attribute carries a kind tag so the sink can serialize every
variant explicitly.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

AttrValue = Union[str, bool, List[str], Dict[str, Any]]


class AttrKind(Enum):
    STRING = "string"
    BOOL = "bool"
    STRINGS = "strings"
    MAP = "map"


@dataclass(frozen=True)
class LogAttribute:
    """One key bound to a string, bool, list of strings or string-keyed map."""

    key: str
    kind: AttrKind
    value: AttrValue

    @classmethod
    def string(cls, key: str, value: str) -> "LogAttribute":
        return cls(key, AttrKind.STRING, str(value))

    @classmethod
    def boolean(cls, key: str, value: bool) -> "LogAttribute":
        return cls(key, AttrKind.BOOL, bool(value))

    @classmethod
    def strings(cls, key: str, values: Sequence[str]) -> "LogAttribute":
        return cls(key, AttrKind.STRINGS, [str(v) for v in values])

    @classmethod
    def mapping(cls, key: str, values: Mapping[str, Any]) -> "LogAttribute":
        return cls(key, AttrKind.MAP, dict(values))

    def render(self) -> Tuple[str, Any]:
        """Return the (key, JSON-ready value) pair."""
        if self.kind is AttrKind.STRINGS:
            return self.key, list(self.value)
        if self.kind is AttrKind.MAP:
            return self.key, dict(self.value)
        return self.key, self.value
