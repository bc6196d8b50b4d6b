from __future__ import annotations
import json
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Union

PathSegment = Union[str, int]
Path = tuple[PathSegment, ...]

_SPECIAL = '.[]"'


class ErrorKind(str, Enum):
    MISSING_REQUIRED_FIELD = "missing_required_field"
    UNEXPECTED_FIELD = "unexpected_field"
    TYPE_MISMATCH = "type_mismatch"
    FORMAT_MISMATCH = "format_mismatch"
    NOT_A_MAPPING = "not_a_mapping"
    NOT_A_SEQUENCE = "not_a_sequence"
    CUSTOM_CHECK_FAILURE = "custom_check_failure"
    TOO_DEEP = "too_deep"


@dataclass(frozen=True)
class Violation:
    kind: ErrorKind
    path: Path
    message: str


def format_path(path: Path) -> str:
    """Render a path as ``apa.bepa[2]``; keys that would read ambiguously are quoted (``["a.b"]``)."""
    if not path:
        return "$"
    out = ""
    for seg in path:
        if isinstance(seg, int):
            out += f"[{seg}]"
        elif not seg or seg == "$" or any(c in seg for c in _SPECIAL):
            out += f"[{json.dumps(seg)}]"
        else:
            out += f".{seg}" if out else seg
    return out


class ErrorCollector:
    """Path-keyed error messages gathered over one validation pass.

    Reads like a mapping from path to messages. Paths can be given either as
    tuples (``("apa", 2)``) or in their formatted form (``"apa[2]"``).
    """

    def __init__(self) -> None:
        self._violations: list[Violation] = []

    def record(self, path: Path, message: str,
               kind: ErrorKind = ErrorKind.CUSTOM_CHECK_FAILURE) -> None:
        self._violations.append(Violation(kind, tuple(path), message))

    def merge(self, other: ErrorCollector, prefix: Path = ()) -> None:
        for v in other.violations:
            self._violations.append(Violation(v.kind, tuple(prefix) + v.path, v.message))

    @property
    def violations(self) -> list[Violation]:
        return list(self._violations)

    def is_empty(self) -> bool:
        return not self._violations

    def all(self) -> dict[Path, list[str]]:
        out: dict[Path, list[str]] = {}
        for v in self._violations:
            out.setdefault(v.path, []).append(v.message)
        return out

    def kinds(self, path: Path | str) -> list[ErrorKind]:
        key = self._key(path)
        return [v.kind for v in self._violations if v.path == key or format_path(v.path) == key]

    def full_messages(self) -> list[str]:
        return [f"{format_path(v.path)} {v.message}" for v in self._violations]

    def _key(self, path: Path | str):
        return path if isinstance(path, str) else tuple(path)

    def __getitem__(self, path: Path | str) -> list[str]:
        key = self._key(path)
        return [v.message for v in self._violations
                if v.path == key or format_path(v.path) == key]

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, tuple)):
            return False
        return bool(self[path])

    def __iter__(self) -> Iterator[Path]:
        return iter(self.all())

    def __len__(self) -> int:
        return len(self.all())

    def __bool__(self) -> bool:
        return not self.is_empty()

    def __repr__(self) -> str:
        messages = {format_path(p): m for p, m in self.all().items()}
        return f"ErrorCollector({messages!r})"
