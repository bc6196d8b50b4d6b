from __future__ import annotations
import json
import logging
from enum import Enum
from typing import Any, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 64


class _TooDeep:
    """Stands in for a subtree nested past the depth limit."""

    def __repr__(self) -> str:
        return "TOO_DEEP"


TOO_DEEP = _TooDeep()


def canonical_key(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, bytes):
        return key.decode("utf-8", errors="replace")
    return key if type(key) is str else str(key)


def parse_text(text: str | bytes) -> Any:
    try:
        return json.loads(text)
    except (ValueError, RecursionError) as exc:
        logger.debug("input is not valid JSON: %s", exc)
        return None


def normalize(raw: Any, *, max_depth: int = DEFAULT_MAX_DEPTH, parse_text_input: bool = True,
              cuts: Optional[list[tuple]] = None) -> Any:
    """Return a copy of ``raw`` with every mapping key canonicalized.

    Text input is decoded as JSON first; undecodable text becomes ``None``.
    Subtrees past ``max_depth`` become ``TOO_DEEP`` and, when ``cuts`` is
    given, their paths are appended to it. Nothing here raises, shape
    problems are left for the validator.
    """
    from .structured import StructuredHash

    walk = _Walk(max_depth, parse_text_input, StructuredHash, cuts)
    return walk(walk.prepare(raw), 0, ())


class _Walk:
    def __init__(self, max_depth: int, parse_text_input: bool, nested: type,
                 cuts: Optional[list[tuple]]):
        self.max_depth = max_depth
        self.parse_text_input = parse_text_input
        self.nested = nested
        self.cuts = cuts

    def prepare(self, raw: Any) -> Any:
        if isinstance(raw, self.nested):
            raw = raw.raw
        if isinstance(raw, (str, bytes, bytearray)) and self.parse_text_input:
            raw = parse_text(bytes(raw) if isinstance(raw, bytearray) else raw)
        return raw

    def cut(self, path: tuple) -> _TooDeep:
        if self.cuts is not None:
            self.cuts.append(path)
        return TOO_DEEP

    def __call__(self, v: Any, depth: int, path: tuple) -> Any:
        if isinstance(v, self.nested):
            v = self.prepare(v)
        if isinstance(v, dict):
            if depth >= self.max_depth:
                return self.cut(path)
            out = {}
            for k, vv in v.items():
                key = canonical_key(k)
                out[key] = self(vv, depth + 1, path + (key,))
            return out
        if isinstance(v, (list, tuple)):
            if depth >= self.max_depth:
                return self.cut(path)
            return [self(vv, depth + 1, path + (i,)) for i, vv in enumerate(v)]
        return v
