from __future__ import annotations
from typing import Any, Literal

Kind = Literal["null", "bool", "integer", "number", "string", "array", "object", "other"]

_LABELS = {
    bool: "a boolean",
    int: "an integer",
    float: "a number",
    str: "a string",
    dict: "an object",
    list: "an array",
    type(None): "null",
}


def kind_of(value: Any) -> Kind:
    if value is None: return "null"
    if isinstance(value, bool): return "bool"
    if isinstance(value, int): return "integer"
    if isinstance(value, float): return "number"
    if isinstance(value, str): return "string"
    if isinstance(value, list): return "array"
    if isinstance(value, dict): return "object"
    return "other"


def matches_type(value: Any, expected: type) -> bool:
    """Is-a-kind-of check; ``True`` and ``False`` are not numbers here."""
    if expected in (int, float) and isinstance(value, bool):
        return False
    return isinstance(value, expected)


def type_label(expected: type) -> str:
    return _LABELS.get(expected, f"a {expected.__name__}")
