from __future__ import annotations
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Pattern, Sequence, Union

from .errors import SchemaDefinitionError
from .normalize import canonical_key

Check = Callable[[Any], None]
Block = Callable[["SchemaBuilder"], Any]
FormatSpec = Union[str, Pattern[str], None]


@dataclass(frozen=True)
class SchemaNode:
    """One rule: a keyed field of a mapping schema, or the element of a sequence schema."""
    name: Optional[str]
    expected_type: type
    required: bool = False
    format: Optional[Pattern[str]] = None
    checks: tuple[Check, ...] = ()
    child: Optional["Schema"] = None
    nullable: bool = False
    compound: Optional[str] = None


@dataclass(frozen=True)
class Schema:
    fields: Mapping[str, SchemaNode] = field(default_factory=lambda: MappingProxyType({}))
    element: Optional[SchemaNode] = None

    @property
    def is_sequence(self) -> bool:
        return self.element is not None

    def __contains__(self, name: object) -> bool:
        return canonical_key(name) in self.fields


def _compound_schema(type_: Any) -> Optional[Schema]:
    if isinstance(type_, Schema):
        return type_
    get_schema = getattr(type_, "get_schema", None)
    if isinstance(type_, type) and callable(get_schema):
        return get_schema()
    return None


def _compile_format(fmt: FormatSpec, where: str) -> Optional[Pattern[str]]:
    if fmt is None:
        return None
    if isinstance(fmt, str):
        return re.compile(fmt)
    if isinstance(fmt, re.Pattern) and isinstance(fmt.pattern, str):
        return fmt
    raise SchemaDefinitionError("format must be a string or a compiled str pattern", where)


def _checks(check: Union[Check, Sequence[Check], None], where: str) -> tuple[Check, ...]:
    if check is None:
        return ()
    if callable(check) or not isinstance(check, (list, tuple)):
        checks = (check,)
    else:
        checks = tuple(check)
    for c in checks:
        if not callable(c):
            raise SchemaDefinitionError(f"check {c!r} is not callable", where)
    return checks


class SchemaBuilder:
    """Collects ``key``/``value`` declarations and turns them into a Schema.

    ``key`` declares a field of a mapping schema (declaring a name again
    replaces it). ``value`` declares the single element rule of a sequence
    schema. A builder holds one form or the other, never both.
    """

    def __init__(self) -> None:
        self._fields: dict[str, SchemaNode] = {}
        self._element: Optional[SchemaNode] = None

    def key(self, name: Any, type_: Any, *, required: bool = False, format: FormatSpec = None,
            check: Union[Check, Sequence[Check], None] = None, nullable: bool = False,
            block: Optional[Block] = None) -> "SchemaBuilder":
        name = canonical_key(name)
        if self._element is not None:
            raise SchemaDefinitionError("cannot declare keys on a sequence schema", name)
        self._fields[name] = _node(name, type_, required, format, check, nullable, block)
        return self

    def value(self, type_: Any, *, required: bool = False, format: FormatSpec = None,
              check: Union[Check, Sequence[Check], None] = None, nullable: bool = False,
              block: Optional[Block] = None) -> "SchemaBuilder":
        if self._fields:
            raise SchemaDefinitionError("cannot declare an element type on a mapping schema")
        self._element = _node(None, type_, required, format, check, nullable, block)
        return self

    def build(self) -> Schema:
        return Schema(fields=MappingProxyType(dict(self._fields)), element=self._element)


def define_schema(block: Optional[Block] = None) -> Schema:
    builder = SchemaBuilder()
    if block is not None:
        block(builder)
    return builder.build()


def _node(name, type_, required, fmt, check, nullable, block) -> SchemaNode:
    where = name or "[]"
    compound = _compound_schema(type_)
    if compound is not None:
        if block is not None:
            raise SchemaDefinitionError("a compound schema field takes no block", where)
        if fmt is not None:
            raise SchemaDefinitionError("format applies to scalar fields only", where)
        label = type_.__name__ if isinstance(type_, type) else None
        return SchemaNode(name, list if compound.is_sequence else dict, required, None,
                          _checks(check, where), compound, nullable, label)

    if not isinstance(type_, type):
        raise SchemaDefinitionError(f"expected a type or schema, got {type_!r}", where)

    child = None
    if type_ in (dict, list):
        if fmt is not None:
            raise SchemaDefinitionError("format applies to scalar fields only", where)
        if block is not None:
            child = define_schema(block)
            if type_ is list and not child.is_sequence:
                raise SchemaDefinitionError("an array block declares its element with value()", where)
            if type_ is dict and child.is_sequence:
                raise SchemaDefinitionError("an object block declares its fields with key()", where)
    elif block is not None:
        raise SchemaDefinitionError(f"{type_.__name__} fields take no block", where)

    return SchemaNode(name, type_, required, _compile_format(fmt, where),
                      _checks(check, where), child, nullable)
