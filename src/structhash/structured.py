from __future__ import annotations
from typing import Any, ClassVar, Dict, Iterable, Optional, Protocol, runtime_checkable

from .access import project
from .collector import ErrorCollector, ErrorKind
from .config import Settings
from .normalize import DEFAULT_MAX_DEPTH, canonical_key, normalize
from .report import ValidationReport
from .schema import Schema, SchemaBuilder, define_schema
from .validator import validate


@runtime_checkable
class Validatable(Protocol):
    def is_valid(self) -> bool: ...

    def errors(self) -> ErrorCollector: ...


class StructuredHash:
    """A document of unknown shape bound to a schema.

    Subclasses describe their shape either with a ready ``schema`` or by
    defining ``define``, which receives a builder::

        class Point(StructuredHash):
            @classmethod
            def define(cls, s):
                s.key("x", int, required=True)
                s.key("y", int, required=True)

    The input is kept untouched in ``raw``; lookups and validation work on a
    normalized copy in which every key is a string. Validation runs once, on
    first use of ``is_valid()`` or ``errors()``.
    """

    schema: ClassVar[Schema] = Schema()
    max_depth: ClassVar[int] = DEFAULT_MAX_DEPTH
    parse_text: ClassVar[bool] = True

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if "define" in cls.__dict__:
            cls.schema = define_schema(cls.define)

    @classmethod
    def define(cls, s: SchemaBuilder) -> None:
        pass

    @classmethod
    def get_schema(cls) -> Schema:
        return cls.schema

    def __init__(self, raw: Any = None):
        self._raw = raw
        self._cuts: list[tuple] = []
        self._value = normalize(raw, max_depth=self.max_depth, parse_text_input=self.parse_text,
                                cuts=self._cuts)
        self._errors: Optional[ErrorCollector] = None

    @property
    def raw(self) -> Any:
        return self._raw

    @property
    def value(self) -> Any:
        return self._value

    def errors(self) -> ErrorCollector:
        if self._errors is None:
            errors = validate(self.get_schema(), self._value, max_depth=self.max_depth)
            _record_cuts(errors, self._cuts, self.max_depth)
            self._errors = errors
        return self._errors

    def is_valid(self) -> bool:
        return self.errors().is_empty()

    def report(self) -> ValidationReport:
        return ValidationReport.from_collector(self.errors())

    def __getitem__(self, key: Any) -> Any:
        if not isinstance(self._value, dict):
            return None
        return project(self._value.get(canonical_key(key)))

    def get(self, key: Any, default: Any = None) -> Any:
        if isinstance(self._value, dict) and canonical_key(key) in self._value:
            return self[key]
        return default

    def __contains__(self, key: object) -> bool:
        return isinstance(self._value, dict) and canonical_key(key) in self._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._raw!r})"


def check(schema: Schema, raw: Any, settings: Optional[Settings] = None) -> ErrorCollector:
    """Normalize ``raw`` and validate it against ``schema`` in one go."""
    settings = settings or Settings()
    cuts: list[tuple] = []
    value = normalize(raw, max_depth=settings.max_depth, parse_text_input=settings.parse_text, cuts=cuts)
    errors = validate(schema, value, max_depth=settings.max_depth)
    _record_cuts(errors, cuts, settings.max_depth)
    return errors


def _record_cuts(errors: ErrorCollector, cuts: list[tuple], max_depth: int) -> None:
    # subtrees cut off under open dict/list fields are never reached by the validator
    seen = {v.path for v in errors.violations if v.kind is ErrorKind.TOO_DEEP}
    for path in cuts:
        if path not in seen:
            errors.record(path, f"is nested deeper than {max_depth} levels", ErrorKind.TOO_DEEP)


def validate_all(items: Iterable[Any]) -> Dict[int, ErrorCollector]:
    """Errors of every invalid validatable item, keyed by position.

    Items that do not follow the ``is_valid()``/``errors()`` convention are
    passed over.
    """
    out: Dict[int, ErrorCollector] = {}
    for i, item in enumerate(items):
        if isinstance(item, Validatable) and not item.is_valid():
            out[i] = item.errors()
    return out
