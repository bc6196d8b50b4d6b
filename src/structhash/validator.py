from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .access import project
from .collector import ErrorCollector, ErrorKind, Path, format_path
from .kinds import kind_of, matches_type, type_label
from .normalize import DEFAULT_MAX_DEPTH, TOO_DEEP
from .schema import Schema, SchemaNode

logger = logging.getLogger(__name__)


@dataclass
class CheckContext:
    """What a custom check gets to see: the field value and where it sits."""
    document: Any
    parent: Any
    path: Path
    value: Any
    collector: ErrorCollector

    @property
    def name(self) -> Optional[str]:
        return self.path[-1] if self.path and isinstance(self.path[-1], str) else None

    def add(self, message: str) -> None:
        self.collector.record(self.path, message, ErrorKind.CUSTOM_CHECK_FAILURE)


def validate(schema: Schema, value: Any, path: Path = (), collector: Optional[ErrorCollector] = None,
             *, document: Any = None, max_depth: int = DEFAULT_MAX_DEPTH) -> ErrorCollector:
    """Check a normalized ``value`` against ``schema`` and collect every violation.

    Errors go into ``collector`` (a fresh one when not given) under paths
    prefixed by ``path``. ``document`` is the root handed to custom checks and
    defaults to ``value``. Nothing is raised for bad input; only exceptions
    from custom checks propagate.
    """
    if collector is None:
        collector = ErrorCollector()
    root = value if document is None else document
    _Pass(collector, project(root), max_depth).schema(schema, value, tuple(path), 0)
    logger.debug("validated %s: %d error(s)", format_path(tuple(path)), len(collector.violations))
    return collector


class _Pass:
    def __init__(self, collector: ErrorCollector, document: Any, max_depth: int):
        self.collector = collector
        self.document = document
        self.max_depth = max_depth

    def too_deep(self, value: Any, path: Path, depth: int) -> bool:
        if value is TOO_DEEP or depth > self.max_depth:
            self.collector.record(path, f"is nested deeper than {self.max_depth} levels", ErrorKind.TOO_DEEP)
            return True
        return False

    def schema(self, schema: Schema, value: Any, path: Path, depth: int) -> None:
        if self.too_deep(value, path, depth):
            return
        if schema.is_sequence:
            if not isinstance(value, list):
                self.collector.record(path, f"expected an array, got {kind_of(value)}", ErrorKind.NOT_A_SEQUENCE)
                return
            self.elements(schema.element, value, path, depth)
            return
        if not isinstance(value, dict):
            self.collector.record(path, f"expected an object, got {kind_of(value)}", ErrorKind.NOT_A_MAPPING)
            return
        # closed schema: undeclared keys are always an error
        for k in value:
            if k not in schema.fields:
                self.collector.record(path + (k,), "is not an expected field", ErrorKind.UNEXPECTED_FIELD)
        for name, node in schema.fields.items():
            if name not in value:
                if node.required:
                    self.collector.record(path + (name,), "is required", ErrorKind.MISSING_REQUIRED_FIELD)
                continue
            self.node(node, value[name], path + (name,), depth + 1, value)

    def elements(self, node: SchemaNode, items: list[Any], path: Path, depth: int) -> None:
        for i, item in enumerate(items):
            if item is None and not node.nullable:
                if node.required:
                    self.collector.record(path + (i,), "is required", ErrorKind.MISSING_REQUIRED_FIELD)
                continue
            self.node(node, item, path + (i,), depth + 1, items)

    def node(self, node: SchemaNode, value: Any, path: Path, depth: int, parent: Any) -> None:
        if self.too_deep(value, path, depth):
            return
        if value is None and node.nullable:
            return
        if not self.kind_matches(node, value, path):
            return
        if node.format is not None and not node.format.search(str(value)):
            self.collector.record(path, f"does not match /{node.format.pattern}/", ErrorKind.FORMAT_MISMATCH)
        if node.child is not None:
            self.schema(node.child, value, path, depth)
        for check in node.checks:
            check(CheckContext(self.document, project(parent), path, project(value), self.collector))

    def kind_matches(self, node: SchemaNode, value: Any, path: Path) -> bool:
        expected = node.expected_type
        if matches_type(value, expected):
            return True
        got = kind_of(value)
        if expected is dict:
            self.collector.record(path, f"expected an object, got {got}", ErrorKind.NOT_A_MAPPING)
        elif expected is list:
            self.collector.record(path, f"expected an array, got {got}", ErrorKind.NOT_A_SEQUENCE)
        else:
            self.collector.record(path, f"expected {type_label(expected)}, got {got}", ErrorKind.TYPE_MISMATCH)
        return False
