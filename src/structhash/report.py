from __future__ import annotations
from dataclasses import dataclass, field

from .collector import ErrorCollector, Violation, format_path


@dataclass
class ValidationReport:
    valid: bool
    errors: dict[str, list[str]]
    violations: list[Violation] = field(default_factory=list)

    @classmethod
    def from_collector(cls, collector: ErrorCollector) -> "ValidationReport":
        errors: dict[str, list[str]] = {}
        for p, msgs in collector.all().items():
            errors.setdefault(format_path(p), []).extend(msgs)
        return cls(valid=collector.is_empty(), errors=errors, violations=collector.violations)

    def to_json_obj(self) -> dict:
        return {
            "valid": self.valid,
            "errors": self.errors,
            "violations": [
                {"kind": v.kind.value, "path": list(v.path), "message": v.message}
                for v in self.violations
            ],
        }

    def rows(self) -> list[tuple[str, str, str]]:
        return [(format_path(v.path), v.kind.value, v.message) for v in self.violations]
