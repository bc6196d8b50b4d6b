from __future__ import annotations
import pathlib
from dataclasses import dataclass, fields
from typing import Any, Dict

import tomli

from .errors import ConfigError
from .normalize import DEFAULT_MAX_DEPTH

TABLE = ("tool", "structhash")


@dataclass(frozen=True)
class Settings:
    max_depth: int = DEFAULT_MAX_DEPTH
    parse_text: bool = True


def parse_toml(text: str) -> Dict[str, Any]:
    try:
        return tomli.loads(text)
    except tomli.TOMLDecodeError as exc:
        raise ConfigError(f"invalid TOML: {exc}") from exc


def load_settings(path: str | pathlib.Path | None = None) -> Settings:
    """Read ``[tool.structhash]`` from ``path`` (default ``./pyproject.toml``).

    A missing file or table means defaults.
    """
    p = pathlib.Path(path) if path is not None else pathlib.Path("pyproject.toml")
    if not p.is_file():
        if path is not None:
            raise ConfigError(f"config file not found: {p}", str(p))
        return Settings()
    data = parse_toml(p.read_text(encoding="utf-8"))
    table: Any = data
    for part in TABLE:
        table = table.get(part, {}) if isinstance(table, dict) else {}
    return settings_from_dict(table, where=".".join(TABLE))


def settings_from_dict(table: Dict[str, Any], where: str = "") -> Settings:
    known = {f.name for f in fields(Settings)}
    for k in table:
        if k not in known:
            raise ConfigError(f"unknown setting {k!r}", where)
    max_depth = table.get("max_depth", DEFAULT_MAX_DEPTH)
    if isinstance(max_depth, bool) or not isinstance(max_depth, int) or max_depth < 1:
        raise ConfigError("max_depth must be a positive integer", where)
    parse_text = table.get("parse_text", True)
    if not isinstance(parse_text, bool):
        raise ConfigError("parse_text must be a boolean", where)
    return Settings(max_depth=max_depth, parse_text=parse_text)


def load_document(path: str | pathlib.Path) -> Any:
    """JSON files come back as text (the normalizer decodes them), TOML as a dict."""
    p = pathlib.Path(path)
    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() == ".toml":
        return parse_toml(text)
    return text
