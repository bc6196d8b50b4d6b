from __future__ import annotations
import importlib
import json
import logging
import sys
from typing import Any, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from .config import load_document, load_settings
from .errors import StructHashError
from .kinds import type_label
from .report import ValidationReport
from .schema import Schema, SchemaNode
from .structured import check as check_value

app = typer.Typer(add_completion=False)
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def load_target(ref: str) -> Schema:
    """Resolve ``package.module:attribute`` to a Schema (or a StructuredHash's schema)."""
    module_name, _, attr = ref.partition(":")
    if not module_name or not attr:
        raise typer.BadParameter(f"expected module:attribute, got {ref!r}")
    sys.path.insert(0, ".")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise typer.BadParameter(f"cannot import {module_name}: {exc}") from exc
    finally:
        sys.path.pop(0)
    target: Any = getattr(module, attr, None)
    if isinstance(target, Schema):
        return target
    if isinstance(target, type) and callable(getattr(target, "get_schema", None)):
        return target.get_schema()
    raise typer.BadParameter(f"{ref} is not a Schema or StructuredHash subclass")


@app.command()
def check(target: str, path: str,
          as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
          config: Optional[str] = typer.Option(None, "-c", "--config"),
          verbose: bool = typer.Option(False, "-v", "--verbose")):
    _setup_logging(verbose)
    schema = load_target(target)
    try:
        settings = load_settings(config)
        document = load_document(path)
    except (StructHashError, OSError) as exc:
        rprint(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(2)
    logger.debug("checking %s against %s", path, target)
    report = ValidationReport.from_collector(check_value(schema, document, settings))
    if as_json:
        print(json.dumps(report.to_json_obj(), indent=2))
    elif report.valid:
        rprint("[green]OK[/green]")
    else:
        table = Table("path", "kind", "message")
        for row in report.rows():
            table.add_row(*(Text(cell) for cell in row))
        Console().print(table)
    if not report.valid:
        raise typer.Exit(1)


def _node_label(name: str, node: SchemaNode) -> str:
    label = f"[bold]{escape(name)}[/bold]: {node.compound or type_label(node.expected_type)}"
    flags = []
    if node.required:
        flags.append("required")
    if node.nullable:
        flags.append("nullable")
    if node.format is not None:
        flags.append(f"format=/{escape(node.format.pattern)}/")
    if node.checks:
        flags.append(f"{len(node.checks)} check(s)")
    return label + (f" ({', '.join(flags)})" if flags else "")


def _add_schema(tree: Tree, schema: Schema) -> None:
    if schema.element is not None:
        _add_node(tree, "[]", schema.element)
    for name, node in schema.fields.items():
        _add_node(tree, name, node)


def _add_node(tree: Tree, name: str, node: SchemaNode) -> None:
    branch = tree.add(_node_label(name, node))
    if node.child is not None:
        _add_schema(branch, node.child)


@app.command()
def describe(target: str):
    schema = load_target(target)
    tree = Tree(f"[cyan]{target}[/cyan]")
    _add_schema(tree, schema)
    Console().print(tree)
