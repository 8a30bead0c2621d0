"""shapecheck CLI — validate YAML/JSON documents against schema files."""

import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from shapecheck import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def main(verbose: bool):
    """shapecheck — runtime structural validation.

    Compare a data document against a schema of type descriptors and
    report every mismatch.
    """
    from shapecheck.utils.logging_utils import configure_logging

    configure_logging(verbose=verbose)


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("schema_path")
@click.argument("data_path")
@click.option("--strict/--no-strict", default=True, help="Require exact key parity")
@click.option("--fatal", is_flag=True, help="Stop at the first violation")
@click.option("--name", "-n", default=None, help="Type name used in messages")
def check(schema_path: str, data_path: str, strict: bool, fatal: bool, name: str | None):
    """Validate DATA_PATH against the schema in SCHEMA_PATH.

    A schema file holding a list validates the data positionally.
    Exits with status 1 when any violation is found.
    """
    from shapecheck.exceptions import SchemaViolationError, ShapecheckError
    from shapecheck.loader import load_document, load_schema
    from shapecheck.validator import ValidationOptions, validate, validate_list

    console.print(f"\n[bold blue]shapecheck[/] — Checking: {data_path}\n")

    try:
        schema = load_schema(schema_path, name=name)
        data = load_document(data_path)
        validator = validate_list(schema, name=name) if isinstance(schema, list) else validate(schema)
    except ShapecheckError as e:
        console.print(f"  [red]Failed to load:[/] {escape(str(e))}")
        sys.exit(2)

    options = ValidationOptions(strict=strict, fatal=fatal)
    try:
        report = validator.check(data, options)
    except SchemaViolationError as e:
        console.print(f"  [red]x[/] {escape(str(e))}")
        console.print("\n[red]FAIL[/] (fatal mode: stopped at first violation)")
        sys.exit(1)

    if report.passed:
        console.print(f"  [green]v[/] {escape(report.summary())}")
        return

    table = Table(title=escape(report.summary()))
    table.add_column("Kind", style="dim")
    table.add_column("Path", style="cyan")
    table.add_column("Expected")
    table.add_column("Actual")
    table.add_column("Message")

    for v in report.violations:
        table.add_row(
            v.kind.value,
            escape(v.path or "/"),
            escape(v.expected or ""),
            escape(v.actual or ""),
            escape(v.message),
        )

    console.print(table)
    sys.exit(1)


# ── Describe ─────────────────────────────────────────────────────────


@main.command()
@click.argument("descriptor")
def describe(descriptor: str):
    """Show how a DESCRIPTOR string is parsed."""
    from shapecheck.descriptors import ArrayOf, Maybe, Union, parse_descriptor
    from shapecheck.exceptions import DescriptorSyntaxError

    try:
        parsed = parse_descriptor(descriptor)
    except DescriptorSyntaxError as e:
        console.print(f"[red]{escape(str(e))}[/]")
        sys.exit(2)

    def add(branch: Tree, node) -> None:
        if isinstance(node, Union):
            sub = branch.add("[bold]union[/]")
            for option in node.options:
                add(sub, option)
        elif isinstance(node, ArrayOf):
            add(branch.add("[bold]array of[/]"), node.item)
        elif isinstance(node, Maybe):
            add(branch.add("[bold]maybe[/]"), node.inner)
        else:
            branch.add(f"[cyan]{escape(node.name)}[/]")

    tree = Tree(f"[bold blue]{escape(str(parsed))}[/]")
    add(tree, parsed)
    console.print(tree)


# ── Vocabulary ───────────────────────────────────────────────────────


@main.command()
def vocabulary():
    """List the built-in descriptor tokens."""
    from shapecheck.descriptors import BUILTIN_CHECKS

    table = Table(title="Descriptor tokens")
    table.add_column("Token", style="cyan")
    table.add_column("Matches")

    notes = {
        "*": "any value",
        "Number": "int or float (not bool, not NaN)",
        "Int": "int (not bool)",
        "Float": "int or float (not bool, not NaN)",
        "NaN": "float(\"nan\")",
        "String": "str",
        "Boolean": "bool",
        "Array": "list or tuple",
        "Function": "any callable",
        "Object": "any mapping",
        "Date": "datetime.date / datetime.datetime",
        "Null": "None",
        "None": "None",
    }
    for token in BUILTIN_CHECKS:
        table.add_row(escape(token), notes.get(token, ""))
    table.add_row("Maybe X", "None or X")
    table.add_row("X | Y", "X or Y")
    table.add_row(escape("[X]"), "list/tuple whose items all match X")

    console.print(table)


if __name__ == "__main__":
    main()
