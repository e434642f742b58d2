import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.errors import BundlerError
from tokenscript_bundler.store import FilesystemSchemaStore

console = Console()


async def collect_schema_names(
    store: SchemaStore, include_types: bool = True, include_functions: bool = True
) -> tuple[list[str], list[str]]:
    types = await store.list_slugs("type") if include_types else []
    functions = await store.list_slugs("function") if include_functions else []
    return types, functions


def format_list_output(types: list[str], functions: list[str]) -> str:
    lines: list[str] = []
    if types:
        lines.append("Types:")
        lines.extend(f"  {slug}" for slug in types)
    if functions:
        if lines:
            lines.append("")
        lines.append("Functions:")
        lines.extend(f"  function:{slug}" for slug in functions)
    if not lines:
        lines.append("No schemas found.")
    return "\n".join(lines)


def list_schemas(
    types: Annotated[bool, typer.Option("--types", help="List only type schemas.")] = False,
    functions: Annotated[bool, typer.Option("--functions", help="List only function schemas.")] = False,
    schemas_dir: Annotated[
        list[Path] | None, typer.Option("--schemas-dir", "-s", help="Schema directory (repeatable).")
    ] = None,
) -> None:
    """List available schemas."""
    show_all = not types and not functions
    store = FilesystemSchemaStore(*(schemas_dir or []))
    try:
        type_names, function_names = asyncio.run(
            collect_schema_names(store, include_types=types or show_all, include_functions=functions or show_all)
        )
    except BundlerError as exc:
        console.print(f"[red]List failed:[/red] {exc}", highlight=False)
        raise typer.Exit(1) from None
    console.print(format_list_output(type_names, function_names), markup=False, highlight=False)
