import asyncio
import json
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from tokenscript_bundler.core.config import get_registry_url
from tokenscript_bundler.errors import BundlerError
from tokenscript_bundler.models import dump_document
from tokenscript_bundler.store import build_schema_directory

console = Console()


def build(
    directory: Annotated[Path, typer.Argument(help="Schema directory containing schema.json.")],
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file (defaults to stdout).")] = None,
    pretty: Annotated[bool, typer.Option("--pretty", "-p", help="Pretty print JSON output.")] = False,
    base_url: Annotated[str | None, typer.Option(help="Registry URL used for relative URIs.")] = None,
) -> None:
    """Build a single schema directory into one inlined JSON document."""
    try:
        document = asyncio.run(build_schema_directory(directory, base_url or get_registry_url()))
    except BundlerError as exc:
        console.print(f"[red]Build failed:[/red] {exc}", highlight=False)
        raise typer.Exit(1) from None

    text = json.dumps(dump_document(document), indent=2 if pretty else None, ensure_ascii=False)
    if output is None:
        typer.echo(text)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    console.print(f"[green]✓[/green] Built {document.kind}:{document.slug} → {output}", highlight=False)
