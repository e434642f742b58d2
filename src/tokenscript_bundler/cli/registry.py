import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from tokenscript_bundler import __version__
from tokenscript_bundler.core.config import get_registry_url
from tokenscript_bundler.core.registry import build_registry, write_registry
from tokenscript_bundler.errors import BundlerError
from tokenscript_bundler.store import FilesystemSchemaStore

console = Console()


def registry(
    output_dir: Annotated[Path, typer.Argument(help="Directory to write the registry bundles to.")],
    version: Annotated[str, typer.Option("--registry-version", help="Version stamped into the registry.")] = __version__,
    schemas_dir: Annotated[
        list[Path] | None, typer.Option("--schemas-dir", "-s", help="Schema directory (repeatable).")
    ] = None,
    base_url: Annotated[str | None, typer.Option(help="Registry URL used in bundled URIs.")] = None,
) -> None:
    """Bundle every schema into registry.json plus per-kind and per-schema files."""
    store = FilesystemSchemaStore(*(schemas_dir or []))
    try:
        bundled = asyncio.run(
            build_registry(
                store,
                base_url=base_url or get_registry_url(),
                version=version,
                generated_by="tokenscript-bundler registry",
            )
        )
    except BundlerError as exc:
        console.print(f"[red]Registry build failed:[/red] {exc}", highlight=False)
        raise typer.Exit(1) from None

    written = write_registry(bundled, output_dir)
    console.print(f"[green]✓[/green] Bundled {len(bundled.types)} types and {len(bundled.functions)} functions")
    console.print(f"[green]✓[/green] Written {len(written)} files to {output_dir}", highlight=False)
