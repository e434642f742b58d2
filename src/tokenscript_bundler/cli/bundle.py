import asyncio
from pathlib import Path
from typing import Annotated, cast

import typer
from rich.console import Console

from tokenscript_bundler.core.bundle import SelectiveBundleResult, bundle_selective
from tokenscript_bundler.core.config import (
    DEFAULT_OUTPUT,
    BundleConfig,
    OutputFormat,
    get_registry_url,
    load_bundle_config,
)
from tokenscript_bundler.core.output import render_module
from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.errors import BundlerError, ConfigError
from tokenscript_bundler.store import FilesystemSchemaStore

console = Console()

_FORMATS = ("python", "javascript")


def _get_store(schemas_dirs: list[Path] | None) -> SchemaStore:
    return FilesystemSchemaStore(*(schemas_dirs or []))


def format_dry_run(result: SelectiveBundleResult) -> str:
    resolved = result.metadata.resolved_dependencies
    lines = [
        "Bundle preview:",
        "",
        f"Requested schemas: {', '.join(result.metadata.requested_schemas)}",
        f"Total schemas (with dependencies): {len(resolved)}",
        "",
        "Schemas to be bundled:",
    ]
    lines.extend(f"  - {schema}" for schema in sorted(resolved))
    return "\n".join(lines)


def bundle(
    schemas: Annotated[
        list[str] | None,
        typer.Argument(help="Schemas to bundle, e.g. rgb-color function:invert preset:css."),
    ] = None,
    config: Annotated[Path | None, typer.Option("--config", "-c", help="Path to a JSON bundle config.")] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Output file path.")] = None,
    output_format: Annotated[
        str | None, typer.Option("--format", "-f", help="Module format: python or javascript.")
    ] = None,
    dry_run: Annotated[bool, typer.Option("--dry-run", "-d", help="Preview without writing.")] = False,
    schemas_dir: Annotated[
        list[Path] | None, typer.Option("--schemas-dir", "-s", help="Schema directory (repeatable).")
    ] = None,
    base_url: Annotated[str | None, typer.Option(help="Registry URL used in bundled URIs.")] = None,
) -> None:
    """Bundle schemas and their dependencies into an importable module."""
    try:
        bundle_config: BundleConfig | None = load_bundle_config(config) if config else None
        names = list(schemas or []) or (bundle_config.schemas if bundle_config else [])
        if not names:
            raise ConfigError("No schemas specified. Provide schemas as arguments or via --config")

        requested_format = output_format or (bundle_config.format if bundle_config else None) or "python"
        if requested_format not in _FORMATS:
            raise ConfigError(f"Unsupported output format '{requested_format}'. Supported: {', '.join(_FORMATS)}")
        fmt = cast(OutputFormat, requested_format)
        target = output or Path((bundle_config.output if bundle_config else None) or DEFAULT_OUTPUT[fmt])

        store = _get_store(schemas_dir)
        result = asyncio.run(
            bundle_selective(
                store,
                names,
                base_url=base_url or get_registry_url(),
                generated_by=" ".join(["tokenscript-bundler", "bundle", *names]),
            )
        )
    except BundlerError as exc:
        console.print(f"[red]Bundle failed:[/red] {exc}", highlight=False)
        raise typer.Exit(1) from None

    console.print()
    console.print(result.render_tree(), markup=False, highlight=False)
    console.print()
    if result.diagnostics.warnings:
        console.print(f"[yellow]{len(result.diagnostics.warnings)} warning(s) during resolution[/yellow]")

    if dry_run:
        console.print(format_dry_run(result), markup=False, highlight=False)
        return

    module = render_module(result.schemas, fmt, metadata=result.metadata)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(module, encoding="utf-8")
    console.print(f"[green]✓[/green] Bundled {len(result.schemas)} schemas → {target}", highlight=False)
