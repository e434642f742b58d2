import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from tokenscript_bundler import __version__
from tokenscript_bundler.cli.build import build
from tokenscript_bundler.cli.bundle import bundle
from tokenscript_bundler.cli.list import list_schemas
from tokenscript_bundler.cli.presets import presets
from tokenscript_bundler.cli.registry import registry

app = typer.Typer(
    name="tokenscript-bundler",
    help="TokenScript schema bundler: resolve dependencies, inline scripts, emit bundles.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False, show_time=False)],
        force=True,
    )


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log progress and debug output.")] = False,
    version: Annotated[
        bool,
        typer.Option("--version", callback=_print_version, is_eager=True, help="Show the version and exit."),
    ] = False,
) -> None:
    configure_logging(verbose)


app.command("bundle")(bundle)
app.command("build")(build)
app.command("list")(list_schemas)
app.command("presets")(presets)
app.command("registry")(registry)


def main() -> None:
    app()
