from rich.console import Console
from rich.table import Table

from tokenscript_bundler.core.presets import BUNDLE_PRESETS, WILDCARD

console = Console()


def _describe(items: tuple[str, ...]) -> str:
    if items == (WILDCARD,):
        return "all"
    return ", ".join(items)


def presets() -> None:
    """List available bundle presets."""
    table = Table(show_lines=True)
    for header in ("preset", "description", "types", "functions"):
        table.add_column(header)
    for key, preset in BUNDLE_PRESETS.items():
        table.add_row(f"preset:{key}", preset.description, _describe(preset.types), _describe(preset.functions))
    console.print(table)
    console.print("Combine presets with explicit schemas, e.g. `bundle preset:css type:oklab-color`.")
