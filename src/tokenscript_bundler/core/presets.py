from collections.abc import Sequence
from dataclasses import dataclass

from tokenscript_bundler.core.diagnostics import Diagnostics

PRESET_PREFIX = "preset:"
WILDCARD = "*"


@dataclass(frozen=True)
class BundlePreset:
    name: str
    description: str
    types: tuple[str, ...]
    functions: tuple[str, ...]


BUNDLE_PRESETS: dict[str, BundlePreset] = {
    "css": BundlePreset(
        name="CSS",
        description="CSS color types",
        types=("hex-color", "rgb-color", "hsl-color", "oklch-color", "oklab-color", "css-color"),
        functions=("lighten", "darken", "saturate", "desaturate", "mix", "invert"),
    ),
    "ts": BundlePreset(
        name="TS",
        description="Legacy color-space-specific functions (lighten, darken, mix, alpha in LCH, sRGB, P3, HSL)",
        types=("hsl-color", "lch-color", "p3-color", "srgb-color"),
        functions=tuple(
            f"ts_{operation}_{space}"
            for operation in ("alpha", "darken", "lighten", "mix")
            for space in ("hsl", "lch", "p3", "srgb")
        ),
    ),
    "full": BundlePreset(
        name="Full",
        description="Every type and function in the registry",
        types=(WILDCARD,),
        functions=(WILDCARD,),
    ),
}


def expand_preset_schemas(schemas: Sequence[str], diagnostics: Diagnostics | None = None) -> list[str]:
    """Replace ``preset:<name>`` entries with the preset's prefixed schema list."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    expanded: list[str] = []
    for schema in schemas:
        if not schema.startswith(PRESET_PREFIX):
            expanded.append(schema)
            continue

        preset_name = schema[len(PRESET_PREFIX) :]
        preset = BUNDLE_PRESETS.get(preset_name)
        if preset is None:
            diagnostics.warn(f"Unknown preset: {preset_name}")
            continue

        expanded.extend(WILDCARD if t == WILDCARD else f"type:{t}" for t in preset.types)
        expanded.extend(WILDCARD if f == WILDCARD else f"function:{f}" for f in preset.functions)
    return expanded
