"""Rendering of a selective bundle as an importable module."""

import json
import pprint
from collections.abc import Sequence
from typing import Any

from tokenscript_bundler.core.config import OutputFormat
from tokenscript_bundler.models import BundledSchemaEntry, BundleMetadata, dump_document

DEFAULT_PYTHON_INTERPRETER = "tokenscript_interpreter"
DEFAULT_JS_INTERPRETER = "@tokens-studio/tokenscript-interpreter"

_PYTHON_TEMPLATE = '''\
# TokenScript schema bundle. Generated file, do not edit.
{header}
SCHEMAS = {schemas}


def make_config(config=None):
    """Register every bundled schema on ``config`` (a fresh interpreter Config by default)."""
    if config is None:
        from {interpreter} import Config

        config = Config()
    for entry in SCHEMAS:
        config.register(entry["uri"], entry["schema"])
    return config
'''

_JAVASCRIPT_TEMPLATE = """\
// TokenScript schema bundle. Generated file, do not edit.
{header}
import {{ Config }} from "{interpreter}";

export const SCHEMAS = {schemas};

export function makeConfig() {{
  const config = new Config();
  for (const {{ uri, schema }} of SCHEMAS) {{
    config.register(uri, schema);
  }}
  return config;
}}
"""


def _entries_payload(entries: Sequence[BundledSchemaEntry]) -> list[dict[str, Any]]:
    return [{"uri": entry.uri, "schema": dump_document(entry.schema_)} for entry in entries]


def _header_lines(metadata: BundleMetadata | None, comment: str) -> str:
    if metadata is None:
        return ""
    lines = [
        f"Requested: {', '.join(metadata.requested_schemas)}",
        f"Schemas: {len(metadata.resolved_dependencies)}",
        f"Generated at: {metadata.generated_at}",
    ]
    if metadata.generated_by:
        lines.append(f"Generated by: {metadata.generated_by}")
    return "".join(f"{comment} {' '.join(line.split())}\n" for line in lines)


def render_module(
    entries: Sequence[BundledSchemaEntry],
    output_format: OutputFormat = "python",
    metadata: BundleMetadata | None = None,
    interpreter: str | None = None,
) -> str:
    """Render ``entries`` as a module exporting ``SCHEMAS`` and a config factory."""
    uris = [entry.uri for entry in entries]
    if len(set(uris)) != len(uris):
        raise ValueError("Bundle entries must have unique URIs")

    payload = _entries_payload(entries)
    match output_format:
        case "python":
            return _PYTHON_TEMPLATE.format(
                header=_header_lines(metadata, "#"),
                schemas=pprint.pformat(payload, indent=1, width=100, sort_dicts=False),
                interpreter=interpreter or DEFAULT_PYTHON_INTERPRETER,
            )
        case "javascript":
            return _JAVASCRIPT_TEMPLATE.format(
                header=_header_lines(metadata, "//"),
                schemas=json.dumps(payload, indent=2, ensure_ascii=False),
                interpreter=interpreter or DEFAULT_JS_INTERPRETER,
            )
    raise ValueError(f"Unsupported output format '{output_format}'. Supported: python, javascript")
