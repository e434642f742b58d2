"""Full-registry bundling: every schema in the store, fully inlined."""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from tokenscript_bundler import __version__
from tokenscript_bundler.core.inline import inline_schema
from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.core.references import SchemaRef
from tokenscript_bundler.core.uri import DEFAULT_REGISTRY_URL
from tokenscript_bundler.errors import DuplicateIdentifier
from tokenscript_bundler.models import (
    BundledRegistry,
    ColorSchema,
    FunctionSchema,
    RegistryMetadata,
    SchemaKind,
    dump_document,
)

logger = logging.getLogger(__name__)


async def build_registry(
    store: SchemaStore,
    base_url: str = DEFAULT_REGISTRY_URL,
    version: str = __version__,
    generated_by: str | None = None,
) -> BundledRegistry:
    types: list[ColorSchema] = []
    functions: list[FunctionSchema] = []
    locations: dict[str, str] = {}

    kinds: tuple[SchemaKind, ...] = ("type", "function")
    for kind in kinds:
        slugs = await store.list_slugs(kind)
        logger.info("Bundling %d %s schemas", len(slugs), kind)
        for slug in slugs:
            ref = SchemaRef(kind=kind, slug=slug)
            if ref.key in locations:
                raise DuplicateIdentifier(ref.key, locations[ref.key], store.describe(ref))
            locations[ref.key] = store.describe(ref)

            document = await inline_schema(store, ref, base_url)
            if isinstance(document, ColorSchema):
                types.append(document)
            else:
                functions.append(document)

    return BundledRegistry(
        version=version,
        types=types,
        functions=functions,
        metadata=RegistryMetadata(
            generated_at=datetime.now(timezone.utc).isoformat(),
            total_schemas=len(types) + len(functions),
            generated_by=generated_by,
        ),
    )


def _write_json(path: Path, data: Any) -> None:
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")


def write_registry(registry: BundledRegistry, output_dir: str | Path) -> list[Path]:
    """Write the registry, per-kind bundles and one file per schema.

    Returns the written paths.
    """
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    payload = registry.to_json()
    for name, data in (
        ("registry.json", payload),
        ("types.json", {"version": registry.version, "types": payload["types"]}),
        ("functions.json", {"version": registry.version, "functions": payload["functions"]}),
    ):
        _write_json(out / name, data)
        written.append(out / name)

    for directory, documents in (("types", registry.types), ("functions", registry.functions)):
        target_dir = out / directory
        target_dir.mkdir(exist_ok=True)
        for document in documents:
            target = target_dir / f"{document.slug}.json"
            _write_json(target, dump_document(document))
            written.append(target)

    logger.info("Written registry with %d schemas to %s", registry.metadata.total_schemas, out)
    return written
