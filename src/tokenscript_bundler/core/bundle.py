"""Selective bundling: requested schemas plus everything they depend on."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from tokenscript_bundler.core.diagnostics import Diagnostics
from tokenscript_bundler.core.documents import detect_schema_ref
from tokenscript_bundler.core.inline import inline_schema
from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.core.presets import WILDCARD, expand_preset_schemas
from tokenscript_bundler.core.references import SchemaRef, resolve_schema_reference, split_kind_prefix
from tokenscript_bundler.core.resolver import DependencyNode, render_dependency_tree, resolve_dependencies
from tokenscript_bundler.core.uri import DEFAULT_REGISTRY_URL, schema_uri_for
from tokenscript_bundler.errors import DuplicateIdentifier, UnresolvableReference
from tokenscript_bundler.models import BundledSchemaEntry, BundleMetadata

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectiveBundleResult:
    schemas: list[BundledSchemaEntry]
    metadata: BundleMetadata
    dependency_tree: Mapping[str, DependencyNode]
    requested: tuple[SchemaRef, ...] = ()
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def render_tree(self) -> str:
        return render_dependency_tree(self.dependency_tree, [ref.key for ref in self.requested])


def display_identifiers(refs: Iterable[SchemaRef], universe: Iterable[SchemaRef]) -> list[str]:
    """Slugs for display, qualified with their kind only where a slug exists as both kinds."""
    kinds_by_slug: dict[str, set[str]] = {}
    for ref in universe:
        kinds_by_slug.setdefault(ref.slug, set()).add(ref.kind)

    identifiers: list[str] = []
    for ref in refs:
        identifier = ref.key if len(kinds_by_slug.get(ref.slug, ())) > 1 else ref.slug
        if identifier not in identifiers:
            identifiers.append(identifier)
    return identifiers


async def _all_refs(store: SchemaStore) -> list[SchemaRef]:
    return [SchemaRef(kind="type", slug=s) for s in await store.list_slugs("type")] + [
        SchemaRef(kind="function", slug=s) for s in await store.list_slugs("function")
    ]


async def parse_requested_schemas(
    store: SchemaStore,
    requested: Sequence[str | SchemaRef],
    diagnostics: Diagnostics | None = None,
) -> list[SchemaRef]:
    """Turn CLI-style schema names into refs.

    Accepts ``type:<slug>``, ``function:<slug>``, schema URIs, bare slugs
    (looked up in the store), ``preset:<name>`` and ``*`` for everything.
    """
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    refs: list[SchemaRef] = []
    seen: set[str] = set()
    for item in requested:
        if isinstance(item, SchemaRef):
            candidates = [item]
        else:
            candidates = []
            for name in expand_preset_schemas([item], diagnostics):
                candidates.extend(await _parse_one(store, name))

        for ref in candidates:
            if ref.key not in seen:
                seen.add(ref.key)
                refs.append(SchemaRef(kind=ref.kind, slug=ref.slug))
    return refs


async def _parse_one(store: SchemaStore, name: str) -> list[SchemaRef]:
    if name == WILDCARD:
        return await _all_refs(store)
    kind, slug = split_kind_prefix(name)
    if kind is not None:
        return [SchemaRef(kind=kind, slug=slug)]
    if "/" in name:
        ref = resolve_schema_reference(name)
        return [SchemaRef(kind=ref.kind, slug=ref.slug)]
    if not name.strip():
        raise UnresolvableReference(name, "empty reference")
    return [await detect_schema_ref(store, name.strip())]


async def bundle_selective(
    store: SchemaStore,
    requested: Sequence[str | SchemaRef],
    base_url: str = DEFAULT_REGISTRY_URL,
    include_conversion_dependencies: bool = True,
    generated_by: str | None = None,
) -> SelectiveBundleResult:
    """Bundle ``requested`` and its transitive dependencies into registry entries.

    Missing dependencies are reported in the result's diagnostics. A missing
    requested schema or a missing script file raises.
    """
    diagnostics = Diagnostics()
    requested_refs = await parse_requested_schemas(store, requested, diagnostics)
    logger.info("Bundling schemas: %s", ", ".join(ref.key for ref in requested_refs))

    resolution = await resolve_dependencies(
        store,
        requested_refs,
        include_conversion_dependencies=include_conversion_dependencies,
        diagnostics=diagnostics,
    )
    resolved_refs = resolution.refs()

    entries: list[BundledSchemaEntry] = []
    seen_uris: dict[str, str] = {}
    for ref in resolved_refs:
        uri = schema_uri_for(ref.kind, ref.slug, base_url)
        if uri in seen_uris:
            raise DuplicateIdentifier(ref.key, seen_uris[uri], store.describe(ref))
        seen_uris[uri] = store.describe(ref)
        document = await inline_schema(store, ref, base_url)
        entries.append(BundledSchemaEntry(uri=uri, schema=document))

    metadata = BundleMetadata(
        requested_schemas=display_identifiers(requested_refs, resolved_refs),
        resolved_dependencies=sorted(display_identifiers(resolved_refs, resolved_refs)),
        generated_at=datetime.now(timezone.utc).isoformat(),
        generated_by=generated_by,
    )
    logger.info("Resolved %d schemas (including dependencies)", len(entries))

    return SelectiveBundleResult(
        schemas=entries,
        metadata=metadata,
        dependency_tree=resolution.tree,
        requested=tuple(requested_refs),
        diagnostics=diagnostics,
    )
