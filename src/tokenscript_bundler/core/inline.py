"""Inlining of external script files and qualification of schema references."""

import logging
from collections.abc import Sequence

from tokenscript_bundler.core.documents import load_schema_document, resolve_requirement
from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.core.references import SchemaRef
from tokenscript_bundler.core.uri import DEFAULT_REGISTRY_URL, add_base_url, qualify_reference, schema_uri_for
from tokenscript_bundler.errors import UnresolvableReference
from tokenscript_bundler.models import SELF_REFERENCE, ColorSchema, FunctionSchema, ScriptReference

logger = logging.getLogger(__name__)


async def _inline_script(store: SchemaStore, ref: SchemaRef, script: ScriptReference, base_url: str) -> None:
    if script.is_file_pointer:
        content = await store.read_script(ref, script.script)
        script.script = content.strip()
    script.type = add_base_url(script.type, base_url)


async def _qualify(store: SchemaStore, value: str, base_url: str) -> str:
    if value == SELF_REFERENCE or "://" in value or value.startswith("/"):
        return qualify_reference(value, base_url)
    try:
        ref = await resolve_requirement(store, value)
    except UnresolvableReference:
        return value
    return schema_uri_for(ref.kind, ref.slug, base_url)


async def inline_document(
    store: SchemaStore,
    ref: SchemaRef,
    document: ColorSchema | FunctionSchema,
    base_url: str = DEFAULT_REGISTRY_URL,
) -> ColorSchema | FunctionSchema:
    """Return a copy of ``document`` with every script literal and every reference qualified."""
    result = document.model_copy(deep=True)
    result.slug = ref.slug

    match result:
        case ColorSchema():
            for initializer in result.initializers:
                await _inline_script(store, ref, initializer.script, base_url)
            for conversion in result.conversions:
                await _inline_script(store, ref, conversion.script, base_url)
                conversion.source = await _qualify(store, conversion.source, base_url)
                conversion.target = await _qualify(store, conversion.target, base_url)
        case FunctionSchema():
            await _inline_script(store, ref, result.script, base_url)
            if result.requirements:
                result.requirements = [await _qualify(store, req, base_url) for req in result.requirements]

    logger.debug("Inlined %s", ref.key)
    return result


async def inline_schema(
    store: SchemaStore, ref: SchemaRef, base_url: str = DEFAULT_REGISTRY_URL
) -> ColorSchema | FunctionSchema:
    document = await load_schema_document(store, ref)
    return await inline_document(store, ref, document, base_url)


async def bundle_documents(
    store: SchemaStore, refs: Sequence[SchemaRef], base_url: str = DEFAULT_REGISTRY_URL
) -> list[ColorSchema | FunctionSchema]:
    """Inline every schema in ``refs``; the first failure aborts the whole run."""
    return [await inline_schema(store, ref, base_url) for ref in refs]
