from typing import Any

from pydantic import ValidationError

from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.core.references import SchemaRef, resolve_schema_reference
from tokenscript_bundler.errors import InvalidSchemaDocument, SchemaNotFound
from tokenscript_bundler.models import ColorSchema, FunctionSchema, schema_document_adapter


def parse_schema_document(raw: dict[str, Any], location: str) -> ColorSchema | FunctionSchema:
    try:
        return schema_document_adapter.validate_python(raw)
    except ValidationError as exc:
        raise InvalidSchemaDocument(f"Invalid schema document at {location}: {exc}") from exc


async def load_schema_document(store: SchemaStore, ref: SchemaRef) -> ColorSchema | FunctionSchema:
    raw = await store.load_document(ref)
    document = parse_schema_document(raw, store.describe(ref))
    if document.kind != ref.kind:
        raise InvalidSchemaDocument(
            f"Schema at {store.describe(ref)} declares type '{document.type}' but is stored as a {ref.kind}"
        )
    return document


async def detect_schema_ref(store: SchemaStore, slug: str) -> SchemaRef:
    """Find which kind a bare slug belongs to, looking at types before functions."""
    for candidate in (SchemaRef(kind="type", slug=slug), SchemaRef(kind="function", slug=slug)):
        if await store.has_schema(candidate):
            return candidate
    raise SchemaNotFound(
        slug,
        hint=f"Use 'function:{slug}' or 'type:{slug}' prefix to be explicit.",
    )


async def resolve_requirement(store: SchemaStore, reference: str) -> SchemaRef:
    """Resolve a reference found inside a document.

    URIs carry their own category. A bare slug is looked up in the store and
    falls back to a color type when neither kind exists.
    """
    ref = resolve_schema_reference(reference)
    if ref.raw_uri:
        return ref
    try:
        return await detect_schema_ref(store, ref.slug)
    except SchemaNotFound:
        return ref
