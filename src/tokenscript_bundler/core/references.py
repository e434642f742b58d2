from dataclasses import dataclass

from tokenscript_bundler.core.uri import parse_schema_uri
from tokenscript_bundler.errors import UnresolvableReference
from tokenscript_bundler.models import SELF_REFERENCE, SchemaKind

_KIND_PREFIXES: dict[str, SchemaKind] = {"type": "type", "function": "function"}


@dataclass(frozen=True)
class SchemaRef:
    kind: SchemaKind
    slug: str
    raw_uri: str = ""

    @property
    def key(self) -> str:
        return make_key(self.kind, self.slug)

    def __str__(self) -> str:
        return self.key


def make_key(kind: SchemaKind, slug: str) -> str:
    return f"{kind}:{slug}"


def resolve_schema_reference(reference: str) -> SchemaRef:
    """Resolve a full URI, relative URI or bare slug to a ``SchemaRef``.

    A bare slug carries no category, so it resolves to a color type.
    """
    value = reference.strip() if reference else ""
    if not value:
        raise UnresolvableReference(reference, "empty reference")
    if value == SELF_REFERENCE:
        raise UnresolvableReference(reference, "'$self' refers to the defining document")

    components = parse_schema_uri(value)
    if components is not None:
        return SchemaRef(kind=components.kind, slug=components.name, raw_uri=value)

    if "/" not in value and "://" not in value:
        return SchemaRef(kind="type", slug=value)

    raise UnresolvableReference(reference)


def split_kind_prefix(value: str) -> tuple[SchemaKind | None, str]:
    """Split ``function:invert`` into ``("function", "invert")``.

    Returns ``(None, value)`` when there is no recognised prefix.
    """
    if ":" in value and "://" not in value:
        prefix, _, slug = value.partition(":")
        kind = _KIND_PREFIXES.get(prefix)
        if kind is not None and slug:
            return kind, slug
    return None, value
