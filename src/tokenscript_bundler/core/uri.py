"""Schema URI construction, parsing and qualification.

Registry URIs look like ``https://host/api/v1/<category>/<name>/<version>/``.
The ``core`` and ``schema`` categories hold color types, ``function`` holds
functions. Relative URIs drop the scheme and host.
"""

from dataclasses import dataclass
from typing import Literal
from urllib.parse import urlsplit

from tokenscript_bundler.models import SELF_REFERENCE, SchemaKind

DEFAULT_REGISTRY_URL = "https://schema.tokenscript.dev.gcp.tokens.studio"
DEFAULT_API_PATH = "/api/v1"

Category = Literal["schema", "core", "function"]

_CATEGORIES: frozenset[str] = frozenset({"schema", "core", "function"})
_KIND_CATEGORY: dict[str, Category] = {"type": "core", "function": "function"}

SchemaVersion = Literal["latest"] | tuple[int, ...]


@dataclass(frozen=True)
class SchemaUriComponents:
    base_url: str
    category: Category
    name: str
    version: SchemaVersion | None

    @property
    def kind(self) -> SchemaKind:
        return "function" if self.category == "function" else "type"


def parse_version(value: str) -> SchemaVersion | None:
    if value == "latest":
        return "latest"
    parts = value.split(".")
    if not 1 <= len(parts) <= 3 or not all(p.isdigit() for p in parts):
        return None
    return tuple(int(p) for p in parts)


def version_to_string(version: SchemaVersion | None) -> str:
    if version is None or version == "latest":
        return "latest"
    return ".".join(str(v) for v in version)


def parse_schema_uri(uri: str) -> SchemaUriComponents | None:
    """Split a full or relative schema URI into its components.

    Returns None when the string is not a schema URI.
    """
    base_url = ""
    pathname = uri
    if "://" in uri:
        parts = urlsplit(uri)
        if not parts.scheme or not parts.netloc:
            return None
        base_url = f"{parts.scheme}://{parts.netloc}"
        pathname = parts.path

    segments = [s for s in pathname.split("/") if s]
    if len(segments) < 5:
        return None
    if segments[0] != "api" or not segments[1].startswith("v"):
        return None

    category = segments[2]
    if category not in _CATEGORIES:
        return None

    return SchemaUriComponents(
        base_url=base_url,
        category=category,  # type: ignore[arg-type]
        name=segments[3],
        version=parse_version(segments[4]),
    )


def build_schema_uri(
    category: str,
    name: str,
    version: SchemaVersion | None = (0,),
    base_url: str | None = None,
) -> str:
    effective_base = DEFAULT_REGISTRY_URL if base_url is None else base_url.rstrip("/")
    return f"{effective_base}{DEFAULT_API_PATH}/{category}/{name}/{version_to_string(version)}/"


def category_for_kind(kind: SchemaKind) -> Category:
    return _KIND_CATEGORY[kind]


def schema_uri_for(kind: SchemaKind, slug: str, base_url: str | None = None) -> str:
    """Canonical registry URI of a bundled schema."""
    return build_schema_uri(category_for_kind(kind), slug, (0,), base_url)


def add_base_url(uri: str, base_url: str) -> str:
    """Prefix a relative ``/api/...`` URI with ``base_url``; anything else is returned as-is."""
    if "://" in uri:
        return uri
    if uri.startswith("/"):
        return f"{base_url.rstrip('/')}{uri}"
    return uri


def qualify_reference(value: str, base_url: str) -> str:
    """Rewrite a cross-schema reference into a fully-qualified URI.

    ``$self`` and already-qualified URIs are left untouched, so applying this
    twice gives the same result. A bare slug is read as a color type.
    """
    if value == SELF_REFERENCE or "://" in value:
        return value
    if value.startswith("/"):
        return add_base_url(value, base_url)
    if value and "/" not in value:
        return schema_uri_for("type", value, base_url)
    return value
