import copy
from dataclasses import dataclass, field
from typing import Any

from tokenscript_bundler.core.references import SchemaRef, make_key
from tokenscript_bundler.errors import DuplicateIdentifier, SchemaNotFound, ScriptFileMissing
from tokenscript_bundler.models import FILE_POINTER_PREFIX, SchemaKind


@dataclass
class InMemorySchemaEntry:
    document: dict[str, Any]
    scripts: dict[str, str] = field(default_factory=dict)


class InMemorySchemaStore:
    def __init__(self) -> None:
        self.entries: dict[str, InMemorySchemaEntry] = {}

    def add(
        self,
        kind: SchemaKind,
        slug: str,
        document: dict[str, Any],
        scripts: dict[str, str] | None = None,
    ) -> None:
        key = make_key(kind, slug)
        if key in self.entries:
            raise DuplicateIdentifier(key, f"memory:{key}", f"memory:{key}")
        self.entries[key] = InMemorySchemaEntry(document=copy.deepcopy(document), scripts=dict(scripts or {}))

    def describe(self, ref: SchemaRef) -> str:
        return f"memory:{ref.key}"

    async def load_document(self, ref: SchemaRef) -> dict[str, Any]:
        entry = self.entries.get(ref.key)
        if entry is None:
            raise SchemaNotFound(ref.key, self.describe(ref))
        return copy.deepcopy(entry.document)

    async def read_script(self, ref: SchemaRef, path: str) -> str:
        entry = self.entries.get(ref.key)
        name = path[len(FILE_POINTER_PREFIX) :] if path.startswith(FILE_POINTER_PREFIX) else path
        if entry is None or name not in entry.scripts:
            raise ScriptFileMissing(ref.key, path)
        return entry.scripts[name]

    async def list_slugs(self, kind: SchemaKind) -> list[str]:
        prefix = f"{kind}:"
        return sorted(key[len(prefix) :] for key in self.entries if key.startswith(prefix))

    async def has_schema(self, ref: SchemaRef) -> bool:
        return ref.key in self.entries
