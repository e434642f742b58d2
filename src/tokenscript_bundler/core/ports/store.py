from typing import Any, Protocol

from tokenscript_bundler.core.references import SchemaRef
from tokenscript_bundler.models import SchemaKind


class SchemaStore(Protocol):
    async def load_document(self, ref: SchemaRef) -> dict[str, Any]: ...

    async def read_script(self, ref: SchemaRef, path: str) -> str: ...

    async def list_slugs(self, kind: SchemaKind) -> list[str]: ...

    async def has_schema(self, ref: SchemaRef) -> bool: ...

    def describe(self, ref: SchemaRef) -> str: ...
