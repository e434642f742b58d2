import asyncio
import json
import os
from pathlib import Path
from typing import Any

from tokenscript_bundler.core.documents import parse_schema_document
from tokenscript_bundler.core.inline import inline_document
from tokenscript_bundler.core.references import SchemaRef, make_key
from tokenscript_bundler.core.uri import DEFAULT_REGISTRY_URL
from tokenscript_bundler.errors import DuplicateIdentifier, InvalidSchemaDocument, SchemaNotFound, ScriptFileMissing
from tokenscript_bundler.models import FILE_POINTER_PREFIX, ColorSchema, FunctionSchema, SchemaKind

SCHEMA_FILENAME = "schema.json"

_KIND_DIRECTORIES: dict[str, str] = {"type": "types", "function": "functions"}


def default_schemas_dir() -> Path:
    return Path(os.getenv("SCHEMAS_DIR", str(Path.cwd() / "src" / "schemas")))


def read_schema_json(schema_dir: Path) -> dict[str, Any]:
    schema_path = schema_dir / SCHEMA_FILENAME
    try:
        content = schema_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise SchemaNotFound(schema_dir.name, str(schema_path)) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise InvalidSchemaDocument(f"Cannot read {schema_path}: {exc}") from exc
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise InvalidSchemaDocument(f"Invalid JSON in {schema_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidSchemaDocument(f"{schema_path} must contain a JSON object")
    return data


def read_script_file(schema_dir: Path, pointer: str, key: str) -> str:
    relative = pointer[len(FILE_POINTER_PREFIX) :] if pointer.startswith(FILE_POINTER_PREFIX) else pointer
    script_path = schema_dir / relative
    try:
        return script_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise ScriptFileMissing(key, str(script_path)) from None
    except (OSError, UnicodeDecodeError) as exc:
        raise ScriptFileMissing(key, str(script_path), f"cannot be read: {exc}") from exc


class FilesystemSchemaStore:
    """Read-only schema store over one or more roots.

    Each root holds ``types/<slug>/schema.json`` and ``functions/<slug>/schema.json``
    plus the script files those documents point to. A slug may live in only
    one root. File reads run in a worker thread.
    """

    def __init__(self, *roots: str | Path) -> None:
        self.roots = [Path(r) for r in roots] if roots else [default_schemas_dir()]

    def _candidates(self, ref: SchemaRef) -> list[Path]:
        return [
            root / _KIND_DIRECTORIES[ref.kind] / ref.slug
            for root in self.roots
            if (root / _KIND_DIRECTORIES[ref.kind] / ref.slug / SCHEMA_FILENAME).is_file()
        ]

    def schema_dir(self, ref: SchemaRef) -> Path:
        candidates = self._candidates(ref)
        if len(candidates) > 1:
            raise DuplicateIdentifier(ref.key, str(candidates[0]), str(candidates[1]))
        if candidates:
            return candidates[0]
        return self.roots[0] / _KIND_DIRECTORIES[ref.kind] / ref.slug

    def describe(self, ref: SchemaRef) -> str:
        return str(self.schema_dir(ref))

    async def load_document(self, ref: SchemaRef) -> dict[str, Any]:
        schema_dir = self.schema_dir(ref)
        try:
            return await asyncio.to_thread(read_schema_json, schema_dir)
        except SchemaNotFound:
            raise SchemaNotFound(ref.key, str(schema_dir / SCHEMA_FILENAME)) from None

    async def read_script(self, ref: SchemaRef, path: str) -> str:
        return await asyncio.to_thread(read_script_file, self.schema_dir(ref), path, ref.key)

    async def list_slugs(self, kind: SchemaKind) -> list[str]:
        found: dict[str, Path] = {}
        for root in self.roots:
            kind_dir = root / _KIND_DIRECTORIES[kind]
            if not kind_dir.is_dir():
                continue
            for entry in sorted(kind_dir.iterdir()):
                if not (entry / SCHEMA_FILENAME).is_file():
                    continue
                if entry.name in found:
                    raise DuplicateIdentifier(make_key(kind, entry.name), str(found[entry.name]), str(entry))
                found[entry.name] = entry
        return sorted(found)

    async def has_schema(self, ref: SchemaRef) -> bool:
        return bool(self._candidates(ref))


class DirectorySchemaStore:
    """Store view over a single schema directory, used to build it in isolation."""

    def __init__(self, schema_dir: str | Path, kind: SchemaKind) -> None:
        self.schema_dir = Path(schema_dir)
        self.ref = SchemaRef(kind=kind, slug=self.schema_dir.name)

    def describe(self, ref: SchemaRef) -> str:
        return str(self.schema_dir)

    async def load_document(self, ref: SchemaRef) -> dict[str, Any]:
        if ref.key != self.ref.key:
            raise SchemaNotFound(ref.key, str(self.schema_dir))
        return await asyncio.to_thread(read_schema_json, self.schema_dir)

    async def read_script(self, ref: SchemaRef, path: str) -> str:
        return await asyncio.to_thread(read_script_file, self.schema_dir, path, ref.key)

    async def list_slugs(self, kind: SchemaKind) -> list[str]:
        return [self.ref.slug] if kind == self.ref.kind else []

    async def has_schema(self, ref: SchemaRef) -> bool:
        return ref.key == self.ref.key


async def build_schema_directory(
    schema_dir: str | Path, base_url: str = DEFAULT_REGISTRY_URL
) -> ColorSchema | FunctionSchema:
    """Inline a single schema directory; its kind comes from the document's ``type``."""
    path = Path(schema_dir)
    if not path.is_dir():
        raise SchemaNotFound(path.name, str(path), hint="Directory not found.")
    document = parse_schema_document(await asyncio.to_thread(read_schema_json, path), str(path))
    store = DirectorySchemaStore(path, document.kind)
    return await inline_document(store, store.ref, document, base_url)
