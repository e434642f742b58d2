"""Shared fixtures and helpers for tests."""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tokenscript_bundler.store import FilesystemSchemaStore, InMemorySchemaStore

_TESTS_ROOT = Path(__file__).parent

SCRIPT_TYPE = "/api/v1/core/tokenscript/0/"

SchemaFactory = Callable[..., dict[str, Any]]


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_TESTS_ROOT)
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Schema document builders
# ---------------------------------------------------------------------------


def _script(pointer: str) -> dict[str, str]:
    return {"type": SCRIPT_TYPE, "script": pointer}


def build_color_document(name: str, conversions: list[tuple[str, str]] | None = None) -> dict[str, Any]:
    """Color type whose scripts all point at files named after their role."""
    return {
        "name": name,
        "type": "color",
        "description": f"{name} color space",
        "schema": {"type": "object", "properties": {"value": {"type": "string"}}},
        "initializers": [
            {"title": f"{name} initializer", "keyword": name.lower(), "script": _script("./initializer.tokenscript")}
        ],
        "conversions": [
            {
                "source": source,
                "target": target,
                "description": f"{source} to {target}",
                "lossless": True,
                "script": _script(f"./conversion-{idx}.tokenscript"),
            }
            for idx, (source, target) in enumerate(conversions or [])
        ],
    }


def build_function_document(name: str, requirements: list[str] | None = None) -> dict[str, Any]:
    return {
        "name": name.title(),
        "type": "function",
        "description": f"{name} function",
        "keyword": name,
        "input": {"type": "object", "properties": {"value": {"type": "number"}}},
        "script": _script(f"./{name}.tokenscript"),
        "requirements": list(requirements or []),
    }


def script_files(document: dict[str, Any]) -> dict[str, str]:
    """Script bodies for every file pointer in ``document``."""
    pointers: list[str] = []
    if document["type"] == "function":
        pointers.append(document["script"]["script"])
    else:
        pointers.extend(i["script"]["script"] for i in document["initializers"])
        pointers.extend(c["script"]["script"] for c in document["conversions"])
    return {
        p[2:]: f"// {document['name']} {p[2:]}\nvariable input: List = {{input}};\nreturn input;\n" for p in pointers
    }


def write_schema(root: Path, kind: str, slug: str, document: dict[str, Any]) -> Path:
    schema_dir = root / ("types" if kind == "type" else "functions") / slug
    schema_dir.mkdir(parents=True, exist_ok=True)
    (schema_dir / "schema.json").write_text(json.dumps(document, indent=2), encoding="utf-8")
    for filename, content in script_files(document).items():
        (schema_dir / filename).write_text(content, encoding="utf-8")
    return schema_dir


def core_uri(slug: str) -> str:
    return f"/api/v1/core/{slug}/0/"


# rgb-color <-> hex-color, hsl-color -> rgb-color and hex-color,
# invert -> rgb-color, broken-mix -> rgb-color and a missing type.
SAMPLE_SCHEMAS: list[tuple[str, str, dict[str, Any]]] = [
    ("type", "hex-color", build_color_document("Hex")),
    (
        "type",
        "rgb-color",
        build_color_document("RGB", [(core_uri("hex-color"), "$self"), ("$self", core_uri("hex-color"))]),
    ),
    (
        "type",
        "hsl-color",
        build_color_document("HSL", [(core_uri("rgb-color"), "$self"), ("$self", core_uri("hex-color"))]),
    ),
    (
        "function",
        "invert",
        build_function_document("invert", ["https://schema.tokenscript.dev.gcp.tokens.studio/api/v1/core/rgb-color/0/"]),
    ),
    ("function", "broken-mix", build_function_document("broken-mix", [core_uri("rgb-color"), core_uri("missing-color")])),
]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def schemas_root(tmp_path: Path) -> Path:
    root = tmp_path / "schemas"
    for kind, slug, document in SAMPLE_SCHEMAS:
        write_schema(root, kind, slug, document)
    return root


@pytest.fixture
def fs_store(schemas_root: Path) -> FilesystemSchemaStore:
    return FilesystemSchemaStore(schemas_root)


@pytest.fixture
def memory_store() -> InMemorySchemaStore:
    store = InMemorySchemaStore()
    for kind, slug, document in SAMPLE_SCHEMAS:
        store.add(kind, slug, document, script_files(document))  # type: ignore[arg-type]
    return store


@pytest.fixture
def color_document() -> SchemaFactory:
    return build_color_document


@pytest.fixture
def function_document() -> SchemaFactory:
    return build_function_document


@pytest.fixture
def scripts_for() -> Callable[[dict[str, Any]], dict[str, str]]:
    return script_files


@pytest.fixture
def schema_writer() -> Callable[[Path, str, str, dict[str, Any]], Path]:
    return write_schema
