from collections.abc import Callable
from typing import Any

import pytest
from pydantic import ValidationError

from tokenscript_bundler.models import (
    BundledSchemaEntry,
    BundleMetadata,
    ColorSchema,
    FunctionSchema,
    ScriptReference,
    dump_document,
    schema_document_adapter,
)

SchemaFactory = Callable[..., dict[str, Any]]


def test_document_type_selects_model(color_document: SchemaFactory, function_document: SchemaFactory) -> None:
    color = schema_document_adapter.validate_python(color_document("RGB"))
    function = schema_document_adapter.validate_python(function_document("invert"))

    assert isinstance(color, ColorSchema)
    assert color.kind == "type"
    assert isinstance(function, FunctionSchema)
    assert function.kind == "function"


def test_unknown_document_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        schema_document_adapter.validate_python({"type": "gradient", "name": "Gradient"})


def test_dump_keeps_unknown_fields(color_document: SchemaFactory) -> None:
    raw = color_document("RGB", [("hex-color", "$self")])
    raw["deprecated"] = False
    raw["conversions"][0]["cost"] = 2

    document = schema_document_adapter.validate_python(raw)

    assert dump_document(document) == raw


def test_file_pointer_detection() -> None:
    assert ScriptReference(type="/api/v1/core/tokenscript/0/", script="./lighten.tokenscript").is_file_pointer
    assert not ScriptReference(type="/api/v1/core/tokenscript/0/", script="return 1;").is_file_pointer


def test_bundled_entry_dumps_schema_alias(function_document: SchemaFactory) -> None:
    document = schema_document_adapter.validate_python(function_document("invert"))
    entry = BundledSchemaEntry(uri="https://example.com/api/v1/function/invert/0/", schema=document)

    dumped = entry.model_dump(mode="json", by_alias=True, exclude_none=True)

    assert set(dumped) == {"uri", "schema"}
    assert dumped["schema"]["keyword"] == "invert"


def test_metadata_aliases() -> None:
    metadata = BundleMetadata.model_validate(
        {"requestedSchemas": ["invert"], "resolvedDependencies": ["invert", "rgb-color"], "generatedAt": "now"}
    )
    assert metadata.resolved_dependencies == ["invert", "rgb-color"]
    assert metadata.model_dump(by_alias=True, exclude_none=True) == {
        "requestedSchemas": ["invert"],
        "resolvedDependencies": ["invert", "rgb-color"],
        "generatedAt": "now",
    }


def test_dump_keeps_explicit_nulls_and_skips_defaults(color_document: SchemaFactory) -> None:
    raw = color_document("RGB", [("hex-color", "$self")])
    del raw["conversions"][0]["lossless"]
    del raw["description"]
    raw["initializers"][0]["description"] = None
    raw["deprecatedBy"] = None

    dumped = dump_document(schema_document_adapter.validate_python(raw))

    assert dumped == raw
    assert "lossless" not in dumped["conversions"][0]
    assert dumped["initializers"][0]["description"] is None
