"""Unit tests for the reference resolver."""

import pytest

from tokenscript_bundler.core.references import SchemaRef, resolve_schema_reference, split_kind_prefix
from tokenscript_bundler.errors import UnresolvableReference


def test_full_function_uri_resolves_to_function() -> None:
    ref = resolve_schema_reference("https://schema.example.com/api/v1/function/invert/0/")
    assert ref.kind == "function"
    assert ref.slug == "invert"
    assert ref.raw_uri == "https://schema.example.com/api/v1/function/invert/0/"


def test_relative_core_uri_resolves_to_type() -> None:
    ref = resolve_schema_reference("/api/v1/core/rgb-color/0/")
    assert ref == SchemaRef(kind="type", slug="rgb-color", raw_uri="/api/v1/core/rgb-color/0/")


def test_bare_slug_defaults_to_type() -> None:
    ref = resolve_schema_reference("rgb-color")
    assert ref.kind == "type"
    assert ref.slug == "rgb-color"
    assert ref.raw_uri == ""
    assert ref.key == "type:rgb-color"


@pytest.mark.parametrize("value", ["", "   ", "$self", "some/path/that/is/not/a/uri", "ftp://"])
def test_invalid_references_fail(value: str) -> None:
    with pytest.raises(UnresolvableReference):
        resolve_schema_reference(value)


def test_unresolvable_reference_is_a_value_error() -> None:
    with pytest.raises(ValueError, match="Could not resolve schema reference"):
        resolve_schema_reference("$self")


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("function:invert", ("function", "invert")),
        ("type:hex-color", ("type", "hex-color")),
        ("hex-color", (None, "hex-color")),
        ("preset:css", (None, "preset:css")),
        ("function:", (None, "function:")),
    ],
)
def test_split_kind_prefix(value: str, expected: tuple[str | None, str]) -> None:
    assert split_kind_prefix(value) == expected
