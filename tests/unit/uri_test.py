"""Unit tests for schema URI helpers."""

import pytest

from tokenscript_bundler.core.uri import (
    DEFAULT_REGISTRY_URL,
    add_base_url,
    build_schema_uri,
    parse_schema_uri,
    parse_version,
    qualify_reference,
    schema_uri_for,
)


class TestParseSchemaUri:
    def test_full_uri(self) -> None:
        components = parse_schema_uri(f"{DEFAULT_REGISTRY_URL}/api/v1/schema/rgb-color/0.0.1/")
        assert components is not None
        assert components.base_url == DEFAULT_REGISTRY_URL
        assert components.category == "schema"
        assert components.name == "rgb-color"
        assert components.version == (0, 0, 1)
        assert components.kind == "type"

    def test_relative_function_uri(self) -> None:
        components = parse_schema_uri("/api/v1/function/invert/latest/")
        assert components is not None
        assert components.base_url == ""
        assert components.kind == "function"
        assert components.version == "latest"

    def test_core_category_is_a_type(self) -> None:
        components = parse_schema_uri("/api/v1/core/hex-color/0/")
        assert components is not None
        assert components.kind == "type"

    @pytest.mark.parametrize(
        "uri",
        [
            "rgb-color",
            "/api/v1/core/rgb-color/",
            "/v1/api/core/rgb-color/0/",
            "/api/v1/widgets/rgb-color/0/",
            "https:///api/v1/core/rgb-color/0/",
        ],
    )
    def test_rejects_non_schema_uris(self, uri: str) -> None:
        assert parse_schema_uri(uri) is None

    def test_parse_version(self) -> None:
        assert parse_version("1.2") == (1, 2)
        assert parse_version("latest") == "latest"
        assert parse_version("1.x") is None
        assert parse_version("1.2.3.4") is None


class TestBuildAndQualify:
    def test_build_schema_uri_defaults_to_registry(self) -> None:
        assert build_schema_uri("core", "rgb-color") == f"{DEFAULT_REGISTRY_URL}/api/v1/core/rgb-color/0/"

    def test_build_schema_uri_relative(self) -> None:
        assert build_schema_uri("function", "invert", "latest", base_url="") == "/api/v1/function/invert/latest/"

    def test_schema_uri_for_function(self) -> None:
        assert schema_uri_for("function", "invert", "https://example.com/") == (
            "https://example.com/api/v1/function/invert/0/"
        )

    def test_add_base_url(self) -> None:
        assert add_base_url("/api/v1/core/x/0/", "https://example.com/") == "https://example.com/api/v1/core/x/0/"
        assert add_base_url("https://a.b/api/v1/core/x/0/", "https://example.com") == "https://a.b/api/v1/core/x/0/"
        assert add_base_url("$self", "https://example.com") == "$self"

    def test_qualify_leaves_self_untouched(self) -> None:
        assert qualify_reference("$self", "https://example.com") == "$self"

    def test_qualify_bare_slug(self) -> None:
        assert qualify_reference("hex-color", "https://example.com") == "https://example.com/api/v1/core/hex-color/0/"

    @pytest.mark.parametrize("value", ["hex-color", "/api/v1/core/hex-color/0/", "$self"])
    def test_qualify_is_idempotent(self, value: str) -> None:
        once = qualify_reference(value, "https://example.com")
        assert qualify_reference(once, "https://example.com") == once
