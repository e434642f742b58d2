"""Error taxonomy for schema resolution and bundling."""


class BundlerError(Exception):
    """Base class for every error raised while resolving or bundling schemas."""


class UnresolvableReference(BundlerError, ValueError):
    """A reference string cannot be parsed into a (kind, slug) pair."""

    def __init__(self, reference: str, reason: str = "not a schema URI or slug") -> None:
        self.reference = reference
        super().__init__(f"Could not resolve schema reference {reference!r}: {reason}")


class SchemaNotFound(BundlerError, LookupError):
    """A resolved reference has no document in the store."""

    def __init__(self, key: str, location: str | None = None, hint: str | None = None) -> None:
        self.key = key
        self.location = location
        message = f"Schema '{key}' not found"
        if location:
            message += f" at {location}"
        if hint:
            message += f". {hint}"
        super().__init__(message)


class ScriptFileMissing(BundlerError, FileNotFoundError):
    """A document being inlined points at a script file that cannot be read."""

    def __init__(self, key: str, script_path: str, reason: str = "does not exist") -> None:
        self.key = key
        self.script_path = script_path
        super().__init__(f"Script file '{script_path}' referenced by schema '{key}' {reason}")


class DuplicateIdentifier(BundlerError):
    """Two documents claim the same (kind, slug)."""

    def __init__(self, key: str, first: str, second: str) -> None:
        self.key = key
        super().__init__(f"Duplicate schema '{key}' found:\n  New: {second}\n  Existing: {first}")


class InvalidSchemaDocument(BundlerError):
    """A schema document cannot be parsed or does not have a known type."""


class ConfigError(BundlerError):
    """A bundle config file is missing or malformed."""
