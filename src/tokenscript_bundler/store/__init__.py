from tokenscript_bundler.store.filesystem import (
    DirectorySchemaStore,
    FilesystemSchemaStore,
    build_schema_directory,
    default_schemas_dir,
)
from tokenscript_bundler.store.memory import InMemorySchemaEntry, InMemorySchemaStore

__all__ = [
    "DirectorySchemaStore",
    "FilesystemSchemaStore",
    "InMemorySchemaEntry",
    "InMemorySchemaStore",
    "build_schema_directory",
    "default_schemas_dir",
]
