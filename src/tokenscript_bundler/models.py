from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

SchemaKind = Literal["type", "function"]

SELF_REFERENCE = "$self"
FILE_POINTER_PREFIX = "./"


class ScriptReference(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str
    script: str

    @property
    def is_file_pointer(self) -> bool:
        return self.script.startswith(FILE_POINTER_PREFIX)


class Initializer(BaseModel):
    model_config = ConfigDict(extra="allow")

    keyword: str
    title: str | None = None
    description: str | None = None
    script: ScriptReference


class Conversion(BaseModel):
    model_config = ConfigDict(extra="allow")

    source: str
    target: str
    lossless: bool = False
    description: str | None = None
    script: ScriptReference


class ColorSchema(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: Literal["color"]
    name: str
    slug: str | None = None
    description: str = ""
    schema_: dict[str, Any] | None = Field(default=None, alias="schema")
    initializers: list[Initializer] = Field(default_factory=list)
    conversions: list[Conversion] = Field(default_factory=list)

    @property
    def kind(self) -> SchemaKind:
        return "type"


class FunctionSchema(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: Literal["function"]
    name: str
    slug: str | None = None
    description: str = ""
    keyword: str
    input: dict[str, Any] | None = None
    script: ScriptReference
    requirements: list[str] = Field(default_factory=list)

    @property
    def kind(self) -> SchemaKind:
        return "function"


SchemaDocument = Annotated[ColorSchema | FunctionSchema, Field(discriminator="type")]

schema_document_adapter: TypeAdapter[ColorSchema | FunctionSchema] = TypeAdapter(SchemaDocument)


def dump_document(document: ColorSchema | FunctionSchema) -> dict[str, Any]:
    """Serialize a document back to its on-disk JSON shape.

    Only keys present in the source or assigned while inlining are written, so
    explicit nulls survive and defaults are not added.
    """
    return document.model_dump(mode="json", by_alias=True, exclude_unset=True)


class BundledSchemaEntry(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    uri: str
    schema_: SchemaDocument = Field(alias="schema")


class BundleMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    requested_schemas: list[str] = Field(alias="requestedSchemas")
    resolved_dependencies: list[str] = Field(alias="resolvedDependencies")
    generated_at: str = Field(alias="generatedAt")
    generated_by: str | None = Field(default=None, alias="generatedBy")


class RegistryMetadata(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    generated_at: str = Field(alias="generatedAt")
    total_schemas: int = Field(alias="totalSchemas")
    generated_by: str | None = Field(default=None, alias="generatedBy")


class BundledRegistry(BaseModel):
    version: str
    types: list[ColorSchema]
    functions: list[FunctionSchema]
    metadata: RegistryMetadata

    def to_json(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "types": [dump_document(document) for document in self.types],
            "functions": [dump_document(document) for document in self.functions],
            "metadata": self.metadata.model_dump(mode="json", by_alias=True, exclude_none=True),
        }
