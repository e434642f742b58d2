"""Dependency discovery over a schema store.

The walker expands requested schemas into their transitive closure. Color
types depend on the types named by their conversions, functions on their
``requirements``. Discovery is forgiving: a dependency that cannot be resolved
or loaded is dropped with a warning, while a seed that cannot be loaded is an
error.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

from tokenscript_bundler.core.diagnostics import Diagnostics
from tokenscript_bundler.core.documents import load_schema_document, resolve_requirement
from tokenscript_bundler.core.ports.store import SchemaStore
from tokenscript_bundler.core.references import SchemaRef, make_key
from tokenscript_bundler.errors import InvalidSchemaDocument, SchemaNotFound, UnresolvableReference
from tokenscript_bundler.models import SELF_REFERENCE, ColorSchema, FunctionSchema, SchemaKind

ALREADY_VISITED = "(already visited)"
MISSING = "(missing)"


@dataclass(frozen=True)
class DependencyNode:
    kind: SchemaKind
    slug: str
    dependencies: tuple[str, ...] = ()
    missing: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        return make_key(self.kind, self.slug)


@dataclass(frozen=True)
class DependencyResolution:
    type_slugs: frozenset[str]
    function_slugs: frozenset[str]
    tree: Mapping[str, DependencyNode]
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def refs(self) -> list[SchemaRef]:
        """Resolved schemas, types first, each group sorted by slug."""
        return [SchemaRef(kind="type", slug=s) for s in sorted(self.type_slugs)] + [
            SchemaRef(kind="function", slug=s) for s in sorted(self.function_slugs)
        ]

    def __contains__(self, ref: object) -> bool:
        return isinstance(ref, SchemaRef) and ref.key in self.tree


def extract_requirements(
    document: ColorSchema | FunctionSchema,
    include_conversion_dependencies: bool = True,
) -> list[str]:
    match document:
        case FunctionSchema():
            return list(document.requirements)
        case ColorSchema():
            if not include_conversion_dependencies:
                return []
            requirements: list[str] = []
            for conversion in document.conversions:
                for endpoint in (conversion.source, conversion.target):
                    if endpoint != SELF_REFERENCE:
                        requirements.append(endpoint)
            return requirements


async def resolve_dependencies(
    store: SchemaStore,
    seeds: Sequence[SchemaRef],
    include_conversion_dependencies: bool = True,
    diagnostics: Diagnostics | None = None,
) -> DependencyResolution:
    """Collect the seeds and everything they transitively require."""
    diagnostics = diagnostics if diagnostics is not None else Diagnostics()
    visited: set[str] = set()
    failed: set[str] = set()
    slugs: dict[SchemaKind, set[str]] = {"type": set(), "function": set()}
    tree: dict[str, DependencyNode] = {}

    for seed in seeds:
        if seed.key in visited:
            continue
        stack = [(seed, await load_schema_document(store, seed))]
        visited.add(seed.key)
        slugs[seed.kind].add(seed.slug)

        while stack:
            ref, document = stack.pop()
            dependencies: list[str] = []
            missing: list[str] = []

            for requirement in extract_requirements(document, include_conversion_dependencies):
                try:
                    dependency = await resolve_requirement(store, requirement)
                except UnresolvableReference as exc:
                    diagnostics.warn(f"{ref.key}: {exc}")
                    missing.append(requirement)
                    continue

                key = dependency.key
                if key in dependencies or key in missing:
                    continue
                if key in visited:
                    dependencies.append(key)
                    continue
                if key in failed:
                    missing.append(key)
                    continue

                try:
                    dependency_document = await load_schema_document(store, dependency)
                except (SchemaNotFound, InvalidSchemaDocument) as exc:
                    diagnostics.warn(f"Failed to load schema {key} required by {ref.key}: {exc}")
                    failed.add(key)
                    missing.append(key)
                    continue

                visited.add(key)
                slugs[dependency.kind].add(dependency.slug)
                dependencies.append(key)
                stack.append((dependency, dependency_document))

            tree[ref.key] = DependencyNode(
                kind=ref.kind,
                slug=ref.slug,
                dependencies=tuple(dependencies),
                missing=tuple(missing),
            )

    return DependencyResolution(
        type_slugs=frozenset(slugs["type"]),
        function_slugs=frozenset(slugs["function"]),
        tree=MappingProxyType(tree),
        diagnostics=diagnostics,
    )


def render_dependency_tree(tree: Mapping[str, DependencyNode], roots: Sequence[str]) -> str:
    """Render the tree below ``roots`` with box-drawing connectors.

    A schema is expanded once; later occurrences are printed with an
    ``(already visited)`` marker.
    """
    lines = ["Dependency tree:", ""]
    printed: set[str] = set()
    # (key, indent, is_last, is_root, is_missing)
    stack: list[tuple[str, str, bool, bool, bool]] = [
        (root, "", idx == len(roots) - 1, True, False) for idx, root in reversed(list(enumerate(roots)))
    ]

    while stack:
        key, indent, is_last, is_root, is_missing = stack.pop()
        connector = indent + ("└── " if is_last else "├── ")
        node = tree.get(key)

        if is_missing:
            lines.append(f"{connector}{key} {MISSING}")
            continue

        if key in printed:
            if not is_root:
                lines.append(f"{connector}{key} {ALREADY_VISITED}")
            continue
        if node is None:
            lines.append(f"{connector}{key} {MISSING}")
            continue

        printed.add(key)
        lines.append(connector + key)

        children = [(dep, False) for dep in node.dependencies] + [(dep, True) for dep in node.missing]
        child_indent = indent + ("    " if is_last else "│   ")
        for idx in range(len(children) - 1, -1, -1):
            child, is_missing = children[idx]
            stack.append((child, child_indent, idx == len(children) - 1, False, is_missing))

    return "\n".join(lines)
