"""Resolution module initialization."""

from .symbol_table import (
    DeclarationTable,
    Declaration,
    DeclarationKind,
    MergePolicy,
    AliasDeclaration,
    LiteralDeclaration,
    ListDeclaration,
    ObjectDeclaration,
    TypeAliasDeclaration,
)
from .path_resolver import PathResolver
from .source_loader import load_source
from .import_graph import ImportGraph

# The cross-file resolver depends on the extractors, which depend on the
# symbol table above; import it as propdoc.resolution.resolver.

__all__ = [
    "DeclarationTable",
    "Declaration",
    "DeclarationKind",
    "MergePolicy",
    "AliasDeclaration",
    "LiteralDeclaration",
    "ListDeclaration",
    "ObjectDeclaration",
    "TypeAliasDeclaration",
    "PathResolver",
    "load_source",
    "ImportGraph"
]
