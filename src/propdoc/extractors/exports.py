"""Export set extraction."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from propdoc.parser.nodes import (
    ClassDeclaration,
    ExportAllDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    FunctionDeclaration,
    Identifier,
    Program,
    Statement,
    TypeAlias,
    VariableDeclaration,
)
from propdoc.resolution.symbol_table import DeclarationTable
from .base import BaseExtractor


@dataclass
class ReExport:
    """``export {a as b} from './x'`` or ``export * from './x'``."""

    source: str
    imported: str
    exported: Optional[str] = None


@dataclass
class ExportSet:
    """Externally visible names of a file."""

    # exported name -> local name
    bindings: Dict[str, str] = field(default_factory=dict)
    default_name: Optional[str] = None
    reexports: List[ReExport] = field(default_factory=list)

    def add(self, exported: str, local: Optional[str] = None) -> None:
        self.bindings[exported] = local or exported

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def __len__(self) -> int:
        return len(self.bindings)


class ExportExtractor(BaseExtractor):
    """Collects the export set of a file.

    In conservative mode every declared name becomes an export candidate
    as soon as the file has a named export declaration.
    """

    def __init__(self, conservative: bool = False) -> None:
        self.conservative = conservative

    def extract(self, program: Program, declarations: Optional[DeclarationTable] = None) -> ExportSet:
        exports = ExportSet()
        has_named_exports = False

        for statement in program.body:
            if isinstance(statement, ExportNamedDeclaration):
                has_named_exports = True
                if statement.source is not None:
                    for specifier in statement.specifiers:
                        exports.reexports.append(ReExport(
                            source=statement.source,
                            imported=specifier.local,
                            exported=specifier.exported
                        ))
                    continue
                for specifier in statement.specifiers:
                    exports.add(specifier.exported, specifier.local)
                for name in self._declared_names(statement.declaration):
                    exports.add(name)

            elif isinstance(statement, ExportDefaultDeclaration):
                # Only identifier references are captured
                if isinstance(statement.declaration, Identifier):
                    name = statement.declaration.name
                    exports.add(name)
                    exports.default_name = name

            elif isinstance(statement, ExportAllDeclaration):
                exports.reexports.append(ReExport(
                    source=statement.source,
                    imported="*",
                    exported=statement.exported
                ))

        if self.conservative and has_named_exports and declarations is not None:
            for name in declarations.names():
                exports.bindings.setdefault(name, name)

        return exports

    def _declared_names(self, declaration: Optional[Statement]) -> List[str]:
        if isinstance(declaration, VariableDeclaration):
            return [d.name for d in declaration.declarations if d.name]
        if isinstance(declaration, TypeAlias):
            return [declaration.name]
        if isinstance(declaration, (ClassDeclaration, FunctionDeclaration)) and declaration.name:
            return [declaration.name]
        return []
