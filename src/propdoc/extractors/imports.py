"""Import map extraction."""

from dataclasses import dataclass
from typing import Dict, Iterator, List

from propdoc.parser.nodes import ImportDeclaration, Program
from .base import BaseExtractor


@dataclass
class ImportBinding:
    """A name bound locally by an import declaration."""

    local: str
    imported: str
    kind: str = "named"
    import_kind: str = "value"


class ImportMap:
    """Maps module specifiers to the names bound from them, in source order."""

    def __init__(self) -> None:
        self.entries: Dict[str, List[ImportBinding]] = {}

    def add(self, source: str, binding: ImportBinding) -> None:
        self.entries.setdefault(source, []).append(binding)

    def bindings(self, source: str) -> List[ImportBinding]:
        return list(self.entries.get(source, []))

    def __contains__(self, source: object) -> bool:
        return source in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class ImportExtractor(BaseExtractor):
    """Collects every import declaration of a file.

    Default, named and namespace bindings are all recorded. ``import type``
    and ``import typeof`` are treated like value imports.
    """

    def extract(self, program: Program) -> ImportMap:
        imports = ImportMap()
        for statement in program.body:
            if not isinstance(statement, ImportDeclaration):
                continue
            imports.entries.setdefault(statement.source, [])
            for specifier in statement.specifiers:
                imports.add(statement.source, ImportBinding(
                    local=specifier.local,
                    imported=specifier.imported,
                    kind=specifier.kind,
                    import_kind=statement.import_kind
                ))
        return imports
