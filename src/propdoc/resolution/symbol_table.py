"""Declaration table for module-level names."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional

from propdoc.parser.nodes import (
    Literal,
    Node,
    ObjectExpression,
    SourceLocation,
    TypeAnnotation,
)


class DeclarationKind(Enum):
    """Shapes of declared values."""

    IDENTIFIER = "IDENTIFIER"
    LITERAL = "LITERAL"
    LIST_LITERAL = "LIST_LITERAL"
    OBJECT_LITERAL = "OBJECT_LITERAL"
    TYPE_ALIAS = "TYPE_ALIAS"


class MergePolicy(str, Enum):
    """Which side wins when a local and an imported name collide."""

    LOCAL = "local"
    IMPORTED = "imported"


@dataclass
class Declaration:
    """A single declared value for a name."""

    name: str = ""
    kind: DeclarationKind = DeclarationKind.IDENTIFIER
    location: Optional[SourceLocation] = None
    node: Optional[Node] = field(default=None, repr=False, compare=False)

    @property
    def source_file(self) -> Optional[str]:
        return self.location.path if self.location else None


@dataclass
class AliasDeclaration(Declaration):
    """``const A = B``."""

    alias_name: str = ""

    def __post_init__(self) -> None:
        self.kind = DeclarationKind.IDENTIFIER


@dataclass
class LiteralDeclaration(Declaration):
    """``const A = 'value'``."""

    value: Any = None

    def __post_init__(self) -> None:
        self.kind = DeclarationKind.LITERAL


@dataclass
class ListDeclaration(Declaration):
    """``const A = [...]``."""

    elements: List[Optional[Node]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.kind = DeclarationKind.LIST_LITERAL

    def values(self) -> List[Any]:
        """Literal values of the elements, raw text for anything else."""
        values = []
        for element in self.elements:
            if element is None:
                continue
            if isinstance(element, Literal):
                values.append(element.value)
            else:
                values.append(element.raw)
        return values


@dataclass
class ObjectDeclaration(Declaration):
    """``const A = {...}``, kept with its location for nested spreads."""

    value: Optional[ObjectExpression] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.kind = DeclarationKind.OBJECT_LITERAL

    @property
    def properties(self) -> list:
        return self.value.properties if self.value else []


@dataclass
class TypeAliasDeclaration(Declaration):
    """``type A = ...``."""

    right: Optional[TypeAnnotation] = field(default=None, repr=False)
    type_parameters: List[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.kind = DeclarationKind.TYPE_ALIAS


Slot = List[Declaration]


class DeclarationTable:
    """Maps names to slots of declarations.

    A name declared more than once keeps every declaration in source
    order; nothing is overwritten.
    """

    def __init__(self, entries: Optional[Dict[str, Slot]] = None) -> None:
        self.entries: Dict[str, Slot] = {}
        for name, slot in (entries or {}).items():
            self.entries[name] = list(slot)

    def add(self, declaration: Declaration) -> None:
        """Append a declaration to its name's slot."""
        self.entries.setdefault(declaration.name, []).append(declaration)

    def bind(self, name: str, slot: Iterable[Declaration]) -> None:
        """Bind a name to an existing slot, e.g. an imported one."""
        self.entries[name] = list(slot)

    def get(self, name: str) -> Slot:
        return list(self.entries.get(name, []))

    def names(self) -> List[str]:
        return list(self.entries.keys())

    def merge(self, other: "DeclarationTable", policy: MergePolicy = MergePolicy.IMPORTED) -> "DeclarationTable":
        """Merge another table into a copy of this one.

        Names present only on one side are kept as they are. On a
        collision the policy picks the winning slot.
        """
        merged = self.copy()
        for name, slot in other.entries.items():
            if name in merged.entries and policy == MergePolicy.LOCAL:
                continue
            merged.bind(name, slot)
        return merged

    def copy(self) -> "DeclarationTable":
        return DeclarationTable(self.entries)

    def __contains__(self, name: object) -> bool:
        return name in self.entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DeclarationTable):
            return NotImplemented
        return self.entries == other.entries

    def __repr__(self) -> str:
        return f"DeclarationTable({sorted(self.entries)})"
