"""Syntax tree node types produced by the parser.

Only the node kinds the documentation pipeline consumes are modelled.
Everything else in a source file is either skipped or kept as an
``OpaqueExpression`` carrying its raw text.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Union


@dataclass(frozen=True)
class SourceLocation:
    """Position of a node inside a file."""

    path: Optional[str] = None
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        return f"{self.path or '<source>'}:{self.line}:{self.column}"


@dataclass
class Node:
    """Base class for all syntax tree nodes."""

    loc: Optional[SourceLocation] = field(default=None, compare=False, repr=False)
    raw: str = field(default="", compare=False, repr=False)
    leading_comments: List[str] = field(default_factory=list, compare=False, repr=False)


# ---------------------------------------------------------------------------
# Flow type annotations
# ---------------------------------------------------------------------------

@dataclass
class TypeAnnotation(Node):
    """Base class for Flow type annotations."""


@dataclass
class PrimitiveTypeAnnotation(TypeAnnotation):
    """A built-in type such as string, number, boolean, mixed or void."""

    name: str = ""


@dataclass
class LiteralTypeAnnotation(TypeAnnotation):
    """A string, number or boolean literal used as a type."""

    value: Any = None


@dataclass
class GenericTypeAnnotation(TypeAnnotation):
    """A named type reference, optionally with type arguments."""

    name: str = ""
    type_parameters: List[TypeAnnotation] = field(default_factory=list)


@dataclass
class ObjectTypeMember(Node):
    """Base class for members of an object type."""


@dataclass
class ObjectTypeAnnotation(TypeAnnotation):
    """A structural object type: ``{a: string, ...B}``."""

    properties: List[ObjectTypeMember] = field(default_factory=list)
    exact: bool = False
    inexact: bool = False


@dataclass
class ObjectTypeProperty(ObjectTypeMember):
    key: str = ""
    value: Optional[TypeAnnotation] = None
    optional: bool = False
    method: bool = False


@dataclass
class ObjectTypeSpreadProperty(ObjectTypeMember):
    argument: Optional[TypeAnnotation] = None


@dataclass
class ObjectTypeIndexer(ObjectTypeMember):
    id: Optional[str] = None
    key: Optional[TypeAnnotation] = None
    value: Optional[TypeAnnotation] = None


@dataclass
class ObjectTypeCallProperty(ObjectTypeMember):
    value: Optional[TypeAnnotation] = None


@dataclass
class UnionTypeAnnotation(TypeAnnotation):
    types: List[TypeAnnotation] = field(default_factory=list)


@dataclass
class IntersectionTypeAnnotation(TypeAnnotation):
    types: List[TypeAnnotation] = field(default_factory=list)


@dataclass
class NullableTypeAnnotation(TypeAnnotation):
    type_annotation: Optional[TypeAnnotation] = None


@dataclass
class ArrayTypeAnnotation(TypeAnnotation):
    element_type: Optional[TypeAnnotation] = None


@dataclass
class TupleTypeAnnotation(TypeAnnotation):
    types: List[TypeAnnotation] = field(default_factory=list)


@dataclass
class FunctionTypeParam(Node):
    name: Optional[str] = None
    type_annotation: Optional[TypeAnnotation] = None
    optional: bool = False


@dataclass
class FunctionTypeAnnotation(TypeAnnotation):
    params: List[FunctionTypeParam] = field(default_factory=list)
    rest: Optional[FunctionTypeParam] = None
    return_type: Optional[TypeAnnotation] = None


@dataclass
class TypeofTypeAnnotation(TypeAnnotation):
    argument: Optional[TypeAnnotation] = None


@dataclass
class ExistsTypeAnnotation(TypeAnnotation):
    """The existential type ``*``."""


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------

@dataclass
class Expression(Node):
    """Base class for value expressions."""


@dataclass
class Identifier(Expression):
    name: str = ""


@dataclass
class Literal(Expression):
    value: Any = None


@dataclass
class ArrayExpression(Expression):
    elements: List[Optional[Expression]] = field(default_factory=list)


@dataclass
class Property(Node):
    """A ``key: value`` entry of an object literal."""

    key: str = ""
    value: Optional[Expression] = None
    computed: bool = False
    shorthand: bool = False
    method: bool = False


@dataclass
class SpreadElement(Node):
    argument: Optional[Expression] = None


@dataclass
class ObjectExpression(Expression):
    properties: List[Union[Property, SpreadElement]] = field(default_factory=list)


@dataclass
class MemberExpression(Expression):
    object: Optional[Expression] = None
    property: str = ""
    computed: bool = False


@dataclass
class CallExpression(Expression):
    callee: Optional[Expression] = None
    arguments: List[Expression] = field(default_factory=list)


@dataclass
class AssignmentExpression(Expression):
    target: Optional[Expression] = None
    value: Optional[Expression] = None


@dataclass
class TypeCastExpression(Expression):
    """A Flow cast: ``(value: Type)``."""

    expression: Optional[Expression] = None
    type_annotation: Optional[TypeAnnotation] = None


@dataclass
class Param(Node):
    """A function parameter. ``name`` is None for destructuring patterns."""

    name: Optional[str] = None
    type_annotation: Optional[TypeAnnotation] = None
    optional: bool = False
    rest: bool = False


@dataclass
class FunctionExpression(Expression):
    """A function or arrow function expression."""

    name: Optional[str] = None
    params: List[Param] = field(default_factory=list)
    return_type: Optional[TypeAnnotation] = None
    arrow: bool = False
    is_async: bool = False


@dataclass
class OpaqueExpression(Expression):
    """Any expression the pipeline does not inspect, kept as raw text."""


# ---------------------------------------------------------------------------
# Statements and declarations
# ---------------------------------------------------------------------------

@dataclass
class Statement(Node):
    """Base class for top-level statements."""


@dataclass
class ImportSpecifier(Node):
    """One binding of an import declaration.

    ``kind`` is ``default``, ``named`` or ``namespace``. ``imported`` is the
    name exported by the other module (``default`` or ``*`` for the first two
    kinds), ``local`` the name bound in this module.
    """

    kind: str = "named"
    imported: str = ""
    local: str = ""


@dataclass
class ImportDeclaration(Statement):
    source: str = ""
    specifiers: List[ImportSpecifier] = field(default_factory=list)
    import_kind: str = "value"


@dataclass
class ExportSpecifier(Node):
    local: str = ""
    exported: str = ""


@dataclass
class ExportNamedDeclaration(Statement):
    declaration: Optional[Statement] = None
    specifiers: List[ExportSpecifier] = field(default_factory=list)
    source: Optional[str] = None
    export_kind: str = "value"


@dataclass
class ExportAllDeclaration(Statement):
    source: str = ""
    exported: Optional[str] = None


@dataclass
class ExportDefaultDeclaration(Statement):
    declaration: Optional[Node] = None


@dataclass
class VariableDeclarator(Node):
    name: Optional[str] = None
    init: Optional[Expression] = None
    type_annotation: Optional[TypeAnnotation] = None


@dataclass
class VariableDeclaration(Statement):
    kind: str = "const"
    declarations: List[VariableDeclarator] = field(default_factory=list)


@dataclass
class TypeAlias(Statement):
    name: str = ""
    right: Optional[TypeAnnotation] = None
    opaque: bool = False
    type_parameters: List[str] = field(default_factory=list)


@dataclass
class ClassProperty(Node):
    key: str = ""
    value: Optional[Expression] = None
    type_annotation: Optional[TypeAnnotation] = None
    static: bool = False


@dataclass
class ClassDeclaration(Statement):
    """A class declaration, also used for class expressions."""

    name: Optional[str] = None
    superclass: Optional[Expression] = None
    super_type_parameters: List[TypeAnnotation] = field(default_factory=list)
    body: List[ClassProperty] = field(default_factory=list)


@dataclass
class FunctionDeclaration(Statement):
    name: Optional[str] = None
    params: List[Param] = field(default_factory=list)
    return_type: Optional[TypeAnnotation] = None
    is_async: bool = False


@dataclass
class ExpressionStatement(Statement):
    expression: Optional[Expression] = None


@dataclass
class Program(Node):
    """Root node of a parsed file."""

    body: List[Statement] = field(default_factory=list)
    source: str = field(default="", repr=False)
    path: Optional[str] = None
