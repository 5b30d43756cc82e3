"""Top-level declaration extraction."""

import logging
from typing import Optional

from propdoc.parser.nodes import (
    ArrayExpression,
    ExportNamedDeclaration,
    Identifier,
    Literal,
    ObjectExpression,
    Program,
    TypeAlias,
    TypeCastExpression,
    VariableDeclaration,
    VariableDeclarator,
)
from propdoc.resolution.symbol_table import (
    AliasDeclaration,
    Declaration,
    DeclarationTable,
    ListDeclaration,
    LiteralDeclaration,
    ObjectDeclaration,
    TypeAliasDeclaration,
)
from .base import BaseExtractor

logger = logging.getLogger(__name__)


class DeclarationExtractor(BaseExtractor):
    """Builds the declaration table of a file."""

    def extract(self, program: Program) -> DeclarationTable:
        """Collect top-level variable declarations and type aliases.

        Declarations under ``export`` are included. Initializers other than
        identifiers, literals, arrays and objects are skipped.
        """
        table = DeclarationTable()

        for statement in program.body:
            if isinstance(statement, ExportNamedDeclaration):
                statement = statement.declaration

            if isinstance(statement, VariableDeclaration):
                for declarator in statement.declarations:
                    declaration = self._classify(declarator)
                    if declaration is not None:
                        table.add(declaration)
            elif isinstance(statement, TypeAlias) and statement.right is not None:
                table.add(TypeAliasDeclaration(
                    name=statement.name,
                    location=statement.loc,
                    node=statement,
                    right=statement.right,
                    type_parameters=list(statement.type_parameters)
                ))

        logger.debug("Extracted %d declared names from %s", len(table), program.path)
        return table

    def _classify(self, declarator: VariableDeclarator) -> Optional[Declaration]:
        if declarator.name is None or declarator.init is None:
            return None

        init = declarator.init
        while isinstance(init, TypeCastExpression):
            init = init.expression

        name = declarator.name
        if isinstance(init, Identifier):
            return AliasDeclaration(name=name, location=declarator.loc, node=init, alias_name=init.name)
        if isinstance(init, Literal):
            return LiteralDeclaration(name=name, location=declarator.loc, node=init, value=init.value)
        if isinstance(init, ArrayExpression):
            return ListDeclaration(name=name, location=declarator.loc, node=init, elements=list(init.elements))
        if isinstance(init, ObjectExpression):
            return ObjectDeclaration(name=name, location=init.loc, node=init, value=init)
        return None
