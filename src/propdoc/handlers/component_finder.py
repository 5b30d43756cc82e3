"""Discovery of component definitions in a parsed file."""

import logging
from typing import Dict, Iterator, List, Optional

from propdoc.config import HandlerConfig
from propdoc.parser.nodes import (
    AssignmentExpression,
    CallExpression,
    ClassDeclaration,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    FunctionExpression,
    GenericTypeAnnotation,
    Identifier,
    Literal,
    MemberExpression,
    Node,
    Program,
    TypeAnnotation,
    TypeCastExpression,
    VariableDeclaration,
)
from .base import ComponentDefinition

logger = logging.getLogger(__name__)

COMPONENT_WRAPPERS = {"memo", "forwardRef", "React.memo", "React.forwardRef"}


def expression_name(expression: Optional[Expression]) -> Optional[str]:
    """Get the dotted name of an identifier or member chain, e.g. ``React.Component``."""
    if isinstance(expression, Identifier):
        return expression.name
    if isinstance(expression, MemberExpression) and not expression.computed:
        base = expression_name(expression.object)
        return f"{base}.{expression.property}" if base else None
    return None


class ComponentFinder:
    """Finds class and function components declared at module level."""

    def __init__(self, config: Optional[HandlerConfig] = None) -> None:
        self.config = config or HandlerConfig()

    def find(self, program: Program) -> List[ComponentDefinition]:
        """Find every component in a file.

        Function components are kept only when they carry a props
        annotation, get propTypes assigned, or are the default export.
        """
        found: List[ComponentDefinition] = []
        by_name: Dict[str, ComponentDefinition] = {}
        source_file = program.path or ""

        for statement in program.body:
            target: Optional[Node] = statement
            exported = default = False
            if isinstance(statement, ExportNamedDeclaration):
                target, exported = statement.declaration, True
            elif isinstance(statement, ExportDefaultDeclaration):
                target, exported, default = statement.declaration, True, True

            for component in self._components_in(target, source_file, default):
                component.exported = exported
                component.default = default
                found.append(component)
                if component.name:
                    by_name[component.name] = component

            if default and isinstance(target, Identifier) and target.name in by_name:
                by_name[target.name].exported = True
                by_name[target.name].default = True

            if isinstance(statement, ExpressionStatement):
                self._apply_assignment(statement.expression, by_name)

        components = [
            component for component in found
            if isinstance(component.node, ClassDeclaration)
            or component.props_annotation is not None
            or component.prop_types is not None
            or component.default
        ]
        logger.debug("Found %d components in %s", len(components), source_file)
        return components

    def _components_in(
        self,
        node: Optional[Node],
        source_file: str,
        default: bool
    ) -> Iterator[ComponentDefinition]:
        if isinstance(node, ClassDeclaration):
            if self._is_component_class(node):
                yield self._from_class(node, source_file)

        elif isinstance(node, FunctionDeclaration):
            if default or self._is_component_name(node.name):
                yield ComponentDefinition(
                    name=node.name,
                    node=node,
                    source_file=source_file,
                    props_annotation=node.params[0].type_annotation if node.params else None
                )

        elif isinstance(node, VariableDeclaration):
            for declarator in node.declarations:
                if not self._is_component_name(declarator.name):
                    continue
                function = self._unwrap_component(declarator.init)
                if isinstance(function, ClassDeclaration) and self._is_component_class(function):
                    component = self._from_class(function, source_file)
                    component.name = declarator.name
                    component.node = node
                    yield component
                elif isinstance(function, FunctionExpression):
                    annotation = self._first_param_annotation(function)
                    if annotation is None:
                        annotation = self._props_from_component_type(declarator.type_annotation)
                    yield ComponentDefinition(
                        name=declarator.name,
                        node=node,
                        source_file=source_file,
                        props_annotation=annotation
                    )

        elif isinstance(node, (FunctionExpression, CallExpression)) and default:
            function = self._unwrap_component(node)
            if isinstance(function, FunctionExpression):
                yield ComponentDefinition(
                    name=function.name,
                    node=node,
                    source_file=source_file,
                    props_annotation=self._first_param_annotation(function)
                )

    def _is_component_name(self, name: Optional[str]) -> bool:
        return bool(name) and name[0].isupper()

    def _is_component_class(self, node: ClassDeclaration) -> bool:
        return expression_name(node.superclass) in self.config.component_bases

    def _unwrap_component(self, expression: Optional[Expression]) -> Optional[Node]:
        while True:
            if isinstance(expression, TypeCastExpression):
                expression = expression.expression
            elif isinstance(expression, CallExpression) and expression.arguments \
                    and expression_name(expression.callee) in COMPONENT_WRAPPERS:
                expression = expression.arguments[0]
            else:
                return expression

    def _first_param_annotation(self, function: FunctionExpression) -> Optional[TypeAnnotation]:
        if function.params:
            return function.params[0].type_annotation
        return None

    def _props_from_component_type(self, annotation: Optional[TypeAnnotation]) -> Optional[TypeAnnotation]:
        """``const X: React.ComponentType<Props> = ...`` carries props as the first type argument."""
        if isinstance(annotation, GenericTypeAnnotation) and annotation.type_parameters:
            return annotation.type_parameters[0]
        return None

    def _from_class(self, node: ClassDeclaration, source_file: str) -> ComponentDefinition:
        component = ComponentDefinition(name=node.name, node=node, source_file=source_file)

        for member in node.body:
            if member.key == "props" and not member.static and member.type_annotation is not None:
                component.props_annotation = member.type_annotation
            elif member.key == "propTypes" and member.static:
                component.prop_types = member.value
            elif member.key == "displayName" and member.static and isinstance(member.value, Literal):
                component.display_name = str(member.value.value)

        if component.props_annotation is None and node.super_type_parameters:
            component.props_annotation = node.super_type_parameters[0]

        return component

    def _apply_assignment(
        self,
        expression: Optional[Expression],
        by_name: Dict[str, ComponentDefinition]
    ) -> None:
        """Pick up ``X.propTypes = ...`` and ``X.displayName = ...``."""
        if not isinstance(expression, AssignmentExpression):
            return
        target = expression.target
        if not isinstance(target, MemberExpression) or not isinstance(target.object, Identifier):
            return
        component = by_name.get(target.object.name)
        if component is None:
            return

        if target.property == "propTypes":
            component.prop_types = expression.value
        elif target.property == "displayName" and isinstance(expression.value, Literal):
            component.display_name = str(expression.value.value)
