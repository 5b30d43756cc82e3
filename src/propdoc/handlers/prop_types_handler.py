"""PropTypes handler.

Reads ``propTypes`` objects, resolving identifiers that point to objects or
lists declared locally or imported from other files.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from propdoc.documentation import Documentation
from propdoc.parser.nodes import (
    ArrayExpression,
    CallExpression,
    Expression,
    Identifier,
    Literal,
    MemberExpression,
    ObjectExpression,
    Property,
    SpreadElement,
)
from propdoc.resolution.symbol_table import (
    AliasDeclaration,
    ListDeclaration,
    ObjectDeclaration,
)
from .base import ComponentDefinition, HandlerContext
from .component_finder import expression_name
from .docblock import set_prop_description

logger = logging.getLogger(__name__)

SIMPLE_PROP_TYPES = {
    "array", "bool", "func", "number", "object", "string", "any", "element",
    "node", "symbol", "elementType", "bigint",
}

PROP_TYPES_NAMESPACES = {"PropTypes", "React.PropTypes"}


class PropTypesReader:
    """Turns PropTypes expressions into type descriptors."""

    def __init__(self, context: HandlerContext) -> None:
        self.context = context
        self.max_depth = context.config.resolution.max_depth

    def read(self, documentation: Documentation, expression: Optional[Expression], owner: str) -> None:
        resolved = self.resolve_object(expression, owner)
        if resolved is None:
            return
        self._read_object(documentation, resolved[0], resolved[1], depth=0)

    def _read_object(self, documentation: Documentation, node: ObjectExpression, owner: str, depth: int) -> None:
        for prop in node.properties:
            if isinstance(prop, SpreadElement):
                self._read_spread(documentation, prop.argument, owner, depth)
            elif isinstance(prop, Property) and not prop.method:
                descriptor = documentation.get_prop_descriptor(prop.key)
                prop_type, required = self.get_prop_type(prop.value, owner)
                descriptor.type = prop_type
                descriptor.required = required
                set_prop_description(documentation, prop.key, prop)

    def _read_spread(self, documentation: Documentation, argument: Optional[Expression], owner: str, depth: int) -> None:
        if depth >= self.max_depth:
            logger.debug("Not following propTypes spread deeper than %d in %s", self.max_depth, owner)
            return
        resolved = self.resolve_object(argument, owner)
        if resolved is not None:
            self._read_object(documentation, resolved[0], resolved[1], depth + 1)
            return
        # ...Other.propTypes
        if isinstance(argument, MemberExpression) and argument.property == "propTypes":
            name = expression_name(argument.object)
            if name:
                documentation.add_composes(name)

    def resolve_object(self, expression: Optional[Expression], owner: str) -> Optional[Tuple[ObjectExpression, str]]:
        """Resolve an expression to an object literal and the file declaring it."""
        if isinstance(expression, ObjectExpression):
            return expression, owner
        name = expression_name(expression)
        if name is None:
            return None
        for _ in range(self.max_depth + 1):
            slot = self.context.lookup(name, owner)
            declaration = slot[-1] if slot else None
            if isinstance(declaration, ObjectDeclaration) and declaration.value is not None:
                return declaration.value, declaration.source_file or owner
            if isinstance(declaration, AliasDeclaration):
                owner = declaration.source_file or owner
                name = declaration.alias_name
                continue
            return None
        return None

    def resolve_list(self, expression: Optional[Expression], owner: str) -> Optional[List[Expression]]:
        """Resolve an expression to list elements.

        A name declared several times yields the elements of every
        declaration, in declaration order.
        """
        if isinstance(expression, ArrayExpression):
            return [element for element in expression.elements if element is not None]
        name = expression_name(expression)
        if name is None:
            return None

        elements: List[Expression] = []
        found = False
        for declaration in self.context.lookup(name, owner):
            if isinstance(declaration, ListDeclaration):
                found = True
                elements.extend(element for element in declaration.elements if element is not None)
        return elements if found else None

    def get_prop_type(self, expression: Optional[Expression], owner: str) -> Tuple[Dict[str, Any], bool]:
        """Describe a PropTypes expression.

        Returns:
            Tuple of (type descriptor, required)
        """
        required = False
        if isinstance(expression, MemberExpression) and expression.property == "isRequired":
            required = True
            expression = expression.object
        return self._describe(expression, owner), required

    def _describe(self, expression: Optional[Expression], owner: str) -> Dict[str, Any]:
        if expression is None:
            return {"name": "custom", "raw": ""}

        name = self._prop_type_name(expression)
        if name in SIMPLE_PROP_TYPES:
            return {"name": name}

        if isinstance(expression, CallExpression):
            function = self._prop_type_name(expression.callee)
            argument = expression.arguments[0] if expression.arguments else None

            if function == "oneOf":
                return self._enum(argument, owner)
            if function == "oneOfType":
                members = self.resolve_list(argument, owner)
                if members is None:
                    return {"name": "union", "computed": True, "value": argument.raw if argument else ""}
                return {"name": "union", "value": [self._describe(member, owner) for member in members]}
            if function in ("arrayOf", "objectOf"):
                return {"name": function, "value": self._describe(argument, owner)}
            if function == "instanceOf":
                return {"name": "instanceOf", "value": argument.raw if argument else ""}
            if function in ("shape", "exact"):
                return self._shape(function, argument, owner)

        return {"name": "custom", "raw": expression.raw}

    def _prop_type_name(self, expression: Optional[Expression]) -> Optional[str]:
        """``PropTypes.string`` and a bare imported ``string`` both give ``string``."""
        if isinstance(expression, Identifier):
            return expression.name
        if isinstance(expression, MemberExpression) and expression_name(expression.object) in PROP_TYPES_NAMESPACES:
            return expression.property
        return None

    def _enum(self, argument: Optional[Expression], owner: str) -> Dict[str, Any]:
        elements = self.resolve_list(argument, owner)
        if elements is None:
            return {"name": "enum", "computed": True, "value": argument.raw if argument else ""}
        return {
            "name": "enum",
            "value": [
                {"value": element.raw, "computed": not isinstance(element, Literal)}
                for element in elements
            ]
        }

    def _shape(self, function: str, argument: Optional[Expression], owner: str) -> Dict[str, Any]:
        resolved = self.resolve_object(argument, owner)
        if resolved is None:
            return {"name": function, "computed": True, "value": argument.raw if argument else ""}

        node, shape_owner = resolved
        value: Dict[str, Any] = {}
        for prop in node.properties:
            if isinstance(prop, Property) and not prop.method:
                prop_type, required = self.get_prop_type(prop.value, shape_owner)
                prop_type["required"] = required
                value[prop.key] = prop_type
        return {"name": function, "value": value}


def prop_types_handler(
    documentation: Documentation,
    component: ComponentDefinition,
    context: HandlerContext
) -> None:
    """Extract prop types declared with ``propTypes``."""
    if component.prop_types is None:
        return
    PropTypesReader(context).read(documentation, component.prop_types, component.source_file)
