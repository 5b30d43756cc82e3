"""Flow props handler.

Walks the props type of a component and records one prop descriptor per
field. Spreads are flattened when they resolve to a structural type, in
the component's own file or in any file it imports, and recorded as
composes otherwise.
"""

import logging
from typing import Callable, List, Optional, Tuple

from propdoc.documentation import Documentation
from propdoc.errors import CyclicReferenceError, MaxDepthExceededError
from propdoc.parser.nodes import (
    GenericTypeAnnotation,
    IntersectionTypeAnnotation,
    ObjectTypeAnnotation,
    ObjectTypeMember,
    ObjectTypeProperty,
    ObjectTypeSpreadProperty,
    TypeAnnotation,
)
from propdoc.resolution.symbol_table import TypeAliasDeclaration
from .base import ComponentDefinition, HandlerContext
from .docblock import set_prop_description
from .flow_type import get_flow_type

logger = logging.getLogger(__name__)

STRUCTURAL_TYPES = (ObjectTypeAnnotation, IntersectionTypeAnnotation)


class FlowTypeWalker:
    """Walks object types into a Documentation.

    ``owner`` is always the file the node being walked was declared in, so
    names are looked up in the right scope after following an import.
    """

    def __init__(self, documentation: Documentation, context: HandlerContext) -> None:
        self.documentation = documentation
        self.context = context
        self.utility_types = set(context.config.handlers.utility_types)
        self.max_depth = context.config.resolution.max_depth
        # (file, alias name) pairs currently being expanded
        self._expanding: List[Tuple[str, str]] = []

    def walk_props(self, annotation: TypeAnnotation, owner: str) -> None:
        """Walk the top-level props annotation of a component."""
        annotation = self.unwrap_utility_types(annotation)
        if isinstance(annotation, STRUCTURAL_TYPES):
            self.apply_to_flow_type_properties(annotation, owner, self.set_prop_descriptor)
        elif isinstance(annotation, GenericTypeAnnotation):
            self.spread_named(annotation.name, owner)

    def set_prop_descriptor(self, member: ObjectTypeMember, owner: str) -> None:
        if isinstance(member, ObjectTypeSpreadProperty):
            self.spread(member.argument, owner)
        elif isinstance(member, ObjectTypeProperty):
            descriptor = self.documentation.get_prop_descriptor(member.key)
            descriptor.flow_type = get_flow_type(member.value)
            descriptor.required = not member.optional
            set_prop_description(self.documentation, member.key, member)
        # indexers and call properties are ignored

    def spread(self, argument: Optional[TypeAnnotation], owner: str) -> None:
        argument = self.unwrap_utility_types(argument)
        if isinstance(argument, STRUCTURAL_TYPES):
            self.apply_to_flow_type_properties(argument, owner, self.set_prop_descriptor)
        elif isinstance(argument, GenericTypeAnnotation):
            self.spread_named(argument.name, owner)
        else:
            logger.debug("Ignoring spread of unsupported type in %s", owner)

    def spread_named(self, name: str, owner: str) -> None:
        """Flatten a named spread, or record it as composes if it cannot be expanded."""
        resolved = self.resolve(name, owner)
        if resolved is None:
            self.documentation.add_composes(name)
            return

        right, alias_owner = resolved
        key = (alias_owner, name)
        if key in self._expanding:
            chain = [alias for _, alias in self._expanding] + [name]
            raise CyclicReferenceError(chain[chain.index(name):])
        if len(self._expanding) >= self.max_depth:
            raise MaxDepthExceededError(self.max_depth, f"{alias_owner}:{name}")

        self._expanding.append(key)
        try:
            self.apply_to_flow_type_properties(right, alias_owner, self.set_prop_descriptor)
        finally:
            self._expanding.pop()

    def resolve(self, name: str, owner: str) -> Optional[Tuple[TypeAnnotation, str]]:
        """Follow a type alias chain to a structural type.

        Returns:
            The structural type and the file it was declared in, or None
            when the name does not lead to one
        """
        seen: List[str] = []
        while True:
            declaration = self._lookup_type_alias(name, owner)
            if declaration is None:
                logger.debug("Could not resolve type %s in %s", name, owner)
                return None

            owner = declaration.source_file or owner
            right = self.unwrap_utility_types(declaration.right)
            if isinstance(right, STRUCTURAL_TYPES):
                return right, owner
            if not isinstance(right, GenericTypeAnnotation) or right.type_parameters:
                return None

            seen.append(name)
            if right.name in seen:
                raise CyclicReferenceError(seen + [right.name])
            if len(seen) > self.max_depth:
                raise MaxDepthExceededError(self.max_depth, f"{owner}:{name}")
            name = right.name

    def _lookup_type_alias(self, name: str, owner: str) -> Optional[TypeAliasDeclaration]:
        for declaration in reversed(self.context.lookup(name, owner)):
            if isinstance(declaration, TypeAliasDeclaration):
                return declaration
        return None

    def unwrap_utility_types(self, node: Optional[TypeAnnotation]) -> Optional[TypeAnnotation]:
        """Strip wrappers such as ``$ReadOnly<...>`` down to the wrapped type."""
        while isinstance(node, GenericTypeAnnotation) and node.name in self.utility_types \
                and node.type_parameters:
            node = node.type_parameters[0]
        return node

    def apply_to_flow_type_properties(
        self,
        node: TypeAnnotation,
        owner: str,
        callback: Callable[[ObjectTypeMember, str], None]
    ) -> None:
        """Call callback for every member of an object type or intersection."""
        if isinstance(node, ObjectTypeAnnotation):
            for member in node.properties:
                callback(member, owner)
        elif isinstance(node, IntersectionTypeAnnotation):
            for part in node.types:
                part = self.unwrap_utility_types(part)
                if isinstance(part, STRUCTURAL_TYPES):
                    self.apply_to_flow_type_properties(part, owner, callback)
                elif isinstance(part, GenericTypeAnnotation):
                    self.spread_named(part.name, owner)


def set_prop_descriptor(
    documentation: Documentation,
    member: ObjectTypeMember,
    context: HandlerContext,
    owner: str
) -> None:
    """Record one object type member into documentation."""
    FlowTypeWalker(documentation, context).set_prop_descriptor(member, owner)


def flow_type_handler(
    documentation: Documentation,
    component: ComponentDefinition,
    context: HandlerContext
) -> None:
    """Extract the Flow props type of a component, including docblocks inlined in the type."""
    if component.props_annotation is None:
        return
    walker = FlowTypeWalker(documentation, context)
    walker.walk_props(component.props_annotation, component.source_file)
