"""Component-level handlers: display name and description."""

from propdoc.documentation import Documentation
from .base import ComponentDefinition, HandlerContext
from .docblock import get_docblock


def display_name_handler(
    documentation: Documentation,
    component: ComponentDefinition,
    context: HandlerContext
) -> None:
    """Set the display name from an explicit ``displayName`` or the declared name."""
    name = component.display_name or component.name
    if name:
        documentation.display_name = name


def component_docblock_handler(
    documentation: Documentation,
    component: ComponentDefinition,
    context: HandlerContext
) -> None:
    """Set the component description from the docblock above its declaration."""
    if component.node is None:
        return
    documentation.description = get_docblock(component.node.leading_comments) or ""
