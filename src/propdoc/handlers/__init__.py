"""Handlers module initialization."""

from .base import ComponentDefinition, HandlerContext, Handler
from .component_finder import ComponentFinder
from .component_handlers import display_name_handler, component_docblock_handler
from .docblock import get_docblock, parse_docblock, set_prop_description
from .flow_type import get_flow_type
from .flow_type_handler import FlowTypeWalker, flow_type_handler, set_prop_descriptor
from .prop_types_handler import PropTypesReader, prop_types_handler

DEFAULT_HANDLERS = [
    display_name_handler,
    component_docblock_handler,
    prop_types_handler,
    flow_type_handler,
]

__all__ = [
    "ComponentDefinition",
    "HandlerContext",
    "Handler",
    "ComponentFinder",
    "display_name_handler",
    "component_docblock_handler",
    "get_docblock",
    "parse_docblock",
    "set_prop_description",
    "get_flow_type",
    "FlowTypeWalker",
    "flow_type_handler",
    "set_prop_descriptor",
    "PropTypesReader",
    "prop_types_handler",
    "DEFAULT_HANDLERS"
]
