"""Shared handler types."""

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from propdoc.config import PropDocConfig
from propdoc.documentation import Documentation
from propdoc.parser.nodes import Expression, Node, SourceLocation, TypeAnnotation
from propdoc.resolution.resolver import CrossFileResolver
from propdoc.resolution.symbol_table import Declaration


@dataclass
class ComponentDefinition:
    """A component found in a source file."""

    name: Optional[str] = None
    node: Optional[Node] = field(default=None, repr=False)
    source_file: str = ""
    props_annotation: Optional[TypeAnnotation] = field(default=None, repr=False)
    prop_types: Optional[Expression] = field(default=None, repr=False)
    display_name: Optional[str] = None
    exported: bool = False
    default: bool = False

    @property
    def location(self) -> Optional[SourceLocation]:
        return self.node.loc if self.node else None


@dataclass
class HandlerContext:
    """What handlers need besides the documentation and the component."""

    resolver: CrossFileResolver
    config: PropDocConfig = field(default_factory=PropDocConfig)

    def lookup(self, name: str, owner: str) -> List[Declaration]:
        """Look up a name in the scope of the file that owns a node."""
        return self.resolver.lookup(name, owner)


Handler = Callable[[Documentation, ComponentDefinition, HandlerContext], None]
