"""Documentation pipeline: parse a component file and run the handlers."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from propdoc.config import PropDocConfig
from propdoc.documentation import Documentation
from propdoc.errors import ComponentNotFoundError, SourceNotFoundError
from propdoc.handlers import DEFAULT_HANDLERS, ComponentFinder, Handler, HandlerContext
from propdoc.resolution.import_graph import ImportGraph
from propdoc.resolution.resolver import CrossFileResolver
from propdoc.resolution.source_loader import load_source

logger = logging.getLogger(__name__)


@dataclass
class ParseResult:
    """Documentation of every component in one root file."""

    path: str
    documentations: List[Documentation] = field(default_factory=list)
    import_graph: ImportGraph = field(default_factory=ImportGraph, repr=False)

    @property
    def dependencies(self) -> List[str]:
        """Files the root file pulled symbols from, directly or transitively."""
        return self.import_graph.transitive_dependencies(self.path)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "components": [documentation.to_dict() for documentation in self.documentations],
            "dependencies": self.dependencies,
        }


class DocumentationParser:
    """Documents the components of a file.

    Every call to ``parse`` or ``parse_file`` is one resolution request with
    its own resolver, so nothing is shared between files.
    """

    def __init__(
        self,
        config: Optional[PropDocConfig] = None,
        handlers: Optional[Sequence[Handler]] = None
    ) -> None:
        self.config = config or PropDocConfig()
        self.handlers = list(handlers) if handlers is not None else list(DEFAULT_HANDLERS)
        self.finder = ComponentFinder(self.config.handlers)

    def parse_file(self, path: Union[str, Path]) -> ParseResult:
        """Parse and document a component file on disk."""
        source = load_source(path)
        if source is None:
            raise SourceNotFoundError(path)
        return self.parse(source, path)

    def parse(self, source: str, path: Union[str, Path] = "<source>") -> ParseResult:
        """Parse and document component source.

        Imports are resolved relative to path.

        Raises:
            ParseError: if the source cannot be parsed
            ComponentNotFoundError: if the source declares no component
        """
        resolver = CrossFileResolver(self.config.resolution)
        record = resolver.add_root(path, source)

        components = self.finder.find(record.program)
        if not components:
            raise ComponentNotFoundError(path)

        context = HandlerContext(resolver=resolver, config=self.config)
        documentations = []
        for component in components:
            documentation = Documentation(source_file=record.path)
            for handler in self.handlers:
                handler(documentation, component, context)
            documentations.append(documentation)
            logger.debug(
                "Documented %s in %s: %d props",
                component.name or "<anonymous>", record.path, len(documentation.props)
            )

        stats = resolver.graph.get_stats()
        logger.debug("Visited %d files and %d imports for %s", stats["files"], stats["imports"], record.path)

        return ParseResult(
            path=record.path,
            documentations=documentations,
            import_graph=resolver.graph
        )
