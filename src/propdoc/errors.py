"""Exception hierarchy for prop documentation extraction."""

from pathlib import Path
from typing import List, Optional, Sequence, Union


class PropDocError(Exception):
    """Base class for all propdoc errors."""


class ParseError(PropDocError):
    """Raised when a source file cannot be tokenized or parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line: int = 0,
        column: int = 0
    ) -> None:
        self.message = message
        self.path = path
        self.line = line
        self.column = column
        location = f"{path or '<source>'}:{line}:{column}"
        super().__init__(f"{location}: {message}")


class CyclicReferenceError(PropDocError):
    """Raised when an import chain or a type alias chain loops back on itself."""

    def __init__(self, chain: Sequence[Union[str, Path]]) -> None:
        self.chain: List[str] = [str(link) for link in chain]
        super().__init__("Cyclic reference: " + " -> ".join(self.chain))


class MaxDepthExceededError(PropDocError):
    """Raised when resolution recurses deeper than the configured limit."""

    def __init__(self, max_depth: int, where: str) -> None:
        self.max_depth = max_depth
        super().__init__(f"Resolution depth exceeded {max_depth} at {where}")


class SourceNotFoundError(PropDocError):
    """Raised when the root component file does not exist."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = str(path)
        super().__init__(f"Source file not found: {path}")


class ComponentNotFoundError(PropDocError):
    """Raised when no component definition is found in a file."""

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = str(path)
        super().__init__(f"No suitable component definition found in {path}")
