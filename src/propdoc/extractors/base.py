"""Base extractor interface."""

from abc import ABC, abstractmethod
from typing import Any

from propdoc.parser.nodes import Program


class BaseExtractor(ABC):
    """Abstract base class for per-file extractors."""

    @abstractmethod
    def extract(self, program: Program) -> Any:
        """Extract module-level information from a parsed file.

        Args:
            program: Parsed source file

        Returns:
            The extracted structure
        """
        pass
