"""Documentation models for components and their props."""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Set


@dataclass
class PropDescriptor:
    """Everything recorded about a single prop."""

    flow_type: Optional[Dict[str, Any]] = None
    type: Optional[Dict[str, Any]] = None
    required: Optional[bool] = None
    description: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the react-docgen prop shape, leaving out unset keys."""
        result: Dict[str, Any] = {}
        if self.flow_type is not None:
            result["flowType"] = self.flow_type
        if self.type is not None:
            result["type"] = self.type
        if self.required is not None:
            result["required"] = self.required
        if self.description is not None:
            result["description"] = self.description
        return result


class Documentation:
    """Accumulates the documentation of one component."""

    def __init__(self, source_file: Optional[str] = None) -> None:
        self.source_file = source_file
        self.display_name: Optional[str] = None
        self.description: str = ""
        self.props: Dict[str, PropDescriptor] = {}
        self.composes: Set[str] = set()

    def get_prop_descriptor(self, name: str) -> PropDescriptor:
        """Get the descriptor for a prop, creating it on first use."""
        descriptor = self.props.get(name)
        if descriptor is None:
            descriptor = PropDescriptor()
            self.props[name] = descriptor
        return descriptor

    def add_composes(self, name: str) -> None:
        """Record a type whose props are included without being expanded."""
        self.composes.add(name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result: Dict[str, Any] = {"description": self.description}
        if self.display_name:
            result["displayName"] = self.display_name
        if self.props:
            result["props"] = {name: prop.to_dict() for name, prop in self.props.items()}
        if self.composes:
            result["composes"] = sorted(self.composes)
        return result
