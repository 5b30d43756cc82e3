"""Documentation module initialization."""

from .models import Documentation, PropDescriptor

__all__ = ["Documentation", "PropDescriptor"]
