"""Extractors module initialization."""

from .base import BaseExtractor
from .declarations import DeclarationExtractor
from .exports import ExportExtractor, ExportSet, ReExport
from .imports import ImportExtractor, ImportMap, ImportBinding

__all__ = [
    "BaseExtractor",
    "DeclarationExtractor",
    "ExportExtractor",
    "ExportSet",
    "ReExport",
    "ImportExtractor",
    "ImportMap",
    "ImportBinding"
]
