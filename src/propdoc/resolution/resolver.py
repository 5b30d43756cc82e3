"""Cross-file symbol resolution."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Union

from propdoc.config import ResolutionConfig
from propdoc.errors import CyclicReferenceError, MaxDepthExceededError, ParseError, SourceNotFoundError
from propdoc.extractors import DeclarationExtractor, ExportExtractor, ExportSet, ImportExtractor, ImportMap
from propdoc.extractors.imports import ImportBinding
from propdoc.parser import parse
from propdoc.parser.nodes import Program
from .import_graph import ImportGraph
from .path_resolver import PathResolver
from .source_loader import load_source
from .symbol_table import Declaration, DeclarationTable

logger = logging.getLogger(__name__)


@dataclass
class FileRecord:
    """Everything known about one visited file."""

    path: str
    program: Program
    declarations: DeclarationTable
    exports: ExportSet
    imports: ImportMap
    # Own declarations merged with imported symbols
    scope: Optional[DeclarationTable] = None
    # What the file exposes to an importer
    resolved: Optional[DeclarationTable] = None


class CrossFileResolver:
    """Resolves the symbols a file can see and the symbols it exposes.

    One resolver serves one resolution request. Parsed files and computed
    results are cached by absolute path for the lifetime of the instance.
    """

    def __init__(
        self,
        config: Optional[ResolutionConfig] = None,
        path_resolver: Optional[PathResolver] = None,
        import_graph: Optional[ImportGraph] = None
    ) -> None:
        self.config = config or ResolutionConfig()
        self.path_resolver = path_resolver or PathResolver(self.config.extensions)
        self.graph = import_graph or ImportGraph()

        self.declaration_extractor = DeclarationExtractor()
        self.export_extractor = ExportExtractor(conservative=self.config.conservative_exports)
        self.import_extractor = ImportExtractor()

        self._records: Dict[str, FileRecord] = {}
        self._failed: Set[str] = set()
        self._in_progress: List[str] = []

    @staticmethod
    def _key(path: Union[str, Path]) -> str:
        return os.path.abspath(str(path))

    def add_root(
        self,
        path: Union[str, Path],
        source: Optional[str] = None,
        program: Optional[Program] = None
    ) -> FileRecord:
        """Register the root file of the request.

        Raises:
            SourceNotFoundError: if no source is given and the file is missing
            ParseError: if the root file cannot be parsed
        """
        key = self._key(path)
        if program is None:
            if source is None:
                source = load_source(key)
                if source is None:
                    raise SourceNotFoundError(key)
            program = parse(source, key)
        return self._register(key, program)

    def scope(self, path: Union[str, Path]) -> DeclarationTable:
        """Get every name visible in a file: own declarations plus imports."""
        return self._resolve(self._key(path)).scope

    def resolved_symbols(self, path: Union[str, Path]) -> DeclarationTable:
        """Get the symbols a file exposes to its importers."""
        return self._resolve(self._key(path)).resolved

    def lookup(self, name: str, path: Union[str, Path]) -> List[Declaration]:
        """Look up a name in the scope of a file."""
        return self.scope(path).get(name)

    def _register(self, key: str, program: Program) -> FileRecord:
        declarations = self.declaration_extractor.extract(program)
        record = FileRecord(
            path=key,
            program=program,
            declarations=declarations,
            exports=self.export_extractor.extract(program, declarations),
            imports=self.import_extractor.extract(program)
        )
        self._records[key] = record
        self.graph.add_file(key)
        return record

    def _resolve(self, key: str) -> FileRecord:
        record = self._records.get(key)
        if record is None:
            record = self.add_root(key)
        if record.resolved is not None:
            return record

        depth = len(self._in_progress)
        if depth > self.config.max_depth:
            raise MaxDepthExceededError(self.config.max_depth, key)

        self._in_progress.append(key)
        try:
            imported = DeclarationTable()
            for specifier in record.imports:
                dependency = self._load_dependency(record, specifier)
                if dependency is None:
                    continue
                dependency_symbols = self._resolve(dependency.path).resolved
                self._bind_imports(
                    imported,
                    record.imports.bindings(specifier),
                    dependency,
                    dependency_symbols
                )

            record.scope = record.declarations.merge(imported, self.config.merge_policy)
            record.resolved = self._exported_symbols(record)
        finally:
            self._in_progress.pop()

        logger.debug(
            "Resolved %s: %d names in scope, %d exposed",
            key, len(record.scope), len(record.resolved)
        )
        return record

    def _bind_imports(
        self,
        imported: DeclarationTable,
        bindings: List[ImportBinding],
        dependency: FileRecord,
        dependency_symbols: DeclarationTable
    ) -> None:
        for binding in bindings:
            if binding.kind == "namespace":
                for name in dependency_symbols:
                    imported.bind(f"{binding.local}.{name}", dependency_symbols.get(name))
                continue

            exported = binding.imported
            if binding.kind == "default":
                exported = dependency.exports.default_name or "default"

            if exported in dependency_symbols:
                imported.bind(binding.local, dependency_symbols.get(exported))
            else:
                logger.debug("%s does not expose %s", dependency.path, exported)

    def _exported_symbols(self, record: FileRecord) -> DeclarationTable:
        """Filter the scope down to exported names and add re-exports."""
        resolved = DeclarationTable()
        for exported, local in record.exports.bindings.items():
            if local in record.scope:
                resolved.bind(exported, record.scope.get(local))

        for reexport in record.exports.reexports:
            dependency = self._load_dependency(record, reexport.source)
            if dependency is None:
                continue
            symbols = self._resolve(dependency.path).resolved

            if reexport.imported != "*":
                imported = reexport.imported
                if imported == "default":
                    imported = dependency.exports.default_name or imported
                if imported in symbols:
                    resolved.bind(reexport.exported or reexport.imported, symbols.get(imported))
            elif reexport.exported:
                for name in symbols:
                    resolved.bind(f"{reexport.exported}.{name}", symbols.get(name))
            else:
                for name in symbols:
                    if name not in resolved and name != "default":
                        resolved.bind(name, symbols.get(name))

        return resolved

    def _load_dependency(self, record: FileRecord, specifier: str) -> Optional[FileRecord]:
        if not self.path_resolver.is_relative(specifier):
            logger.debug("Skipping package import '%s' in %s", specifier, record.path)
            return None

        key = self._key(self.path_resolver.resolve(record.path, specifier))
        if key in self._in_progress:
            self.graph.add_import(record.path, key, specifier)
            raise CyclicReferenceError(self.graph.cycle_through(record.path, key))

        existing = self._records.get(key)
        if existing is not None:
            self.graph.add_import(record.path, key, specifier)
            return existing
        if key in self._failed:
            return None

        source = load_source(key)
        if source is None:
            logger.debug("Unresolved import '%s' in %s", specifier, record.path)
            self._failed.add(key)
            return None

        try:
            program = parse(source, key)
        except ParseError as e:
            if self.config.strict_parse:
                raise
            logger.warning("Skipping import '%s' in %s: %s", specifier, record.path, e)
            self._failed.add(key)
            return None

        dependency = self._register(key, program)
        self.graph.add_import(record.path, key, specifier)
        return dependency
