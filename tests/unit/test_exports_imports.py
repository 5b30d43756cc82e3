"""
Unit tests for export set and import map extraction.
"""
from propdoc.extractors import DeclarationExtractor, ExportExtractor, ImportExtractor
from propdoc.parser import parse


class TestExportExtractor:
    """Test export set extraction."""

    def setup_method(self):
        self.extractor = ExportExtractor()

    def test_named_exports(self):
        """Test exported declarations and specifier lists."""
        code = """
export const a = 1;
export type Props = {};
export function helper() {}
const b = 2, c = 3;
export { b, c as renamed };
"""
        exports = self.extractor.extract(parse(code, "named.js"))

        assert set(exports.bindings) == {"a", "Props", "helper", "b", "renamed"}
        assert exports.bindings["renamed"] == "c"
        assert "c" not in exports
        assert exports.default_name is None

    def test_default_identifier_export(self):
        """Test that ``export default name`` records the default name."""
        exports = self.extractor.extract(parse(
            "const iconNames = ['a'];\nexport default iconNames;", "icons.js"
        ))

        assert exports.default_name == "iconNames"
        assert "iconNames" in exports

    def test_default_class_export_binds_nothing(self):
        """Test that only identifier default exports are captured."""
        exports = self.extractor.extract(parse(
            "export default class Foo extends Component {}", "foo.js"
        ))

        assert len(exports) == 0
        assert exports.default_name is None

    def test_reexports(self):
        """Test ``export ... from`` and ``export * from``."""
        code = """
export { Button, default as Link } from './Button';
export * from './all';
export * as icons from './icons';
"""
        exports = self.extractor.extract(parse(code, "index.js"))

        assert len(exports) == 0
        assert [(r.source, r.imported, r.exported) for r in exports.reexports] == [
            ("./Button", "Button", "Button"),
            ("./Button", "default", "Link"),
            ("./all", "*", None),
            ("./icons", "*", "icons"),
        ]

    def test_strict_mode_excludes_unexported(self):
        """Test that non-exported declarations stay private."""
        code = "export const a = 1;\nconst hidden = 2;"
        program = parse(code, "strict.js")
        declarations = DeclarationExtractor().extract(program)

        exports = self.extractor.extract(program, declarations)
        assert set(exports.bindings) == {"a"}

    def test_conservative_mode(self):
        """Test that conservative mode treats every declared name as exported."""
        code = "export const a = 1;\nconst hidden = 2;"
        program = parse(code, "loose.js")
        declarations = DeclarationExtractor().extract(program)

        exports = ExportExtractor(conservative=True).extract(program, declarations)
        assert set(exports.bindings) == {"a", "hidden"}

    def test_conservative_mode_needs_named_export(self):
        """Test that a file without named exports exposes nothing extra."""
        code = "const hidden = 2;"
        program = parse(code, "none.js")
        declarations = DeclarationExtractor().extract(program)

        exports = ExportExtractor(conservative=True).extract(program, declarations)
        assert len(exports) == 0


class TestImportExtractor:
    """Test import map extraction."""

    def setup_method(self):
        self.extractor = ImportExtractor()

    def test_bindings_per_source(self):
        """Test that every binding is recorded under its module specifier."""
        code = """
import React, { Component } from 'react';
import type { Props as BaseProps } from './types';
import * as icons from './icons';
import './styles.css';
"""
        imports = self.extractor.extract(parse(code, "comp.js"))

        assert list(imports) == ["react", "./types", "./icons", "./styles.css"]
        assert [binding.local for binding in imports.bindings("react")] == ["React", "Component"]

        binding = imports.bindings("./types")[0]
        assert binding.local == "BaseProps"
        assert binding.imported == "Props"
        assert binding.import_kind == "type"
        assert imports.bindings("./icons")[0].kind == "namespace"
        assert imports.bindings("./styles.css") == []

    def test_repeated_source_accumulates(self):
        """Test two import declarations from the same module."""
        code = "import { a } from './x';\nimport { b } from './x';"
        imports = self.extractor.extract(parse(code, "twice.js"))

        assert len(imports) == 1
        assert [binding.local for binding in imports.bindings("./x")] == ["a", "b"]
