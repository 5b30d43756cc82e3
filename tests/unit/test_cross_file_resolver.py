"""
Unit tests for cross-file symbol resolution.
Each test lays out a small module tree in a temporary directory.
"""
import pytest

from propdoc.config import ResolutionConfig
from propdoc.errors import CyclicReferenceError, MaxDepthExceededError, ParseError
from propdoc.parser import parse
from propdoc.resolution import resolver as resolver_module
from propdoc.resolution.resolver import CrossFileResolver
from propdoc.resolution.symbol_table import DeclarationTable, ListDeclaration, MergePolicy, TypeAliasDeclaration


def write_files(root, files):
    """Write a {relative path: content} mapping below root."""
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


class TestResolvedSymbols:
    """Test what a file exposes to its importers."""

    def setup_method(self):
        self.resolver = CrossFileResolver()

    def test_file_without_imports(self, tmp_path):
        """Test that exposed symbols are the declarations filtered by exports."""
        write_files(tmp_path, {
            "a.js": "export const x = 'x';\nconst hidden = 'h';\nexport type T = { a: string };\n",
        })
        path = tmp_path / "a.js"

        record = self.resolver.add_root(path)
        resolved = self.resolver.resolved_symbols(path)

        assert resolved == DeclarationTable({
            name: record.declarations.get(name) for name in record.declarations if name in record.exports
        })
        assert set(resolved.names()) == {"x", "T"}
        assert "hidden" not in resolved

    def test_named_import_is_visible(self, tmp_path):
        """Test that an imported name appears in the importer's scope."""
        write_files(tmp_path, {
            "a.js": "export type Props = { name: string };\ntype Secret = {};\n",
            "b.js": "import type { Props } from './a';\n",
        })
        path = tmp_path / "b.js"
        self.resolver.add_root(path)

        scope = self.resolver.scope(path)
        assert isinstance(scope.get("Props")[-1], TypeAliasDeclaration)
        assert scope.get("Props")[-1].source_file == str(tmp_path / "a.js")
        assert "Secret" not in scope

    def test_non_exported_names_never_leak(self, tmp_path):
        """Test that importing a private name binds nothing."""
        write_files(tmp_path, {
            "a.js": "const secret = ['x'];\nexport const visible = ['y'];\n",
            "b.js": "import { secret, visible } from './a';\n",
        })
        path = tmp_path / "b.js"
        self.resolver.add_root(path)

        assert self.resolver.lookup("secret", path) == []
        assert len(self.resolver.lookup("visible", path)) == 1

    def test_conservative_exports_expose_private_names(self, tmp_path):
        """Test that conservative exports make non-exported declarations importable."""
        write_files(tmp_path, {
            "a.js": "export const visible = ['v'];\nconst hidden = ['h'];\n",
            "b.js": "import { hidden, visible } from './a';\n",
        })
        path = tmp_path / "b.js"
        resolver = CrossFileResolver(ResolutionConfig(conservative_exports=True))
        resolver.add_root(path)

        hidden = resolver.lookup("hidden", path)
        assert len(hidden) == 1
        assert hidden[-1].values() == ["h"]
        assert len(resolver.lookup("visible", path)) == 1

    def test_renamed_import(self, tmp_path):
        """Test that an import alias binds the local name only."""
        write_files(tmp_path, {
            "a.js": "export const sizes = ['s', 'm'];\n",
            "b.js": "import { sizes as allSizes } from './a';\n",
        })
        path = tmp_path / "b.js"
        self.resolver.add_root(path)

        assert "allSizes" in self.resolver.scope(path)
        assert "sizes" not in self.resolver.scope(path)

    def test_default_import(self, tmp_path):
        """Test that a default import binds the exported default name."""
        write_files(tmp_path, {
            "icon-names.js": "const iconNames = ['home', 'close'];\nexport default iconNames;\n",
            "Icon.js": "import names from './icon-names';\n",
        })
        path = tmp_path / "Icon.js"
        self.resolver.add_root(path)

        declaration = self.resolver.scope(path).get("names")[-1]
        assert isinstance(declaration, ListDeclaration)
        assert declaration.values() == ["home", "close"]

    def test_namespace_import(self, tmp_path):
        """Test that a namespace import binds qualified names."""
        write_files(tmp_path, {
            "types.js": "export type Props = { a: string };\nexport const colors = ['red'];\n",
            "App.js": "import * as T from './types';\n",
        })
        path = tmp_path / "App.js"
        self.resolver.add_root(path)

        scope = self.resolver.scope(path)
        assert "T.Props" in scope
        assert "T.colors" in scope

    def test_transitive_reexport(self, tmp_path):
        """Test names forwarded through ``export ... from``."""
        write_files(tmp_path, {
            "base.js": "export type Base = { id: string };\nconst b = ['x'];\nexport default b;\n",
            "index.js": "export { Base } from './base';\nexport { default as items } from './base';\n",
            "App.js": "import { Base, items } from './index';\n",
        })
        path = tmp_path / "App.js"
        self.resolver.add_root(path)

        scope = self.resolver.scope(path)
        assert isinstance(scope.get("Base")[-1], TypeAliasDeclaration)
        assert isinstance(scope.get("items")[-1], ListDeclaration)

    def test_star_reexport(self, tmp_path):
        """Test ``export * from`` forwarding every exposed name but the default."""
        write_files(tmp_path, {
            "base.js": "export type A = {};\nexport type B = {};\n",
            "index.js": "export * from './base';\n",
        })
        path = tmp_path / "index.js"
        self.resolver.add_root(path)

        assert set(self.resolver.resolved_symbols(path).names()) == {"A", "B"}

    def test_imported_names_do_not_reexport_implicitly(self, tmp_path):
        """Test that imported names are only exposed when exported again."""
        write_files(tmp_path, {
            "a.js": "export type A = {};\n",
            "b.js": "import type { A } from './a';\nexport type B = { ...A };\n",
        })
        path = tmp_path / "b.js"
        self.resolver.add_root(path)

        assert set(self.resolver.resolved_symbols(path).names()) == {"B"}


class TestResolutionFailures:
    """Test missing files, cycles and limits."""

    def test_missing_import_is_skipped(self, tmp_path):
        """Test that an import of a missing file contributes nothing."""
        write_files(tmp_path, {
            "b.js": "import { Thing } from './does-not-exist';\nexport const own = 'x';\n",
        })
        path = tmp_path / "b.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)

        assert resolver.lookup("Thing", path) == []
        assert "own" in resolver.scope(path)

    def test_package_imports_are_skipped(self, tmp_path):
        """Test that bare package specifiers are never resolved."""
        write_files(tmp_path, {
            "b.js": "import React from 'react';\n",
        })
        path = tmp_path / "b.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)

        assert "React" not in resolver.scope(path)
        assert resolver.graph.get_stats() == {"files": 1, "imports": 0}

    def test_cyclic_import(self, tmp_path):
        """Test that an import cycle raises with the chain of files."""
        write_files(tmp_path, {
            "a.js": "import { b } from './b';\nexport const a = ['a'];\n",
            "b.js": "import { a } from './a';\nexport const b = ['b'];\n",
        })
        path = tmp_path / "a.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)

        with pytest.raises(CyclicReferenceError) as exc_info:
            resolver.scope(path)

        chain = exc_info.value.chain
        assert chain[0] == chain[-1]
        assert str(tmp_path / "a.js") in chain
        assert str(tmp_path / "b.js") in chain

    def test_max_depth(self, tmp_path):
        """Test that long import chains stop at the configured depth."""
        files = {}
        for index in range(5):
            files[f"m{index}.js"] = (
                f"import {{ v{index + 1} }} from './m{index + 1}';\nexport const v{index} = ['x'];\n"
            )
        files["m5.js"] = "export const v5 = ['x'];\n"
        write_files(tmp_path, files)

        resolver = CrossFileResolver(ResolutionConfig(max_depth=2))
        path = tmp_path / "m0.js"
        resolver.add_root(path)

        with pytest.raises(MaxDepthExceededError):
            resolver.scope(path)

    def test_chain_within_depth(self, tmp_path):
        """Test that a chain shorter than the limit resolves through every file."""
        write_files(tmp_path, {
            "m0.js": "import { v1 } from './m1';\nexport { v1 };\n",
            "m1.js": "import { v2 } from './m2';\nexport { v2 as v1 };\n",
            "m2.js": "export const v2 = ['deep'];\n",
        })
        resolver = CrossFileResolver(ResolutionConfig(max_depth=4))
        path = tmp_path / "m0.js"
        resolver.add_root(path)

        assert resolver.scope(path).get("v1")[-1].values() == ["deep"]
        assert resolver.graph.transitive_dependencies(str(path)) == [
            str(tmp_path / "m1.js"),
            str(tmp_path / "m2.js"),
        ]

    def test_unparsable_dependency_is_skipped(self, tmp_path):
        """Test that a dependency that fails to parse is dropped with a warning."""
        write_files(tmp_path, {
            "bad.js": "export const x = /* unterminated",
            "b.js": "import { x } from './bad';\nexport const y = ['y'];\n",
        })
        path = tmp_path / "b.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)

        assert resolver.lookup("x", path) == []
        assert "y" in resolver.scope(path)

    def test_deeply_nested_dependency_is_skipped(self, tmp_path):
        """Test that a dependency nested too deeply to parse is a soft failure."""
        write_files(tmp_path, {
            "deep.js": "export const x = " + "[" * 3000 + "]" * 3000 + ";\n",
            "b.js": "import { x } from './deep';\nexport const y = ['y'];\n",
        })
        path = tmp_path / "b.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)

        assert resolver.lookup("x", path) == []
        assert "y" in resolver.scope(path)

    def test_unparsable_dependency_strict(self, tmp_path):
        """Test that strict parsing surfaces dependency parse errors."""
        write_files(tmp_path, {
            "bad.js": "export const x = /* unterminated",
            "b.js": "import { x } from './bad';\n",
        })
        path = tmp_path / "b.js"
        resolver = CrossFileResolver(ResolutionConfig(strict_parse=True))
        resolver.add_root(path)

        with pytest.raises(ParseError):
            resolver.scope(path)

    def test_root_parse_error(self, tmp_path):
        """Test that the root file failing to parse is always an error."""
        resolver = CrossFileResolver()
        with pytest.raises(ParseError):
            resolver.add_root(tmp_path / "root.js", source="import { a from './a';")


class TestMergePolicy:
    """Test collisions between local and imported names."""

    FILES = {
        "a.js": "export const sizes = ['imported'];\n",
        "b.js": "import { sizes } from './a';\nconst sizes = ['local'];\n",
    }

    def test_imported_wins_by_default(self, tmp_path):
        """Test that the imported slot is written last and wins."""
        write_files(tmp_path, self.FILES)
        path = tmp_path / "b.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)

        assert resolver.scope(path).get("sizes")[-1].values() == ["imported"]

    def test_local_policy(self, tmp_path):
        """Test the local-wins policy."""
        write_files(tmp_path, self.FILES)
        path = tmp_path / "b.js"
        resolver = CrossFileResolver(ResolutionConfig(merge_policy=MergePolicy.LOCAL))
        resolver.add_root(path)

        assert resolver.scope(path).get("sizes")[-1].values() == ["local"]


class TestCaching:
    """Test per-request caching."""

    def test_each_file_parsed_once(self, tmp_path, monkeypatch):
        """Test that a diamond import parses the shared file once."""
        write_files(tmp_path, {
            "shared.js": "export type S = {};\n",
            "left.js": "import type { S } from './shared';\nexport type L = { ...S };\n",
            "right.js": "import type { S } from './shared';\nexport type R = { ...S };\n",
            "top.js": "import type { L } from './left';\nimport type { R } from './right';\n",
        })
        parsed = []

        def counting_parse(source, path=None):
            parsed.append(path)
            return parse(source, path)

        monkeypatch.setattr(resolver_module, "parse", counting_parse)
        path = tmp_path / "top.js"
        resolver = CrossFileResolver()
        resolver.add_root(path)
        resolver.scope(path)

        assert sorted(parsed) == sorted(
            str(tmp_path / name) for name in ("top.js", "left.js", "right.js", "shared.js")
        )
        shared = resolver.resolved_symbols(tmp_path / "shared.js")
        assert resolver.scope(tmp_path / "left.js").get("S") != []
        assert resolver.scope(tmp_path / "right.js").get("S") == shared.get("S")
        assert len(parsed) == 4
