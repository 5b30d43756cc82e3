"""
Unit tests for declaration extraction and the declaration table.
"""
import pytest

from propdoc.extractors import DeclarationExtractor
from propdoc.parser import parse
from propdoc.resolution.symbol_table import (
    AliasDeclaration,
    DeclarationKind,
    DeclarationTable,
    ListDeclaration,
    LiteralDeclaration,
    MergePolicy,
    ObjectDeclaration,
    TypeAliasDeclaration,
)


class TestDeclarationExtractor:
    """Test building the declaration table of a file."""

    def setup_method(self):
        self.extractor = DeclarationExtractor()

    def test_classifies_initializers(self):
        """Test that each supported initializer gets its own declaration kind."""
        code = """
const alias = other;
const title = 'Hello';
const sizes = ['small', 'large'];
const shape = { a: PropTypes.string };
const computed = makeThing();
let declaredOnly;
"""
        table = self.extractor.extract(parse(code, "decls.js"))

        assert isinstance(table.get("alias")[-1], AliasDeclaration)
        assert table.get("alias")[-1].alias_name == "other"
        assert isinstance(table.get("title")[-1], LiteralDeclaration)
        assert table.get("title")[-1].value == "Hello"
        assert isinstance(table.get("sizes")[-1], ListDeclaration)
        assert table.get("sizes")[-1].values() == ["small", "large"]
        assert isinstance(table.get("shape")[-1], ObjectDeclaration)
        assert [prop.key for prop in table.get("shape")[-1].properties] == ["a"]
        assert "computed" not in table
        assert "declaredOnly" not in table

    def test_redeclaration_accumulates(self):
        """Test that a re-declared name keeps every declaration in source order."""
        code = """
var iconNames = ['home'];
var iconNames = ['close', 'menu'];
"""
        table = self.extractor.extract(parse(code, "icons.js"))
        slot = table.get("iconNames")

        assert len(slot) == 2
        assert slot[0].values() == ["home"]
        assert slot[1].values() == ["close", "menu"]

    def test_exported_declarations_and_type_aliases(self):
        """Test that declarations under export are included, with type aliases."""
        code = """
export const A = 'a';
export type Props = { name: string };
type Local = { id: number };
"""
        table = self.extractor.extract(parse(code, "types.js"))

        assert set(table.names()) == {"A", "Props", "Local"}
        props = table.get("Props")[-1]
        assert isinstance(props, TypeAliasDeclaration)
        assert props.kind == DeclarationKind.TYPE_ALIAS
        assert props.source_file == "types.js"

    def test_type_cast_initializer(self):
        """Test that type casts are looked through."""
        table = self.extractor.extract(parse("const names = (['a']: Array<string>);", "cast.js"))
        assert isinstance(table.get("names")[-1], ListDeclaration)

    def test_destructuring_is_skipped(self):
        """Test that destructured declarations bind nothing."""
        table = self.extractor.extract(parse("const { a, b } = require('./x');", "destructure.js"))
        assert len(table) == 0


class TestDeclarationTable:
    """Test table operations."""

    def _literal(self, name, value):
        return LiteralDeclaration(name=name, value=value)

    def test_get_returns_copy(self):
        """Test that callers cannot mutate a slot through get."""
        table = DeclarationTable()
        table.add(self._literal("a", 1))

        table.get("a").clear()
        assert len(table.get("a")) == 1
        assert table.get("missing") == []

    def test_merge_local_wins(self):
        """Test the local merge policy."""
        local = DeclarationTable()
        local.add(self._literal("shared", "local"))
        imported = DeclarationTable()
        imported.add(self._literal("shared", "imported"))
        imported.add(self._literal("extra", "imported"))

        merged = local.merge(imported, MergePolicy.LOCAL)

        assert merged.get("shared")[-1].value == "local"
        assert merged.get("extra")[-1].value == "imported"
        # neither input is modified
        assert "extra" not in local

    def test_merge_imported_wins(self):
        """Test that the imported slot wins on collision by default."""
        local = DeclarationTable()
        local.add(self._literal("shared", "local"))
        imported = DeclarationTable()
        imported.add(self._literal("shared", "imported"))

        merged = local.merge(imported)
        assert merged.get("shared")[-1].value == "imported"

    def test_merge_with_empty_is_identity(self):
        """Test that merging an empty table gives an equal table."""
        table = DeclarationTable()
        table.add(self._literal("a", 1))

        assert table.merge(DeclarationTable()) == table


@pytest.mark.parametrize("policy", ["local", "imported"])
def test_merge_policy_from_string(policy):
    """Test that merge policies round-trip through their config values."""
    assert MergePolicy(policy).value == policy
