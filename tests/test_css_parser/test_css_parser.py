"""Tests for the CSS parser."""

from pathlib import Path

import pytest

from mediavars.model.tree import AtRule, Comment, Declaration, Root, Rule
from mediavars.parser import ParseError, parse_css

FIXTURES = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------


class TestRules:
    def test_empty_source(self):
        root = parse_css("")
        assert isinstance(root, Root)
        assert root.nodes == []

    def test_simple_rule(self):
        root = parse_css("a { color: red; }")
        [rule] = root.nodes
        assert isinstance(rule, Rule)
        assert rule.selector == "a"
        [decl] = rule.nodes
        assert (decl.prop, decl.value, decl.important) == ("color", "red", False)

    def test_last_semicolon_optional(self):
        root = parse_css("a { color: red; margin: 0 }")
        assert [d.prop for d in root.walk_decls()] == ["color", "margin"]

    def test_pseudo_selector(self):
        root = parse_css(":root { --min-width: 1000px; }")
        rule = root.nodes[0]
        assert rule.selector == ":root"
        assert rule.nodes[0].prop == "--min-width"
        assert rule.nodes[0].value == "1000px"

    def test_value_with_colon(self):
        root = parse_css("a { background: url(http://example.com/a.png); }")
        assert root.nodes[0].nodes[0].value == "url(http://example.com/a.png)"

    def test_important(self):
        root = parse_css("a { color: red !important; }")
        decl = root.nodes[0].nodes[0]
        assert decl.value == "red"
        assert decl.important is True

    def test_parents(self):
        root = parse_css("a { color: red; }")
        rule = root.nodes[0]
        assert rule.parent is root
        assert rule.nodes[0].parent is rule


class TestAtRules:
    def test_media_with_block(self):
        root = parse_css("@media (min-width: calc(var(--min-width))) { a { color: red; } }")
        [media] = root.nodes
        assert isinstance(media, AtRule)
        assert media.name == "media"
        assert media.params == "(min-width: calc(var(--min-width)))"
        assert media.has_block
        assert isinstance(media.nodes[0], Rule)

    def test_blockless_at_rule(self):
        root = parse_css("@custom-media --small (max-width: 30em);")
        [alias] = root.nodes
        assert alias.name == "custom-media"
        assert alias.params == "--small (max-width: 30em)"
        assert alias.has_block is False

    def test_at_rule_without_params(self):
        root = parse_css("@font-face { font-family: x; }")
        assert root.nodes[0].params == ""

    def test_empty_block(self):
        root = parse_css("@media print {}")
        assert root.nodes[0].nodes == []


class TestComments:
    def test_top_level_comment(self):
        root = parse_css("/* hello */ a {}")
        comment = root.nodes[0]
        assert isinstance(comment, Comment)
        assert comment.text == "hello"

    def test_comment_in_block(self):
        root = parse_css("a { /* note */ color: red; }")
        assert isinstance(root.nodes[0].nodes[0], Comment)
        assert isinstance(root.nodes[0].nodes[1], Declaration)


# ---------------------------------------------------------------------------
# Source positions
# ---------------------------------------------------------------------------


class TestPositions:
    def test_line_and_column(self):
        root = parse_css("a {}\n\n  @media print {}")
        media = root.nodes[1]
        assert media.source.start.line == 3
        assert media.source.start.column == 3
        assert media.source.start.offset == 8

    def test_declaration_position(self):
        root = parse_css("a {\n    color: red;\n}")
        decl = root.nodes[0].nodes[0]
        assert decl.source.start.line == 2
        assert decl.source.start.column == 5

    def test_source_path(self):
        root = parse_css("a {}", source_path="style.css")
        assert root.nodes[0].source.input == "style.css"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


class TestFixtures:
    def test_media_variables_fixture(self):
        root = parse_css((FIXTURES / "media_variables.css").read_text())
        assert [r.name for r in root.walk_at_rules()] == ["custom-media", "media", "media"]
        assert [r.selector for r in root.walk_rules()] == [":root", ".sidebar", ".sidebar"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestErrors:
    def test_unclosed_block(self):
        with pytest.raises(ParseError):
            parse_css("a { color: red;")

    def test_unexpected_close(self):
        with pytest.raises(ParseError) as exc_info:
            parse_css("a {} }")
        assert exc_info.value.line == 1

    def test_declaration_without_colon(self):
        with pytest.raises(ParseError, match="Unknown word"):
            parse_css("a { color }")

    def test_message_names_file_and_position(self):
        with pytest.raises(ParseError) as exc_info:
            parse_css("a {\n    color\n}", source_path="site.css")
        assert str(exc_info.value) == "site.css:2:5: Unknown word 'color'"
