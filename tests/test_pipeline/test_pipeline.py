"""End-to-end tests: media-variables around the resolution stages."""

from pathlib import Path

import pytest

from mediavars import MediaVariables, MediaVariablesConfig, Pipeline, process
from mediavars.carrier import CARRIER_SELECTOR, STEP_PROPERTY
from mediavars.externalize import PlaceholderCollisionError
from mediavars.parser import ParseError
from mediavars.pipeline import default_plugins
from mediavars.stages import CalcStage, VariablesStage

FIXTURES = Path(__file__).parent.parent / "fixtures"


# ---------------------------------------------------------------------------
# Resolution through the default pipeline
# ---------------------------------------------------------------------------


class TestEndToEnd:
    def test_calc_wrapping_var(self):
        result = process(":root { --min-width: 1000px; }\n@media (min-width: calc(var(--min-width))) {}")
        assert result.css == "@media (min-width: 1000px) {}\n"
        assert result.warnings() == []

    def test_several_variables(self):
        css = (
            ":root { --a: 1000px; --b: 2000px; }\n"
            "@media screen and (min-width: var(--a)), (max-width: var(--b)) {}"
        )
        result = process(css)
        assert result.css == "@media screen and (min-width: 1000px), (max-width: 2000px) {}\n"
        assert result.warnings() == []

    def test_arithmetic(self):
        css = ":root { --min-width: 1000px; }\n@media (max-width: calc(var(--min-width) - 1px)) {}"
        assert process(css).css == "@media (max-width: 999px) {}\n"

    def test_custom_media_fan_out(self):
        css = (
            ":root { --w: 500px; }\n"
            "@custom-media --small (max-width: var(--w));\n"
            "@media (--small) {}\n"
            "@media (--small) and (min-height: 10px) {}"
        )
        result = process(css)
        assert result.css == (
            "@media (max-width: 500px) {}\n"
            "@media (max-width: 500px) and (min-height: 10px) {}\n"
        )
        assert result.warnings() == []

    def test_nested_custom_media(self):
        css = (
            ":root { --w: 500px; }\n"
            "@custom-media --small (max-width: var(--w));\n"
            "@custom-media --small-print (--small) and print;\n"
            "@media (--small-print) {}"
        )
        assert process(css).css == "@media (max-width: 500px) and print {}\n"

    def test_nested_media_rules(self):
        css = (
            ":root { --w: 40em; }\n"
            "@supports (display: grid) { @media (min-width: var(--w)) { a { color: red; } } }"
        )
        assert process(css).css == (
            "@supports (display: grid) {\n"
            "    @media (min-width: 40em) {\n"
            "        a {\n"
            "            color: red;\n"
            "        }\n"
            "    }\n"
            "}\n"
        )

    def test_fixture(self):
        source = (FIXTURES / "media_variables.css").read_text()
        expected = (FIXTURES / "media_variables.expected.css").read_text()
        result = process(source, source_path="media_variables.css")
        assert result.css == expected
        assert result.warnings() == []

    def test_no_media_rules_is_a_no_op(self):
        result = process("a {\n    color: red;\n}\n")
        assert result.css == "a {\n    color: red;\n}\n"
        assert result.messages == []

    def test_output_is_stable(self):
        css = ":root { --w: 500px; }\n@media (max-width: calc(var(--w) * 2)) {}"
        once = process(css).css
        assert process(once).css == once == "@media (max-width: 1000px) {}\n"

    def test_unresolved_variable_is_kept(self):
        result = process("@media (min-width: var(--nope)) {}")
        assert result.css == "@media (min-width: var(--nope)) {}\n"
        [warning] = result.warnings()
        assert warning.plugin == "variables"

    def test_preserve_variables(self):
        config = MediaVariablesConfig(preserve_variables=True)
        css = ":root { --w: 500px; }\n@media (max-width: var(--w)) {}"
        result = Pipeline(default_plugins(config)).process(css)
        assert result.css == ":root {\n    --w: 500px;\n}\n@media (max-width: 500px) {}\n"

    def test_no_carrier_left_behind(self):
        css = ":root { --w: 1px; }\n@media (max-width: var(--w)) { a { color: red; } }"
        css_out = process(css).css
        assert CARRIER_SELECTOR not in css_out
        assert STEP_PROPERTY not in css_out


# ---------------------------------------------------------------------------
# Errors and warnings
# ---------------------------------------------------------------------------


class TestMalformed:
    def test_missing_parenthesis(self):
        result = process("@media (min-width: calc(var(--x)) {}")
        [warning] = result.warnings()
        assert warning.message == "Missing 1 closing parenthesis"
        assert warning.plugin == "media-variables"
        assert result.css == "@media (min-width: calc(var(--x)) {}\n"

    def test_other_rules_still_processed(self):
        css = (
            ":root { --w: 1px; }\n"
            "@media (min-width: calc(var(--x)) {}\n"
            "@media (max-width: var(--w)) {}"
        )
        result = process(css)
        assert len(result.warnings()) == 1
        assert result.css.endswith("@media (max-width: 1px) {}\n")

    def test_placeholder_collision_is_fatal(self):
        with pytest.raises(PlaceholderCollisionError):
            process("@media (min-width: var(--a)) and (-mv-1-0-12e) {}")

    def test_parse_error(self):
        with pytest.raises(ParseError):
            process("a { color }")


# ---------------------------------------------------------------------------
# Custom plugin lists
# ---------------------------------------------------------------------------


class TestPluginOrder:
    def test_single_run_leaves_carriers(self):
        result = process("@media (min-width: var(--a)) {}", plugins=[MediaVariables()])
        assert CARRIER_SELECTOR in result.css
        assert f"{STEP_PROPERTY}: 1;" in result.css
        assert "probably ran only once" in result.css

    def test_two_runs_without_resolvers_restore_original(self):
        plugin = MediaVariables()
        result = process("@media (min-width: calc(var(--a) + 1px)) {}", plugins=[plugin, plugin])
        assert result.css == "@media (min-width: calc(var(--a) + 1px)) {}\n"

    def test_separate_instances_share_state(self):
        css = ":root { --a: 2px; }\n@media (min-width: calc(var(--a) * 3)) {}"
        plugins = [MediaVariables(), VariablesStage(), CalcStage(), MediaVariables()]
        assert process(css, plugins=plugins).css == "@media (min-width: 6px) {}\n"

    def test_use_appends(self):
        pipeline = Pipeline([]).use(MediaVariables()).use(VariablesStage()).use(MediaVariables())
        result = pipeline.process(":root { --a: 2px; }\n@media (min-width: var(--a)) {}")
        assert result.css == "@media (min-width: 2px) {}\n"
