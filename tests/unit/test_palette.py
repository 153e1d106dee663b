"""Tests for the component palette and snippet builder."""

import pytest
from returns.result import Failure, Success

from folio.compiler import Success as Compiled
from folio.components import PALETTE, PropType, build_snippet, check_values, get_spec
from folio.core import ValidationError


@pytest.mark.unit
def test_palette_covers_registry(registry):
    assert [spec.name for spec in PALETTE] == list(registry.tags)
    assert get_spec("Callout").has_children is True
    assert get_spec("ProjectMetrics").has_children is False
    assert get_spec("Nope") is None


@pytest.mark.unit
def test_enum_options():
    difficulty = get_spec("ProjectChallengeCard").prop("difficulty")
    assert difficulty.type is PropType.ENUM
    assert difficulty.options == ["easy", "medium", "hard"]


@pytest.mark.unit
class TestCheckValues:

    def test_valid(self):
        result = check_values(get_spec("Callout"), {"title": "Note", "type": "info"})
        assert isinstance(result, Success)

    def test_unknown_prop(self):
        result = check_values(get_spec("Callout"), {"colour": "red"})
        assert isinstance(result, Failure)
        assert result.failure().field == "colour"

    def test_wrong_type(self):
        result = check_values(get_spec("ProjectMetrics"), {"metrics": "lots"})
        assert isinstance(result, Failure)
        assert "must be an array" in result.failure().message

    def test_enum_option(self):
        result = check_values(get_spec("Callout"), {"type": "danger"})
        assert isinstance(result, Failure)
        assert "must be one of" in result.failure().message

    def test_required(self):
        result = check_values(get_spec("ProjectChallengeCard"), {"title": "T", "challenge": "  "})
        assert isinstance(result, Failure)
        assert result.failure().field == "challenge"


@pytest.mark.unit
class TestBuildSnippet:

    def test_children_component(self):
        snippet = build_snippet(get_spec("Callout"), {"title": "Note", "type": "warning", "icon": ""}, "Be careful")
        assert snippet == '<Callout title="Note" type="warning">\nBe careful\n</Callout>'

    def test_self_closing_with_array(self):
        snippet = build_snippet(
            get_spec("ProjectMetrics"),
            {"metrics": [{"label": "Perf", "value": "95%", "progress": 95}]},
        )
        assert snippet == '<ProjectMetrics metrics={[{"label":"Perf","value":"95%","progress":95}]} />'

    def test_quote_in_string_uses_expression(self):
        snippet = build_snippet(
            get_spec("ProjectChallengeCard"),
            {"title": 'The "hard" part', "challenge": "c", "solution": "s"},
        )
        assert 'title={"The \\"hard\\" part"}' in snippet

    def test_schema_order(self):
        snippet = build_snippet(get_spec("Callout"), {"type": "info", "title": "T"}, "x")
        assert snippet.index("title=") < snippet.index("type=")

    def test_invalid_raises(self):
        with pytest.raises(ValidationError, match="required"):
            build_snippet(get_spec("ProjectChallengeCard"), {"title": "Only title"})

    @pytest.mark.parametrize("spec", PALETTE, ids=lambda spec: spec.name)
    def test_examples_compile(self, compiler, spec):
        assert isinstance(compiler.compile_sync(spec.example), Compiled)

    def test_snippet_compiles(self, compiler):
        snippet = build_snippet(
            get_spec("ProjectChallengeCard"),
            {"title": 'Say "hi"', "challenge": "c", "solution": "s", "difficulty": "easy"},
        )
        result = compiler.compile_sync(snippet)

        assert isinstance(result, Compiled)
        assert "Say &#34;hi&#34;" in result.html
        assert "Difficulty: easy" in result.html
