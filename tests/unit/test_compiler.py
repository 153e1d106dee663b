"""Tests for the MDX compiler adapter and renderer."""

import pytest
from hypothesis import given, settings as hypothesis_settings, strategies as st
from markupsafe import Markup

from folio.compiler import Compiler, Empty, Failure, MDXCompiler, Success
from folio.preview import ShowingError, render_view, state_for


# ============================================================================
# Result classification
# ============================================================================

@pytest.mark.unit
@pytest.mark.parametrize("source", ["", " ", "\n\n", "\t \n  "])
def test_blank_source_is_empty(compiler, source):
    assert compiler.compile_sync(source) == Empty()


@given(st.text(alphabet=" \t\n\r\f\v"))
@hypothesis_settings(max_examples=50)
def test_whitespace_is_always_empty(source):
    assert MDXCompiler(enable_cache=False).compile_sync(source) == Empty()


@pytest.mark.unit
def test_plain_markdown(compiler):
    result = compiler.compile_sync("# Hello\n\nSome *emphasis* and a [link](https://example.com).")

    assert isinstance(result, Success)
    assert isinstance(result.html, Markup)
    assert "<h1>Hello</h1>" in result.html
    assert "<em>emphasis</em>" in result.html
    assert '<a href="https://example.com">link</a>' in result.html


@pytest.mark.unit
def test_registered_component_with_children(compiler):
    result = compiler.compile_sync('<Callout title="Note">Content here</Callout>')

    assert isinstance(result, Success)
    assert "Note" in result.html
    assert "Content here" in result.html
    assert result.html.startswith("<aside")


@pytest.mark.unit
def test_broken_element_fails(compiler):
    result = compiler.compile_sync("<Broken>")

    assert isinstance(result, Failure)
    assert result.message.startswith("1:1: ")
    assert "Expected a closing tag for `<Broken>`" in result.message

    view = render_view(state_for(result, 1))
    assert "MDX parse error" in view
    assert 'role="alert"' in view


@pytest.mark.unit
def test_compile_is_idempotent(compiler, project_mdx):
    assert compiler.compile_sync(project_mdx) == compiler.compile_sync(project_mdx)


@given(st.text(max_size=200))
@hypothesis_settings(max_examples=100, deadline=None)
def test_never_raises_and_is_deterministic(source):
    """Arbitrary input always classifies, the same way twice."""
    compiler = MDXCompiler(enable_cache=False)
    first = compiler.compile_sync(source)

    assert isinstance(first, (Empty, Success, Failure))
    assert first == compiler.compile_sync(source)


# ============================================================================
# Markdown
# ============================================================================

@pytest.mark.unit
class TestMarkdown:

    def test_lists_code_and_images(self, compiler):
        html = compiler.compile_sync("- one\n- two\n\n`code`\n\n![alt](/img.png)").html

        assert "<li>one</li>" in html
        assert "<code>code</code>" in html
        assert '<img src="/img.png" alt="alt" />' in html

    def test_table_and_strikethrough(self, compiler):
        html = compiler.compile_sync("| a | b |\n|---|---|\n| 1 | 2 |\n\n~~gone~~").html

        assert "<table>" in html
        assert "<s>gone</s>" in html

    def test_extensions_can_be_disabled(self, compiler_factory):
        compiler = compiler_factory(markdown_tables=False, markdown_strikethrough=False)
        html = compiler.compile_sync("| a | b |\n|---|---|\n\n~~gone~~").html

        assert "<table>" not in html
        assert "<s>" not in html

    def test_raw_text_is_escaped(self, compiler):
        html = compiler.compile_sync("a < b & c").html
        assert html == "<p>a &lt; b &amp; c</p>"

    def test_fenced_code_keeps_tags_literal(self, compiler):
        html = compiler.compile_sync("```mdx\n<Callout>unclosed\n```").html
        assert "&lt;Callout&gt;unclosed" in html

    def test_escaped_brackets(self, compiler):
        html = compiler.compile_sync("Use \\<Callout> and \\{braces}").html
        assert html == "<p>Use &lt;Callout&gt; and {braces}</p>"


# ============================================================================
# Components and elements
# ============================================================================

@pytest.mark.unit
class TestElements:

    def test_block_children_render_markdown(self, compiler):
        html = compiler.compile_sync('<Callout type="warning">\n  **Careful** here\n\n  - a\n</Callout>').html

        assert "<strong>Careful</strong>" in html
        assert "<li>a</li>" in html
        assert "<pre>" not in html

    def test_inline_children(self, compiler):
        html = compiler.compile_sync("<Callout>Just *one* line</Callout>").html
        assert '<div class="callout-body">Just <em>one</em> line</div>' in html

    def test_indented_body_with_nested_component(self, compiler):
        html = compiler.compile_sync(
            "<Callout>\n    Intro text\n\n    <Callout title=\"Inner\">x</Callout>\n</Callout>"
        ).html

        assert "<pre>" not in html
        assert "<p>Intro text</p>" in html
        assert 'aria-label="info callout: Inner"' in html

    def test_indentation_is_never_code(self, compiler):
        html = compiler.compile_sync("Text\n\n    still a paragraph").html
        assert html == "<p>Text</p>\n<p>still a paragraph</p>"

    def test_flow_component_is_not_wrapped_in_paragraph(self, compiler):
        html = compiler.compile_sync("Intro\n<ProjectMetrics metrics={[]} />\nOutro").html

        assert "<p>Intro</p>" in html
        assert "<p>Outro</p>" in html
        assert "<p><div" not in html

    def test_project_write_up(self, compiler, project_mdx):
        html = compiler.compile_sync(project_mdx).html

        assert "<h1>Portfolio CMS</h1>" in html
        assert 'aria-label="warning callout: Heads up"' in html
        assert 'aria-label="Next.js, primary"' in html
        assert 'aria-valuenow="95"' in html
        assert "Difficulty: hard" in html

    def test_intrinsic_elements(self, compiler):
        html = compiler.compile_sync(
            '<div className="note" onClick="steal()" hidden style={{ marginTop: 4 }}>\n'
            "# Inside\n"
            "</div>"
        ).html

        assert html.startswith('<div class="note" hidden style="margin-top: 4px">')
        assert "onClick" not in html
        assert "<h1>Inside</h1>" in html

    def test_void_element(self, compiler):
        html = compiler.compile_sync('Line<br />break <img src="/a.png" alt="A" />').html
        assert "<br>" in html
        assert '<img src="/a.png" alt="A">' in html

    def test_javascript_urls_dropped(self, compiler):
        html = compiler.compile_sync('<a href="javascript:alert(1)">x</a>').html
        assert "javascript" not in html

    @pytest.mark.parametrize(
        "source",
        [
            '<a href="java&#x09;script:alert(1)">x</a>',
            '<a href={"java\\tscript:alert(1)"}>x</a>',
            '<a href="  \x01JavaScript:alert(1)">x</a>',
            '<a href="java\nscript:alert(1)">x</a>',
            '<img src="data:text/html,hi" />',
        ],
    )
    def test_obfuscated_schemes_dropped(self, compiler, source):
        html = compiler.compile_sync(source).html
        assert "href" not in html
        assert "src" not in html

    @pytest.mark.parametrize(
        "url",
        ["https://example.com", "/projects/folio", "#top", "mailto:me@example.com", "notes/a:b"],
    )
    def test_safe_urls_kept(self, compiler, url):
        html = compiler.compile_sync(f'<a href="{url}">x</a>').html
        assert html == f'<a href="{url}">x</a>'

    def test_script_rejected(self, compiler):
        result = compiler.compile_sync("<script>alert(1)</script>")
        assert isinstance(result, Failure)
        assert "not allowed" in result.message

    def test_text_expressions(self, compiler):
        html = compiler.compile_sync("Total: {42} / {'<b>'} / {[1, 2]} / {true}{null}").html
        assert html == "<p>Total: 42 / &lt;b&gt; / 12 / </p>"

    def test_object_child_fails(self, compiler):
        result = compiler.compile_sync("{{ a: 1 }}")
        assert isinstance(result, Failure)
        assert "Objects are not valid as a child" in result.message

    def test_fragment(self, compiler):
        assert compiler.compile_sync("<>*hi*</>").html == "<em>hi</em>"


# ============================================================================
# Unknown components
# ============================================================================

@pytest.mark.unit
class TestUnknownComponents:

    def test_literal_by_default(self, compiler):
        html = compiler.compile_sync('<Chart data="x" />').html
        assert html == '<code class="mdx-unknown-component">&lt;Chart data=&#34;x&#34; /&gt;</code>'

    def test_omit(self, compiler_factory):
        html = compiler_factory(unknown_component_policy="omit").compile_sync("A <Chart /> B").html
        assert html == "<p>A  B</p>"

    def test_error(self, compiler_factory):
        result = compiler_factory(unknown_component_policy="error").compile_sync("\n<Chart />")

        assert isinstance(result, Failure)
        assert result.message == (
            "2:1: Expected component `Chart` to be defined: you likely forgot to import, "
            "pass, or provide it."
        )


# ============================================================================
# Adapter behaviour
# ============================================================================

@pytest.mark.unit
def test_satisfies_protocol(compiler):
    assert isinstance(compiler, Compiler)


@pytest.mark.unit
def test_cache_hits(cached_compiler):
    first = cached_compiler.compile_sync("# Cached")
    second = cached_compiler.compile_sync("# Cached")

    assert second is first
    assert cached_compiler.cache.stats.hits == 1


@pytest.mark.unit
def test_failures_are_cached_too(cached_compiler):
    first = cached_compiler.compile_sync("<Broken>")
    assert cached_compiler.compile_sync("<Broken>") is first


@pytest.mark.unit
def test_blank_skips_cache(cached_compiler):
    cached_compiler.compile_sync("   ")
    assert len(cached_compiler.cache) == 0


@pytest.mark.unit
def test_unexpected_error_becomes_failure(compiler, monkeypatch):
    def explode(*args, **kwargs):
        raise RuntimeError("renderer exploded")

    monkeypatch.setattr("folio.compiler.adapter.parse", explode)
    result = compiler.compile_sync("# Anything")

    assert result == Failure("renderer exploded")


@pytest.mark.asyncio
async def test_async_compile(compiler):
    assert await compiler.compile("") == Empty()

    result = await compiler.compile("## Async")
    assert isinstance(result, Success)
    assert "<h2>Async</h2>" in result.html


@pytest.mark.asyncio
async def test_async_compile_failure(compiler):
    result = await compiler.compile("</Stray>")

    assert isinstance(result, Failure)
    view = render_view(ShowingError(1, result.message))
    assert view.startswith('<div class="mdx-preview-error" role="alert">MDX parse error: 1:1: ')
