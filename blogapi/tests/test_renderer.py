"""Tests for markdown rendering and code highlighting."""

import pytest

from blogapi.services.ingestion.errors import RenderError
from blogapi.services.ingestion.renderer import highlight_code, render_markdown


class TestRenderMarkdown:
    def test_renders_block_and_inline_constructs(self):
        html = render_markdown("# Title\n\nSome *emphasis* and a [link](https://x.test).\n")
        assert "<h1>Title</h1>" in html
        assert "<em>emphasis</em>" in html
        assert '<a href="https://x.test">link</a>' in html

    def test_renders_tables(self):
        html = render_markdown("| a | b |\n|---|---|\n| 1 | 2 |\n")
        assert "<table>" in html
        assert "<td>1</td>" in html

    def test_deterministic(self):
        body = "Text with `code`.\n\n```python\nprint('hi')\n```\n"
        assert render_markdown(body) == render_markdown(body)


class TestInlineCode:
    def test_inline_code_tagged_as_text(self):
        html = render_markdown("Run `make build` now.\n")
        assert '<code class="language-text">make build</code>' in html

    def test_inline_script_is_escaped(self):
        html = render_markdown("Never do `<script>alert(1)</script>` here.\n")
        assert "<script>" not in html
        assert (
            '<code class="language-text">&lt;script&gt;alert(1)&lt;/script&gt;</code>'
            in html
        )

    def test_inline_ampersand_escaped(self):
        html = render_markdown("Use `a && b`.\n")
        assert '<code class="language-text">a &amp;&amp; b</code>' in html


class TestFencedCode:
    def test_block_tagged_with_declared_language(self):
        html = render_markdown("```python\nprint('hi')\n```\n")
        assert '<pre class="language-python"><code class="language-python">' in html
        assert "<span" in html

    def test_block_without_language_is_text(self):
        html = render_markdown("```\nplain <b>text</b>\n```\n")
        assert '<pre class="language-text"><code class="language-text">' in html
        assert "&lt;b&gt;" in html
        assert "<b>" not in html

    def test_unknown_language_keeps_tag_and_escapes(self):
        html = render_markdown("```notalanguage\n<i>x</i>\n```\n")
        assert 'class="language-notalanguage"' in html
        assert "&lt;i&gt;" in html

    def test_tilde_fences(self):
        html = render_markdown("~~~js\nconst a = 1;\n~~~\n")
        assert 'class="language-js"' in html

    def test_fenced_block_not_wrapped_in_paragraph(self):
        html = render_markdown("Intro\n\n```python\nx = 1\n```\n\nOutro\n")
        assert "<p><pre" not in html
        assert "<p>Intro</p>" in html
        assert "<p>Outro</p>" in html

    def test_fence_nested_in_list_item(self):
        html = render_markdown("- step\n\n    ```python\n    x = 1\n    ```\n")
        assert '<code class="language-python"><span class="n">x</span>' in html
        assert "language-text" not in html
        assert "```" not in html
        assert html.index("<li>") < html.index("<pre") < html.index("</li>")
        assert "<p><pre" not in html

    def test_nested_fence_keeps_relative_indentation(self):
        source = "1. loop\n\n    ```python\n    for i in x:\n        print(i)\n    ```\n"
        html = render_markdown(source)
        assert 'class="language-python"' in html
        assert "print" in html
        assert "        " not in html
        assert "    " in html

    def test_highlight_code_direct(self):
        out = highlight_code("x = 1\n", "python")
        assert out.startswith('<pre class="language-python"><code class="language-python">')
        assert out.endswith("</code></pre>")


class TestRawHtml:
    def test_raw_html_passes_through_by_default(self):
        html = render_markdown('<div class="note">hi</div>\n')
        assert '<div class="note">hi</div>' in html

    def test_raw_html_escaped_when_configured(self):
        html = render_markdown('<div class="note">hi</div>\n', escape_raw_html=True)
        assert '<div class="note">' not in html
        assert "&lt;div" in html


def test_render_failure_raises_render_error(mocker):
    mocker.patch(
        "blogapi.services.ingestion.renderer.Markdown.convert",
        side_effect=RuntimeError("boom"),
    )
    with pytest.raises(RenderError) as exc_info:
        render_markdown("text", "broken")
    assert exc_info.value.slug == "broken"
    assert "boom" in exc_info.value.reason
