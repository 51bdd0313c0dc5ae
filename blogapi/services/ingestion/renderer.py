"""Markdown to HTML rendering with Pygments syntax highlighting.

Fenced code blocks are highlighted and tagged with their declared language::

    <pre class="language-python"><code class="language-python">...</code></pre>

Inline code spans are always escaped and tagged ``language-text`` so they
style consistently with block code.
"""

import html
import re
import xml.etree.ElementTree as etree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import BACKTICK_RE, BacktickInlineProcessor
from markdown.preprocessors import Preprocessor
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound

from blogapi.services.ingestion.errors import RenderError

DEFAULT_CODE_LANGUAGE = "text"

FENCED_BLOCK_RE = re.compile(
    r"^(?P<indent>[ ]*)(?P<fence>~{3,}|`{3,})[ ]*\.?(?P<lang>[\w#.+-]*)[ ]*\n"
    r"(?P<code>.*?)(?<=\n)(?P=indent)(?P=fence)[ ]*$",
    re.MULTILINE | re.DOTALL,
)


def _dedent(code: str, indent: str) -> str:
    """Strip a nested fence's indent from each of its code lines."""
    if not indent:
        return code
    return "\n".join(
        line[len(indent):] if line.startswith(indent) else line.lstrip(" ")
        for line in code.split("\n")
    )


def highlight_code(code: str, language: str) -> str:
    """Highlight *code* as *language*, falling back to escaped plain text."""
    try:
        lexer = get_lexer_by_name(language)
    except ClassNotFound:
        lexer = TextLexer()
    highlighted = highlight(code, lexer, HtmlFormatter(nowrap=True))
    css_class = html.escape(f"language-{language}", quote=True)
    return (
        f'<pre class="{css_class}"><code class="{css_class}">'
        f"{highlighted}</code></pre>"
    )


class HighlightedFencePreprocessor(Preprocessor):
    """Replace fenced code blocks with stashed, highlighted HTML."""

    def run(self, lines: list[str]) -> list[str]:
        text = "\n".join(lines)
        while True:
            m = FENCED_BLOCK_RE.search(text)
            if not m:
                break
            language = m.group("lang") or DEFAULT_CODE_LANGUAGE
            indent = m.group("indent")
            placeholder = self.md.htmlStash.store(
                highlight_code(_dedent(m.group("code"), indent), language)
            )
            # Keep the indent so a fence inside a list item stays in that item
            text = f"{text[:m.start()]}\n{indent}{placeholder}\n{text[m.end():]}"
        return text.split("\n")


class InlineCodeProcessor(BacktickInlineProcessor):
    """Backtick code spans rendered as ``<code class="language-text">``."""

    def handleMatch(self, m, data):  # noqa: N802
        el, start, end = super().handleMatch(m, data)
        if isinstance(el, etree.Element):
            el.set("class", f"language-{DEFAULT_CODE_LANGUAGE}")
        return el, start, end


class CodeHighlightExtension(Extension):
    def __init__(self, escape_raw_html: bool = False) -> None:
        super().__init__()
        self.escape_raw_html = escape_raw_html

    def extendMarkdown(self, md: Markdown) -> None:  # noqa: N802
        md.registerExtension(self)
        md.preprocessors.register(HighlightedFencePreprocessor(md), "fenced_code_block", 25)
        # Same name replaces the stock backtick pattern
        md.inlinePatterns.register(InlineCodeProcessor(BACKTICK_RE), "backtick", 190)
        if self.escape_raw_html:
            md.preprocessors.deregister("html_block")
            md.inlinePatterns.deregister("html")


def render_markdown(body: str, slug: str = "", *, escape_raw_html: bool = False) -> str:
    """Render a frontmatter-free markdown body to HTML.

    A fresh ``Markdown`` instance is used per call so output depends only on
    the input.

    Raises:
        RenderError: The markdown stack failed on this document.
    """
    md = Markdown(
        extensions=["tables", CodeHighlightExtension(escape_raw_html=escape_raw_html)],
        output_format="html",
    )
    try:
        return md.convert(body)
    except Exception as e:
        raise RenderError(slug, f"could not render markdown: {e}") from e
