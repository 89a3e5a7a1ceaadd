"""Markdown preview rendering with Pygments-highlighted code fences."""

from __future__ import annotations

import html
from typing import Callable, Optional

from markdown_it import MarkdownIt
from pygments import highlight as pygments_highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import TextLexer, get_lexer_by_name
from pygments.util import ClassNotFound
from rich.markdown import Markdown

from memo_engine.runtime import telemetry

CodeHighlighter = Callable[[str, str], Optional[str]]


class MarkdownRenderer:
    """Converts buffer text to HTML (GFM-flavoured: tables, strike, breaks).

    ``highlight_code`` is the post-processing hook applied to every fenced
    code region. Pass ``highlight=False`` to keep code blocks as plain
    escaped text.
    """

    def __init__(
        self,
        *,
        style: str = "monokai",
        highlight: bool = True,
    ) -> None:
        self.style = style
        self._formatter = HtmlFormatter(style=style, nowrap=True)
        self._highlighter: Optional[CodeHighlighter] = (
            self.highlight_code if highlight else None
        )
        self._md = MarkdownIt(
            "commonmark",
            {"html": False, "breaks": True, "highlight": self._highlight_fence},
        ).enable("table").enable("strikethrough")

    def render(self, text: str) -> str:
        with telemetry.span(
            "render::markdown",
            component="renderer",
            metadata={"length": len(text)},
        ):
            return self._md.render(text)

    def stylesheet(self) -> str:
        return self._formatter.get_style_defs(".highlight")

    def highlight_code(self, code: str, language: str) -> Optional[str]:
        try:
            lexer = get_lexer_by_name(language) if language else TextLexer()
        except ClassNotFound:
            telemetry.record_event(
                "render.unknown_language", level="debug", data={"language": language}
            )
            lexer = TextLexer()
        return pygments_highlight(code, lexer, self._formatter)

    def _highlight_fence(self, code: str, language: str, attrs: str) -> str:
        del attrs
        if self._highlighter is None:
            return ""
        highlighted = self._highlighter(code, language.strip())
        if not highlighted:
            return ""
        lang_class = f" language-{html.escape(language)}" if language else ""
        # markdown-it keeps output starting with <pre as-is instead of wrapping it.
        return (
            f'<pre class="highlight"><code class="hljs{lang_class}">'
            f"{highlighted}</code></pre>\n"
        )


class RichMarkdownRenderer:
    """Terminal preview: a Rich renderable with Pygments-themed code blocks."""

    def __init__(self, *, code_theme: str = "monokai", hyperlinks: bool = False) -> None:
        self.code_theme = code_theme
        self.hyperlinks = hyperlinks

    def render(self, text: str) -> Markdown:
        with telemetry.span(
            "render::rich",
            component="renderer",
            metadata={"length": len(text)},
        ):
            return Markdown(text, code_theme=self.code_theme, hyperlinks=self.hyperlinks)


__all__ = ["MarkdownRenderer", "RichMarkdownRenderer", "CodeHighlighter"]
