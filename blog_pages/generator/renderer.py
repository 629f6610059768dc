"""Utilities for rendering content blocks and syntax-highlighted code snippets."""

from __future__ import annotations

import collections.abc as cabc
import re
import typing as typ
from html import escape

from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from blog_pages.markdown_parser import (
    BlockQuote,
    BlockStream,
    CodeBlock,
    Heading,
    HorizontalRule,
    Image,
    LinkReference,
    ListBlock,
    Paragraph,
    RawHtml,
    Table,
)

from .inline import InlineRenderer

if typ.TYPE_CHECKING:
    from blog_pages.markdown_parser import Alignment, Block, ListItem

CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')


def _slugify(title: str) -> str:
    no_number = re.sub(r"^\d+\.?\s*", "", title.lower())
    slug = re.sub(r"[^a-z0-9]+", "-", no_number).strip("-")
    return slug or "section"


def _unique_slug(base: str, used: set[str]) -> str:
    """Generate a unique slug, appending numeric suffixes when needed."""
    candidate = base
    suffix = 2
    while candidate in used:
        candidate = f"{base}-{suffix}"
        suffix += 1
    used.add(candidate)
    return candidate


class _RenderState:
    """Per-document state: reference links and heading anchors in use."""

    __slots__ = ("inline", "used_slugs")

    def __init__(self, inline: InlineRenderer) -> None:
        self.inline = inline
        self.used_slugs: set[str] = set()


class HtmlContentRenderer:
    """Render Markdown bodies and code snippets with consistent styling."""

    def __init__(
        self,
        pygments_style: str = "monokai",
        link_rewriter: cabc.Callable[[str], str] | None = None,
    ) -> None:
        """Initialize a renderer with optional pygments style and link rewriter.

        Parameters
        ----------
        pygments_style : str, optional
            Name of the Pygments style used for syntax highlighting. Defaults to
            ``"monokai"``.
        link_rewriter : callable, optional
            Called with every link target; returns the ``href`` to emit. Pass
            ``None`` to keep targets unchanged.
        """
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")
        self._link_rewriter = link_rewriter

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def render(self, markdown_text: str) -> str:
        """Render a Markdown body into an HTML fragment."""
        fragments = self.render_blocks(BlockStream(markdown_text))
        return "\n".join(fragment for fragment in fragments if fragment)

    def render_blocks(self, stream: BlockStream) -> cabc.Iterator[str]:
        """Yield one HTML fragment per block of ``stream``, in source order.

        Parameters
        ----------
        stream : BlockStream
            Parsed body. It is walked once up front to collect link reference
            definitions and again lazily while rendering.

        Yields
        ------
        str
            HTML for each block; link reference definitions yield an empty
            string because they produce no visible output.
        """
        inline = InlineRenderer(stream.link_references(), self._link_rewriter)
        state = _RenderState(inline)
        for block in stream:
            yield self._render_block(block, state)

    def code_block(self, code: str, language: str | None = None) -> str:
        """Render ``code`` into highlighted HTML with an optional language tag.

        Parameters
        ----------
        code : str
            Source snippet to highlight.
        language : str, optional
            Pygments lexer name; defaults to ``"text"`` when not provided or
            when the lexer lookup fails.

        Returns
        -------
        str
            HTML containing the highlighted block with ``data-language``
            metadata applied.
        """
        lang = language or "text"
        try:
            lexer = get_lexer_by_name(lang)
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        html = highlight(code, lexer, self._formatter)
        return self._attach_language_attribute(html, lang).rstrip("\n")

    def _render_block(self, block: Block, state: _RenderState) -> str:
        inline = state.inline
        match block:
            case Heading(level=level, text=text):
                slug = _unique_slug(_slugify(inline.plain_text(text)), state.used_slugs)
                return f'<h{level} id="{slug}">{inline.render(text)}</h{level}>'
            case Paragraph(text=text):
                return f"<p>{inline.render(text)}</p>"
            case BlockQuote(markdown=markdown):
                inner = (
                    self._render_block(child, state)
                    for child in BlockStream(markdown)
                )
                body = "\n".join(fragment for fragment in inner if fragment)
                return f"<blockquote>\n{body}\n</blockquote>"
            case CodeBlock(code=code, language=language):
                return self.code_block(code, language)
            case ListBlock(items=items):
                return self._render_list(items, inline)
            case Table():
                return self._render_table(block, inline)
            case HorizontalRule():
                return "<hr />"
            case RawHtml(html=html):
                return html
            case Image(alt=alt, url=url, title=title):
                title_attr = f' title="{escape(title)}"' if title else ""
                return (
                    f'<p><img src="{escape(url)}" alt="{escape(alt)}"{title_attr} /></p>'
                )
            case LinkReference():
                return ""
        msg = f"Unsupported block: {block!r}"  # pragma: no cover - exhaustive match
        raise TypeError(msg)

    @staticmethod
    def _render_list(items: cabc.Sequence[ListItem], inline: InlineRenderer) -> str:
        """Render flat, depth-annotated items as nested ``ul``/``ol`` elements."""
        parts: list[str] = []
        open_lists: list[bool] = []

        def close_list() -> None:
            parts.append("</li>")
            parts.append("</ol>" if open_lists.pop() else "</ul>")

        def open_list(item: ListItem) -> None:
            if not item.ordered:
                parts.append("<ul>")
            elif item.ordinal != 1:
                parts.append(f'<ol start="{item.ordinal}">')
            else:
                parts.append("<ol>")
            open_lists.append(item.ordered)

        for item in items:
            while len(open_lists) > item.depth + 1:
                close_list()
            if len(open_lists) == item.depth:
                open_list(item)
            elif open_lists[-1] != item.ordered:
                close_list()
                open_list(item)
            else:
                parts.append("</li>")
            parts.append(f"<li>{inline.render(item.text)}")
        while open_lists:
            close_list()
        return "".join(parts)

    @staticmethod
    def _render_table(table: Table, inline: InlineRenderer) -> str:
        """Render a pipe table; ragged rows keep their own cell counts."""

        def cell(tag: str, text: str, index: int) -> str:
            alignment: Alignment = (
                table.alignments[index] if index < len(table.alignments) else None
            )
            style = f' style="text-align: {alignment}"' if alignment else ""
            return f"<{tag}{style}>{inline.render(text)}</{tag}>"

        parts = ["<table>", "<thead>", "<tr>"]
        parts.extend(cell("th", text, index) for index, text in enumerate(table.header))
        parts.extend(["</tr>", "</thead>"])
        if table.rows:
            parts.append("<tbody>")
            for row in table.rows:
                parts.append("<tr>")
                parts.extend(cell("td", text, index) for index, text in enumerate(row))
                parts.append("</tr>")
            parts.append("</tbody>")
        parts.append("</table>")
        return "\n".join(parts)

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)


__all__ = ["HtmlContentRenderer"]
