"""Render inline Markdown spans (code, links, emphasis) into HTML.

Block structure is classified by :mod:`blog_pages.markdown_parser`; the text
inside each heading, paragraph, list item, and table cell is handed to a
``markdown.Markdown`` instance that has every block processor except the
paragraph one removed, so only inline syntax is interpreted.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from markdown import Markdown
from markdown.extensions import Extension
from markdown.inlinepatterns import SimpleTagInlineProcessor
from markupsafe import Markup

from .link_rewriter import RelativeLinkExtension

if typ.TYPE_CHECKING:
    from blog_pages.markdown_parser import LinkReference
else:  # pragma: no cover - type-checking fallback
    LinkReference = typ.Any

STRIKETHROUGH_PATTERN = r"(~~)(?=\S)(.+?)(?<=\S)~~"
BLOCK_PROCESSORS = (
    "empty",
    "indent",
    "code",
    "hashheader",
    "setextheader",
    "hr",
    "olist",
    "ulist",
    "quote",
    "reference",
)


class InlineOnlyExtension(Extension):
    """Restrict a Markdown instance to inline syntax plus ``~~strikethrough~~``."""

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Drop block-level processors and register the strikethrough pattern."""
        md.preprocessors.deregister("html_block", strict=False)
        for name in BLOCK_PROCESSORS:
            md.parser.blockprocessors.deregister(name, strict=False)
        md.inlinePatterns.register(
            SimpleTagInlineProcessor(STRIKETHROUGH_PATTERN, "del"), "strikethrough", 65
        )


class InlineRenderer:
    """Turn a span of inline Markdown into HTML.

    Reference definitions collected from the whole document are loaded into
    the Markdown instance before every span so ``[text][label]`` links resolve
    regardless of where the definition appears.
    """

    def __init__(
        self,
        references: cabc.Mapping[str, LinkReference] | None = None,
        link_rewriter: cabc.Callable[[str], str] | None = None,
    ) -> None:
        self.references = {
            key.lower(): (reference.url, reference.title)
            for key, reference in (references or {}).items()
        }
        extensions: list[Extension | str] = [InlineOnlyExtension()]
        if link_rewriter is not None:
            extensions.append(RelativeLinkExtension(link_rewriter))
        self._md = Markdown(extensions=extensions, output_format="xhtml")

    def render(self, text: str) -> str:
        """Return ``text`` rendered as inline HTML."""
        if not text.strip():
            return ""
        self._md.reset()
        self._md.references.update(self.references)
        html = self._md.convert(text)
        if html.startswith("<p>") and html.endswith("</p>"):
            html = html[3:-4]
        return html

    def plain_text(self, text: str) -> str:
        """Return the visible text of ``text`` with markup removed."""
        return Markup(self.render(text)).striptags()


__all__ = ["InlineOnlyExtension", "InlineRenderer"]
