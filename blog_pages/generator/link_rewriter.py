"""Helpers for rewriting relative Markdown links to generated HTML pages."""

from __future__ import annotations

import collections.abc as cabc
import posixpath
import typing as typ
from urllib.parse import urlsplit, urlunsplit

from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor

from blog_pages._constants import MARKDOWN_SUFFIXES, OUTPUT_SUFFIX

if typ.TYPE_CHECKING:
    from xml.etree.ElementTree import Element

    from markdown import Markdown
else:  # pragma: no cover - type-checking fallback
    Markdown = typ.Any
    Element = typ.Any

_EXTERNAL_PREFIXES = ("http://", "https://", "mailto:", "tel:", "data:", "javascript:")


class RelativeLinkRewriter:
    """Rewrite links between Markdown sources to their rendered pages.

    Articles link to one another by source path (``./other-post.md#setup``).
    The builder mirrors the content tree into the output directory, so the
    relative location is preserved and only the suffix needs to change.
    Absolute URLs, site-rooted paths, protocol-relative links, and bare
    fragments are left alone.
    """

    def __init__(
        self,
        source_suffixes: tuple[str, ...] = MARKDOWN_SUFFIXES,
        output_suffix: str = OUTPUT_SUFFIX,
    ) -> None:
        self.source_suffixes = source_suffixes
        self.output_suffix = output_suffix

    def __call__(self, target: str) -> str:
        """Return the rewritten target, or ``target`` unchanged."""
        return self._rewrite(target) or target

    def _rewrite(self, target: str | None) -> str | None:
        """Rewrite a relative Markdown target into its HTML counterpart."""
        if not target:
            return None

        lower = target.lower()
        invalid = lower.startswith(_EXTERNAL_PREFIXES)
        if target.startswith(("#", "//")) or "://" in target:
            invalid = True

        parsed = None
        if not invalid:
            parsed = urlsplit(target)
            invalid = bool(
                parsed.scheme
                or parsed.netloc
                or not parsed.path
                or parsed.path.startswith("/")
            )

        if invalid or parsed is None:
            return None

        stem, suffix = posixpath.splitext(parsed.path)
        if suffix.lower() not in self.source_suffixes:
            return None

        path = f"{stem}{self.output_suffix}"
        return urlunsplit(("", "", path, parsed.query, parsed.fragment))


class RelativeLinkExtension(Extension):
    """Apply a link rewriter to every anchor in a ``markdown.Markdown`` tree."""

    def __init__(self, rewriter: cabc.Callable[[str], str]) -> None:
        super().__init__()
        self.rewriter = rewriter

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        """Register the relative-link treeprocessor on the Markdown instance."""
        processor = RelativeLinkTreeprocessor(md, self.rewriter)
        md.treeprocessors.register(processor, "blog_relative_links", 15)


class RelativeLinkTreeprocessor(Treeprocessor):
    """Rewrite ``href`` attributes once inline links have been built."""

    def __init__(self, md: Markdown, rewriter: cabc.Callable[[str], str]) -> None:
        super().__init__(md)
        self.rewriter = rewriter

    def run(self, root: Element) -> Element:
        """Rewrite anchors in the parsed tree in place."""
        for element in root.iter("a"):
            href = element.get("href")
            if href:
                element.set("href", self.rewriter(href))
        return root


__all__ = ["RelativeLinkExtension", "RelativeLinkRewriter", "RelativeLinkTreeprocessor"]
