"""High-level orchestration for blog page generation.

This module walks the content directory, splits each Markdown file into front
matter and body, renders the body with :class:`HtmlContentRenderer`, wraps it
in the layout named by the front matter, and writes one HTML file per source
into the output directory, mirroring the content tree.

Every document renders independently. A document whose layout is missing or
broken is logged and reported and does not stop the rest of the build. Its
page from an earlier build is removed, as is the page of a document that has
since become a draft.

Example
-------
>>> from pathlib import Path
>>> from blog_pages.config import load_site_config
>>> from blog_pages.generator import SiteBuilder
>>> config = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> report = SiteBuilder(config).run()  # doctest: +SKIP
>>> report.written  # doctest: +SKIP
[PosixPath('public/index.html'), PosixPath('public/posts/testing.html')]
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

from markupsafe import Markup

from blog_pages._constants import MARKDOWN_SUFFIXES
from blog_pages.generator.inline import InlineRenderer
from blog_pages.generator.layouts import LayoutError, LayoutRegistry
from blog_pages.generator.link_rewriter import RelativeLinkRewriter
from blog_pages.generator.models import BuildReport, Document
from blog_pages.generator.renderer import HtmlContentRenderer
from blog_pages.markdown_parser import BlockStream

if typ.TYPE_CHECKING:
    from blog_pages.config import SiteConfig

logger = logging.getLogger(__name__)


def discover_documents(content_dir: Path) -> list[Path]:
    """Return Markdown sources under ``content_dir`` in a stable order.

    Files and directories whose names start with ``_`` or ``.`` are treated as
    private (partials, editor state) and skipped.
    """
    if not content_dir.is_dir():
        msg = f"Content directory '{content_dir}' not found."
        raise FileNotFoundError(msg)
    return sorted(
        path
        for path in content_dir.rglob("*")
        if path.is_file()
        and path.suffix.lower() in MARKDOWN_SUFFIXES
        and not any(
            part.startswith(("_", "."))
            for part in path.relative_to(content_dir).parts
        )
    )


def _remove_stale(output_path: Path) -> None:
    """Delete output left by an earlier build of a document that now has none."""
    if output_path.is_file():
        output_path.unlink()
        logger.debug("removed stale %s", output_path)


class SiteBuilder:
    """Render every content document into a layout-wrapped HTML page."""

    def __init__(
        self,
        site_config: SiteConfig,
        *,
        layouts: LayoutRegistry | None = None,
    ) -> None:
        """Initialize the builder with configuration and layout registry.

        Parameters
        ----------
        site_config : SiteConfig
            Resolved build configuration (content, layouts, and output paths).
        layouts : LayoutRegistry, optional
            Registry used to resolve layout names; defaults to one rooted at
            ``site_config.layouts_dir`` (or the bundled layouts).
        """
        self.config = site_config
        self.layouts = layouts or LayoutRegistry(site_config.layouts_dir)
        self.renderer = HtmlContentRenderer(
            site_config.pygments_style, link_rewriter=RelativeLinkRewriter()
        )
        self._pygments_css = Markup(self.renderer.stylesheet)

    def run(self) -> BuildReport:
        """Render all documents and write them under the output directory.

        Returns
        -------
        BuildReport
            Written paths, per-document failures, and skipped drafts.

        Notes
        -----
        Side effects include creating output directories and writing UTF-8
        HTML files, and deleting pages left over for documents that now fail
        or are skipped. Documents that fail are logged at warning level.
        """
        report = BuildReport()
        content_dir = self.config.content_dir
        out_dir = self.config.output_dir
        for path in discover_documents(content_dir):
            document = Document.load(path, content_dir)
            output_path = out_dir / document.output_name
            if document.is_draft and not self.config.include_drafts:
                logger.debug("skipping draft %s", document.source)
                _remove_stale(output_path)
                report.skipped.append(document.source)
                continue
            try:
                html = self.render_document(document)
            except LayoutError as exc:
                logger.warning("failed to render %s: %s", document.source, exc)
                _remove_stale(output_path)
                report.failures[document.source] = str(exc)
                continue
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(html, encoding="utf-8")
            logger.debug("wrote %s", output_path)
            report.written.append(output_path)
        return report

    def render_document(self, document: Document, *, layout: str | None = None) -> str:
        """Return the full HTML page for ``document``.

        Parameters
        ----------
        document : Document
            Parsed source document.
        layout : str, optional
            Layout override; defaults to the front-matter ``layout`` or the
            configured default layout.

        Raises
        ------
        LayoutError
            If the requested layout is missing or invalid.
        """
        layout_name = layout or document.layout(self.config.default_layout)
        # Resolve first so a missing layout fails before any rendering work.
        self.layouts.resolve(layout_name)
        stream = BlockStream(document.body)
        content = "\n".join(
            fragment for fragment in self.renderer.render_blocks(stream) if fragment
        )
        return self.layouts.compose(
            content,
            layout_name,
            page=document.front_matter,
            title=self._resolve_title(document, stream),
            site=self.config.site,
            pygments_css=self._pygments_css,
        )

    @staticmethod
    def _resolve_title(document: Document, stream: BlockStream) -> str:
        """Prefer the front-matter title, then the first heading, then the stem."""
        if document.title:
            return document.title
        heading = stream.first_heading()
        if heading is not None:
            return InlineRenderer().plain_text(heading.text)
        return document.source.stem.replace("-", " ").replace("_", " ").title()


__all__ = ["SiteBuilder", "discover_documents"]
