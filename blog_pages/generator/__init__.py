"""Utilities for rendering, composing, and generating blog pages."""

from .inline import InlineRenderer
from .layouts import (
    InvalidLayoutError,
    LayoutError,
    LayoutNotFoundError,
    LayoutRegistry,
)
from .link_rewriter import RelativeLinkExtension, RelativeLinkRewriter
from .models import BuildReport, Document
from .page_generator import SiteBuilder, discover_documents
from .renderer import HtmlContentRenderer

__all__ = [
    "BuildReport",
    "Document",
    "HtmlContentRenderer",
    "InlineRenderer",
    "InvalidLayoutError",
    "LayoutError",
    "LayoutNotFoundError",
    "LayoutRegistry",
    "RelativeLinkExtension",
    "RelativeLinkRewriter",
    "SiteBuilder",
    "discover_documents",
]
