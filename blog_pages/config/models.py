"""Typed dataclasses describing blog site configuration structures."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

from blog_pages._constants import DEFAULT_LAYOUT


class SiteConfigError(ValueError):
    """Raised when the site configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class SiteMetadata:
    """Site-wide values exposed to layouts as ``site``."""

    title: str = ""
    author: str = ""
    url: str = ""
    description: str = ""
    language: str = "en"


@dc.dataclass(slots=True)
class SiteConfig:
    """A fully resolved build configuration sourced from YAML config."""

    content_dir: Path
    output_dir: Path
    layouts_dir: Path | None = None
    default_layout: str = DEFAULT_LAYOUT
    pygments_style: str = "monokai"
    include_drafts: bool = False
    site: SiteMetadata = dc.field(default_factory=SiteMetadata)

    def with_overrides(
        self,
        *,
        output_dir: Path | None = None,
        include_drafts: bool | None = None,
    ) -> SiteConfig:
        """Return a copy with command-line overrides applied."""
        return dc.replace(
            self,
            output_dir=output_dir if output_dir is not None else self.output_dir,
            include_drafts=(
                include_drafts if include_drafts is not None else self.include_drafts
            ),
        )


__all__ = ["SiteConfig", "SiteConfigError", "SiteMetadata"]
