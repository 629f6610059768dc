"""Load and validate site configuration YAML for blog builds.

This subpackage parses the project's ``site.yaml`` file, resolves content,
layout, and output directories relative to the file, applies build defaults,
and produces a :class:`SiteConfig` that the site builder consumes. The
primary entry point is :func:`load_site_config`.

Examples
--------
>>> from pathlib import Path
>>> from blog_pages.config import load_site_config
>>> site = load_site_config(Path("site.yaml"))  # doctest: +SKIP
>>> site.output_dir  # doctest: +SKIP
PosixPath('/srv/blog/public')
"""

from .loader import build_site_config, load_site_config
from .models import SiteConfig, SiteConfigError, SiteMetadata

__all__ = [
    "SiteConfig",
    "SiteConfigError",
    "SiteMetadata",
    "build_site_config",
    "load_site_config",
]
