"""Load site configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from blog_pages._constants import DEFAULT_LAYOUT

from .helpers import (
    _build_site_metadata,
    _coerce_bool,
    _optional_str,
    _require_mapping,
    _resolve_path,
)
from .models import SiteConfig, SiteConfigError

DEFAULT_CONTENT_DIR = "content"
DEFAULT_OUTPUT_DIR = "public"


def load_site_config(path: Path) -> SiteConfig:
    """Load the YAML configuration describing the blog build.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``site.yaml``). Relative directories inside the file resolve against
        the file's parent directory.

    Returns
    -------
    SiteConfig
        Parsed configuration with content, layout, and output locations,
        build defaults, and the ``site`` metadata block.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    SiteConfigError
        If the top-level structure or one of its sections is not a mapping.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from blog_pages.config import load_site_config
    >>> config = load_site_config(Path("site.yaml"))  # doctest: +SKIP
    >>> config.default_layout  # doctest: +SKIP
    'default'
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    return build_site_config(loaded, base_dir=path.resolve().parent)


def build_site_config(loaded: object, *, base_dir: Path) -> SiteConfig:
    """Build a SiteConfig from an already parsed YAML document."""
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise SiteConfigError(msg)
    raw: dict[str, typ.Any] = dict(loaded)
    defaults = _require_mapping(raw, "defaults")
    site = _build_site_metadata(_require_mapping(raw, "site"))

    layouts_value = _optional_str(raw.get("layouts_dir"))
    layouts_dir = _resolve_path(base_dir, layouts_value, "") if layouts_value else None

    return SiteConfig(
        content_dir=_resolve_path(base_dir, raw.get("content_dir"), DEFAULT_CONTENT_DIR),
        output_dir=_resolve_path(base_dir, raw.get("output_dir"), DEFAULT_OUTPUT_DIR),
        layouts_dir=layouts_dir,
        default_layout=_optional_str(defaults.get("layout")) or DEFAULT_LAYOUT,
        pygments_style=_optional_str(defaults.get("pygments_style")) or "monokai",
        include_drafts=_coerce_bool(raw.get("drafts")),
        site=site,
    )


__all__ = ["build_site_config", "load_site_config"]
