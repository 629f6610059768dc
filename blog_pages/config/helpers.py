"""Utility helpers shared by the blog configuration loader."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from .models import SiteConfigError, SiteMetadata

_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_bool(value: object | None, *, default: bool = False) -> bool:
    """Interpret YAML booleans and their common string spellings."""
    match value:
        case None:
            return default
        case bool():
            return value
        case str() as text:
            return text.strip().lower() in _TRUE_STRINGS
        case _:
            return bool(value)


def _resolve_path(base_dir: Path, value: object | None, default: str) -> Path:
    """Resolve ``value`` (or ``default``) relative to the config directory."""
    path = Path(_optional_str(value) or default).expanduser()
    if path.is_absolute():
        return path
    return base_dir / path


def _require_mapping(
    raw: typ.Mapping[str, typ.Any], key: str
) -> typ.Mapping[str, typ.Any]:
    """Return ``raw[key]`` as a mapping, treating a missing section as empty."""
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        msg = f"Section '{key}' must be a mapping."
        raise SiteConfigError(msg)
    return value


def _build_site_metadata(payload: typ.Mapping[str, typ.Any]) -> SiteMetadata:
    """Build a SiteMetadata instance from the provided mapping payload."""
    base = SiteMetadata()
    return SiteMetadata(
        title=_optional_str(payload.get("title")) or base.title,
        author=_optional_str(payload.get("author")) or base.author,
        url=_optional_str(payload.get("url")) or base.url,
        description=_optional_str(payload.get("description")) or base.description,
        language=_optional_str(payload.get("language")) or base.language,
    )


__all__ = [
    "_build_site_metadata",
    "_coerce_bool",
    "_optional_str",
    "_require_mapping",
    "_resolve_path",
]
