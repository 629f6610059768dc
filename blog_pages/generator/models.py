"""Shared dataclasses used by the page generation pipeline."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path, PurePosixPath

from blog_pages._constants import LAYOUT_KEY, OUTPUT_SUFFIX
from blog_pages.front_matter import parse_front_matter

_FALSE_STRINGS = frozenset({"0", "false", "no", "off"})
_TRUE_STRINGS = frozenset({"1", "true", "yes", "on"})


@dc.dataclass(frozen=True, slots=True)
class Document:
    """One content file, split into front matter and Markdown body.

    Attributes
    ----------
    source : PurePosixPath
        Path of the file relative to the content directory.
    front_matter : dict[str, str]
        Header mapping; empty when the file has no front matter.
    body : str
        Markdown following the front matter.
    """

    source: PurePosixPath
    front_matter: dict[str, str]
    body: str

    @classmethod
    def from_text(cls, source: str | PurePosixPath, text: str) -> Document:
        """Build a document from raw file contents."""
        parsed = parse_front_matter(text)
        return cls(
            source=PurePosixPath(source),
            front_matter=parsed.config,
            body=parsed.body,
        )

    @classmethod
    def load(cls, path: Path, content_dir: Path) -> Document:
        """Read ``path`` (UTF-8) and key it by its location under ``content_dir``."""
        relative = path.relative_to(content_dir).as_posix()
        return cls.from_text(relative, path.read_text(encoding="utf-8"))

    def layout(self, default: str) -> str:
        """Return the layout named in front matter, or ``default``."""
        return self.front_matter.get(LAYOUT_KEY) or default

    @property
    def title(self) -> str | None:
        """Title declared in front matter, if any."""
        return self.front_matter.get("title") or None

    @property
    def is_draft(self) -> bool:
        """Whether the front matter marks the document unpublished."""
        published = self.front_matter.get("published", "").strip().lower()
        draft = self.front_matter.get("draft", "").strip().lower()
        return published in _FALSE_STRINGS or draft in _TRUE_STRINGS

    @property
    def output_name(self) -> PurePosixPath:
        """Relative output path mirroring the source tree."""
        return self.source.with_suffix(OUTPUT_SUFFIX)


@dc.dataclass(slots=True)
class BuildReport:
    """Outcome of a site build.

    Attributes
    ----------
    written : list[Path]
        Output files, in the order their sources were discovered.
    failures : dict[PurePosixPath, str]
        Sources that produced no output, mapped to the reason.
    skipped : list[PurePosixPath]
        Draft sources left out of the build.
    """

    written: list[Path] = dc.field(default_factory=list)
    failures: dict[PurePosixPath, str] = dc.field(default_factory=dict)
    skipped: list[PurePosixPath] = dc.field(default_factory=list)

    @property
    def ok(self) -> bool:
        """Whether every selected document rendered."""
        return not self.failures


__all__ = ["BuildReport", "Document"]
