r"""Split a content file into its front-matter mapping and Markdown body.

The header is a run of ``key: value`` lines fenced by ``---`` marker lines at
the very top of a document. Parsing is best-effort: malformed lines are kept
as opaque keys and a document without a complete header is returned
untouched.

Example
-------
>>> from blog_pages.front_matter import parse_front_matter
>>> parsed = parse_front_matter("---\nlayout: default\n---\n# Hello\n")
>>> parsed.config
{'layout': 'default'}
>>> parsed.body
'# Hello\n'
"""

from __future__ import annotations

import dataclasses as dc

from ._constants import FRONT_MATTER_MARKER

_QUOTES = ("'", '"')


@dc.dataclass(frozen=True, slots=True)
class FrontMatter:
    """Result of splitting a document into configuration and body.

    Attributes
    ----------
    config : dict[str, str]
        Header mapping; empty when the document carries no front matter.
    body : str
        Remaining Markdown text following the closing marker.
    """

    config: dict[str, str]
    body: str


def _is_marker(line: str) -> bool:
    return line.rstrip() == FRONT_MATTER_MARKER


def _unquote(value: str) -> str:
    """Drop a matching pair of surrounding quotes from ``value``."""
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def _parse_pairs(lines: list[str]) -> dict[str, str]:
    config: dict[str, str] = {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        key, sep, value = stripped.partition(":")
        if not sep:
            config[stripped] = ""
            continue
        config[key.strip()] = _unquote(value.strip())
    return config


def parse_front_matter(text: str) -> FrontMatter:
    """Return the front-matter mapping and body for ``text``.

    Parameters
    ----------
    text : str
        Raw file contents.

    Returns
    -------
    FrontMatter
        Parsed header mapping and the body text. When the first line is not
        the marker, or the header is never closed, the mapping is empty and
        the body is ``text`` verbatim.
    """
    lines = text.splitlines(keepends=True)
    if not lines or not _is_marker(lines[0]):
        return FrontMatter(config={}, body=text)

    for index in range(1, len(lines)):
        if _is_marker(lines[index]):
            header = lines[1:index]
            body = "".join(lines[index + 1 :])
            return FrontMatter(config=_parse_pairs(header), body=body)
    return FrontMatter(config={}, body=text)


__all__ = ["FrontMatter", "parse_front_matter"]
