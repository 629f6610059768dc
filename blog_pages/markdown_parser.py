r"""Classify Markdown body text into an ordered stream of content blocks.

This module powers the blog renderer by splitting a document body into typed,
immutable block dataclasses that the HTML renderer consumes. Classification is
driven purely by line prefixes: the first rule that matches a line decides
which block starts there, and a blank line ends the current block.

Example
-------
>>> from blog_pages.markdown_parser import BlockStream, Heading
>>> blocks = list(BlockStream("### Title\nBody text\n"))
>>> blocks[0]
Heading(level=3, text='Title')
>>> blocks[1].text
'Body text'
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import re
import typing as typ

HEADING_PATTERN = re.compile(r"^(#{1,6})[ \t]+(.*)$")
CLOSING_HASHES_PATTERN = re.compile(r"[ \t]+#+[ \t]*$")
QUOTE_PATTERN = re.compile(r"^ {0,3}>")
FENCE_OPEN_PATTERN = re.compile(r"^([ \t]*)(`{3,})[ \t]*([A-Za-z0-9_+#.-]*)[^`]*$")
FENCE_CLOSE_PATTERN = re.compile(r"^[ \t]*(`{3,})[ \t]*$")
BULLET_PATTERN = re.compile(r"^([ \t]*)([*+-])[ \t]+(.*)$")
ORDERED_PATTERN = re.compile(r"^([ \t]*)(\d{1,9})\.[ \t]+(.*)$")
RULE_PATTERN = re.compile(r"^ {0,3}([*_-])\1{2,}[ \t]*$")
ALIGNMENT_CELL_PATTERN = re.compile(r"^:?-+:?$")
IMAGE_PATTERN = re.compile(
    r"^!\[(?P<alt>[^\]]*)\]\(\s*(?P<url>[^\s)]+)(?:\s+\"(?P<title>[^\"]*)\")?\s*\)\s*$"
)
LINK_REFERENCE_PATTERN = re.compile(
    r"^ {0,3}\[(?P<label>[^\]^][^\]]*)\]:\s*<?(?P<url>[^\s>]+)>?"
    r"(?:\s+[\"'(](?P<title>[^\"')]*)[\"')])?\s*$"
)
HTML_START_PATTERN = re.compile(r"^ {0,3}<(?:!--|/?[A-Za-z][A-Za-z0-9-]*(?=[\s/>]|$))")
UNESCAPED_PIPE_PATTERN = re.compile(r"(?<!\\)\|")

Alignment = typ.Literal["left", "center", "right"] | None


@dc.dataclass(frozen=True, slots=True)
class Heading:
    """Heading of ``level`` 1-6 with its inline text."""

    level: int
    text: str


@dc.dataclass(frozen=True, slots=True)
class Paragraph:
    """Run of plain text lines joined with newlines."""

    text: str


@dc.dataclass(frozen=True, slots=True)
class BlockQuote:
    """Quoted span; ``markdown`` is the quote body with markers removed."""

    markdown: str


@dc.dataclass(frozen=True, slots=True)
class CodeBlock:
    """Fenced code, kept literal.

    Attributes
    ----------
    code : str
        Lines between the fences, newline terminated.
    language : str or None
        Language tag from the opening fence, if any.
    """

    code: str
    language: str | None = None


@dc.dataclass(frozen=True, slots=True)
class ListItem:
    """Single list entry.

    Attributes
    ----------
    text : str
        Inline Markdown for the item, continuation lines joined by newlines.
    depth : int
        Nesting level, ``0`` for top-level items.
    ordered : bool
        Whether the item came from a numbered line.
    ordinal : int
        Sequential position among its siblings; numbered lists start at the
        first item's literal number and count up from there.
    """

    text: str
    depth: int
    ordered: bool
    ordinal: int


@dc.dataclass(frozen=True, slots=True)
class ListBlock:
    """Flat run of list items; nesting is carried by ``ListItem.depth``."""

    ordered: bool
    items: tuple[ListItem, ...]


@dc.dataclass(frozen=True, slots=True)
class Table:
    """Pipe table with a header row, per-column alignment, and data rows."""

    header: tuple[str, ...]
    alignments: tuple[Alignment, ...]
    rows: tuple[tuple[str, ...], ...]


@dc.dataclass(frozen=True, slots=True)
class HorizontalRule:
    """Thematic break."""


@dc.dataclass(frozen=True, slots=True)
class RawHtml:
    """HTML lines passed through verbatim."""

    html: str


@dc.dataclass(frozen=True, slots=True)
class Image:
    """Standalone image line."""

    alt: str
    url: str
    title: str | None = None


@dc.dataclass(frozen=True, slots=True)
class LinkReference:
    """``[label]: url`` definition used by reference-style links."""

    label: str
    url: str
    title: str | None = None


Block = (
    Heading
    | Paragraph
    | BlockQuote
    | CodeBlock
    | ListBlock
    | Table
    | HorizontalRule
    | RawHtml
    | Image
    | LinkReference
)


def _is_blank(line: str) -> bool:
    return not line.strip()


def _indent_width(prefix: str) -> int:
    return len(prefix.expandtabs(4))


def _split_cells(line: str) -> tuple[str, ...]:
    """Split a pipe-delimited row into stripped cells."""
    row = line.strip()
    if row.startswith("|"):
        row = row[1:]
    if row.endswith("|") and not row.endswith("\\|"):
        row = row[:-1]
    return tuple(
        cell.strip().replace("\\|", "|") for cell in UNESCAPED_PIPE_PATTERN.split(row)
    )


def _is_table_row(line: str) -> bool:
    return "|" in line and not _is_blank(line)


def _parse_alignments(line: str) -> tuple[Alignment, ...] | None:
    """Return column alignments for an alignment row, or ``None``."""
    if "-" not in line or "|" not in line:
        return None
    cells = _split_cells(line)
    alignments: list[Alignment] = []
    for cell in cells:
        if not ALIGNMENT_CELL_PATTERN.match(cell):
            return None
        if cell.startswith(":") and cell.endswith(":"):
            alignments.append("center")
        elif cell.endswith(":"):
            alignments.append("right")
        elif cell.startswith(":"):
            alignments.append("left")
        else:
            alignments.append(None)
    return tuple(alignments)


def _starts_table(lines: list[str], index: int) -> bool:
    if index + 1 >= len(lines) or not _is_table_row(lines[index]):
        return False
    return _parse_alignments(lines[index + 1]) is not None


def _list_match(line: str) -> re.Match[str] | None:
    return BULLET_PATTERN.match(line) or ORDERED_PATTERN.match(line)


def _starts_block(lines: list[str], index: int) -> bool:
    """Return whether ``lines[index]`` opens a non-paragraph block."""
    line = lines[index]
    return bool(
        HEADING_PATTERN.match(line)
        or QUOTE_PATTERN.match(line)
        or FENCE_OPEN_PATTERN.match(line)
        or RULE_PATTERN.match(line)
        or _list_match(line)
        or _starts_table(lines, index)
        or IMAGE_PATTERN.match(line)
        or LINK_REFERENCE_PATTERN.match(line)
        or HTML_START_PATTERN.match(line)
    )


def _consume_quote(lines: list[str], index: int) -> tuple[BlockQuote, int]:
    body: list[str] = []
    while index < len(lines) and QUOTE_PATTERN.match(lines[index]):
        content = lines[index].lstrip()[1:]
        if content.startswith(" "):
            content = content[1:]
        body.append(content)
        index += 1
    return BlockQuote(markdown="\n".join(body) + "\n"), index


def _consume_fence(
    lines: list[str], index: int, match: re.Match[str]
) -> tuple[CodeBlock, int]:
    indent = len(match.group(1))
    fence_length = len(match.group(2))
    language = match.group(3) or None
    index += 1
    code: list[str] = []
    while index < len(lines):
        closing = FENCE_CLOSE_PATTERN.match(lines[index])
        if closing and len(closing.group(1)) >= fence_length:
            index += 1
            break
        line = lines[index]
        strip = min(indent, len(line) - len(line.lstrip(" \t")))
        code.append(line[strip:])
        index += 1
    text = "\n".join(code)
    if code:
        text += "\n"
    return CodeBlock(code=text, language=language), index


def _consume_list(lines: list[str], index: int) -> tuple[ListBlock, int]:
    """Collect consecutive item lines into a single ``ListBlock``.

    Depth is derived from indentation (two spaces per level) but never jumps
    more than one level below the previous item. Ordinals are tracked per
    depth and restart whenever a level is re-entered or switches kind.
    """
    first = _list_match(lines[index])
    if first is None:  # pragma: no cover - caller checks the prefix
        msg = "list block must start on an item line"
        raise ValueError(msg)
    block_ordered = first.re is ORDERED_PATTERN

    items: list[dict[str, typ.Any]] = []
    counters: dict[int, int] = {}
    kinds: dict[int, bool] = {}
    previous_depth = -1
    while index < len(lines):
        line = lines[index]
        if _is_blank(line):
            break
        match = _list_match(line)
        if match is None:
            if items and line[:1] in (" ", "\t") and not FENCE_OPEN_PATTERN.match(line):
                items[-1]["text"] += "\n" + line.strip()
                index += 1
                continue
            break

        ordered = match.re is ORDERED_PATTERN
        depth = min(_indent_width(match.group(1)) // 2, previous_depth + 1)
        if depth == 0 and ordered != block_ordered:
            break
        for stale in [level for level in counters if level > depth]:
            del counters[stale]
            del kinds[stale]
        if depth not in counters or kinds[depth] != ordered:
            counters[depth] = int(match.group(2)) if ordered else 1
            kinds[depth] = ordered
        items.append(
            {
                "text": match.group(3).strip(),
                "depth": depth,
                "ordered": ordered,
                "ordinal": counters[depth],
            }
        )
        counters[depth] += 1
        previous_depth = depth
        index += 1

    return (
        ListBlock(
            ordered=block_ordered,
            items=tuple(ListItem(**item) for item in items),
        ),
        index,
    )


def _consume_table(lines: list[str], index: int) -> tuple[Table, int]:
    header = _split_cells(lines[index])
    alignments = _parse_alignments(lines[index + 1]) or ()
    index += 2
    rows: list[tuple[str, ...]] = []
    while index < len(lines) and _is_table_row(lines[index]):
        rows.append(_split_cells(lines[index]))
        index += 1
    return Table(header=header, alignments=alignments, rows=tuple(rows)), index


def _consume_html(lines: list[str], index: int) -> tuple[RawHtml, int]:
    """Collect an HTML run; any line opening another kind of block ends it."""
    chunk = [lines[index]]
    index += 1
    while index < len(lines) and not _is_blank(lines[index]):
        line = lines[index]
        if not HTML_START_PATTERN.match(line) and _starts_block(lines, index):
            break
        chunk.append(line)
        index += 1
    return RawHtml(html="\n".join(chunk)), index


def _paragraph_line(line: str) -> str:
    # Two trailing spaces mark a hard break; keep them for the inline pass.
    stripped = line.strip()
    return f"{stripped}  " if line.endswith("  ") else stripped


def _consume_paragraph(lines: list[str], index: int) -> tuple[Paragraph, int]:
    start = index
    index += 1
    while (
        index < len(lines)
        and not _is_blank(lines[index])
        and not _starts_block(lines, index)
    ):
        index += 1
    text = "\n".join(_paragraph_line(line) for line in lines[start:index])
    return Paragraph(text=text.rstrip()), index


def iter_blocks(markdown_text: str) -> cabc.Iterator[Block]:
    """Yield content blocks from ``markdown_text`` in source order.

    Parameters
    ----------
    markdown_text : str
        Markdown body with any front matter already removed.

    Yields
    ------
    Block
        One dataclass per recognised block. Blank lines produce nothing.
    """
    lines = markdown_text.splitlines()
    index = 0
    while index < len(lines):
        line = lines[index]
        if _is_blank(line):
            index += 1
            continue

        block: Block
        if heading := HEADING_PATTERN.match(line):
            text = CLOSING_HASHES_PATTERN.sub("", heading.group(2)).strip()
            block = Heading(level=len(heading.group(1)), text=text)
            index += 1
        elif QUOTE_PATTERN.match(line):
            block, index = _consume_quote(lines, index)
        elif fence := FENCE_OPEN_PATTERN.match(line):
            block, index = _consume_fence(lines, index, fence)
        elif RULE_PATTERN.match(line):
            block = HorizontalRule()
            index += 1
        elif _list_match(line):
            block, index = _consume_list(lines, index)
        elif _starts_table(lines, index):
            block, index = _consume_table(lines, index)
        elif image := IMAGE_PATTERN.match(line):
            block = Image(
                alt=image.group("alt"),
                url=image.group("url"),
                title=image.group("title"),
            )
            index += 1
        elif reference := LINK_REFERENCE_PATTERN.match(line):
            block = LinkReference(
                label=reference.group("label").strip(),
                url=reference.group("url"),
                title=reference.group("title"),
            )
            index += 1
        elif HTML_START_PATTERN.match(line):
            block, index = _consume_html(lines, index)
        else:
            block, index = _consume_paragraph(lines, index)
        yield block


class BlockStream:
    """Restartable, lazily parsed view over a Markdown body.

    Each iteration re-parses the immutable source text, so the stream can be
    walked any number of times and always yields equal blocks.
    """

    __slots__ = ("source",)

    def __init__(self, source: str) -> None:
        self.source = source

    def __iter__(self) -> cabc.Iterator[Block]:
        return iter_blocks(self.source)

    def link_references(self) -> dict[str, LinkReference]:
        """Return reference definitions keyed by case-folded label.

        Definitions nested inside block quotes are included; the first
        definition of a label wins.
        """
        references: dict[str, LinkReference] = {}
        for block in self:
            match block:
                case LinkReference():
                    references.setdefault(block.label.casefold(), block)
                case BlockQuote():
                    for key, value in BlockStream(block.markdown).link_references().items():
                        references.setdefault(key, value)
                case _:
                    continue
        return references

    def first_heading(self) -> Heading | None:
        """Return the first heading in the document, if any."""
        return next((block for block in self if isinstance(block, Heading)), None)


__all__ = [
    "Alignment",
    "Block",
    "BlockQuote",
    "BlockStream",
    "CodeBlock",
    "Heading",
    "HorizontalRule",
    "Image",
    "LinkReference",
    "ListBlock",
    "ListItem",
    "Paragraph",
    "RawHtml",
    "Table",
    "iter_blocks",
]
