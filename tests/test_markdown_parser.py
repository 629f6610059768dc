"""Unit tests for line-prefix block classification.

The parser turns a Markdown body into typed block dataclasses. These tests
pin the recognition rules for every block kind, the ordered-list numbering
behaviour, literal fenced code, and the restartable ``BlockStream`` view.
"""

from __future__ import annotations

import types

import pytest

from blog_pages.markdown_parser import (
    BlockQuote,
    BlockStream,
    CodeBlock,
    Heading,
    HorizontalRule,
    Image,
    LinkReference,
    ListBlock,
    ListItem,
    Paragraph,
    RawHtml,
    Table,
    iter_blocks,
)


def _blocks(text: str) -> list[object]:
    return list(iter_blocks(text))


def test_heading_line_yields_level_and_text() -> None:
    """``### Title`` is a level-three heading titled ``Title``."""
    assert _blocks("### Title") == [Heading(level=3, text="Title")]


@pytest.mark.parametrize("level", range(1, 7))
def test_heading_levels(level: int) -> None:
    """One to six hashes map directly onto heading levels."""
    assert _blocks(f"{'#' * level} Heading #{level}\n") == [
        Heading(level=level, text=f"Heading #{level}")
    ]


@pytest.mark.parametrize("text", ["####### Seven", "#NoSpace"])
def test_non_headings_fall_back_to_paragraphs(text: str) -> None:
    """Seven hashes or a missing space do not start a heading."""
    assert _blocks(text) == [Paragraph(text=text)]


def test_closing_hashes_are_dropped() -> None:
    """A closing hash sequence is not part of the heading text."""
    assert _blocks("## Setup ##") == [Heading(level=2, text="Setup")]


def test_ordered_items_are_numbered_sequentially() -> None:
    """Repeated ``1.`` markers still count 1, 2, 3, 4."""
    (block,) = _blocks("1. one\n1. two\n1. three\n1. four\n")
    assert isinstance(block, ListBlock)
    assert block.ordered
    assert [item.ordinal for item in block.items] == [1, 2, 3, 4]
    assert [item.text for item in block.items] == ["one", "two", "three", "four"]


def test_ordered_items_start_at_first_literal_number() -> None:
    """Numbering continues from the first item regardless of later digits."""
    (block,) = _blocks("3. c\n9. d\n1. e\n")
    assert [item.ordinal for item in block.items] == [3, 4, 5]


def test_bullet_nesting_follows_indentation() -> None:
    """Every two spaces of indentation nests one level deeper."""
    (block,) = _blocks("- a\n  - b\n    - c\n* d\n+ e\n")
    assert isinstance(block, ListBlock)
    assert not block.ordered
    assert [(item.text, item.depth) for item in block.items] == [
        ("a", 0),
        ("b", 1),
        ("c", 2),
        ("d", 0),
        ("e", 0),
    ]


def test_nesting_never_skips_levels() -> None:
    """Deep indentation only nests one level below the previous item."""
    (block,) = _blocks("- a\n        - b\n  - c\n")
    assert [item.depth for item in block.items] == [0, 1, 1]


def test_nested_ordered_list_restarts_numbering() -> None:
    """A numbered sublist counts independently of its parent list."""
    (block,) = _blocks("- a\n  1. x\n  1. y\n- b\n  1. z\n")
    assert [
        (item.text, item.depth, item.ordered, item.ordinal) for item in block.items
    ] == [
        ("a", 0, False, 1),
        ("x", 1, True, 1),
        ("y", 1, True, 2),
        ("b", 0, False, 2),
        ("z", 1, True, 1),
    ]


def test_indented_lines_continue_the_previous_item() -> None:
    """Indented non-item lines are appended to the item above them."""
    (block,) = _blocks("- first line\n  wraps here\n- second\n")
    assert [item.text for item in block.items] == ["first line\nwraps here", "second"]


def test_switching_list_kind_starts_a_new_list() -> None:
    """Top-level bullets followed by numbers become two list blocks."""
    blocks = _blocks("- a\n- b\n1. c\n")
    assert [type(block) for block in blocks] == [ListBlock, ListBlock]
    assert [block.ordered for block in blocks] == [False, True]


def test_fenced_code_is_never_reparsed() -> None:
    """Markdown syntax inside a fence is kept as literal code."""
    text = "```python\n### Title\n- not a list\n```\n# After\n"
    assert _blocks(text) == [
        CodeBlock(code="### Title\n- not a list\n", language="python"),
        Heading(level=1, text="After"),
    ]


def test_unterminated_fence_runs_to_end_of_document() -> None:
    """A missing closing fence swallows the rest of the body."""
    assert _blocks("intro\n\n```\nx\n\n# y") == [
        Paragraph(text="intro"),
        CodeBlock(code="x\n\n# y\n", language=None),
    ]


def test_indented_fence_drops_labels_and_indentation() -> None:
    """Fences nested under list items keep their language but lose indent."""
    text = "- **Example**\n\n  ```rust,no_run\n  fn main() {}\n  ```\n"
    blocks = _blocks(text)
    assert isinstance(blocks[0], ListBlock)
    assert blocks[1] == CodeBlock(code="fn main() {}\n", language="rust")


def test_deeply_indented_fence_is_still_code() -> None:
    """A fence under a second-level item stays literal at any indentation."""
    text = "- a\n  - b\n\n    ```\n    - not an item\n    ### not a heading\n    ```\n"
    blocks = _blocks(text)
    assert isinstance(blocks[0], ListBlock)
    assert blocks[1:] == [
        CodeBlock(code="- not an item\n### not a heading\n", language=None)
    ]


def test_indented_fence_ends_list_without_blank_line() -> None:
    """An indented fence directly under an item is not item text."""
    blocks = _blocks("- step\n      ```sh\n      ls\n      ```\n")
    assert blocks[0] == ListBlock(
        ordered=False,
        items=(ListItem(text="step", depth=0, ordered=False, ordinal=1),),
    )
    assert blocks[1] == CodeBlock(code="ls\n", language="sh")


def test_block_quote_collects_consecutive_marker_lines() -> None:
    """Quote lines, including bare ``>`` lines, form one block."""
    assert _blocks("> first\n>\n> second\nafter\n") == [
        BlockQuote(markdown="first\n\nsecond\n"),
        Paragraph(text="after"),
    ]


def test_table_with_alignment_and_ragged_rows() -> None:
    """Rows keep their own cell counts; alignments come from the marker row."""
    text = (
        "| Tool | Speed | Notes |\n"
        "|:---|:---:|---:|\n"
        "| mock | fast |\n"
        "| docker | slow | real | extra |\n"
    )
    assert _blocks(text) == [
        Table(
            header=("Tool", "Speed", "Notes"),
            alignments=("left", "center", "right"),
            rows=(("mock", "fast"), ("docker", "slow", "real", "extra")),
        )
    ]


def test_pipe_line_without_alignment_row_is_a_paragraph() -> None:
    """A lone pipe row is ordinary text."""
    assert _blocks("a | b\nc | d\n") == [Paragraph(text="a | b\nc | d")]


@pytest.mark.parametrize("rule", ["***", "---", "___", "*****"])
def test_horizontal_rules(rule: str) -> None:
    """Three or more repeated rule characters make a horizontal rule."""
    assert _blocks(f"above\n\n{rule}\n\nbelow") == [
        Paragraph(text="above"),
        HorizontalRule(),
        Paragraph(text="below"),
    ]


def test_image_line() -> None:
    """A standalone image line carries alt text, URL, and title."""
    assert _blocks('![Docker logo](https://example.com/docker.png "Docker")') == [
        Image(alt="Docker logo", url="https://example.com/docker.png", title="Docker")
    ]


def test_image_with_trailing_text_is_a_paragraph() -> None:
    """Images sharing a line with text stay inline."""
    text = "![icon](icon.png) and words"
    assert _blocks(text) == [Paragraph(text=text)]


def test_raw_html_is_passed_through() -> None:
    """Definition lists written as HTML survive verbatim."""
    text = "<dl>\n  <dt>Fixture</dt>\n  <dd>Shared setup.</dd>\n</dl>\n\nAfter."
    assert _blocks(text) == [
        RawHtml(html="<dl>\n  <dt>Fixture</dt>\n  <dd>Shared setup.</dd>\n</dl>"),
        Paragraph(text="After."),
    ]


def test_raw_html_run_stops_at_other_blocks() -> None:
    """Lines opening a heading, list, or fence end an HTML run."""
    assert _blocks("<div>x</div>\n# Title\n") == [
        RawHtml(html="<div>x</div>"),
        Heading(level=1, text="Title"),
    ]
    blocks = _blocks("<p>intro</p>\n- item\n```\ncode\n```\n")
    assert blocks[0] == RawHtml(html="<p>intro</p>")
    assert isinstance(blocks[1], ListBlock)
    assert blocks[2] == CodeBlock(code="code\n", language=None)


def test_raw_html_keeps_plain_text_lines() -> None:
    """Text between tags belongs to the HTML run."""
    text = "<details>\n<summary>More</summary>\nHidden text.\n</details>\n"
    assert _blocks(text) == [
        RawHtml(html="<details>\n<summary>More</summary>\nHidden text.\n</details>")
    ]


@pytest.mark.parametrize("text", ["< 5 is small", "<https://example.com/post>"])
def test_angle_bracket_lines_that_are_not_tags(text: str) -> None:
    """Comparisons and autolinks start paragraphs, not raw HTML."""
    assert _blocks(text) == [Paragraph(text=text)]


def test_link_reference_definitions() -> None:
    """``[label]: url`` lines become reference definitions."""
    assert _blocks('[repo]: https://example.com/repo "Repository"\n') == [
        LinkReference(label="repo", url="https://example.com/repo", title="Repository")
    ]


def test_paragraph_lines_join_until_blank_line() -> None:
    """Consecutive text lines belong to one paragraph; blank lines split."""
    assert _blocks("one\ntwo\n\nthree\n# Four") == [
        Paragraph(text="one\ntwo"),
        Paragraph(text="three"),
        Heading(level=1, text="Four"),
    ]


def test_iter_blocks_is_lazy() -> None:
    """Blocks are produced on demand."""
    blocks = iter_blocks("# One\n\n# Two\n")
    assert isinstance(blocks, types.GeneratorType)
    assert next(blocks) == Heading(level=1, text="One")


def test_block_stream_is_restartable() -> None:
    """Iterating a stream twice yields equal block sequences."""
    stream = BlockStream("# A\n\ntext\n\n- x\n- y\n")
    assert list(stream) == list(stream)
    assert stream.first_heading() == Heading(level=1, text="A")


def test_link_references_include_quoted_definitions() -> None:
    """References are collected case-insensitively, quotes included."""
    stream = BlockStream("[Home]: /\n\n> [docs]: https://example.com/docs\n")
    references = stream.link_references()
    assert sorted(references) == ["docs", "home"]
    assert references["home"].url == "/"
