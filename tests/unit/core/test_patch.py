"""Unit tests for core/patch.py"""

import pytest

from docpatch.core.models import SectionMatch
from docpatch.core.patch import replacement_lines, splice
from docpatch.core.parse import split_lines
from docpatch.core.sections import locate_section, parse_blocks, section_text
from docpatch.errors import EmptySuggestion, SectionNotFound


NEW_SIZING = "## Sizing\n\nSet the width in rem:\n\n```css\nwidth: 6rem;\n```"


@pytest.mark.parametrize("mode", ["range", "heading"])
def test_splice_own_text_round_trips(button_md, mode):
    """Splicing every section's unmodified text back in reproduces the document."""
    for block in parse_blocks(button_md):
        match = SectionMatch.from_block(block)
        assert splice(button_md, match, section_text(button_md, match), mode) == button_md


@pytest.mark.parametrize("mode", ["range", "heading"])
def test_splice_changes_only_the_section(button_md, mode):
    """Everything before and after the matched range is byte-identical."""
    match = locate_section(button_md, "`## Sizing` fix the pixel example")
    result = splice(button_md, match, NEW_SIZING, mode)

    old, new = split_lines(button_md), split_lines(result)
    assert new[:match.start] == old[:match.start]
    tail = old[match.end:]
    assert new[-len(tail):] == tail
    assert "width: 6rem;" in result
    assert "100px" not in result


def test_splice_keeps_blank_separator(button_md):
    """A replacement without trailing newline still ends in the section's blank line."""
    match = locate_section(button_md, "`## Sizing`")
    result = splice(button_md, match, NEW_SIZING)
    assert "```\n\n## Accessibility\n" in result


def test_splice_then_extract_round_trip(button_md):
    match = locate_section(button_md, "`## Sizing`")
    result = splice(button_md, match, NEW_SIZING + "\n\n\n")
    again = locate_section(result, "`## Sizing`")
    assert section_text(result, again).strip() == NEW_SIZING


def test_splice_range_detects_moved_heading(button_md):
    """range mode refuses to splice when the heading is no longer at the captured line."""
    match = locate_section(button_md, "`## Sizing`")
    moved = button_md.replace("# Button\n", "# Button\n\nA new intro line.\n", 1)
    with pytest.raises(SectionNotFound):
        splice(moved, match, NEW_SIZING, mode="range")


def test_splice_heading_follows_moved_heading(button_md):
    """heading mode re-finds the heading line by trimmed equality."""
    match = locate_section(button_md, "`## Sizing`")
    moved = button_md.replace("# Button\n", "# Button\n\nA new intro line.\n", 1)
    result = splice(moved, match, NEW_SIZING, mode="heading")
    assert "A new intro line." in result
    assert "width: 6rem;" in result
    assert "## Accessibility\n\nAlways provide a label.\n" in result


def test_splice_heading_missing(button_md):
    match = locate_section(button_md, "`## Sizing`")
    gone = button_md.replace("## Sizing\n", "## Dimensions\n")
    with pytest.raises(SectionNotFound):
        splice(gone, match, NEW_SIZING, mode="heading")


def test_splice_heading_mode_skips_fenced_markers(button_md):
    """The fenced '## Not a heading' line does not end the section in heading mode."""
    match = locate_section(button_md, "`## Sizing`")
    assert splice(button_md, match, NEW_SIZING, "heading") == splice(button_md, match, NEW_SIZING, "range")


GUIDE_WITH_SAMPLE = """\
# Guide

## Usage

```md
## Sizing
```

## Sizing

old body

## End

bye
"""


def test_splice_heading_ignores_fenced_copy_of_heading():
    """A fenced line identical to the heading is neither the section start nor its end."""
    match = locate_section(GUIDE_WITH_SAMPLE, "`## Sizing`")
    assert match.start == 8

    expected = GUIDE_WITH_SAMPLE.replace("old body", "new body")
    assert splice(GUIDE_WITH_SAMPLE, match, "## Sizing\n\nnew body\n", "heading") == expected
    assert splice(GUIDE_WITH_SAMPLE, match, "## Sizing\n\nnew body\n", "range") == expected


def test_splice_whole_document():
    content = "# A\n\nold text"
    match = SectionMatch(start=0, end=3)
    assert splice(content, match, "# A\n\nnew text") == "# A\n\nnew text"


def test_splice_last_section_without_trailing_newline():
    content = "# A\n\none\n\n## B\n\ntwo"
    match = locate_section(content, "`## B`")
    assert splice(content, match, "## B\n\nthree\n") == "# A\n\none\n\n## B\n\nthree\n"


@pytest.mark.parametrize("replacement", ["", "   ", "\n\n\n", None])
def test_splice_rejects_empty_replacement(button_md, replacement):
    match = locate_section(button_md, "`## Sizing`")
    with pytest.raises(EmptySuggestion):
        splice(button_md, match, replacement)


def test_replacement_lines_trims_blank_edges():
    assert replacement_lines("\n\n## X\n\nbody\n\n") == ["## X\n", "\n", "body\n"]


def test_splice_unknown_mode(button_md):
    match = locate_section(button_md, "`## Sizing`")
    with pytest.raises(ValueError):
        splice(button_md, match, NEW_SIZING, mode="ast")
