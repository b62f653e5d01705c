"""Splice replacement text into a located section, leaving the rest of the document intact"""

from docpatch.core.models import SectionMatch
from docpatch.core.parse import make_parser, split_lines
from docpatch.core.utils.tokens import marker_level
from docpatch.errors import EmptySuggestion, SectionNotFound


SPLICE_MODES = ('range', 'heading')
FENCE_PREFIXES = ('```', '~~~')


def replacement_lines(replacement: str, preset: str = 'gfm-like') -> list[str]:
    """Parse replacement independently and return its lines without leading/trailing blank lines.

    Raises EmptySuggestion when nothing parseable remains.
    """
    lines = split_lines(replacement or '')
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines or not make_parser(preset).parse(''.join(lines)):
        raise EmptySuggestion("the suggested section is empty")
    return lines


def _range_bounds(lines: list[str], match: SectionMatch) -> tuple[int, int]:
    """Use the captured line range after checking the heading is still where it was."""
    if match.start >= len(lines) or lines[match.start].strip() != match.heading_line.strip():
        raise SectionNotFound(f"'{match.heading_line.strip()}' is no longer at line {match.start + 1}")
    return match.start, min(match.end, len(lines))


def _unfenced(lines: list[str]):
    """Yield (index, line) for lines outside fenced code blocks; fence delimiters are skipped."""
    in_fence = False
    for i, line in enumerate(lines):
        if line.lstrip().startswith(FENCE_PREFIXES):
            in_fence = not in_fence
            continue
        if not in_fence:
            yield i, line


def _heading_bounds(lines: list[str], match: SectionMatch) -> tuple[int, int]:
    """Find the heading line by trimmed equality; stop at the next heading of depth <= its own.

    Lines inside fenced code are never taken as the heading or as the end of the section.
    """
    target = match.heading_line.strip()
    level = match.level or marker_level(target) or 6

    start = None
    for i, line in _unfenced(lines):
        if start is None:
            if line.strip() == target:
                start = i
            continue
        found = marker_level(line)
        if found is not None and found <= level:
            return start, i
    if start is None:
        raise SectionNotFound(f"'{target}' is no longer in the document")
    return start, len(lines)


def splice(
    content: str,
    match: SectionMatch,
    replacement: str,
    mode: str = 'range',
    preset: str = 'gfm-like',
    ) -> str:
    """Replace the matched section of content with replacement.

    Lines outside the section are kept byte-for-byte, as is the blank-line
    run that separated the section from what follows. Splicing a section's
    own text back in returns the original content.
    """
    if mode not in SPLICE_MODES:
        raise ValueError(f"Unknown splice mode '{mode}'; expected one of {SPLICE_MODES}")

    lines = split_lines(content)
    new = replacement_lines(replacement, preset)

    if match.whole_document:
        start, end = 0, len(lines)
    elif mode == 'range':
        start, end = _range_bounds(lines, match)
    else:
        start, end = _heading_bounds(lines, match)

    body_end = end
    while body_end > start and not lines[body_end - 1].strip():
        body_end -= 1
    tail = lines[body_end:end]

    needs_newline = body_end > start and lines[body_end - 1].endswith('\n')
    if (needs_newline or tail) and not new[-1].endswith('\n'):
        new[-1] += '\n'

    return ''.join(lines[:start] + new + tail + lines[end:])
