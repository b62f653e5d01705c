"""Shared markdown-it token utilities"""

import re


HEADING_MARKER_RE = re.compile(r'^\s{0,3}(#{1,6})(?:\s|$)')


def heading_level(token) -> int | None:
    """Return the heading level (1-6) for a heading_open token, else None."""
    if token.type == 'heading_open' and token.tag and token.tag[0] == 'h' and token.tag[1:].isdigit():
        return int(token.tag[1:])
    return None


def heading_title(tokens: list, i: int) -> str:
    """Return the inline text of the heading opened at tokens[i]."""
    inline = tokens[i + 1] if i + 1 < len(tokens) else None
    if inline is None or inline.type != 'inline':
        return ''
    return inline.content.strip()


def marker_level(line: str) -> int | None:
    """ATX heading level of a raw source line ('### Foo' -> 3), else None."""
    m = HEADING_MARKER_RE.match(line)
    return len(m.group(1)) if m else None
