"""Frontmatter separation, line splitting, and markdown-it tokenization"""

import re

from markdown_it import MarkdownIt


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = ('.md', '.mdx')


def make_parser(preset: str = 'gfm-like') -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name."""
    return MarkdownIt(preset, options_update={"linkify": False})


def split_lines(text: str) -> list[str]:
    """Split on '\\n' only, keeping line endings; ''.join(result) == text."""
    parts = text.split('\n')
    lines = [p + '\n' for p in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def split_frontmatter(text: str) -> tuple[int, str]:
    """Return (line_offset, body) with a leading YAML header removed.

    Headers are skipped, not parsed: a '---' closing line would otherwise
    read as a setext heading underline.
    """
    m = FRONTMATTER_RE.match(text)
    if m:
        return text[:m.end()].count('\n'), text[m.end():]
    return 0, text


def parse_tokens(content: str, preset: str = 'gfm-like') -> tuple[list, int]:
    """Tokenize the body of content; returns (tokens, line offset of the body)."""
    offset, body = split_frontmatter(content)
    return make_parser(preset).parse(body), offset
