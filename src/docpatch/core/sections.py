"""Heading-delimited blocks and indicator-based section lookup"""

import logging
import re

from docpatch.core.models import Block, SectionMatch
from docpatch.core.parse import parse_tokens, split_lines
from docpatch.core.utils.tokens import heading_level, heading_title
from docpatch.errors import InvalidInput, MissingIndicator, SectionNotFound

logger = logging.getLogger(__name__)

BACKTICK_RE = re.compile(r'`([^`\n]+)`')
INDICATOR_HEADING_RE = re.compile(r"^(#{1,6})(?:\s+(.*))?$")
MODES = ('strict', 'permissive')
MIN_TITLE_LENGTH = 4


def extract_indicator(issue: str) -> str | None:
    """Return the first non-blank backtick-quoted token in the issue text, else None."""
    for m in BACKTICK_RE.finditer(issue or ''):
        if m.group(1).strip():
            return m.group(1).strip()
    return None


def parse_indicator(indicator: str) -> tuple[int | None, str]:
    """Split '## Sizing' into (2, 'Sizing'); a bare indicator has no level."""
    m = INDICATOR_HEADING_RE.match(indicator.strip())
    if m:
        return len(m.group(1)), (m.group(2) or "").strip().rstrip("#").strip()
    return None, indicator.strip()


def parse_blocks(content: str, max_nesting: int = 6, preset: str = 'gfm-like') -> list[Block]:
    """Return one Block per heading of level <= max_nesting, in document order.

    A block ends at the next heading of equal-or-shallower depth, or at the end
    of the document. Content before the first heading belongs to no block.
    """
    tokens, offset = parse_tokens(content, preset)
    lines = split_lines(content)

    heads = []
    for i, tok in enumerate(tokens):
        level = heading_level(tok)
        if level is None or level > max_nesting or not tok.map:
            continue
        heads.append((level, heading_title(tokens, i), tok.map[0] + offset))

    blocks = []
    for n, (level, title, start) in enumerate(heads):
        end = next((s for lvl, _, s in heads[n + 1:] if lvl <= level), len(lines))
        blocks.append(Block(
            heading=title,
            level=level,
            start=start,
            end=end,
            heading_line=lines[start].rstrip('\n'),
        ))
    return blocks


def _title_in_issue(blocks: list[Block], issue: str) -> Block | None:
    """First block whose heading text appears as whole words in the issue (case-insensitive).

    Titles shorter than MIN_TITLE_LENGTH (e.g. "API", "It") are never matched this way.
    """
    for block in blocks:
        if len(block.heading) >= MIN_TITLE_LENGTH and re.search(rf'(?<!\w){re.escape(block.heading)}(?!\w)', issue, re.IGNORECASE):
            return block
    return None


def locate_section(
    content: str,
    issue: str,
    mode: str = 'strict',
    max_nesting: int = 6,
    preset: str = 'gfm-like',
    ) -> SectionMatch:
    """Find the section an issue targets.

    strict: a backtick indicator is required and matched case-sensitively.
    permissive: matching is case-insensitive; without an indicator the first
    heading whose title (at least MIN_TITLE_LENGTH characters) appears as whole
    words in the issue is used, else the whole document.
    An indicator that matches nothing is always SectionNotFound.
    """
    if mode not in MODES:
        raise ValueError(f"Unknown section mode '{mode}'; expected one of {MODES}")

    blocks = parse_blocks(content, max_nesting, preset)
    indicator = extract_indicator(issue)

    if indicator is None:
        if mode == 'strict':
            raise MissingIndicator("quote the section heading in backticks, e.g. `## Sizing`")
        block = _title_in_issue(blocks, issue)
        if block is not None:
            return SectionMatch.from_block(block)
        total = len(split_lines(content))
        if not content.strip():
            raise SectionNotFound("document is empty")
        logger.info("No section indicator; editing the whole document (%d lines)", total)
        return SectionMatch(start=0, end=total)

    level, title = parse_indicator(indicator)
    if not title:
        raise InvalidInput(f"empty section indicator `{indicator}`")

    fold = str.lower if mode == 'permissive' else str
    for block in blocks:
        if level is not None and block.level != level:
            continue
        if fold(title) in fold(block.heading):
            return SectionMatch.from_block(block)
    raise SectionNotFound(f"no heading matches `{indicator}`")


def section_text(content: str, match: SectionMatch) -> str:
    """Exact source text of the matched range."""
    return ''.join(split_lines(content)[match.start:match.end])
