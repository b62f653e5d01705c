"""Canonical document paths and inbound request text splitting"""

import re
from urllib.parse import unquote, urlparse

from docpatch.errors import InvalidInput


EXTENSION_RE = re.compile(r'(\.mdx?)+$', re.IGNORECASE)
WHITESPACE_RE = re.compile(r'\s+')
SLASHES_RE = re.compile(r'/+')


def _strip_url(raw: str) -> str:
    """Return the path component of a full URL; anything else unchanged."""
    parsed = urlparse(raw)
    if parsed.scheme and parsed.netloc:
        return unquote(parsed.path)
    return raw


def normalize(raw: str) -> str:
    """Normalize user input to a canonical path: '/a/b', no extension, no trailing slash.

    Idempotent. Raises InvalidInput if nothing remains.
    """
    path = _strip_url((raw or '').strip()).replace('\\', '/')
    path = WHITESPACE_RE.sub(' ', SLASHES_RE.sub('/', path))
    while True:
        trimmed = EXTENSION_RE.sub('', path.strip(' /'))
        if trimmed == path:
            break
        path = trimmed
    if not path:
        raise InvalidInput(f"'{raw}' does not name a document")
    return '/' + path


def split_request(text: str) -> tuple[str, str]:
    """Split slash-command text into (raw_path, issue); the path is the first token."""
    parts = (text or '').strip().split(maxsplit=1)
    if not parts:
        raise InvalidInput("expected '<doc path> <issue>'")
    return parts[0], parts[1] if len(parts) > 1 else ''
