"""Slug and branch-name generation"""

import re
from uuid import uuid4


def slugify(text: str) -> str:
    """Convert text (including a slash-separated path) to a lowercase, hyphen-separated slug."""
    text = text.lower().replace('/', ' ')
    text = re.sub(r'[^\w\s-]', '', text)
    text = re.sub(r'[\s_]+', '-', text)
    return re.sub(r'-+', '-', text).strip('-') or 'doc'


def branch_name(prefix: str, canonical_path: str) -> str:
    """Per-request branch name: <prefix>/<slug>-<8 hex>; the suffix keeps concurrent requests apart."""
    return f"{prefix.strip('/')}/{slugify(canonical_path)}-{uuid4().hex[:8]}"
