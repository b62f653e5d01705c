"""Pure utilities for describing the change a patch makes"""

import difflib


def diff_summary(old: str, new: str) -> dict[str, int]:
    """Return added/deleted/unchanged line counts between two document versions."""
    matcher = difflib.SequenceMatcher(None, old.splitlines(), new.splitlines())
    counts = {"added": 0, "deleted": 0, "unchanged": 0}

    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            counts["unchanged"] += i2 - i1
        if tag in ("replace", "delete"):
            counts["deleted"] += i2 - i1
        if tag in ("replace", "insert"):
            counts["added"] += j2 - j1

    return counts


def unified_diff(old: str, new: str, path: str, context: int = 3) -> str:
    """Return a git-style unified diff of path; empty string if identical."""
    lines = difflib.unified_diff(
        old.splitlines(keepends=True),
        new.splitlines(keepends=True),
        fromfile=f"a/{path.lstrip('/')}",
        tofile=f"b/{path.lstrip('/')}",
        n=context,
    )
    return "".join(lines)
