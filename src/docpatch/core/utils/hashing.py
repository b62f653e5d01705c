"""Git-compatible blob hashing used as a document version token"""

import hashlib


def blob_sha(content: str) -> str:
    """Return the git blob SHA-1 of content (same value GitHub reports as a file's sha)."""
    data = content.encode("utf-8")
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()
