"""Process-lifetime index of stored documents keyed by canonical path, for fuzzy lookup"""

import logging
import threading
from difflib import SequenceMatcher

from docpatch.core.models import CorpusEntry
from docpatch.core.parse import MD_EXTENSIONS
from docpatch.core.paths import normalize
from docpatch.errors import DocPatchError, InvalidInput, NoCloseMatch
from docpatch.host.repo import DirEntry, DocumentHost

logger = logging.getLogger(__name__)


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity ratio in [0, 1]; identical strings score 1.0."""
    return SequenceMatcher(None, a.lower(), b.lower()).ratio()


def canonical_for(stored_path: str, docs_root: str) -> str:
    """Canonical path of a stored file relative to docs_root ('docs/a/B.md' -> '/a/B')."""
    root = docs_root.strip('/')
    rel = stored_path.strip('/')
    if root and rel.startswith(root + '/'):
        rel = rel[len(root) + 1:]
    return normalize(rel)


class CorpusIndex:
    """Lazily built list of CorpusEntry, unique per canonical path, in listing order.

    Built at most once per instance and never refreshed: documents added or
    renamed upstream stay invisible until the process restarts. A build that
    fails to list docs_root caches nothing, so the next lookup tries again.
    """

    def __init__(self, host: DocumentHost, docs_root: str = 'docs'):
        self.host = host
        self.docs_root = docs_root.strip('/')
        self._entries: list[CorpusEntry] | None = None
        self._lock = threading.Lock()

    def entries(self) -> list[CorpusEntry]:
        if self._entries is None:
            with self._lock:
                if self._entries is None:
                    self._entries = self._build()
        return self._entries

    def _build(self) -> list[CorpusEntry]:
        """List docs_root and every subtree; a failure on docs_root itself propagates."""
        seen: dict[str, CorpusEntry] = {}
        for child in self.host.list_dir(self.docs_root):
            self._add(child, seen)
        logger.info("Corpus index built: %d documents under '%s/'", len(seen), self.docs_root)
        return list(seen.values())

    def _walk(self, directory: str, seen: dict[str, CorpusEntry]) -> None:
        """Depth-first listing of a subtree; a subtree that fails to list is skipped."""
        try:
            children = self.host.list_dir(directory)
        except DocPatchError as e:
            logger.warning("Skipping '%s' in corpus index: %s", directory, e.user_message)
            return

        for child in children:
            self._add(child, seen)

    def _add(self, child: DirEntry, seen: dict[str, CorpusEntry]) -> None:
        if child.kind == 'dir':
            self._walk(child.path, seen)
        elif child.path.lower().endswith(MD_EXTENSIONS):
            try:
                canonical = canonical_for(child.path, self.docs_root)
            except InvalidInput:
                return
            seen.setdefault(canonical, CorpusEntry(canonical_path=canonical, stored_path=child.path))

    def best_match(self, query: str, threshold: float = 0.5) -> tuple[CorpusEntry, float]:
        """Highest-scoring entry for query; ties go to the earliest entry.

        Raises NoCloseMatch if the index is empty or the best score is below threshold.
        """
        best: CorpusEntry | None = None
        best_score = -1.0
        for entry in self.entries():
            if entry.canonical_path == query:
                return entry, 1.0
            score = similarity(entry.canonical_path, query)
            if score > best_score:
                best, best_score = entry, score

        if best is None or best_score < threshold:
            closest = f" (closest: {best.canonical_path}, {best_score:.2f})" if best else ""
            raise NoCloseMatch(f"nothing similar to {query}{closest}")
        return best, best_score
