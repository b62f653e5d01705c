"""Resolve a canonical path to a stored document by extension/casing probing or fuzzy match"""

import logging

from docpatch.config import Settings
from docpatch.core.corpus import CorpusIndex
from docpatch.core.models import MarkdownDocument
from docpatch.core.parse import MD_EXTENSIONS
from docpatch.errors import NotFound
from docpatch.host.repo import DocumentHost

logger = logging.getLogger(__name__)

STRATEGIES = ('probe', 'fuzzy')


def _capitalize_last(canonical: str) -> str:
    head, _, last = canonical.rpartition('/')
    return f"{head}/{last[:1].upper()}{last[1:]}"


def probe_candidates(canonical: str, docs_root: str = 'docs') -> list[str]:
    """Stored paths to try, in order: .md exact, .md Capitalized, .mdx exact, .mdx Capitalized."""
    root = docs_root.strip('/')
    prefix = f"{root}/" if root else ""
    candidates: list[str] = []
    for ext in MD_EXTENSIONS:
        for variant in (canonical, _capitalize_last(canonical)):
            path = f"{prefix}{variant.lstrip('/')}{ext}"
            if path not in candidates:
                candidates.append(path)
    return candidates


class DocumentLocator:
    """Reads the document a canonical path refers to, using exactly one strategy."""

    def __init__(
        self,
        host: DocumentHost,
        docs_root: str = 'docs',
        strategy: str = 'probe',
        threshold: float = 0.5,
        index: CorpusIndex | None = None,
        ):
        if strategy not in STRATEGIES:
            raise ValueError(f"Unknown resolve strategy '{strategy}'; expected one of {STRATEGIES}")
        self.host = host
        self.docs_root = docs_root
        self.strategy = strategy
        self.threshold = threshold
        self.index = index or CorpusIndex(host, docs_root)

    @classmethod
    def from_settings(cls, host: DocumentHost, settings: Settings) -> "DocumentLocator":
        return cls(host, settings.docs_root, settings.resolve_strategy, settings.fuzzy_threshold)

    def resolve(self, canonical: str) -> str:
        """Return the stored path for canonical without keeping the content."""
        return self.locate(canonical).stored_path

    def locate(self, canonical: str) -> MarkdownDocument:
        if self.strategy == 'fuzzy':
            return self._fuzzy(canonical)
        return self._probe(canonical)

    def _probe(self, canonical: str) -> MarkdownDocument:
        candidates = probe_candidates(canonical, self.docs_root)
        for path in candidates:
            try:
                doc = self.host.read_file(path)
            except NotFound:
                continue
            logger.info("Resolved %s -> %s (probe)", canonical, path)
            return doc
        raise NotFound(f"{canonical} (tried {', '.join(candidates)})")

    def _fuzzy(self, canonical: str) -> MarkdownDocument:
        entry, score = self.index.best_match(canonical, self.threshold)
        logger.info("Resolved %s -> %s (fuzzy, score=%.2f)", canonical, entry.stored_path, score)
        return self.host.read_file(entry.stored_path)
