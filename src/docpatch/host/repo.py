"""Document host interface: storage, refs, and change proposals"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import NamedTuple

from docpatch.core.models import MarkdownDocument, Proposal


class DirEntry(NamedTuple):
    path: str       # repository-relative, '/'-separated
    kind: str       # 'file' or 'dir'


class DocumentHost(ABC):
    """Remote repository operations used by the pipeline.

    Implementations translate their transport failures into docpatch.errors:
    NotFound for missing paths, Conflict for stale tokens or existing refs,
    UpstreamUnavailable for everything else.
    """

    @abstractmethod
    def read_file(self, path: str, ref: str | None = None) -> MarkdownDocument:
        """Return content and version token of path on ref (default branch if None)."""
        raise NotImplementedError

    @abstractmethod
    def list_dir(self, path: str) -> list[DirEntry]:
        """Return the immediate children of a directory."""
        raise NotImplementedError

    @abstractmethod
    def get_branch_tip(self, branch: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def create_branch(self, name: str, sha: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def write_file(self, path: str, content: str, token: str, branch: str, message: str) -> str:
        """Write content to path on branch if token still matches; return the new token."""
        raise NotImplementedError

    @abstractmethod
    def open_proposal(self, head: str, base: str, title: str, body: str) -> Proposal:
        raise NotImplementedError

    def close(self) -> None:
        """Release transport resources; hosts without any keep this no-op."""
