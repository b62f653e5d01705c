"""In-memory document host with GitHub-equivalent ref and token semantics"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from docpatch.core.models import MarkdownDocument, Proposal
from docpatch.core.utils.hashing import blob_sha
from docpatch.errors import Conflict, NotFound
from docpatch.host.repo import DirEntry, DocumentHost


@dataclass
class MemoryHost(DocumentHost):
    """Commits are immutable path->content snapshots; branches point at commits."""
    base_branch: str = "main"
    commits:   dict[str, dict[str, str]] = field(default_factory=dict)
    branches:  dict[str, str] = field(default_factory=dict)
    proposals: list[Proposal] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def __post_init__(self):
        if self.base_branch not in self.branches:
            self._commit(self.base_branch, {})

    @classmethod
    def from_files(cls, files: dict[str, str], base_branch: str = "main") -> "MemoryHost":
        host = cls(base_branch=base_branch)
        host._commit(base_branch, dict(files))
        return host

    @classmethod
    def from_directory(cls, root: Path, base_branch: str = "main") -> "MemoryHost":
        """Seed the base branch with every file under root (paths relative to root)."""
        files = {
            p.relative_to(root).as_posix(): p.read_text(encoding="utf-8")
            for p in sorted(root.rglob("*"))
            if p.is_file() and ".git" not in p.relative_to(root).parts
        }
        return cls.from_files(files, base_branch)

    def _commit(self, branch: str, snapshot: dict[str, str]) -> str:
        sha = uuid4().hex
        self.commits[sha] = snapshot
        self.branches[branch] = sha
        return sha

    def _snapshot(self, ref: str | None) -> dict[str, str]:
        branch = ref or self.base_branch
        if branch not in self.branches:
            raise NotFound(f"branch '{branch}'")
        return self.commits[self.branches[branch]]

    def files(self, ref: str | None = None) -> dict[str, str]:
        """Copy of every path->content on ref."""
        with self._lock:
            return dict(self._snapshot(ref))

    def read_file(self, path: str, ref: str | None = None) -> MarkdownDocument:
        with self._lock:
            snapshot = self._snapshot(ref)
            if path not in snapshot:
                raise NotFound(path)
            content = snapshot[path]
        return MarkdownDocument(stored_path=path, content=content, token=blob_sha(content))

    def list_dir(self, path: str) -> list[DirEntry]:
        prefix = path.strip("/") + "/" if path.strip("/") else ""
        with self._lock:
            paths = sorted(self._snapshot(None))
        entries: dict[str, str] = {}
        for p in paths:
            if not p.startswith(prefix):
                continue
            head, sep, _ = p[len(prefix):].partition("/")
            entries.setdefault(prefix + head, "dir" if sep else "file")
        if not entries and prefix:
            raise NotFound(path)
        return [DirEntry(p, kind) for p, kind in entries.items()]

    def get_branch_tip(self, branch: str) -> str:
        with self._lock:
            if branch not in self.branches:
                raise NotFound(f"branch '{branch}'")
            return self.branches[branch]

    def create_branch(self, name: str, sha: str) -> None:
        with self._lock:
            if name in self.branches:
                raise Conflict(f"branch '{name}' already exists")
            if sha not in self.commits:
                raise NotFound(f"commit {sha}")
            self.branches[name] = sha

    def write_file(self, path: str, content: str, token: str, branch: str, message: str) -> str:
        with self._lock:
            snapshot = self._snapshot(branch)
            current = snapshot.get(path)
            if current is None or blob_sha(current) != token:
                raise Conflict(f"{path} does not match {token[:7]} on '{branch}'")
            self._commit(branch, {**snapshot, path: content})
        return blob_sha(content)

    def open_proposal(self, head: str, base: str, title: str, body: str) -> Proposal:
        with self._lock:
            if head not in self.branches or base not in self.branches:
                raise NotFound(f"branch '{head}' or '{base}'")
            number = len(self.proposals) + 1
            proposal = Proposal(url=f"memory://pulls/{number}", number=number, branch=head)
            self.proposals.append(proposal)
        return proposal
