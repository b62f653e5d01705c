"""GitHub REST implementation of DocumentHost over httpx"""

from __future__ import annotations

import base64
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from docpatch.config import Settings
from docpatch.core.models import MarkdownDocument, Proposal
from docpatch.errors import Conflict, InvalidInput, NotFound, UpstreamUnavailable
from docpatch.host.repo import DirEntry, DocumentHost

logger = logging.getLogger(__name__)


class GitHubHost(DocumentHost):
    """Client for one repository on the GitHub REST API.

    Args:
        repo: ``owner/name``.
        token: Bearer token; requests are unauthenticated when empty.
        api_url: API base, ``https://api.github.com`` unless GitHub Enterprise.
        timeout: Per-request timeout in seconds.
        client: Preconfigured httpx client (tests pass one with a MockTransport).
    """

    def __init__(
        self,
        repo: str,
        token: str = "",
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        if repo.count("/") != 1:
            raise InvalidInput(f"GitHub repository must be 'owner/name', got '{repo}'")
        self.repo = repo
        self.headers = {"Accept": "application/vnd.github+json", "X-GitHub-Api-Version": "2022-11-28"}
        if token:
            self.headers["Authorization"] = f"Bearer {token}"
        self._owns_client = client is None
        self.client = client or httpx.Client(base_url=api_url, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "GitHubHost":
        return cls(
            repo=settings.github_repo,
            token=settings.github_token,
            api_url=settings.github_api_url,
            timeout=settings.http_timeout,
        )

    def close(self) -> None:
        """Close the httpx client if this host created it; an injected client is left to its owner."""
        if self._owns_client:
            self.client.close()

    # ----- transport ------------------------------------------------------

    def _url(self, suffix: str) -> str:
        return f"/repos/{self.repo}{suffix}"

    def _request(self, method: str, suffix: str, **kwargs) -> httpx.Response:
        """Send a request; transport failures and 5xx become UpstreamUnavailable."""
        try:
            response = self.client.request(method, self._url(suffix), headers=self.headers, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("GitHub %s %s failed: %s: %s", method, suffix, type(exc).__name__, exc)
            raise UpstreamUnavailable(f"GitHub unreachable ({type(exc).__name__})") from exc
        logger.debug("GitHub %s %s -> %d", method, suffix, response.status_code)
        if response.status_code >= 500:
            raise UpstreamUnavailable(f"GitHub returned {response.status_code}")
        return response

    @staticmethod
    def _ensure_ok(response: httpx.Response, what: str) -> dict | list:
        if response.status_code == 404:
            raise NotFound(what)
        if response.is_error:
            message = response.json().get("message", "") if _is_json(response) else response.text
            raise UpstreamUnavailable(f"GitHub rejected {what}: {response.status_code} {message}".strip())
        return response.json()

    # ----- reads ----------------------------------------------------------

    def read_file(self, path: str, ref: str | None = None) -> MarkdownDocument:
        params = {"ref": ref} if ref else None
        data = self._ensure_ok(self._request("GET", f"/contents/{quote(path)}", params=params), path)
        if not isinstance(data, dict) or data.get("type") != "file":
            raise NotFound(f"{path} is not a file")
        content = base64.b64decode(data.get("content", "")).decode("utf-8")
        return MarkdownDocument(stored_path=data.get("path", path), content=content, token=data["sha"])

    def list_dir(self, path: str) -> list[DirEntry]:
        data = self._ensure_ok(self._request("GET", f"/contents/{quote(path.strip('/'))}"), path or "/")
        if not isinstance(data, list):
            raise NotFound(f"{path} is not a directory")
        return [DirEntry(item["path"], item["type"]) for item in data if item.get("type") in ("file", "dir")]

    def get_branch_tip(self, branch: str) -> str:
        data = self._ensure_ok(self._request("GET", f"/git/ref/heads/{quote(branch)}"), f"branch '{branch}'")
        return data["object"]["sha"]

    # ----- writes ---------------------------------------------------------

    def create_branch(self, name: str, sha: str) -> None:
        response = self._request("POST", "/git/refs", json={"ref": f"refs/heads/{name}", "sha": sha})
        if response.status_code == 422:
            raise Conflict(f"branch '{name}' already exists")
        self._ensure_ok(response, f"branch '{name}'")
        logger.info("Created branch %s at %s", name, sha[:7])

    def write_file(self, path: str, content: str, token: str, branch: str, message: str) -> str:
        payload = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "sha": token,
            "branch": branch,
        }
        response = self._request("PUT", f"/contents/{quote(path)}", json=payload)
        # GitHub reports a stale blob sha as 409, or as 422 on some endpoints
        if response.status_code == 409 or (response.status_code == 422 and "sha" in response.text):
            raise Conflict(f"{path} changed on '{branch}' since it was read")
        data = self._ensure_ok(response, path)
        return data["content"]["sha"]

    def open_proposal(self, head: str, base: str, title: str, body: str) -> Proposal:
        response = self._request("POST", "/pulls", json={"title": title, "head": head, "base": base, "body": body})
        data = self._ensure_ok(response, f"pull request {head} -> {base}")
        return Proposal(url=data["html_url"], number=data["number"], branch=head)


def _is_json(response: httpx.Response) -> bool:
    return response.headers.get("content-type", "").startswith("application/json")
