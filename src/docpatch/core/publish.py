"""Publish a patched document as branch + guarded commit + pull request"""

import logging

from docpatch.core.models import MarkdownDocument, Proposal, Request
from docpatch.core.utils.diff import diff_summary
from docpatch.core.utils.slug import branch_name
from docpatch.errors import EmptySuggestion
from docpatch.host.repo import DocumentHost

logger = logging.getLogger(__name__)


def proposal_text(request: Request, canonical: str, doc: MarkdownDocument, new_content: str) -> tuple[str, str]:
    """Return (title, body) for the pull request."""
    stats = diff_summary(doc.content, new_content)
    title = f"docs: fix {canonical} (requested by @{request.username})"
    body = (
        f"Automated documentation fix requested by @{request.username}.\n\n"
        f"**Document:** `{canonical}` (`{doc.stored_path}`)\n\n"
        f"**Issue:**\n> {request.raw_issue or '(none given)'}\n\n"
        f"+{stats['added']} / -{stats['deleted']} lines"
    )
    return title, body


def publish(
    host: DocumentHost,
    doc: MarkdownDocument,
    new_content: str,
    request: Request,
    canonical: str,
    base_branch: str = "main",
    branch_prefix: str = "docpatch",
    ) -> Proposal:
    """Read base tip, branch from it, write with doc.token, open a pull request.

    Each step runs only if the previous one succeeded. Nothing is rolled back:
    a failure after branch creation leaves the branch behind.
    """
    if new_content == doc.content:
        raise EmptySuggestion("the suggestion does not change the document")

    tip = host.get_branch_tip(base_branch)
    branch = branch_name(branch_prefix, canonical)
    host.create_branch(branch, tip)

    message = f"docs: update {doc.stored_path} for @{request.username}"
    host.write_file(doc.stored_path, new_content, doc.token, branch, message)

    title, body = proposal_text(request, canonical, doc, new_content)
    proposal = host.open_proposal(branch, base_branch, title, body)
    logger.info("Opened %s from %s for %s", proposal.url, branch, doc.stored_path)
    return proposal
