"""Pipeline orchestration: resolve -> locate -> extract -> suggest -> splice -> publish -> notify"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from docpatch.config import Settings
from docpatch.core.locate import DocumentLocator
from docpatch.core.models import MarkdownDocument, Proposal, Request, SectionMatch
from docpatch.core.patch import splice
from docpatch.core.paths import normalize
from docpatch.core.publish import publish
from docpatch.core.sections import locate_section, section_text
from docpatch.errors import DocPatchError, EmptySuggestion
from docpatch.host.github import GitHubHost
from docpatch.host.repo import DocumentHost
from docpatch.notify import Notifier
from docpatch.suggest.client import SuggestionClient, Suggester
from docpatch.suggest.prompt import PromptTemplate, load_prompt

logger = logging.getLogger(__name__)


@dataclass
class PipelineContext:
    """Long-lived collaborators shared by every request in the process."""
    settings:  Settings
    host:      DocumentHost
    locator:   DocumentLocator
    suggester: Suggester
    notifier:  Notifier
    prompt:    PromptTemplate

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        host: Optional[DocumentHost] = None,
        suggester: Optional[Suggester] = None,
        notifier: Optional[Notifier] = None,
        ) -> "PipelineContext":
        host = host or GitHubHost.from_settings(settings)
        return cls(
            settings=settings,
            host=host,
            locator=DocumentLocator.from_settings(host, settings),
            suggester=suggester or SuggestionClient.from_settings(settings),
            notifier=notifier or Notifier(settings.http_timeout),
            prompt=load_prompt(settings.prompt_file),
        )


@dataclass
class PatchResult:
    canonical:   str
    document:    MarkdownDocument
    match:       SectionMatch
    new_content: str
    proposal:    Proposal


def run(request: Request, ctx: PipelineContext) -> PatchResult:
    """Execute every stage for one request; stage errors propagate to the caller."""
    s = ctx.settings
    canonical = normalize(request.raw_path)
    doc = ctx.locator.locate(canonical)

    match = locate_section(doc.content, request.raw_issue, s.section_mode, s.max_nesting, s.parser_config)
    logger.info(
        "Targeting %s lines %d-%d of %s",
        f"'{match.heading}'" if match.heading else "whole document", match.start + 1, match.end, doc.stored_path,
    )

    instruction = ctx.prompt.instruction(canonical, request.raw_issue, request.username)
    replacement = ctx.suggester.suggest(instruction, ctx.prompt.source(section_text(doc.content, match)))
    if not replacement or not replacement.strip():
        raise EmptySuggestion("content generation returned nothing")

    new_content = splice(doc.content, match, replacement, s.splice_mode, s.parser_config)
    proposal = publish(ctx.host, doc, new_content, request, canonical, s.base_branch, s.branch_prefix)
    return PatchResult(canonical, doc, match, new_content, proposal)


def handle(request: Request, ctx: PipelineContext) -> str:
    """Run the pipeline and report the outcome through the callback. Never raises."""
    try:
        result = run(request, ctx)
        message = f"✅ Opened {result.proposal.url} to fix {result.canonical} for <@{request.username}>"
    except DocPatchError as e:
        logger.warning("Request from %s for %s failed: %s", request.username, request.raw_path, e.user_message)
        message = f"❌ {e.user_message}"
    except Exception:
        logger.exception("Unexpected failure handling %s for %s", request.raw_path, request.username)
        message = f"❌ Something went wrong while fixing {request.raw_path}; the error has been logged."

    try:
        ctx.notifier.notify(request.callback_url, message)
    except Exception:
        logger.exception("Notifier failed for %s", request.callback_url)
    return message
