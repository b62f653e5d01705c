"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from docpatch.config import Settings, configure_logging, load_config
from docpatch.core.locate import DocumentLocator
from docpatch.core.models import Request
from docpatch.core.paths import normalize, split_request
from docpatch.core.pipeline import PipelineContext, run
from docpatch.core.sections import locate_section, section_text
from docpatch.core.utils.diff import unified_diff
from docpatch.errors import DocPatchError
from docpatch.host.github import GitHubHost
from docpatch.host.memory import MemoryHost
from docpatch.suggest.client import StaticSuggester


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling, then set up logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level)
    return settings


def _host(settings: Settings, local: Optional[str]):
    """MemoryHost seeded from a local checkout, or the configured GitHub repository."""
    if local:
        return MemoryHost.from_directory(Path(local), settings.base_branch)
    return GitHubHost.from_settings(settings)


def serve_cmd(
    host: Annotated[str, typer.Option("--host", help="Bind address")] = "127.0.0.1",
    port: Annotated[int, typer.Option("--port", help="Bind port")] = 3000,
    ):
    """Run the HTTP endpoint for the /fixdoc slash command."""
    import uvicorn

    from docpatch.server.app import create_app

    settings = _settings()
    try:
        app = create_app(settings)
    except (DocPatchError, ValueError) as e:
        _fail("Server configuration is incomplete", e)
    uvicorn.run(app, host=host, port=port)


def resolve_cmd(
    path: Annotated[str, typer.Argument(help="Document path or URL")],
    strategy: Annotated[Optional[str], typer.Option("--strategy", help="probe or fuzzy")] = None,
    docs_root: Annotated[Optional[str], typer.Option("--docs-root", help="Repository directory holding the documents")] = None,
    local: Annotated[Optional[str], typer.Option("--local", help="Resolve against a local checkout instead of GitHub")] = None,
    ):
    """Show which stored document a path resolves to."""
    settings = _settings(overrides={"resolve_strategy": strategy, "docs_root": docs_root})
    try:
        canonical = normalize(path)
        locator = DocumentLocator.from_settings(_host(settings, local), settings)
        stored = locator.resolve(canonical)
    except DocPatchError as e:
        _fail(e.user_message)
    typer.echo(f"{canonical} -> {stored}")


def extract_cmd(
    file: Annotated[Path, typer.Argument(exists=True, dir_okay=False, readable=True, help="Markdown file")],
    issue: Annotated[str, typer.Argument(help="Issue text, e.g. \"`## Sizing` pixel example is wrong\"")],
    mode: Annotated[Optional[str], typer.Option("--mode", help="strict or permissive")] = None,
    nesting: Annotated[Optional[int], typer.Option("--max-nesting", help="Deepest heading level for sections")] = None,
    ):
    """Print the section of a local file that an issue targets."""
    settings = _settings(overrides={"section_mode": mode, "max_nesting": nesting})
    content = file.read_text(encoding="utf-8")
    try:
        match = locate_section(content, issue, settings.section_mode, settings.max_nesting, settings.parser_config)
    except DocPatchError as e:
        _fail(e.user_message)
    typer.echo(f"# lines {match.start + 1}-{match.end}: {match.heading or '(whole document)'}", err=True)
    typer.echo(section_text(content, match), nl=False)


def fix_cmd(
    text: Annotated[str, typer.Argument(help="'<doc path> <issue>' as typed in chat")],
    user: Annotated[str, typer.Option("--user", help="Acting username")] = "cli",
    local: Annotated[Optional[str], typer.Option("--local", help="Dry run against a local checkout; prints the diff")] = None,
    replacement: Annotated[Optional[Path], typer.Option("--replacement", exists=True, dir_okay=False, help="Use this file as the new section instead of calling the completion API")] = None,
    ):
    """Run the whole pipeline synchronously and report the proposal."""
    settings = _settings()
    try:
        raw_path, issue = split_request(text)
        suggester = StaticSuggester(replacement.read_text(encoding="utf-8")) if replacement else None
        ctx = PipelineContext.from_settings(settings, host=_host(settings, local), suggester=suggester)
        result = run(Request(raw_path=raw_path, raw_issue=issue, username=user), ctx)
    except DocPatchError as e:
        _fail(e.user_message)
    except ValueError as e:
        _fail("Invalid configuration", e)

    typer.echo(f"Opened {result.proposal.url} on branch {result.proposal.branch}")
    if local:
        typer.echo(unified_diff(result.document.content, result.new_content, result.document.stored_path), nl=False)
