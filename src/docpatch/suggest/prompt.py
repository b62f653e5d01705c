"""Prompt template for the content-generation service, loaded from YAML"""

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel


DEFAULT_SYSTEM = """\
You are a technical writer fixing one section of the documentation page {path}.
A reader (@{user}) reported this problem:

{issue}

Rewrite the section you are given so that it resolves the problem.
Keep its heading line exactly as it is, keep the markdown style of the
original, and change nothing that the problem does not concern.
Reply with the rewritten section only: no preamble, no commentary."""

DEFAULT_USER = "{section}"


class PromptTemplate(BaseModel):
    """system is formatted with path, issue, user; user wraps the section text."""
    system: str = DEFAULT_SYSTEM
    user:   str = DEFAULT_USER

    def instruction(self, path: str, issue: str, user: str) -> str:
        return self.system.format(path=path, issue=issue or "(no description)", user=user)

    def source(self, section: str) -> str:
        return self.user.format(section=section)


def load_prompt(path: Optional[str] = None) -> PromptTemplate:
    """Load a template from a YAML file with optional system/user keys; defaults if path is None."""
    if not path:
        return PromptTemplate()
    try:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid prompt file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Invalid prompt file {path}: expected a mapping, got {type(data).__name__}")
    return PromptTemplate(**data)
