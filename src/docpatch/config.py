"""Application configuration: settings schema, config.yaml loader, and logging setup"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "DOCPATCH_"
LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Settings(BaseModel):
    app_name:         str = "docpatch"
    log_level:        str = Field(default="INFO", description="Root logging level")

    github_api_url:   str = Field(default="https://api.github.com", description="GitHub REST API base URL")
    github_repo:      str = Field(default="", description="Target repository as owner/name")
    github_token:     str = Field(default="", description="Token with contents + pull request write access")
    base_branch:      str = Field(default="main", description="Branch proposals are opened against")
    branch_prefix:    str = Field(default="docpatch", description="Prefix for per-request branch names")
    docs_root:        str = Field(default="docs", description="Repository directory holding the documents")

    resolve_strategy: str = Field(default="probe", pattern="^(probe|fuzzy)$", description="probe or fuzzy")
    fuzzy_threshold:  float = Field(default=0.5, ge=0.0, le=1.0, description="Minimum fuzzy similarity score")
    section_mode:     str = Field(default="strict", pattern="^(strict|permissive)$", description="strict or permissive")
    splice_mode:      str = Field(default="range", pattern="^(range|heading)$", description="range or heading")
    max_nesting:      int = Field(default=6, ge=1, le=6, description="Deepest heading level that delimits sections")
    parser_config:    str = Field(default="gfm-like", description="MarkdownIt parser preset name")

    llm_api_url:      str = Field(default="https://api.openai.com/v1", description="OpenAI-compatible API base URL")
    llm_api_key:      str = Field(default="", description="Bearer token for the completion API")
    llm_model:        str = Field(default="gpt-4o-mini", description="Completion model name")
    prompt_file:      Optional[str] = Field(default=None, description="YAML prompt template (system/user keys)")

    http_timeout:     float = Field(default=30.0, gt=0, description="Per-call timeout for outbound HTTP, seconds")
    max_workers:      int = Field(default=4, ge=1, description="Background worker pool size")


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then DOCPATCH_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler once; later calls only adjust the level."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    else:
        root.setLevel(level.upper())
