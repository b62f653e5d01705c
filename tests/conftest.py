"""Root test configuration: environment isolation and shared pipeline fakes"""

import pytest

from docpatch.config import Settings
from docpatch.core.pipeline import PipelineContext
from docpatch.host.memory import MemoryHost


BUTTON_MD = """\
---
title: Button
---

# Button

Buttons trigger actions.

## Usage

Use a button for primary actions.

### Variants

Primary and secondary.

## Sizing

Set the width in pixels:

```css
## Not a heading
width: 100px;
```

## Accessibility

Always provide a label.
"""

CARD_MD = """\
# Card

Cards group content.

## Layout

Cards stack vertically.
"""

GUIDE_MD = """\
# Getting started

Install the package.
"""


class RecordingSuggester:
    """Suggester fake: records (instruction, source) and rewrites '100px' to '6rem'."""

    def __init__(self, reply=None):
        self.calls = []
        self.reply = reply

    def suggest(self, instruction: str, source: str) -> str:
        self.calls.append((instruction, source))
        if callable(self.reply):
            return self.reply(source)
        if self.reply is not None:
            return self.reply
        return source.replace("100px", "6rem")


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, url: str, text: str) -> bool:
        self.messages.append((url, text))
        return True


@pytest.fixture(autouse=True)
def isolate_env(tmp_path, monkeypatch):
    """Run each test from an empty directory with no DOCPATCH_* variables set."""
    for name in Settings.model_fields:
        monkeypatch.delenv(f"DOCPATCH_{name.upper()}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(name="docs_host")
def docs_host_fixture():
    return MemoryHost.from_files({
        "docs/widgets/button.md": BUTTON_MD,
        "docs/widgets/Card.mdx": CARD_MD,
        "docs/guides/getting-started.md": GUIDE_MD,
        "docs/images/logo.txt": "not markdown",
        "README.md": "# Repo\n",
    })


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings(github_repo="acme/docs")


@pytest.fixture(name="suggester")
def suggester_fixture():
    return RecordingSuggester()


@pytest.fixture(name="notifier")
def notifier_fixture():
    return RecordingNotifier()


@pytest.fixture(name="make_ctx")
def make_ctx_fixture(docs_host, suggester, notifier):
    """Build a PipelineContext over the in-memory host; keyword args override Settings fields."""
    def _make(**overrides) -> PipelineContext:
        settings = Settings(**{"github_repo": "acme/docs", **overrides})
        return PipelineContext.from_settings(settings, host=docs_host, suggester=suggester, notifier=notifier)
    return _make


@pytest.fixture(name="button_md")
def button_md_fixture():
    return BUTTON_MD
