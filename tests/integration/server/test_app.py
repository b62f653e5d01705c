"""Integration tests for the FastAPI slash-command endpoint"""

import pytest
from fastapi.testclient import TestClient

from docpatch.server.app import USAGE, create_app


@pytest.fixture(name="client_ctx")
def client_ctx_fixture(make_ctx):
    ctx = make_ctx()
    return create_app(ctx.settings, ctx=ctx), ctx


def test_health(client_ctx):
    app, _ = client_ctx
    with TestClient(app) as client:
        response = client.get("/")
    assert response.status_code == 200
    assert response.text == "Slack bot is running ✅"


def test_fixdoc_acks_then_patches_in_background(client_ctx, notifier, docs_host):
    app, _ = client_ctx
    form = {
        "text": "/widgets/button `## Sizing` use rem",
        "user_name": "ada",
        "response_url": "https://hooks.slack.test/r/1",
    }
    with TestClient(app) as client:
        response = client.post("/slack/fixdoc", data=form)
        assert response.status_code == 200
        assert response.text == "✅ Thanks <@ada>! We'll fix: */widgets/button `## Sizing` use rem*"

    # leaving the client runs lifespan shutdown, which drains the worker pool
    assert notifier.messages == [("https://hooks.slack.test/r/1", "✅ Opened memory://pulls/1 to fix /widgets/button for <@ada>")]
    assert len(docs_host.proposals) == 1


def test_shutdown_closes_host(client_ctx, docs_host, monkeypatch):
    closed = []
    monkeypatch.setattr(docs_host, "close", lambda: closed.append(True))
    app, _ = client_ctx
    with TestClient(app):
        assert closed == []
    assert closed == [True]


def test_fixdoc_failure_is_reported_to_callback(client_ctx, notifier):
    app, _ = client_ctx
    with TestClient(app) as client:
        response = client.post("/slack/fixdoc", data={"text": "/widgets/slider `## Sizing` x", "user_name": "ada"})
        assert response.text.startswith("✅ Thanks <@ada>!")

    assert len(notifier.messages) == 1
    assert notifier.messages[0][1].startswith("❌ Document not found")


@pytest.mark.parametrize("text", ["", "   "])
def test_fixdoc_without_text_returns_usage(client_ctx, notifier, text):
    app, _ = client_ctx
    with TestClient(app) as client:
        response = client.post("/slack/fixdoc", data={"text": text, "user_name": "ada"})
    assert response.status_code == 200
    assert response.text == USAGE
    assert notifier.messages == []
