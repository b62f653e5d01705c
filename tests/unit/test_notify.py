"""Unit tests for notify.py"""

import json

import httpx

from docpatch.notify import Notifier


def test_posts_text_field():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, text="ok")

    notifier = Notifier(client=httpx.Client(transport=httpx.MockTransport(handler)))
    assert notifier.notify("https://hooks.slack.test/resp/1", "✅ done") is True
    assert seen[0].method == "POST"
    assert json.loads(seen[0].content) == {"text": "✅ done"}


def test_empty_url_is_skipped():
    def handler(request):
        raise AssertionError("no request expected")

    notifier = Notifier(client=httpx.Client(transport=httpx.MockTransport(handler)))
    assert notifier.notify("", "text") is False


def test_failures_are_swallowed():
    def refuse(request):
        raise httpx.ConnectError("refused", request=request)

    for handler in (refuse, lambda request: httpx.Response(500)):
        notifier = Notifier(client=httpx.Client(transport=httpx.MockTransport(handler)))
        assert notifier.notify("https://hooks.slack.test/resp/1", "text") is False
