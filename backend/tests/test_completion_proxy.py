import asyncio
import json

import pytest

from biotutor.core.errors import CompletionProviderError
from biotutor.schemas.chat import ChatMessage
from biotutor.services.completion import CompletionStreamProxy

from conftest import FakeProvider


async def collect(relay):
    chunks = []
    async for chunk in relay:
        chunks.append(chunk)
    return chunks


@pytest.mark.asyncio
async def test_fragments_relayed_in_order():
    provider = FakeProvider(fragments=["Hel", "lo"])
    proxy = CompletionStreamProxy(provider)

    relay = await proxy.stream_completion([ChatMessage(role="user", content="Hi")])
    chunks = await collect(relay)

    assert chunks == [b"Hel", b"lo"]
    assert b"".join(chunks).decode() == "Hello"
    assert provider.closed


@pytest.mark.asyncio
async def test_messages_forwarded_verbatim():
    provider = FakeProvider(fragments=["ok"])
    proxy = CompletionStreamProxy(provider)
    messages = [
        {"role": "system", "content": "You are a biology teacher."},
        ChatMessage(role="user", content="What are alveoli?"),
        ChatMessage(role="assistant", content="Tiny air sacs."),
    ]

    await collect(await proxy.stream_completion(messages))

    assert provider.calls == [[
        {"role": "system", "content": "You are a biology teacher."},
        {"role": "user", "content": "What are alveoli?"},
        {"role": "assistant", "content": "Tiny air sacs."},
    ]]


@pytest.mark.asyncio
async def test_failure_mid_stream_delivers_partial_output_then_errors():
    provider = FakeProvider(fragments=["Par"], error=RuntimeError("upstream reset"))
    proxy = CompletionStreamProxy(provider)

    relay = await proxy.stream_completion([ChatMessage(role="user", content="Hi")])
    received = []
    with pytest.raises(RuntimeError):
        async for chunk in relay:
            received.append(chunk)

    assert received == [b"Par"]
    assert len(provider.calls) == 1


@pytest.mark.asyncio
async def test_failure_before_output_raises_provider_error():
    provider = FakeProvider(error=RuntimeError("bad key"), fail_before=True)
    proxy = CompletionStreamProxy(provider)

    with pytest.raises(CompletionProviderError):
        await proxy.stream_completion([ChatMessage(role="user", content="Hi")])

    assert len(provider.calls) == 1
    assert provider.closed


@pytest.mark.asyncio
async def test_empty_stream_closes_cleanly():
    provider = FakeProvider(fragments=[])
    proxy = CompletionStreamProxy(provider)

    chunks = await collect(await proxy.stream_completion([]))

    assert chunks == []
    assert provider.closed


@pytest.mark.asyncio
async def test_consumer_leaving_early_closes_upstream():
    provider = FakeProvider(fragments=["a", "b", "c"])
    proxy = CompletionStreamProxy(provider)

    relay = await proxy.stream_completion([ChatMessage(role="user", content="Hi")])
    assert await relay.__anext__() == b"a"
    await relay.aclose()

    assert provider.closed


class _Delta:
    def __init__(self, content):
        self.content = content


class _Choice:
    def __init__(self, content):
        self.delta = _Delta(content)


class _Chunk:
    def __init__(self, content):
        self.choices = [_Choice(content)] if content is not ... else []


class _UpstreamStream:
    def __init__(self, contents):
        self.contents = contents
        self.closed = False

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for content in self.contents:
            yield _Chunk(content)

    async def close(self):
        self.closed = True


class _Completions:
    def __init__(self, upstream):
        self.upstream = upstream
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return self.upstream


class _FakeClient:
    def __init__(self, upstream):
        self.chat = type("Chat", (), {})()
        self.chat.completions = _Completions(upstream)


@pytest.mark.asyncio
async def test_openai_provider_uses_configured_parameters():
    from biotutor.core.config import Settings
    from biotutor.services.completion import OpenAICompatibleProvider

    config = Settings(LLM_MODEL="test-model", LLM_TEMPERATURE=0.5, LLM_TOP_P=0.9, LLM_MAX_TOKENS=64)
    upstream = _UpstreamStream(["Hel", None, ..., "", "lo"])
    client = _FakeClient(upstream)
    provider = OpenAICompatibleProvider(config, client=client)
    messages = [{"role": "user", "content": "Hi"}]

    fragments = [fragment async for fragment in provider.stream(messages)]

    assert fragments == ["Hel", "lo"]
    assert upstream.closed
    assert client.chat.completions.kwargs == {
        "model": "test-model",
        "messages": messages,
        "temperature": 0.5,
        "top_p": 0.9,
        "max_tokens": 64,
        "stream": True,
    }


@pytest.mark.asyncio
async def test_unconfigured_provider_fails_before_output():
    from biotutor.core.config import Settings
    from biotutor.services.completion import OpenAICompatibleProvider

    provider = OpenAICompatibleProvider(Settings(LLM_API_KEY=""))
    proxy = CompletionStreamProxy(provider)

    with pytest.raises(CompletionProviderError):
        await proxy.stream_completion([ChatMessage(role="user", content="Hi")])


async def run_chat_over_asgi(asgi_app, token):
    body = json.dumps({"messages": [{"role": "user", "content": "Hi"}]}).encode()
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "POST",
        "scheme": "http",
        "path": "/api/chat",
        "raw_path": b"/api/chat",
        "root_path": "",
        "query_string": b"",
        "headers": [
            (b"host", b"testserver"),
            (b"content-type", b"application/json"),
            (b"content-length", str(len(body)).encode()),
            (b"authorization", f"Bearer {token}".encode()),
        ],
        "client": ("testclient", 50000),
        "server": ("testserver", 80),
    }
    request_sent = False

    async def receive():
        nonlocal request_sent
        if not request_sent:
            request_sent = True
            return {"type": "http.request", "body": body, "more_body": False}
        await asyncio.Event().wait()

    sent = []

    async def send(message):
        sent.append(message)

    with pytest.raises(Exception):
        await asgi_app(scope, receive, send)
    return sent


@pytest.mark.asyncio
async def test_app_aborts_response_on_mid_stream_failure():
    from biotutor.core.security import create_access_token
    from biotutor.main import app
    from biotutor.routers.chat import get_completion_proxy

    provider = FakeProvider(fragments=["Par"], error=RuntimeError("upstream reset"))
    app.dependency_overrides[get_completion_proxy] = lambda: CompletionStreamProxy(provider)
    try:
        sent = await run_chat_over_asgi(app, create_access_token("acct-1"))
    finally:
        app.dependency_overrides.clear()

    assert sent[0]["type"] == "http.response.start"
    assert sent[0]["status"] == 200
    bodies = [m for m in sent if m["type"] == "http.response.body"]
    assert bodies[0]["body"] == b"Par"
    assert bodies[0]["more_body"] is True
    assert all(m.get("more_body", False) for m in bodies)
    assert len(provider.calls) == 1
