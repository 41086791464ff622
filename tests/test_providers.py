"""Adapter wire-format translation and the shared HTTP helper."""
import asyncio

import aiohttp
import pytest

from omega_air.exceptions import ProviderRequestFailed, ProviderUnavailable
from omega_air.providers import (
    ADAPTERS,
    ClaudeAdapter,
    GenerationRequest,
    MistralAdapter,
    OpenAIAdapter,
    Provider,
    ProviderConfig,
    build_adapter,
)
from omega_air.providers import base_provider
from omega_air.providers.http_client import post_json

OPENAI_CONFIG = ProviderConfig("sk-test", "https://api.openai.com/v1", ("gpt-4o", "gpt-4-turbo"), True)
CLAUDE_CONFIG = ProviderConfig("ck-test", "https://api.anthropic.com/v1", ("claude-3-5-sonnet-20241022",), True)
MISTRAL_CONFIG = ProviderConfig("ms-test", "https://api.mistral.ai/v1", ("mistral-large-latest",), True)

OPENAI_REPLY = {
    "id": "chatcmpl-1",
    "model": "gpt-4o-2024-08-06",
    "choices": [{"index": 0, "message": {"role": "assistant", "content": "Fresh ideas, daily."}}],
    "usage": {"prompt_tokens": 11, "completion_tokens": 5, "total_tokens": 16},
}

CLAUDE_REPLY = {
    "id": "msg_1",
    "type": "message",
    "role": "assistant",
    "model": "claude-3-5-sonnet-20241022",
    "content": [{"type": "text", "text": "Fresh "}, {"type": "text", "text": "ideas."}],
    "usage": {"input_tokens": 9, "output_tokens": 4},
}


def test_adapter_table_covers_every_provider():
    assert set(ADAPTERS) == set(Provider)


def test_openai_payload_without_system_prompt():
    adapter = OpenAIAdapter(OPENAI_CONFIG)

    payload = adapter.build_payload(GenerationRequest(prompt="Hi", temperature=0.2, max_tokens=50))

    assert payload == {
        "model": "gpt-4o",
        "messages": [{"role": "user", "content": "Hi"}],
        "temperature": 0.2,
        "max_tokens": 50,
    }
    assert adapter.headers() == {"Authorization": "Bearer sk-test"}
    assert adapter.endpoint == "/chat/completions"


def test_openai_payload_with_system_prompt_and_supported_model():
    adapter = OpenAIAdapter(OPENAI_CONFIG)

    payload = adapter.build_payload(GenerationRequest(prompt="Hi", model="gpt-4-turbo", system_prompt="Be brief"))

    assert payload["model"] == "gpt-4-turbo"
    assert payload["messages"][0] == {"role": "system", "content": "Be brief"}


def test_unsupported_model_resolves_to_default():
    adapter = OpenAIAdapter(OPENAI_CONFIG)

    assert adapter.resolve_model(GenerationRequest(prompt="Hi", model="claude-3-5-sonnet-20241022")) == "gpt-4o"


def test_claude_payload_attaches_system_only_when_given():
    adapter = ClaudeAdapter(CLAUDE_CONFIG, anthropic_version="2023-06-01")

    plain = adapter.build_payload(GenerationRequest(prompt="Hi"))
    with_system = adapter.build_payload(GenerationRequest(prompt="Hi", system_prompt="Be brief"))

    assert "system" not in plain
    assert plain["messages"] == [{"role": "user", "content": "Hi"}]
    assert with_system["system"] == "Be brief"
    assert adapter.headers() == {"x-api-key": "ck-test", "anthropic-version": "2023-06-01"}
    assert adapter.endpoint == "/messages"


def test_usage_is_normalized_across_vendors():
    _, _, openai_usage = OpenAIAdapter(OPENAI_CONFIG).parse_response(OPENAI_REPLY)
    content, model, claude_usage = ClaudeAdapter(CLAUDE_CONFIG).parse_response(CLAUDE_REPLY)

    assert (openai_usage.prompt_tokens, openai_usage.completion_tokens, openai_usage.total_tokens) == (11, 5, 16)
    assert (claude_usage.prompt_tokens, claude_usage.completion_tokens, claude_usage.total_tokens) == (9, 4, 13)
    assert content == "Fresh ideas."
    assert model == "claude-3-5-sonnet-20241022"


def test_total_tokens_is_always_the_sum():
    reply = dict(OPENAI_REPLY, usage={"prompt_tokens": 7, "completion_tokens": 3, "total_tokens": 99})

    _, _, usage = MistralAdapter(MISTRAL_CONFIG).parse_response(reply)

    assert usage.total_tokens == usage.prompt_tokens + usage.completion_tokens == 10


def test_missing_usage_counts_as_zero():
    reply = {"model": "mistral-large-latest", "choices": [{"message": {"content": "ok"}}]}

    _, _, usage = MistralAdapter(MISTRAL_CONFIG).parse_response(reply)

    assert usage.total_tokens == 0


def test_disabled_config_is_unavailable():
    disabled = ProviderConfig("", "https://api.mistral.ai/v1", ("mistral-large-latest",), False)

    with pytest.raises(ProviderUnavailable):
        build_adapter(Provider.MISTRAL, disabled)

    with pytest.raises(ProviderUnavailable):
        MistralAdapter(disabled)


def test_build_adapter_passes_options():
    adapter = build_adapter(Provider.CLAUDE, CLAUDE_CONFIG, timeout=5, anthropic_version="2024-01-01")

    assert isinstance(adapter, ClaudeAdapter)
    assert adapter.anthropic_version == "2024-01-01"
    assert adapter.timeout == 5


@pytest.mark.asyncio
async def test_generate_normalizes_reply(monkeypatch):
    calls = []

    async def fake_post_json(session, provider, url, headers, payload, timeout):
        calls.append((provider, url, headers, payload, timeout))
        return CLAUDE_REPLY

    monkeypatch.setattr(base_provider, "post_json", fake_post_json)
    adapter = ClaudeAdapter(CLAUDE_CONFIG, timeout=12)

    async def no_session():
        return None

    monkeypatch.setattr(adapter, "_ensure_session", no_session)

    response = await adapter.generate(GenerationRequest(prompt="Hi", metadata={"module": "content"}))

    assert response.provider == "claude"
    assert response.content == "Fresh ideas."
    assert response.metadata == {"module": "content"}
    assert response.usage.total_tokens == 13
    provider, url, headers, payload, timeout = calls[0]
    assert (provider, url, timeout) == ("claude", "https://api.anthropic.com/v1/messages", 12)
    assert headers["x-api-key"] == "ck-test"


@pytest.mark.asyncio
async def test_generate_malformed_reply_fails(monkeypatch):
    async def fake_post_json(*args, **kwargs):
        return {"choices": []}

    monkeypatch.setattr(base_provider, "post_json", fake_post_json)
    adapter = OpenAIAdapter(OPENAI_CONFIG)

    async def no_session():
        return None

    monkeypatch.setattr(adapter, "_ensure_session", no_session)

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await adapter.generate(GenerationRequest(prompt="Hi"))

    assert exc_info.value.provider == "openai"


def stub_transport(monkeypatch, adapter, body):
    async def fake_post_json(*args, **kwargs):
        return body

    async def no_session():
        return None

    monkeypatch.setattr(base_provider, "post_json", fake_post_json)
    monkeypatch.setattr(adapter, "_ensure_session", no_session)
    return adapter


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [None, [], ["choices"], "oops", 42])
async def test_generate_non_object_reply_fails(monkeypatch, body):
    adapter = stub_transport(monkeypatch, OpenAIAdapter(OPENAI_CONFIG), body)

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await adapter.generate(GenerationRequest(prompt="Hi"))

    assert exc_info.value.provider == "openai"
    assert "malformed response" in exc_info.value.reason


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "body",
    [
        {"content": ["Fresh ideas."]},
        {"content": None},
        {"content": "Fresh ideas."},
        {"content": [{"type": "text", "text": "ok"}], "usage": ["input_tokens"]},
    ],
)
async def test_claude_generate_unexpected_shapes_fail(monkeypatch, body):
    adapter = stub_transport(monkeypatch, ClaudeAdapter(CLAUDE_CONFIG), body)

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await adapter.generate(GenerationRequest(prompt="Hi"))

    assert exc_info.value.provider == "claude"


@pytest.mark.asyncio
async def test_openai_null_content_fails(monkeypatch):
    reply = dict(OPENAI_REPLY, choices=[{"message": {"role": "assistant", "content": None}}])
    adapter = stub_transport(monkeypatch, OpenAIAdapter(OPENAI_CONFIG), reply)

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await adapter.generate(GenerationRequest(prompt="Hi"))

    assert exc_info.value.reason == "malformed response: empty content"


@pytest.mark.asyncio
async def test_claude_reply_without_text_blocks_fails(monkeypatch):
    reply = dict(CLAUDE_REPLY, content=[{"type": "tool_use", "id": "t1", "name": "lookup", "input": {}}])
    adapter = stub_transport(monkeypatch, ClaudeAdapter(CLAUDE_CONFIG), reply)

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await adapter.generate(GenerationRequest(prompt="Hi"))

    assert "no text content block" in exc_info.value.reason


def test_string_token_counts_are_added_as_numbers():
    reply = dict(OPENAI_REPLY, usage={"prompt_tokens": "5", "completion_tokens": "3"})

    _, _, usage = OpenAIAdapter(OPENAI_CONFIG).parse_response(reply)

    assert (usage.prompt_tokens, usage.completion_tokens, usage.total_tokens) == (5, 3, 8)


@pytest.mark.asyncio
async def test_non_numeric_token_count_fails(monkeypatch):
    reply = dict(OPENAI_REPLY, usage={"prompt_tokens": "many", "completion_tokens": 3})
    adapter = stub_transport(monkeypatch, OpenAIAdapter(OPENAI_CONFIG), reply)

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await adapter.generate(GenerationRequest(prompt="Hi"))

    assert "malformed response" in exc_info.value.reason


class FakeResponse:
    def __init__(self, status=200, reason="OK", body=None, error=None):
        self.status = status
        self.reason = reason
        self.body = body
        self.error = error

    async def json(self, content_type=None):
        if self.error:
            raise self.error
        return self.body


class FakeRequestContext:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error

    async def __aenter__(self):
        if self.error:
            raise self.error
        return self.response

    async def __aexit__(self, *exc_info):
        return False


class FakeSession:
    def __init__(self, response=None, error=None):
        self.context = FakeRequestContext(response, error)
        self.posted = []

    def post(self, url, **kwargs):
        self.posted.append((url, kwargs))
        return self.context


async def call(session):
    return await post_json(session, "openai", "https://example.test/chat", {"Authorization": "Bearer x"}, {"a": 1}, 3)


@pytest.mark.asyncio
async def test_post_json_returns_body():
    session = FakeSession(FakeResponse(body={"ok": True}))

    assert await call(session) == {"ok": True}
    url, kwargs = session.posted[0]
    assert url == "https://example.test/chat"
    assert kwargs["json"] == {"a": 1}
    assert kwargs["timeout"].total == 3


@pytest.mark.asyncio
async def test_post_json_non_2xx_carries_status_text():
    session = FakeSession(FakeResponse(status=429, reason="Too Many Requests"))

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await call(session)

    assert exc_info.value.reason == "429 Too Many Requests"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "error",
    [asyncio.TimeoutError(), aiohttp.ClientConnectionError("connection refused")],
)
async def test_post_json_transport_errors(error):
    with pytest.raises(ProviderRequestFailed):
        await call(FakeSession(error=error))


@pytest.mark.asyncio
async def test_post_json_invalid_json():
    session = FakeSession(FakeResponse(error=ValueError("Expecting value")))

    with pytest.raises(ProviderRequestFailed) as exc_info:
        await call(session)

    assert "invalid JSON" in exc_info.value.reason
