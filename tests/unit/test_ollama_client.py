"""
Unit tests for the Ollama client, with the HTTP layer mocked.
"""
import json

import httpx
import pytest
from tenacity import stop_after_attempt, wait_none

from hebpal.common.config import settings
from hebpal.common.errors import DiscoveryError, LlmError
from hebpal.llm import ollama_client
from hebpal.llm.ollama_client import chat_json, get_ollama_config, parse_json_content, strip_fences
from hebpal.pipeline.ai_discovery import DiscoveryService


@pytest.fixture
def llm_settings(monkeypatch):
    monkeypatch.setattr(settings, "OLLAMA_HOST", "http://llm.test/")
    monkeypatch.setattr(settings, "LLM_MODEL", "test-model")
    monkeypatch.setattr(settings, "OLLAMA_API_KEY", "")
    return settings


def _install_transport(monkeypatch, handler):
    real_client = httpx.Client
    transport = httpx.MockTransport(handler)

    def make_client(**kwargs):
        return real_client(transport=transport, **kwargs)

    monkeypatch.setattr(ollama_client.httpx, "Client", make_client)


class TestParsing:

    def test_strip_fences(self):
        assert strip_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
        assert strip_fences('{"a": 1}') == '{"a": 1}'

    def test_parse_fenced(self):
        assert parse_json_content('```json\n{"found": false}\n```') == {"found": False}

    def test_parse_empty(self):
        with pytest.raises(LlmError):
            parse_json_content(None)
        with pytest.raises(LlmError):
            parse_json_content("```json\n```")

    def test_parse_invalid(self):
        with pytest.raises(LlmError, match="Failed to parse JSON"):
            parse_json_content("not json at all")

    def test_parse_non_object(self):
        with pytest.raises(LlmError):
            parse_json_content("[1, 2]")


class TestConfig:

    def test_defaults_trimmed(self, llm_settings):
        base_url, headers, model = get_ollama_config()
        assert base_url == "http://llm.test"
        assert headers == {}
        assert model == "test-model"

    def test_api_key_header(self, llm_settings, monkeypatch):
        monkeypatch.setattr(settings, "OLLAMA_API_KEY", "secret")
        _, headers, _ = get_ollama_config()
        assert headers == {"Authorization": "Bearer secret"}


class TestChatJson:

    def test_posts_chat_payload(self, llm_settings, monkeypatch):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["body"] = json.loads(request.content)
            reply = {"message": {"role": "assistant", "content": '{"found": true, "book": "רות"}'}}
            return httpx.Response(200, json=reply)

        _install_transport(monkeypatch, handler)
        data = chat_json("where?", system="be brief", temperature=0.1)

        assert data == {"found": True, "book": "רות"}
        assert seen["url"] == "http://llm.test/api/chat"
        body = seen["body"]
        assert body["model"] == "test-model"
        assert body["format"] == "json"
        assert body["stream"] is False
        assert body["options"] == {"temperature": 0.1}
        assert body["messages"][0] == {"role": "system", "content": "be brief"}
        assert body["messages"][1] == {"role": "user", "content": "where?"}

    def test_model_override_and_no_system(self, llm_settings, monkeypatch):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"message": {"content": "{}"}})

        _install_transport(monkeypatch, handler)
        assert chat_json("hi", json_only=False, model_override="other") == {}
        assert seen["body"]["model"] == "other"
        assert "format" not in seen["body"]
        assert len(seen["body"]["messages"]) == 1

    def test_generate_style_reply(self, llm_settings, monkeypatch):
        _install_transport(monkeypatch, lambda request: httpx.Response(200, json={"response": '{"palindromes": []}'}))
        assert chat_json("x") == {"palindromes": []}

    def test_unparseable_content(self, llm_settings, monkeypatch):
        _install_transport(monkeypatch, lambda request: httpx.Response(200, json={"message": {"content": "sorry"}}))
        with pytest.raises(LlmError):
            chat_json("x")

    def test_http_error_reraised_after_retries(self, llm_settings, monkeypatch):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="boom")

        _install_transport(monkeypatch, handler)
        fast = chat_json.retry_with(stop=stop_after_attempt(2), wait=wait_none())
        with pytest.raises(httpx.HTTPStatusError):
            fast("x")
        assert len(calls) == 2

    def test_llm_error_not_retried(self, llm_settings, monkeypatch):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={"message": {"content": "oops"}})

        _install_transport(monkeypatch, handler)
        fast = chat_json.retry_with(wait=wait_none())
        with pytest.raises(LlmError):
            fast("x")
        assert len(calls) == 1

    @pytest.mark.parametrize("body", [
        {"message": None},
        {"message": "hi"},
        ["x"],
        {"message": {"content": 5}},
    ])
    def test_unexpected_body_shape(self, llm_settings, monkeypatch, body):
        _install_transport(monkeypatch, lambda request: httpx.Response(200, json=body))
        with pytest.raises(LlmError):
            chat_json("x")

    def test_non_json_body(self, llm_settings, monkeypatch):
        _install_transport(monkeypatch, lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(LlmError, match="Non-JSON"):
            chat_json("x")

    def test_client_error_not_retried(self, llm_settings, monkeypatch):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(404, text="model 'test-model' not found")

        _install_transport(monkeypatch, handler)
        fast = chat_json.retry_with(wait=wait_none())
        with pytest.raises(httpx.HTTPStatusError):
            fast("x")
        assert len(calls) == 1

    def test_transport_error_retried(self, llm_settings, monkeypatch):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json={"message": {"content": '{"ok": true}'}})

        _install_transport(monkeypatch, handler)
        fast = chat_json.retry_with(wait=wait_none())
        assert fast("x") == {"ok": True}
        assert len(calls) == 2


class TestDiscoveryOverHttp:
    """Malformed server replies reach the caller as DiscoveryError."""

    @pytest.mark.parametrize("body", [{"message": None}, {"message": "hi"}, ["x"]])
    def test_identify_source_bad_body(self, llm_settings, monkeypatch, body):
        _install_transport(monkeypatch, lambda request: httpx.Response(200, json=body))
        with pytest.raises(DiscoveryError):
            DiscoveryService().identify_source("אבא")

    def test_unknown_model(self, llm_settings, monkeypatch):
        _install_transport(monkeypatch, lambda request: httpx.Response(404, text="model not found"))
        with pytest.raises(DiscoveryError):
            DiscoveryService().discover_palindromes()
