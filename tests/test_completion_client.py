"""
Tests for quizgen.generation.completion_client

Test Coverage:
- GeminiClient: request shape, text extraction, error mapping
- OpenAIClient: chat completion round trip, error mapping
- Missing credentials fail before any network call

HTTP is served by httpx.MockTransport; nothing leaves the process.
"""
import asyncio
import json

import httpx
import pytest

from quizgen.errors import ConfigurationError, EmptyResponseError, MalformedResponseError, ServiceError
from quizgen.generation.completion_client import GeminiClient, OpenAIClient

ARRAY = '[{"text": "Q1", "options": ["a", "b", "c", "d"], "correct_answer": 0}]'


def _gemini_body(text=ARRAY):
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


def _http(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestGeminiClient:
    def test_complete_when_service_answers_then_returns_candidate_text(self):
        seen = {}

        def handler(request: httpx.Request):
            seen["url"] = request.url
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=_gemini_body())

        client = GeminiClient(api_key="test-key", model="gemini-2.0-flash", http_client=_http(handler))

        text = asyncio.run(client.complete("make questions"))

        assert text == ARRAY
        assert seen["url"].path.endswith("/models/gemini-2.0-flash:generateContent")
        assert seen["url"].params["key"] == "test-key"
        assert seen["body"]["contents"][0]["parts"][0]["text"] == "make questions"
        assert seen["body"]["generationConfig"]["response_mime_type"] == "application/json"

    def test_complete_when_status_500_then_raises_service_error(self):
        client = GeminiClient(
            api_key="k",
            http_client=_http(lambda request: httpx.Response(500, text="internal")),
        )

        with pytest.raises(ServiceError) as exc:
            asyncio.run(client.complete("p"))

        assert exc.value.status == 500
        assert exc.value.body == "internal"
        assert "500" in exc.value.message

    def test_complete_when_transport_fails_then_raises_service_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = GeminiClient(api_key="k", http_client=_http(handler))

        with pytest.raises(ServiceError):
            asyncio.run(client.complete("p"))

    def test_complete_when_no_candidates_then_raises_empty_response(self):
        client = GeminiClient(api_key="k", http_client=_http(lambda r: httpx.Response(200, json={"candidates": []})))

        with pytest.raises(EmptyResponseError):
            asyncio.run(client.complete("p"))

    def test_complete_when_body_not_json_then_raises_malformed(self):
        client = GeminiClient(api_key="k", http_client=_http(lambda r: httpx.Response(200, text="<html>")))

        with pytest.raises(MalformedResponseError):
            asyncio.run(client.complete("p"))

    def test_complete_when_key_missing_then_no_request_is_sent(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=_gemini_body())

        client = GeminiClient(http_client=_http(handler))

        with pytest.raises(ConfigurationError):
            asyncio.run(client.complete("p"))
        assert calls == []

    def test_extract_text_when_parts_split_then_joined(self):
        body = {"candidates": [{"content": {"parts": [{"text": "[1,"}, {"text": "2]"}]}}]}

        assert GeminiClient.extract_text(body) == "[1,2]"

    def test_extract_text_when_parts_blank_then_raises_empty_response(self):
        with pytest.raises(EmptyResponseError):
            GeminiClient.extract_text({"candidates": [{"content": {"parts": [{"text": "  "}]}}]})

    @pytest.mark.parametrize("body", [
        {"candidates": ["oops"]},
        {"candidates": {"0": {}}},
        {"candidates": [{"content": "text"}]},
        {"candidates": [{"content": {"parts": "text"}}]},
    ])
    def test_extract_text_when_shape_wrong_then_raises_malformed(self, body):
        with pytest.raises(MalformedResponseError):
            GeminiClient.extract_text(body)


class TestOpenAIClient:
    @staticmethod
    def _completion(content):
        return {
            "id": "chatcmpl-1",
            "object": "chat.completion",
            "created": 0,
            "model": "gpt-4o-mini",
            "choices": [
                {"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}
            ],
        }

    def test_complete_when_service_answers_then_returns_message_content(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json=self._completion(ARRAY))

        client = OpenAIClient(api_key="k", base_url="https://llm.test/v1", http_client=_http(handler))

        assert asyncio.run(client.complete("make questions")) == ARRAY
        assert seen["body"]["model"] == client.model
        assert seen["body"]["messages"][-1] == {"role": "user", "content": "make questions"}

    def test_complete_when_status_500_then_raises_service_error_without_retry(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, json={"error": {"message": "boom"}})

        client = OpenAIClient(api_key="k", base_url="https://llm.test/v1", http_client=_http(handler))

        with pytest.raises(ServiceError) as exc:
            asyncio.run(client.complete("p"))

        assert exc.value.status == 500
        assert len(calls) == 1

    def test_complete_when_content_empty_then_raises_empty_response(self):
        client = OpenAIClient(
            api_key="k",
            base_url="https://llm.test/v1",
            http_client=_http(lambda r: httpx.Response(200, json=self._completion(""))),
        )

        with pytest.raises(EmptyResponseError):
            asyncio.run(client.complete("p"))

    def test_complete_when_key_missing_then_raises_configuration_error(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)

        with pytest.raises(ConfigurationError):
            asyncio.run(OpenAIClient().complete("p"))
