"""Tests for the reasoning service client."""

from __future__ import annotations

import io
import json
from urllib.error import HTTPError, URLError

import pytest

from gorani.errors import ReasoningServiceError
from gorani.llm import ReasoningClient, ReasoningRequest
from gorani.prompting import ContextRequest, ResponseVariant


def _request(variant: ResponseVariant = ResponseVariant.FILE_SELECTION) -> ContextRequest:
    return ContextRequest(
        task_description="Add login",
        rendered_summary="File: a.go\n",
        variant=variant,
        prompt="Which files?\n",
    )


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch) -> None:
    for key in (
        "GORANI_MODEL",
        "OPENAI_MODEL",
        "GORANI_BASE_URL",
        "OPENAI_BASE_URL",
        "GORANI_API_KEY",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(key, raising=False)


def test_client_constructs_request() -> None:
    captured: list[ReasoningRequest] = []

    def fake_transport(request: ReasoningRequest) -> str:
        captured.append(request)
        return '{"files": []}'

    client = ReasoningClient(
        model="custom-model",
        base_url="http://localhost:8080/v1/",
        api_key="test-key",
        temperature=0.1,
        max_tokens=512,
        request_timeout=30.0,
        transport=fake_transport,
    )

    assert client.complete(_request()) == '{"files": []}'
    request = captured[0]
    assert request.prompt == "Which files?\n"
    assert request.model == "custom-model"
    assert request.base_url == "http://localhost:8080/v1"
    assert request.api_key == "test-key"
    assert request.temperature == 0.1
    assert request.max_tokens == 512
    assert request.request_timeout == 30.0
    assert request.response_format["json_schema"]["name"] == "file_selection"


def test_client_reads_defaults_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "env-key")
    monkeypatch.setenv("GORANI_MODEL", "env-model")

    client = ReasoningClient(transport=lambda request: "")

    assert client.api_key == "env-key"
    assert client.model == "env-model"
    assert client.base_url == ReasoningClient.DEFAULT_BASE_URL


def test_client_asks_for_missing_key() -> None:
    prompts: list[str] = []
    captured: list[ReasoningRequest] = []

    def read_secret(prompt: str) -> str:
        prompts.append(prompt)
        return "typed-key"

    def fake_transport(request: ReasoningRequest) -> str:
        captured.append(request)
        return "{}"

    client = ReasoningClient(read_secret=read_secret, transport=fake_transport)
    client.complete(_request())
    client.complete(_request())

    assert len(prompts) == 1
    assert [request.api_key for request in captured] == ["typed-key", "typed-key"]


class FakeResponse:
    def __init__(self, payload) -> None:
        self._payload = payload

    def read(self) -> bytes:
        return json.dumps(self._payload).encode("utf-8")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        return None


def test_http_transport_posts_strict_schema(monkeypatch) -> None:
    captured = {}

    def fake_urlopen(request, timeout=None):
        captured["url"] = request.full_url
        captured["headers"] = dict(request.header_items())
        captured["body"] = json.loads(request.data.decode("utf-8"))
        captured["timeout"] = timeout
        return FakeResponse({"choices": [{"message": {"content": ' {"files": ["a.go"]} '}}]})

    monkeypatch.setattr("gorani.llm.client.urlopen", fake_urlopen)

    client = ReasoningClient(model="gpt-test", api_key="secret", request_timeout=15.0)
    reply = client.complete(_request(ResponseVariant.CODE_BUNDLE))

    assert reply == '{"files": ["a.go"]}'
    assert captured["url"] == "https://api.openai.com/v1/chat/completions"
    assert captured["headers"]["Authorization"] == "Bearer secret"
    assert captured["timeout"] == 15.0
    body = captured["body"]
    assert body["model"] == "gpt-test"
    assert body["messages"] == [{"role": "user", "content": "Which files?\n"}]
    assert body["response_format"]["type"] == "json_schema"
    assert body["response_format"]["json_schema"]["name"] == "code_response"
    assert body["response_format"]["json_schema"]["strict"] is True
    assert "temperature" not in body


def test_http_transport_requires_api_key() -> None:
    client = ReasoningClient(api_key=None)

    with pytest.raises(ReasoningServiceError):
        client.complete(_request())


def test_http_transport_wraps_http_errors(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise HTTPError(request.full_url, 401, "Unauthorized", {}, io.BytesIO(b"bad key"))

    monkeypatch.setattr("gorani.llm.client.urlopen", fake_urlopen)

    with pytest.raises(ReasoningServiceError) as excinfo:
        ReasoningClient(api_key="secret").complete(_request())

    assert "401" in str(excinfo.value)
    assert "bad key" in str(excinfo.value)


def test_http_transport_wraps_connection_errors(monkeypatch) -> None:
    def fake_urlopen(request, timeout=None):
        raise URLError("connection refused")

    monkeypatch.setattr("gorani.llm.client.urlopen", fake_urlopen)

    with pytest.raises(ReasoningServiceError):
        ReasoningClient(api_key="secret").complete(_request())


def test_http_transport_reports_refusals(monkeypatch) -> None:
    monkeypatch.setattr(
        "gorani.llm.client.urlopen",
        lambda request, timeout=None: FakeResponse(
            {"choices": [{"message": {"content": None, "refusal": "cannot help"}}]}
        ),
    )

    with pytest.raises(ReasoningServiceError) as excinfo:
        ReasoningClient(api_key="secret").complete(_request())

    assert "cannot help" in str(excinfo.value)
