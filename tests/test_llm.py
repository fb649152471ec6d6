from types import SimpleNamespace
from unittest.mock import MagicMock

import httpx
import openai
import pytest

import summarizer.llm as llm
from summarizer.errors import (
    AuthFailureError,
    EmptyResponseError,
    HttpStatusError,
    PayloadTooLargeError,
    RateLimitedError,
    ServerError,
    TransportError,
)
from summarizer.llm import CompletionClient, classify_status
from fakes import make_provider

URL = "https://primary.example.com/v1/chat/completions"


def _reply(content):
    message = SimpleNamespace(content=content)
    return SimpleNamespace(id="cmpl-1", choices=[SimpleNamespace(message=message)], usage=None)


def _status_error(status_code):
    request = httpx.Request("POST", URL)
    response = httpx.Response(status_code, request=request)
    return openai.APIStatusError(f"HTTP {status_code}", response=response, body=None)


@pytest.fixture
def sdk(monkeypatch):
    """Replace the OpenAI class; returns the mock SDK client every provider gets."""
    instance = MagicMock()
    factory = MagicMock(return_value=instance)
    monkeypatch.setattr(llm, "OpenAI", factory)
    instance.factory = factory
    return instance


@pytest.mark.parametrize("status_code, error_type", [
    (401, AuthFailureError),
    (403, AuthFailureError),
    (413, PayloadTooLargeError),
    (429, RateLimitedError),
    (500, ServerError),
    (503, ServerError),
    (599, ServerError),
    (400, HttpStatusError),
    (404, HttpStatusError),
])
def test_classify_status(status_code, error_type):
    error = classify_status("Groq", status_code)

    assert type(error) is error_type
    assert error.provider == "Groq"


def test_complete_sends_one_chat_request(sdk):
    sdk.chat.completions.create.return_value = _reply("  Lin Feng survived.  \n")
    provider = make_provider()

    text = CompletionClient().complete(provider, "system text", "user text", 800)

    assert text == "Lin Feng survived."
    sdk.chat.completions.create.assert_called_once_with(
        model="primary-model",
        messages=[
            {"role": "system", "content": "system text"},
            {"role": "user", "content": "user text"},
        ],
        temperature=0.7,
        max_tokens=800,
        top_p=1.0,
    )


def test_sdk_client_is_built_once_per_provider_without_retries(sdk):
    sdk.chat.completions.create.return_value = _reply("ok")
    client = CompletionClient(timeout=45)
    provider = make_provider()

    client.complete(provider, "s", "u", 10)
    client.complete(provider, "s", "u", 10)
    client.complete(make_provider("Other"), "s", "u", 10)

    assert sdk.factory.call_count == 2
    kwargs = sdk.factory.call_args_list[0].kwargs
    assert kwargs["api_key"] == "sk-test"
    assert kwargs["base_url"] == "https://primary.example.com/v1/"
    assert kwargs["max_retries"] == 0
    assert kwargs["timeout"].read == 45
    assert kwargs["timeout"].connect == 30.0


@pytest.mark.parametrize("status_code, error_type", [
    (401, AuthFailureError),
    (413, PayloadTooLargeError),
    (429, RateLimitedError),
    (502, ServerError),
    (418, HttpStatusError),
])
def test_http_errors_are_classified(sdk, status_code, error_type):
    sdk.chat.completions.create.side_effect = _status_error(status_code)

    with pytest.raises(error_type) as exc_info:
        CompletionClient().complete(make_provider(), "s", "u", 10)

    assert exc_info.value.provider == "Primary"
    assert sdk.chat.completions.create.call_count == 1


def test_timeout_is_transport_error(sdk):
    sdk.chat.completions.create.side_effect = openai.APITimeoutError(request=httpx.Request("POST", URL))

    with pytest.raises(TransportError, match="timed out"):
        CompletionClient().complete(make_provider(), "s", "u", 10)


def test_connection_failure_is_transport_error(sdk):
    sdk.chat.completions.create.side_effect = openai.APIConnectionError(request=httpx.Request("POST", URL))

    with pytest.raises(TransportError):
        CompletionClient().complete(make_provider(), "s", "u", 10)


@pytest.mark.parametrize("response", [
    SimpleNamespace(id="x", choices=[], usage=None),
    _reply(None),
    _reply(""),
    _reply("  \n\t"),
])
def test_missing_or_blank_reply_is_empty_response(sdk, response):
    sdk.chat.completions.create.return_value = response

    with pytest.raises(EmptyResponseError):
        CompletionClient().complete(make_provider(), "s", "u", 10)


def test_blank_key_or_prompt_is_rejected_before_sending(sdk):
    client = CompletionClient()

    with pytest.raises(ValueError):
        client.complete(make_provider(api_key=" "), "s", "u", 10)
    with pytest.raises(ValueError):
        client.complete(make_provider(), "s", "", 10)

    sdk.chat.completions.create.assert_not_called()


def _client_over(monkeypatch, handler):
    """CompletionClient whose SDK client talks to an in-process httpx transport."""
    real_openai = openai.OpenAI

    def factory(**kwargs):
        return real_openai(**kwargs, http_client=httpx.Client(transport=httpx.MockTransport(handler)))

    monkeypatch.setattr(llm, "OpenAI", factory)
    return CompletionClient()


def test_non_json_reply_is_transport_error(monkeypatch):
    client = _client_over(
        monkeypatch,
        lambda request: httpx.Response(200, headers={"content-type": "application/json"}, text="<html>gateway</html>"),
    )

    with pytest.raises(TransportError) as exc_info:
        client.complete(make_provider(), "s", "u", 10)

    assert exc_info.value.provider == "Primary"


def test_status_over_real_transport_is_still_classified(monkeypatch):
    client = _client_over(monkeypatch, lambda request: httpx.Response(429, json={"error": {"message": "slow down"}}))

    with pytest.raises(RateLimitedError):
        client.complete(make_provider(), "s", "u", 10)


@pytest.mark.parametrize("error", [
    openai.APIError("unexpected reply", httpx.Request("POST", URL), body=None),
    ValueError("Expecting value: line 1 column 1 (char 0)"),
])
def test_unexpected_sdk_failures_are_transport_errors(sdk, error):
    sdk.chat.completions.create.side_effect = error

    with pytest.raises(TransportError) as exc_info:
        CompletionClient().complete(make_provider(), "s", "u", 10)

    assert exc_info.value.__cause__ is error
