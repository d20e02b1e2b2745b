"""OpenRouter client — SDK exceptions and payloads mapped to ProviderCallError.

Tests cover:
    - Request carries system + user messages, model, temperature, max_tokens
    - Timeout, connection, 429, 5xx, and malformed responses each get their FailureKind
    - Missing usage -> 0 tokens; blank content returned as empty text
    - SDK retries disabled on the default client
    - Real SDK over MockTransport: undecodable 200 bodies, error bodies, and 429
      map to ProviderCallError, and the generator falls back past them
"""

import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from punchline.core.domain_types import FailureKind, JokeStyle
from punchline.core.errors import ProviderCallError
from punchline.core.generation_types import GenerationRequest
from punchline.core.model_candidates import ModelCandidate
from punchline.infrastructure.openrouter_client import OpenRouterClient, parse_completion
from punchline.services.joke_generator import JokeGenerator

_REQUEST = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")


def _response(content="A joke", total_tokens=42, with_usage=True):
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(total_tokens=total_tokens) if with_usage else None,
    )


class _FakeCompletions:
    def __init__(self, outcome):
        self._outcome = outcome
        self.kwargs = None

    async def create(self, **kwargs):
        self.kwargs = kwargs
        if isinstance(self._outcome, BaseException):
            raise self._outcome
        return self._outcome


def _client(outcome):
    completions = _FakeCompletions(outcome)
    sdk = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenRouterClient(api_key="k", client=sdk), completions


async def _complete(client):
    return await client.complete(
        system_prompt="sys", user_prompt="user",
        model="m/1", temperature=0.8, max_tokens=300,
    )


async def test_success_payload_and_parsing():
    client, completions = _client(_response("  Knock knock.  ", 17))
    result = await _complete(client)

    assert result.text == "Knock knock."
    assert result.total_tokens == 17
    assert completions.kwargs["model"] == "m/1"
    assert completions.kwargs["temperature"] == 0.8
    assert completions.kwargs["max_tokens"] == 300
    assert completions.kwargs["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "user"},
    ]


async def test_missing_usage_means_zero_tokens():
    client, _ = _client(_response(with_usage=False))
    assert (await _complete(client)).total_tokens == 0


async def test_none_content_returns_empty_text():
    client, _ = _client(_response(content=None))
    assert (await _complete(client)).text == ""


@pytest.mark.parametrize("error,kind,status", [
    (openai.APITimeoutError(request=_REQUEST), FailureKind.TIMEOUT, None),
    (openai.APIConnectionError(request=_REQUEST), FailureKind.CONNECTION_ERROR, None),
    (
        openai.RateLimitError(
            "rate limited",
            response=httpx.Response(429, request=_REQUEST),
            body={"error": {"message": "Rate limit exceeded"}},
        ),
        FailureKind.RATE_LIMIT, 429,
    ),
    (
        openai.InternalServerError(
            "server error",
            response=httpx.Response(502, request=_REQUEST),
            body=None,
        ),
        FailureKind.HTTP_ERROR, 502,
    ),
    (
        openai.AuthenticationError(
            "bad key",
            response=httpx.Response(401, request=_REQUEST),
            body={"message": "No auth credentials found"},
        ),
        FailureKind.HTTP_ERROR, 401,
    ),
])
async def test_sdk_errors_are_mapped(error, kind, status):
    client, _ = _client(error)
    with pytest.raises(ProviderCallError) as exc:
        await _complete(client)
    assert exc.value.kind is kind
    assert exc.value.status_code == status


async def test_status_error_message_comes_from_body():
    error = openai.RateLimitError(
        "rate limited",
        response=httpx.Response(429, request=_REQUEST),
        body={"error": {"message": "Rate limit exceeded"}},
    )
    client, _ = _client(error)
    with pytest.raises(ProviderCallError) as exc:
        await _complete(client)
    assert exc.value.message == "Rate limit exceeded"


@pytest.mark.parametrize("response", [
    SimpleNamespace(choices=[], usage=None),
    SimpleNamespace(choices=None, usage=None),
    SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=["x"]))], usage=None),
])
def test_malformed_payloads(response):
    with pytest.raises(ProviderCallError) as exc:
        parse_completion(response)
    assert exc.value.kind is FailureKind.MALFORMED_RESPONSE


def test_non_integer_usage_is_zero():
    assert parse_completion(_response(total_tokens="lots")).total_tokens == 0


async def test_default_client_has_no_sdk_retries():
    client = OpenRouterClient(
        api_key="k", timeout_seconds=12, referer="http://app.test", app_title="Punchline",
    )
    assert client.client.max_retries == 0
    assert client.client.timeout == 12
    assert client.client.default_headers["HTTP-Referer"] == "http://app.test"
    assert client.client.default_headers["X-Title"] == "Punchline"
    await client.aclose()


# --- Real SDK over httpx.MockTransport ---

def _completion_body(content="Why did the chicken...", total_tokens=42):
    return {
        "id": "gen-1",
        "object": "chat.completion",
        "created": 0,
        "model": "m/1",
        "choices": [{
            "index": 0,
            "message": {"role": "assistant", "content": content},
            "finish_reason": "stop",
        }],
        "usage": {
            "prompt_tokens": 10,
            "completion_tokens": total_tokens - 10,
            "total_tokens": total_tokens,
        },
    }


def _sdk_client(handler):
    sdk = openai.AsyncOpenAI(
        api_key="k",
        base_url="https://openrouter.test/api/v1",
        max_retries=0,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return OpenRouterClient(api_key="k", client=sdk)


async def test_sdk_success_is_parsed():
    client = _sdk_client(lambda request: httpx.Response(200, json=_completion_body()))
    result = await _complete(client)
    assert result.text == "Why did the chicken..."
    assert result.total_tokens == 42
    await client.aclose()


async def test_sdk_invalid_json_body_is_malformed():
    client = _sdk_client(lambda request: httpx.Response(
        200,
        headers={"content-type": "application/json"},
        content=b"<html>gateway hiccup</html>",
    ))
    with pytest.raises(ProviderCallError) as exc:
        await _complete(client)
    assert exc.value.kind is FailureKind.MALFORMED_RESPONSE
    await client.aclose()


async def test_sdk_error_body_with_200_is_malformed():
    client = _sdk_client(lambda request: httpx.Response(
        200, json={"error": {"message": "Provider returned error", "code": 502}},
    ))
    with pytest.raises(ProviderCallError) as exc:
        await _complete(client)
    assert exc.value.kind is FailureKind.MALFORMED_RESPONSE
    await client.aclose()


async def test_sdk_rate_limit_is_single_request():
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(
            429, json={"error": {"message": "Rate limit exceeded", "code": 429}},
        )

    client = _sdk_client(handler)
    with pytest.raises(ProviderCallError) as exc:
        await _complete(client)
    assert exc.value.kind is FailureKind.RATE_LIMIT
    assert exc.value.status_code == 429
    assert exc.value.message == "Rate limit exceeded"
    assert len(requests) == 1
    await client.aclose()


async def test_generator_falls_back_past_undecodable_body():
    models = []

    def handler(request):
        model = json.loads(request.content)["model"]
        models.append(model)
        if model == "model-a":
            return httpx.Response(
                200,
                headers={"content-type": "application/json"},
                content=b"<html>gateway hiccup</html>",
            )
        return httpx.Response(200, json=_completion_body("A fallback joke", 50))

    client = _sdk_client(handler)
    generator = JokeGenerator(client, (
        ModelCandidate("model-a", 0.002),
        ModelCandidate("model-b", 0.001),
    ))
    result = await generator.generate(
        GenerationRequest.create("coffee", JokeStyle.PUN),
    )

    assert models == ["model-a", "model-b"]
    assert result.text == "A fallback joke"
    assert result.model_used == "model-b"
    assert result.tokens_used == 50
    assert result.cost_usd == pytest.approx(0.00005)
    await client.aclose()
