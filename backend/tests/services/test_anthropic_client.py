"""ResilientAnthropicClient tests — retry, backoff and error mapping over a scripted SDK."""

import pytest

from challenge_forge.core.errors import GenerationAPIError
from challenge_forge.infrastructure.anthropic_client import ResilientAnthropicClient
from tests.services.mock_anthropic import (
    MockAnthropicClient,
    bad_request_error,
    connection_error,
    overloaded_error,
    rate_limit_error,
    server_error,
    text_message,
    timeout_error,
)


def _client(outcomes, max_retries=2):
    mock = MockAnthropicClient(outcomes)
    client = ResilientAnthropicClient(
        api_key="sk-ant-test", max_retries=max_retries,
        base_delay_ms=1, max_delay_ms=5, client=mock,
    )
    return client, mock


async def _create(client):
    return await client.create_message(
        model="test-model", max_tokens=100, system="sys",
        messages=[{"role": "user", "content": "hi"}],
    )


async def test_success_returns_response_on_first_call():
    client, mock = _client([text_message("hello")])
    response = await _create(client)
    assert response.content[0].text == "hello"
    assert len(mock.calls) == 1


async def test_temperature_only_sent_when_given():
    client, mock = _client([text_message("a"), text_message("b")])
    await _create(client)
    await client.create_message(
        model="m", max_tokens=10, system="s", messages=[], temperature=0.2,
    )
    assert "temperature" not in mock.calls[0]
    assert mock.calls[1]["temperature"] == 0.2


async def test_rate_limit_is_retried():
    client, mock = _client([rate_limit_error(), text_message("ok")])
    response = await _create(client)
    assert response.content[0].text == "ok"
    assert len(mock.calls) == 2


async def test_overloaded_is_retried():
    client, mock = _client([overloaded_error(), text_message("ok")])
    await _create(client)
    assert len(mock.calls) == 2


async def test_server_and_connection_errors_are_retried():
    client, mock = _client([server_error(), connection_error(), text_message("ok")])
    await _create(client)
    assert len(mock.calls) == 3


async def test_rate_limit_exhausted_raises():
    client, mock = _client([rate_limit_error()] * 3, max_retries=2)
    with pytest.raises(GenerationAPIError) as exc_info:
        await _create(client)
    assert exc_info.value.api_error_type == "rate_limit"
    assert exc_info.value.http_status == 503
    assert len(mock.calls) == 3


async def test_transient_exhausted_raises_connection_error():
    client, _ = _client([server_error()] * 2, max_retries=1)
    with pytest.raises(GenerationAPIError) as exc_info:
        await _create(client)
    assert exc_info.value.api_error_type == "connection_error"


async def test_client_error_is_not_retried():
    client, mock = _client([bad_request_error(), text_message("unused")])
    with pytest.raises(GenerationAPIError) as exc_info:
        await _create(client)
    assert exc_info.value.api_error_type == "client_error"
    assert len(mock.calls) == 1


async def test_timeout_is_not_retried():
    client, mock = _client([timeout_error(), text_message("unused")])
    with pytest.raises(GenerationAPIError) as exc_info:
        await _create(client)
    assert exc_info.value.api_error_type == "timeout"
    assert len(mock.calls) == 1


async def test_unexpected_exception_mapped_to_unknown():
    client, _ = _client([ValueError("boom")])
    with pytest.raises(GenerationAPIError) as exc_info:
        await _create(client)
    assert exc_info.value.api_error_type == "unknown"


def test_backoff_stays_within_jitter_bounds():
    client = ResilientAnthropicClient(
        api_key="k", base_delay_ms=1000, max_delay_ms=60_000,
        client=MockAnthropicClient([]),
    )
    for attempt in range(4):
        base = (2 ** attempt) * 1000
        delay = client._backoff(attempt)
        assert base * 0.75 - 1 <= delay <= base * 1.25


def test_backoff_capped_at_max_delay():
    client = ResilientAnthropicClient(
        api_key="k", base_delay_ms=1000, max_delay_ms=2000,
        client=MockAnthropicClient([]),
    )
    assert client._backoff(10) <= 2500


def test_retry_after_header_parsed_to_ms():
    client = ResilientAnthropicClient(api_key="k", client=MockAnthropicClient([]))
    assert client._extract_retry_after(rate_limit_error("2")) == 2000
    assert client._extract_retry_after(rate_limit_error("0.5")) == 500
    assert client._extract_retry_after(rate_limit_error("soon")) is None
    assert client._extract_retry_after(rate_limit_error()) is None
