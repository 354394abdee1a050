# ============================================================================
# FILE: tests/unit/test_remote_extractor.py
# ============================================================================
"""
Unit tests for the retrying remote extractor
"""

import asyncio

import aiohttp
import pytest

from idp_extraction.gemini.extractor import extract_response_text, parse_payload
from idp_extraction.gemini.retry import RetryPolicy
from idp_extraction.gemini.transport import TransportResponse
from idp_extraction.utils.exceptions import (
    ExtractionCancelledError,
    RemoteExhaustedError,
    RemotePayloadMalformedError,
    RemoteTransientError,
)

from conftest import gemini_payload


@pytest.mark.asyncio
async def test_empty_credential_skips_network(make_transport, make_remote, success_response):
    transport = make_transport(success_response)
    remote = make_remote(transport)

    assert await remote.call("prompt", "") is None
    assert await remote.call("prompt", None) is None
    assert transport.calls == []


@pytest.mark.asyncio
async def test_success_on_first_attempt(make_transport, make_remote, success_response, remote_fields, recording_sleep):
    transport = make_transport(success_response)
    remote = make_remote(transport)

    result = await remote.call("the prompt", "secret")

    assert result == remote_fields
    assert len(transport.calls) == 1
    assert transport.calls[0]["credential"] == "secret"
    assert transport.calls[0]["body"]["contents"][0]["parts"][0]["text"] == "the prompt"
    assert transport.calls[0]["body"]["generationConfig"] == {"responseMimeType": "application/json"}
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_failing_transport_retries_three_times(make_transport, make_remote, recording_sleep):
    errors = [aiohttp.ClientConnectionError(f"down {i}") for i in range(3)]
    transport = make_transport(*errors)
    remote = make_remote(transport)

    with pytest.raises(RemoteExhaustedError) as exc_info:
        await remote.call("prompt", "secret")

    assert len(transport.calls) == 3
    assert recording_sleep.delays == [0.5, 1.0]
    assert exc_info.value.attempts == 3
    assert exc_info.value.last_error is errors[2]
    assert exc_info.value.__cause__ is errors[2]


@pytest.mark.asyncio
async def test_non_success_status_is_retried(make_transport, make_remote, success_response, remote_fields, recording_sleep):
    transport = make_transport(
        TransportResponse(status=503, error_text="unavailable"),
        TransportResponse(status=429),
        success_response,
    )
    remote = make_remote(transport)

    assert await remote.call("prompt", "secret") == remote_fields
    assert len(transport.calls) == 3
    assert recording_sleep.delays == [0.5, 1.0]


@pytest.mark.asyncio
async def test_final_status_error_is_carried(make_transport, make_remote):
    transport = make_transport(TransportResponse(status=500))
    remote = make_remote(transport)

    with pytest.raises(RemoteExhaustedError) as exc_info:
        await remote.call("prompt", "secret")

    last_error = exc_info.value.last_error
    assert isinstance(last_error, RemoteTransientError)
    assert last_error.status_code == 500
    assert len(transport.calls) == 3


@pytest.mark.asyncio
async def test_empty_text_is_retried(make_transport, make_remote, success_response, recording_sleep):
    transport = make_transport(
        TransportResponse(status=200, payload=gemini_payload("")),
        TransportResponse(status=200, payload={"candidates": []}),
        success_response,
    )
    remote = make_remote(transport)

    assert await remote.call("prompt", "secret") is not None
    assert len(transport.calls) == 3


@pytest.mark.asyncio
async def test_timeout_is_retried(make_transport, make_remote, success_response):
    transport = make_transport(asyncio.TimeoutError(), success_response)
    remote = make_remote(transport)

    assert await remote.call("prompt", "secret") is not None
    assert len(transport.calls) == 2


@pytest.mark.asyncio
async def test_malformed_json_fails_fast(make_transport, make_remote, recording_sleep):
    transport = make_transport(TransportResponse(status=200, payload=gemini_payload("not json {")))
    remote = make_remote(transport)

    with pytest.raises(RemotePayloadMalformedError):
        await remote.call("prompt", "secret")

    assert len(transport.calls) == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_custom_policy(make_transport, make_remote, recording_sleep):
    transport = make_transport(TransportResponse(status=502))
    remote = make_remote(transport, RetryPolicy(max_attempts=4, initial_delay=0.1, backoff_factor=3.0))

    with pytest.raises(RemoteExhaustedError):
        await remote.call("prompt", "secret")

    assert len(transport.calls) == 4
    assert recording_sleep.delays == pytest.approx([0.1, 0.3, 0.9])


@pytest.mark.asyncio
async def test_single_attempt_policy_does_not_sleep(make_transport, make_remote, recording_sleep):
    transport = make_transport(TransportResponse(status=500))
    remote = make_remote(transport, RetryPolicy(max_attempts=1))

    with pytest.raises(RemoteExhaustedError):
        await remote.call("prompt", "secret")

    assert len(transport.calls) == 1
    assert recording_sleep.delays == []


@pytest.mark.asyncio
async def test_cancel_before_first_attempt(make_transport, make_remote, success_response):
    transport = make_transport(success_response)
    remote = make_remote(transport)
    cancel = asyncio.Event()
    cancel.set()

    with pytest.raises(ExtractionCancelledError):
        await remote.call("prompt", "secret", cancel)

    assert transport.calls == []


@pytest.mark.asyncio
async def test_cancel_stops_retry_loop(make_transport, make_remote):
    cancel = asyncio.Event()

    class CancellingError(aiohttp.ClientError):
        pass

    transport = make_transport(CancellingError("down"))
    original_send = transport.send

    async def send(body, credential):
        cancel.set()
        return await original_send(body, credential)

    transport.send = send
    remote = make_remote(transport)

    with pytest.raises(ExtractionCancelledError):
        await remote.call("prompt", "secret", cancel)

    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_cancel_aborts_pending_request(make_transport, make_remote):
    started = asyncio.Event()
    aborted = []

    transport = make_transport(TransportResponse(status=200))

    async def hanging_send(body, credential):
        started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            aborted.append(True)
            raise

    transport.send = hanging_send
    remote = make_remote(transport)
    cancel = asyncio.Event()

    async def cancel_when_started():
        await started.wait()
        cancel.set()

    canceller = asyncio.ensure_future(cancel_when_started())
    with pytest.raises(ExtractionCancelledError):
        await asyncio.wait_for(remote.call("prompt", "secret", cancel), timeout=5)
    await canceller

    assert aborted == [True]


@pytest.mark.asyncio
async def test_task_cancellation_collects_pending_request(make_transport, make_remote):
    started = asyncio.Event()
    aborted = []

    transport = make_transport(TransportResponse(status=200))

    async def hanging_send(body, credential):
        started.set()
        try:
            await asyncio.sleep(3600)
        except asyncio.CancelledError:
            # cleanup spans several loop iterations
            for _ in range(5):
                await asyncio.sleep(0)
            aborted.append(True)
            raise

    transport.send = hanging_send
    remote = make_remote(transport)

    call = asyncio.ensure_future(remote.call("prompt", "secret", asyncio.Event()))
    await started.wait()
    call.cancel()

    with pytest.raises(asyncio.CancelledError):
        await call

    # the in-flight request was cancelled and awaited before the call unwound
    assert aborted == [True]


def test_extract_response_text_shapes():
    assert extract_response_text(gemini_payload('{"a": 1}')) == '{"a": 1}'
    assert extract_response_text(None) is None
    assert extract_response_text({}) is None
    assert extract_response_text({"candidates": [{"content": {"parts": []}}]}) is None
    assert extract_response_text({"candidates": [{"content": None}]}) is None
    assert extract_response_text(gemini_payload(None)) is None


def test_parse_payload_requires_object():
    assert parse_payload('{"applicantName": "A"}') == {"applicantName": "A"}
    with pytest.raises(RemotePayloadMalformedError):
        parse_payload("[1, 2]")
    with pytest.raises(RemotePayloadMalformedError):
        parse_payload("```json\n{}\n```")


def test_retry_policy_validation():
    with pytest.raises(ValueError):
        RetryPolicy(max_attempts=0)
    with pytest.raises(ValueError):
        RetryPolicy(initial_delay=-1)
    with pytest.raises(ValueError):
        RetryPolicy(backoff_factor=0.5)
