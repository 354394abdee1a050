# ============================================================================
# src/idp_extraction/gemini/extractor.py
# ============================================================================
"""
Remote (Gemini) structured extractor

Runs the generateContent call under an explicit retry loop:

- no credential        -> None, nothing is sent
- non-2xx status       -> retried
- network error        -> retried
- empty response text  -> retried
- text is not a JSON object -> RemotePayloadMalformedError, not retried
- all attempts failed  -> RemoteExhaustedError (carries the final error)

The extractor never falls back to local parsing; that decision belongs to
the orchestrator.

Cancellation: an optional asyncio.Event is checked before each attempt and
raced against the in-flight request and the backoff sleep.
"""

import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, Optional

import aiohttp

from ..utils.exceptions import (
    ExtractionCancelledError,
    RemoteExhaustedError,
    RemotePayloadMalformedError,
    RemoteTransientError,
)
from .retry import RetryPolicy
from .transport import DEFAULT_GEMINI_MODEL, RemoteTransport, build_request_body

SleepFunc = Callable[[float], Awaitable[None]]

RETRYABLE_ERRORS = (RemoteTransientError, aiohttp.ClientError, asyncio.TimeoutError)


def extract_response_text(payload: Optional[Dict[str, Any]]) -> Optional[str]:
    """Return candidates[0].content.parts[0].text, or None for any other shape."""
    if not isinstance(payload, dict):
        return None
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None
    return text if isinstance(text, str) else None


def parse_payload(text: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as e:
        raise RemotePayloadMalformedError(f"Gemini response is not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise RemotePayloadMalformedError(
            f"Gemini response is not a JSON object (got {type(parsed).__name__})"
        )
    return parsed


class RemoteExtractor:
    """
    Retrying client for the remote structured-extraction service.

    Args:
        transport: Performs a single request
        policy: Attempt count and backoff schedule
        sleep: Coroutine function used between attempts (injectable for tests)
        source: Identifier attached to results produced by this extractor
    """

    def __init__(
        self,
        transport: RemoteTransport,
        policy: Optional[RetryPolicy] = None,
        sleep: SleepFunc = asyncio.sleep,
        source: str = DEFAULT_GEMINI_MODEL
    ):
        self.transport = transport
        self.policy = policy or RetryPolicy()
        self.sleep = sleep
        self.source = source
        self.logger = logging.getLogger(self.__class__.__name__)

    async def call(
        self,
        prompt: str,
        credential: Optional[str],
        cancel_event: Optional[asyncio.Event] = None
    ) -> Optional[Dict[str, Any]]:
        """
        Perform the remote extraction.

        Returns:
            The parsed JSON object, or None when no credential is available.

        Raises:
            RemoteExhaustedError: every attempt failed with a retryable error
            RemotePayloadMalformedError: the service answered with non-JSON text
            ExtractionCancelledError: cancel_event was set
        """
        if not credential:
            self.logger.info("No Gemini credential configured; skipping remote extraction")
            return None

        body = build_request_body(prompt)
        state = self.policy.first_state()

        while True:
            self._raise_if_cancelled(cancel_event)
            try:
                result = await self._attempt(body, credential, cancel_event)
            except RETRYABLE_ERRORS as e:
                if state.is_last(self.policy):
                    self.logger.error(
                        f"Gemini extraction failed after {state.attempt} attempt(s): {e}"
                    )
                    raise RemoteExhaustedError(
                        f"Gemini extraction failed after {state.attempt} attempt(s): {e}",
                        attempts=state.attempt,
                        last_error=e,
                    ) from e

                self.logger.warning(
                    f"Gemini attempt {state.attempt}/{self.policy.max_attempts} failed: {e}; "
                    f"retrying in {state.delay:.2f}s"
                )
                await self._run_cancellable(lambda: self.sleep(state.delay), cancel_event)
                state = state.advance(self.policy)
                continue

            self.logger.info(f"Gemini extraction succeeded on attempt {state.attempt}")
            return result

    async def _attempt(
        self,
        body: Dict[str, Any],
        credential: str,
        cancel_event: Optional[asyncio.Event]
    ) -> Dict[str, Any]:
        response = await self._run_cancellable(
            lambda: self.transport.send(body, credential), cancel_event
        )

        if not response.ok:
            raise RemoteTransientError(
                f"Gemini request failed with status {response.status}",
                status_code=response.status,
            )

        text = extract_response_text(response.payload)
        if not text:
            raise RemoteTransientError("Gemini returned an empty response", status_code=response.status)

        return parse_payload(text)

    @staticmethod
    def _raise_if_cancelled(cancel_event: Optional[asyncio.Event]):
        if cancel_event is not None and cancel_event.is_set():
            raise ExtractionCancelledError("Remote extraction cancelled")

    async def _run_cancellable(
        self,
        make_awaitable: Callable[[], Awaitable[Any]],
        cancel_event: Optional[asyncio.Event]
    ) -> Any:
        """Await make_awaitable(), aborting it as soon as cancel_event is set."""
        if cancel_event is None:
            return await make_awaitable()

        self._raise_if_cancelled(cancel_event)
        task = asyncio.ensure_future(make_awaitable())
        waiter = asyncio.ensure_future(cancel_event.wait())

        try:
            done, _ = await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            task.cancel()
            waiter.cancel()
            await asyncio.gather(task, waiter, return_exceptions=True)
            raise

        waiter.cancel()
        if task in done:
            return task.result()

        task.cancel()
        await asyncio.gather(task, return_exceptions=True)
        self.logger.info("Remote extraction cancelled while waiting")
        raise ExtractionCancelledError("Remote extraction cancelled")
