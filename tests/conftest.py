# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import pytest

from idp_extraction.core.orchestrator import ExtractionOrchestrator
from idp_extraction.core.persistence import ArtifactRepository, InMemoryKeyValueStore
from idp_extraction.core.session import ExtractionSession
from idp_extraction.gemini.extractor import RemoteExtractor
from idp_extraction.gemini.retry import RetryPolicy
from idp_extraction.gemini.transport import RemoteTransport, TransportResponse


def gemini_payload(text: Optional[str]) -> Dict[str, Any]:
    """Wrap model output the way generateContent returns it."""
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeTransport(RemoteTransport):
    """
    Scripted transport. Each entry in `responses` is either a
    TransportResponse to return or an exception to raise; the last entry
    repeats once the script runs out.
    """

    def __init__(self, responses: List[Any]):
        self.responses = list(responses)
        self.calls: List[Dict[str, Any]] = []
        self.closed = False

    async def send(self, body: Dict[str, Any], credential: str) -> TransportResponse:
        self.calls.append({"body": body, "credential": credential})
        index = min(len(self.calls), len(self.responses)) - 1
        response = self.responses[index]
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self):
        self.closed = True


class RecordingSleep:
    """Replaces asyncio.sleep; records requested delays without waiting."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sample_passport_text():
    """Sample passport OCR text"""
    return (
        "--- Passport OCR Mock Data ---\n"
        "Name: Jane Doe\n"
        "Passport No: X1234567\n"
        "Nationality: USA\n"
        "Issue Date: 2021-05-17\n"
        "Expiry Date: 2031-05-16\n"
        "Place of Issue: Washington D.C."
    )


@pytest.fixture
def remote_fields():
    return {
        "applicantName": "Jane Doe",
        "documentId": "X1234567",
        "issueDate": "2021-05-17",
    }


@pytest.fixture
def success_response(remote_fields):
    return TransportResponse(status=200, payload=gemini_payload(json.dumps(remote_fields)))


@pytest.fixture
def recording_sleep():
    return RecordingSleep()


@pytest.fixture
def fixed_clock():
    def clock():
        return datetime(2024, 1, 15, 9, 30, 0, 123000, tzinfo=timezone.utc)
    return clock


@pytest.fixture
def make_transport():
    def factory(*responses):
        return FakeTransport(list(responses))
    return factory


@pytest.fixture
def make_remote(recording_sleep):
    def factory(transport, policy=None):
        return RemoteExtractor(
            transport,
            policy=policy or RetryPolicy(),
            sleep=recording_sleep,
            source="gemini-test-model",
        )
    return factory


@pytest.fixture
def make_orchestrator(make_remote, fixed_clock):
    def factory(transport, clock=None):
        return ExtractionOrchestrator(make_remote(transport), clock=clock or fixed_clock)
    return factory


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def make_session(make_orchestrator, memory_store):
    def factory(transport, credential="test-key", store=None):
        repository = ArtifactRepository(store if store is not None else memory_store)
        return ExtractionSession(make_orchestrator(transport), repository, credential=credential)
    return factory
