# ============================================================================
# src/idp_extraction/gemini/transport.py
# ============================================================================
"""
Gemini HTTP transport

Sends one generateContent request and reports the HTTP status and decoded
JSON body. Retries, status interpretation and payload parsing belong to the
RemoteExtractor; this layer only moves bytes.

Request shape:
    POST {base_url}/models/{model}:generateContent?key={credential}
    {"contents": [{"parts": [{"text": prompt}]}],
     "generationConfig": {"responseMimeType": "application/json"}}
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import aiohttp

DEFAULT_GEMINI_MODEL = "gemini-2.5-flash-preview-09-2025"
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


def build_request_body(prompt: str) -> Dict[str, Any]:
    return {
        "contents": [
            {
                "parts": [
                    {"text": prompt},
                ],
            },
        ],
        "generationConfig": {
            "responseMimeType": "application/json",
        },
    }


@dataclass
class TransportResponse:
    status: int
    payload: Optional[Dict[str, Any]] = None
    error_text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


class RemoteTransport(ABC):
    """A single remote structured-extraction request."""

    @abstractmethod
    async def send(self, body: Dict[str, Any], credential: str) -> TransportResponse:
        pass

    async def close(self):
        pass


class GeminiHttpTransport(RemoteTransport):
    """
    aiohttp-based transport for the Generative Language API.

    Config options:
        model: Model identifier (default: gemini-2.5-flash-preview-09-2025)
        base_url: API base URL
        timeout: Total request timeout in seconds (default: 30)
    """

    def __init__(
        self,
        model: str = DEFAULT_GEMINI_MODEL,
        base_url: str = DEFAULT_GEMINI_BASE_URL,
        timeout: float = 30.0
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.logger = logging.getLogger(self.__class__.__name__)

        # HTTP session (created lazily, tied to event loop)
        self._session: Optional[aiohttp.ClientSession] = None
        self._session_loop: Optional[asyncio.AbstractEventLoop] = None

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session for current event loop."""
        current_loop = asyncio.get_running_loop()

        needs_new_session = (
            self._session is None
            or self._session.closed
            or self._session_loop is not current_loop
        )

        if needs_new_session:
            if self._session is not None and not self._session.closed:
                await self._session.close()
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            )
            self._session_loop = current_loop

        return self._session

    async def close(self):
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None
        self._session_loop = None

    async def send(self, body: Dict[str, Any], credential: str) -> TransportResponse:
        session = await self._get_session()

        async with session.post(
            self.endpoint,
            params={"key": credential},
            json=body,
        ) as response:
            if not 200 <= response.status < 300:
                error_text = await response.text(errors="replace")
                return TransportResponse(status=response.status, error_text=error_text[:500])

            try:
                payload = await response.json(content_type=None)
            except ValueError:
                self.logger.warning("Gemini returned a non-JSON response body")
                payload = None

            if not isinstance(payload, dict):
                payload = None
            return TransportResponse(status=response.status, payload=payload)
