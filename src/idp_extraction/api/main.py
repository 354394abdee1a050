# ============================================================================
# src/idp_extraction/api/main.py
# ============================================================================
"""
FastAPI Backend for the IDP Extraction Engine

Serves the extraction session to a frontend: current document text, latest
artifact, status, and the extraction trigger. One session per process; a
second extraction while one is running is answered with 409.

Run:
    python -m idp_extraction.api.main
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import logging_settings
from ..core.factory import create_session
from ..core.schema import schema_as_dicts
from ..core.session import ExtractionSession
from ..utils.exceptions import ExtractionInProgressError
from ..utils.logging import setup_logging

logger = logging.getLogger(__name__)


# ============================================================================
# Models
# ============================================================================

class TextUpdateRequest(BaseModel):
    raw_text: str = Field(alias="rawText")


class StatusModel(BaseModel):
    tone: str
    message: str


class SessionStateResponse(BaseModel):
    rawText: str
    artifact: Optional[Dict[str, Any]] = None
    status: StatusModel
    processing: bool


class ExtractionResponse(BaseModel):
    artifact: Dict[str, Any]
    status: StatusModel


# ============================================================================
# App factory
# ============================================================================

def create_app(session: Optional[ExtractionSession] = None) -> FastAPI:
    """
    Build the API around a session.

    The session is created from settings when not given; either way its
    persisted state is loaded at startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        active = session or create_session()
        active.load()
        app.state.session = active
        logger.info(f"IDP API ready (remote extraction: {'on' if active.remote_enabled else 'off'})")
        yield
        await active.orchestrator.remote.transport.close()

    app = FastAPI(
        title="IDP Extraction Engine API",
        description="Structured field extraction from document OCR text",
        version="1.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    def _session() -> ExtractionSession:
        return app.state.session

    # ========================================================================
    # Endpoints
    # ========================================================================

    @app.get("/api/health")
    async def health():
        """Health check for monitoring."""
        return {"status": "healthy", "remote_enabled": _session().remote_enabled}

    @app.get("/api/schema")
    async def schema():
        return schema_as_dicts()

    @app.get("/api/state", response_model=SessionStateResponse)
    async def get_state():
        return _session().state.to_dict()

    @app.put("/api/text", response_model=SessionStateResponse)
    async def update_text(request: TextUpdateRequest):
        try:
            state = _session().update_text(request.raw_text)
        except ExtractionInProgressError as e:
            raise HTTPException(status_code=409, detail=str(e))
        return state.to_dict()

    @app.post("/api/extract", response_model=ExtractionResponse)
    async def extract():
        """Run the extraction pipeline over the current document text."""
        try:
            outcome = await _session().process()
        except ExtractionInProgressError as e:
            raise HTTPException(status_code=409, detail=str(e))

        return {
            "artifact": outcome.artifact.to_dict(),
            "status": outcome.status.to_dict(),
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_FORMAT_JSON,
    )
    uvicorn.run(app, host="0.0.0.0", port=8000)
