# ============================================================================
# src/idp_extraction/core/state.py
# ============================================================================
"""
Session State

Everything the presentation layer renders, held in one immutable record.
Transitions are pure functions returning a new record; the session service
is the only owner that swaps them in.
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Optional

from .models import (
    CANCELLED_MESSAGE,
    PROCESSING_MESSAGE,
    READY_MESSAGE,
    REMOTE_SUCCESS_MESSAGE,
    RESTORED_MESSAGE,
    PersistedSnapshot,
    Status,
    StatusTone,
    StructuredArtifact,
)

DEFAULT_TEXT = (
    "--- Passport OCR Mock Data ---\n"
    "Name: Jane Doe\n"
    "Passport No: X1234567\n"
    "Nationality: USA\n"
    "Issue Date: 2021-05-17\n"
    "Expiry Date: 2031-05-16\n"
    "Place of Issue: Washington D.C."
)


@dataclass(frozen=True)
class SessionState:
    raw_text: str = DEFAULT_TEXT
    artifact: Optional[StructuredArtifact] = None
    status: Status = Status(StatusTone.INFO, READY_MESSAGE)
    processing: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rawText": self.raw_text,
            "artifact": self.artifact.to_dict() if self.artifact else None,
            "status": self.status.to_dict(),
            "processing": self.processing,
        }

    def to_snapshot(self) -> PersistedSnapshot:
        return PersistedSnapshot(raw_text=self.raw_text, artifact=self.artifact)


def restore(state: SessionState, snapshot: PersistedSnapshot) -> SessionState:
    """Apply a loaded snapshot; empty fields keep the current values."""
    if snapshot.raw_text:
        state = replace(state, raw_text=snapshot.raw_text)
    if snapshot.artifact is not None:
        state = replace(
            state,
            artifact=snapshot.artifact,
            status=Status(StatusTone.SUCCESS, RESTORED_MESSAGE),
        )
    return state


def edit_text(state: SessionState, raw_text: str) -> SessionState:
    return replace(state, raw_text=raw_text)


def start_processing(state: SessionState) -> SessionState:
    return replace(
        state,
        processing=True,
        status=Status(StatusTone.INFO, PROCESSING_MESSAGE),
    )


def complete_with_remote(state: SessionState, artifact: StructuredArtifact) -> SessionState:
    return replace(
        state,
        artifact=artifact,
        processing=False,
        status=Status(StatusTone.SUCCESS, REMOTE_SUCCESS_MESSAGE),
    )


def complete_with_fallback(
    state: SessionState,
    artifact: StructuredArtifact,
    reason: str
) -> SessionState:
    return replace(
        state,
        artifact=artifact,
        processing=False,
        status=Status(StatusTone.WARNING, reason),
    )


def cancel_processing(state: SessionState) -> SessionState:
    """Leave the previous artifact in place."""
    return replace(
        state,
        processing=False,
        status=Status(StatusTone.INFO, CANCELLED_MESSAGE),
    )


def fail_processing(state: SessionState, message: str) -> SessionState:
    return replace(
        state,
        processing=False,
        status=Status(StatusTone.DANGER, message),
    )
