"""Schemas for the read-only transcript and timing HTTP API."""
from __future__ import annotations

from pydantic import BaseModel, Field


class SegmentOut(BaseModel):
    text: str
    timestamp: int = Field(..., description="Unix ms when the utterance was finalized (start of a merged run)")
    slide_number: int = Field(..., description="1-based slide number")
    relative: str = Field(..., description="Offset from the first segment, mm:ss or hh:mm:ss")


class TranscriptResponse(BaseModel):
    """Response body for GET /api/sessions/{session_id}/transcript."""

    session_id: str
    segments: list[SegmentOut]
    speaking_duration_ms: int = Field(0, description="Span between earliest and latest returned segment")


class SlideTimingOut(BaseModel):
    slide_index: int = Field(..., description="0-based slide index")
    start_time: int
    duration: int = Field(..., description="Milliseconds; the last entry is measured up to now")


class TimingsResponse(BaseModel):
    """Response body for GET /api/sessions/{session_id}/timings."""

    session_id: str
    is_tracking: bool
    session_start_time: int | None = None
    current_slide_duration_ms: int = 0
    timings: list[SlideTimingOut]
    time_per_slide: dict[int, int] = Field(default_factory=dict, description="Total ms per slide index")
