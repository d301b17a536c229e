"""
FastAPI app: WebSocket relay for live presentation transcription;
HTTP API: transcript views and slide timings for a session.

Client (browser) sends JSON relay messages: hello, recognizer events, slide
navigation, presenter controls. Server responds with JSON:
{ "type": "partial" | "final", "text": "...", "timestamp": unix_ms, "slide_number": n }
plus `status` and `recognizer_command` messages.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import PlainTextResponse

from slidecue.config import Settings, get_settings
from slidecue.schemas.transcript import (
    SegmentOut,
    SlideTimingOut,
    TimingsResponse,
    TranscriptResponse,
)
from slidecue.session_store import PresentationSession, delete_session, get_session
from slidecue.transcript.segments import (
    format_relative,
    format_transcript,
    merge_adjacent,
    rolling_window,
    segments_for_slide,
    speaking_duration,
)
from slidecue.websocket_manager import PresentationManager

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings | None = None) -> None:
    """Console logging at LOG_LEVEL; also to LOG_FILE when set."""
    settings = settings or get_settings()
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if settings.LOG_FILE:
        handlers.append(logging.FileHandler(settings.LOG_FILE, encoding="utf-8"))
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format=_LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(
    title="slidecue",
    description="Live presentation transcription aligned to slides",
    lifespan=lifespan,
)


def _require_session(session_id: str) -> PresentationSession:
    session = get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found; connect WebSocket first to create session")
    return session


@app.websocket("/ws/presentation")
async def websocket_presentation(websocket: WebSocket, session_id: str | None = None) -> None:
    """
    WebSocket: client relays its speech recognizer and slide navigation.
    Pass ?session_id= to reattach to an existing session after a reconnect.
    """
    await websocket.accept()
    manager = PresentationManager(websocket, session_id=session_id)
    try:
        await manager.run()
    except WebSocketDisconnect:
        pass


@app.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@app.get("/api/sessions/{session_id}/transcript", response_model=TranscriptResponse)
async def get_transcript(
    session_id: str,
    window_ms: int | None = None,
    slide: int | None = None,
    merge_ms: int | None = None,
    recent: bool = False,
) -> TranscriptResponse:
    """
    Transcript of a session. Filters apply in order: rolling window (last
    window_ms; recent=true uses ROLLING_WINDOW_MS), slide number, then merging
    of fragments within merge_ms.
    """
    session = _require_session(session_id)
    if recent and window_ms is None:
        window_ms = get_settings().ROLLING_WINDOW_MS
    all_segments = session.transcript_snapshot()
    segments = list(all_segments)
    if window_ms is not None:
        segments = rolling_window(segments, window_ms)
    if slide is not None:
        segments = segments_for_slide(segments, slide)
    if merge_ms is not None:
        segments = merge_adjacent(segments, merge_ms)

    # offsets count from when tracking started, else from the first segment
    base_time = session.tracker.session_start_time
    if base_time is None:
        base_time = all_segments[0].timestamp if all_segments else 0
    return TranscriptResponse(
        session_id=session_id,
        segments=[
            SegmentOut(
                text=s.text,
                timestamp=s.timestamp,
                slide_number=s.slide_number,
                relative=format_relative(s.timestamp, base_time),
            )
            for s in segments
        ],
        speaking_duration_ms=speaking_duration(segments),
    )


@app.get("/api/sessions/{session_id}/transcript/export", response_class=PlainTextResponse)
async def export_transcript(session_id: str) -> str:
    """Plain-text transcript, fragments merged, one `[mm:ss] text` line per segment."""
    session = _require_session(session_id)
    settings = get_settings()
    segments = merge_adjacent(list(session.transcript_snapshot()), settings.MERGE_THRESHOLD_MS)
    return format_transcript(segments, session.tracker.session_start_time)


@app.get("/api/sessions/{session_id}/timings", response_model=TimingsResponse)
async def get_timings(session_id: str) -> TimingsResponse:
    session = _require_session(session_id)
    tracker = session.tracker
    return TimingsResponse(
        session_id=session_id,
        is_tracking=tracker.is_tracking,
        session_start_time=tracker.session_start_time,
        current_slide_duration_ms=tracker.current_slide_duration(),
        timings=[SlideTimingOut(**t.to_dict()) for t in tracker.slide_timings()],
        time_per_slide=tracker.time_per_slide(),
    )


@app.delete("/api/sessions/{session_id}")
async def remove_session(session_id: str) -> dict:
    if not delete_session(session_id):
        raise HTTPException(status_code=404, detail="Session not found")
    logger.info("Session %s deleted", session_id)
    return {"session_id": session_id, "deleted": True}
