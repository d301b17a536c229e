"""
In-memory presentation sessions. session_id is generated on the backend (WebSocket).

A PresentationSession owns the transcript and the current-slide pointer for one
practice run. The transcript is appended to only by the WebSocket relay (final
results) and emptied only by clear/reset; HTTP queries read snapshots.
Nothing survives a restart.
"""
from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from slidecue.slides.tracker import SlideTransitionTracker
from slidecue.transcript.segments import TranscriptSegment, unix_ms

logger = logging.getLogger(__name__)

SlideListener = Callable[[int], None]


class PresentationSession:
    """Slide deck position, transcript, recording flag and slide timing for one session."""

    def __init__(self, session_id: str, clock: Callable[[], int] = unix_ms) -> None:
        self.session_id = session_id
        self.created_at = time.time()
        self.slide_count = 0
        self.current_slide_index = 0
        self.is_recording = False
        self._transcript: list[TranscriptSegment] = []
        self._slide_listeners: list[SlideListener] = []
        self.tracker = SlideTransitionTracker(lambda: self.current_slide_index, clock=clock)
        self.subscribe(self.tracker.observe)

    # --- Slides ---

    def subscribe(self, listener: SlideListener) -> None:
        """Call listener(current_slide_index) after every navigation command."""
        self._slide_listeners.append(listener)

    def _notify_slide(self) -> None:
        for listener in self._slide_listeners:
            listener(self.current_slide_index)

    def set_slides(self, count: int) -> None:
        """New deck loaded: position returns to the first slide."""
        self.slide_count = max(0, count)
        self.current_slide_index = 0
        self._notify_slide()

    def set_current_slide(self, index: int) -> None:
        """Jump to index, clamped to the deck (0 when no slides are loaded)."""
        if self.slide_count == 0:
            self.current_slide_index = 0
        else:
            self.current_slide_index = max(0, min(index, self.slide_count - 1))
        self._notify_slide()

    def next_slide(self) -> None:
        if self.current_slide_index < self.slide_count - 1:
            self.current_slide_index += 1
        self._notify_slide()

    def previous_slide(self) -> None:
        if self.current_slide_index > 0:
            self.current_slide_index -= 1
        self._notify_slide()

    @property
    def current_slide_number(self) -> int:
        """1-based number of the current slide, as stored on transcript segments."""
        return self.current_slide_index + 1

    # --- Transcript ---

    def add_segment(self, segment: TranscriptSegment) -> None:
        self._transcript.append(segment)

    def clear_transcript(self) -> None:
        self._transcript = []

    def transcript_snapshot(self) -> tuple[TranscriptSegment, ...]:
        return tuple(self._transcript)

    def reset(self) -> None:
        """Back to a fresh session: no slides, no transcript, not recording."""
        self.slide_count = 0
        self.current_slide_index = 0
        self.is_recording = False
        self._transcript = []
        self.tracker.reset()
        self._notify_slide()


_session_store: dict[str, PresentationSession] = {}


def generate_session_id() -> str:
    """Generate a new session_id (UUID hex, 12 chars). Backend only."""
    return uuid.uuid4().hex[:12]


def get_session(session_id: str) -> PresentationSession | None:
    """Return session or None if not found."""
    return _session_store.get(session_id)


def ensure_session(session_id: str) -> PresentationSession:
    """Create session if not exists. Called by WebSocket when connection starts."""
    session = _session_store.get(session_id)
    if session is None:
        session = PresentationSession(session_id)
        _session_store[session_id] = session
        logger.info("Session %s created", session_id)
    return session


def delete_session(session_id: str) -> bool:
    """Remove session from store. Return True if it existed."""
    if session_id in _session_store:
        del _session_store[session_id]
        return True
    return False


def session_store() -> dict[str, PresentationSession]:
    """Return the underlying store (read-only view for debugging)."""
    return _session_store
