"""
PresentationManager: one WebSocket = one presenter browser tab.

The browser owns the microphone and the Speech Recognition API; this side owns
the engine. Recognizer events arriving from the browser are queued on a
RelayRecognizer and fed to the RecognitionSession one at a time; commands the
session issues (start/stop/abort, including auto-restarts) travel back as
`recognizer_command` messages. Final results become TranscriptSegments tagged
with the slide shown at that moment and are appended to the PresentationSession.
"""
from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

from fastapi import WebSocket
from pydantic import ValidationError

from slidecue.config import get_settings
from slidecue.recognition.base import RecognizerEvent
from slidecue.recognition.relay import RelayRecognizer
from slidecue.recognition.session import RecognitionSession
from slidecue.schemas.relay import (
    ControlMessage,
    HelloMessage,
    RecognizerEventMessage,
    SlideMessage,
    SlidesMessage,
    client_message_adapter,
)
from slidecue.session_store import ensure_session, generate_session_id
from slidecue.transcript.messages import TranscriptMessage
from slidecue.transcript.segments import create_segment

logger = logging.getLogger(__name__)


class PresentationManager:
    """
    Relays one browser's recognizer and slide navigation into a PresentationSession.
    Outgoing messages are queued and written by a single sender task, so
    synchronous engine callbacks never await the socket.
    """

    def __init__(self, websocket: WebSocket, session_id: str | None = None) -> None:
        self._ws = websocket
        self._settings = get_settings()
        self._session_id = session_id or generate_session_id()
        self._session = ensure_session(self._session_id)
        self._outbox: asyncio.Queue[str | None] = asyncio.Queue()
        self._closed = False

        # Created on hello, once the browser said whether it can recognize speech
        self._recognizer: RelayRecognizer | None = None
        self._recognition: RecognitionSession | None = None
        self._relay_task: asyncio.Task[Any] | None = None
        self._sender_task: asyncio.Task[Any] | None = None

    @property
    def session_id(self) -> str:
        return self._session_id

    # --- Outgoing ---

    def _send(self, payload: dict[str, Any]) -> None:
        if self._closed:
            return
        self._outbox.put_nowait(json.dumps(payload))

    def _send_status(self) -> None:
        status: dict[str, Any] = {
            "type": "status",
            "session_id": self._session_id,
            "slide_index": self._session.current_slide_index,
            "is_recording": self._session.is_recording,
            "is_tracking": self._session.tracker.is_tracking,
        }
        if self._recognition is not None:
            status.update(self._recognition.snapshot())
        self._send(status)

    def _send_error(self, detail: str) -> None:
        self._send({"type": "error", "detail": detail})

    async def _sender(self) -> None:
        while True:
            text = await self._outbox.get()
            if text is None:
                break
            try:
                await self._ws.send_text(text)
            except Exception:
                self._closed = True
                break

    # --- Engine callbacks ---

    def _on_result(self, text: str, is_final: bool) -> None:
        """Final text becomes a segment on the current slide; interim text is only displayed."""
        if not is_final:
            self._send(TranscriptMessage.partial(text, self._session.current_slide_number).to_payload())
            return
        if not text.strip():
            return
        segment = create_segment(text, self._session.current_slide_number)
        self._session.add_segment(segment)
        self._send(TranscriptMessage.final(segment).to_payload())

    def _on_recognizer_event(self, event: RecognizerEvent) -> None:
        self._recognition.dispatch(event)
        self._send_status()

    # --- Incoming ---

    def _handle_hello(self, msg: HelloMessage) -> None:
        if self._recognition is not None:
            self._send_error("hello already received")
            return
        if msg.speech_recognition:
            self._recognizer = RelayRecognizer(self._send, maxsize=self._settings.EVENT_QUEUE_MAXSIZE)
        self._recognition = RecognitionSession(
            self._recognizer,
            on_result=self._on_result,
            lang=msg.lang,
            settings=self._settings,
        )
        if self._recognizer is not None:
            self._recognizer.attach(self._on_recognizer_event)
            self._relay_task = asyncio.create_task(self._recognizer.run())
        self._send_status()

    def _handle_control(self, msg: ControlMessage) -> None:
        recognition = self._recognition
        session = self._session
        if msg.action == "start":
            recognition.start()
            if recognition.is_supported:
                session.is_recording = True
                if not session.tracker.is_tracking:
                    session.tracker.start_tracking()
        elif msg.action == "stop":
            recognition.stop()
            session.is_recording = False
            session.tracker.stop_tracking()
        elif msg.action == "clear":
            session.clear_transcript()
            recognition.reset_transcript()
        elif msg.action == "reset":
            recognition.stop()
            session.reset()
            recognition.reset_transcript()
        self._send_status()

    def _handle_text(self, text: str) -> None:
        try:
            msg = client_message_adapter.validate_json(text)
        except ValidationError as e:
            logger.warning("Invalid relay message on session %s: %s", self._session_id, e.errors()[:1])
            self._send_error(f"invalid message: {e.error_count()} validation error(s)")
            return

        if isinstance(msg, HelloMessage):
            self._handle_hello(msg)
            return
        if self._recognition is None:
            self._send_error("send hello first")
            return

        if isinstance(msg, RecognizerEventMessage):
            if self._recognizer is None:
                self._send_error("speech recognition not supported by this client")
                return
            if not self._recognizer.feed(msg.to_event()):
                self._send_error("recognizer event dropped")
        elif isinstance(msg, SlidesMessage):
            self._session.set_slides(msg.count)
            self._send_status()
        elif isinstance(msg, SlideMessage):
            self._session.set_current_slide(msg.index)
            self._send_status()
        elif isinstance(msg, ControlMessage):
            self._handle_control(msg)

    async def run(self) -> None:
        """Main loop: receive JSON text frames until disconnect."""
        self._sender_task = asyncio.create_task(self._sender())
        self._send({"type": "session", "session_id": self._session_id})
        logger.info("Presentation relay connected (session %s)", self._session_id)

        try:
            while not self._closed:
                try:
                    msg = await self._ws.receive()
                    if msg.get("type") == "websocket.disconnect":
                        break
                    text = msg.get("text")
                    if text is None:
                        continue
                except Exception:
                    break
                self._handle_text(text)
        finally:
            await self._shutdown()

    async def _shutdown(self) -> None:
        # Browser tab is gone: nobody will deliver the recognizer's end event.
        if self._recognition is not None:
            self._recognition.abort()
        if self._recognizer is not None:
            self._recognizer.close()
        if self._relay_task:
            try:
                await asyncio.wait_for(self._relay_task, timeout=5.0)
            except asyncio.TimeoutError:
                self._relay_task.cancel()
            except Exception:
                logger.exception("Recognizer relay failed (session %s)", self._session_id)
        self._session.is_recording = False
        self._session.tracker.stop_tracking()

        self._closed = True
        self._outbox.put_nowait(None)
        if self._sender_task:
            try:
                await asyncio.wait_for(self._sender_task, timeout=5.0)
            except asyncio.TimeoutError:
                self._sender_task.cancel()
        logger.info("Presentation relay closed (session %s)", self._session_id)
