"""
RecognitionSession: one continuous speech-to-text capture over a Recognizer.

Lifecycle (SessionStatus):

    IDLE -> STARTING -> LISTENING -> STOPPING -> IDLE            (caller stop)
    LISTENING -> [end] -> STARTING -> LISTENING                  (auto-restart)
    LISTENING -> ERROR -> [end] -> IDLE                          (no restart from ERROR)

Continuous recognizers end on their own (e.g. after a stretch of silence) even
when nobody asked them to stop. While the caller still wants to listen
(STARTING/LISTENING) an end event re-requests start on the same recognizer.
An intentional stop (STOPPING) or a reported error (ERROR) suppresses that.

Nothing here raises across the public API: failures are recorded as
last_error, and start() without a recognizer is a no-op.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

from slidecue.config import Settings, get_settings
from slidecue.recognition.base import (
    EndEvent,
    ErrorEvent,
    Recognizer,
    RecognizerBusyError,
    RecognizerError,
    RecognizerEvent,
    ResultEvent,
    StartEvent,
)
from slidecue.recognition.errors import (
    RecognitionError,
    classify_error,
    restart_limit_error,
    unsupported_error,
)

logger = logging.getLogger(__name__)

ResultCallback = Callable[[str, bool], None]


class SessionStatus(str, Enum):
    IDLE = "idle"
    STARTING = "starting"
    LISTENING = "listening"
    STOPPING = "stopping"
    ERROR = "error"


# Statuses in which the caller has asked to listen and has not asked to stop.
_LISTEN_INTENT = (SessionStatus.STARTING, SessionStatus.LISTENING)


class RecognitionSession:
    """
    Wraps a Recognizer; owns start/stop, auto-restart and final vs interim text.

    recognizer=None means the host has no recognition capability: the session
    reports UNSUPPORTED once and start() never does anything.
    on_result(text, is_final) is called for every non-empty final or interim update.
    """

    def __init__(
        self,
        recognizer: Recognizer | None = None,
        on_result: ResultCallback | None = None,
        lang: str | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._recognizer = recognizer
        self.on_result = on_result
        self._max_restarts = settings.AUTO_RESTART_MAX_ATTEMPTS
        self._lang = lang or settings.RECOGNITION_LANG

        self._status = SessionStatus.IDLE
        self._is_listening = False
        self._transcript = ""
        self._interim = ""
        self._last_error: RecognitionError | None = None
        # Auto-restarts since the last recognized text (or manual start)
        self._restart_attempts = 0

        if recognizer is None:
            self._last_error = unsupported_error()
            logger.warning("Speech recognition unavailable; session disabled")
            return
        recognizer.continuous = True
        recognizer.interim_results = True
        recognizer.lang = self._lang
        recognizer.attach(self.dispatch)

    # --- State ---

    @property
    def is_supported(self) -> bool:
        return self._recognizer is not None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def is_listening(self) -> bool:
        """Mirrors the recognizer: True between its start and end events."""
        return self._is_listening

    @property
    def should_auto_restart(self) -> bool:
        return self._status in _LISTEN_INTENT

    @property
    def is_stopping_intentionally(self) -> bool:
        return self._status is SessionStatus.STOPPING

    @property
    def transcript(self) -> str:
        """All final text emitted this session, concatenated."""
        return self._transcript

    @property
    def interim_transcript(self) -> str:
        return self._interim

    @property
    def last_error(self) -> RecognitionError | None:
        return self._last_error

    @property
    def error(self) -> str | None:
        """Human-readable message for the most recent error, if any."""
        return self._last_error.message if self._last_error else None

    @property
    def lang(self) -> str:
        return self._lang

    @property
    def recognizer(self) -> Recognizer | None:
        return self._recognizer

    def snapshot(self) -> dict[str, Any]:
        return {
            "status": self._status.value,
            "is_supported": self.is_supported,
            "is_listening": self._is_listening,
            "transcript": self._transcript,
            "interim_transcript": self._interim,
            "error": self.error,
            "error_kind": self._last_error.kind.value if self._last_error else None,
        }

    # --- Commands ---

    def start(self) -> None:
        if self._recognizer is None:
            return
        self._last_error = None
        self._status = SessionStatus.STARTING
        self._restart_attempts = 0
        logger.info("Recognition start requested (lang=%s)", self._lang)
        self._request_start()

    def stop(self) -> None:
        """Stop listening; the trailing end event will not trigger a restart. Idempotent."""
        if self._recognizer is None:
            return
        if self._status is not SessionStatus.IDLE or self._is_listening:
            self._status = SessionStatus.STOPPING
        logger.info("Recognition stop requested")
        try:
            self._recognizer.stop()
        except RecognizerError as err:
            logger.debug("Recognizer stop failed: %s", err)

    def abort(self) -> None:
        """Like stop(), but the recognizer discards pending audio."""
        if self._recognizer is None:
            return
        if self._status is not SessionStatus.IDLE or self._is_listening:
            self._status = SessionStatus.STOPPING
        try:
            self._recognizer.abort()
        except RecognizerError as err:
            logger.debug("Recognizer abort failed: %s", err)

    def reset_transcript(self) -> None:
        """Clear final text, interim text and the last error. Listening state is untouched."""
        self._transcript = ""
        self._interim = ""
        self._last_error = None

    def _request_start(self) -> None:
        try:
            self._recognizer.start()
        except RecognizerBusyError:
            logger.debug("Recognizer already running; start ignored")
            if self._is_listening and self._status is SessionStatus.STARTING:
                self._status = SessionStatus.LISTENING
        except RecognizerError as err:
            self._report_error(classify_error(str(err) or type(err).__name__))

    # --- Events ---

    def dispatch(self, event: RecognizerEvent) -> None:
        """Handle one recognizer event synchronously."""
        if isinstance(event, StartEvent):
            self._on_start()
        elif isinstance(event, ResultEvent):
            self._on_results(event)
        elif isinstance(event, ErrorEvent):
            self._report_error(classify_error(event.error))
        elif isinstance(event, EndEvent):
            self._on_end()
        else:
            logger.warning("Ignoring unknown recognizer event %r", event)

    def _on_start(self) -> None:
        self._is_listening = True
        self._last_error = None
        if self._status is SessionStatus.STARTING:
            self._status = SessionStatus.LISTENING

    def _on_results(self, event: ResultEvent) -> None:
        final_text = ""
        interim_text = ""
        for result in event.results[max(0, event.result_index):]:
            if result.is_final:
                final_text += result.transcript
            else:
                interim_text += result.transcript

        if final_text:
            self._transcript += final_text
            self._interim = ""
            self._restart_attempts = 0
            self._notify(final_text, True)
        elif interim_text:
            self._interim = interim_text
            self._restart_attempts = 0
            self._notify(interim_text, False)

    def _report_error(self, error: RecognitionError) -> None:
        logger.warning("Recognition error (%s): %s", error.code, error.message)
        self._last_error = error
        self._status = SessionStatus.ERROR

    def _on_end(self) -> None:
        self._is_listening = False
        if not self.should_auto_restart:
            self._status = SessionStatus.IDLE
            return

        if self._max_restarts and self._restart_attempts >= self._max_restarts:
            self._last_error = restart_limit_error(self._restart_attempts)
            logger.warning("Recognizer keeps ending; giving up after %d restarts", self._restart_attempts)
            self._status = SessionStatus.IDLE
            return

        self._restart_attempts += 1
        logger.info("Recognizer ended unexpectedly; restarting (attempt %d)", self._restart_attempts)
        self._status = SessionStatus.STARTING
        self._request_start()

    def _notify(self, text: str, is_final: bool) -> None:
        if self.on_result is not None:
            self.on_result(text, is_final)
