"""
RelayRecognizer: the browser's Speech Recognition API, driven over a WebSocket.

Commands (start/stop/abort) become `recognizer_command` messages handed to
`send`; events reported by the browser are queued with feed() and delivered
one at a time by run(), so handlers see them in arrival order and never
concurrently.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

from slidecue.recognition.base import (
    EndEvent,
    Recognizer,
    RecognizerBusyError,
    RecognizerEvent,
    ResultEvent,
    StartEvent,
)

logger = logging.getLogger(__name__)


class RelayRecognizer(Recognizer):
    """Proxy for a recognizer running in the client. Tracks its running state from the events it reports."""

    def __init__(self, send: Callable[[dict[str, Any]], None], maxsize: int = 0) -> None:
        super().__init__()
        self._send = send
        # maxsize bounds only interim result batches; see feed()
        self._maxsize = maxsize
        self._events: asyncio.Queue[RecognizerEvent | None] = asyncio.Queue()
        self._running = False
        self._start_pending = False

    @property
    def running(self) -> bool:
        return self._running

    def _command(self, action: str) -> None:
        self._send(
            {
                "type": "recognizer_command",
                "action": action,
                "continuous": self.continuous,
                "interim_results": self.interim_results,
                "lang": self.lang,
            }
        )

    def start(self) -> None:
        if self._running or self._start_pending:
            raise RecognizerBusyError("recognition has already started")
        self._start_pending = True
        self._command("start")

    def stop(self) -> None:
        self._command("stop")

    def abort(self) -> None:
        self._command("abort")

    @staticmethod
    def _droppable(event: RecognizerEvent) -> bool:
        """Interim-only batches are superseded by the next batch; everything else must arrive."""
        if not isinstance(event, ResultEvent):
            return False
        return not any(r.is_final for r in event.results[event.result_index:])

    def feed(self, event: RecognizerEvent) -> bool:
        """
        Queue one event reported by the client. Returns False (event dropped) only
        for an interim-only result batch arriving while maxsize events are waiting.
        Start, error, end and final results are always queued.
        """
        if self._maxsize and self._events.qsize() >= self._maxsize and self._droppable(event):
            logger.warning("Recognizer event queue full; dropping interim result batch")
            return False
        self._events.put_nowait(event)
        return True

    def close(self) -> None:
        """Let run() return once the already-queued events are delivered."""
        self._events.put_nowait(None)

    def emit(self, event: RecognizerEvent) -> None:
        if isinstance(event, StartEvent):
            self._running = True
            self._start_pending = False
        elif isinstance(event, EndEvent):
            self._running = False
            self._start_pending = False
        super().emit(event)

    async def run(self) -> None:
        """Deliver queued events to the attached listener until close()."""
        while True:
            event = await self._events.get()
            try:
                if event is None:
                    break
                self.emit(event)
            finally:
                self._events.task_done()
