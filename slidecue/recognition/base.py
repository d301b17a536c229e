"""
Recognizer: abstract interface for a continuous speech recognizer.

Equivalent in contract to the browser Speech Recognition API: configuration
(continuous, interim_results, lang), commands (start/stop/abort) and four
events (start, result, error, end). Events are delivered as event objects to a
single attached listener, in temporal order, never overlapping.

Implementations: RelayRecognizer (browser recognizer driven over WebSocket).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Union


@dataclass
class RecognitionAlternative:
    """One candidate transcription of a result."""

    transcript: str
    confidence: float = 1.0


@dataclass
class RecognitionResult:
    """One result: ranked alternatives plus the recognizer's finality flag."""

    alternatives: list[RecognitionAlternative] = field(default_factory=list)
    is_final: bool = False

    @property
    def transcript(self) -> str:
        """Best alternative's text ("" when the recognizer sent none)."""
        if not self.alternatives:
            return ""
        return self.alternatives[0].transcript


@dataclass
class StartEvent:
    """Recognizer began capturing audio."""


@dataclass
class ResultEvent:
    """
    Batch of results. result_index is the first entry that changed;
    entries before it were already delivered in an earlier batch.
    """

    results: list[RecognitionResult] = field(default_factory=list)
    result_index: int = 0


@dataclass
class ErrorEvent:
    """Recognizer error code, e.g. "no-speech", "audio-capture", "not-allowed", "network"."""

    error: str


@dataclass
class EndEvent:
    """Recognizer session ended (requested or not)."""


RecognizerEvent = Union[StartEvent, ResultEvent, ErrorEvent, EndEvent]
RecognizerListener = Callable[[RecognizerEvent], None]


class RecognizerError(Exception):
    """Base for failures raised by recognizer commands."""


class RecognizerBusyError(RecognizerError):
    """start() was requested while the recognizer is already running."""


class Recognizer(ABC):
    """
    Abstract continuous recognizer. Owned by exactly one RecognitionSession;
    only the owner calls start/stop/abort.
    """

    def __init__(self) -> None:
        self.continuous: bool = False
        self.interim_results: bool = False
        self.lang: str = "en-US"
        self._listener: RecognizerListener | None = None

    def attach(self, listener: RecognizerListener | None) -> None:
        """Route all future events to listener (None detaches)."""
        self._listener = listener

    def emit(self, event: RecognizerEvent) -> None:
        """Deliver one event to the attached listener, if any."""
        if self._listener is not None:
            self._listener(event)

    @abstractmethod
    def start(self) -> None:
        """Begin recognition. Raises RecognizerBusyError if already running."""
        ...

    @abstractmethod
    def stop(self) -> None:
        """Stop listening; pending audio may still yield a final result before end."""
        ...

    @abstractmethod
    def abort(self) -> None:
        """Stop immediately, discarding pending audio."""
        ...
