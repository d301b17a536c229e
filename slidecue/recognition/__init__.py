"""Speech recognition: recognizer contract, error taxonomy, session state machine."""
from .base import (
    EndEvent,
    ErrorEvent,
    RecognitionAlternative,
    RecognitionResult,
    Recognizer,
    RecognizerBusyError,
    RecognizerError,
    RecognizerEvent,
    ResultEvent,
    StartEvent,
)
from .errors import RecognitionError, RecognitionErrorKind, classify_error
from .relay import RelayRecognizer
from .session import RecognitionSession, SessionStatus

__all__ = [
    "EndEvent",
    "ErrorEvent",
    "RecognitionAlternative",
    "RecognitionError",
    "RecognitionErrorKind",
    "RecognitionResult",
    "RecognitionSession",
    "Recognizer",
    "RecognizerBusyError",
    "RecognizerError",
    "RecognizerEvent",
    "RelayRecognizer",
    "ResultEvent",
    "SessionStatus",
    "StartEvent",
    "classify_error",
]
