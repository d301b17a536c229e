"""Classification of recognizer error codes into user-facing errors."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

UNSUPPORTED_MESSAGE = "Speech recognition is not supported in this browser. Please use Chrome or Edge."
RESTART_LIMIT_CODE = "restart-limit"


class RecognitionErrorKind(str, Enum):
    UNSUPPORTED = "unsupported"
    NO_SPEECH = "no_speech"
    NO_MICROPHONE = "no_microphone"
    PERMISSION_DENIED = "permission_denied"
    NETWORK = "network"
    OTHER = "other"


_CODE_TO_KIND = {
    "no-speech": RecognitionErrorKind.NO_SPEECH,
    "audio-capture": RecognitionErrorKind.NO_MICROPHONE,
    "not-allowed": RecognitionErrorKind.PERMISSION_DENIED,
    "network": RecognitionErrorKind.NETWORK,
}

_MESSAGES = {
    RecognitionErrorKind.NO_SPEECH: "No speech detected. Please try again.",
    RecognitionErrorKind.NO_MICROPHONE: "No microphone detected. Please check your microphone.",
    RecognitionErrorKind.PERMISSION_DENIED: "Microphone permission denied. Please allow microphone access.",
    RecognitionErrorKind.NETWORK: "Network error. Please check your connection.",
}


@dataclass(frozen=True)
class RecognitionError:
    """
    Classified error as surfaced to the caller.

    Every kind except UNSUPPORTED is recoverable: the caller may start() again.
    """

    kind: RecognitionErrorKind
    message: str
    code: str | None = None

    @property
    def recoverable(self) -> bool:
        return self.kind is not RecognitionErrorKind.UNSUPPORTED


def classify_error(code: str) -> RecognitionError:
    """Map a recognizer error code to its kind and human-readable message."""
    kind = _CODE_TO_KIND.get(code, RecognitionErrorKind.OTHER)
    message = _MESSAGES.get(kind, f"Speech recognition error: {code}")
    return RecognitionError(kind=kind, message=message, code=code)


def unsupported_error() -> RecognitionError:
    return RecognitionError(kind=RecognitionErrorKind.UNSUPPORTED, message=UNSUPPORTED_MESSAGE)


def restart_limit_error(attempts: int) -> RecognitionError:
    return RecognitionError(
        kind=RecognitionErrorKind.OTHER,
        message=f"Speech recognition stopped restarting after {attempts} attempts.",
        code=RESTART_LIMIT_CODE,
    )
