import pytest

from slidecue.recognition.errors import (
    RecognitionErrorKind,
    classify_error,
    restart_limit_error,
    unsupported_error,
)


@pytest.mark.parametrize(
    "code, kind, message",
    [
        ("no-speech", RecognitionErrorKind.NO_SPEECH, "No speech detected. Please try again."),
        ("audio-capture", RecognitionErrorKind.NO_MICROPHONE, "No microphone detected. Please check your microphone."),
        (
            "not-allowed",
            RecognitionErrorKind.PERMISSION_DENIED,
            "Microphone permission denied. Please allow microphone access.",
        ),
        ("network", RecognitionErrorKind.NETWORK, "Network error. Please check your connection."),
        ("language-not-supported", RecognitionErrorKind.OTHER, "Speech recognition error: language-not-supported"),
    ],
)
def test_classify_error(code, kind, message):
    error = classify_error(code)
    assert error.kind is kind
    assert error.message == message
    assert error.code == code
    assert error.recoverable


def test_unsupported_is_not_recoverable():
    error = unsupported_error()
    assert error.kind is RecognitionErrorKind.UNSUPPORTED
    assert not error.recoverable


def test_restart_limit_error():
    error = restart_limit_error(5)
    assert error.kind is RecognitionErrorKind.OTHER
    assert error.code == "restart-limit"
    assert "5 attempts" in error.message
