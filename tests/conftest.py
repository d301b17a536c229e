from __future__ import annotations

import pytest

from slidecue.config import Settings
from slidecue.recognition.base import (
    EndEvent,
    ErrorEvent,
    RecognitionAlternative,
    RecognitionResult,
    Recognizer,
    RecognizerBusyError,
    ResultEvent,
    StartEvent,
)


class FakeRecognizer(Recognizer):
    """In-process recognizer: records commands, events are fired by the test."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.running = False

    @property
    def starts(self) -> int:
        return self.calls.count("start")

    def start(self) -> None:
        self.calls.append("start")
        if self.running:
            raise RecognizerBusyError("recognition has already started")

    def stop(self) -> None:
        self.calls.append("stop")

    def abort(self) -> None:
        self.calls.append("abort")

    def fire_start(self) -> None:
        self.running = True
        self.emit(StartEvent())

    def fire_end(self) -> None:
        self.running = False
        self.emit(EndEvent())

    def fire_error(self, code: str) -> None:
        self.emit(ErrorEvent(error=code))

    def fire_results(self, *results: tuple[str, bool], index: int = 0) -> None:
        self.emit(
            ResultEvent(
                result_index=index,
                results=[
                    RecognitionResult(alternatives=[RecognitionAlternative(text)], is_final=final)
                    for text, final in results
                ],
            )
        )


class FakeClock:
    def __init__(self, now: int = 1_700_000_000_000) -> None:
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


@pytest.fixture
def settings() -> Settings:
    return Settings(RECOGNITION_LANG="en-US", AUTO_RESTART_MAX_ATTEMPTS=20)


@pytest.fixture
def recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
