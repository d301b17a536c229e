"""
Schemas for the presentation WebSocket relay (client -> server messages).

The browser runs the recognizer and forwards its events; it also reports slide
navigation and the presenter's start/stop/clear/reset actions. The first message
of a connection must be `hello`, announcing whether the browser can recognize speech.
"""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter

from slidecue.recognition.base import (
    EndEvent,
    ErrorEvent,
    RecognitionAlternative,
    RecognitionResult,
    RecognizerEvent,
    ResultEvent,
    StartEvent,
)


class HelloMessage(BaseModel):
    type: Literal["hello"]
    speech_recognition: bool = Field(..., description="True when the browser exposes a speech recognizer")
    lang: str | None = Field(None, description="Recognition language override, e.g. en-US")


class AlternativePayload(BaseModel):
    transcript: str = ""
    confidence: float = Field(1.0, ge=0.0, le=1.0)


class ResultPayload(BaseModel):
    is_final: bool = False
    alternatives: list[AlternativePayload] = Field(default_factory=list)


class RecognizerEventMessage(BaseModel):
    """One recognizer event as reported by the browser."""

    type: Literal["recognizer"]
    event: Literal["start", "result", "error", "end"]
    result_index: int = Field(0, ge=0, description="First changed entry of results (result events)")
    results: list[ResultPayload] = Field(default_factory=list)
    error: str | None = Field(None, description="Recognizer error code (error events)")

    def to_event(self) -> RecognizerEvent:
        if self.event == "start":
            return StartEvent()
        if self.event == "end":
            return EndEvent()
        if self.event == "error":
            return ErrorEvent(error=self.error or "unknown")
        return ResultEvent(
            result_index=self.result_index,
            results=[
                RecognitionResult(
                    is_final=r.is_final,
                    alternatives=[
                        RecognitionAlternative(transcript=a.transcript, confidence=a.confidence)
                        for a in r.alternatives
                    ],
                )
                for r in self.results
            ],
        )


class SlidesMessage(BaseModel):
    """A deck with `count` slides was loaded."""

    type: Literal["slides"]
    count: int = Field(..., ge=0)


class SlideMessage(BaseModel):
    """The presenter navigated to slide `index` (0-based)."""

    type: Literal["slide"]
    index: int = Field(..., ge=0)


class ControlMessage(BaseModel):
    """Presenter action: start/stop listening, clear the transcript, reset the session."""

    type: Literal["control"]
    action: Literal["start", "stop", "clear", "reset"]


ClientMessage = Annotated[
    Union[HelloMessage, RecognizerEventMessage, SlidesMessage, SlideMessage, ControlMessage],
    Field(discriminator="type"),
]

client_message_adapter: TypeAdapter[ClientMessage] = TypeAdapter(ClientMessage)
