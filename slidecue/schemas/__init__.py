"""Pydantic schemas for the WebSocket relay and HTTP API."""
from slidecue.schemas.relay import (
    ClientMessage,
    ControlMessage,
    HelloMessage,
    RecognizerEventMessage,
    SlideMessage,
    SlidesMessage,
    client_message_adapter,
)
from slidecue.schemas.transcript import (
    SegmentOut,
    SlideTimingOut,
    TimingsResponse,
    TranscriptResponse,
)

__all__ = [
    "ClientMessage",
    "ControlMessage",
    "HelloMessage",
    "RecognizerEventMessage",
    "SegmentOut",
    "SlideMessage",
    "SlideTimingOut",
    "SlidesMessage",
    "TimingsResponse",
    "TranscriptResponse",
    "client_message_adapter",
]
