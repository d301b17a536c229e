"""
TranscriptMessage: partial (interim, may change) and final (committed) transcript
updates pushed to the client over the WebSocket relay.

- PARTIAL: sent for every interim recognizer result; replaced by the next one.
- FINAL: sent once per finalized utterance, tagged with the slide it was spoken over.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from slidecue.transcript.segments import TranscriptSegment, unix_ms


@dataclass
class TranscriptMessage:
    """Message sent to client over WebSocket. Partial messages carry the current slide too."""

    type: str  # "partial" | "final"
    text: str
    timestamp: int  # unix_ms
    slide_number: int

    @classmethod
    def partial(cls, text: str, slide_number: int) -> "TranscriptMessage":
        return cls(type="partial", text=text, timestamp=unix_ms(), slide_number=slide_number)

    @classmethod
    def final(cls, segment: TranscriptSegment) -> "TranscriptMessage":
        return cls(
            type="final",
            text=segment.text,
            timestamp=segment.timestamp,
            slide_number=segment.slide_number,
        )

    def to_payload(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "text": self.text,
            "timestamp": self.timestamp,
            "slide_number": self.slide_number,
        }
