"""
TranscriptSegment and pure helpers over ordered segment sequences.

A session transcript is append-only: insertion order is chronological order,
because the recognizer finalizes results in temporal order. None of the helpers
below mutate their input.

Continuous recognizers fragment natural speech into many short final results;
merge_adjacent compacts them by time and slide proximity before display or
before the transcript is handed to any summarizer.
"""
from __future__ import annotations

import time
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

DEFAULT_ROLLING_WINDOW_MS = 60000


def unix_ms() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class TranscriptSegment:
    """
    One finalized utterance.

    timestamp: unix ms at creation (or supplied explicitly).
    slide_number: 1-based number of the slide shown when the text was finalized.
    """

    text: str
    timestamp: int
    slide_number: int

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "timestamp": self.timestamp, "slide_number": self.slide_number}


def create_segment(text: str, slide_number: int, timestamp: int | None = None) -> TranscriptSegment:
    """Build a segment from finalized text. Callers drop blank text before calling."""
    return TranscriptSegment(
        text=text.strip(),
        timestamp=timestamp if timestamp is not None else unix_ms(),
        slide_number=slide_number,
    )


def is_transcript_segment(value: Any) -> bool:
    """True if value (segment, mapping or object) carries a well-typed text/timestamp/slide_number."""
    if value is None:
        return False
    if isinstance(value, Mapping):
        fields = (value.get("text"), value.get("timestamp"), value.get("slide_number"))
    else:
        fields = (
            getattr(value, "text", None),
            getattr(value, "timestamp", None),
            getattr(value, "slide_number", None),
        )
    text, timestamp, slide_number = fields
    if not isinstance(text, str):
        return False
    # bool is an int subclass; reject it explicitly
    for number in (timestamp, slide_number):
        if not isinstance(number, int) or isinstance(number, bool):
            return False
    return True


def rolling_window(
    segments: Iterable[TranscriptSegment],
    window_ms: int = DEFAULT_ROLLING_WINDOW_MS,
    now: int | None = None,
) -> list[TranscriptSegment]:
    """Segments with timestamp >= now - window_ms (inclusive), in input order."""
    cutoff = (now if now is not None else unix_ms()) - window_ms
    return [s for s in segments if s.timestamp >= cutoff]


def segments_for_slide(segments: Iterable[TranscriptSegment], slide_number: int) -> list[TranscriptSegment]:
    return [s for s in segments if s.slide_number == slide_number]


def format_relative(timestamp: int, base_time: int) -> str:
    """Elapsed time since base_time as mm:ss, or hh:mm:ss from one hour on. Negative elapsed -> 00:00."""
    total_seconds = max(0, timestamp - base_time) // 1000
    hours = total_seconds // 3600
    minutes = (total_seconds % 3600) // 60
    seconds = total_seconds % 60
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def speaking_duration(segments: Sequence[TranscriptSegment]) -> int:
    """Span between earliest and latest segment (ms). Input need not be sorted."""
    if len(segments) <= 1:
        return 0
    timestamps = [s.timestamp for s in segments]
    return max(timestamps) - min(timestamps)


def merge_adjacent(segments: Sequence[TranscriptSegment], threshold_ms: int) -> list[TranscriptSegment]:
    """
    Merge consecutive segments on the same slide within threshold_ms of the run's start.

    A merged run keeps the timestamp of its first segment (start time, not end).
    """
    if not segments:
        return []

    merged: list[TranscriptSegment] = []
    current = segments[0]
    for segment in segments[1:]:
        if (
            segment.slide_number == current.slide_number
            and segment.timestamp - current.timestamp <= threshold_ms
        ):
            current = TranscriptSegment(
                text=f"{current.text} {segment.text}",
                timestamp=current.timestamp,
                slide_number=current.slide_number,
            )
        else:
            merged.append(current)
            current = segment
    merged.append(current)
    return merged


def format_transcript(segments: Sequence[TranscriptSegment], base_time: int | None = None) -> str:
    """Render one `[mm:ss] text` line per segment, relative to base_time (default: first segment)."""
    if not segments:
        return ""
    base = base_time if base_time is not None else segments[0].timestamp
    return "\n".join(f"[{format_relative(s.timestamp, base)}] {s.text}" for s in segments)
