"""Transcript handling: finalized segments, derived views, partial vs final messages."""
from .messages import TranscriptMessage
from .segments import (
    DEFAULT_ROLLING_WINDOW_MS,
    TranscriptSegment,
    create_segment,
    format_relative,
    format_transcript,
    is_transcript_segment,
    merge_adjacent,
    rolling_window,
    segments_for_slide,
    speaking_duration,
    unix_ms,
)

__all__ = [
    "DEFAULT_ROLLING_WINDOW_MS",
    "TranscriptMessage",
    "TranscriptSegment",
    "create_segment",
    "format_relative",
    "format_transcript",
    "is_transcript_segment",
    "merge_adjacent",
    "rolling_window",
    "segments_for_slide",
    "speaking_duration",
    "unix_ms",
]
