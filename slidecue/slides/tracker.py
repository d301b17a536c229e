"""
Slide transition tracking: how long the presenter dwells on each slide.

The current slide index is owned elsewhere (the presentation session); the
tracker only observes it. While armed, every change of the observed index
appends one SlideTransition. Timings are derived on demand: each transition
lasts until the next one, the last one is open-ended (measured to now).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from slidecue.transcript.segments import unix_ms

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlideTransition:
    """Slide at slide_index became active at timestamp (unix ms)."""

    slide_index: int
    timestamp: int

    def to_dict(self) -> dict:
        return {"slide_index": self.slide_index, "timestamp": self.timestamp}


@dataclass(frozen=True)
class SlideTiming:
    slide_index: int
    start_time: int
    duration: int

    def to_dict(self) -> dict:
        return {"slide_index": self.slide_index, "start_time": self.start_time, "duration": self.duration}


class SlideTransitionTracker:
    """
    Records slide changes while armed.

    current_slide: returns the externally owned current slide index (read at arm time).
    clock: returns unix ms; injectable for tests.
    """

    def __init__(self, current_slide: Callable[[], int], clock: Callable[[], int] = unix_ms) -> None:
        self._current_slide = current_slide
        self._clock = clock
        self._transitions: list[SlideTransition] = []
        self._session_start_time: int | None = None
        self._is_tracking = False
        self._previous_index: int | None = None

    @property
    def transitions(self) -> list[SlideTransition]:
        return list(self._transitions)

    @property
    def session_start_time(self) -> int | None:
        return self._session_start_time

    @property
    def is_tracking(self) -> bool:
        return self._is_tracking

    def start_tracking(self) -> None:
        """Arm; the only transition afterwards is the slide active right now."""
        now = self._clock()
        index = self._current_slide()
        self._session_start_time = now
        self._is_tracking = True
        self._transitions = [SlideTransition(slide_index=index, timestamp=now)]
        self._previous_index = index
        logger.info("Slide tracking started on slide %d", index)

    def stop_tracking(self) -> None:
        """Disarm. Recorded transitions are kept."""
        self._is_tracking = False

    def reset(self) -> None:
        self._transitions = []
        self._session_start_time = None
        self._is_tracking = False
        self._previous_index = None

    def observe(self, slide_index: int) -> None:
        """Feed the current slide index. Appends a transition only when it changed while armed."""
        if not self._is_tracking:
            return
        previous = self._previous_index
        self._previous_index = slide_index
        if previous is not None and previous != slide_index:
            self._transitions.append(SlideTransition(slide_index=slide_index, timestamp=self._clock()))

    def slide_timings(self, now: int | None = None) -> list[SlideTiming]:
        if not self._transitions:
            return []
        now = now if now is not None else self._clock()
        timings: list[SlideTiming] = []
        for i, transition in enumerate(self._transitions):
            if i + 1 < len(self._transitions):
                end = self._transitions[i + 1].timestamp
            else:
                end = now
            timings.append(
                SlideTiming(
                    slide_index=transition.slide_index,
                    start_time=transition.timestamp,
                    duration=end - transition.timestamp,
                )
            )
        return timings

    def current_slide_duration(self, now: int | None = None) -> int:
        if not self._is_tracking or not self._transitions:
            return 0
        now = now if now is not None else self._clock()
        return now - self._transitions[-1].timestamp

    def time_per_slide(self, now: int | None = None) -> dict[int, int]:
        """Total dwell time per slide index, summed over revisits."""
        totals: dict[int, int] = {}
        for timing in self.slide_timings(now):
            totals[timing.slide_index] = totals.get(timing.slide_index, 0) + timing.duration
        return totals
