"""Slide transition tracking and per-slide timing."""
from .tracker import SlideTiming, SlideTransition, SlideTransitionTracker

__all__ = ["SlideTiming", "SlideTransition", "SlideTransitionTracker"]
