"""
Engine - frame scheduler, Qt timers and the owned plugin context.
"""

from .engine import GenSynthEngine
from .qt_timers import QtDebouncer, QtFrameTimer
from .scheduler import FrameScheduler, FrameTimer, monotonic_ms

__all__ = [
    "FrameScheduler",
    "FrameTimer",
    "GenSynthEngine",
    "QtDebouncer",
    "QtFrameTimer",
    "monotonic_ms",
]
