"""
Interaction Controller - pointer and keyboard edits of Range/Bounds values

Each Range/Bounds control has up to three handles (min, current, max) on a
horizontal track. The controller owns:
- Handle picking for presses on the bare track (ties favour current)
- Drag sessions, one per (key, handle); sessions on different parameters
  are independent
- Edited-value semantics: min pushes max up, max pushes min down, and
  current is clamped into the new interval
- Keyboard stepping (arrows 1 step, Page keys 10 steps, Home/End to the
  definition bounds)

Widgets only report track-local x positions and track widths; every write
goes through the normalizer, then on_commit(key) fires so the host can
persist (debounced) and resync the HUD.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Tuple

from PyQt5.QtCore import Qt

from gensynth.config import (
    HANDLE_COLLAPSE_PX,
    HANDLE_TIE_BREAK_PX,
    PAGE_STEP_MULTIPLIER,
    RANGE_EDGE_PADDING_PX,
)
from gensynth.params.definitions import BoundsValue, Definition, ParamType, RangeValue
from gensynth.params.normalize import clamp, to_number
from gensynth.utils.logger import logger


class Handle(str, Enum):
    MIN = "min"
    CURRENT = "current"
    MAX = "max"


INCREASE_KEYS = (Qt.Key_Up, Qt.Key_Right, Qt.Key_PageUp)
DECREASE_KEYS = (Qt.Key_Down, Qt.Key_Left, Qt.Key_PageDown)
PAGE_KEYS = (Qt.Key_PageUp, Qt.Key_PageDown)


def _track_span(width: float, padding: float) -> Tuple[float, float]:
    safe_width = max(0.0, width)
    min_x = padding
    max_x = max(min_x, safe_width - padding)
    return min_x, max_x


def value_to_track_x(defn: Definition, value: float, width: float,
                     padding: float = RANGE_EDGE_PADDING_PX) -> float:
    """Map a value to a track-local x position (linear, clamped to the span)."""
    min_x, max_x = _track_span(width, padding)
    if defn.max <= defn.min:
        return min_x
    ratio = clamp((value - defn.min) / (defn.max - defn.min), 0.0, 1.0)
    return min_x + ratio * (max_x - min_x)


def track_x_to_value(defn: Definition, x: float, width: float,
                     padding: float = RANGE_EDGE_PADDING_PX) -> float:
    """Inverse of value_to_track_x; x is clamped to the usable span first."""
    min_x, max_x = _track_span(width, padding)
    x = clamp(x, min_x, max_x)
    if max_x <= min_x or defn.max <= defn.min:
        return defn.min
    ratio = (x - min_x) / (max_x - min_x)
    return defn.min + ratio * (defn.max - defn.min)


@dataclass(frozen=True)
class DragSession:
    key: str
    handle: Handle


class InteractionController:
    """Single-writer edit path from widgets into the parameter registry."""

    def __init__(self, registry, modulator=None,
                 on_commit: Optional[Callable[[str], None]] = None):
        """
        Args:
            registry: ParameterRegistry holding definitions and values
            modulator: NoiseModulator, suspended while a current handle is dragged
            on_commit: Called with the key after every committed edit
        """
        self.registry = registry
        self.modulator = modulator
        self.on_commit = on_commit
        self._sessions: Dict[Tuple[str, Handle], DragSession] = {}

    # === Queries ===

    def can_adjust_bounds(self, defn: Optional[Definition]) -> bool:
        if defn is None:
            return False
        if defn.type == ParamType.BOUNDS:
            return True
        return defn.type == ParamType.RANGE and defn.can_adjust_bounds

    def _is_editable(self, defn: Optional[Definition], handle: Handle) -> bool:
        if defn is None or defn.type not in (ParamType.RANGE, ParamType.BOUNDS):
            return False
        if handle == Handle.CURRENT:
            return defn.type == ParamType.RANGE
        return self.can_adjust_bounds(defn)

    def is_dragging(self, key: str) -> bool:
        """Whether any handle of this parameter has an open drag session."""
        return any(session_key == key for session_key, _ in self._sessions)

    @property
    def active_sessions(self):
        return list(self._sessions.values())

    # === Picking ===

    def pick_handle(self, key: str, x: float, width: float) -> Handle:
        """Choose the handle a press on the bare track should grab."""
        defn = self.registry.get(key)
        if defn is None or defn.type not in (ParamType.RANGE, ParamType.BOUNDS):
            return Handle.CURRENT
        if defn.type == ParamType.RANGE and not self.can_adjust_bounds(defn):
            return Handle.CURRENT
        if width <= 0:
            return Handle.CURRENT if defn.type == ParamType.RANGE else Handle.MIN

        x = clamp(x, 0.0, width)
        value = self.registry.value(key)
        min_x = value_to_track_x(defn, value.min, width)
        max_x = value_to_track_x(defn, value.max, width)

        if defn.type == ParamType.BOUNDS:
            return Handle.MIN if abs(x - min_x) <= abs(x - max_x) else Handle.MAX

        current_x = value_to_track_x(defn, value.current, width)

        # All three stacked: direction of the press decides
        if abs(min_x - current_x) <= HANDLE_COLLAPSE_PX and abs(max_x - current_x) <= HANDLE_COLLAPSE_PX:
            if x < current_x - HANDLE_TIE_BREAK_PX:
                return Handle.MIN
            if x > current_x + HANDLE_TIE_BREAK_PX:
                return Handle.MAX
            return Handle.CURRENT

        positions = ((Handle.CURRENT, current_x), (Handle.MIN, min_x), (Handle.MAX, max_x))
        best, best_distance = Handle.CURRENT, float("inf")
        for handle, position in positions:
            distance = abs(x - position)
            if distance < best_distance:
                best, best_distance = handle, distance
        return best

    # === Drag sessions ===

    def press_track(self, key: str, x: float, width: float) -> Optional[DragSession]:
        """Press on the bare track: pick a handle and start dragging it."""
        return self.begin_drag(key, self.pick_handle(key, x, width), x, width)

    def begin_drag(self, key: str, handle: Handle, x: float, width: float) -> Optional[DragSession]:
        """
        Open a drag session on one handle and apply the press position.

        Returns None if the handle is not editable or already being dragged.
        """
        handle = Handle(handle)
        defn = self.registry.get(key)
        if not self._is_editable(defn, handle):
            return None
        if (key, handle) in self._sessions:
            return None

        session = DragSession(key, handle)
        self._sessions[(key, handle)] = session
        if handle == Handle.CURRENT and self.modulator is not None:
            self.modulator.begin_suspend()
        logger.debug(f"Drag start {key}.{handle.value}", component="UI")

        self.move_drag(session, x, width)
        return session

    def move_drag(self, session: DragSession, x: float, width: float) -> bool:
        if self._sessions.get((session.key, session.handle)) is not session:
            return False
        if width <= 0:
            return False
        defn = self.registry.get(session.key)
        if not self._is_editable(defn, session.handle):
            return False
        value = track_x_to_value(defn, clamp(x, 0.0, width), width)
        return self.update_range_value(session.key, session.handle, value)

    def end_drag(self, session: DragSession) -> bool:
        """Close a session (release or cancel). Safe to call twice."""
        if self._sessions.pop((session.key, session.handle), None) is None:
            return False
        if session.handle == Handle.CURRENT and self.modulator is not None:
            self.modulator.end_suspend()
        logger.debug(f"Drag end {session.key}.{session.handle.value}", component="UI")
        return True

    def cancel_all(self) -> None:
        for session in list(self._sessions.values()):
            self.end_drag(session)

    # === Keyboard ===

    def handle_key(self, key: str, handle: Handle, qt_key: int) -> bool:
        """Step a focused handle. Returns True if the key was consumed."""
        handle = Handle(handle)
        defn = self.registry.get(key)
        if not self._is_editable(defn, handle):
            return False

        if qt_key == Qt.Key_Home:
            next_value = defn.min
        elif qt_key == Qt.Key_End:
            next_value = defn.max
        elif qt_key in INCREASE_KEYS or qt_key in DECREASE_KEYS:
            multiplier = PAGE_STEP_MULTIPLIER if qt_key in PAGE_KEYS else 1
            delta = defn.step * multiplier
            current = getattr(self.registry.value(key), handle.value)
            next_value = current + delta if qt_key in INCREASE_KEYS else current - delta
        else:
            return False

        self.update_range_value(key, handle, next_value)
        return True

    # === Edits ===

    def update_range_value(self, key: str, handle: Handle, new_value) -> bool:
        """
        Write one handle's value, keeping the interval ordered.

        Moving min past max pushes max up; moving max below min pushes min
        down; current is clamped into the resulting interval.
        """
        handle = Handle(handle)
        defn = self.registry.get(key)
        if not self._is_editable(defn, handle):
            return False

        value = self.registry.value(key)
        new_value = to_number(new_value, getattr(value, handle.value))
        lo, hi = value.min, value.max
        current = value.current if defn.type == ParamType.RANGE else None

        if handle == Handle.MIN:
            lo = new_value
            if lo > hi:
                hi = lo
            if current is not None and current < lo:
                current = lo
        elif handle == Handle.MAX:
            hi = new_value
            if hi < lo:
                lo = hi
            if current is not None and current > hi:
                current = hi
        else:
            current = new_value

        if defn.type == ParamType.RANGE:
            self.registry.set_value(key, RangeValue(min=lo, current=current, max=hi))
        else:
            self.registry.set_value(key, BoundsValue(min=lo, max=hi))
        self._commit(key)
        return True

    def commit_scalar_text(self, key: str, text) -> bool:
        """
        Commit typed text for a number parameter.

        Non-numeric text is rejected (returns False, value untouched) so the
        caller can redisplay the stored value.
        """
        defn = self.registry.get(key)
        if defn is None or defn.type != ParamType.NUMBER:
            return False
        parsed = to_number(str(text).strip() if text is not None else None, None)
        if parsed is None:
            return False
        self.registry.set_value(key, parsed)
        self._commit(key)
        return True

    def _commit(self, key: str) -> None:
        if self.on_commit is not None:
            self.on_commit(key)
