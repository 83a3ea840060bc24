"""
RangeControl - horizontal tri-handle slider for Range and Bounds parameters

Paints a track with min/max bound handles and a round current handle.
Presses on a handle drag that handle; presses on the bare track let the
controller pick the nearest one. Arrow/Page/Home/End keys step the last
used handle. All edits go through the InteractionController.
"""

from PyQt5.QtCore import QRectF, Qt
from PyQt5.QtGui import QColor, QPainter, QPen
from PyQt5.QtWidgets import QSizePolicy, QWidget

from gensynth.config import (
    RANGE_BOUND_HANDLE_THICKNESS_PX,
    RANGE_CURRENT_HANDLE_DIAMETER_PX,
    format_value,
)
from gensynth.interaction.controller import Handle, value_to_track_x
from gensynth.params.definitions import ParamType
from .theme import COLORS, RANGE_CONTROL_HEIGHT


class RangeControl(QWidget):
    """Tri-handle slider bound to one parameter key."""

    def __init__(self, key, controller, parent=None):
        super().__init__(parent)
        self.key = key
        self.controller = controller
        self._session = None

        defn = self.definition
        if defn is not None and defn.type == ParamType.RANGE:
            self.focus_handle = Handle.CURRENT
        else:
            self.focus_handle = Handle.MIN

        self.setObjectName(f"range_{key}")
        self.setFixedHeight(RANGE_CONTROL_HEIGHT)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Fixed)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setCursor(Qt.PointingHandCursor)
        self.refresh()

    @property
    def definition(self):
        return self.controller.registry.get(self.key)

    @property
    def value(self):
        return self.controller.registry.value(self.key)

    # === Geometry ===

    def handles(self):
        """Handles shown for this parameter (paint order, bottom first)."""
        defn = self.definition
        if defn is None:
            return []
        shown = []
        if self.controller.can_adjust_bounds(defn):
            shown += [Handle.MIN, Handle.MAX]
        if defn.type == ParamType.RANGE:
            shown.append(Handle.CURRENT)
        return shown

    def handle_rect(self, handle) -> QRectF:
        defn = self.definition
        width = float(self.width())
        height = float(self.height())
        x = value_to_track_x(defn, getattr(self.value, Handle(handle).value), width)

        if handle == Handle.CURRENT:
            d = RANGE_CURRENT_HANDLE_DIAMETER_PX
            left = min(max(x - d / 2, 0.0), max(0.0, width - d))
            return QRectF(left, (height - d) / 2, d, d)

        thickness = RANGE_BOUND_HANDLE_THICKNESS_PX
        max_left = max(0.0, width - thickness)
        left = x - thickness if handle == Handle.MIN else x
        left = min(max(left, 0.0), max_left)
        return QRectF(left, 0.0, thickness, height)

    def handle_at(self, x, y):
        """Topmost handle under a point, or None for the bare track."""
        for handle in reversed(self.handles()):
            if self.handle_rect(handle).contains(x, y):
                return handle
        return None

    # === Display ===

    def refresh(self):
        defn = self.definition
        value = self.value
        if defn is None or value is None:
            return
        low = format_value(value.min, defn.step)
        high = format_value(value.max, defn.step)
        if defn.type == ParamType.RANGE:
            current = format_value(value.current, defn.step)
            self.setToolTip(f"{defn.label}: {current} ({low} - {high})")
        else:
            self.setToolTip(f"{defn.label}: {low} - {high}")
        self.update()

    def paintEvent(self, event):
        defn = self.definition
        value = self.value
        if defn is None or value is None:
            return

        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        width = float(self.width())
        mid = self.height() / 2

        # Track and selected span
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(COLORS['track']))
        painter.drawRoundedRect(QRectF(0, mid - 2, width, 4), 2, 2)
        lo = value_to_track_x(defn, value.min, width)
        hi = value_to_track_x(defn, value.max, width)
        painter.setBrush(QColor(COLORS['track_span']))
        painter.drawRect(QRectF(lo, mid - 2, max(0.0, hi - lo), 4))

        for handle in self.handles():
            rect = self.handle_rect(handle)
            focused = self.hasFocus() and handle == self.focus_handle
            pen = QPen(QColor(COLORS['handle_focus']), 1) if focused else QPen(Qt.NoPen)
            painter.setPen(pen)
            if handle == Handle.CURRENT:
                painter.setBrush(QColor(COLORS['handle_current']))
                painter.drawEllipse(rect)
            else:
                painter.setBrush(QColor(COLORS['handle_bound']))
                painter.drawRoundedRect(rect.adjusted(2, 2, -2, -2), 2, 2)
        painter.end()

    # === Mouse ===

    def mousePressEvent(self, event):
        if event.button() != Qt.LeftButton:
            return
        self._end_session()
        x = float(event.pos().x())
        width = float(self.width())
        handle = self.handle_at(event.pos().x(), event.pos().y())
        if handle is None:
            self._session = self.controller.press_track(self.key, x, width)
        else:
            self._session = self.controller.begin_drag(self.key, handle, x, width)
        if self._session is not None:
            self.focus_handle = self._session.handle
        self.setFocus(Qt.MouseFocusReason)
        self.refresh()

    def mouseMoveEvent(self, event):
        if self._session is not None:
            self.controller.move_drag(self._session, float(event.pos().x()), float(self.width()))
            self.refresh()

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            self._end_session()

    def hideEvent(self, event):
        self._end_session()
        super().hideEvent(event)

    def _end_session(self):
        if self._session is not None:
            self.controller.end_drag(self._session)
            self._session = None

    # === Keyboard ===

    def keyPressEvent(self, event):
        if self.controller.handle_key(self.key, self.focus_handle, event.key()):
            self.refresh()
            event.accept()
            return
        super().keyPressEvent(event)

    def focusInEvent(self, event):
        super().focusInEvent(event)
        self.update()

    def focusOutEvent(self, event):
        super().focusOutEvent(event)
        self.update()
