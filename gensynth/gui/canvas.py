"""
Drawing surface and canvas widget.

Plugins draw into an ImageSurface (a QImage); the CanvasWidget paints that
image and reports its size so the engine can re-resolve size-dependent
parameter limits.
"""

from contextlib import contextmanager

from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QColor, QImage, QPainter
from PyQt5.QtWidgets import QSizePolicy, QWidget

from .theme import COLORS


class ImageSurface:
    """QImage-backed drawing surface; cleared to the canvas colour."""

    def __init__(self, width: int = 1, height: int = 1, background=None):
        self.background = QColor(background or COLORS['canvas'])
        self.image = QImage(max(1, int(width)), max(1, int(height)),
                            QImage.Format_ARGB32_Premultiplied)
        self.clear()

    @property
    def width(self) -> int:
        return self.image.width()

    @property
    def height(self) -> int:
        return self.image.height()

    def clear(self) -> None:
        self.image.fill(self.background)

    def resize(self, width: int, height: int) -> None:
        width, height = max(1, int(width)), max(1, int(height))
        if width == self.width and height == self.height:
            return
        self.image = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
        self.clear()

    @contextmanager
    def painter(self):
        """Antialiased QPainter on the image, ended on exit."""
        painter = QPainter(self.image)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            yield painter
        finally:
            painter.end()


class CanvasWidget(QWidget):
    """Shows an ImageSurface and emits resized(width, height)."""

    resized = pyqtSignal(int, int)

    def __init__(self, surface: ImageSurface, parent=None):
        super().__init__(parent)
        self.surface = surface
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setAttribute(Qt.WA_OpaquePaintEvent)
        self.setMinimumSize(200, 200)

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.fillRect(self.rect(), self.surface.background)
        painter.drawImage(0, 0, self.surface.image)
        painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.resized.emit(self.width(), self.height())
