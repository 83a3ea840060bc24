"""
Parameter HUD

One row per parameter definition:
- number: label + QLineEdit (committed on Enter / focus out)
- range:  label + value readout + modulation button + RangeControl
- bounds: label + value readout + RangeControl

The ink group is separated by a line and its colour keys show a swatch.
Rebuilt on engine.definitions_changed, resynced on engine.params_changed.
"""

from PyQt5.QtCore import QRectF, Qt, pyqtSignal
from PyQt5.QtGui import QColor, QFont, QPainter
from PyQt5.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from gensynth.config import INK_GROUP, format_value
from gensynth.params.definitions import ParamType
from gensynth.plugins.ink import INK_SWATCH_KEYS, hsl_components
from .range_control import RangeControl
from .theme import COLORS, FONT_FAMILY, FONT_SIZES, MONO_FONT, line_edit_style


class ModulationButton(QPushButton):
    """
    Small button showing the modulation level as lit bars.
    Click = next level (wraps to off).
    """

    cycle_requested = pyqtSignal(str)

    def __init__(self, key, level_count, parent=None):
        super().__init__(parent)
        self.key = key
        self.level_count = max(1, level_count)
        self.level = 0
        self.setObjectName(f"mod_{key}")
        self.setFixedSize(22, 16)
        self.setCursor(Qt.PointingHandCursor)
        self.setFocusPolicy(Qt.NoFocus)
        self.clicked.connect(lambda: self.cycle_requested.emit(self.key))
        self.set_level(0)

    def set_level(self, level):
        self.level = max(0, min(self.level_count, int(level)))
        if self.level:
            self.setToolTip(f"modulation level {self.level} of {self.level_count}")
        else:
            self.setToolTip("modulation off")
        self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(COLORS['background_dark']))
        painter.drawRoundedRect(QRectF(self.rect()), 3, 3)

        gap = 1.0
        inner = QRectF(self.rect()).adjusted(3, 3, -3, -3)
        bar_width = (inner.width() - gap * (self.level_count - 1)) / self.level_count
        for i in range(self.level_count):
            lit = i < self.level
            bar_height = inner.height() * (i + 1) / self.level_count
            painter.setBrush(QColor(COLORS['mod_on'] if lit else COLORS['mod_off']))
            painter.drawRect(QRectF(inner.left() + i * (bar_width + gap),
                                    inner.bottom() - bar_height, bar_width, bar_height))
        painter.end()


class ParamPanel(QWidget):
    """Parameter rows for the engine's active plugin."""

    def __init__(self, engine, parent=None):
        super().__init__(parent)
        self.engine = engine
        self.scalar_inputs = {}
        self.range_controls = {}
        self.value_labels = {}
        self.mod_buttons = {}
        self.swatches = {}
        self.separators = []

        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(8, 8, 8, 8)
        self._layout.setSpacing(6)

        engine.definitions_changed.connect(self.rebuild)
        engine.params_changed.connect(self.sync_values)
        self.rebuild()

    # === Building ===

    def _clear(self):
        while self._layout.count():
            item = self._layout.takeAt(0)
            widget = item.widget()
            if widget is not None:
                widget.hide()
                widget.deleteLater()
        self.scalar_inputs.clear()
        self.range_controls.clear()
        self.value_labels.clear()
        self.mod_buttons.clear()
        self.separators.clear()
        self.swatches.clear()

    def rebuild(self):
        self._clear()
        previous_group = None
        for defn in self.engine.registry.definitions.values():
            if (defn.group == INK_GROUP and previous_group is not None
                    and previous_group != INK_GROUP):
                line = QFrame()
                line.setFrameShape(QFrame.HLine)
                line.setStyleSheet(f"color: {COLORS['border_light']};")
                self._layout.addWidget(line)
                self.separators.append(line)
            previous_group = defn.group
            self._layout.addWidget(self._build_row(defn))
        self._layout.addStretch()
        self.sync_values()

    def _build_row(self, defn):
        row = QWidget()
        row.setObjectName(f"row_{defn.key}")
        column = QVBoxLayout(row)
        column.setContentsMargins(0, 0, 0, 0)
        column.setSpacing(2)

        header = QHBoxLayout()
        label = QLabel(defn.label)
        label.setFont(QFont(FONT_FAMILY, FONT_SIZES['label']))
        label.setStyleSheet(f"color: {COLORS['text']};")
        header.addWidget(label)
        header.addStretch()

        if defn.type == ParamType.NUMBER:
            edit = QLineEdit()
            edit.setObjectName(f"input_{defn.key}")
            edit.setFixedWidth(80)
            edit.setAlignment(Qt.AlignRight)
            edit.setFont(QFont(MONO_FONT, FONT_SIZES['small']))
            edit.setStyleSheet(line_edit_style())
            edit.editingFinished.connect(lambda key=defn.key: self._commit_scalar(key))
            header.addWidget(edit)
            self.scalar_inputs[defn.key] = edit
            column.addLayout(header)
            return row

        if defn.key in INK_SWATCH_KEYS and defn.group == INK_GROUP:
            swatch = QLabel()
            swatch.setFixedSize(12, 12)
            header.addWidget(swatch)
            self.swatches[defn.key] = swatch

        readout = QLabel()
        readout.setFont(QFont(MONO_FONT, FONT_SIZES['small']))
        readout.setStyleSheet(f"color: {COLORS['text_bright']};")
        header.addWidget(readout)
        self.value_labels[defn.key] = readout
        column.addLayout(header)

        control_row = QHBoxLayout()
        control_row.setSpacing(4)
        if defn.type == ParamType.RANGE and defn.allows_modulation:
            button = ModulationButton(defn.key, self.engine.modulator.level_count)
            button.cycle_requested.connect(self.engine.cycle_param_noise_speed)
            control_row.addWidget(button)
            self.mod_buttons[defn.key] = button
        control = RangeControl(defn.key, self.engine.controller)
        control_row.addWidget(control)
        self.range_controls[defn.key] = control
        column.addLayout(control_row)
        return row

    # === Sync ===

    def _commit_scalar(self, key):
        edit = self.scalar_inputs.get(key)
        if edit is None:
            return
        committed = self.engine.controller.commit_scalar_text(key, edit.text())
        defn = self.engine.registry.get(key)
        if defn is not None:
            # Show the stored value (normalized, or unchanged on rejected text)
            edit.setText(format_value(self.engine.registry.value(key), defn.step))
        if not committed:
            self.sync_values()

    def sync_values(self):
        registry = self.engine.registry
        for key, edit in self.scalar_inputs.items():
            defn = registry.get(key)
            if defn is not None and not edit.hasFocus():
                edit.setText(format_value(registry.value(key), defn.step))

        for key, readout in self.value_labels.items():
            defn = registry.get(key)
            value = registry.value(key)
            if defn is None or value is None:
                continue
            if defn.type == ParamType.RANGE:
                readout.setText(format_value(value.current, defn.step))
            else:
                readout.setText(f"{format_value(value.min, defn.step)}-"
                                f"{format_value(value.max, defn.step)}")

        for control in self.range_controls.values():
            control.refresh()

        for key, button in self.mod_buttons.items():
            button.set_level(self.engine.modulator.speed_level(key))

        if self.swatches:
            hue, saturation, lightness = hsl_components(registry.snapshot())
            color = QColor.fromHsl(hue, round(saturation * 2.55), round(lightness * 2.55))
            for swatch in self.swatches.values():
                swatch.setStyleSheet(f"background-color: {color.name()};"
                                     f"border: 1px solid {COLORS['border_light']};")
                swatch.setToolTip(self.engine.ink_swatch_color())
