"""
Main Window - GenSynth host

Layout:
- Top bar: plugin selector, play/pause, restart, speed, share copy/paste, status
- Left: parameter HUD
- Centre: canvas

Remembers the selected plugin and destroys the engine (flushing settings)
on close.
"""

from PyQt5.QtCore import Qt, QTimer
from PyQt5.QtGui import QFont
from PyQt5.QtWidgets import (
    QApplication,
    QComboBox,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from gensynth.config import DEFAULT_PLUGIN_ID, FRAME_INTERVAL_MS, SPEED_OPTIONS
from gensynth.engine.engine import GenSynthEngine
from gensynth.persistence.store import SelectedPluginStore
from gensynth.plugins import PLUGINS
from gensynth.plugins.base import plugin_id, plugin_name
from gensynth.utils.app_paths import get_selected_plugin_path
from gensynth.utils.logger import LogLevel, logger
from .canvas import CanvasWidget, ImageSurface
from .param_panel import ParamPanel
from .theme import COLORS, FONT_FAMILY, FONT_SIZES, PANEL_WIDTH, button_style, panel_style


class MainWindow(QMainWindow):
    """Host window around one GenSynthEngine."""

    def __init__(self, engine=None, selected_store=None, plugins=None, parent=None):
        super().__init__(parent)
        self.setWindowTitle("GenSynth")
        self.plugins = list(plugins if plugins is not None else PLUGINS)
        self.catalog = {plugin_id(p): p for p in self.plugins}
        if selected_store is None:
            selected_store = SelectedPluginStore(get_selected_plugin_path())
        self.selected_store = selected_store
        self.speed_index = 0
        self._initialized = False
        self._closed = False

        if engine is None:
            engine = GenSynthEngine(self._initial_plugin(), ImageSurface(), parent=self)
        if engine.surface is None:
            engine.surface = ImageSurface()
        self.engine = engine
        self.surface = engine.surface

        self._build_ui()
        self._connect_signals()

        self.resize(1200, 800)
        self.engine.init(self.canvas.width(), self.canvas.height())
        self._initialized = True

        # Canvas repaint, independent of the step rate
        self.repaint_timer = QTimer(self)
        self.repaint_timer.setInterval(FRAME_INTERVAL_MS)
        self.repaint_timer.timeout.connect(self.canvas.update)
        self.repaint_timer.start()

    def _initial_plugin(self):
        saved = self.selected_store.load()
        if saved in self.catalog:
            return self.catalog[saved]
        return self.catalog.get(DEFAULT_PLUGIN_ID, self.plugins[0])

    # === UI ===

    def _build_ui(self):
        central = QWidget()
        central.setStyleSheet(panel_style())
        root = QVBoxLayout(central)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        bar = QHBoxLayout()
        bar.setContentsMargins(8, 6, 8, 6)
        bar.setSpacing(6)

        title = QLabel("GENSYNTH")
        title.setFont(QFont(FONT_FAMILY, FONT_SIZES['title'], QFont.Bold))
        title.setStyleSheet(f"color: {COLORS['text_bright']};")
        bar.addWidget(title)

        self.plugin_combo = QComboBox()
        self.plugin_combo.setObjectName("plugin_combo")
        for plugin in self.plugins:
            self.plugin_combo.addItem(plugin_name(plugin), plugin_id(plugin))
        self._select_combo(plugin_id(self.engine.plugin))
        bar.addWidget(self.plugin_combo)

        self.play_btn = QPushButton("Play")
        self.play_btn.setObjectName("play_btn")
        self.play_btn.setStyleSheet(button_style('disabled'))
        bar.addWidget(self.play_btn)

        self.restart_btn = QPushButton("Restart")
        self.restart_btn.setObjectName("restart_btn")
        self.restart_btn.setStyleSheet(button_style('disabled'))
        bar.addWidget(self.restart_btn)

        self.speed_btn = QPushButton(self._speed_text())
        self.speed_btn.setObjectName("speed_btn")
        self.speed_btn.setToolTip("Playback speed")
        self.speed_btn.setStyleSheet(button_style('disabled'))
        bar.addWidget(self.speed_btn)

        self.copy_share_btn = QPushButton("Copy Share")
        self.copy_share_btn.setObjectName("copy_share_btn")
        self.copy_share_btn.setStyleSheet(button_style('disabled'))
        bar.addWidget(self.copy_share_btn)

        self.paste_share_btn = QPushButton("Paste Share")
        self.paste_share_btn.setObjectName("paste_share_btn")
        self.paste_share_btn.setStyleSheet(button_style('disabled'))
        bar.addWidget(self.paste_share_btn)

        bar.addStretch()
        self.status_label = QLabel("Stopped")
        self.status_label.setObjectName("status_label")
        self.status_label.setStyleSheet(f"color: {COLORS['text']};")
        bar.addWidget(self.status_label)
        root.addLayout(bar)

        body = QHBoxLayout()
        body.setContentsMargins(0, 0, 0, 0)
        body.setSpacing(0)

        self.param_panel = ParamPanel(self.engine)
        scroll = QScrollArea()
        scroll.setWidget(self.param_panel)
        scroll.setWidgetResizable(True)
        scroll.setFixedWidth(PANEL_WIDTH)
        scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        body.addWidget(scroll)

        self.canvas = CanvasWidget(self.surface)
        body.addWidget(self.canvas, 1)
        root.addLayout(body, 1)

        self.setCentralWidget(central)

    def _connect_signals(self):
        self.plugin_combo.currentIndexChanged.connect(self._on_plugin_selected)
        self.play_btn.clicked.connect(self.toggle_running)
        self.restart_btn.clicked.connect(self.engine.restart)
        self.speed_btn.clicked.connect(self.cycle_speed)
        self.copy_share_btn.clicked.connect(self.copy_share)
        self.paste_share_btn.clicked.connect(self.paste_share)
        self.canvas.resized.connect(self._on_canvas_resized)
        self.engine.run_state_changed.connect(self._on_run_state_changed)
        self.engine.status_changed.connect(self.status_label.setText)
        logger.signal_emitter.log_message.connect(self._on_log_message)

    def _select_combo(self, pid):
        index = self.plugin_combo.findData(pid)
        if index >= 0 and index != self.plugin_combo.currentIndex():
            self.plugin_combo.blockSignals(True)
            self.plugin_combo.setCurrentIndex(index)
            self.plugin_combo.blockSignals(False)

    def _speed_text(self):
        return f"{SPEED_OPTIONS[self.speed_index]}x"

    # === Actions ===

    def toggle_running(self):
        if self.engine.running:
            self.engine.stop()
        else:
            self.engine.start()

    def cycle_speed(self):
        self.speed_index = (self.speed_index + 1) % len(SPEED_OPTIONS)
        self.engine.set_playback_multiplier(SPEED_OPTIONS[self.speed_index])
        self.speed_btn.setText(self._speed_text())

    def copy_share(self):
        text = self.engine.share_payload()
        QApplication.clipboard().setText(text)
        logger.info("Share payload copied to clipboard", component="UI")
        return text

    def paste_share(self):
        text = QApplication.clipboard().text()
        if not self.engine.load_share_payload(text, self.catalog):
            self.status_label.setText("Invalid share payload")
            return False
        self._select_combo(self.engine.plugin_id)
        self.selected_store.save(self.engine.plugin_id)
        return True

    def _on_plugin_selected(self, index):
        pid = self.plugin_combo.itemData(index)
        plugin = self.catalog.get(pid)
        if plugin is None:
            return
        self.engine.set_plugin(plugin)
        self.selected_store.save(pid)

    def _on_run_state_changed(self, running):
        self.play_btn.setText("Pause" if running else "Play")
        self.play_btn.setStyleSheet(button_style('enabled' if running else 'disabled'))

    def _on_canvas_resized(self, width, height):
        if self._initialized:
            self.engine.handle_resize(width, height)

    def _on_log_message(self, message, level, timestamp):
        if level < LogLevel.WARNING:
            return
        self.statusBar().showMessage(f"{timestamp} {message}", 5000)

    def closeEvent(self, event):
        if not self._closed:
            self._closed = True
            self.repaint_timer.stop()
            logger.signal_emitter.log_message.disconnect(self._on_log_message)
            self.canvas.resized.disconnect(self._on_canvas_resized)
            self.engine.run_state_changed.disconnect(self._on_run_state_changed)
            self.engine.status_changed.disconnect(self.status_label.setText)
            self.engine.destroy()
            logger.info("GenSynth closed", component="APP")
        super().closeEvent(event)
