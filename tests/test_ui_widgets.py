"""
Tests for UI widget behaviors.

Offscreen Qt smoke tests for the parameter HUD, the range control, the
modulation button and the main window, all wired to an engine driven by
manual fakes.
"""

import pytest
from PyQt5.QtCore import QEvent, QPointF, Qt
from PyQt5.QtGui import QCloseEvent, QKeyEvent, QMouseEvent
from PyQt5.QtWidgets import QApplication

from gensynth.engine.engine import GenSynthEngine
from gensynth.gui.main_window import MainWindow
from gensynth.gui.param_panel import ModulationButton, ParamPanel
from gensynth.gui.range_control import RangeControl
from gensynth.interaction.controller import Handle
from gensynth.params.definitions import BoundsValue, RangeValue
from gensynth.persistence.store import PluginSettingsStore, SelectedPluginStore
from gensynth.plugins import ArcsPlugin, CirclesPlugin
from gensynth.utils.logger import logger
from tests.helpers.fakes import (
    NUMBER_PARAM,
    ManualDebouncer,
    ManualFrameTimer,
    RecordingPlugin,
    sample_parameters,
)


def mouse_event(kind, x, y=9, button=Qt.LeftButton):
    buttons = Qt.NoButton if kind == QEvent.MouseButtonRelease else button
    return QMouseEvent(kind, QPointF(x, y), button, buttons, Qt.NoModifier)


def key_event(key):
    return QKeyEvent(QEvent.KeyPress, key, Qt.NoModifier)


@pytest.fixture
def engine(qapp, tmp_path):
    eng = GenSynthEngine(
        RecordingPlugin(parameters=sample_parameters()),
        frame_timer=ManualFrameTimer(),
        store=PluginSettingsStore(tmp_path / "param-settings.json", ManualDebouncer()),
    )
    eng.init(200, 100)
    return eng


@pytest.fixture
def panel(engine):
    return ParamPanel(engine)


def make_control(engine, key, width=100):
    control = RangeControl(key, engine.controller)
    control.resize(width, control.height())
    return control


class TestParamPanel:
    """One row per definition, kept in sync with the engine."""

    def test_rows_by_type(self, panel):
        assert set(panel.scalar_inputs) == {"count"}
        assert {"size", "fixed", "band", "hue"} <= set(panel.range_controls)
        assert "count" not in panel.range_controls

    def test_modulation_buttons_only_for_modulatable_ranges(self, panel):
        assert "size" in panel.mod_buttons
        assert "fixed" not in panel.mod_buttons
        assert "band" not in panel.mod_buttons

    def test_ink_separator_after_plugin_rows(self, panel):
        assert len(panel.separators) == 1

    def test_no_ink_separator_without_plugin_rows(self, qapp, tmp_path):
        eng = GenSynthEngine(
            RecordingPlugin(parameters=[]),
            frame_timer=ManualFrameTimer(),
            store=PluginSettingsStore(tmp_path / "param-settings.json", ManualDebouncer()),
        )
        eng.init(200, 100)
        empty = ParamPanel(eng)
        assert set(empty.swatches) == {"hue", "saturation", "lightness"}
        assert empty.separators == []

    def test_swatches(self, panel):
        assert set(panel.swatches) == {"hue", "saturation", "lightness"}
        assert panel.swatches["hue"].toolTip() == "hsl(0, 0%, 0%)"

    def test_readouts(self, panel):
        assert panel.value_labels["size"].text() == "50"
        assert panel.value_labels["band"].text() == "10-60"
        assert panel.scalar_inputs["count"].text() == "3"

    def test_scalar_commit_normalizes(self, engine, panel):
        edit = panel.scalar_inputs["count"]
        edit.setText("7.6")
        panel._commit_scalar("count")
        assert engine.registry.value("count") == 8
        assert edit.text() == "8"

    def test_scalar_commit_rejects_text(self, engine, panel):
        edit = panel.scalar_inputs["count"]
        edit.setText("abc")
        panel._commit_scalar("count")
        assert engine.registry.value("count") == 3
        assert edit.text() == "3"

    def test_modulation_button_cycles(self, engine, panel):
        panel.mod_buttons["size"].click()
        assert engine.modulator.speed_level("size") == 1
        assert panel.mod_buttons["size"].level == 1

    def test_sync_on_params_changed(self, engine, panel):
        engine.registry.set_value("size", {"min": 20, "current": 65, "max": 80})
        engine.params_changed.emit()
        assert panel.value_labels["size"].text() == "65"

    def test_rebuild_on_plugin_switch(self, engine, panel):
        engine.set_plugin(RecordingPlugin(plugin_id="other", parameters=[dict(NUMBER_PARAM)]))
        assert set(panel.scalar_inputs) == {"count"}
        assert "size" not in panel.range_controls
        assert "hue" in panel.range_controls


class TestModulationButton:
    """Level display and click signal."""

    def test_tooltips(self, qapp):
        button = ModulationButton("size", 5)
        assert button.toolTip() == "modulation off"
        button.set_level(3)
        assert button.toolTip() == "modulation level 3 of 5"

    def test_level_clamped(self, qapp):
        button = ModulationButton("size", 5)
        button.set_level(9)
        assert button.level == 5

    def test_click_emits_key(self, qapp):
        button = ModulationButton("size", 5)
        received = []
        button.cycle_requested.connect(received.append)
        button.click()
        assert received == ["size"]


class TestRangeControl:
    """Handle geometry, mouse dragging and keyboard stepping."""

    def test_handles(self, engine):
        assert make_control(engine, "size").handles() == [Handle.MIN, Handle.MAX, Handle.CURRENT]
        assert make_control(engine, "fixed").handles() == [Handle.CURRENT]
        assert make_control(engine, "band").handles() == [Handle.MIN, Handle.MAX]

    def test_default_focus_handle(self, engine):
        assert make_control(engine, "size").focus_handle == Handle.CURRENT
        assert make_control(engine, "band").focus_handle == Handle.MIN

    def test_tooltip(self, engine):
        assert make_control(engine, "size").toolTip() == "Size: 50 (20 - 80)"
        assert make_control(engine, "band").toolTip() == "Band: 10 - 60"

    def test_bound_handle_rects(self, engine):
        control = make_control(engine, "band")
        min_rect = control.handle_rect(Handle.MIN)
        max_rect = control.handle_rect(Handle.MAX)
        assert (min_rect.left(), min_rect.width()) == (0.0, 10.0)
        assert (max_rect.left(), max_rect.width()) == (60.0, 10.0)

    def test_drag_max_handle(self, engine):
        control = make_control(engine, "size")
        control.mousePressEvent(mouse_event(QEvent.MouseButtonPress, 85))
        assert engine.registry.value("size") == RangeValue(20, 50, 85)
        control.mouseMoveEvent(mouse_event(QEvent.MouseMove, 95))
        assert engine.registry.value("size") == RangeValue(20, 50, 95)
        control.mouseReleaseEvent(mouse_event(QEvent.MouseButtonRelease, 95))
        assert engine.controller.active_sessions == []

    def test_track_press_picks_nearest(self, engine):
        control = make_control(engine, "size")
        control.mousePressEvent(mouse_event(QEvent.MouseButtonPress, 35))
        assert engine.registry.value("size") == RangeValue(20, 35, 80)
        assert control.focus_handle == Handle.CURRENT
        control.mouseReleaseEvent(mouse_event(QEvent.MouseButtonRelease, 35))

    def test_current_drag_suspends_modulation(self, engine):
        control = make_control(engine, "size")
        control.mousePressEvent(mouse_event(QEvent.MouseButtonPress, 50))
        assert engine.modulator.suspended
        control.mouseReleaseEvent(mouse_event(QEvent.MouseButtonRelease, 50))
        assert not engine.modulator.suspended

    def test_hide_ends_drag(self, engine):
        control = make_control(engine, "band")
        control.mousePressEvent(mouse_event(QEvent.MouseButtonPress, 5))
        assert engine.controller.active_sessions
        control.show()
        control.hide()
        assert engine.controller.active_sessions == []

    def test_right_button_ignored(self, engine):
        control = make_control(engine, "size")
        control.mousePressEvent(mouse_event(QEvent.MouseButtonPress, 35, button=Qt.RightButton))
        assert engine.registry.value("size") == RangeValue(20, 50, 80)

    def test_keys_step_focus_handle(self, engine):
        control = make_control(engine, "size")
        control.keyPressEvent(key_event(Qt.Key_Right))
        assert engine.registry.value("size").current == 51
        control.keyPressEvent(key_event(Qt.Key_PageDown))
        assert engine.registry.value("size").current == 41

    def test_keys_on_bounds(self, engine):
        control = make_control(engine, "band")
        control.keyPressEvent(key_event(Qt.Key_Up))
        assert engine.registry.value("band") == BoundsValue(15, 60)
        control.keyPressEvent(key_event(Qt.Key_Home))
        assert engine.registry.value("band") == BoundsValue(0, 60)

    def test_other_keys_ignored(self, engine):
        control = make_control(engine, "size")
        control.keyPressEvent(key_event(Qt.Key_A))
        assert engine.registry.value("size") == RangeValue(20, 50, 80)


class TestMainWindow:
    """Top bar actions and plugin selection."""

    @pytest.fixture
    def plugins(self):
        return [CirclesPlugin(), ArcsPlugin()]

    @pytest.fixture
    def selected_store(self, tmp_path):
        return SelectedPluginStore(tmp_path / "selected-plugin.json")

    @pytest.fixture
    def window(self, qapp, tmp_path, plugins, selected_store):
        engine = GenSynthEngine(plugins[0], frame_timer=ManualFrameTimer(),
                                store=PluginSettingsStore(tmp_path / "param-settings.json",
                                                          ManualDebouncer()))
        win = MainWindow(engine=engine, selected_store=selected_store, plugins=plugins)
        yield win
        win.closeEvent(QCloseEvent())

    def test_initial_state(self, window):
        assert window.status_label.text() == "Stopped"
        assert window.play_btn.text() == "Play"
        assert window.plugin_combo.currentData() == "circles"
        assert window.engine.surface is window.surface

    def test_toggle_running(self, window):
        window.toggle_running()
        assert window.engine.running
        assert window.play_btn.text() == "Pause"
        assert window.status_label.text() == "Running"
        window.toggle_running()
        assert not window.engine.running
        assert window.play_btn.text() == "Play"

    def test_cycle_speed(self, window):
        window.cycle_speed()
        assert window.speed_btn.text() == "2x"
        assert window.engine.playback_multiplier == 2

    def test_select_plugin(self, window, plugins, selected_store):
        window.plugin_combo.setCurrentIndex(1)
        assert window.engine.plugin is plugins[1]
        assert selected_store.load() == "arcs"

    def test_share_round_trip(self, window, plugins, selected_store):
        window.engine.controller.commit_scalar_text("count", "9")
        text = window.copy_share()
        assert QApplication.clipboard().text() == text

        window.plugin_combo.setCurrentIndex(1)
        assert window.paste_share()
        assert window.engine.plugin is plugins[0]
        assert window.engine.registry.value("count") == 9
        assert window.plugin_combo.currentData() == "circles"
        assert selected_store.load() == "circles"

    def test_paste_invalid(self, window):
        QApplication.clipboard().setText("not a share payload")
        assert not window.paste_share()
        assert window.status_label.text() == "Invalid share payload"

    def test_close_destroys_engine(self, window):
        window.toggle_running()
        window.closeEvent(QCloseEvent())
        assert not window.engine.running

    def test_close_detaches_canvas_and_engine(self, window):
        window.closeEvent(QCloseEvent())
        size = (window.engine.width, window.engine.height)
        window.canvas.resized.emit(400, 300)
        assert (window.engine.width, window.engine.height) == size
        window.engine.start()
        assert window.play_btn.text() == "Play"

    def test_warnings_shown_in_status_bar(self, window):
        logger.info("routine", component="UI")
        assert window.statusBar().currentMessage() == ""
        logger.warning("Settings write failed", component="STORE", details="disk full")
        assert window.statusBar().currentMessage().endswith("[STORE] Settings write failed - disk full")

    def test_close_stops_status_bar_updates(self, window):
        window.closeEvent(QCloseEvent())
        logger.warning("after close", component="UI")
        assert window.statusBar().currentMessage() == ""

    def test_initial_plugin_from_selected_store(self, qapp, state_dir, selected_store):
        selected_store.save("arcs")
        win = MainWindow(selected_store=selected_store)
        try:
            assert win.engine.plugin_id == "arcs"
            assert win.plugin_combo.currentData() == "arcs"
        finally:
            win.closeEvent(QCloseEvent())

    def test_unknown_selected_plugin_falls_back(self, qapp, state_dir, selected_store):
        selected_store.save("nope")
        win = MainWindow(selected_store=selected_store)
        try:
            assert win.engine.plugin_id == "circles"
        finally:
            win.closeEvent(QCloseEvent())
