"""
GenSynth Engine - owned context for one active plugin

Holds the parameter registry, noise modulator, frame scheduler, interaction
controller and settings store, and drives the plugin lifecycle:

    engine = GenSynthEngine(plugin, surface)
    engine.init(width, height)   # resolve definitions, apply saved settings
    engine.start() / stop() / restart()
    engine.handle_resize(width, height)
    engine.set_plugin(other)
    engine.destroy()             # flush settings synchronously, stop

Everything runs on the Qt main thread; signals notify the HUD.
"""

from typing import Mapping, Optional

from PyQt5.QtCore import QObject, pyqtSignal

from gensynth.config import BASE_ITERATIONS_PER_SECOND, MAX_RUNS_PER_FRAME
from gensynth.interaction.controller import InteractionController
from gensynth.modulation.modulator import NoiseModulator
from gensynth.params.definitions import LimitContext
from gensynth.params.normalize import clamp
from gensynth.params.registry import ParameterRegistry
from gensynth.persistence.schema import PluginSettings
from gensynth.persistence.share import decode_share_payload, encode_share_payload
from gensynth.persistence.store import PluginSettingsStore
from gensynth.plugins.base import (
    InitContext,
    InitResult,
    RunContext,
    call_optional,
    plugin_id,
    validate_plugin,
)
from gensynth.plugins.ink import INK_PARAMETER_DEFS, INK_PARAMETER_KEYS
from gensynth.utils.app_paths import get_param_settings_path
from gensynth.utils.logger import logger

from .qt_timers import QtDebouncer, QtFrameTimer
from .scheduler import FrameScheduler, monotonic_ms


class GenSynthEngine(QObject):
    """Plugin host: parameters, modulation, fixed-step loop and persistence."""

    run_state_changed = pyqtSignal(bool)
    status_changed = pyqtSignal(str)
    params_changed = pyqtSignal()        # values changed (HUD resync)
    definitions_changed = pyqtSignal()   # definition set changed (HUD rebuild)

    def __init__(self, plugin, surface=None, frame_timer=None, debouncer=None,
                 store: Optional[PluginSettingsStore] = None, clock=None, parent=None):
        """
        Args:
            plugin: Object implementing the plugin contract
            surface: Drawing surface handed to the plugin (clear/resize/painter)
            frame_timer: FrameTimer; defaults to a QtFrameTimer
            debouncer: Debouncer for settings writes; defaults to a QtDebouncer
            store: Settings store; defaults to the user state dir file
            clock: Millisecond clock; defaults to time.monotonic
        """
        super().__init__(parent)
        validate_plugin(plugin)

        self.plugin = plugin
        self.surface = surface
        self.width = 1
        self.height = 1
        self.plugin_state = {}
        self._clock = clock or monotonic_ms
        self._destroyed = False

        if store is None:
            store = PluginSettingsStore(get_param_settings_path(),
                                        debouncer if debouncer is not None else QtDebouncer(parent=self))
            store.load()
        self.store = store

        self.registry = ParameterRegistry()
        self.modulator = NoiseModulator()
        self._controller = InteractionController(self.registry, self.modulator,
                                                 on_commit=self._on_param_commit)

        self._frame_timer = frame_timer if frame_timer is not None else QtFrameTimer(parent=self)
        self.scheduler = FrameScheduler(
            self._step,
            self._frame_timer,
            clock=self._clock,
            base_rate=BASE_ITERATIONS_PER_SECOND,
            max_steps_per_callback=MAX_RUNS_PER_FRAME,
            on_params_changed=self.params_changed.emit,
        )

    # === Properties ===

    @property
    def controller(self) -> InteractionController:
        return self._controller

    @property
    def running(self) -> bool:
        return self.scheduler.running

    @property
    def frame(self) -> int:
        return self.scheduler.frame

    @property
    def playback_multiplier(self) -> float:
        return self.scheduler.playback_multiplier

    @property
    def plugin_id(self) -> str:
        return plugin_id(self.plugin)

    def limit_context(self) -> LimitContext:
        return LimitContext.from_size(self.width, self.height)

    # === Lifecycle ===

    def init(self, width: int = 1, height: int = 1) -> None:
        """Size the canvas, resolve definitions and apply saved settings."""
        self._set_size(width, height)
        self._initialize_plugin(use_defaults=True, apply_persisted=True)
        self.status_changed.emit("Stopped")
        logger.info(f"Engine ready with '{self.plugin_id}' at {self.width}x{self.height}",
                    component="ENGINE")

    def start(self) -> None:
        if self._destroyed or not self.scheduler.start():
            return
        self.status_changed.emit("Running")
        self.run_state_changed.emit(True)
        logger.engine("Started")

    def stop(self) -> None:
        if not self.scheduler.stop():
            return
        self.status_changed.emit("Stopped")
        self.run_state_changed.emit(False)
        logger.engine("Stopped")

    def restart(self) -> None:
        """Fresh plugin state and frame counter; parameter values are kept."""
        if self._destroyed:
            return
        self.stop()
        self.scheduler.reset_counters()
        self._initialize_plugin(use_defaults=False, rebuild_hud=False)
        self.clear_surface()
        call_optional(self.plugin, "restart", self.create_run_context(self._clock(), 0.0))
        self.start()

    def destroy(self) -> None:
        """Flush settings synchronously and stop; the engine is unusable afterwards."""
        if self._destroyed:
            return
        self.persist_current_plugin_settings(immediate=True)
        self.stop()
        self._controller.cancel_all()
        self._frame_timer.cancel()
        self._destroyed = True
        logger.engine("Destroyed")

    def handle_resize(self, width: int, height: int) -> None:
        """Re-resolve definitions for the new size, keeping values."""
        if self._destroyed:
            return
        self._set_size(width, height)
        self._initialize_plugin(use_defaults=False)
        self.scheduler.frame = 0
        self.clear_surface()
        call_optional(self.plugin, "on_resize", self.create_run_context(self._clock(), 0.0))
        if self.running:
            self.scheduler.owe_one_step()

    def set_plugin(self, plugin, use_defaults: bool = True, clear: bool = True) -> bool:
        """
        Switch to another plugin. Shared ink values carry over; the new
        plugin's saved settings are applied.

        Raises:
            InvalidPluginError: If plugin lacks callable init and run
        """
        validate_plugin(plugin)
        if self._destroyed or plugin is self.plugin:
            return False

        self.persist_current_plugin_settings(immediate=True)
        was_running = self.running
        self.stop()
        self._controller.cancel_all()

        self.plugin = plugin
        self.scheduler.reset_counters()
        if clear:
            self.clear_surface()

        self._initialize_plugin(
            use_defaults=use_defaults,
            preserve_keys=INK_PARAMETER_KEYS if use_defaults else None,
            apply_persisted=use_defaults,
        )
        logger.info(f"Switched to plugin '{self.plugin_id}'", component="ENGINE")

        if was_running:
            self.start()
        return True

    def set_playback_multiplier(self, multiplier) -> bool:
        return self.scheduler.set_playback_multiplier(multiplier)

    # === Plugin plumbing ===

    def _set_size(self, width, height) -> None:
        self.width = max(1, int(width))
        self.height = max(1, int(height))
        if self.surface is not None and hasattr(self.surface, "resize"):
            self.surface.resize(self.width, self.height)

    def _initialize_plugin(self, use_defaults: bool, preserve_keys=None,
                           apply_persisted: bool = False, rebuild_hud: bool = True) -> None:
        result = InitResult.from_value(self.plugin.init(self.create_init_context()))
        self.plugin_state = result.state

        raw_defs = list(result.parameters) + list(INK_PARAMETER_DEFS)
        self.registry.resolve(raw_defs, self.limit_context(), use_defaults, preserve_keys)
        self.modulator.sync(self.registry.definitions.values())
        if apply_persisted:
            self.apply_persisted_plugin_settings(self.plugin_id)

        if rebuild_hud:
            self.definitions_changed.emit()
        self.params_changed.emit()

    def create_init_context(self) -> InitContext:
        return InitContext(
            width=self.width,
            height=self.height,
            limit_context=self.limit_context(),
            surface=self.surface,
        )

    def create_run_context(self, timestamp: float, delta_ms: float) -> RunContext:
        return RunContext(
            width=self.width,
            height=self.height,
            frame=self.scheduler.frame,
            delta_ms=delta_ms,
            timestamp=timestamp,
            params=self.registry.snapshot(),
            state=self.plugin_state,
            surface=self.surface,
            clear=self.clear_surface,
        )

    def clear_surface(self) -> None:
        if self.surface is not None and hasattr(self.surface, "clear"):
            self.surface.clear()

    def _step(self, timestamp: float, delta_ms: float) -> bool:
        # Modulation first; the plugin sees this step's values
        changed = self.modulator.apply(self.scheduler.frame, self.registry,
                                       is_locked=self._controller.is_dragging)
        self.plugin.run(self.create_run_context(timestamp, delta_ms))
        return changed

    # === Parameters ===

    def _on_param_commit(self, key: str) -> None:
        self.persist_current_plugin_settings()
        self.params_changed.emit()

    def cycle_param_noise_speed(self, key: str) -> Optional[int]:
        """Advance a Range parameter's modulation level. Returns the new level."""
        level = self.modulator.cycle_speed(key, self.registry.definitions)
        if level is None:
            return None
        self.persist_current_plugin_settings()
        self.params_changed.emit()
        return level

    def ink_swatch_color(self) -> str:
        """CSS-style hsl() string for the current hue/saturation/lightness."""
        def current(key):
            value = self.registry.value(key)
            return getattr(value, "current", 0.0)

        hue = clamp(current("hue"), 0, 360)
        saturation = clamp(current("saturation"), 0, 100)
        lightness = clamp(current("lightness"), 0, 100)
        return f"hsl({int(hue + 0.5)}, {int(saturation + 0.5)}%, {int(lightness + 0.5)}%)"

    # === Persistence ===

    def serialize_current_plugin_settings(self) -> PluginSettings:
        return PluginSettings(
            params=self.registry.serialize_values(),
            functions=self.modulator.speed_levels(),
        )

    def persist_current_plugin_settings(self, immediate: bool = False) -> None:
        pid = self.plugin_id
        if not pid:
            return
        self.store.update(pid, self.serialize_current_plugin_settings(), immediate=immediate)

    def apply_persisted_plugin_settings(self, pid: str) -> bool:
        saved = self.store.get(pid) if pid else None
        if saved is None:
            return False
        applied = self.registry.apply_values(saved.params)
        self.modulator.restore_speed_levels(saved.functions, self.registry.definitions)
        logger.engine(f"Applied {applied} saved value(s) for '{pid}'")
        return True

    def share_payload(self) -> str:
        """Compact URL-safe string for the current plugin and its non-default settings."""
        defaults = {}
        for key in self.registry.keys():
            value = self.registry.default_value(key)
            defaults[key] = value.to_dict() if hasattr(value, "to_dict") else value
        compact = self.serialize_current_plugin_settings().to_compact(defaults)
        return encode_share_payload(self.plugin_id, compact)

    def load_share_payload(self, text, catalog: Mapping) -> bool:
        """
        Restore a shared plugin and its settings. Unknown plugins and
        malformed payloads are ignored; unknown keys are dropped.
        """
        payload = decode_share_payload(text)
        if payload is None:
            return False
        plugin = catalog.get(payload.plugin_id)
        if plugin is None:
            logger.warning(f"Share payload names unknown plugin '{payload.plugin_id}'",
                           component="SHARE")
            return False

        self.set_plugin(plugin)
        self.registry.reset_to_defaults()
        for key in self.modulator.speed_levels():
            self.modulator.set_speed_level(key, 0)
        self.registry.apply_values(payload.settings.params)
        self.modulator.restore_speed_levels(payload.settings.functions, self.registry.definitions)

        self.persist_current_plugin_settings()
        self.params_changed.emit()
        logger.info(f"Loaded shared settings for '{payload.plugin_id}'", component="SHARE")
        return True
