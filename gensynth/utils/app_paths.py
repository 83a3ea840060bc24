"""App path helpers (cross-platform).

SSOT for GenSynth app data/state paths.

Environment overrides (useful for portable/dev launches):
- GENSYNTH_DATA_DIR: base dir containing state/
- GENSYNTH_STATE_DIR: explicit state dir (overrides GENSYNTH_DATA_DIR/state)
"""

from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_data_dir

APP_NAME = "GenSynth"


def _env_path(name: str) -> Path | None:
    v = os.environ.get(name)
    if not v:
        return None
    return Path(os.path.expanduser(v)).resolve()


def get_app_data_dir() -> Path:
    """Base app data dir."""
    data_dir = _env_path("GENSYNTH_DATA_DIR")
    if data_dir is not None:
        return data_dir
    return Path(user_data_dir(APP_NAME, appauthor=False, roaming=True)).resolve()


def get_app_state_dir() -> Path:
    """State dir under the app data dir."""
    state_dir = _env_path("GENSYNTH_STATE_DIR")
    if state_dir is None:
        state_dir = get_app_data_dir() / "state"
    state_dir.mkdir(parents=True, exist_ok=True)
    return state_dir


def get_param_settings_path() -> Path:
    return get_app_state_dir() / "param-settings.json"


def get_selected_plugin_path() -> Path:
    return get_app_state_dir() / "selected-plugin.json"
